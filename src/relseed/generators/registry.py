"""Synthesizer registry for custom synthesizer plugins."""

from relseed.exceptions import UnknownSynthesizerError
from relseed.generators.base import BaseSynthesizer
from relseed.generators.faker_generator import FakerSynthesizer


class SynthesizerRegistry:
    """Registry of synthesizer classes by name."""

    BUILTIN_SYNTHESIZERS: dict[str, type[BaseSynthesizer]] = {
        "faker": FakerSynthesizer,
    }

    def __init__(self):
        self._synthesizers: dict[str, type] = {}

    def register(self, name: str, synthesizer_class: type) -> None:
        """
        Register a custom synthesizer.

        Args:
            name: Synthesizer name (used in builder.entity(..., synthesizer=name))
            synthesizer_class: Class with a synthesize method

        Raises:
            ValueError: If the class doesn't have a synthesize method
        """
        if not hasattr(synthesizer_class, "synthesize"):
            raise ValueError(
                f"Synthesizer class must have 'synthesize' method. "
                f"Class {synthesizer_class.__name__} is missing it."
            )
        self._synthesizers[name] = synthesizer_class

    def get(self, name: str) -> type | None:
        return self._synthesizers.get(name) or self.BUILTIN_SYNTHESIZERS.get(name)

    def list_synthesizers(self) -> list[str]:
        return [*self.BUILTIN_SYNTHESIZERS, *self._synthesizers]

    def clear(self) -> None:
        """Clear all custom synthesizers (for testing)."""
        self._synthesizers.clear()


# Global registry instance
_registry = SynthesizerRegistry()


def register_synthesizer(name: str, synthesizer_class: type) -> None:
    """
    Register a custom synthesizer (user-facing API).

    Example:
        >>> from relseed import BaseSynthesizer, register_synthesizer
        >>>
        >>> class FixedSynthesizer(BaseSynthesizer):
        ...     def synthesize(self, definition, count, seed=None):
        ...         return [definition.entity_type() for _ in range(count)]
        >>>
        >>> register_synthesizer("fixed", FixedSynthesizer)
    """
    _registry.register(name, synthesizer_class)


def get_synthesizer(name: str) -> type:
    """
    Get a registered synthesizer class.

    Raises:
        UnknownSynthesizerError: If name is not registered
    """
    synthesizer_class = _registry.get(name)
    if synthesizer_class is None:
        raise UnknownSynthesizerError(name, _registry.list_synthesizers())
    return synthesizer_class


def list_synthesizers() -> list[str]:
    return _registry.list_synthesizers()


def clear_synthesizers() -> None:
    """Clear all custom synthesizers (for testing)."""
    _registry.clear()
