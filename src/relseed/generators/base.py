"""Base synthesizer interface."""

from abc import ABC, abstractmethod
from typing import Any

from relseed.models import EntityDefinition


class BaseSynthesizer(ABC):
    """
    Base class for value synthesizers.

    A synthesizer fills the non-key, non-FK fields of an entity type. The
    generator assigns keys and foreign keys afterwards, so values it leaves in
    those fields are placeholders.

    Subclass this and register it to replace Faker for some entity types.

    Example:
        >>> class SKUSynthesizer(BaseSynthesizer):
        ...     def synthesize(self, definition, count, seed=None):
        ...         return [Product(sku=f"SKU-{i:06d}") for i in range(1, count + 1)]
        >>>
        >>> register_synthesizer("sku", SKUSynthesizer)
        >>> builder.entity(Product, key="id", synthesizer="sku")
    """

    @abstractmethod
    def synthesize(
        self, definition: EntityDefinition, count: int, seed: int | None = None
    ) -> list[Any]:
        """
        Create count populated instances of definition.entity_type.

        Args:
            definition: Entity definition (type, rules, reserved fields)
            count: Number of instances to create
            seed: Seed for reproducible values, None for random

        Returns:
            List of exactly count instances
        """
        pass
