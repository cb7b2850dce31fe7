"""Generated data store."""

from collections.abc import Iterable
from typing import Any

from relseed.exceptions import EntityNotGeneratedError


class GeneratedData:
    """
    Container for generated entities, indexed by entity type.

    Types are added one at a time in generation order. A finalized list is
    kept as a tuple and handed out as a fresh list, so callers can't grow or
    shrink it; the instances themselves stay mutable for post-processing.

    Allows accessing types by class or by class name:
        data.get(Customer)           # List of Customer instances
        data.get_by_name("Customer")  # Same list
        data.Customer                # Same list
    """

    def __init__(self):
        self._by_type: dict[type, tuple[Any, ...]] = {}

    def set(self, entity_type: type, instances: Iterable[Any]) -> None:
        """
        Finalize the instances of one entity type.

        Args:
            entity_type: Entity class
            instances: Surviving instances, in generation order

        Raises:
            ValueError: If the type was already finalized
        """
        if entity_type in self._by_type:
            raise ValueError(f"Entity type '{entity_type.__name__}' is already finalized")
        self._by_type[entity_type] = tuple(instances)

    def get(self, entity_type: type) -> list[Any]:
        """
        Get all instances of entity_type.

        Raises:
            EntityNotGeneratedError: If the type was not generated or prefilled
        """
        if entity_type in self._by_type:
            return list(self._by_type[entity_type])
        raise EntityNotGeneratedError(entity_type.__name__)

    def get_by_name(self, name: str) -> list[Any]:
        """
        Get all instances of the entity type with this class name.

        Raises:
            EntityNotGeneratedError: If no generated type has this name
        """
        for entity_type, instances in self._by_type.items():
            if entity_type.__name__ == name:
                return list(instances)
        raise EntityNotGeneratedError(name)

    def types(self) -> list[type]:
        """Entity types present, in generation order."""
        return list(self._by_type)

    def counts(self) -> dict[str, int]:
        """Instance count per entity type name."""
        return {t.__name__: len(items) for t, items in self._by_type.items()}

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._by_type

    def __getitem__(self, entity_type: type) -> list[Any]:
        return self.get(entity_type)

    def __len__(self) -> int:
        return len(self._by_type)

    def __getattr__(self, name: str) -> list[Any]:
        """
        Allow attribute access to entity types by class name.

        Raises:
            AttributeError: If no generated type has this name
        """
        if name.startswith("_"):
            raise AttributeError(f"No attribute '{name}'")
        try:
            return self.get_by_name(name)
        except EntityNotGeneratedError:
            raise AttributeError(f"No entity type '{name}' in generated data") from None

    def __repr__(self) -> str:
        return f"GeneratedData({self.counts()})"
