"""Data models and type definitions."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from relseed.exceptions import InvalidCountError

ForeignKeySetter = Callable[[Any, Any], None]
PairPredicate = Callable[[Any, Any], bool]
DataPredicate = Callable[[Any, Any, Any], bool]
WeightFunction = Callable[[Any], float]
KeyGenerator = Callable[[int], Any]


class SelectorStrategy(Enum):
    """How a relation picks a target among the eligible ones."""

    RANDOM = "random"
    ROUND_ROBIN = "round_robin"
    SPREAD_EVENLY = "spread_evenly"
    WEIGHTED = "weighted"


@dataclass(frozen=True)
class CountSpec:
    """
    How many instances to produce for one entity type.

    Attributes:
        count: Number of instances to synthesize
        flexible: True for ideal counts (discard unresolvable instances)
        min: Minimum survivors; equals count for exact counts
    """

    count: int
    flexible: bool = False
    min: int = 0

    @classmethod
    def exact(cls, count: int) -> "CountSpec":
        """
        Exact count: every instance must resolve its required relations.

        Raises:
            InvalidCountError: If count is negative
        """
        if count < 0:
            raise InvalidCountError(f"Count must be non-negative, got {count}.")
        return cls(count=count, flexible=False, min=count)

    @classmethod
    def ideal(cls, count: int, min: int = 1) -> "CountSpec":
        """
        Ideal count: generate up to count, keep at least min survivors.

        Raises:
            InvalidCountError: If count <= 0, min < 0 or min > count
        """
        if count <= 0:
            raise InvalidCountError(f"Count must be greater than zero, got {count}.")
        if min < 0:
            raise InvalidCountError(f"Min must be non-negative, got {min}.")
        if min > count:
            raise InvalidCountError(
                f"Min ({min}) must be less than or equal to count ({count})."
            )
        return cls(count=count, flexible=True, min=min)


@dataclass(frozen=True)
class RelationDefinition:
    """
    Foreign key from a source entity type to a target entity type.

    Attributes:
        source_type: Class owning the foreign key
        target_type: Class being referenced
        set_foreign_key: Mutator (source, target_key) -> None
        fk_field: FK attribute name when declared by name
        required: Unresolvable relation aborts the run (else FK is set to None)
        unique: Each target is bound to at most one source
        strategy: Target selection strategy
        predicate: Eligibility filter (source, target) -> bool
        predicate_with_data: Eligibility filter (source, target, data) -> bool
        weight: Target weight for the WEIGHTED strategy
    """

    source_type: type
    target_type: type
    set_foreign_key: ForeignKeySetter
    fk_field: str | None = None
    required: bool = True
    unique: bool = False
    strategy: SelectorStrategy = SelectorStrategy.RANDOM
    predicate: PairPredicate | None = None
    predicate_with_data: DataPredicate | None = None
    weight: WeightFunction | None = None

    @property
    def name(self) -> str:
        return f"{self.source_type.__name__} -> {self.target_type.__name__}"

    @property
    def is_self_reference(self) -> bool:
        """Whether source and target are the same entity type."""
        return self.source_type is self.target_type

    @property
    def has_predicate(self) -> bool:
        return self.predicate is not None or self.predicate_with_data is not None


@dataclass(frozen=True)
class EntityDefinition:
    """
    Entity type metadata consumed read-only by the generator.

    Attributes:
        entity_type: Class of the generated instances (the type tag)
        get_key: Accessor instance -> key
        set_key: Mutator (instance, key) -> None
        key_field: Key attribute name when declared by name
        key_type: Key shape used to pick a default key generator
        key_generator: Custom generator, 1-based index -> key
        rules: Field values or callables for the value synthesizer
        synthesizer: Registered synthesizer name
        relations: Relations whose source is this entity type
    """

    entity_type: type
    get_key: Callable[[Any], Any]
    set_key: Callable[[Any, Any], None]
    key_field: str | None = None
    key_type: Any = None
    key_generator: KeyGenerator | None = None
    rules: Mapping[str, Any] = field(default_factory=dict)
    synthesizer: str = "faker"
    relations: tuple[RelationDefinition, ...] = ()

    @property
    def name(self) -> str:
        return self.entity_type.__name__

    @property
    def reserved_fields(self) -> frozenset[str]:
        """
        Fields filled by the generator rather than the value synthesizer.

        Returns:
            Key field plus every FK field declared by name
        """
        names = {r.fk_field for r in self.relations if r.fk_field}
        if self.key_field:
            names.add(self.key_field)
        return frozenset(names)
