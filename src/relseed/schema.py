"""SchemaBuilder API for declaring entity types and relations."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from relseed.dependency import DependencyGraph
from relseed.exceptions import (
    DuplicateEntityError,
    MissingKeyError,
    MissingWeightFunctionError,
    UnregisteredTargetError,
)
from relseed.introspection import field_types
from relseed.models import (
    DataPredicate,
    EntityDefinition,
    ForeignKeySetter,
    KeyGenerator,
    PairPredicate,
    RelationDefinition,
    SelectorStrategy,
    WeightFunction,
)

logger = logging.getLogger(__name__)

KeySpec = str | tuple[Callable[[Any], Any], Callable[[Any, Any], None]]


def _attribute_getter(name: str) -> Callable[[Any], Any]:
    def getter(instance: Any) -> Any:
        return getattr(instance, name)

    return getter


def _attribute_setter(name: str) -> Callable[[Any, Any], None]:
    def setter(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    return setter


class RelationBuilder:
    """Chainable configuration for one relation."""

    def __init__(self, source_type: type, target_type: type, fk: str | ForeignKeySetter):
        self.source_type = source_type
        self.target_type = target_type
        if isinstance(fk, str):
            self._fk_field: str | None = fk
            self._set_fk = _attribute_setter(fk)
        elif callable(fk):
            self._fk_field = None
            self._set_fk = fk
        else:
            raise TypeError(
                f"Relation {source_type.__name__} -> {target_type.__name__}: fk must "
                f"be an attribute name or a callable (source, key) -> None"
            )
        self._required = True
        self._unique = False
        self._strategy = SelectorStrategy.RANDOM
        self._predicate: PairPredicate | None = None
        self._predicate_with_data: DataPredicate | None = None
        self._weight: WeightFunction | None = None

    def where(self, predicate: PairPredicate) -> "RelationBuilder":
        """
        Restrict eligible (source, target) pairs.

        Replaces any predicate set earlier on this relation.
        """
        if predicate is None:
            raise TypeError("predicate must not be None")
        self._predicate = predicate
        self._predicate_with_data = None
        return self

    def where_with_data(self, predicate: DataPredicate) -> "RelationBuilder":
        """
        Restrict eligible pairs with access to everything generated so far.

        The third argument is the GeneratedData store; use data.get(T) to look
        up entities earlier in the generation order (e.g. a grandparent).
        """
        if predicate is None:
            raise TypeError("predicate must not be None")
        self._predicate_with_data = predicate
        self._predicate = None
        return self

    def where_target(self, predicate: Callable[[Any], bool]) -> "RelationBuilder":
        """Restrict eligible targets regardless of the source."""
        if predicate is None:
            raise TypeError("predicate must not be None")
        return self.where(lambda _source, target: predicate(target))

    def optional(self) -> "RelationBuilder":
        """Set the FK to None instead of failing when no target is eligible."""
        self._required = False
        return self

    def unique(self) -> "RelationBuilder":
        """Bind each target to at most one source (one-to-one)."""
        self._unique = True
        return self

    def with_strategy(self, strategy: SelectorStrategy) -> "RelationBuilder":
        self._strategy = SelectorStrategy(strategy)
        return self

    def weighted(self, weight: WeightFunction) -> "RelationBuilder":
        """Pick targets proportionally to weight(target)."""
        if weight is None:
            raise TypeError("weight must not be None")
        self._strategy = SelectorStrategy.WEIGHTED
        self._weight = weight
        return self

    def build(self) -> RelationDefinition:
        return RelationDefinition(
            source_type=self.source_type,
            target_type=self.target_type,
            set_foreign_key=self._set_fk,
            fk_field=self._fk_field,
            required=self._required,
            unique=self._unique,
            strategy=self._strategy,
            predicate=self._predicate,
            predicate_with_data=self._predicate_with_data,
            weight=self._weight,
        )


class EntityBuilder:
    """Key, synthesis rules and relations for one entity type."""

    def __init__(
        self,
        entity_type: type,
        key: KeySpec | None,
        key_type: Any,
        key_generator: KeyGenerator | None,
        rules: Mapping[str, Any] | None,
        synthesizer: str,
    ):
        self.entity_type = entity_type
        self._key = key
        self._key_type = key_type
        self._key_generator = key_generator
        self._rules = dict(rules or {})
        self._synthesizer = synthesizer
        self._relations: list[RelationBuilder] = []

    def relation(self, target_type: type, fk: str | ForeignKeySetter) -> RelationBuilder:
        """
        Declare a foreign key from this entity to target_type's key.

        Args:
            target_type: Referenced entity class (may be this class)
            fk: FK attribute name, or mutator (source, key) -> None

        Returns:
            RelationBuilder for chaining (.where, .optional, .unique, ...)
        """
        relation = RelationBuilder(self.entity_type, target_type, fk)
        self._relations.append(relation)
        return relation

    def key_generator(
        self,
        generator: Callable[[int], Any],
        conversion: Callable[[Any], Any] | None = None,
    ) -> "EntityBuilder":
        """
        Produce keys from the 1-based sequential index.

        Args:
            generator: index -> raw key
            conversion: Optional raw -> key conversion (strongly-typed ids)
        """
        if generator is None:
            raise TypeError("generator must not be None")
        if conversion is None:
            self._key_generator = generator
        else:
            self._key_generator = lambda index: conversion(generator(index))
        return self

    def rules(self, **rules: Any) -> "EntityBuilder":
        """Add field rules for the value synthesizer."""
        self._rules.update(rules)
        return self

    def build(self) -> EntityDefinition:
        name = self.entity_type.__name__
        key_field = None
        key_type = self._key_type

        if isinstance(self._key, str):
            key_field = self._key
            fields = field_types(self.entity_type)
            if key_field not in fields and not hasattr(self.entity_type, key_field):
                raise MissingKeyError(name, f"key attribute '{key_field}' does not exist")
            if key_type is None:
                key_type = fields.get(key_field)
            get_key = _attribute_getter(key_field)
            set_key = _attribute_setter(key_field)
        elif isinstance(self._key, tuple) and len(self._key) == 2:
            get_key, set_key = self._key
            if not callable(get_key) or not callable(set_key):
                raise MissingKeyError(name, "key accessor and mutator must be callable")
        else:
            raise MissingKeyError(name)

        return EntityDefinition(
            entity_type=self.entity_type,
            get_key=get_key,
            set_key=set_key,
            key_field=key_field,
            key_type=key_type,
            key_generator=self._key_generator,
            rules=dict(self._rules),
            synthesizer=self._synthesizer,
            relations=tuple(r.build() for r in self._relations),
        )


@dataclass(frozen=True)
class Schema:
    """
    Immutable build result.

    Attributes:
        entities: Entity definitions in registration order
        relations: All relations across all entities
        generation_order: Types in dependency order
    """

    entities: tuple[EntityDefinition, ...]
    relations: tuple[RelationDefinition, ...]
    generation_order: tuple[type, ...]

    def get_entity(self, entity_type: type) -> EntityDefinition:
        for definition in self.entities:
            if definition.entity_type is entity_type:
                return definition
        raise KeyError(f"Entity type '{entity_type.__name__}' is not in the schema")

    def get_entity_by_name(self, name: str) -> EntityDefinition:
        for definition in self.entities:
            if definition.name == name:
                return definition
        raise KeyError(f"Entity type '{name}' is not in the schema")

    def relations_for(self, entity_type: type) -> list[RelationDefinition]:
        """Relations whose source is entity_type, in declaration order."""
        return [r for r in self.relations if r.source_type is entity_type]


class SchemaBuilder:
    """
    Declarative API for building a schema.

    Example:
        >>> builder = SchemaBuilder()
        >>> builder.entity(Customer, key="id")
        >>> orders = builder.entity(Order, key="id")
        >>> orders.relation(Customer, fk="customer_id").where(
        ...     lambda order, customer: order.region == customer.region
        ... )
        >>> schema = builder.build()
    """

    def __init__(self):
        self._entities: dict[type, EntityBuilder] = {}

    def entity(
        self,
        entity_type: type,
        key: KeySpec | None = "id",
        key_type: Any = None,
        key_generator: KeyGenerator | None = None,
        rules: Mapping[str, Any] | None = None,
        synthesizer: str = "faker",
    ) -> EntityBuilder:
        """
        Register an entity type.

        Args:
            entity_type: Entity class
            key: Key attribute name, or (getter, setter) pair
            key_type: Key shape; inferred from the annotation of a named key
            key_generator: Custom key generator, 1-based index -> key
            rules: Field rules for the value synthesizer
            synthesizer: Registered synthesizer name

        Returns:
            EntityBuilder for declaring relations

        Raises:
            DuplicateEntityError: If entity_type is already registered
        """
        if entity_type in self._entities:
            raise DuplicateEntityError(entity_type.__name__)

        builder = EntityBuilder(
            entity_type, key, key_type, key_generator, rules, synthesizer
        )
        self._entities[entity_type] = builder
        return builder

    def build(self) -> Schema:
        """
        Validate definitions and compute the generation order.

        Raises:
            MissingKeyError: If an entity has no usable key
            UnregisteredTargetError: If a relation targets an unregistered type
            MissingWeightFunctionError: If a WEIGHTED relation has no weights
            CircularDependencyError: If cross-type relations form a cycle
        """
        entities = tuple(b.build() for b in self._entities.values())
        relations = tuple(r for e in entities for r in e.relations)

        for relation in relations:
            if relation.target_type not in self._entities:
                raise UnregisteredTargetError(
                    relation.source_type.__name__, relation.target_type.__name__
                )
            if relation.strategy is SelectorStrategy.WEIGHTED and relation.weight is None:
                raise MissingWeightFunctionError(relation.name)

        graph = DependencyGraph()
        for definition in entities:
            graph.add_entity(definition.entity_type)
        for relation in relations:
            graph.add_relation(relation.source_type, relation.target_type)

        order = tuple(graph.topological_sort())
        logger.debug(f"Generation order: {' -> '.join(t.__name__ for t in order)}")
        return Schema(entities=entities, relations=relations, generation_order=order)
