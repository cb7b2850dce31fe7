"""Tests for SchemaBuilder validation and descriptors."""

import dataclasses
import uuid
from dataclasses import dataclass
from typing import Optional

import pytest

from relseed import (
    CircularDependencyError,
    DuplicateEntityError,
    MissingKeyError,
    MissingWeightFunctionError,
    SchemaBuilder,
    SelectorStrategy,
    UnregisteredTargetError,
)
from tests.domain import Company, Customer, Employee, Order, Person, Seat, Warehouse


@dataclass
class Team:
    id: int
    captain_id: Optional[int] = None


@dataclass
class Player:
    id: int
    team_id: Optional[int] = None


def test_build_simple_schema(company_schema):
    """Referenced type comes first in the generation order."""
    assert company_schema.generation_order == (Company, Customer)
    assert len(company_schema.entities) == 2
    assert len(company_schema.relations) == 1


def test_duplicate_entity_raises():
    """Registering the same type twice fails immediately."""
    builder = SchemaBuilder()
    builder.entity(Company, key="id")

    with pytest.raises(DuplicateEntityError, match="Company"):
        builder.entity(Company, key="id")


def test_unregistered_target_raises():
    """Relation to a type that isn't an entity fails at build time."""
    builder = SchemaBuilder()
    builder.entity(Customer, key="id").relation(Company, fk="company_id")

    with pytest.raises(UnregisteredTargetError) as exc_info:
        builder.build()

    assert "Customer -> Company" in str(exc_info.value)


def test_cross_type_cycle_raises():
    """Team -> Player -> Team is rejected with both names."""
    builder = SchemaBuilder()
    builder.entity(Team, key="id").relation(Player, fk="captain_id")
    builder.entity(Player, key="id").relation(Team, fk="team_id")

    with pytest.raises(CircularDependencyError) as exc_info:
        builder.build()

    assert set(exc_info.value.cycle) == {"Team", "Player"}


def test_self_reference_single_element_order():
    """A type whose only relation is to itself is a lone node."""
    builder = SchemaBuilder()
    builder.entity(Employee, key="id").relation(Employee, fk="manager_id").optional()

    schema = builder.build()

    assert schema.generation_order == (Employee,)
    assert schema.relations[0].is_self_reference


def test_missing_key_attribute_raises():
    """Naming a key attribute that doesn't exist fails at build time."""
    builder = SchemaBuilder()
    builder.entity(Company, key="pk")

    with pytest.raises(MissingKeyError, match="pk"):
        builder.build()


def test_no_key_raises():
    builder = SchemaBuilder()
    builder.entity(Company, key=None)

    with pytest.raises(MissingKeyError):
        builder.build()


def test_weighted_strategy_without_weights_raises():
    builder = SchemaBuilder()
    builder.entity(Company, key="id")
    builder.entity(Customer, key="id").relation(Company, fk="company_id").with_strategy(
        SelectorStrategy.WEIGHTED
    )

    with pytest.raises(MissingWeightFunctionError):
        builder.build()


def test_key_type_inferred_from_annotation():
    builder = SchemaBuilder()
    builder.entity(Person, key="id")
    builder.entity(Seat, key="code")
    builder.entity(Company, key="id")

    schema = builder.build()

    assert schema.get_entity(Person).key_type is uuid.UUID
    assert schema.get_entity(Seat).key_type is str
    assert schema.get_entity(Company).key_type is int


def test_key_accessor_pair():
    """Key can be given as a (getter, setter) pair."""
    builder = SchemaBuilder()
    builder.entity(
        Company,
        key=(lambda c: c.id, lambda c, value: setattr(c, "id", value)),
        key_type=int,
    )

    definition = builder.build().get_entity(Company)
    company = Company(id=0, name="Acme")
    definition.set_key(company, 7)

    assert definition.get_key(company) == 7
    assert definition.key_field is None


def test_relation_defaults():
    """Relations are required, non-unique, random by default."""
    builder = SchemaBuilder()
    builder.entity(Company, key="id")
    builder.entity(Customer, key="id").relation(Company, fk="company_id")

    relation = builder.build().relations[0]

    assert relation.required is True
    assert relation.unique is False
    assert relation.strategy is SelectorStrategy.RANDOM
    assert relation.has_predicate is False
    assert relation.name == "Customer -> Company"


def test_where_variants_are_mutually_exclusive():
    """The last where* call wins."""
    builder = SchemaBuilder()
    builder.entity(Warehouse, key="id")
    (
        builder.entity(Order, key="id")
        .relation(Warehouse, fk="warehouse_id")
        .where(lambda o, w: True)
        .where_with_data(lambda o, w, data: True)
    )

    relation = builder.build().relations[0]

    assert relation.predicate is None
    assert relation.predicate_with_data is not None


def test_where_target_wraps_target_only_predicate():
    builder = SchemaBuilder()
    builder.entity(Company, key="id")
    builder.entity(Customer, key="id").relation(Company, fk="company_id").where_target(
        lambda company: company.active
    )

    relation = builder.build().relations[0]

    assert relation.predicate(None, Company(id=1, name="a", active=True)) is True
    assert relation.predicate(None, Company(id=2, name="b", active=False)) is False


def test_relation_fk_mutator_callable():
    """FK can be a mutator instead of an attribute name."""
    builder = SchemaBuilder()
    builder.entity(Company, key="id")
    builder.entity(Customer, key="id").relation(
        Company, fk=lambda customer, key: setattr(customer, "company_id", key)
    )

    relation = builder.build().relations[0]
    customer = Customer(id=1, name="x", email="x@example.com")
    relation.set_foreign_key(customer, 5)

    assert customer.company_id == 5
    assert relation.fk_field is None


def test_reserved_fields_cover_key_and_fks(company_schema):
    definition = company_schema.get_entity(Customer)

    assert definition.reserved_fields == frozenset({"id", "company_id"})


def test_descriptors_are_immutable(company_schema):
    relation = company_schema.relations[0]

    with pytest.raises(dataclasses.FrozenInstanceError):
        relation.required = False


def test_relations_for(company_schema):
    assert company_schema.relations_for(Company) == []
    assert [r.target_type for r in company_schema.relations_for(Customer)] == [Company]
