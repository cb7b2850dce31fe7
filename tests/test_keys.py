"""Tests for key generators and seed derivation."""

import random
import uuid

import pytest

from relseed.keys import (
    default_key_generator,
    new_uuid,
    seeded_uuid,
    sequential_int,
    sequential_str,
    string_format,
)
from relseed.resolver import derive_seed, relation_random, type_identity
from tests.domain import Company, Customer


def test_sequential_generators():
    assert [sequential_int(i) for i in (1, 2, 3)] == [1, 2, 3]
    assert [sequential_str(i) for i in (1, 2, 3)] == ["1", "2", "3"]


def test_string_format():
    generator = string_format("CUST-{0}")

    assert generator(1) == "CUST-1"
    assert generator(42) == "CUST-42"


def test_string_format_rejects_none():
    with pytest.raises(TypeError):
        string_format(None)


def test_new_uuid_is_random():
    assert new_uuid(1) != new_uuid(1)


def test_seeded_uuid_is_reproducible():
    first = seeded_uuid(random.Random(5))
    second = seeded_uuid(random.Random(5))

    keys = [first(i) for i in range(1, 4)]

    assert keys == [second(i) for i in range(1, 4)]
    assert all(key.version == 4 for key in keys)


@pytest.mark.parametrize(
    "key_type, expected",
    [(int, 3), (str, "3")],
)
def test_default_key_generator_sequential(key_type, expected):
    assert default_key_generator(key_type)(3) == expected


def test_default_key_generator_uuid():
    assert isinstance(default_key_generator(uuid.UUID)(1), uuid.UUID)
    assert isinstance(default_key_generator(uuid.UUID, random.Random(1))(1), uuid.UUID)


@pytest.mark.parametrize("key_type", [float, bool, bytes, None])
def test_default_key_generator_unsupported(key_type):
    assert default_key_generator(key_type) is None


def test_type_identity_is_qualified():
    assert type_identity(Company) == "tests.domain.Company"


def test_derive_seed_is_stable():
    assert derive_seed(1, "a", "b") == derive_seed(1, "a", "b")
    assert derive_seed(1, "a", "b") != derive_seed(1, "b", "a")
    assert derive_seed(2, "a") - derive_seed(1, "a") == 1


def test_relation_random_per_pair(company_schema):
    relation = company_schema.relations[0]

    first = relation_random(relation, 42)
    second = relation_random(relation, 42)

    assert [first.random() for _ in range(5)] == [second.random() for _ in range(5)]
    assert relation.source_type is Customer
