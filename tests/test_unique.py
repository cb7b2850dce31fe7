"""Tests for unique (one-to-one) relations."""

import pytest

from relseed import (
    DataGenerator,
    GenerationConfig,
    IdealCountShortfallError,
    NoEligibleTargetError,
    SchemaBuilder,
    SelectorStrategy,
    UniqueTargetPoolError,
)
from tests.domain import Agent, Mission, Order, Warehouse


def _unique_schema(optional=False, predicate=None, order_rules=None, strategy=None):
    builder = SchemaBuilder()
    builder.entity(
        Warehouse, key="id", rules={"region": lambda fake, i: "EU" if i <= 3 else "US"}
    )
    relation = (
        builder.entity(Order, key="id", rules=order_rules)
        .relation(Warehouse, fk="warehouse_id")
        .unique()
    )
    if predicate is not None:
        relation.where(predicate)
    if strategy is SelectorStrategy.WEIGHTED:
        relation.weighted(lambda warehouse: warehouse.id)
    elif strategy is not None:
        relation.with_strategy(strategy)
    if optional:
        relation.optional()
    return builder.build()


def _same_region(order, warehouse):
    return order.region == warehouse.region


# ============================================================================
# Without predicate
# ============================================================================


def test_unique_binds_distinct_targets(generator):
    """5 sources over 5 targets use every target exactly once."""
    config = GenerationConfig().count(Warehouse, 5).count(Order, 5).seed(13)

    orders = generator.generate(_unique_schema(), config).get(Order)

    assert sorted(o.warehouse_id for o in orders) == [1, 2, 3, 4, 5]


def test_unique_more_sources_than_targets_raises(generator):
    config = GenerationConfig().count(Warehouse, 5).count(Order, 6)

    with pytest.raises(UniqueTargetPoolError) as exc_info:
        generator.generate(_unique_schema(), config)

    assert "there are 6 source(s) and only 5 eligible target(s)" in str(exc_info.value)


def test_unique_ideal_count_discards_extra_sources(generator):
    config = GenerationConfig().count(Warehouse, 5).ideal_count(Order, 6, min=5).seed(4)

    orders = generator.generate(_unique_schema(), config).get(Order)

    assert len(orders) == 5
    assert len({o.warehouse_id for o in orders}) == 5


def test_unique_ideal_count_below_min_raises(generator):
    config = GenerationConfig().count(Warehouse, 5).ideal_count(Order, 6, min=6)

    with pytest.raises(IdealCountShortfallError) as exc_info:
        generator.generate(_unique_schema(), config)

    assert exc_info.value.survived == 5
    assert exc_info.value.discarded == 1


def test_unique_optional_nulls_extra_sources(generator):
    config = GenerationConfig().count(Warehouse, 3).count(Order, 5).seed(2)

    orders = generator.generate(_unique_schema(optional=True), config).get(Order)

    bound = [o.warehouse_id for o in orders if o.warehouse_id is not None]
    assert sorted(bound) == [1, 2, 3]
    assert sum(o.warehouse_id is None for o in orders) == 2


@pytest.mark.parametrize(
    "strategy",
    [SelectorStrategy.ROUND_ROBIN, SelectorStrategy.SPREAD_EVENLY, SelectorStrategy.WEIGHTED],
)
def test_unique_applies_to_every_strategy(generator, strategy):
    config = GenerationConfig().count(Warehouse, 8).count(Order, 8).seed(5)

    orders = generator.generate(_unique_schema(strategy=strategy), config).get(Order)

    assert len({o.warehouse_id for o in orders}) == 8


def test_unique_reproducible_with_seed():
    config = GenerationConfig().count(Warehouse, 10).count(Order, 10).seed(77)
    schema = _unique_schema()

    first = DataGenerator().generate(schema, config).get(Order)
    second = DataGenerator().generate(schema, config).get(Order)

    assert [o.warehouse_id for o in first] == [o.warehouse_id for o in second]


# ============================================================================
# With predicate
# ============================================================================


def test_unique_with_predicate_binds_distinct_eligible(generator):
    schema = _unique_schema(predicate=_same_region)
    config = GenerationConfig().count(Warehouse, 5).count(Order, 3).seed(1)

    orders = generator.generate(schema, config).get(Order)

    assert sorted(o.warehouse_id for o in orders) == [1, 2, 3]


def test_unique_with_predicate_pool_exhausted_raises(generator):
    """Fourth EU order finds every EU warehouse taken."""
    schema = _unique_schema(predicate=_same_region)
    config = GenerationConfig().count(Warehouse, 5).count(Order, 4)

    with pytest.raises(UniqueTargetPoolError, match="source at index 3"):
        generator.generate(schema, config)


def test_unique_with_predicate_pool_exhausted_ideal(generator):
    schema = _unique_schema(predicate=_same_region)
    config = GenerationConfig().count(Warehouse, 5).ideal_count(Order, 4, min=3).seed(7)

    orders = generator.generate(schema, config).get(Order)

    assert len(orders) == 3
    assert sorted(o.warehouse_id for o in orders) == [1, 2, 3]


def test_unique_with_predicate_no_eligible_is_not_pool_error(generator):
    """A source nothing matches gets the plain no-target error."""
    schema = _unique_schema(predicate=_same_region, order_rules={"region": "APAC"})
    config = GenerationConfig().count(Warehouse, 5).count(Order, 1)

    with pytest.raises(NoEligibleTargetError):
        generator.generate(schema, config)


def test_unique_with_predicate_mixed_regions(generator):
    schema = _unique_schema(
        predicate=_same_region,
        order_rules={"region": lambda fake, i: "US" if i <= 2 else "EU"},
    )
    config = GenerationConfig().count(Warehouse, 5).count(Order, 5).seed(3)

    orders = generator.generate(schema, config).get(Order)

    regions = {i: "EU" if i <= 3 else "US" for i in range(1, 6)}
    assert sorted(o.warehouse_id for o in orders) == [1, 2, 3, 4, 5]
    assert all(regions[o.warehouse_id] == o.region for o in orders)


# ============================================================================
# One agent per mission
# ============================================================================


def _mission_schema():
    builder = SchemaBuilder()
    builder.entity(Mission, key="id", rules={"level": 2})
    builder.entity(Agent, key="id", rules={"clearance": 3}).relation(
        Mission, fk="mission_id"
    ).where(lambda agent, mission: mission.level <= agent.clearance).unique()
    return builder.build()


def test_unique_clearance_exact_capacity(generator):
    config = GenerationConfig().count(Mission, 5).count(Agent, 5).seed(31)

    agents = generator.generate(_mission_schema(), config).get(Agent)

    assert sorted(a.mission_id for a in agents) == [1, 2, 3, 4, 5]


def test_unique_clearance_sixth_agent_required_fails(generator):
    config = GenerationConfig().count(Mission, 5).count(Agent, 6).seed(31)

    with pytest.raises(UniqueTargetPoolError):
        generator.generate(_mission_schema(), config)


def test_unique_clearance_sixth_agent_discarded(generator):
    config = GenerationConfig().count(Mission, 5).ideal_count(Agent, 6, min=5).seed(31)

    agents = generator.generate(_mission_schema(), config).get(Agent)

    assert len(agents) == 5
    assert len({a.mission_id for a in agents}) == 5
