"""Tests for DependencyGraph ordering and cycle detection."""

import pytest

from relseed.dependency import DependencyGraph
from relseed.exceptions import CircularDependencyError


class A:
    pass


class B:
    pass


class C:
    pass


class D:
    pass


def test_standalone_entities_keep_registration_order():
    """Types without relations are emitted immediately, in registration order."""
    graph = DependencyGraph()
    for entity_type in (A, B, C):
        graph.add_entity(entity_type)

    assert graph.topological_sort() == [A, B, C]


def test_target_precedes_source():
    """A type is generated after every type it references."""
    graph = DependencyGraph()
    for entity_type in (A, B, C):
        graph.add_entity(entity_type)
    # A -> B, B -> C: C first, then B, then A
    graph.add_relation(A, B)
    graph.add_relation(B, C)

    assert graph.topological_sort() == [C, B, A]


def test_diamond_dependencies():
    """Every edge is respected when a type has several dependents."""
    graph = DependencyGraph()
    for entity_type in (A, B, C, D):
        graph.add_entity(entity_type)
    graph.add_relation(B, A)
    graph.add_relation(C, A)
    graph.add_relation(D, B)
    graph.add_relation(D, C)

    order = graph.topological_sort()
    position = {t: i for i, t in enumerate(order)}

    assert position[A] < position[B] < position[D]
    assert position[A] < position[C] < position[D]


def test_self_reference_adds_no_edge():
    """Self-referential relations don't count as dependencies."""
    graph = DependencyGraph()
    graph.add_entity(A)
    graph.add_relation(A, A)

    assert graph.get_dependents(A) == []
    assert graph.find_cycle() is None
    assert graph.topological_sort() == [A]


def test_duplicate_relation_counted_once():
    """Two relations between the same pair add a single edge."""
    graph = DependencyGraph()
    graph.add_relation(A, B)
    graph.add_relation(A, B)

    assert graph.get_dependents(B) == [A]
    assert graph.topological_sort() == [B, A]


def test_two_type_cycle_detected():
    """A cross-type cycle fails with the types involved."""
    graph = DependencyGraph()
    graph.add_relation(A, B)
    graph.add_relation(B, A)

    with pytest.raises(CircularDependencyError) as exc_info:
        graph.topological_sort()

    assert set(exc_info.value.cycle) == {"A", "B"}
    assert "Circular dependency detected" in str(exc_info.value)


def test_cycle_path_is_ordered():
    """The reported path follows the edges from the back-edge target."""
    graph = DependencyGraph()
    for entity_type in (A, B, C, D):
        graph.add_entity(entity_type)
    # Edges run target -> source: A -> C -> B -> A (A references B, etc.)
    graph.add_relation(C, A)
    graph.add_relation(B, C)
    graph.add_relation(A, B)
    graph.add_relation(D, A)

    cycle = graph.find_cycle()

    assert cycle == ["A", "C", "B"]
    assert "D" not in cycle


def test_cycle_message_closes_the_loop():
    """Message repeats the first type at the end."""
    error = CircularDependencyError(["A", "B"])

    assert "A -> B -> A" in str(error)
