"""Pytest configuration and shared fixtures."""

import pytest

from relseed import DataGenerator, SchemaBuilder, clear_synthesizers
from tests.domain import Company, Customer, Order, Warehouse


@pytest.fixture
def generator() -> DataGenerator:
    """Generator with default settings."""
    return DataGenerator()


@pytest.fixture
def company_schema():
    """Customer -> Company, nothing else."""
    builder = SchemaBuilder()
    builder.entity(Company, key="id")
    builder.entity(Customer, key="id").relation(Company, fk="company_id")
    return builder.build()


@pytest.fixture
def region_schema():
    """Orders ship from a warehouse of their own region."""
    builder = SchemaBuilder()
    builder.entity(Warehouse, key="id")
    builder.entity(Order, key="id").relation(Warehouse, fk="warehouse_id").where(
        lambda order, warehouse: order.region == warehouse.region
    )
    return builder.build()


@pytest.fixture(autouse=True)
def _reset_synthesizers():
    """Custom synthesizers never leak between tests."""
    yield
    clear_synthesizers()
