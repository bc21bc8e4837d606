"""
Pytest configuration and fixtures for varejo data generator tests.

Provides small configurations, a fixed reference time, in-memory sinks and
generators with their parent stages already registered.
"""

from datetime import UTC, datetime

import pytest

from varejo_datagen.config.models import GeneratorConfig
from varejo_datagen.generators.master_generators import MasterDataGenerator
from varejo_datagen.generators.pipeline import DatasetPipeline
from varejo_datagen.services.writers import DualSinkWriter, InMemorySink
from varejo_datagen.shared.validators import ForeignKeyValidator

REFERENCE_TIME = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


def make_config(seed: int = 42, workers: int = 4, **volume) -> GeneratorConfig:
    """Build a small configuration; volume keywords override the defaults below."""
    volumes = {
        "cities": 10,
        "suppliers": 8,
        "products": 20,
        "stores": 3,
        "terminals": 6,
        "registers": 6,
        "customers": 12,
        "invoices": 25,
    }
    volumes.update(volume)
    return GeneratorConfig(
        seed=seed,
        volume=volumes,
        pipeline={"workers": workers, "progress_interval": 5},
    )


@pytest.fixture
def reference_time():
    """Fixed instant generated dates are relative to."""
    return REFERENCE_TIME


@pytest.fixture
def small_config():
    """Small configuration with a fixed seed."""
    return make_config()


@pytest.fixture
def document_sink():
    """In-memory stand-in for the document store."""
    return InMemorySink("document")


@pytest.fixture
def wide_column_sink():
    """In-memory stand-in for the wide-column store."""
    return InMemorySink("wide_column")


@pytest.fixture
def writer(document_sink, wide_column_sink):
    """Dual-sink writer over the two in-memory sinks."""
    return DualSinkWriter(document_sink, wide_column_sink)


@pytest.fixture
def pipeline(small_config, writer, reference_time):
    """Pipeline over in-memory sinks with the small configuration."""
    return DatasetPipeline(small_config, writer, reference_time=reference_time)


@pytest.fixture
def registered_generator(small_config, reference_time):
    """Generator whose parent stages are all registered at the small volumes."""
    fk_validator = ForeignKeyValidator()
    volume = small_config.volume
    fk_validator.register_ids("city", range(1_000_000, 1_000_000 + volume.cities))
    fk_validator.register_ids("address", range(1, volume.addresses + 1))
    fk_validator.register_ids("supplier", range(1, volume.suppliers + 1))
    fk_validator.register_ids("product", range(1, volume.products + 1))
    fk_validator.register_ids("store", range(1, volume.stores + 1))
    fk_validator.register_ids("terminal", range(1, volume.terminals + 1))
    fk_validator.register_ids("register", range(1, volume.registers + 1))
    fk_validator.register_ids("customer", range(1, volume.customers + 1))
    return MasterDataGenerator(small_config, fk_validator, reference_time)
