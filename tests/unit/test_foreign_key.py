"""
Unit tests for ForeignKeyValidator.
"""

import random

import pytest

from varejo_datagen.shared.validators import ForeignKeyValidator


@pytest.fixture
def validator():
    fk = ForeignKeyValidator()
    fk.register_ids("store", range(1, 51))
    return fk


class TestRegistration:
    """Registering completed stages."""

    def test_registered(self, validator):
        assert validator.is_registered("store")
        assert not validator.is_registered("customer")
        assert validator.get_ids("store") == range(1, 51)

    def test_non_contiguous_rejected(self, validator):
        with pytest.raises(ValueError, match="contiguous"):
            validator.register_ids("city", range(0, 10, 2))

    def test_missing_entity(self, validator):
        with pytest.raises(KeyError, match="customer"):
            validator.get_ids("customer")


class TestLookups:
    """Validation and random selection."""

    def test_validate_fk(self, validator):
        assert validator.validate_fk("store", 1)
        assert validator.validate_fk("store", 50)
        assert not validator.validate_fk("store", 51)
        assert not validator.validate_fk("customer", 1)

    def test_random_id_within_range(self, validator):
        rng = random.Random(3)
        picks = {validator.random_id("store", rng) for _ in range(2000)}
        assert picks <= set(range(1, 51))
        assert len(picks) == 50

    def test_random_id_empty_range(self):
        fk = ForeignKeyValidator()
        fk.register_ids("store", range(1, 1))
        with pytest.raises(KeyError):
            fk.random_id("store", random.Random(0))
