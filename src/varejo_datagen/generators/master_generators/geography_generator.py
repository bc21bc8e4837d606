"""
Geography master data generation: cities and the shared address pool.
"""

import logging
import random

from varejo_datagen.shared.models import Address, City
from varejo_datagen.sourcedata import REGIONS, STATES, STREET_NAMES, STREET_TYPES

logger = logging.getLogger(__name__)

# IBGE codes of generated cities start here
CITY_CODE_BASE = 1_000_000

COUNTRY = "Brasil"


class GeographyGeneratorMixin:
    """Mixin for city and address generation."""

    def build_city(self, index: int, rng: random.Random) -> City:
        """
        Build the city at a global stage index.

        State and region are drawn independently, so a city's region is
        not guaranteed to contain its state.
        """
        return City(
            city_id=CITY_CODE_BASE + index,
            name=f"Cidade {index + 1}",
            state=rng.choice(STATES),
            region=rng.choice(REGIONS),
            country=COUNTRY,
        )

    def build_address(self, index: int, rng: random.Random) -> Address:
        """Build the address at a global stage index, located in a random city."""
        street = rng.choice(STREET_NAMES)
        number = str(rng.randint(1, 1000))
        postal_code = 10_000_000 + rng.randrange(90_000_000)
        city_id = self._pick_parent("city", rng, "address")

        return Address(
            address_id=index + 1,
            street=street,
            number=number,
            postal_code=postal_code,
            city_id=city_id,
            abroad=False,
            street_type=rng.choice(STREET_TYPES),
        )
