"""
Customer master data generation.
"""

import random

from varejo_datagen.shared.models import Customer

from ..utils import percent_flag, person_name


class CustomerGeneratorMixin:
    """Mixin for customer generation."""

    def customer_address_id(self, index: int) -> int:
        """Customers occupy the address block that follows the stores."""
        return self.config.volume.stores + index + 1

    def build_customer(self, index: int, rng: random.Random) -> Customer:
        """Build a customer; about 40% are enrolled in the loyalty program."""
        address_id = self._positional_address(self.customer_address_id(index), "customer")

        return Customer(
            customer_id=index + 1,
            name=person_name(rng),
            loyalty=percent_flag(rng, 40),
            address_id=address_id,
        )
