"""
Supplier master data generation.
"""

import random

from varejo_datagen.shared.models import Supplier

from ..utils import company_name, percent_flag


class SupplierGeneratorMixin:
    """Mixin for supplier generation."""

    def build_supplier(self, index: int, rng: random.Random) -> Supplier:
        """Build a supplier; half of them invoice on account with a 1-30 day term."""
        name = company_name(rng)
        on_account = percent_flag(rng, 50)
        grace_days = rng.randint(1, 30) if on_account else 0

        return Supplier(
            supplier_id=index + 1,
            name=name,
            invoices_on_account=on_account,
            grace_days=grace_days,
        )
