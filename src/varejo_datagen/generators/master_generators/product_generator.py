"""
Product master data generation with pricing and promotions.
"""

import logging
import random

from varejo_datagen.shared.models import Product
from varejo_datagen.sourcedata import SECTORS, UNITS

from ..utils import product_name, round2, uniform_amount, uniform_between

logger = logging.getLogger(__name__)

MIN_COST = 5.0
MAX_COST = 100.0
MIN_MARGIN = 1.2
MAX_MARGIN = 2.0

# Promotions sell at 70% of the regular price
PROMOTION_FACTOR = 0.7
MAX_PROMOTION_ID = 20


def price_product(cost: float, margin: float) -> tuple[float, float]:
    """
    Derive sale and average prices from cost and margin.

    Args:
        cost: Unit cost, already rounded to cents
        margin: Multiplier applied to the cost

    Returns:
        (sale_price, average_price), both truncated to cents

    Example:
        >>> price_product(10.00, 1.5)
        (15.0, 12.5)
    """
    sale_price = round2(cost * margin)
    average_price = round2((cost + sale_price) / 2)
    return sale_price, average_price


def promotion_price(sale_price: float) -> float:
    """Discounted unit price for a product on promotion."""
    return round2(sale_price * PROMOTION_FACTOR)


class ProductGeneratorMixin:
    """Mixin for product generation."""

    def build_product(self, index: int, rng: random.Random) -> Product:
        """
        Build a product supplied by a random supplier.

        About 30% of products are sold by fractional quantity and about 20%
        carry a promotion (id 1-20, 30% off the sale price).
        """
        name = product_name(rng)
        supplier_id = self._pick_parent("supplier", rng, "product")
        sector_id = rng.choice(SECTORS)
        unit_id = rng.choice(UNITS)

        cost = uniform_amount(rng, MIN_COST, MAX_COST)
        margin = uniform_between(rng, MIN_MARGIN, MAX_MARGIN)
        sale_price, average_price = price_product(cost, margin)

        fractional = rng.randrange(10) < 3

        promotion_id = None
        promo_price = None
        if rng.randrange(10) < 2:
            promotion_id = rng.randint(1, MAX_PROMOTION_ID)
            promo_price = promotion_price(sale_price)

        return Product(
            product_id=index + 1,
            name=name,
            supplier_id=supplier_id,
            sector_id=sector_id,
            unit_id=unit_id,
            fractional=fractional,
            sale_price=sale_price,
            cost=cost,
            average_price=average_price,
            promotion_id=promotion_id,
            promotion_price=promo_price,
        )
