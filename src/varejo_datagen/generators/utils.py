"""
Utility functions for synthetic data generation.

This module provides the random fact synthesizer (names, monetary amounts,
dates and flags drawn from the vocabulary in varejo_datagen.sourcedata) and
progress reporting helpers. Every synthesizer function takes the random
number generator explicitly so callers control determinism.
"""

import calendar
import logging
import random
from datetime import datetime, timedelta
from decimal import ROUND_DOWN, ROUND_HALF_EVEN, Decimal

from varejo_datagen.sourcedata import (
    FIRST_NAMES,
    LAST_NAMES,
    PRODUCT_BRANDS,
    PRODUCT_NAMES,
    PRODUCT_VARIANTS,
)

logger = logging.getLogger(__name__)


_CENT = Decimal("0.01")
_FLOAT_NOISE = Decimal("1e-9")


def round2(value: float) -> float:
    """
    Round a monetary amount to cents by truncating toward zero.

    Binary float noise below 1e-9 is rounded away first, so an amount that
    already sits on a cent (4.35, 0.29) keeps its value.
    """
    amount = Decimal(repr(value)).quantize(_FLOAT_NOISE, rounding=ROUND_HALF_EVEN)
    return float(amount.quantize(_CENT, rounding=ROUND_DOWN))


def record_rng(seed: int, entity: str, index: int) -> random.Random:
    """
    Random generator dedicated to one record.

    Seeding per (run seed, entity, index) makes every record independent of
    which worker produced it and in what order.
    """
    return random.Random(f"{seed}:{entity}:{index}")


def percent_flag(rng: random.Random, percent: int) -> bool:
    """True with the given integer percentage probability."""
    return rng.randrange(100) < percent


def uniform_amount(rng: random.Random, low: float, high: float) -> float:
    """Uniform draw in [low, high) rounded to cents."""
    return round2(low + rng.random() * (high - low))


def uniform_between(rng: random.Random, low: float, high: float) -> float:
    """Uniform draw in [low, high) without rounding."""
    return low + rng.random() * (high - low)


def person_name(rng: random.Random) -> str:
    """First and last name pair."""
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"


def company_name(rng: random.Random) -> str:
    """Supplier company name."""
    return f"{person_name(rng)} Ltda"


def product_name(rng: random.Random) -> str:
    """Brand, product and variant, e.g. 'Campo Bom Arroz Tipo 1'."""
    brand = rng.choice(PRODUCT_BRANDS)
    product = rng.choice(PRODUCT_NAMES)
    variant = rng.choice(PRODUCT_VARIANTS)
    return f"{brand} {product} {variant}"


def shift_date(moment: datetime, years: int = 0, months: int = 0, days: int = 0) -> datetime:
    """
    Calendar arithmetic on a datetime.

    Months are applied after years and the day of month is clamped to the
    target month's length; days are applied last.
    """
    total_months = moment.year * 12 + (moment.month - 1) + years * 12 + months
    year, month_index = divmod(total_months, 12)
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day) + timedelta(days=days)


def past_datetime(
    rng: random.Random,
    reference: datetime,
    years_back: int = 0,
    max_months_back: int = 12,
    max_days_back: int = 30,
) -> datetime:
    """Datetime a random number of months and days before the reference."""
    return shift_date(
        reference,
        years=-years_back,
        months=-rng.randrange(max_months_back),
        days=-rng.randrange(max_days_back),
    )


class ProgressReporter:
    """Utility for reporting milestones during long-running stages."""

    def __init__(self, total_items: int, description: str = "Processing", interval: int = 1000):
        """
        Initialize progress reporter.

        Args:
            total_items: Total number of items to process
            description: Description of the operation
            interval: Emit a milestone every `interval` processed items
        """
        self.total_items = total_items
        self.description = description
        self.interval = interval
        self.processed_items = 0

    def update(self, increment: int = 1) -> bool:
        """
        Update progress and report when a milestone is crossed.

        Args:
            increment: Number of items processed in this update

        Returns:
            True if a milestone was reported
        """
        before = self.processed_items // self.interval
        self.processed_items += increment
        after = self.processed_items // self.interval

        if after > before and self.processed_items < self.total_items:
            logger.info(
                f"{self.description}: {self.processed_items:,}/{self.total_items:,}"
            )
            return True
        return False

    @property
    def fraction(self) -> float:
        """Processed share of the total (1.0 for an empty workload)."""
        if self.total_items <= 0:
            return 1.0
        return min(1.0, self.processed_items / self.total_items)

    def complete(self) -> None:
        """Report final status."""
        logger.info(
            f"{self.description}: Complete ({self.processed_items:,}/{self.total_items:,})"
        )
