"""
Vocabulary used to synthesize human-readable retail names and addresses.

Usage:
    from varejo_datagen.sourcedata import FIRST_NAMES, LAST_NAMES
"""

from varejo_datagen.sourcedata.default import (
    FIRST_NAMES,
    LAST_NAMES,
    PRODUCT_BRANDS,
    PRODUCT_NAMES,
    PRODUCT_VARIANTS,
    REGIONS,
    SECTORS,
    STATES,
    STREET_NAMES,
    STREET_TYPES,
    UNITS,
)

__all__ = [
    "FIRST_NAMES",
    "LAST_NAMES",
    "PRODUCT_BRANDS",
    "PRODUCT_NAMES",
    "PRODUCT_VARIANTS",
    "REGIONS",
    "SECTORS",
    "STATES",
    "STREET_NAMES",
    "STREET_TYPES",
    "UNITS",
]
