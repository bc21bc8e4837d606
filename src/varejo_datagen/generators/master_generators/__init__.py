"""
Master data generators package.

Re-exports MasterDataGenerator and the pure pricing helpers.
"""

from .invoice_generator import invoice_total, line_quantity, payment_split
from .master_data_generator import MasterDataGenerator
from .product_generator import price_product, promotion_price

__all__ = [
    "MasterDataGenerator",
    "invoice_total",
    "line_quantity",
    "payment_split",
    "price_product",
    "promotion_price",
]
