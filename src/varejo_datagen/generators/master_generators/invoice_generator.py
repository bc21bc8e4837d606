"""
Invoice (nota fiscal) generation with line items priced from the product
catalog.
"""

import logging
import random
from collections.abc import Sequence

from varejo_datagen.shared.exceptions import StagePreconditionError
from varejo_datagen.shared.models import Invoice, InvoiceLine, Product

from ..utils import past_datetime, percent_flag, round2

logger = logging.getLogger(__name__)

MAX_LINES_PER_INVOICE = 15
MAX_QUANTITY = 10

PAYMENT_FIELDS = ("cash", "voucher", "card")


def line_quantity(rng: random.Random, fractional: bool) -> float:
    """Quantity sold: 1-10 units, plus tenths for fractional products."""
    quantity = float(rng.randint(1, MAX_QUANTITY))
    if fractional:
        quantity += rng.randrange(10) / 10
    return quantity


def invoice_total(lines: Sequence[InvoiceLine]) -> float:
    """Sum of unit price times quantity over the lines, truncated to cents."""
    return round2(sum(line.unit_price * line.quantity for line in lines))


def payment_split(total: float, method: int) -> dict[str, float]:
    """Assign the whole total to one payment method (0 cash, 1 voucher, 2 card)."""
    split = dict.fromkeys(PAYMENT_FIELDS, 0.0)
    split[PAYMENT_FIELDS[method]] = total
    return split


class InvoiceGeneratorMixin:
    """Mixin for invoice and invoice line generation."""

    def build_invoice_line(
        self,
        invoice_id: int,
        line_id: int,
        product: Product,
        rng: random.Random,
    ) -> InvoiceLine:
        """Build one line selling a catalog product at its effective price."""
        return InvoiceLine(
            line_id=line_id,
            invoice_id=invoice_id,
            product_id=product.product_id,
            quantity=line_quantity(rng, product.fractional),
            unit_price=product.effective_price,
            cost=product.cost,
            average_price=product.average_price,
            promotion_price=product.promotion_price,
        )

    def build_invoice(
        self,
        index: int,
        rng: random.Random,
        catalog: Sequence[Product],
    ) -> tuple[Invoice, list[InvoiceLine]]:
        """
        Build an invoice header and its 1-15 lines.

        Args:
            index: Global index in the invoice stage
            rng: Random generator for this invoice
            catalog: Product catalog read back from a sink, in product id order

        Returns:
            (invoice, lines) where the invoice total is derived from the lines

        Raises:
            StagePreconditionError: If the catalog is empty or a parent stage is missing
        """
        if not catalog:
            raise StagePreconditionError(
                "product catalog is empty",
                stage="invoice",
                precondition="product catalog loaded",
            )

        invoice_id = index + 1
        terminal_id = self._pick_parent("terminal", rng, "invoice")
        register_id = self._pick_parent("register", rng, "invoice")
        customer_id = self._pick_parent("customer", rng, "invoice")

        invoice_number = 100_000 + rng.randrange(900_000)
        issued_at = past_datetime(rng, self.reference_time)
        delivery = percent_flag(rng, 20)

        line_count = rng.randint(1, MAX_LINES_PER_INVOICE)
        lines = [
            self.build_invoice_line(
                invoice_id,
                line_number,
                catalog[rng.randrange(len(catalog))],
                rng,
            )
            for line_number in range(1, line_count + 1)
        ]

        total = invoice_total(lines)
        invoice = Invoice(
            invoice_id=invoice_id,
            terminal_id=terminal_id,
            register_id=register_id,
            customer_id=customer_id,
            invoice_number=invoice_number,
            issued_at=issued_at,
            delivery=delivery,
            total=total,
            **payment_split(total, rng.randrange(len(PAYMENT_FIELDS))),
        )
        return invoice, lines
