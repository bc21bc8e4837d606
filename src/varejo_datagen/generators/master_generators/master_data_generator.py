"""
Master data generation orchestrator.

Coordinates all entity generation using modular mixins.
"""

import logging
from collections.abc import Sequence

from varejo_datagen.shared.models import EntityRecord, Product

from .base_generator import BaseGenerator
from .customer_generator import CustomerGeneratorMixin
from .geography_generator import GeographyGeneratorMixin
from .invoice_generator import InvoiceGeneratorMixin
from .product_generator import ProductGeneratorMixin
from .store_generator import StoreGeneratorMixin
from .supplier_generator import SupplierGeneratorMixin

logger = logging.getLogger(__name__)


class MasterDataGenerator(
    BaseGenerator,
    GeographyGeneratorMixin,
    SupplierGeneratorMixin,
    ProductGeneratorMixin,
    StoreGeneratorMixin,
    CustomerGeneratorMixin,
    InvoiceGeneratorMixin,
):
    """
    Main entity generation engine.

    Builds every record of the dataset, one global stage index at a time:
    - cidade, endereco
    - fornecedor, produto
    - loja, pdv, caixa
    - cliente
    - nota_fiscal with its item_nota_fiscal lines
    """

    def generate(
        self,
        entity: str,
        index: int,
        catalog: Sequence[Product] | None = None,
    ) -> list[EntityRecord]:
        """
        Generate the records produced by one stage index.

        Args:
            entity: Stage entity name (e.g. "city", "invoice")
            index: Global zero-based index within the stage
            catalog: Product catalog, required for the invoice stage

        Returns:
            Records to write, in write order (an invoice is followed by its lines)

        Raises:
            ValueError: If the entity is not a stage of the pipeline
        """
        rng = self.rng_for(entity, index)

        if entity == "invoice":
            invoice, lines = self.build_invoice(index, rng, catalog or [])
            return [invoice, *lines]

        builder = getattr(self, f"build_{entity}", None)
        if builder is None or entity == "invoice_line":
            raise ValueError(f"Unknown generation stage '{entity}'")
        return [builder(index, rng)]
