"""
Store master data generation: stores, their point-of-sale terminals (PDV)
and cash registers (caixa).
"""

import logging
import random

from varejo_datagen.shared.exceptions import AddressPoolError
from varejo_datagen.shared.models import Register, Store, Terminal

from ..utils import past_datetime, percent_flag, person_name, shift_date

logger = logging.getLogger(__name__)

HEADQUARTERS_STORE_ID = 1
TERMINAL_VALIDITY_YEARS = 5
MAX_TERMINALS_PER_STORE = 20


class StoreGeneratorMixin:
    """Mixin for store, terminal and register generation."""

    def store_address_id(self, index: int) -> int:
        """Stores occupy the first block of the address pool."""
        return index + 1

    def _positional_address(self, address_id: int, stage: str) -> int:
        self._require_parent("address", stage)
        if not self.fk_validator.validate_fk("address", address_id):
            raise AddressPoolError(
                stage,
                required=address_id,
                available=len(self.fk_validator.get_ids("address")),
            )
        return address_id

    def build_store(self, index: int, rng: random.Random) -> Store:
        """Build a store; only store 1 is the headquarters."""
        store_id = index + 1
        address_id = self._positional_address(self.store_address_id(index), "store")

        return Store(
            store_id=store_id,
            name=f"Loja {store_id}",
            address_id=address_id,
            headquarters=store_id == HEADQUARTERS_STORE_ID,
        )

    def build_terminal(self, index: int, rng: random.Random) -> Terminal:
        """
        Build a point-of-sale terminal.

        The validity window starts one year (plus up to 11 months and 29
        days) before the reference time and lasts five years. The terminal
        may issue nota fiscal numbers from an initial number in 1-1000 up to
        1000-9999 numbers later.
        """
        register_number = rng.randint(1000, 9999)
        valid_from = past_datetime(rng, self.reference_time, years_back=1)
        valid_until = shift_date(valid_from, years=TERMINAL_VALIDITY_YEARS)

        first_invoice_number = rng.randint(1, 1000)
        last_invoice_number = first_invoice_number + rng.randint(1000, 9999)

        store_id = self._pick_parent("store", rng, "terminal")
        terminal_number = rng.randint(1, MAX_TERMINALS_PER_STORE)

        return Terminal(
            terminal_id=index + 1,
            register_number=register_number,
            valid_from=valid_from,
            valid_until=valid_until,
            first_invoice_number=first_invoice_number,
            last_invoice_number=last_invoice_number,
            store_id=store_id,
            terminal_number=terminal_number,
        )

    def build_register(self, index: int, rng: random.Random) -> Register:
        """Build a cash register; about 10% of operators are on leave."""
        operator_name = person_name(rng)
        store_id = self._pick_parent("store", rng, "register")

        return Register(
            register_id=index + 1,
            operator_name=operator_name,
            store_id=store_id,
            on_leave=percent_flag(rng, 10),
        )
