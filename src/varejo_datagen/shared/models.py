"""
Core data models for the varejo data generator.

This module contains the nine entity records written to both sinks plus the
registry used by the sinks to map an entity to its collection/table and key
columns. Python attribute names are English; the serialized names (aliases)
are the column names of the document and wide-column schemas.
"""

from datetime import datetime
from typing import Annotated, Any, ClassVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    model_validator,
)

# Wire representation of boolean flags
FLAG_TRUE = "S"
FLAG_FALSE = "N"


def _parse_flag(value: Any) -> Any:
    """Accept the wire values 'S'/'N' as well as plain booleans."""
    if isinstance(value, str):
        normalized = value.strip().upper()
        if normalized == FLAG_TRUE:
            return True
        if normalized == FLAG_FALSE:
            return False
        raise ValueError(f"Flag must be '{FLAG_TRUE}' or '{FLAG_FALSE}', got {value!r}")
    return value


Flag = Annotated[
    bool,
    BeforeValidator(_parse_flag),
    PlainSerializer(lambda v: FLAG_TRUE if v else FLAG_FALSE, return_type=str),
]


class EntityRecord(BaseModel):
    """
    Base class for every generated record.

    Subclasses declare where they live in the sinks:
    - entity_name: logical entity name used in logs, metrics and stages
    - table_name: MongoDB collection / Cassandra table
    - key_columns: serialized names of the primary key columns
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    entity_name: ClassVar[str]
    table_name: ClassVar[str]
    key_columns: ClassVar[tuple[str, ...]]

    def to_record(self) -> dict[str, Any]:
        """Serialize for the sinks; absent optional fields are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @property
    def record_key(self) -> int | tuple[int, ...]:
        """Primary key value (scalar for single-column keys)."""
        record = self.model_dump(by_alias=True)
        values = tuple(record[column] for column in self.key_columns)
        return values[0] if len(values) == 1 else values


class City(EntityRecord):
    """City (cidade), keyed by its IBGE code."""

    entity_name: ClassVar[str] = "city"
    table_name: ClassVar[str] = "cidade"
    key_columns: ClassVar[tuple[str, ...]] = ("cod_ibge",)

    city_id: int = Field(..., alias="cod_ibge", ge=1, description="IBGE city code")
    name: str = Field(..., alias="nom_cidade", min_length=1)
    state: str = Field(..., alias="nom_estado", min_length=2, max_length=2)
    region: str = Field(..., alias="nom_regiao", min_length=1)
    country: str = Field(..., alias="nom_pais", min_length=1)


class Address(EntityRecord):
    """Street address (endereco) located in a city."""

    entity_name: ClassVar[str] = "address"
    table_name: ClassVar[str] = "endereco"
    key_columns: ClassVar[tuple[str, ...]] = ("cod_endereco",)

    address_id: int = Field(..., alias="cod_endereco", ge=1)
    street: str = Field(..., alias="nom_logradouro", min_length=1)
    number: str = Field(..., alias="num_logradouro", min_length=1)
    postal_code: int = Field(
        ..., alias="cod_cep", ge=10_000_000, le=99_999_999, description="CEP"
    )
    city_id: int = Field(..., alias="cod_ibge", ge=1)
    abroad: Flag = Field(False, alias="flg_exterior")
    street_type: str = Field(..., alias="tip_logradouro", min_length=1)


class Supplier(EntityRecord):
    """Product supplier (fornecedor)."""

    entity_name: ClassVar[str] = "supplier"
    table_name: ClassVar[str] = "fornecedor"
    key_columns: ClassVar[tuple[str, ...]] = ("cod_fornecedor",)

    supplier_id: int = Field(..., alias="cod_fornecedor", ge=1)
    name: str = Field(..., alias="nom_fornecedor", min_length=1)
    invoices_on_account: Flag = Field(..., alias="flg_fatura")
    grace_days: int = Field(
        0, alias="num_dias_fatura", ge=0, description="Invoice grace period in days"
    )


class Product(EntityRecord):
    """Sellable product (produto) with pricing and optional promotion."""

    entity_name: ClassVar[str] = "product"
    table_name: ClassVar[str] = "produto"
    key_columns: ClassVar[tuple[str, ...]] = ("cod_produto",)

    product_id: int = Field(..., alias="cod_produto", ge=1)
    name: str = Field(..., alias="nom_produto", min_length=1)
    supplier_id: int = Field(..., alias="cod_fornecedor", ge=1)
    sector_id: int = Field(..., alias="cod_setor", ge=1)
    unit_id: int = Field(..., alias="cod_unidade", ge=1)
    fractional: Flag = Field(
        ..., alias="flg_fracionado", description="Sold by fractional quantity"
    )
    sale_price: float = Field(..., alias="vlr_venda", ge=0)
    cost: float = Field(..., alias="vlr_custo", ge=0)
    average_price: float = Field(..., alias="vlr_medio", ge=0)
    promotion_id: int | None = Field(None, alias="cod_promocao", ge=1)
    promotion_price: float | None = Field(None, alias="vlr_promocao", ge=0)

    @property
    def effective_price(self) -> float:
        """Unit price charged on a sale: the promotion price when one exists."""
        if self.promotion_price is not None:
            return self.promotion_price
        return self.sale_price


class Store(EntityRecord):
    """Store (loja) occupying one address of the store address block."""

    entity_name: ClassVar[str] = "store"
    table_name: ClassVar[str] = "loja"
    key_columns: ClassVar[tuple[str, ...]] = ("cod_loja",)

    store_id: int = Field(..., alias="cod_loja", ge=1)
    name: str = Field(..., alias="nom_loja", min_length=1)
    address_id: int = Field(..., alias="cod_endereco", ge=1)
    headquarters: Flag = Field(..., alias="flg_matriz")


class Terminal(EntityRecord):
    """Point-of-sale terminal (PDV) registered to a store."""

    entity_name: ClassVar[str] = "terminal"
    table_name: ClassVar[str] = "pdv"
    key_columns: ClassVar[tuple[str, ...]] = ("cod_pdv",)

    terminal_id: int = Field(..., alias="cod_pdv", ge=1)
    register_number: int = Field(..., alias="num_registro", ge=0)
    valid_from: datetime = Field(..., alias="dat_inicio_vigencia")
    valid_until: datetime = Field(..., alias="dat_fim_vigencia")
    first_invoice_number: int = Field(..., alias="num_nota_inicial", ge=0)
    last_invoice_number: int = Field(..., alias="num_nota_final", ge=0)
    store_id: int = Field(..., alias="cod_loja", ge=1)
    terminal_number: int = Field(
        ..., alias="num_pdv_loja", ge=1, description="Terminal ordinal within the store"
    )

    @model_validator(mode="after")
    def validate_windows(self):
        """Validity window and nota fiscal numbering range must be ordered."""
        if self.valid_until <= self.valid_from:
            raise ValueError("dat_fim_vigencia must be after dat_inicio_vigencia")
        if self.last_invoice_number < self.first_invoice_number:
            raise ValueError("num_nota_final must not be below num_nota_inicial")
        return self


class Register(EntityRecord):
    """Cash register (caixa) and its operator."""

    entity_name: ClassVar[str] = "register"
    table_name: ClassVar[str] = "caixa"
    key_columns: ClassVar[tuple[str, ...]] = ("cod_caixa",)

    register_id: int = Field(..., alias="cod_caixa", ge=1)
    operator_name: str = Field(..., alias="nom_caixa", min_length=1)
    store_id: int = Field(..., alias="cod_loja", ge=1)
    on_leave: Flag = Field(..., alias="flg_ferias")


class Customer(EntityRecord):
    """Customer (cliente) occupying one address of the customer address block."""

    entity_name: ClassVar[str] = "customer"
    table_name: ClassVar[str] = "cliente"
    key_columns: ClassVar[tuple[str, ...]] = ("cod_cliente",)

    customer_id: int = Field(..., alias="cod_cliente", ge=1)
    name: str = Field(..., alias="nom_cliente", min_length=1)
    loyalty: Flag = Field(..., alias="flg_fidelizado")
    address_id: int = Field(..., alias="cod_endereco", ge=1)


class Invoice(EntityRecord):
    """Invoice header (nota fiscal); totals are derived from its lines."""

    entity_name: ClassVar[str] = "invoice"
    table_name: ClassVar[str] = "nota_fiscal"
    key_columns: ClassVar[tuple[str, ...]] = ("seq_nota",)

    invoice_id: int = Field(..., alias="seq_nota", ge=1)
    terminal_id: int = Field(..., alias="cod_pdv", ge=1)
    register_id: int = Field(..., alias="cod_caixa", ge=1)
    customer_id: int = Field(..., alias="cod_cliente", ge=1)
    invoice_number: int = Field(..., alias="num_nota", ge=0)
    issued_at: datetime = Field(..., alias="dat_nota")
    delivery: Flag = Field(..., alias="flg_entrega")
    total: float = Field(..., alias="vlr_nota", ge=0)
    cash: float = Field(0.0, alias="vlr_dinheiro", ge=0)
    voucher: float = Field(0.0, alias="vlr_tick", ge=0)
    card: float = Field(0.0, alias="vlr_cartao", ge=0)

    @model_validator(mode="after")
    def validate_payment_split(self):
        """Exactly one payment method carries the whole total."""
        payments = (self.cash, self.voucher, self.card)
        if sorted(payments) != [0.0, 0.0, self.total]:
            raise ValueError(
                "Exactly one of vlr_dinheiro, vlr_tick, vlr_cartao must equal "
                f"vlr_nota ({self.total}); got {payments}"
            )
        return self


class InvoiceLine(EntityRecord):
    """Invoice line (item_nota_fiscal); numbered from 1 within its invoice."""

    entity_name: ClassVar[str] = "invoice_line"
    table_name: ClassVar[str] = "item_nota_fiscal"
    key_columns: ClassVar[tuple[str, ...]] = ("seq_nota", "seq_item_nota")

    line_id: int = Field(..., alias="seq_item_nota", ge=1)
    invoice_id: int = Field(..., alias="seq_nota", ge=1)
    product_id: int = Field(..., alias="cod_produto", ge=1)
    quantity: float = Field(..., alias="qtd_produto", gt=0)
    unit_price: float = Field(..., alias="vlr_venda", ge=0)
    cost: float = Field(..., alias="vlr_custo", ge=0)
    average_price: float = Field(..., alias="vlr_medio", ge=0)
    promotion_price: float | None = Field(None, alias="vlr_promocao", ge=0)


# Entity registry in generation (dependency) order
ENTITY_MODELS: dict[str, type[EntityRecord]] = {
    model.entity_name: model
    for model in (
        City,
        Address,
        Supplier,
        Product,
        Store,
        Terminal,
        Register,
        Customer,
        Invoice,
        InvoiceLine,
    )
}
