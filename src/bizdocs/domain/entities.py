"""Domain model entities for bizdocs.

These are pure data classes representing business concepts, independent of
database schema. Monetary values are always ``Decimal``.
"""

from dataclasses import dataclass, fields
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class ItemType(str, Enum):
    """Kind of catalog entry."""

    ITEM = "item"
    SERVICE = "service"


class TransactionStatus(str, Enum):
    """Lifecycle state of a transaction."""

    DRAFT = "draft"
    CONFIRMED = "confirmed"
    PAID = "paid"
    CANCELLED = "cancelled"


class DocumentType(str, Enum):
    """Printable document kinds generated from a transaction."""

    SALES_NOTE = "sales_note"
    PAYMENT_RECEIPT = "payment_receipt"
    INVOICE = "invoice"
    BAST = "bast"
    PURCHASE_ORDER = "purchase_order"
    TAX_INVOICE = "tax_invoice"
    PROFORMA_INVOICE = "proforma_invoice"


class _Unset:
    """Marker for a patch field that was not supplied."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class StoreProfile:
    """Seller profile printed on every document."""

    id: int
    name: str
    address: str
    phone: str
    email: str
    npwp: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class CatalogItem:
    """Sellable item or service."""

    id: int
    code: str
    name: str
    item_type: ItemType
    unit_price: Decimal
    description: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Sales transaction with its computed tax snapshot."""

    id: int
    transaction_number: str
    customer_name: str
    customer_address: Optional[str]
    customer_phone: Optional[str]
    customer_email: Optional[str]
    status: TransactionStatus
    subtotal: Decimal
    ppn_enabled: bool
    ppn_rate: Decimal
    ppn_amount: Decimal
    regional_tax_enabled: bool
    regional_tax_rate: Decimal
    regional_tax_amount: Decimal
    pph22_enabled: bool
    pph22_rate: Decimal
    pph22_amount: Decimal
    pph23_enabled: bool
    pph23_rate: Decimal
    pph23_amount: Decimal
    stamp_duty_required: bool
    stamp_duty_amount: Decimal
    total_amount: Decimal
    notes: Optional[str]
    transaction_date: datetime
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TransactionLine:
    """Line item owned by a transaction.

    Price, code and name are copied from the catalog when the line is created,
    so later catalog edits do not change historical documents.
    """

    id: int
    transaction_id: int
    catalog_item_id: Optional[int]
    item_code: str
    item_name: str
    quantity: Decimal
    unit_price: Decimal
    discount_percentage: Decimal
    line_total: Decimal
    created_at: datetime


@dataclass(frozen=True)
class NewTransactionLine:
    """Priced line ready to be persisted with a new transaction."""

    catalog_item_id: int
    item_code: str
    item_name: str
    quantity: Decimal
    unit_price: Decimal
    discount_percentage: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class Document:
    """Immutable rendered document."""

    id: int
    transaction_id: int
    document_type: DocumentType
    document_number: str
    document_date: datetime
    recipient_name: Optional[str]
    custom_notes: Optional[str]
    html_content: str
    created_at: datetime


@dataclass(frozen=True)
class TransactionPatch:
    """Explicit set of changes for an existing transaction.

    Every field defaults to ``UNSET``; ``None`` is a real value that clears
    an optional column.
    """

    customer_name: Any = UNSET
    customer_address: Any = UNSET
    customer_phone: Any = UNSET
    customer_email: Any = UNSET
    status: Any = UNSET
    ppn_enabled: Any = UNSET
    regional_tax_enabled: Any = UNSET
    pph22_enabled: Any = UNSET
    pph23_enabled: Any = UNSET
    notes: Any = UNSET
    transaction_date: Any = UNSET

    TAX_FLAG_FIELDS = ("ppn_enabled", "regional_tax_enabled", "pph22_enabled", "pph23_enabled")

    def present(self) -> dict[str, Any]:
        """Return the supplied fields only."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def touches_taxes(self) -> bool:
        """True when any tax flag was supplied."""
        return any(getattr(self, name) is not UNSET for name in self.TAX_FLAG_FIELDS)


@dataclass(frozen=True)
class TransactionChanges:
    """Column values written by a transaction update.

    Produced by the lifecycle service from a ``TransactionPatch`` plus any
    recomputed tax fields; unsupplied columns stay ``UNSET``.
    """

    customer_name: Any = UNSET
    customer_address: Any = UNSET
    customer_phone: Any = UNSET
    customer_email: Any = UNSET
    status: Any = UNSET
    notes: Any = UNSET
    transaction_date: Any = UNSET
    subtotal: Any = UNSET
    ppn_enabled: Any = UNSET
    ppn_rate: Any = UNSET
    ppn_amount: Any = UNSET
    regional_tax_enabled: Any = UNSET
    regional_tax_rate: Any = UNSET
    regional_tax_amount: Any = UNSET
    pph22_enabled: Any = UNSET
    pph22_rate: Any = UNSET
    pph22_amount: Any = UNSET
    pph23_enabled: Any = UNSET
    pph23_rate: Any = UNSET
    pph23_amount: Any = UNSET
    stamp_duty_required: Any = UNSET
    stamp_duty_amount: Any = UNSET
    total_amount: Any = UNSET
    updated_at: Any = UNSET

    def present(self) -> dict[str, Any]:
        """Return the supplied columns only."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}
