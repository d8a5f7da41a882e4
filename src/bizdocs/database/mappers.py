"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the rest of the application
never handles ORM rows directly.
"""

from decimal import Decimal

from bizdocs.domain import entities as domain
from bizdocs.database.models import (
    StoreProfile as ORMStoreProfile,
    CatalogItem as ORMCatalogItem,
    Transaction as ORMTransaction,
    TransactionLine as ORMTransactionLine,
    Document as ORMDocument,
)


def _money(value) -> Decimal:
    """Normalize a stored numeric to a two-place Decimal."""
    return Decimal(value).quantize(Decimal("0.01"))


def _rate(value) -> Decimal:
    """Strip the storage padding from a tax rate, 0.110000 becomes 0.11."""
    return Decimal(value).normalize()


def store_profile_to_domain(orm_profile: ORMStoreProfile) -> domain.StoreProfile:
    """Convert SQLAlchemy StoreProfile model to domain StoreProfile entity."""
    return domain.StoreProfile(
        id=orm_profile.id,
        name=orm_profile.name,
        address=orm_profile.address,
        phone=orm_profile.phone,
        email=orm_profile.email,
        npwp=orm_profile.npwp,
        created_at=orm_profile.created_at,
        updated_at=orm_profile.updated_at,
    )


def catalog_item_to_domain(orm_item: ORMCatalogItem) -> domain.CatalogItem:
    """Convert SQLAlchemy CatalogItem model to domain CatalogItem entity."""
    return domain.CatalogItem(
        id=orm_item.id,
        code=orm_item.code,
        name=orm_item.name,
        item_type=domain.ItemType(orm_item.item_type),
        unit_price=_money(orm_item.unit_price),
        description=orm_item.description,
        created_at=orm_item.created_at,
        updated_at=orm_item.updated_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        transaction_number=orm_transaction.transaction_number,
        customer_name=orm_transaction.customer_name,
        customer_address=orm_transaction.customer_address,
        customer_phone=orm_transaction.customer_phone,
        customer_email=orm_transaction.customer_email,
        status=domain.TransactionStatus(orm_transaction.status),
        subtotal=_money(orm_transaction.subtotal),
        ppn_enabled=orm_transaction.ppn_enabled,
        ppn_rate=_rate(orm_transaction.ppn_rate),
        ppn_amount=_money(orm_transaction.ppn_amount),
        regional_tax_enabled=orm_transaction.regional_tax_enabled,
        regional_tax_rate=_rate(orm_transaction.regional_tax_rate),
        regional_tax_amount=_money(orm_transaction.regional_tax_amount),
        pph22_enabled=orm_transaction.pph22_enabled,
        pph22_rate=_rate(orm_transaction.pph22_rate),
        pph22_amount=_money(orm_transaction.pph22_amount),
        pph23_enabled=orm_transaction.pph23_enabled,
        pph23_rate=_rate(orm_transaction.pph23_rate),
        pph23_amount=_money(orm_transaction.pph23_amount),
        stamp_duty_required=orm_transaction.stamp_duty_required,
        stamp_duty_amount=_money(orm_transaction.stamp_duty_amount),
        total_amount=_money(orm_transaction.total_amount),
        notes=orm_transaction.notes,
        transaction_date=orm_transaction.transaction_date,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def transaction_line_to_domain(orm_line: ORMTransactionLine) -> domain.TransactionLine:
    """Convert SQLAlchemy TransactionLine model to domain TransactionLine entity."""
    return domain.TransactionLine(
        id=orm_line.id,
        transaction_id=orm_line.transaction_id,
        catalog_item_id=orm_line.catalog_item_id,
        item_code=orm_line.item_code,
        item_name=orm_line.item_name,
        quantity=Decimal(orm_line.quantity).quantize(Decimal("0.001")),
        unit_price=_money(orm_line.unit_price),
        discount_percentage=_money(orm_line.discount_percentage),
        line_total=_money(orm_line.line_total),
        created_at=orm_line.created_at,
    )


def document_to_domain(orm_document: ORMDocument) -> domain.Document:
    """Convert SQLAlchemy Document model to domain Document entity."""
    return domain.Document(
        id=orm_document.id,
        transaction_id=orm_document.transaction_id,
        document_type=domain.DocumentType(orm_document.document_type),
        document_number=orm_document.document_number,
        document_date=orm_document.document_date,
        recipient_name=orm_document.recipient_name,
        custom_notes=orm_document.custom_notes,
        html_content=orm_document.html_content,
        created_at=orm_document.created_at,
    )
