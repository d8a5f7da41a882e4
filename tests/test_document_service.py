"""Tests for DocumentService and document rendering."""

import re
from datetime import date, datetime
from decimal import Decimal

import pytest

from bizdocs.domain.document import DocumentService
from bizdocs.domain.entities import DocumentType
from bizdocs.domain.errors import NotFoundError, PreconditionFailedError, ValidationError
from bizdocs.domain.pricing import LineItemInput
from bizdocs.domain.rendering import DocumentContext, format_document_number, render_document_html
from bizdocs.domain.tax import TaxFlags, TaxRates, calculate_taxes
from bizdocs.domain.transaction import TransactionService


def test_generate_sales_note(document_service, sample_store, sample_transaction):
    """Test a sales note for a 1,000 + PPN transaction."""
    doc = document_service.generate_document(sample_transaction.id, "sales_note")

    assert doc.document_type == DocumentType.SALES_NOTE
    assert re.match(r"^SN-\d{4}-\d{4}$", doc.document_number)
    assert doc.transaction_id == sample_transaction.id

    html = doc.html_content
    assert "SALES NOTE" in html
    assert doc.document_number in html
    assert sample_transaction.transaction_number in html
    assert "Toko Sinar Jaya" in html
    assert "01.234.567.8-901.000" in html
    assert "PT Maju Bersama" in html
    assert "BRG-001" in html
    assert "Kertas A4" in html
    assert "Subtotal" in html
    assert "PPN (11%)" in html
    assert "Rp 1.000,00" in html
    assert "Rp 110,00" in html
    assert "Rp 1.110,00" in html
    assert "TOTAL AMOUNT" in html


@pytest.mark.parametrize(
    "document_type, prefix, title",
    [
        ("invoice", "INV", "INVOICE"),
        ("payment_receipt", "PR", "PAYMENT RECEIPT"),
        ("tax_invoice", "TAX", "TAX INVOICE"),
        ("bast", "BAST", "Berita Acara Serah Terima"),
        ("purchase_order", "PO", "PURCHASE ORDER"),
        ("proforma_invoice", "PI", "PROFORMA INVOICE"),
    ],
)
def test_generate_each_type(document_service, sample_store, sample_transaction, document_type, prefix, title):
    """Test prefixes and titles per document type."""
    doc = document_service.generate_document(sample_transaction.id, document_type)

    assert doc.document_number.startswith(f"{prefix}-")
    assert title in doc.html_content


def test_number_uses_generation_year_and_id(temp_db, sample_store, sample_transaction):
    """Test the document number comes from the clock year and row id."""
    service = DocumentService(temp_db, clock=lambda: datetime(2025, 6, 1, 9, 30))

    doc = service.generate_document(sample_transaction.id, DocumentType.INVOICE)

    assert doc.document_number == f"INV-2025-{doc.id:04d}"
    assert doc.document_date == datetime(2025, 6, 1, 9, 30)
    assert "01 June 2025" in doc.html_content


def test_each_generation_creates_a_new_document(document_service, sample_store, sample_transaction):
    """Test generating the same type twice stores two documents."""
    first = document_service.generate_document(sample_transaction.id, "invoice")
    second = document_service.generate_document(sample_transaction.id, "invoice")

    assert first.id != second.id
    assert first.document_number != second.document_number

    documents = document_service.get_documents_by_transaction(sample_transaction.id)
    assert [doc.id for doc in documents] == [first.id, second.id]
    assert document_service.get_document(first.id) == first


def test_explicit_date_recipient_and_notes(document_service, sample_store, sample_transaction):
    """Test optional document fields are stored and printed."""
    doc = document_service.generate_document(
        sample_transaction.id,
        "bast",
        document_date=date(2024, 3, 5),
        recipient_name="Budi Santoso",
        custom_notes="Received in good order",
    )

    assert doc.document_date == datetime(2024, 3, 5)
    assert doc.recipient_name == "Budi Santoso"
    assert doc.custom_notes == "Received in good order"
    assert "05 March 2024" in doc.html_content
    assert "Received By:" in doc.html_content
    assert "Budi Santoso" in doc.html_content
    assert "Received in good order" in doc.html_content


def test_recipient_row_omitted_when_empty(document_service, sample_store, sample_transaction):
    """Test no recipient row without a recipient."""
    doc = document_service.generate_document(sample_transaction.id, "sales_note")

    assert "Recipient:" not in doc.html_content
    assert doc.recipient_name is None


def test_withholding_and_stamp_duty_rows(document_service, transaction_service, sample_store, sample_item):
    """Test withholding shown as deductions and stamp duty printed."""
    txn = transaction_service.create_transaction(
        customer_name="PT Besar",
        items=[LineItemInput(catalog_item_id=sample_item.id, quantity=Decimal("5000"), unit_price=Decimal("1000"))],
        ppn_enabled=False,
        pph23_enabled=True,
    )

    html = document_service.generate_document(txn.id, "invoice").html_content

    assert "PPN (" not in html
    assert "PPh 23 (2%)" in html
    assert "Rp -100.000,00" in html
    # 5,000,000 - 100,000 is under the threshold
    assert "Stamp Duty" not in html
    assert "Rp 4.900.000,00" in html


def test_stamp_duty_row(document_service, transaction_service, sample_store, sample_item):
    """Test the stamp duty row when required."""
    txn = transaction_service.create_transaction(
        customer_name="PT Besar",
        items=[LineItemInput(catalog_item_id=sample_item.id, quantity=Decimal("5000"), unit_price=Decimal("1000"))],
    )

    html = document_service.generate_document(txn.id, "invoice").html_content

    assert "Stamp Duty (Materai)" in html
    assert "Rp 10.000,00" in html
    assert "Rp 5.560.000,00" in html


def test_tax_labels_follow_the_rates_stored_on_the_transaction(monkeypatch, temp_db, sample_store, sample_item):
    """Test labels show the rates the amounts were computed with, whatever the current configuration."""
    service = TransactionService(temp_db, tax_rates=TaxRates(ppn_rate=Decimal("0.12"), pph22_rate=Decimal("0.015")))
    txn = service.create_transaction(
        customer_name="PT Maju Bersama",
        items=[LineItemInput(catalog_item_id=sample_item.id, quantity=Decimal("10"), unit_price=Decimal("1000"))],
        pph22_enabled=True,
    )
    monkeypatch.setenv("BIZDOCS_PPN_RATE", "0.11")
    monkeypatch.setenv("BIZDOCS_PPH22_RATE", "0.02")

    html = DocumentService(temp_db).generate_document(txn.id, "invoice").html_content

    assert "PPN (12%)" in html
    assert "Rp 1.200,00" in html
    assert "PPh 22 (1.5%)" in html
    assert "Rp -150,00" in html
    assert "PPN (11%)" not in html


def test_customer_data_is_escaped(document_service, transaction_service, sample_store, sample_item):
    """Test user text cannot inject markup."""
    txn = transaction_service.create_transaction(
        customer_name="<script>alert('x')</script>",
        items=[LineItemInput(catalog_item_id=sample_item.id, quantity=Decimal("1"), unit_price=Decimal("1000"))],
        notes="A & B",
    )

    html = document_service.generate_document(txn.id, "sales_note").html_content

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "A &amp; B" in html


def test_transaction_without_items(temp_db, document_service, sample_store):
    """Test a transaction without lines cannot produce a document."""
    transaction_id = temp_db.create_transaction(
        customer_name="Empty",
        taxes=calculate_taxes(Decimal("0"), TaxFlags()),
        lines=[],
        number_for=lambda new_id: f"TRX-2024-{new_id:06d}",
    )

    with pytest.raises(ValidationError, match=f"No items found for transaction {transaction_id}"):
        document_service.generate_document(transaction_id, "invoice")

    assert temp_db.list_documents(transaction_id) == []


def test_missing_store_profile(document_service, sample_transaction):
    """Test documents need a store profile."""
    with pytest.raises(PreconditionFailedError, match="Store profile not found"):
        document_service.generate_document(sample_transaction.id, "invoice")


def test_missing_transaction(document_service, sample_store):
    """Test generating for an unknown transaction."""
    with pytest.raises(NotFoundError, match="Transaction with id 999 not found"):
        document_service.generate_document(999, "invoice")


def test_unknown_document_type(document_service, sample_store, sample_transaction):
    """Test an unknown type is rejected."""
    with pytest.raises(ValidationError, match="Unknown document type"):
        document_service.generate_document(sample_transaction.id, "receipt_of_doom")


def test_stored_html_does_not_follow_later_changes(
    document_service, transaction_service, catalog_service, sample_store, sample_item, sample_transaction
):
    """Test a stored document keeps its original content."""
    from bizdocs.domain.entities import TransactionPatch

    doc = document_service.generate_document(sample_transaction.id, "invoice")
    transaction_service.update_transaction(sample_transaction.id, TransactionPatch(customer_name="Someone Else"))
    catalog_service.update_item(sample_item.id, name="Changed Name")

    stored = document_service.get_document(doc.id)
    assert "PT Maju Bersama" in stored.html_content
    assert "Someone Else" not in stored.html_content


def test_rendering_is_deterministic(temp_db, sample_store, sample_transaction):
    """Test the same context renders the same HTML."""
    context = DocumentContext(
        document_type=DocumentType.PROFORMA_INVOICE,
        document_number=format_document_number(DocumentType.PROFORMA_INVOICE, 2024, 7),
        document_date=datetime(2024, 12, 31),
        store=sample_store,
        transaction=sample_transaction,
        lines=temp_db.list_transaction_lines(sample_transaction.id),
    )

    first = render_document_html(context)

    assert first == render_document_html(context)
    assert "PI-2024-0007" in first
    assert "31 December 2024" in first


def test_format_document_number():
    """Test number layout."""
    assert format_document_number(DocumentType.SALES_NOTE, 2024, 1) == "SN-2024-0001"
    assert format_document_number(DocumentType.TAX_INVOICE, 2026, 12345) == "TAX-2026-12345"
