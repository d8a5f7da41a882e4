"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime
from decimal import Decimal

from bizdocs.domain.entities import (
    UNSET,
    CatalogItem,
    DocumentType,
    ItemType,
    TransactionChanges,
    TransactionPatch,
    TransactionStatus,
)


class TestCatalogItem:
    """Tests for CatalogItem entity."""

    def test_catalog_item_immutability(self):
        """Test that CatalogItem entities are immutable."""
        item = CatalogItem(
            id=1,
            code="BRG-001",
            name="Kertas A4",
            item_type=ItemType.ITEM,
            unit_price=Decimal("1000.00"),
            description=None,
            created_at=datetime(2024, 1, 1),
            updated_at=datetime(2024, 1, 1),
        )

        with pytest.raises(FrozenInstanceError):
            item.name = "Changed"


class TestEnums:
    """Tests for the string enums."""

    def test_values_are_lowercase_names(self):
        """Test the wire values of the enums."""
        assert TransactionStatus("draft") is TransactionStatus.DRAFT
        assert ItemType("service") is ItemType.SERVICE
        assert DocumentType("payment_receipt") is DocumentType.PAYMENT_RECEIPT
        assert {t.value for t in DocumentType} == {
            "sales_note",
            "payment_receipt",
            "invoice",
            "bast",
            "purchase_order",
            "tax_invoice",
            "proforma_invoice",
        }

    def test_enums_compare_as_strings(self):
        """Test enum members equal their values."""
        assert TransactionStatus.PAID == "paid"


class TestTransactionPatch:
    """Tests for explicit patch semantics."""

    def test_empty_patch(self):
        """Test a new patch supplies nothing."""
        patch = TransactionPatch()

        assert patch.present() == {}
        assert patch.touches_taxes() is False

    def test_none_is_a_supplied_value(self):
        """Test None is distinct from absent."""
        patch = TransactionPatch(customer_phone=None, notes="x")

        assert patch.present() == {"customer_phone": None, "notes": "x"}

    def test_false_flag_touches_taxes(self):
        """Test a False tax flag counts as supplied."""
        assert TransactionPatch(ppn_enabled=False).touches_taxes() is True

    def test_unset_is_a_singleton(self):
        """Test UNSET identity and repr."""
        assert TransactionPatch().notes is UNSET
        assert repr(UNSET) == "UNSET"
        assert not UNSET

    def test_changes_present(self):
        """Test TransactionChanges reports supplied columns."""
        changes = TransactionChanges(total_amount=Decimal("1.00"), stamp_duty_required=False)

        assert changes.present() == {"total_amount": Decimal("1.00"), "stamp_duty_required": False}
