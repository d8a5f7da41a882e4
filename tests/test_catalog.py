"""Tests for CatalogService."""

from decimal import Decimal

import pytest

from bizdocs.domain.entities import ItemType
from bizdocs.domain.errors import ConflictError, DependencyError, NotFoundError, PreconditionFailedError, ValidationError
from bizdocs.domain.pricing import LineItemInput


def test_create_item(catalog_service):
    """Test creating an item."""
    item = catalog_service.create_item(
        code=" BRG-010 ", name="Tinta Printer", item_type="item", unit_price="85000", description="Hitam"
    )

    assert item.id is not None
    assert item.code == "BRG-010"
    assert item.item_type == ItemType.ITEM
    assert item.unit_price == Decimal("85000.00")
    assert item.description == "Hitam"


def test_create_service(catalog_service):
    """Test creating a service item."""
    item = catalog_service.create_item(code="JSA-010", name="Konsultasi", item_type=ItemType.SERVICE, unit_price=0)

    assert item.item_type == ItemType.SERVICE
    assert item.unit_price == Decimal("0.00")


def test_price_is_rounded_to_cents(catalog_service):
    """Sub-cent prices are rounded half up before they are stored."""
    item = catalog_service.create_item(code="BRG-011", name="Klip", item_type="item", unit_price="1500.005")

    assert item.unit_price == Decimal("1500.01")
    assert catalog_service.get_item(item.id).unit_price == Decimal("1500.01")


def test_duplicate_code(catalog_service, sample_item):
    """Test codes are unique."""
    with pytest.raises(ConflictError, match="BRG-001"):
        catalog_service.create_item(code="BRG-001", name="Other", item_type="item", unit_price=1)


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"code": ""}, "code is required"),
        ({"name": "  "}, "name is required"),
        ({"item_type": "gadget"}, "Unknown item type"),
        ({"unit_price": "-1"}, "must not be negative"),
        ({"unit_price": "abc"}, "must be a number"),
    ],
)
def test_create_validation(catalog_service, kwargs, message):
    """Test item validation."""
    request = {"code": "X-1", "name": "Thing", "item_type": "item", "unit_price": "10"}
    request.update(kwargs)

    with pytest.raises(ValidationError, match=message):
        catalog_service.create_item(**request)


def test_get_item_by_code(catalog_service, sample_item):
    """Test lookup by code."""
    assert catalog_service.get_item_by_code("BRG-001") == sample_item
    assert catalog_service.get_item_by_code("NOPE") is None
    assert catalog_service.get_item(9999) is None


def test_search_items(catalog_service, sample_item, sample_service_item):
    """Test text and type search, ordered by name."""
    catalog_service.create_item(code="BRG-002", name="Amplop", item_type="item", unit_price=500)

    assert [item.name for item in catalog_service.search_items()] == ["Amplop", "Instalasi Jaringan", "Kertas A4"]
    assert [item.code for item in catalog_service.search_items(query="kertas")] == ["BRG-001"]
    assert [item.code for item in catalog_service.search_items(query="jsa")] == ["JSA-001"]
    assert [item.code for item in catalog_service.search_items(item_type="service")] == ["JSA-001"]
    assert [item.name for item in catalog_service.search_items(limit=1, offset=1)] == ["Instalasi Jaringan"]


def test_search_paging_bounds(catalog_service):
    """Test paging validation."""
    with pytest.raises(ValidationError):
        catalog_service.search_items(limit=0)
    with pytest.raises(ValidationError):
        catalog_service.search_items(offset=-1)


def test_update_item(catalog_service, sample_item):
    """Test partial update."""
    updated = catalog_service.update_item(sample_item.id, name="Kertas A4 80gsm", unit_price=Decimal("1200"))

    assert updated.name == "Kertas A4 80gsm"
    assert updated.unit_price == Decimal("1200.00")
    assert updated.code == sample_item.code
    assert updated.item_type == sample_item.item_type


def test_update_clears_description(catalog_service):
    """Test None clears the description."""
    item = catalog_service.create_item(code="X-2", name="Thing", item_type="item", unit_price=1, description="old")

    assert catalog_service.update_item(item.id, description=None).description is None


def test_update_to_existing_code(catalog_service, sample_item, sample_service_item):
    """Test a code already taken by another item is refused."""
    with pytest.raises(ConflictError):
        catalog_service.update_item(sample_item.id, code="JSA-001")

    # Keeping its own code is fine
    assert catalog_service.update_item(sample_item.id, code="BRG-001").code == "BRG-001"


def test_update_missing(catalog_service):
    """Test updating an unknown item."""
    with pytest.raises(NotFoundError):
        catalog_service.update_item(404, name="x")


def test_delete_unused_item(catalog_service, sample_item):
    """Test deleting an item no transaction uses."""
    assert catalog_service.delete_item(sample_item.id) is True
    assert catalog_service.get_item(sample_item.id) is None


def test_delete_item_in_use(catalog_service, transaction_service, sample_item):
    """Test an item referenced by transaction lines is kept."""
    transaction_service.create_transaction(
        customer_name="PT Maju Bersama",
        items=[LineItemInput(catalog_item_id=sample_item.id, quantity=Decimal("1"), unit_price=Decimal("1000"))],
    )

    with pytest.raises(DependencyError, match="used by 1 transaction line"):
        catalog_service.delete_item(sample_item.id)

    assert catalog_service.get_item(sample_item.id) is not None


def test_dependency_error_is_precondition_failure():
    """Test the error hierarchy used by callers."""
    assert issubclass(DependencyError, PreconditionFailedError)


def test_delete_missing(catalog_service):
    """Test deleting an unknown item."""
    with pytest.raises(NotFoundError):
        catalog_service.delete_item(404)
