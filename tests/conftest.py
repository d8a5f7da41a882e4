"""Shared pytest fixtures for bizdocs tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from bizdocs.database.factories import create_sqlite_database
from bizdocs.domain.catalog import CatalogService
from bizdocs.domain.document import DocumentService
from bizdocs.domain.pricing import LineItemInput
from bizdocs.domain.store_profile import StoreProfileService
from bizdocs.domain.tax import DEFAULT_TAX_RATES
from bizdocs.domain.transaction import TransactionService
from bizdocs.logging_config import reset_logging


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep tax and logging configuration from leaking in from the shell."""
    for name in (
        "BIZDOCS_DB_PATH",
        "BIZDOCS_DB_TIMEOUT",
        "BIZDOCS_LOG_LEVEL",
        "BIZDOCS_PPN_RATE",
        "BIZDOCS_REGIONAL_TAX_RATE",
        "BIZDOCS_PPH22_RATE",
        "BIZDOCS_PPH23_RATE",
        "BIZDOCS_STAMP_DUTY_THRESHOLD",
        "BIZDOCS_STAMP_DUTY_AMOUNT",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def store_service(temp_db):
    """Create a StoreProfileService with a temporary database."""
    return StoreProfileService(temp_db)


@pytest.fixture
def catalog_service(temp_db):
    """Create a CatalogService with a temporary database."""
    return CatalogService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with the default rate table."""
    return TransactionService(temp_db, tax_rates=DEFAULT_TAX_RATES)


@pytest.fixture
def document_service(temp_db):
    """Create a DocumentService with a temporary database."""
    return DocumentService(temp_db)


@pytest.fixture
def sample_store(store_service):
    """Create the store profile."""
    return store_service.create_profile(
        name="Toko Sinar Jaya",
        address="Jl. Merdeka No. 10, Bandung",
        phone="022-1234567",
        email="sales@sinarjaya.co.id",
        npwp="01.234.567.8-901.000",
    )


@pytest.fixture
def sample_item(catalog_service):
    """Create a catalog item priced at 1,000."""
    return catalog_service.create_item(
        code="BRG-001", name="Kertas A4", item_type="item", unit_price=Decimal("1000")
    )


@pytest.fixture
def sample_service_item(catalog_service):
    """Create a catalog service priced at 250,000."""
    return catalog_service.create_item(
        code="JSA-001", name="Instalasi Jaringan", item_type="service", unit_price=Decimal("250000")
    )


@pytest.fixture
def sample_transaction(transaction_service, sample_item):
    """Create a draft transaction: one line of 1,000 with PPN."""
    return transaction_service.create_transaction(
        customer_name="PT Maju Bersama",
        items=[LineItemInput(catalog_item_id=sample_item.id, quantity=Decimal("1"), unit_price=Decimal("1000"))],
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
