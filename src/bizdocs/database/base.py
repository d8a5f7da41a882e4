"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence
from datetime import datetime
from decimal import Decimal

# Import modules directly to avoid pulling services in through domain/__init__.py
from bizdocs.domain.entities import (
    UNSET,
    CatalogItem,
    Document,
    DocumentType,
    ItemType,
    NewTransactionLine,
    StoreProfile,
    Transaction,
    TransactionChanges,
    TransactionLine,
    TransactionStatus,
)
from bizdocs.domain.tax import TaxBreakdown


class Database(ABC):
    """Abstract database interface for bizdocs."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Store profile operations
    @abstractmethod
    def create_store_profile(self, name: str, address: str, phone: str, email: str, npwp: str) -> int:
        """Create a store profile. Returns profile ID."""
        pass

    @abstractmethod
    def get_store_profile(self, profile_id: int) -> Optional[StoreProfile]:
        """Get store profile by ID."""
        pass

    @abstractmethod
    def get_first_store_profile(self) -> Optional[StoreProfile]:
        """Get the earliest created store profile."""
        pass

    @abstractmethod
    def update_store_profile(
        self,
        profile_id: int,
        name: Optional[str] = None,
        address: Optional[str] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        npwp: Optional[str] = None,
    ) -> None:
        """Update store profile fields that are not None."""
        pass

    # Catalog operations
    @abstractmethod
    def create_catalog_item(
        self,
        code: str,
        name: str,
        item_type: ItemType,
        unit_price: Decimal,
        description: Optional[str] = None,
    ) -> int:
        """Create a catalog item. Returns item ID."""
        pass

    @abstractmethod
    def get_catalog_item(self, item_id: int) -> Optional[CatalogItem]:
        """Get catalog item by ID."""
        pass

    @abstractmethod
    def get_catalog_item_by_code(self, code: str) -> Optional[CatalogItem]:
        """Get catalog item by its unique code."""
        pass

    @abstractmethod
    def list_catalog_items(
        self,
        query: Optional[str] = None,
        item_type: Optional[ItemType] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[CatalogItem]:
        """List catalog items, optionally filtered by code/name text and type."""
        pass

    @abstractmethod
    def update_catalog_item(
        self,
        item_id: int,
        code=UNSET,
        name=UNSET,
        item_type=UNSET,
        unit_price=UNSET,
        description=UNSET,
    ) -> None:
        """Update the catalog item fields that were supplied."""
        pass

    @abstractmethod
    def delete_catalog_item(self, item_id: int) -> bool:
        """Delete a catalog item. Returns True if a row was removed."""
        pass

    @abstractmethod
    def count_lines_for_catalog_item(self, item_id: int) -> int:
        """Count transaction lines referencing a catalog item."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        customer_name: str,
        taxes: TaxBreakdown,
        lines: Sequence[NewTransactionLine],
        number_for: Callable[[int], str],
        customer_address: Optional[str] = None,
        customer_phone: Optional[str] = None,
        customer_email: Optional[str] = None,
        notes: Optional[str] = None,
        transaction_date: Optional[datetime] = None,
    ) -> int:
        """Create a transaction header and its lines atomically. Returns transaction ID.

        ``number_for`` receives the allocated ID and returns the transaction number.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transaction_lines(self, transaction_id: int) -> list[TransactionLine]:
        """List lines of a transaction in creation order."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        status: Optional[TransactionStatus] = None,
        customer_name: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest transaction_date first.

        Args:
            status: Optional status filter
            customer_name: Optional case-insensitive substring of the customer name
            date_from: Optional inclusive lower bound on transaction_date
            date_to: Optional inclusive upper bound on transaction_date
            limit: Maximum rows returned
            offset: Rows skipped
        """
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        build_changes: Callable[[Transaction, list[TransactionLine]], TransactionChanges],
    ) -> None:
        """Compute and write a transaction's changes atomically.

        ``build_changes`` receives the current transaction and its lines read
        inside the same database transaction as the write. The write must not
        apply if the row changed after that read.

        Raises:
            NotFoundError: If the transaction doesn't exist
            ConflictError: If the row changed between the read and the write
        """
        pass

    @abstractmethod
    def delete_transaction(
        self, transaction_id: int, required_status: Optional[TransactionStatus] = None
    ) -> bool:
        """Delete a transaction with its lines and documents. Returns True if removed.

        Raises:
            PreconditionFailedError: If ``required_status`` is given and the
                row is in another status
        """
        pass

    # Document operations
    @abstractmethod
    def create_document(
        self,
        transaction_id: int,
        document_type: DocumentType,
        document_date: datetime,
        render: Callable[[int], tuple[str, str]],
        recipient_name: Optional[str] = None,
        custom_notes: Optional[str] = None,
    ) -> int:
        """Create a document atomically. Returns document ID.

        ``render`` receives the allocated ID and returns
        ``(document_number, html_content)``.
        """
        pass

    @abstractmethod
    def get_document(self, document_id: int) -> Optional[Document]:
        """Get document by ID."""
        pass

    @abstractmethod
    def list_documents(self, transaction_id: int) -> list[Document]:
        """List documents of a transaction in creation order."""
        pass
