"""Document generation domain service."""

from datetime import date, datetime, UTC
from typing import Callable, Optional, Union

from bizdocs.database.base import Database
from bizdocs.domain.entities import Document as DocumentEntity, DocumentType
from bizdocs.domain.errors import (
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
    no_items_for_transaction,
    store_profile_not_found,
    transaction_not_found,
)
from bizdocs.domain.rendering import DocumentContext, format_document_number, render_document_html
from bizdocs.domain.validation import optional_text
from bizdocs.logging_config import get_logger
from bizdocs.utils.date_parser import to_datetime

logger = get_logger("document")


def parse_document_type(value: Union[str, DocumentType]) -> DocumentType:
    """Coerce a document type name into DocumentType."""
    try:
        return DocumentType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in DocumentType)
        raise ValidationError(f"Unknown document type '{value}'. Expected one of: {allowed}")


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class DocumentService:
    """Service for generating and reading transaction documents."""

    def __init__(
        self,
        db: Database,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize document service.

        Args:
            db: Database instance
            clock: Source of the current time (document year and default date)
        """
        self.db = db
        self.clock = clock

    def generate_document(
        self,
        transaction_id: int,
        document_type: Union[str, DocumentType],
        document_date: Union[date, datetime, None] = None,
        recipient_name: Optional[str] = None,
        custom_notes: Optional[str] = None,
    ) -> DocumentEntity:
        """Render and store a new document for a transaction.

        Every call creates a new document row with its own number, even for a
        type that was generated before.

        Args:
            transaction_id: Source transaction
            document_type: One of the DocumentType values
            document_date: Date printed on the document; defaults to now
            recipient_name: Optional recipient printed on the document
            custom_notes: Optional notes printed on the document

        Returns:
            The stored document

        Raises:
            ValidationError: If the type is unknown or the transaction has no items
            NotFoundError: If transaction doesn't exist
            PreconditionFailedError: If no store profile exists
        """
        document_type = parse_document_type(document_type)

        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        lines = self.db.list_transaction_lines(transaction_id)
        if not lines:
            raise ValidationError(no_items_for_transaction(transaction_id))

        store = self.db.get_first_store_profile()
        if store is None:
            raise PreconditionFailedError(store_profile_not_found())

        now = self.clock()
        printed_date = to_datetime(document_date) or now
        recipient_name = optional_text(recipient_name)
        custom_notes = optional_text(custom_notes)

        def render(document_id: int) -> tuple[str, str]:
            number = format_document_number(document_type, now.year, document_id)
            html_content = render_document_html(
                DocumentContext(
                    document_type=document_type,
                    document_number=number,
                    document_date=printed_date,
                    store=store,
                    transaction=transaction,
                    lines=lines,
                    recipient_name=recipient_name,
                    custom_notes=custom_notes,
                )
            )
            return number, html_content

        document_id = self.db.create_document(
            transaction_id=transaction_id,
            document_type=document_type,
            document_date=printed_date,
            render=render,
            recipient_name=recipient_name,
            custom_notes=custom_notes,
        )
        document = self.db.get_document(document_id)
        logger.info(
            "Generated %s %s for transaction %s",
            document_type.value,
            document.document_number,
            transaction.transaction_number,
        )
        return document

    def get_document(self, document_id: int) -> Optional[DocumentEntity]:
        """Get document by ID.

        Returns:
            Document entity or None if not found
        """
        return self.db.get_document(document_id)

    def get_documents_by_transaction(self, transaction_id: int) -> list[DocumentEntity]:
        """List documents generated for a transaction, oldest first."""
        return self.db.list_documents(transaction_id)
