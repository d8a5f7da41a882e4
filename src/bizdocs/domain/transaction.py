"""Transaction domain service."""

from collections.abc import Mapping
from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Sequence, Union

from bizdocs.database.base import Database
from bizdocs.domain.entities import (
    NewTransactionLine,
    Transaction as TransactionEntity,
    TransactionChanges,
    TransactionLine,
    TransactionPatch,
    TransactionStatus,
)
from bizdocs.domain.errors import (
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
    catalog_item_not_found,
    invalid_status_transition,
    transaction_not_found,
)
from bizdocs.domain.pricing import LineItemInput, price_lines, quantize_money, quantize_quantity, subtotal_of
from bizdocs.domain.tax import TaxFlags, TaxRates, calculate_taxes
from bizdocs.domain.validation import check_email, decimal_value, optional_text, require_text
from bizdocs.logging_config import get_logger
from bizdocs.utils.date_parser import to_datetime

logger = get_logger("transaction")

MAX_HISTORY_LIMIT = 100

TAX_FLAG_FIELDS = ("ppn_enabled", "regional_tax_enabled", "pph22_enabled", "pph23_enabled")

# Allowed status changes; staying in the same status is always allowed
STATUS_TRANSITIONS = {
    TransactionStatus.DRAFT: {TransactionStatus.CONFIRMED, TransactionStatus.CANCELLED},
    TransactionStatus.CONFIRMED: {TransactionStatus.PAID, TransactionStatus.CANCELLED},
    TransactionStatus.PAID: {TransactionStatus.CANCELLED},
    TransactionStatus.CANCELLED: set(),
}


def format_transaction_number(transaction_id: int, year: int) -> str:
    """Build the transaction number from the row identity, e.g. ``TRX-2024-000042``."""
    return f"TRX-{year}-{transaction_id:06d}"


def parse_status(value: Union[str, TransactionStatus]) -> TransactionStatus:
    """Coerce a status name into TransactionStatus."""
    try:
        return TransactionStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in TransactionStatus)
        raise ValidationError(f"Unknown status '{value}'. Expected one of: {allowed}")


def _flag(field: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be true or false")
    return value


def _scaled(field: str, value: Any, quantize: Callable[[Decimal], Decimal]) -> Decimal:
    number = decimal_value(field, value)
    try:
        return quantize(number)
    except InvalidOperation:
        raise ValidationError(f"{field} is out of range, got {value!r}")


class TransactionService:
    """Service for managing transactions and their tax snapshot."""

    def __init__(self, db: Database, tax_rates: Optional[TaxRates] = None):
        """Initialize transaction service.

        Args:
            db: Database instance
            tax_rates: Rate table; defaults to TaxRates.from_env()
        """
        self.db = db
        self.tax_rates = tax_rates if tax_rates is not None else TaxRates.from_env()

    def _validate_items(self, items: Sequence[Union[LineItemInput, Mapping]]) -> list[LineItemInput]:
        """Normalize and range-check requested lines.

        Values are rounded half up to the stored precision (quantity to
        0.001, price and discount to 0.01) before pricing, so persisted lines
        always satisfy their own line total.
        """
        if not items:
            raise ValidationError("A transaction needs at least one item")

        validated = []
        for position, item in enumerate(items, start=1):
            if isinstance(item, Mapping):
                if "catalog_item_id" not in item:
                    raise ValidationError(f"Item {position}: catalog_item_id is required")
                item = LineItemInput(
                    catalog_item_id=item["catalog_item_id"],
                    quantity=item.get("quantity"),
                    unit_price=item.get("unit_price"),
                    discount_percentage=item.get("discount_percentage", 0),
                )
            quantity = _scaled(f"Item {position} quantity", item.quantity, quantize_quantity)
            unit_price = _scaled(f"Item {position} unit_price", item.unit_price, quantize_money)
            discount = _scaled(f"Item {position} discount_percentage", item.discount_percentage, quantize_money)
            if quantity <= 0:
                raise ValidationError(f"Item {position}: quantity must be greater than 0 (smallest is 0.001)")
            if unit_price <= 0:
                raise ValidationError(f"Item {position}: unit_price must be greater than 0 (smallest is 0.01)")
            if discount < 0 or discount > 100:
                raise ValidationError(f"Item {position}: discount_percentage must be between 0 and 100")
            validated.append(
                LineItemInput(
                    catalog_item_id=item.catalog_item_id,
                    quantity=quantity,
                    unit_price=unit_price,
                    discount_percentage=discount,
                )
            )
        return validated

    def create_transaction(
        self,
        customer_name: str,
        items: Sequence[Union[LineItemInput, Mapping]],
        customer_address: Optional[str] = None,
        customer_phone: Optional[str] = None,
        customer_email: Optional[str] = None,
        ppn_enabled: bool = True,
        regional_tax_enabled: bool = False,
        pph22_enabled: bool = False,
        pph23_enabled: bool = False,
        notes: Optional[str] = None,
        transaction_date: Union[date, datetime, None] = None,
    ) -> TransactionEntity:
        """Create a draft transaction with its lines and computed taxes.

        Args:
            customer_name: Customer name (required)
            items: At least one line (LineItemInput or mapping with the same keys)
            customer_address: Optional address
            customer_phone: Optional phone
            customer_email: Optional email
            ppn_enabled: Apply VAT
            regional_tax_enabled: Apply regional tax
            pph22_enabled: Withhold PPh 22
            pph23_enabled: Withhold PPh 23
            notes: Optional notes
            transaction_date: Business date; defaults to now

        Returns:
            The persisted transaction

        Raises:
            ValidationError: If input is malformed
            NotFoundError: If a referenced catalog item doesn't exist
        """
        customer_name = require_text("customer_name", customer_name)
        customer_email = check_email("customer_email", customer_email)
        flags = TaxFlags(
            ppn_enabled=_flag("ppn_enabled", ppn_enabled),
            regional_tax_enabled=_flag("regional_tax_enabled", regional_tax_enabled),
            pph22_enabled=_flag("pph22_enabled", pph22_enabled),
            pph23_enabled=_flag("pph23_enabled", pph23_enabled),
        )
        line_inputs = self._validate_items(items)

        # Verify catalog items exist before anything is written
        catalog = {}
        for line in line_inputs:
            if line.catalog_item_id in catalog:
                continue
            catalog_item = self.db.get_catalog_item(line.catalog_item_id)
            if catalog_item is None:
                raise NotFoundError(catalog_item_not_found(line.catalog_item_id))
            catalog[line.catalog_item_id] = catalog_item

        pricing = price_lines(line_inputs)
        taxes = calculate_taxes(pricing.subtotal, flags, self.tax_rates)

        business_date = to_datetime(transaction_date) or datetime.now(UTC).replace(tzinfo=None)
        new_lines = [
            NewTransactionLine(
                catalog_item_id=priced.catalog_item_id,
                item_code=catalog[priced.catalog_item_id].code,
                item_name=catalog[priced.catalog_item_id].name,
                quantity=priced.quantity,
                unit_price=priced.unit_price,
                discount_percentage=priced.discount_percentage,
                line_total=priced.line_total,
            )
            for priced in pricing.lines
        ]

        transaction_id = self.db.create_transaction(
            customer_name=customer_name,
            taxes=taxes,
            lines=new_lines,
            number_for=lambda new_id: format_transaction_number(new_id, business_date.year),
            customer_address=optional_text(customer_address),
            customer_phone=optional_text(customer_phone),
            customer_email=customer_email,
            notes=optional_text(notes),
            transaction_date=business_date,
        )
        logger.info(
            "Created transaction %s: subtotal=%s total=%s lines=%d",
            transaction_id,
            taxes.subtotal,
            taxes.total_amount,
            len(new_lines),
        )
        return self.db.get_transaction(transaction_id)

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def get_transaction_lines(self, transaction_id: int) -> list[TransactionLine]:
        """Get the lines of a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return self.db.list_transaction_lines(transaction_id)

    def update_transaction(self, transaction_id: int, patch: TransactionPatch) -> TransactionEntity:
        """Apply a patch to a transaction.

        Supplied tax flags are merged with the stored ones and every tax amount
        is recomputed from the transaction's persisted lines. Lines themselves
        cannot be changed here. The status check, the tax recomputation and
        the write happen in one database transaction, and the write only lands
        if the row is still in the state that was checked.

        Args:
            transaction_id: Transaction ID to update
            patch: Fields to change

        Returns:
            The updated transaction

        Raises:
            NotFoundError: If transaction doesn't exist
            ValidationError: If a supplied value is malformed
            PreconditionFailedError: If the status change is not allowed
            ConflictError: If another session changed the transaction meanwhile
        """
        values = patch.present()
        fixed: dict[str, Any] = {}

        if "customer_name" in values:
            fixed["customer_name"] = require_text("customer_name", values["customer_name"])
        for field in ("customer_address", "customer_phone", "notes"):
            if field in values:
                fixed[field] = optional_text(values[field])
        if "customer_email" in values:
            fixed["customer_email"] = check_email("customer_email", values["customer_email"])
        if "transaction_date" in values:
            if values["transaction_date"] is None:
                raise ValidationError("transaction_date cannot be cleared")
            fixed["transaction_date"] = to_datetime(values["transaction_date"])
        new_status = parse_status(values["status"]) if "status" in values else None
        for field in TAX_FLAG_FIELDS:
            if field in values:
                _flag(field, values[field])

        def build_changes(txn: TransactionEntity, lines: list[TransactionLine]) -> TransactionChanges:
            changes = dict(fixed)
            if new_status is not None:
                if new_status != txn.status and new_status not in STATUS_TRANSITIONS[txn.status]:
                    raise PreconditionFailedError(invalid_status_transition(txn.status.value, new_status.value))
                changes["status"] = new_status

            if patch.touches_taxes():
                flags = TaxFlags(**{field: values.get(field, getattr(txn, field)) for field in TAX_FLAG_FIELDS})
                taxes = calculate_taxes(subtotal_of(line.line_total for line in lines), flags, self.tax_rates)
                logger.debug(
                    "Recomputed taxes for transaction %s from %d stored lines: total %s -> %s",
                    transaction_id,
                    len(lines),
                    txn.total_amount,
                    taxes.total_amount,
                )
                changes.update(taxes.columns())

            changes["updated_at"] = datetime.now(UTC).replace(tzinfo=None)
            return TransactionChanges(**changes)

        self.db.update_transaction(transaction_id, build_changes)
        logger.info("Updated transaction %s: %s", transaction_id, ", ".join(sorted(values)) or "no fields")
        return self.db.get_transaction(transaction_id)

    def delete_transaction(self, transaction_id: int) -> bool:
        """Delete a draft transaction together with its lines and documents.

        The draft check is part of the delete statement itself, so a
        transaction confirmed by another session is never removed.

        Raises:
            NotFoundError: If transaction doesn't exist
            PreconditionFailedError: If transaction is not a draft
        """
        deleted = self.db.delete_transaction(transaction_id, required_status=TransactionStatus.DRAFT)
        if not deleted:
            raise NotFoundError(transaction_not_found(transaction_id))
        logger.info("Deleted transaction %s", transaction_id)
        return deleted

    def get_transaction_history(
        self,
        status: Union[str, TransactionStatus, None] = None,
        customer_name: Optional[str] = None,
        date_from: Union[date, datetime, None] = None,
        date_to: Union[date, datetime, None] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[TransactionEntity]:
        """List transactions, newest transaction date first.

        Args:
            status: Optional status filter
            customer_name: Optional case-insensitive part of the customer name
            date_from: Optional inclusive start (a plain date means start of day)
            date_to: Optional inclusive end (a plain date means end of day)
            limit: Page size, 1-100
            offset: Rows to skip

        Raises:
            ValidationError: If paging values or status are invalid
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_HISTORY_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_HISTORY_LIMIT}")
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            raise ValidationError("offset must not be negative")

        return self.db.list_transactions(
            status=parse_status(status) if status is not None else None,
            customer_name=optional_text(customer_name),
            date_from=to_datetime(date_from),
            date_to=to_datetime(date_to, end_of_day=True),
            limit=limit,
            offset=offset,
        )
