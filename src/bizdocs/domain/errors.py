"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PreconditionFailedError(DomainError):
    """Operation is not allowed in the entity's current state."""


class DependencyError(PreconditionFailedError):
    """Operation blocked due to dependent domain data."""


class PersistenceTimeoutError(DomainError):
    """The database did not answer within the configured bound."""


class UnavailableError(DomainError):
    """The database could not be reached or failed to execute."""


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction with id {transaction_id} not found"


def catalog_item_not_found(item_id: int) -> str:
    """Return message for missing catalog item."""
    return f"Catalog item with id {item_id} not found"


def document_not_found(document_id: int) -> str:
    """Return message for missing document."""
    return f"Document with id {document_id} not found"


def store_profile_not_found(profile_id: int | None = None) -> str:
    """Return message for missing store profile."""
    if profile_id is None:
        return "Store profile not found"
    return f"Store profile with id {profile_id} not found"


def duplicate_catalog_code(code: str) -> str:
    """Return message for duplicate catalog item code."""
    return f"Catalog item with code '{code}' already exists"


def no_items_for_transaction(transaction_id: int) -> str:
    """Return message when a transaction has no line items."""
    return f"No items found for transaction {transaction_id}"


def transaction_delete_blocked(transaction_id: int, status: str) -> str:
    """Return message when a non-draft transaction is deleted."""
    return (
        f"Cannot delete transaction {transaction_id}: status is '{status}'. "
        "Only draft transactions can be deleted."
    )


def invalid_status_transition(current: str, requested: str) -> str:
    """Return message for a forbidden status change."""
    return f"Cannot change transaction status from '{current}' to '{requested}'"


def catalog_item_delete_blocked(item_id: int, line_count: int) -> str:
    """Return message when a catalog item is still referenced by transaction lines."""
    return (
        f"Cannot delete catalog item {item_id}: it is used by "
        f"{line_count} transaction line{'s' if line_count != 1 else ''}."
    )


def transaction_changed_concurrently(transaction_id: int) -> str:
    """Return message when a transaction changed between reading and writing it."""
    return f"Transaction {transaction_id} was modified by another session; reload and retry"
