"""Input checks shared by the domain services."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from bizdocs.domain.errors import ValidationError
from bizdocs.domain.pricing import to_decimal

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_text(field: str, value: Optional[str]) -> str:
    """Return the stripped value, rejecting None and blank strings."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    """Strip a free-text value, mapping blank strings to None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def check_email(field: str, value: Optional[str]) -> Optional[str]:
    """Validate an optional email address."""
    value = optional_text(value)
    if value is not None and not _EMAIL_RE.match(value):
        raise ValidationError(f"{field} '{value}' is not a valid email address")
    return value


def decimal_value(field: str, value) -> Decimal:
    """Convert to Decimal, rejecting values that are not finite numbers."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        result = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number, got {value!r}")
    return result
