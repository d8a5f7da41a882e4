"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str, decimal_comma: bool = False) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "Rp 123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "1.234,56" when ``decimal_comma`` is True

    Args:
        amount_str: Amount string
        decimal_comma: Treat "," as the decimal mark and "." as the thousands separator

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"(?i)rp\.?|[$€£¥]", "", amount_str)

    if decimal_comma:
        amount_str = amount_str.replace(".", "").replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    # Remove whitespace again
    amount_str = amount_str.strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    if is_negative:
        amount = -amount
    return amount


def parse_percentage(percent_str: str) -> Decimal:
    """Parse a percentage such as "10", "12.5" or "10%" into a Decimal in 0-100.

    Raises:
        ValueError: If the value cannot be parsed or is out of range
    """
    value = parse_amount(percent_str.strip().rstrip("%"))
    if value < 0 or value > 100:
        raise ValueError(f"Percentage must be between 0 and 100, got {value}")
    return value


def parse_price(price_str: str) -> Decimal:
    """Parse a price typed on the command line.

    A price written with the ``Rp`` prefix follows the Indonesian layout the
    application prints ("Rp 1.500" is fifteen hundred, "Rp 1.500,50" has
    cents). Without the prefix the amount is read like ``parse_amount``.

    Raises:
        ValueError: If price string cannot be parsed
    """
    rupiah = re.match(r"(?i)\s*\(?\s*rp(?![a-z])", price_str or "") is not None
    return parse_amount(price_str, decimal_comma=rupiah)
