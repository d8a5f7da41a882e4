"""Currency formatting in the Indonesian convention (``1.234.567,89``)."""

from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOL = "Rp"


def format_number(amount: Decimal, places: int = 2) -> str:
    """Format a number with dot thousands separators and a decimal comma.

    Args:
        amount: Value to format
        places: Digits after the decimal comma

    Returns:
        Formatted string, e.g. ``1.110,00``
    """
    exponent = Decimal(1).scaleb(-places)
    value = Decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.{places}f}"
    # Swap the separators from the en-US layout
    swapped = grouped.replace(",", "\0").replace(".", ",").replace("\0", ".")
    return f"{sign}{swapped}"


def format_currency(amount: Decimal, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format an amount with the currency symbol, e.g. ``Rp 1.110,00``."""
    return f"{symbol} {format_number(amount)}"


def format_quantity(quantity: Decimal) -> str:
    """Format a quantity without trailing zeros, e.g. ``2`` or ``1,5``."""
    value = Decimal(quantity).normalize()
    if value == value.to_integral_value():
        value = value.quantize(Decimal(1))
    places = max(-value.as_tuple().exponent, 0)
    return format_number(value, places)
