"""Line pricing for transactions."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Sequence

CENT = Decimal("0.01")
QUANTITY_STEP = Decimal("0.001")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """Convert an int, float, str or Decimal to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize_money(amount: Decimal) -> Decimal:
    """Round an amount to two decimal places, half up."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def quantize_quantity(quantity: Decimal) -> Decimal:
    """Round a quantity to three decimal places, half up."""
    return to_decimal(quantity).quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LineItemInput:
    """Requested line for a new transaction."""

    catalog_item_id: int
    quantity: Decimal
    unit_price: Decimal
    discount_percentage: Decimal = Decimal("0")


@dataclass(frozen=True)
class PricedLine:
    """Line with its computed total."""

    catalog_item_id: int
    quantity: Decimal
    unit_price: Decimal
    discount_percentage: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class PricingResult:
    """Priced lines in input order and their subtotal."""

    lines: tuple[PricedLine, ...]
    subtotal: Decimal


def calculate_line_total(quantity: Decimal, unit_price: Decimal, discount_percentage: Decimal) -> Decimal:
    """Return ``quantity * unit_price * (1 - discount_percentage / 100)`` in cents."""
    factor = Decimal(1) - to_decimal(discount_percentage) / HUNDRED
    return quantize_money(to_decimal(quantity) * to_decimal(unit_price) * factor)


def subtotal_of(line_totals: Iterable[Decimal]) -> Decimal:
    """Sum already computed line totals."""
    return quantize_money(sum((to_decimal(total) for total in line_totals), Decimal("0")))


def price_lines(items: Sequence[LineItemInput]) -> PricingResult:
    """Price every line and aggregate the subtotal.

    Args:
        items: Validated line inputs

    Returns:
        PricingResult with one PricedLine per input, order preserved
    """
    lines = tuple(
        PricedLine(
            catalog_item_id=item.catalog_item_id,
            quantity=to_decimal(item.quantity),
            unit_price=to_decimal(item.unit_price),
            discount_percentage=to_decimal(item.discount_percentage),
            line_total=calculate_line_total(item.quantity, item.unit_price, item.discount_percentage),
        )
        for item in items
    )
    return PricingResult(lines=lines, subtotal=subtotal_of(line.line_total for line in lines))
