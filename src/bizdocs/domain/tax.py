"""Tax engine: PPN, regional tax, PPh 22/23 withholding and stamp duty.

All rates live in one ``TaxRates`` table shared by every code path that
computes taxes. Withholding taxes (PPh 22 and PPh 23) are withheld by the
payer, so they are subtracted from the total, and the stamp-duty threshold is
tested against the total after withholding.
"""

import os
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from bizdocs.domain.errors import ValidationError
from bizdocs.domain.pricing import quantize_money, to_decimal

ZERO = Decimal("0.00")
# Stored rates keep six decimal places
RATE_PLACES = 6


@dataclass(frozen=True)
class TaxRates:
    """Authoritative rate table."""

    ppn_rate: Decimal = Decimal("0.11")
    regional_tax_rate: Decimal = Decimal("0.10")
    pph22_rate: Decimal = Decimal("0.02")
    pph23_rate: Decimal = Decimal("0.02")
    stamp_duty_threshold: Decimal = Decimal("5000000")
    stamp_duty_amount: Decimal = Decimal("10000")

    ENV_VARS = {
        "ppn_rate": "BIZDOCS_PPN_RATE",
        "regional_tax_rate": "BIZDOCS_REGIONAL_TAX_RATE",
        "pph22_rate": "BIZDOCS_PPH22_RATE",
        "pph23_rate": "BIZDOCS_PPH23_RATE",
        "stamp_duty_threshold": "BIZDOCS_STAMP_DUTY_THRESHOLD",
        "stamp_duty_amount": "BIZDOCS_STAMP_DUTY_AMOUNT",
    }

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "TaxRates":
        """Build a rate table, overriding defaults from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Raises:
            ValidationError: If a variable is not a non-negative decimal
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for field_name, var_name in cls.ENV_VARS.items():
            raw = environ.get(var_name)
            if raw is None or raw.strip() == "":
                continue
            try:
                value = Decimal(raw.strip())
            except InvalidOperation:
                raise ValidationError(f"{var_name} must be a decimal number, got '{raw}'")
            if not value.is_finite():
                raise ValidationError(f"{var_name} must be a finite number, got '{raw}'")
            if value < 0:
                raise ValidationError(f"{var_name} must not be negative, got '{raw}'")
            if field_name.endswith("_rate") and value.normalize().as_tuple().exponent < -RATE_PLACES:
                raise ValidationError(f"{var_name} allows at most {RATE_PLACES} decimal places, got '{raw}'")
            overrides[field_name] = value
        return cls(**overrides)


def percent_label(rate: Decimal) -> str:
    """Format a rate as a percentage label, e.g. ``11%`` or ``1.5%``."""
    percent = (rate * 100).normalize()
    return f"{format(percent, 'f')}%"


DEFAULT_TAX_RATES = TaxRates()


@dataclass(frozen=True)
class TaxFlags:
    """Which taxes apply to a transaction."""

    ppn_enabled: bool = True
    regional_tax_enabled: bool = False
    pph22_enabled: bool = False
    pph23_enabled: bool = False


@dataclass(frozen=True)
class TaxBreakdown:
    """Computed tax amounts and grand total for one subtotal.

    The rates used are kept with the amounts so documents can label each
    amount with the rate that produced it.
    """

    subtotal: Decimal
    ppn_enabled: bool
    ppn_rate: Decimal
    ppn_amount: Decimal
    regional_tax_enabled: bool
    regional_tax_rate: Decimal
    regional_tax_amount: Decimal
    pph22_enabled: bool
    pph22_rate: Decimal
    pph22_amount: Decimal
    pph23_enabled: bool
    pph23_rate: Decimal
    pph23_amount: Decimal
    stamp_duty_required: bool
    stamp_duty_amount: Decimal
    total_amount: Decimal

    @property
    def total_before_stamp_duty(self) -> Decimal:
        return pre_stamp_total(
            self.subtotal, self.ppn_amount, self.regional_tax_amount, self.pph22_amount, self.pph23_amount
        )

    def reconstruct_total(self) -> Decimal:
        """Recompute the total from the component amounts."""
        return self.total_before_stamp_duty + self.stamp_duty_amount

    def columns(self) -> dict[str, object]:
        """Return the breakdown as transaction column values."""
        return asdict(self)


def pre_stamp_total(
    subtotal: Decimal,
    ppn_amount: Decimal,
    regional_tax_amount: Decimal,
    pph22_amount: Decimal,
    pph23_amount: Decimal,
) -> Decimal:
    """Total before stamp duty; withholding taxes are deductions."""
    return subtotal + ppn_amount + regional_tax_amount - pph22_amount - pph23_amount


def _tax(subtotal: Decimal, enabled: bool, rate: Decimal) -> Decimal:
    if not enabled:
        return ZERO
    return quantize_money(subtotal * rate)


def calculate_taxes(
    subtotal: Decimal, flags: TaxFlags, rates: TaxRates = DEFAULT_TAX_RATES
) -> TaxBreakdown:
    """Apply the tax stack to a subtotal.

    Args:
        subtotal: Sum of line totals
        flags: Enabled taxes
        rates: Rate table

    Returns:
        TaxBreakdown whose total equals its reconstructed total
    """
    subtotal = quantize_money(to_decimal(subtotal))
    ppn_amount = _tax(subtotal, flags.ppn_enabled, rates.ppn_rate)
    regional_tax_amount = _tax(subtotal, flags.regional_tax_enabled, rates.regional_tax_rate)
    pph22_amount = _tax(subtotal, flags.pph22_enabled, rates.pph22_rate)
    pph23_amount = _tax(subtotal, flags.pph23_enabled, rates.pph23_rate)

    before_stamp = pre_stamp_total(subtotal, ppn_amount, regional_tax_amount, pph22_amount, pph23_amount)
    stamp_duty_required = before_stamp >= rates.stamp_duty_threshold
    stamp_duty_amount = quantize_money(rates.stamp_duty_amount) if stamp_duty_required else ZERO

    return TaxBreakdown(
        subtotal=subtotal,
        ppn_enabled=flags.ppn_enabled,
        ppn_rate=rates.ppn_rate,
        ppn_amount=ppn_amount,
        regional_tax_enabled=flags.regional_tax_enabled,
        regional_tax_rate=rates.regional_tax_rate,
        regional_tax_amount=regional_tax_amount,
        pph22_enabled=flags.pph22_enabled,
        pph22_rate=rates.pph22_rate,
        pph22_amount=pph22_amount,
        pph23_enabled=flags.pph23_enabled,
        pph23_rate=rates.pph23_rate,
        pph23_amount=pph23_amount,
        stamp_duty_required=stamp_duty_required,
        stamp_duty_amount=stamp_duty_amount,
        total_amount=before_stamp + stamp_duty_amount,
    )
