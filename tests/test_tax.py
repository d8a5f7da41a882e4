"""Tests for the tax engine."""

from decimal import Decimal

import pytest

from bizdocs.domain.errors import ValidationError
from bizdocs.domain.tax import DEFAULT_TAX_RATES, TaxFlags, TaxRates, calculate_taxes, percent_label


def test_ppn_only():
    """Test the default flags apply 11% PPN."""
    result = calculate_taxes(Decimal("2000"), TaxFlags())

    assert result.subtotal == Decimal("2000.00")
    assert result.ppn_enabled is True
    assert result.ppn_amount == Decimal("220.00")
    assert result.regional_tax_amount == Decimal("0.00")
    assert result.pph22_amount == Decimal("0.00")
    assert result.pph23_amount == Decimal("0.00")
    assert result.stamp_duty_required is False
    assert result.stamp_duty_amount == Decimal("0.00")
    assert result.total_amount == Decimal("2220.00")


def test_no_taxes():
    """Test all flags off leaves the subtotal untouched."""
    result = calculate_taxes(Decimal("1234.56"), TaxFlags(ppn_enabled=False))

    assert result.ppn_amount == Decimal("0.00")
    assert result.total_amount == Decimal("1234.56")


def test_all_taxes_withholding_is_subtracted():
    """Test PPh 22 and PPh 23 are deducted from the total."""
    flags = TaxFlags(ppn_enabled=True, regional_tax_enabled=True, pph22_enabled=True, pph23_enabled=True)
    result = calculate_taxes(Decimal("10000"), flags)

    assert result.ppn_amount == Decimal("1100.00")
    assert result.regional_tax_amount == Decimal("1000.00")
    assert result.pph22_amount == Decimal("200.00")
    assert result.pph23_amount == Decimal("200.00")
    # 10000 + 1100 + 1000 - 200 - 200
    assert result.total_amount == Decimal("11700.00")


def test_stamp_duty_applies_at_threshold():
    """Test stamp duty when the pre-stamp total equals the threshold."""
    result = calculate_taxes(Decimal("5000000"), TaxFlags(ppn_enabled=False))

    assert result.stamp_duty_required is True
    assert result.stamp_duty_amount == Decimal("10000.00")
    assert result.total_amount == Decimal("5010000.00")


def test_stamp_duty_not_applied_below_threshold():
    """Test no stamp duty one cent below the threshold."""
    result = calculate_taxes(Decimal("4999999.99"), TaxFlags(ppn_enabled=False))

    assert result.stamp_duty_required is False
    assert result.total_amount == Decimal("4999999.99")


def test_stamp_duty_threshold_includes_ppn():
    """Test PPN can push the total over the threshold."""
    result = calculate_taxes(Decimal("4600000"), TaxFlags())

    # 4,600,000 + 506,000 = 5,106,000
    assert result.stamp_duty_required is True
    assert result.total_amount == Decimal("5116000.00")


def test_stamp_duty_threshold_after_withholding():
    """Test withholding can pull the total under the threshold."""
    flags = TaxFlags(ppn_enabled=False, pph23_enabled=True)
    result = calculate_taxes(Decimal("5050000"), flags)

    # 5,050,000 - 101,000 = 4,949,000
    assert result.stamp_duty_required is False
    assert result.total_amount == Decimal("4949000.00")


def test_total_matches_reconstruction():
    """Test the total equals the sum of its components."""
    flags = TaxFlags(regional_tax_enabled=True, pph23_enabled=True)
    for subtotal in ("0", "0.01", "999.99", "4504504.50", "12345678.91"):
        result = calculate_taxes(Decimal(subtotal), flags)
        assert result.total_amount == result.reconstruct_total()


def test_tax_amounts_round_half_up():
    """Test each tax amount is rounded to cents."""
    # 0.05 * 0.11 = 0.0055 -> 0.01
    result = calculate_taxes(Decimal("0.05"), TaxFlags())

    assert result.ppn_amount == Decimal("0.01")


def test_custom_rates():
    """Test calculations follow the supplied rate table."""
    rates = TaxRates(ppn_rate=Decimal("0.12"), stamp_duty_threshold=Decimal("1000"))
    result = calculate_taxes(Decimal("1000"), TaxFlags(), rates)

    assert result.ppn_amount == Decimal("120.00")
    assert result.stamp_duty_required is True
    assert result.total_amount == Decimal("11120.00")


def test_rates_from_env_defaults():
    """Test an empty environment gives the default table."""
    assert TaxRates.from_env({}) == DEFAULT_TAX_RATES


def test_rates_from_env_overrides():
    """Test rates are read from environment variables."""
    rates = TaxRates.from_env({"BIZDOCS_PPN_RATE": "0.12", "BIZDOCS_PPH22_RATE": "0.015"})

    assert rates.ppn_rate == Decimal("0.12")
    assert rates.pph22_rate == Decimal("0.015")
    assert rates.pph23_rate == DEFAULT_TAX_RATES.pph23_rate


def test_rates_from_env_rejects_bad_values():
    """Test invalid environment values are reported."""
    with pytest.raises(ValidationError, match="BIZDOCS_PPN_RATE"):
        TaxRates.from_env({"BIZDOCS_PPN_RATE": "eleven"})
    with pytest.raises(ValidationError, match="must not be negative"):
        TaxRates.from_env({"BIZDOCS_STAMP_DUTY_AMOUNT": "-1"})
    with pytest.raises(ValidationError, match="at most 6 decimal places"):
        TaxRates.from_env({"BIZDOCS_PPH22_RATE": "0.0000001"})


def test_percent_label():
    """Test rate labels for documents."""
    assert percent_label(Decimal("0.11")) == "11%"
    assert percent_label(Decimal("0.100000")) == "10%"
    assert percent_label(Decimal("0.015")) == "1.5%"
    assert percent_label(Decimal("0")) == "0%"


def test_breakdown_keeps_the_rates_used():
    """Test the breakdown records the rates behind its amounts."""
    rates = TaxRates(ppn_rate=Decimal("0.12"), pph22_rate=Decimal("0.015"))

    result = calculate_taxes(Decimal("1000"), TaxFlags(pph22_enabled=True), rates)

    assert result.ppn_rate == Decimal("0.12")
    assert result.pph22_rate == Decimal("0.015")
    assert result.regional_tax_rate == Decimal("0.10")
    columns = result.columns()
    assert columns["ppn_amount"] == Decimal("120.00")
    assert columns["pph22_amount"] == Decimal("15.00")
    assert columns["total_amount"] == Decimal("1105.00")
