"""
Test suite for financial_math.

Covers the annuity formulas (EMI, loan term), simple and compound interest
with every compounding frequency, APY and the decimal helpers.

Formula references:
- EMI: P * r * (1 + r)^n / ((1 + r)^n - 1), r = annual % / 12 / 100
- Loan term: n = ceil(-ln(1 - r * P / A) / ln(1 + r))
- Simple: I = P * r * t
- Compound periodic: A = P * (1 + r/n)^(n*t)
- Compound continuous: A = P * e^(r*t)
- APY: (1 + r/n)^n - 1
"""
from decimal import Decimal

import pytest

from backend.app.schemas.common import CompoundFrequency
from backend.app.utils.financial_math import (
    annuity_payment,
    calculate_apy,
    calculate_compound_interest,
    calculate_simple_interest,
    compound_growth_factor,
    get_compounding_periods_per_year,
    loan_term_months,
    monthly_rate,
    parse_decimal_value,
    percent_of,
    round_money,
    )


# ============================================================================
# ROUNDING AND RATES
# ============================================================================

def test_round_money_half_up():
    assert round_money(Decimal("0.005")) == Decimal("0.01")
    assert round_money(Decimal("8055.9349")) == Decimal("8055.93")
    assert round_money(Decimal("-1.005")) == Decimal("-1.01")


def test_round_money_places():
    assert round_money(Decimal("12.68249"), 4) == Decimal("12.6825")
    assert round_money(Decimal("12.5"), 0) == Decimal("13")


def test_monthly_rate():
    assert monthly_rate(Decimal("7.5")) == Decimal("0.00625")
    assert monthly_rate(Decimal("0")) == Decimal("0")


def test_percent_of():
    assert percent_of(Decimal("1000"), Decimal("18")) == Decimal("180")


# ============================================================================
# ANNUITY
# ============================================================================

@pytest.mark.parametrize("principal, rate, months, expected", [
    ("1000000", "7.5", 240, "8055.93"),
    ("100000", "10", 12, "8791.59"),
    ("120000", "0", 12, "10000.00"),
    ])
def test_annuity_payment(principal, rate, months, expected):
    """EMI rounded to cents."""
    emi = round_money(annuity_payment(Decimal(principal), Decimal(rate), months))
    assert emi == Decimal(expected), f"Expected {expected}, got {emi}"


def test_annuity_payment_invalid_months():
    with pytest.raises(ValueError, match="positive"):
        annuity_payment(Decimal("1000"), Decimal("5"), 0)


def test_loan_term_matches_annuity():
    """Paying the rounded EMI repays the loan in the original tenure."""
    assert loan_term_months(Decimal("100000"), Decimal("10"), Decimal("8791.59")) == 12


def test_loan_term_rounds_up():
    """A slightly lower payment needs one more month."""
    assert loan_term_months(Decimal("100000"), Decimal("10"), Decimal("8700")) == 13


def test_loan_term_zero_rate():
    assert loan_term_months(Decimal("1000"), Decimal("0"), Decimal("300")) == 4


def test_loan_term_payment_below_interest():
    """1000000 at 12 % accrues 10000 per month: a 10000 payment never repays."""
    with pytest.raises(ValueError, match="too low"):
        loan_term_months(Decimal("1000000"), Decimal("12"), Decimal("10000"))


# ============================================================================
# SIMPLE AND COMPOUND INTEREST
# ============================================================================

def test_simple_interest():
    """€10,000 at 5% for 1 year = €500."""
    result = calculate_simple_interest(Decimal("10000"), Decimal("0.05"), Decimal("1"))
    assert result == Decimal("500")


@pytest.mark.parametrize("frequency, periods", [
    (CompoundFrequency.YEARLY, 1),
    (CompoundFrequency.HALF_YEARLY, 2),
    (CompoundFrequency.QUARTERLY, 4),
    (CompoundFrequency.MONTHLY, 12),
    (CompoundFrequency.DAILY, 365),
    ])
def test_compounding_periods(frequency, periods):
    assert get_compounding_periods_per_year(frequency) == periods


def test_compounding_periods_continuous_raises():
    with pytest.raises(ValueError, match="CONTINUOUS"):
        get_compounding_periods_per_year(CompoundFrequency.CONTINUOUS)


def test_compound_interest_yearly():
    """€10,000 at 5% for 2 years, yearly: 10000 * 1.05^2 - 10000 = 1025."""
    result = calculate_compound_interest(Decimal("10000"), Decimal("0.05"), Decimal("2"), CompoundFrequency.YEARLY)
    assert result == Decimal("1025")


def test_compound_interest_quarterly():
    """10000 * 1.02^4 = 10824.3216."""
    result = calculate_compound_interest(Decimal("10000"), Decimal("0.08"), Decimal("1"), CompoundFrequency.QUARTERLY)
    assert round_money(result) == Decimal("824.32")


def test_compound_interest_continuous():
    """10000 * e^0.05 = 10512.71."""
    result = calculate_compound_interest(Decimal("10000"), Decimal("0.05"), Decimal("1"), CompoundFrequency.CONTINUOUS)
    assert round_money(result) == Decimal("512.71")


def test_growth_factor_fractional_periods():
    """Half a year of yearly compounding falls back to a float power."""
    factor = compound_growth_factor(Decimal("0.21"), Decimal("0.5"), CompoundFrequency.YEARLY)
    assert round_money(factor, 6) == Decimal("1.100000")


# ============================================================================
# APY
# ============================================================================

@pytest.mark.parametrize("rate, frequency, expected", [
    ("12", CompoundFrequency.MONTHLY, "12.68"),
    ("12", CompoundFrequency.YEARLY, "12.00"),
    ("10", CompoundFrequency.HALF_YEARLY, "10.25"),
    ("0", CompoundFrequency.DAILY, "0.00"),
    ])
def test_calculate_apy(rate, frequency, expected):
    assert calculate_apy(Decimal(rate), frequency) == Decimal(expected)


# ============================================================================
# PARSING
# ============================================================================

def test_parse_decimal_value():
    assert parse_decimal_value(Decimal("1.5")) == Decimal("1.5")
    assert parse_decimal_value("2.25") == Decimal("2.25")
    assert parse_decimal_value(3) == Decimal("3")
    assert parse_decimal_value(0.1) == Decimal("0.1")
    assert parse_decimal_value(None) is None


def test_parse_decimal_value_invalid():
    assert parse_decimal_value("not-a-number") is None
