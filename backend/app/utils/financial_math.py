"""
Financial mathematics utility functions.

Provides the interest and annuity formulas shared by every calculator.

All functions are pure (no side effects) and reusable.

Key concepts:
- Rate format: annual rate as a percentage (7.5 = 7.5 %) unless stated otherwise
- Money: Decimal, rounded to cents with ROUND_HALF_UP when presented
- Interest types: SIMPLE and COMPOUND interest
"""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from backend.app.schemas.common import CompoundFrequency

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
TWELVE = Decimal("12")
CENT = Decimal("0.01")


# ============================================================================
# ROUNDING AND RATES
# ============================================================================

def round_money(value: Decimal, places: int = 2) -> Decimal:
    """
    Round a money value half-up to the given number of decimals.

    Example:
        >>> round_money(Decimal("8055.9312"))
        Decimal('8055.93')
        >>> round_money(Decimal("0.005"))
        Decimal('0.01')
    """
    quantizer = Decimal(10) ** -places
    return Decimal(value).quantize(quantizer, rounding=ROUND_HALF_UP)


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    """Convert an annual percentage rate to a monthly decimal rate (7.5 -> 0.00625)."""
    return Decimal(annual_rate_percent) / TWELVE / HUNDRED


# ============================================================================
# ANNUITY FORMULAS
# ============================================================================

def annuity_payment(principal: Decimal, annual_rate_percent: Decimal, months: int) -> Decimal:
    """
    Calculate the level monthly payment (EMI) that repays a loan.

    Formula: EMI = P * r * (1 + r)^n / ((1 + r)^n - 1)

    Where:
        - P: Principal
        - r: Monthly rate (annual / 12 / 100)
        - n: Number of monthly payments

    A zero rate degenerates to P / n.

    Args:
        principal: Loan amount
        annual_rate_percent: Annual rate in percent
        months: Number of monthly payments

    Returns:
        Unrounded monthly payment

    Raises:
        ValueError: If months is not positive

    Example:
        >>> round_money(annuity_payment(Decimal("1000000"), Decimal("7.5"), 240))
        Decimal('8055.93')
    """
    if months <= 0:
        raise ValueError("Number of months must be positive")

    principal = Decimal(principal)
    r = monthly_rate(annual_rate_percent)
    if r == ZERO:
        return principal / Decimal(months)

    growth = (ONE + r) ** months
    return principal * r * growth / (growth - ONE)


def loan_term_months(principal: Decimal, annual_rate_percent: Decimal, payment: Decimal) -> int:
    """
    Calculate how many monthly payments are needed to repay a loan.

    Formula: n = -ln(1 - r * P / A) / ln(1 + r)

    Args:
        principal: Loan amount
        annual_rate_percent: Annual rate in percent
        payment: Fixed monthly payment

    Returns:
        Number of months, rounded up

    Raises:
        ValueError: If the payment does not cover the first month's interest
    """
    principal = Decimal(principal)
    payment = Decimal(payment)
    if payment <= ZERO:
        raise ValueError("Monthly payment must be positive")

    r = monthly_rate(annual_rate_percent)
    if r == ZERO:
        return math.ceil(principal / payment)

    if payment <= principal * r:
        raise ValueError("Monthly payment is too low to cover interest. Loan will never be paid off.")

    numerator = -(ONE - r * principal / payment).ln()
    denominator = (ONE + r).ln()
    return math.ceil(numerator / denominator)


# ============================================================================
# SIMPLE AND COMPOUND INTEREST
# ============================================================================

def get_compounding_periods_per_year(frequency: CompoundFrequency) -> int:
    """
    Get the number of compounding periods per year for a given frequency.

    Raises:
        ValueError: If frequency is CONTINUOUS (handled separately)
    """
    if frequency == CompoundFrequency.DAILY:
        return 365
    elif frequency == CompoundFrequency.MONTHLY:
        return 12
    elif frequency == CompoundFrequency.QUARTERLY:
        return 4
    elif frequency == CompoundFrequency.HALF_YEARLY:
        return 2
    elif frequency == CompoundFrequency.YEARLY:
        return 1
    elif frequency == CompoundFrequency.CONTINUOUS:
        raise ValueError("CONTINUOUS compounding should be handled separately")
    else:
        raise ValueError(f"Unsupported compound frequency: {frequency}")


def compound_growth_factor(annual_rate: Decimal, time_fraction: Decimal, frequency: CompoundFrequency) -> Decimal:
    """
    Growth multiplier (1 + r/n)^(n*t), or e^(r*t) for continuous compounding.

    Args:
        annual_rate: Annual rate as decimal (0.05 for 5 %)
        time_fraction: Time in years
        frequency: Compounding frequency
    """
    if frequency == CompoundFrequency.CONTINUOUS:
        return Decimal(str(math.exp(float(annual_rate * time_fraction))))

    n = Decimal(get_compounding_periods_per_year(frequency))
    base = ONE + annual_rate / n
    num_periods = n * time_fraction
    if num_periods == num_periods.to_integral_value():
        return base ** int(num_periods)
    return Decimal(str(pow(float(base), float(num_periods))))


def calculate_compound_interest(
    principal: Decimal,
    annual_rate: Decimal,
    time_fraction: Decimal,
    frequency: CompoundFrequency
    ) -> Decimal:
    """
    Calculate compound interest for a given period.

    Formula (periodic compounding): A = P * (1 + r/n)^(n*t)
    Formula (continuous compounding): A = P * e^(r*t)

    Args:
        principal: Starting principal amount
        annual_rate: Annual interest rate (e.g., 0.05 for 5%)
        time_fraction: Time period in years
        frequency: Compounding frequency

    Returns:
        Interest earned (A - P)

    Example:
        >>> # 10,000 at 5% for 2 years, yearly compounding
        >>> calculate_compound_interest(Decimal("10000"), Decimal("0.05"), Decimal("2"), CompoundFrequency.YEARLY)
        Decimal('1025.0000')
    """
    final_amount = principal * compound_growth_factor(annual_rate, time_fraction, frequency)
    return final_amount - principal


def calculate_simple_interest(
    principal: Decimal,
    annual_rate: Decimal,
    time_fraction: Decimal
    ) -> Decimal:
    """
    Calculate simple interest for a given period.

    Formula: I = P * r * t

    Args:
        principal: Principal amount
        annual_rate: Annual interest rate (e.g., 0.05 for 5%)
        time_fraction: Time period in years

    Returns:
        Interest earned
    """
    return principal * annual_rate * time_fraction


def calculate_apy(nominal_rate_percent: Decimal, frequency: CompoundFrequency) -> Decimal:
    """
    Annual percentage yield of a nominal rate, in percent rounded to 2 decimals.

    Formula: APY = (1 + r/n)^n - 1

    Example:
        >>> calculate_apy(Decimal("12"), CompoundFrequency.MONTHLY)
        Decimal('12.68')
    """
    growth = compound_growth_factor(Decimal(nominal_rate_percent) / HUNDRED, ONE, frequency)
    return round_money((growth - ONE) * HUNDRED)


def calculate_cagr(initial: Decimal, final: Decimal, years: Decimal) -> Decimal:
    """
    Compound annual growth rate in percent: (final / initial)^(1 / years) - 1.

    Zero when initial or years are not positive, -100 when final is not positive.

    Example:
        >>> calculate_cagr(Decimal("1000"), Decimal("2000"), Decimal("10"))
        Decimal('7.1773')
    """
    initial, final, years = Decimal(initial), Decimal(final), Decimal(years)
    if initial <= ZERO or years <= ZERO:
        return ZERO
    if final <= ZERO:
        return -HUNDRED
    growth = pow(float(final / initial), 1 / float(years)) - 1
    return round_money(Decimal(str(growth)) * HUNDRED, 4)


def percent_of(amount: Decimal, rate_percent: Decimal) -> Decimal:
    """amount * rate / 100."""
    return Decimal(amount) * Decimal(rate_percent) / HUNDRED


def parse_decimal_value(value) -> Optional[Decimal]:
    """
    Convert input to Decimal safely.

    Args:
        value: Input value (Decimal, int, float, str, or None)

    Returns:
        Decimal or None
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except ArithmeticError:
        return None
