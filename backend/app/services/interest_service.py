"""
Interest calculators: simple interest, compound interest and APY.

Breakdowns are yearly. Rates in requests are annual percentages and are
converted to decimal fractions for the formulas in financial_math.
"""
from decimal import Decimal
from typing import List

from backend.app.logging_config import get_logger
from backend.app.schemas.interest import (
    APYRequest,
    APYResult,
    CompoundInterestRequest,
    InterestResult,
    SimpleInterestRequest,
    YearlyBreakdown,
    )
from backend.app.utils.financial_math import (
    HUNDRED,
    calculate_apy,
    calculate_simple_interest,
    compound_growth_factor,
    round_money,
    )

logger = get_logger(__name__)


def calculate_simple(request: SimpleInterestRequest) -> InterestResult:
    """
    Simple interest I = P * r * t.

    Each year of the breakdown opens on the original principal and earns
    the same interest; the closing balance grows linearly.
    """
    rate = request.annual_rate / HUNDRED
    interest = calculate_simple_interest(request.principal, rate, Decimal(request.years))
    yearly_interest = interest / request.years

    breakdown = [
        YearlyBreakdown(
            year=year,
            opening_balance=round_money(request.principal),
            interest=round_money(yearly_interest),
            closing_balance=round_money(request.principal + yearly_interest * year),
            )
        for year in range(1, request.years + 1)
        ]

    return InterestResult(
        principal=request.principal,
        annual_rate=request.annual_rate,
        years=request.years,
        interest=round_money(interest),
        total_amount=round_money(request.principal + interest),
        breakdown=breakdown,
        )


def calculate_compound(request: CompoundInterestRequest) -> InterestResult:
    """
    Compound interest A = P * (1 + r/n)^(n*t) (or P * e^(r*t) when continuous).

    The balance at the end of year k is P * factor(k); the year's interest is
    the difference with the previous year-end balance.
    """
    rate = request.annual_rate / HUNDRED
    breakdown: List[YearlyBreakdown] = []
    opening = request.principal

    for year in range(1, request.years + 1):
        closing = request.principal * compound_growth_factor(rate, Decimal(year), request.frequency)
        breakdown.append(YearlyBreakdown(
            year=year,
            opening_balance=round_money(opening),
            interest=round_money(closing - opening),
            closing_balance=round_money(closing),
            ))
        opening = closing

    logger.debug("Compound interest calculated", frequency=request.frequency.value, years=request.years)

    return InterestResult(
        principal=request.principal,
        annual_rate=request.annual_rate,
        years=request.years,
        interest=round_money(opening - request.principal),
        total_amount=round_money(opening),
        breakdown=breakdown,
        )


def calculate_annual_yield(request: APYRequest) -> APYResult:
    return APYResult(
        nominal_rate=request.nominal_rate,
        frequency=request.frequency,
        apy=calculate_apy(request.nominal_rate, request.frequency),
        )
