"""
Savings and investment planner.

- Lump sum: FV = P * (1 + r)^n
- SIP: FV = A * ((1 + r)^n - 1) / r * (1 + r), instalments at month start
- Combined: lump sum plus SIP
- Step-up SIP: the monthly instalment grows by step_up_rate every year
- Goal planning: monthly SIP needed to reach a target

Every plan runs through one monthly projection (balance += instalment, then
compounds at annual_rate / 12), which yields the closed forms above and the
yearly breakdown.
"""
from decimal import Decimal
from typing import List, Tuple

from backend.app.logging_config import get_logger
from backend.app.schemas.savings import (
    GoalPlanRequest,
    GoalPlanResult,
    SavingsPlanRequest,
    SavingsPlanResult,
    SavingsPlanType,
    SavingsYear,
    )
from backend.app.utils.financial_math import (
    HUNDRED,
    ONE,
    ZERO,
    calculate_cagr,
    monthly_rate,
    percent_of,
    round_money,
    )

logger = get_logger(__name__)

MAX_SUGGESTIONS = 5


def project_savings(
    lumpsum: Decimal,
    monthly_investment: Decimal,
    annual_rate: Decimal,
    years: int,
    step_up_rate: Decimal = ZERO,
    ) -> Tuple[Decimal, Decimal, List[SavingsYear]]:
    """
    Month-by-month projection.

    Returns:
        (future value, total invested, yearly breakdown); amounts unrounded
        except in the breakdown
    """
    r = monthly_rate(annual_rate)
    balance = Decimal(lumpsum)
    invested = Decimal(lumpsum)
    total_interest = ZERO
    instalment = Decimal(monthly_investment)
    breakdown: List[SavingsYear] = []

    for year in range(1, years + 1):
        yearly_investment = Decimal(lumpsum) if year == 1 else ZERO
        yearly_interest = ZERO
        for _ in range(12):
            balance += instalment
            invested += instalment
            yearly_investment += instalment
            interest = balance * r
            balance += interest
            yearly_interest += interest
        total_interest += yearly_interest

        breakdown.append(SavingsYear(
            year=year,
            yearly_investment=round_money(yearly_investment),
            total_investment=round_money(invested),
            interest_earned=round_money(yearly_interest),
            total_interest=round_money(total_interest),
            balance=round_money(balance),
            ))

        if year < years:
            instalment += percent_of(instalment, step_up_rate)

    return balance, invested, breakdown


def generate_suggestions(request: SavingsPlanRequest) -> List[str]:
    suggestions: List[str] = []

    if request.years < 5:
        suggestions.append("Consider a longer horizon. 10+ years amplifies compounding and smooths short-term volatility.")
    elif request.years >= 20:
        suggestions.append("A 20+ year horizon lets compounding do most of the work.")

    if request.annual_rate < 8:
        suggestions.append(
            f"An expected return of {request.annual_rate}% is conservative. "
            "A balanced equity portfolio has historically averaged 10-12% a year."
            )
    elif request.annual_rate > 15:
        suggestions.append(
            f"A {request.annual_rate}% annual return is ambitious. Make sure you understand the risks involved."
            )

    if request.plan_type == SavingsPlanType.STEP_UP:
        suggestions.append("Raising the SIP with your income keeps contributions ahead of inflation.")
    elif request.plan_type != SavingsPlanType.LUMPSUM and request.monthly_investment < 5000:
        suggestions.append("Starting small is fine. Increase the SIP by 10-15% a year as your income grows.")

    if not request.tax_rate:
        suggestions.append("Tax-advantaged instruments keep more of your returns.")
    if not request.inflation_rate:
        suggestions.append("Inflation runs at 3-4% a year. Check the real value of your target.")
    suggestions.append("Diversify across equity, debt and other assets for better risk-adjusted returns.")
    return suggestions[:MAX_SUGGESTIONS]


def calculate_savings_plan(request: SavingsPlanRequest) -> SavingsPlanResult:
    lumpsum = request.lumpsum if request.plan_type != SavingsPlanType.SIP else ZERO
    if request.plan_type == SavingsPlanType.LUMPSUM:
        monthly = ZERO
    else:
        monthly = request.monthly_investment
    step_up = request.step_up_rate if request.plan_type == SavingsPlanType.STEP_UP else ZERO

    future_value, invested, breakdown = project_savings(
        lumpsum, monthly, request.annual_rate, request.years, step_up,
        )
    returns = future_value - invested

    real_value = None
    if request.inflation_rate:
        real_value = round_money(future_value / (ONE + request.inflation_rate / HUNDRED) ** request.years)

    after_tax_value = None
    if request.tax_rate:
        after_tax_value = round_money(future_value - percent_of(max(returns, ZERO), request.tax_rate))

    result = SavingsPlanResult(
        plan_type=request.plan_type,
        total_investment=round_money(invested),
        total_returns=round_money(returns),
        future_value=round_money(future_value),
        real_value=real_value,
        after_tax_value=after_tax_value,
        cagr=calculate_cagr(invested, future_value, Decimal(request.years)),
        yearly_breakdown=breakdown,
        suggestions=generate_suggestions(request),
        )
    logger.info(
        "Savings plan projected",
        plan_type=request.plan_type.value,
        years=request.years,
        future_value=str(result.future_value),
        )
    return result


def calculate_goal_plan(request: GoalPlanRequest) -> GoalPlanResult:
    """
    Monthly SIP reaching target_amount after `years`, on top of current savings.

    required = (target - savings * (1 + r)^n) / (((1 + r)^n - 1) / r * (1 + r))
    """
    r = monthly_rate(request.annual_rate)
    months = request.years * 12
    growth = (ONE + r) ** months

    savings_future_value = request.current_savings * growth
    remaining = request.target_amount - savings_future_value

    if remaining <= ZERO:
        required = ZERO
    elif r == ZERO:
        required = remaining / months
    else:
        required = remaining / ((growth - ONE) / r * (ONE + r))

    return GoalPlanResult(
        required_monthly_investment=round_money(required),
        future_value_of_savings=round_money(savings_future_value),
        total_investment=round_money(request.current_savings + required * months),
        goal_reached_by_savings=remaining <= ZERO,
        )
