"""
Debt-to-income (DTI) analysis.

- Front-end ratio: housing costs / gross monthly income
- Back-end ratio: (housing costs + non-housing debts) / gross monthly income
- Qualification against conventional, FHA and VA limits
- Health band and recommendations from the back-end ratio
- What-if scenarios and debt payoff ordering (avalanche / snowball)
"""
from decimal import Decimal
from typing import Iterable, List

from backend.app.logging_config import get_logger
from backend.app.schemas.dti import (
    DebtItem,
    DebtType,
    DTIRequest,
    DTIResult,
    DTIWhatIfRequest,
    DTIWhatIfResult,
    HealthStatus,
    HousingCosts,
    IncomeSource,
    PrioritizeStrategy,
    Qualification,
    )
from backend.app.utils.financial_math import HUNDRED, ZERO, round_money

logger = get_logger(__name__)


def total_income(income: IncomeSource) -> Decimal:
    return income.primary + income.secondary + income.bonus + income.rental + income.other


def total_housing_costs(housing: HousingCosts) -> Decimal:
    return housing.mortgage_or_rent + housing.property_tax + housing.home_insurance + housing.hoa_fees


def non_housing_debts(debts: Iterable[DebtItem]) -> Decimal:
    """Sum of monthly debt payments, excluding items of type housing."""
    return sum((d.monthly_payment for d in debts if d.type != DebtType.HOUSING), ZERO)


def ratio(amount: Decimal, income: Decimal) -> Decimal:
    """amount / income in percent; 0 when there is no income."""
    if income <= ZERO:
        return ZERO
    return amount / income * HUNDRED


def check_qualification(front_end: Decimal, back_end: Decimal) -> Qualification:
    return Qualification(
        conventional=front_end <= 28 and back_end <= 36,
        fha=front_end <= 31 and back_end <= 43,
        va=back_end <= 41,
        )


def get_health_status(back_end: Decimal) -> HealthStatus:
    if back_end <= 33:
        return HealthStatus.EXCELLENT
    if back_end <= 36:
        return HealthStatus.GOOD
    if back_end <= 43:
        return HealthStatus.MODERATE
    if back_end <= 50:
        return HealthStatus.RISKY
    return HealthStatus.HIGH_RISK


def generate_recommendations(back_end: Decimal, front_end: Decimal) -> List[str]:
    """Advice keyed on the back-end band, plus a housing note when front-end exceeds 28 %."""
    if back_end > 50:
        recommendations = [
            "Urgent: Your DTI is very high. Focus on aggressive debt reduction.",
            "Consider debt consolidation to lower monthly payments.",
            "Look for ways to increase income through side jobs or overtime.",
            "Create a strict budget and cut non-essential expenses.",
            ]
    elif back_end > 43:
        recommendations = [
            "Your DTI is above recommended levels. Work on reducing debt.",
            "Pay more than minimum payments on high-interest debts.",
            "Avoid taking on new debt until DTI improves.",
            "Consider refinancing high-interest loans.",
            ]
    elif back_end > 36:
        recommendations = [
            "Your DTI is moderate. Small improvements can help significantly.",
            "Focus on paying off smallest debts first for quick wins.",
            "Look for opportunities to increase income by 10-15%.",
            "Maintain current debt levels and avoid new loans.",
            ]
    elif back_end > 28:
        recommendations = [
            "Your DTI is good. Continue current financial habits.",
            "Consider extra payments on loans to improve further.",
            "Build emergency fund to 6 months of expenses.",
            "You qualify for most conventional loans.",
            ]
    else:
        recommendations = [
            "Excellent DTI! You have strong financial health.",
            "Focus on wealth-building and investment opportunities.",
            "Consider real estate investment or business ventures.",
            "Maintain this healthy debt-to-income balance.",
            ]

    if front_end > 28:
        recommendations.append(
            "Your housing costs are high relative to income. Consider downsizing or refinancing."
            )
    return recommendations


def _analyse(income: Decimal, housing: Decimal, debts: Decimal) -> DTIResult:
    front_end = ratio(housing, income)
    back_end = ratio(debts, income)
    return DTIResult(
        front_end_ratio=round_money(front_end),
        back_end_ratio=round_money(back_end),
        total_monthly_income=round_money(income),
        total_housing_costs=round_money(housing),
        total_monthly_debts=round_money(debts),
        qualification=check_qualification(front_end, back_end),
        health_status=get_health_status(back_end),
        recommendations=generate_recommendations(back_end, front_end),
        )


def calculate_dti(request: DTIRequest) -> DTIResult:
    """Full DTI analysis of income, housing costs and debts."""
    income = total_income(request.income)
    housing = total_housing_costs(request.housing)
    result = _analyse(income, housing, housing + non_housing_debts(request.debts))
    logger.info(
        "DTI calculated",
        front_end=str(result.front_end_ratio),
        back_end=str(result.back_end_ratio),
        health=result.health_status.value,
        )
    return result


def calculate_what_if(request: DTIWhatIfRequest) -> DTIWhatIfResult:
    """
    Current analysis next to a hypothetical one.

    The scenario adds the income increase and subtracts the housing and debt
    reductions; reductions never take a total below zero. The housing
    reduction also lowers total debts, which include housing.
    """
    income = total_income(request.income)
    housing = total_housing_costs(request.housing)
    debts = housing + non_housing_debts(request.debts)
    changes = request.changes

    new_housing = max(ZERO, housing - changes.housing_reduction)
    new_debts = max(ZERO, debts - changes.debt_reduction - (housing - new_housing))

    return DTIWhatIfResult(
        current=_analyse(income, housing, debts),
        scenario=_analyse(income + changes.income_increase, new_housing, new_debts),
        )


def prioritize_debts(debts: Iterable[DebtItem], strategy: PrioritizeStrategy) -> List[DebtItem]:
    """
    Order debts for payoff.

    Avalanche: highest interest rate first, debts without a rate dropped.
    Snowball: smallest balance first, debts without a balance dropped.
    """
    if strategy == PrioritizeStrategy.AVALANCHE:
        return sorted((d for d in debts if d.interest_rate is not None), key=lambda d: d.interest_rate, reverse=True)
    return sorted((d for d in debts if d.balance is not None), key=lambda d: d.balance)
