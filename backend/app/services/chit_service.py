"""
Chit fund calculator.

Estimates the net cost and return of a chit using an average auction bid:
- monthly contribution = chit value / months
- dividend per month = max(0, average bid - commission) / months
- no auction in the first and the last month, so no dividend there
- return % = (chit value - net paid) / net paid * 100
"""
from typing import List

from backend.app.logging_config import get_logger
from backend.app.schemas.chit import ChitFundRequest, ChitFundResult, ChitMonth
from backend.app.utils.financial_math import HUNDRED, ZERO, percent_of, round_money

logger = get_logger(__name__)


def calculate_chit_fund(request: ChitFundRequest) -> ChitFundResult:
    months = request.months
    contribution = request.chit_value / months
    commission = percent_of(request.chit_value, request.commission_percent)
    average_bid = percent_of(request.chit_value, request.average_bid_percent)
    monthly_dividend = max(ZERO, average_bid - commission) / months

    breakdown: List[ChitMonth] = []
    total_net = ZERO
    total_dividend = ZERO

    for month in range(1, months + 1):
        dividend = ZERO if month in (1, months) else monthly_dividend
        net = contribution - dividend
        breakdown.append(ChitMonth(
            month=month,
            contribution=round_money(contribution),
            dividend=round_money(dividend),
            net_payable=round_money(net),
            ))
        total_net += net
        total_dividend += dividend

    return_percentage = (request.chit_value - total_net) / total_net * HUNDRED

    logger.debug("Chit fund calculated", months=months, total_dividend=str(round_money(total_dividend)))

    return ChitFundResult(
        chit_value=request.chit_value,
        months=months,
        monthly_contribution=round_money(contribution),
        total_investment=round_money(contribution * months),
        net_payable=round_money(total_net),
        total_dividend=round_money(total_dividend),
        return_percentage=round_money(return_percentage),
        monthly_breakdown=breakdown,
        )
