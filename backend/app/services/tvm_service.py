"""
Time value of money: solve for FV, PV, PMT, number of periods or rate.

FV, PV, PMT and n have closed forms. The rate is found with the shared
Newton-Raphson solver. Like the IRR solver, everything here works in float
and returns Decimal rounded for presentation.
"""
import math
from decimal import Decimal
from typing import List

from backend.app.logging_config import get_logger
from backend.app.schemas.tvm import (
    MAX_TVM_PERIODS,
    PaymentTiming,
    TVMMode,
    TVMRequest,
    TVMResult,
    TVMScheduleRow,
    )
from backend.app.utils.financial_math import (
    calculate_apy,
    get_compounding_periods_per_year,
    round_money,
    )
from backend.app.utils.rate_solver import IRR_MAX_RATE, IRR_MIN_RATE, newton_raphson

logger = get_logger(__name__)

RATE_GUESS = 0.01
RATE_TOLERANCE = 1e-9
RATE_MAX_ITERATIONS = 100
# Below this periodic rate the annuity factor uses its r -> 0 limit
ZERO_RATE_EPSILON = 1e-7
MAX_SUGGESTIONS = 6


def _money(value: float, places: int = 2) -> Decimal:
    if not math.isfinite(value):
        raise ValueError("The amounts grow beyond the representable range")
    if abs(value) < 0.005 and places == 2:
        value = 0.0
    return round_money(Decimal(str(value)), places)


def annuity_factor(rate: float, periods: float, timing: PaymentTiming) -> float:
    """s(n) * k: future value of one unit paid every period."""
    if abs(rate) < ZERO_RATE_EPSILON:
        return float(periods)
    factor = ((1 + rate) ** periods - 1) / rate
    return factor * (1 + rate) if timing == PaymentTiming.BEGIN else factor


def future_value(present_value: float, payment: float, rate: float, periods: float, timing: PaymentTiming) -> float:
    """FV = PV * (1 + r)^n + PMT * s(n) * k."""
    return present_value * (1 + rate) ** periods + payment * annuity_factor(rate, periods, timing)


def present_value(future: float, payment: float, rate: float, periods: float, timing: PaymentTiming) -> float:
    """Balance needed today so that payments grow it into FV."""
    return (future - payment * annuity_factor(rate, periods, timing)) / (1 + rate) ** periods


def payment_amount(present: float, future: float, rate: float, periods: float, timing: PaymentTiming) -> float:
    """Payment per period taking PV to FV. Negative for a loan repaid to zero."""
    return (future - present * (1 + rate) ** periods) / annuity_factor(rate, periods, timing)


def number_of_periods(present: float, future: float, payment: float, rate: float, timing: PaymentTiming) -> float:
    """
    Periods for PV and PMT to reach FV.

    With c = PMT * k / r the balance equation becomes
    FV + c = (1 + r)^n * (PV + c), so n = ln((FV + c) / (PV + c)) / ln(1 + r).

    Raises:
        ValueError: When FV cannot be reached (the balance moves away from it)
    """
    if abs(rate) < ZERO_RATE_EPSILON:
        if payment == 0:
            raise ValueError("A payment is required to reach the future value at a 0% rate")
        periods = (future - present) / payment
    else:
        k = 1 + rate if timing == PaymentTiming.BEGIN else 1
        c = payment * k / rate
        if present + c == 0:
            raise ValueError("The future value cannot be reached with these amounts")
        growth = (future + c) / (present + c)
        if growth <= 0:
            raise ValueError("The future value cannot be reached with these amounts")
        periods = math.log(growth) / math.log(1 + rate)

    if periods < 0:
        raise ValueError("The future value cannot be reached with these amounts")
    return periods


def solve_periodic_rate(present: float, future: float, payment: float, periods: int, timing: PaymentTiming) -> float:
    """
    Periodic rate balancing PV, PMT and FV over n periods.

    f(r) = PV * (1 + r)^n + PMT * s(n) * k - FV, solved by Newton-Raphson in
    [-0.99, 10]. Amounts that already balance without interest give 0.

    Raises:
        ValueError: When the solver does not converge
    """
    n = periods
    b = 1 if timing == PaymentTiming.BEGIN else 0

    if abs(present + payment * n - future) < 0.01:
        return 0.0

    def balance_gap(r: float) -> float:
        return present * (1 + r) ** n + payment * annuity_factor(r, n, timing) - future

    def balance_slope(r: float) -> float:
        if abs(r) < ZERO_RATE_EPSILON:
            return present * n + payment * (n * (n - 1) / 2 + n * b)
        growth = (1 + r) ** n
        growth_slope = n * (1 + r) ** (n - 1)
        s = (growth - 1) / r
        s_slope = (growth_slope * r - (growth - 1)) / (r * r)
        return present * growth_slope + payment * (s_slope * (1 + r * b) + s * b)

    result = newton_raphson(
        balance_gap,
        balance_slope,
        RATE_GUESS,
        RATE_TOLERANCE,
        RATE_MAX_ITERATIONS,
        lower=IRR_MIN_RATE,
        upper=IRR_MAX_RATE,
        )
    if not result.converged:
        logger.warning("TVM rate did not converge", iterations=result.iterations, estimate=result.root)
        raise ValueError("The interest rate could not be solved for these amounts")
    return result.root


def generate_schedule(
    present: float,
    payment: float,
    rate: float,
    periods: float,
    timing: PaymentTiming,
    ) -> List[TVMScheduleRow]:
    """Balance period by period; a fractional last period is shown in full."""
    balance = present
    cumulative_payment = 0.0
    cumulative_interest = 0.0
    rows: List[TVMScheduleRow] = []

    for period in range(1, min(math.ceil(periods), MAX_TVM_PERIODS) + 1):
        if timing == PaymentTiming.BEGIN:
            balance += payment
            interest = balance * rate
            balance += interest
        else:
            interest = balance * rate
            balance += interest + payment
        cumulative_payment += payment
        cumulative_interest += interest
        rows.append(TVMScheduleRow(
            period=period,
            payment=_money(payment),
            interest=_money(interest),
            balance=_money(balance),
            cumulative_payment=_money(cumulative_payment),
            cumulative_interest=_money(cumulative_interest),
            ))
    return rows


def generate_suggestions(mode: TVMMode, annual_rate: float, years: float, value: float, total_interest: float,
                         total_paid: float) -> List[str]:
    suggestions: List[str] = []

    if mode == TVMMode.FUTURE_VALUE:
        if value > 1_000_000:
            suggestions.append("You are on track to build substantial wealth. Diversify across asset classes to protect it.")
        if annual_rate < 5:
            suggestions.append(
                f"A {annual_rate:.1f}% return is conservative. A balanced portfolio has historically averaged 8-10% a year."
                )
        if years < 5:
            suggestions.append("Consider a longer horizon. Holding for 10+ years reduces risk and lets compounding work.")
    elif mode == TVMMode.PAYMENT:
        if total_paid and total_interest > abs(total_paid) * 0.5:
            suggestions.append("Interest is over half of your total payments. A shorter term or higher payments would save a lot.")
        suggestions.append("Paying 10% more each period shortens the payoff and cuts the interest paid.")
    elif mode == TVMMode.PERIODS:
        if years > 20:
            suggestions.append(f"{years:.1f} years is a long journey. Larger contributions or higher returns get you there sooner.")
        elif years < 5:
            suggestions.append(f"Just {years:.1f} years to your goal. Stay disciplined.")
    elif mode == TVMMode.RATE:
        if value > 15:
            suggestions.append(f"A {value:.2f}% return is outstanding. Make sure it is realistic and diversified.")
        elif value < 3:
            suggestions.append(f"A {value:.2f}% return is below typical inflation, so purchasing power erodes.")

    if years > 10:
        suggestions.append(f"Compounding over {years:.0f} years works in your favour. Stay invested through market swings.")
    if annual_rate >= 10:
        suggestions.append("Higher returns come with higher risk. Diversify across stocks, bonds and other assets.")
    suggestions.append("Use tax-advantaged accounts where available to keep more of your returns.")
    suggestions.append("Inflation averages 2-3% a year. The real return is what matters for purchasing power.")
    return suggestions[:MAX_SUGGESTIONS]


def calculate_tvm(request: TVMRequest) -> TVMResult:
    """
    Solve the TVM equation for request.mode.

    Raises:
        ValueError: When the requested value has no solution
    """
    periods_per_year = get_compounding_periods_per_year(request.frequency)
    timing = request.timing
    pv = float(request.present_value)
    fv = float(request.future_value)
    pmt = float(request.payment)
    n = float(request.periods) if request.periods is not None else 0.0
    annual_rate = float(request.annual_rate) if request.annual_rate is not None else 0.0
    rate = annual_rate / periods_per_year / 100

    try:
        if request.mode == TVMMode.FUTURE_VALUE:
            fv = future_value(pv, pmt, rate, n, timing)
            value, places = fv, 2
        elif request.mode == TVMMode.PRESENT_VALUE:
            pv = present_value(fv, pmt, rate, n, timing)
            value, places = pv, 2
        elif request.mode == TVMMode.PAYMENT:
            pmt = payment_amount(pv, fv, rate, n, timing)
            value, places = pmt, 2
        elif request.mode == TVMMode.PERIODS:
            n = number_of_periods(pv, fv, pmt, rate, timing)
            value, places = n, 2
        else:
            rate = solve_periodic_rate(pv, fv, pmt, request.periods, timing)
            annual_rate = rate * periods_per_year * 100
            value, places = annual_rate, 4
    except OverflowError as e:
        raise ValueError("The amounts grow beyond the representable range") from e

    total_contributions = pv + pmt * n
    total_interest = fv - total_contributions
    years = n / periods_per_year

    annual_rate_decimal = round_money(Decimal(str(annual_rate)), 4)
    result = TVMResult(
        mode=request.mode,
        value=_money(value, places),
        present_value=_money(pv),
        future_value=_money(fv),
        payment=_money(pmt),
        annual_rate=annual_rate_decimal,
        periods=_money(n),
        effective_rate=calculate_apy(annual_rate_decimal, request.frequency),
        total_contributions=_money(total_contributions),
        total_interest=_money(total_interest),
        schedule=generate_schedule(pv, pmt, rate, n, timing),
        suggestions=generate_suggestions(
            request.mode, annual_rate, years, value, total_interest, pmt * n,
            ),
        )

    logger.info("TVM solved", mode=request.mode.value, value=str(result.value), periods=str(result.periods))
    return result
