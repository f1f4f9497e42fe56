"""
Iterative rate solvers.

Newton-Raphson root finding over cash-flow equations:
- calculate_apr: the monthly rate equating the loan's payments to the
  amount financed (principal net of fees), annualized
- calculate_irr: the discount rate where NPV = 0, with MIRR and payback
- calculate_npv / calculate_mirr / calculate_payback_period helpers

Solvers iterate in float (the equations are smooth and well conditioned
at the precision a rate needs) and hand Decimal back to callers.
"""
from decimal import Decimal
from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel

from backend.app.logging_config import get_logger
from backend.app.utils.financial_math import annuity_payment

logger = get_logger(__name__)

APR_MAX_ITERATIONS = 50
APR_TOLERANCE = 1e-7

IRR_DEFAULT_GUESS = 0.1
IRR_TOLERANCE = 1e-5
IRR_MAX_ITERATIONS = 100
IRR_MIN_RATE = -0.99
IRR_MAX_RATE = 10.0

# Finance rate used for the MIRR reported alongside an IRR
MIRR_FINANCE_RATE = 0.1

RATE_PLACES = Decimal("0.000001")


class SolverResult(BaseModel):
    """Outcome of a Newton-Raphson run. residual is f(root), None when f cannot be evaluated there."""
    root: float
    iterations: int
    converged: bool
    residual: Optional[float] = None


class IRRComputation(BaseModel):
    """IRR with its diagnostics. Rates are decimals (0.1 = 10 %)."""
    irr: float
    npv_at_irr: Optional[float] = None
    iterations: int
    converged: bool
    mirr: Optional[float] = None
    payback_period: Optional[float] = None


def _clamp(x: float, lower: Optional[float], upper: Optional[float]) -> float:
    if lower is not None and x < lower:
        return lower
    if upper is not None and x > upper:
        return upper
    return x


def _evaluate(f: Callable[[float], float], x: float) -> Optional[float]:
    try:
        return f(x)
    except (ZeroDivisionError, OverflowError):
        return None


def newton_raphson(
    f: Callable[[float], float],
    f_prime: Callable[[float], float],
    guess: float,
    tolerance: float,
    max_iterations: int,
    lower: Optional[float] = None,
    upper: Optional[float] = None,
    ) -> SolverResult:
    """
    Find a root of f with Newton-Raphson.

    Stops when |f(x)| or the Newton step is below tolerance. The step is
    measured before clamping, so an estimate pinned at a bound keeps
    iterating and ends with converged=False. When the derivative vanishes the
    estimate is nudged by one percentage point and the iteration continues.
    If f or f_prime cannot be evaluated (overflow, division by zero) the run
    stops with the last estimate that could be evaluated.

    Args:
        f: Function whose root is sought
        f_prime: Derivative of f
        guess: Initial estimate
        tolerance: Absolute |f(x)| and step size treated as convergence
        max_iterations: Iteration budget
        lower: Optional lower clamp for the estimate
        upper: Optional upper clamp for the estimate

    Returns:
        SolverResult(root, iterations, converged, residual)
    """
    x = guess
    last_x, last_fx = guess, None
    for iteration in range(1, max_iterations + 1):
        try:
            fx = f(x)
            derivative = f_prime(x)
        except (ZeroDivisionError, OverflowError):
            logger.warning("Solver estimate outside the representable range", estimate=x, iteration=iteration)
            return SolverResult(root=last_x, iterations=iteration, converged=False, residual=last_fx)

        if abs(fx) < tolerance:
            return SolverResult(root=x, iterations=iteration, converged=True, residual=fx)
        last_x, last_fx = x, fx

        if abs(derivative) < 1e-12:
            x += 0.01
            continue

        new_x = x - fx / derivative
        if abs(new_x - x) < tolerance:
            root = _clamp(new_x, lower, upper)
            return SolverResult(root=root, iterations=iteration, converged=True, residual=_evaluate(f, root))
        x = _clamp(new_x, lower, upper)

    return SolverResult(root=x, iterations=max_iterations, converged=False, residual=_evaluate(f, x))


# ============================================================================
# APR
# ============================================================================

def calculate_apr(
    principal: Decimal,
    annual_rate: Decimal,
    tenure_months: int,
    total_fees: Decimal,
    ) -> Decimal:
    """
    Calculate the Annual Percentage Rate of a loan with upfront fees.

    The monthly payment is computed on the full principal at the nominal
    rate. The APR is the rate r solving:

        PMT * (1 - (1 + r)^-n) / r = principal - fees

    found by Newton-Raphson with derivative

        PMT * (n * r * (1 + r)^(-n-1) - 1 + (1 + r)^-n) / r^2

    Args:
        principal: Loan amount
        annual_rate: Nominal annual rate in percent
        tenure_months: Loan term in months
        total_fees: Fees and closing costs

    Returns:
        APR in percent (e.g. Decimal('5.250000')). Zero when principal or
        tenure are not positive, or fees consume the whole principal.
    """
    principal = Decimal(principal)
    total_fees = Decimal(total_fees)

    if principal <= 0 or tenure_months <= 0:
        return Decimal("0")
    if total_fees == 0:
        return Decimal(annual_rate).quantize(RATE_PLACES)

    amount_financed = float(principal - total_fees)
    if amount_financed <= 0:
        logger.warning("Fees exceed principal, APR undefined", principal=str(principal), fees=str(total_fees))
        return Decimal("0")

    payment = float(annuity_payment(principal, annual_rate, tenure_months))
    n = tenure_months

    def present_value_gap(r: float) -> float:
        return payment / r * (1 - (1 + r) ** -n) - amount_financed

    def present_value_slope(r: float) -> float:
        rn = (1 + r) ** -n
        return payment * ((n * r * (1 + r) ** (-n - 1) - 1 + rn) / (r * r))

    guess = float(annual_rate) / 12 / 100 or 0.001
    result = newton_raphson(present_value_gap, present_value_slope, guess, APR_TOLERANCE, APR_MAX_ITERATIONS)

    if not result.converged:
        logger.warning("APR solver did not converge", iterations=result.iterations, estimate=result.root)

    apr = Decimal(str(result.root * 12 * 100))
    return apr.quantize(RATE_PLACES)


# ============================================================================
# NPV / IRR / MIRR
# ============================================================================

def discount_factor(rate: float, period: int) -> float:
    """
    (1 + rate)^-period.

    Large positive rates underflow to 0, which is the limit of the factor.

    Raises:
        ValueError: When the factor overflows (rate close to -100 % over many periods)
    """
    try:
        return (1 + rate) ** -period
    except (OverflowError, ZeroDivisionError) as e:
        raise ValueError(f"Discount rate {rate * 100:.2f}% cannot be applied over {period} periods") from e


def calculate_npv(cash_flows: Sequence[float], discount_rate_percent: float) -> float:
    """
    Net Present Value at a discount rate given in percent.

    NPV = sum(CF_t / (1 + r)^t), t starting at 0.
    """
    rate = discount_rate_percent / 100
    return sum(cf * discount_factor(rate, t) for t, cf in enumerate(cash_flows))


def calculate_mirr(cash_flows: Sequence[float], finance_rate: float, reinvestment_rate: float) -> float:
    """
    Modified Internal Rate of Return (decimal).

    Negative flows are discounted at the finance rate, positive flows are
    compounded to the horizon at the reinvestment rate:

        MIRR = (FV_positive / |PV_negative|)^(1/n) - 1

    Returns 0 when either leg is empty.

    Raises:
        ValueError: When compounding at the reinvestment rate overflows
    """
    n = len(cash_flows) - 1
    if n <= 0:
        return 0.0

    pv_negative = 0.0
    fv_positive = 0.0
    try:
        for t, cf in enumerate(cash_flows):
            if cf < 0:
                pv_negative += cf * discount_factor(finance_rate, t)
            else:
                fv_positive += cf * (1 + reinvestment_rate) ** (n - t)
    except OverflowError as e:
        raise ValueError(f"Reinvestment rate {reinvestment_rate * 100:.2f}% overflows over {n} periods") from e

    if pv_negative == 0 or fv_positive == 0:
        return 0.0

    return (fv_positive / abs(pv_negative)) ** (1 / n) - 1


def calculate_payback_period(cash_flows: Sequence[float]) -> Optional[float]:
    """
    Periods until the cumulative cash flow turns non-negative.

    Interpolates linearly inside the recovering period. Returns None if the
    investment is never recovered.

    Example:
        >>> calculate_payback_period([-1000, 400, 400, 400])
        2.5
    """
    cumulative = 0.0
    for t, cf in enumerate(cash_flows):
        previous = cumulative
        cumulative += cf
        if cumulative >= 0:
            if t == 0:
                return 0.0
            return t - 1 + abs(previous) / cf
    return None


def calculate_irr(
    cash_flows: Sequence[float],
    initial_guess: float = IRR_DEFAULT_GUESS,
    tolerance: float = IRR_TOLERANCE,
    max_iterations: int = IRR_MAX_ITERATIONS,
    ) -> IRRComputation:
    """
    Internal Rate of Return by Newton-Raphson on NPV(r) = 0.

    dNPV/dr = sum(-t * CF_t / (1 + r)^(t+1))

    The estimate is clamped to [-0.99, 10] to keep (1 + r) positive. A root
    outside that range leaves the estimate pinned at the bound and the result
    is reported with converged=False and the NPV found there.

    Args:
        cash_flows: Flows per period, index 0 is the initial outlay
        initial_guess: Starting rate (decimal)
        tolerance: Convergence threshold on |NPV| and on the step
        max_iterations: Iteration budget

    Returns:
        IRRComputation. Flows without both a positive and a negative value
        yield irr=0 and converged=False.

    Raises:
        ValueError: With fewer than two cash flows
    """
    flows = [float(cf) for cf in cash_flows]
    if len(flows) < 2:
        raise ValueError("At least 2 cash flows are required")

    payback = calculate_payback_period(flows)

    if not (any(cf > 0 for cf in flows) and any(cf < 0 for cf in flows)):
        return IRRComputation(irr=0.0, npv_at_irr=0.0, iterations=0, converged=False, payback_period=payback)

    def npv(rate: float) -> float:
        return sum(cf * (1 + rate) ** -t for t, cf in enumerate(flows))

    def npv_slope(rate: float) -> float:
        return sum(-t * cf * (1 + rate) ** -(t + 1) for t, cf in enumerate(flows) if t > 0)

    result = newton_raphson(
        npv,
        npv_slope,
        initial_guess,
        tolerance,
        max_iterations,
        lower=IRR_MIN_RATE,
        upper=IRR_MAX_RATE,
        )

    if not result.converged:
        logger.warning(
            "IRR solver did not converge",
            iterations=result.iterations,
            estimate=result.root,
            npv=result.residual,
            )
        return IRRComputation(
            irr=result.root,
            npv_at_irr=result.residual,
            iterations=result.iterations,
            converged=False,
            payback_period=payback,
            )

    try:
        mirr = calculate_mirr(flows, MIRR_FINANCE_RATE, result.root)
    except ValueError as e:
        logger.warning("MIRR not available", error=str(e))
        mirr = None

    return IRRComputation(
        irr=result.root,
        npv_at_irr=result.residual,
        iterations=result.iterations,
        converged=True,
        mirr=mirr,
        payback_period=payback,
        )


def npv_sensitivity(
    cash_flows: Sequence[float],
    min_rate: float = 0.0,
    max_rate: float = 50.0,
    steps: int = 20,
    ) -> List[tuple]:
    """(rate %, NPV) pairs at evenly spaced discount rates."""
    if steps < 2:
        raise ValueError("At least 2 steps are required")
    step_size = (max_rate - min_rate) / (steps - 1)
    return [
        (min_rate + i * step_size, calculate_npv(cash_flows, min_rate + i * step_size))
        for i in range(steps)
        ]
