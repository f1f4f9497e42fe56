"""
Investment-return calculators built on the rate solvers.

- IRR over raw cash flows, with MIRR, payback, a cash-flow schedule and an
  NPV sensitivity curve
- NPV at a discount rate, MIRR with explicit finance/reinvestment rates
- Investment project: initial outlay plus periodic returns, with real
  (inflation-adjusted) and after-tax IRR
"""
import math
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence

from backend.app.logging_config import get_logger
from backend.app.schemas.investment import (
    CashFlowItem,
    CashFlowRequest,
    InvestmentProjectRequest,
    InvestmentProjectResult,
    IRRResult,
    MIRRRequest,
    MIRRResult,
    NPVRequest,
    NPVResult,
    SensitivityPoint,
    )
from backend.app.utils.financial_math import round_money
from backend.app.utils.rate_solver import (
    calculate_irr,
    calculate_mirr,
    calculate_npv,
    discount_factor,
    npv_sensitivity,
    )

logger = get_logger(__name__)

RATE_DECIMALS = 4


def _to_decimal(value: float, places: int = 2) -> Decimal:
    if not math.isfinite(value):
        raise ValueError("Result is not a finite number")
    try:
        return round_money(Decimal(str(value)), places)
    except InvalidOperation as e:
        raise ValueError(f"Result {value:.3e} is out of range") from e


def _to_decimal_or_none(value: Optional[float], places: int = 2) -> Optional[Decimal]:
    """Like _to_decimal, with None for missing or unrepresentable values."""
    if value is None:
        return None
    try:
        return _to_decimal(value, places)
    except ValueError:
        return None


def generate_cash_flow_schedule(cash_flows: Sequence[float], discount_rate_percent: float) -> List[CashFlowItem]:
    """Per-period cash flow with cumulative, discounted and running NPV columns."""
    rate = discount_rate_percent / 100
    cumulative = 0.0
    running_npv = 0.0
    schedule: List[CashFlowItem] = []

    for period, cf in enumerate(cash_flows):
        cumulative += cf
        discounted = cf * discount_factor(rate, period)
        running_npv += discounted
        schedule.append(CashFlowItem(
            period=period,
            cash_flow=_to_decimal(cf),
            cumulative=_to_decimal(cumulative),
            discounted_cash_flow=_to_decimal(discounted),
            npv=_to_decimal(running_npv),
            ))
    return schedule


def compute_irr(cash_flows: Sequence[float], discount_rate: Optional[float] = None) -> IRRResult:
    """
    IRR of a cash-flow series.

    The schedule is discounted at discount_rate when given, otherwise at the
    IRR itself (so its final NPV is ~0), or left undiscounted when the IRR did
    not converge. The sensitivity curve spans 0-50 %.

    Raises:
        ValueError: With fewer than two cash flows, or when a schedule figure
            overflows
    """
    computation = calculate_irr(cash_flows)
    irr_percent = computation.irr * 100
    if discount_rate is not None:
        schedule_rate = discount_rate
    else:
        schedule_rate = irr_percent if computation.converged else 0.0

    if not computation.converged:
        logger.warning("IRR did not converge", iterations=computation.iterations)

    return IRRResult(
        irr=_to_decimal(irr_percent, RATE_DECIMALS),
        npv_at_irr=_to_decimal_or_none(computation.npv_at_irr),
        iterations=computation.iterations,
        converged=computation.converged,
        mirr=_to_decimal(computation.mirr * 100, RATE_DECIMALS) if computation.mirr is not None else None,
        payback_period=_to_decimal(computation.payback_period) if computation.payback_period is not None else None,
        schedule=generate_cash_flow_schedule(cash_flows, schedule_rate),
        sensitivity=[
            SensitivityPoint(rate=_to_decimal(rate), npv=_to_decimal(npv))
            for rate, npv in npv_sensitivity(cash_flows)
            ],
        )


def calculate_irr_result(request: CashFlowRequest) -> IRRResult:
    flows = [float(cf) for cf in request.cash_flows]
    discount_rate = float(request.discount_rate) if request.discount_rate is not None else None
    result = compute_irr(flows, discount_rate)
    logger.info("IRR calculated", periods=len(flows), irr=str(result.irr), converged=result.converged)
    return result


def calculate_npv_result(request: NPVRequest) -> NPVResult:
    flows = [float(cf) for cf in request.cash_flows]
    rate = float(request.discount_rate)
    return NPVResult(
        discount_rate=request.discount_rate,
        npv=_to_decimal(calculate_npv(flows, rate)),
        schedule=generate_cash_flow_schedule(flows, rate),
        )


def calculate_mirr_result(request: MIRRRequest) -> MIRRResult:
    flows = [float(cf) for cf in request.cash_flows]
    mirr = calculate_mirr(flows, float(request.finance_rate) / 100, float(request.reinvestment_rate) / 100)
    return MIRRResult(mirr=_to_decimal(mirr * 100, RATE_DECIMALS))


def calculate_investment_project(request: InvestmentProjectRequest) -> InvestmentProjectResult:
    """
    IRR of an initial outlay followed by periodic returns.

    Real IRR = (1 + IRR) / (1 + inflation) - 1, reported when inflation > 0.
    After-tax IRR taxes positive returns at tax_rate, reported when tax > 0.
    """
    returns = [float(r) for r in request.periodic_returns]
    flows = [-float(request.initial_investment)] + returns
    result = compute_irr(flows)
    irr = float(result.irr) / 100

    real_irr = None
    inflation = float(request.inflation_rate) / 100
    if inflation > 0:
        real_irr = _to_decimal(((1 + irr) / (1 + inflation) - 1) * 100, RATE_DECIMALS)

    after_tax_irr = None
    tax = float(request.tax_rate) / 100
    if tax > 0:
        after_tax_flows = [flows[0]] + [r - max(0.0, r) * tax for r in returns]
        after_tax_irr = _to_decimal(calculate_irr(after_tax_flows).irr * 100, RATE_DECIMALS)

    return InvestmentProjectResult(
        result=result,
        real_irr=real_irr,
        after_tax_irr=after_tax_irr,
        total_return=_to_decimal(sum(flows)),
        )
