"""
Investment analysis API endpoints.

- POST /calc/investment/irr: IRR via Newton-Raphson with schedule and sensitivity
- POST /calc/investment/npv: NPV at a discount rate
- POST /calc/investment/mirr: Modified IRR
- POST /calc/investment/project: Nominal, real and after-tax IRR of a project
"""
from fastapi import APIRouter, HTTPException

from backend.app.logging_config import get_logger
from backend.app.schemas.investment import (
    CashFlowRequest,
    InvestmentProjectRequest,
    InvestmentProjectResult,
    IRRResult,
    MIRRRequest,
    MIRRResult,
    NPVRequest,
    NPVResult,
    )
from backend.app.services import investment_service

logger = get_logger(__name__)

investment_router = APIRouter(prefix="/calc/investment", tags=["Investment"])


@investment_router.post("/irr", response_model=IRRResult)
async def calculate_irr(request: CashFlowRequest) -> IRRResult:
    """
    Internal rate of return.

    The first cash flow is usually the (negative) investment. Response
    rates are percentages. `converged=false` means Newton-Raphson stopped
    without reaching the tolerance; the last estimate is returned.

    **Example Request**:
    ```json
    {"cash_flows": [-1000, 300, 400, 500], "discount_rate": 10}
    ```
    """
    try:
        return investment_service.calculate_irr_result(request)
    except ValueError as e:
        logger.warning("IRR calculation rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))


@investment_router.post("/npv", response_model=NPVResult)
async def calculate_npv(request: NPVRequest) -> NPVResult:
    """NPV = sum(CF_t / (1 + r)^t), t starting at 0."""
    try:
        return investment_service.calculate_npv_result(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@investment_router.post("/mirr", response_model=MIRRResult)
async def calculate_mirr(request: MIRRRequest) -> MIRRResult:
    """Modified IRR with separate finance and reinvestment rates."""
    try:
        return investment_service.calculate_mirr_result(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@investment_router.post("/project", response_model=InvestmentProjectResult)
async def calculate_project(request: InvestmentProjectRequest) -> InvestmentProjectResult:
    """
    Project analysis: initial investment followed by periodic returns.

    Real IRR = (1 + IRR) / (1 + inflation) - 1; after-tax IRR applies the
    tax rate to positive returns.
    """
    try:
        return investment_service.calculate_investment_project(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
