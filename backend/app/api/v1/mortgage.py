"""
Mortgage calculator API endpoints.

- POST /calc/mortgage/fha: FHA loan with upfront and annual MIP
- POST /calc/mortgage/va: VA loan with funding fee
- POST /calc/mortgage/refinance: Current vs refinanced loan
- POST /calc/mortgage/affordability: Maximum affordable home price
"""
from fastapi import APIRouter, HTTPException

from backend.app.logging_config import get_logger
from backend.app.schemas.mortgage import (
    AffordabilityRequest,
    AffordabilityResult,
    FHARequest,
    FHAResult,
    RefinanceRequest,
    RefinanceResult,
    VARequest,
    VAResult,
    )
from backend.app.services import mortgage_service

logger = get_logger(__name__)

mortgage_router = APIRouter(prefix="/calc/mortgage", tags=["Mortgage"])


@mortgage_router.post("/fha", response_model=FHAResult)
async def calculate_fha(request: FHARequest) -> FHAResult:
    """
    FHA loan.

    The upfront MIP (default 1.75 % of the base loan) is financed. The
    annual MIP (default 0.55 %) is recomputed every 12 months on the balance
    at the start of the year and charged monthly.

    **Example Request**:
    ```json
    {
      "home_price": "300000",
      "down_payment": "10500",
      "annual_rate": "6.5",
      "term_years": 30,
      "costs": {"property_tax": "250", "home_insurance": "100", "hoa_fees": "0"}
    }
    ```
    """
    try:
        return mortgage_service.calculate_fha(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@mortgage_router.post("/va", response_model=VAResult)
async def calculate_va(request: VARequest) -> VAResult:
    """
    VA loan.

    Funding fee by purpose, prior use and down payment (exempt with a
    service-connected disability), financed into the loan.
    """
    try:
        return mortgage_service.calculate_va(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@mortgage_router.post("/refinance", response_model=RefinanceResult)
async def calculate_refinance(request: RefinanceRequest) -> RefinanceResult:
    """
    Refinance comparison.

    Returns monthly and lifetime figures, break-even months (closing costs /
    monthly savings, -1 when the new payment is not lower) and yearly
    projections of both balances and cumulative savings.
    """
    return mortgage_service.calculate_refinance(request)


@mortgage_router.post("/affordability", response_model=AffordabilityResult)
async def calculate_affordability(request: AffordabilityRequest) -> AffordabilityResult:
    """
    Maximum affordable home price.

    DTI limits by mortgage type (front/back): conventional 28/36, FHA 31/43,
    VA -/41, overridable per request. PMI applies above 80 % LTV except for VA.

    **Example Request**:
    ```json
    {
      "annual_income": "120000",
      "monthly_debts": "500",
      "down_payment": "60000",
      "annual_rate": "6.5",
      "term_years": 30,
      "property_tax_rate": "1.1",
      "home_insurance": "120",
      "mortgage_type": "conventional"
    }
    ```
    """
    return mortgage_service.calculate_affordability(request)
