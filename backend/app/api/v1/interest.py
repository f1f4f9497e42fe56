"""
Interest calculator API endpoints.

- POST /calc/interest/simple: Simple interest with yearly breakdown
- POST /calc/interest/compound: Compound interest with yearly breakdown
- POST /calc/interest/apy: Annual percentage yield of a nominal rate
"""
from fastapi import APIRouter, HTTPException

from backend.app.schemas.interest import (
    APYRequest,
    APYResult,
    CompoundInterestRequest,
    InterestResult,
    SimpleInterestRequest,
    )
from backend.app.services import interest_service

interest_router = APIRouter(prefix="/calc/interest", tags=["Interest"])


@interest_router.post("/simple", response_model=InterestResult)
async def calculate_simple_interest(request: SimpleInterestRequest) -> InterestResult:
    """
    Simple interest: I = P * r * t / 100.

    **Example Request**:
    ```json
    {"principal": "10000", "annual_rate": "8", "years": 5}
    ```
    """
    return interest_service.calculate_simple(request)


@interest_router.post("/compound", response_model=InterestResult)
async def calculate_compound_interest(request: CompoundInterestRequest) -> InterestResult:
    """
    Compound interest: A = P * (1 + r / n)^(n * t), or P * e^(r * t) for
    `continuous` compounding.

    **Example Request**:
    ```json
    {"principal": "10000", "annual_rate": "8", "years": 5, "frequency": "quarterly"}
    ```
    """
    try:
        return interest_service.calculate_compound(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@interest_router.post("/apy", response_model=APYResult)
async def calculate_apy(request: APYRequest) -> APYResult:
    """
    Effective annual yield: APY = (1 + r / n)^n - 1.

    12 % compounded monthly gives 12.68 %.
    """
    try:
        return interest_service.calculate_annual_yield(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
