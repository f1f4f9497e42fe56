"""
Chit fund calculator API endpoint.

- POST /calc/chit-fund: Contribution, dividends and return of a chit fund
"""
from fastapi import APIRouter

from backend.app.schemas.chit import ChitFundRequest, ChitFundResult
from backend.app.services import chit_service

chit_router = APIRouter(prefix="/calc", tags=["Chit Fund"])


@chit_router.post("/chit-fund", response_model=ChitFundResult)
async def calculate_chit_fund(request: ChitFundRequest) -> ChitFundResult:
    """
    Chit fund returns.

    Each month the members contribute chit_value / months. The winning bid
    discount minus the foreman commission is shared as a dividend among the
    members, except in the first month (foreman's turn) and the last one
    (no bidding left).

    **Example Request**:
    ```json
    {"chit_value": "100000", "months": 20, "commission_percent": "5", "average_bid_percent": "20"}
    ```
    """
    return chit_service.calculate_chit_fund(request)
