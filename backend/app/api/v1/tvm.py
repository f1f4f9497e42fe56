"""
Time value of money API endpoint.

- POST /calc/tvm: Solve for FV, PV, PMT, number of periods or rate
"""
from fastapi import APIRouter, HTTPException

from backend.app.logging_config import get_logger
from backend.app.schemas.tvm import TVMRequest, TVMResult
from backend.app.services import tvm_service

logger = get_logger(__name__)

tvm_router = APIRouter(prefix="/calc/tvm", tags=["TVM"])


@tvm_router.post("", response_model=TVMResult)
async def calculate_tvm(request: TVMRequest) -> TVMResult:
    """
    Solve the time-value-of-money equation for one quantity.

    FV = PV * (1 + r)^n + PMT * s(n) * k, with k = 1 + r for payments at the
    start of each period. Amounts added to the balance are positive, so a
    loan has a positive `present_value` and a negative `payment`.

    `mode` is one of `fv`, `pv`, `pmt`, `n`, `rate`. The `rate` mode returns
    the nominal annual rate in percent.

    **Example Request**:
    ```json
    {"mode": "pmt", "present_value": "100000", "future_value": "0", "annual_rate": "12", "periods": 12}
    ```
    """
    try:
        return tvm_service.calculate_tvm(request)
    except ValueError as e:
        logger.warning("TVM calculation rejected", mode=request.mode.value, error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
