"""
Rental property API endpoint.

- POST /calc/rental-property: Cash flow, return metrics and holding-period projection
"""
from fastapi import APIRouter, HTTPException

from backend.app.logging_config import get_logger
from backend.app.schemas.rental import RentalPropertyRequest, RentalPropertyResult
from backend.app.services import rental_property_service

logger = get_logger(__name__)

rental_router = APIRouter(prefix="/calc/rental-property", tags=["Real Estate"])


@rental_router.post("", response_model=RentalPropertyResult)
async def analyze_rental_property(request: RentalPropertyRequest) -> RentalPropertyResult:
    """
    Analyze a buy-and-hold rental property.

    Returns NOI, cash flow, cap rate, cash-on-cash return, DSCR, the 1% and
    50% rules, yearly projections over `holding_period_years` and the sale
    at exit with total ROI and IRR.

    **Example Request**:
    ```json
    {
        "purchase_price": "200000",
        "down_payment_percent": "20",
        "closing_costs": "5000",
        "annual_interest_rate": "6",
        "monthly_rent": "2000",
        "vacancy_rate": "5",
        "annual_property_tax": "2400",
        "annual_insurance": "1200"
    }
    ```
    """
    try:
        return rental_property_service.calculate_rental_property(request)
    except ValueError as e:
        logger.warning("Rental analysis rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
