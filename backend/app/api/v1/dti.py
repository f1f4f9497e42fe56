"""
Debt-to-income API endpoints.

- POST /calc/dti: Front-end and back-end DTI with qualification and advice
- POST /calc/dti/what-if: Current vs hypothetical DTI
- POST /calc/dti/prioritize: Debt payoff order (avalanche or snowball)
"""
from fastapi import APIRouter

from backend.app.schemas.dti import (
    DebtPrioritizeRequest,
    DebtPrioritizeResult,
    DTIRequest,
    DTIResult,
    DTIWhatIfRequest,
    DTIWhatIfResult,
    )
from backend.app.services import dti_service

dti_router = APIRouter(prefix="/calc/dti", tags=["DTI"])


@dti_router.post("", response_model=DTIResult)
async def calculate_dti(request: DTIRequest) -> DTIResult:
    """
    Debt-to-income ratios.

    - front-end = housing costs / gross monthly income * 100
    - back-end = (housing costs + non-housing debts) / income * 100

    Qualification thresholds: conventional 28/36, FHA 31/43, VA 41 back-end.

    **Example Request**:
    ```json
    {
      "income": {"primary": "8000"},
      "housing": {"mortgage_or_rent": "1800", "property_tax": "200", "home_insurance": "100"},
      "debts": [{"name": "Car", "monthly_payment": "400", "type": "auto"}]
    }
    ```
    """
    return dti_service.calculate_dti(request)


@dti_router.post("/what-if", response_model=DTIWhatIfResult)
async def calculate_what_if(request: DTIWhatIfRequest) -> DTIWhatIfResult:
    """Compare the current DTI with a scenario (extra income, paid-off debt, lower housing cost)."""
    return dti_service.calculate_what_if(request)


@dti_router.post("/prioritize", response_model=DebtPrioritizeResult)
async def prioritize_debts(request: DebtPrioritizeRequest) -> DebtPrioritizeResult:
    """Order debts by interest rate (avalanche) or balance (snowball)."""
    return DebtPrioritizeResult(
        strategy=request.strategy,
        debts=dti_service.prioritize_debts(request.debts, request.strategy),
        )
