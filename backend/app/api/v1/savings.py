"""
Savings and investment planner API endpoints.

- POST /calc/savings: Project a lump sum, SIP, combined or step-up SIP plan
- POST /calc/savings/goal: Monthly SIP needed to reach a target amount
"""
from fastapi import APIRouter, HTTPException

from backend.app.logging_config import get_logger
from backend.app.schemas.savings import (
    GoalPlanRequest,
    GoalPlanResult,
    SavingsPlanRequest,
    SavingsPlanResult,
    )
from backend.app.services import savings_investment_service

logger = get_logger(__name__)

savings_router = APIRouter(prefix="/calc/savings", tags=["Savings"])


@savings_router.post("", response_model=SavingsPlanResult)
async def project_savings_plan(request: SavingsPlanRequest) -> SavingsPlanResult:
    """
    Project a savings plan with monthly compounding.

    SIP instalments are invested at the start of each month. A step-up plan
    raises the monthly instalment by `step_up_rate` percent every year.

    **Example Request**:
    ```json
    {"plan_type": "sip", "monthly_investment": "1000", "annual_rate": "12", "years": 10}
    ```
    """
    try:
        return savings_investment_service.calculate_savings_plan(request)
    except ValueError as e:
        logger.warning("Savings plan rejected", plan_type=request.plan_type.value, error=str(e))
        raise HTTPException(status_code=400, detail=str(e))


@savings_router.post("/goal", response_model=GoalPlanResult)
async def plan_savings_goal(request: GoalPlanRequest) -> GoalPlanResult:
    """
    Monthly SIP needed to reach `target_amount` in `years`.

    **Example Request**:
    ```json
    {"target_amount": "1000000", "current_savings": "50000", "annual_rate": "12", "years": 15}
    ```
    """
    try:
        return savings_investment_service.calculate_goal_plan(request)
    except ValueError as e:
        logger.warning("Goal plan rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
