"""
Loan calculator API endpoints.

- POST /calc/emi: EMI and amortization schedule with extra payments
- POST /calc/payment: Payment plan (fixed-term or fixed-payment) with prepayments and rate changes
- POST /calc/loan-term: Months needed for a given monthly payment
- POST /calc/apr: Loan cost summary and APR including fees
- GET /calc/loan-types: Loan-type presets and their input bounds
"""
from typing import List

from fastapi import APIRouter, HTTPException

from backend.app.logging_config import get_logger
from backend.app.schemas.loans import (
    APRRequest,
    EMIRequest,
    EMIResult,
    LoanSummary,
    LoanTermRequest,
    LoanTermResponse,
    LoanTypeConfig,
    PaymentPlanRequest,
    PaymentResult,
    )
from backend.app.services import loan_service

logger = get_logger(__name__)

loan_router = APIRouter(prefix="/calc", tags=["Loans"])


@loan_router.post("/emi", response_model=EMIResult)
async def calculate_emi(request: EMIRequest) -> EMIResult:
    """
    Calculate the EMI of a loan and its amortization schedule.

    EMI = P * r * (1 + r)^n / ((1 + r)^n - 1), r = annual rate / 12 / 100,
    rounded to cents. Extra payments shorten the schedule: `monthly` extras
    apply from `start_month` onwards, `lump` extras only in `start_month`.
    With `loan_type` the inputs are checked against that preset's bounds.

    **Example Request**:
    ```json
    {
      "principal": "1000000",
      "annual_rate": "7.5",
      "tenure_months": 240,
      "extra_payments": [{"type": "lump", "amount": "50000", "start_month": 12}]
    }
    ```

    **Response**:
    ```json
    {
      "emi": "8055.93",
      "total_interest": "...",
      "total_payment": "...",
      "amortization": [
        {"month": 1, "date": null, "payment": "8055.93", "principal": "1805.93",
         "interest": "6250.00", "balance": "998194.07"},
        ...
      ]
    }
    ```
    """
    try:
        return loan_service.calculate_monthly_payment(request)
    except ValueError as e:
        logger.warning("EMI calculation rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))


@loan_router.post("/payment", response_model=PaymentResult)
async def calculate_payment(request: PaymentPlanRequest) -> PaymentResult:
    """
    Payment calculator with a dated schedule.

    - `fixed-term`: `tenure_months` given, EMI derived
    - `fixed-payment`: `monthly_payment` given, tenure derived

    Prepayments in a billing month go to principal; `reduce-emi`
    prepayments re-amortize over the remaining planned months,
    `reduce-tenure` ones keep the EMI and end the loan earlier. Rate changes
    take effect from their date and keep the EMI constant.

    **Example Request**:
    ```json
    {
      "mode": "fixed-term",
      "principal": "500000",
      "annual_rate": "9",
      "tenure_months": 120,
      "start_date": "2025-01-05",
      "prepayments": [{"date": "2026-01-10", "amount": "100000", "type": "reduce-emi"}],
      "rate_changes": [{"date": "2027-01-01", "new_rate": "8.5"}]
    }
    ```

    **Errors**:
    - 400 if the payment does not cover the monthly interest
    """
    try:
        return loan_service.calculate_payment_plan(request)
    except ValueError as e:
        logger.warning("Payment plan rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))


@loan_router.post("/loan-term", response_model=LoanTermResponse)
async def calculate_loan_term(request: LoanTermRequest) -> LoanTermResponse:
    """
    Months needed to repay a loan with a fixed monthly payment.

    n = ceil(-ln(1 - r * P / A) / ln(1 + r))

    **Errors**:
    - 400 if the payment does not exceed the first month's interest
    """
    try:
        return loan_service.calculate_loan_term(request.principal, request.annual_rate, request.monthly_payment)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@loan_router.post("/apr", response_model=LoanSummary)
async def calculate_apr(request: APRRequest) -> LoanSummary:
    """
    Loan cost summary and APR.

    The payment is computed on the full principal; the APR is the annual
    rate at which those payments repay principal - fees.

    **Example Request**:
    ```json
    {"principal": "200000", "annual_rate": "6", "tenure_months": 360, "total_fees": "4000"}
    ```
    """
    return loan_service.calculate_loan_summary(request)


@loan_router.get("/loan-types", response_model=List[LoanTypeConfig])
async def list_loan_types() -> List[LoanTypeConfig]:
    """Loan-type presets (home, car, personal, education) with amount, rate and tenure bounds."""
    return loan_service.list_loan_types()
