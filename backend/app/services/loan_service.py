"""
Loan calculators.

Wraps the amortization engine and rate solvers for the loan endpoints:
- EMI with extra payments, optionally checked against a loan-type preset
- Payment plans in fixed-term or fixed-payment mode, with prepayments and
  rate changes
- Loan term for a given monthly payment
- Loan cost summary with APR
"""
from decimal import Decimal
from typing import Dict, List

from backend.app.config import get_settings
from backend.app.logging_config import get_logger
from backend.app.schemas.loans import (
    APRRequest,
    EMIRequest,
    EMIResult,
    LoanSummary,
    LoanTermResponse,
    LoanType,
    LoanTypeConfig,
    PaymentMode,
    PaymentPlanRequest,
    PaymentResult,
    )
from backend.app.utils.amortization import calculate_emi, generate_payment_amortization
from backend.app.utils.financial_math import annuity_payment, loan_term_months, round_money
from backend.app.utils.rate_solver import calculate_apr

logger = get_logger(__name__)


LOAN_TYPES: Dict[LoanType, LoanTypeConfig] = {
    LoanType.HOME: LoanTypeConfig(
        loan_type=LoanType.HOME,
        name="Home Loan",
        icon="🏠",
        min_amount=Decimal("100000"),
        max_amount=Decimal("50000000"),
        min_rate=Decimal("6.5"),
        max_rate=Decimal("12"),
        min_tenure_years=5,
        max_tenure_years=30,
        description="Calculate EMI for your home loan or mortgage",
        ),
    LoanType.CAR: LoanTypeConfig(
        loan_type=LoanType.CAR,
        name="Car Loan",
        icon="🚗",
        min_amount=Decimal("50000"),
        max_amount=Decimal("5000000"),
        min_rate=Decimal("7"),
        max_rate=Decimal("15"),
        min_tenure_years=1,
        max_tenure_years=7,
        description="Calculate EMI for your car or vehicle loan",
        ),
    LoanType.PERSONAL: LoanTypeConfig(
        loan_type=LoanType.PERSONAL,
        name="Personal Loan",
        icon="💰",
        min_amount=Decimal("10000"),
        max_amount=Decimal("2000000"),
        min_rate=Decimal("10"),
        max_rate=Decimal("24"),
        min_tenure_years=1,
        max_tenure_years=5,
        description="Calculate EMI for personal loans",
        ),
    LoanType.EDUCATION: LoanTypeConfig(
        loan_type=LoanType.EDUCATION,
        name="Education Loan",
        icon="🎓",
        min_amount=Decimal("50000"),
        max_amount=Decimal("10000000"),
        min_rate=Decimal("8"),
        max_rate=Decimal("15"),
        min_tenure_years=5,
        max_tenure_years=15,
        description="Calculate EMI for education or student loans",
        ),
    }


def list_loan_types() -> List[LoanTypeConfig]:
    return list(LOAN_TYPES.values())


def validate_loan_type_ranges(
    loan_type: LoanType,
    principal: Decimal,
    annual_rate: Decimal,
    tenure_months: int,
    ) -> None:
    """
    Check loan inputs against the bounds of a loan-type preset.

    Raises:
        ValueError: Listing every input outside the preset's bounds
    """
    config = LOAN_TYPES[loan_type]
    errors: List[str] = []

    if not config.min_amount <= principal <= config.max_amount:
        errors.append(f"amount must be between {config.min_amount} and {config.max_amount}")
    if not config.min_rate <= annual_rate <= config.max_rate:
        errors.append(f"rate must be between {config.min_rate}% and {config.max_rate}%")
    if not config.min_tenure_years * 12 <= tenure_months <= config.max_tenure_years * 12:
        errors.append(f"tenure must be between {config.min_tenure_years} and {config.max_tenure_years} years")

    if errors:
        raise ValueError(f"{config.name}: " + "; ".join(errors))


def calculate_monthly_payment(request: EMIRequest) -> EMIResult:
    """EMI and schedule for a loan, validated against its preset when a loan type is given."""
    if request.loan_type is not None:
        validate_loan_type_ranges(request.loan_type, request.principal, request.annual_rate, request.tenure_months)

    result = calculate_emi(
        request.principal,
        request.annual_rate,
        request.tenure_months,
        request.extra_payments,
        request.start_date,
        )
    logger.info(
        "EMI calculated",
        principal=str(request.principal),
        annual_rate=str(request.annual_rate),
        tenure_months=request.tenure_months,
        emi=str(result.emi),
        months_scheduled=len(result.amortization),
        )
    return result


def calculate_loan_term(principal: Decimal, annual_rate: Decimal, monthly_payment: Decimal) -> LoanTermResponse:
    """Months needed to repay a loan with a fixed monthly payment."""
    months = loan_term_months(principal, annual_rate, monthly_payment)
    return LoanTermResponse(months=months, years=months // 12, remaining_months=months % 12)


def calculate_payment_plan(request: PaymentPlanRequest) -> PaymentResult:
    """
    Payment calculator.

    In fixed-term mode the EMI is derived from the tenure; in fixed-payment
    mode the tenure is derived from the payment. The dated schedule then
    applies prepayments and rate changes.
    """
    if request.mode == PaymentMode.FIXED_TERM:
        tenure_months = request.tenure_months
        monthly_payment = annuity_payment(request.principal, request.annual_rate, tenure_months)
    else:
        monthly_payment = request.monthly_payment
        tenure_months = loan_term_months(request.principal, request.annual_rate, monthly_payment)

    result = generate_payment_amortization(
        request.principal,
        request.annual_rate,
        tenure_months,
        monthly_payment,
        start_date=request.start_date,
        prepayments=request.prepayments,
        rate_changes=request.rate_changes,
        max_months=get_settings().MAX_SCHEDULE_MONTHS,
        )
    logger.info(
        "Payment plan calculated",
        mode=request.mode.value,
        principal=str(request.principal),
        planned_months=tenure_months,
        actual_months=result.calculated_term_months,
        prepayments=len(request.prepayments),
        rate_changes=len(request.rate_changes),
        )
    return result


def calculate_loan_summary(request: APRRequest) -> LoanSummary:
    """
    Total cost of a loan including fees, and its APR.

    total_payment = EMI * n, total_interest = total_payment - principal,
    total_cost = total_payment + fees.
    """
    monthly_payment = round_money(annuity_payment(request.principal, request.annual_rate, request.tenure_months))

    total_payment = round_money(monthly_payment * request.tenure_months)
    total_interest = total_payment - request.principal
    apr = calculate_apr(request.principal, request.annual_rate, request.tenure_months, request.total_fees)

    return LoanSummary(
        monthly_payment=monthly_payment,
        total_payment=total_payment,
        total_interest=round_money(total_interest),
        total_fees=round_money(request.total_fees),
        total_cost=round_money(total_payment + request.total_fees),
        apr=apr,
        )
