"""
Pydantic schemas for the loan calculators (EMI, payment plans, APR).

**Domain Coverage**:
- ExtraPayment / Prepayment / RateChange: events that reshape a schedule
- AmortizationRow: one month of a repayment schedule
- EMIResult / PaymentResult: schedule plus totals
- LoanSummary: cost of a loan including fees and APR
- LoanType / LoanTypeConfig: preset bounds for home, car, personal and education loans
"""
from __future__ import annotations

from datetime import date as date_type
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator


# =============================================================================
# SCHEDULE EVENTS
# =============================================================================

class ExtraPaymentType(str, Enum):
    """
    Extra payment kind for the EMI schedule.

    - MONTHLY: recurring extra amount from start_month (or from month 1) onwards
    - LUMP: one-off amount paid in start_month
    """
    MONTHLY = "monthly"
    LUMP = "lump"


class ExtraPayment(BaseModel):
    """Extra principal payment applied on top of the EMI."""
    model_config = ConfigDict(extra="forbid")

    type: ExtraPaymentType = Field(..., description="monthly or lump")
    amount: Decimal = Field(..., gt=0, description="Extra amount paid")
    start_month: Optional[int] = Field(None, ge=1, description="1-based month index")

    @model_validator(mode='after')
    def validate_lump_month(self) -> 'ExtraPayment':
        if self.type == ExtraPaymentType.LUMP and self.start_month is None:
            raise ValueError("start_month is required for lump extra payments")
        return self


class PrepaymentType(str, Enum):
    """
    Effect of a prepayment on the remaining loan.

    - REDUCE_TENURE: keep the EMI, finish earlier
    - REDUCE_EMI: keep the original end date, lower the EMI
    """
    REDUCE_TENURE = "reduce-tenure"
    REDUCE_EMI = "reduce-emi"


class Prepayment(BaseModel):
    """Dated prepayment applied in the month it falls in."""
    model_config = ConfigDict(extra="forbid")

    date: date_type = Field(..., description="Date of the prepayment")
    amount: Decimal = Field(..., gt=0, description="Prepaid principal")
    type: PrepaymentType = Field(PrepaymentType.REDUCE_TENURE, description="reduce-tenure or reduce-emi")


class RateChange(BaseModel):
    """Dated change of the annual interest rate (floating-rate loans)."""
    model_config = ConfigDict(extra="forbid")

    date: date_type = Field(..., description="Date the new rate takes effect")
    new_rate: Decimal = Field(..., ge=0, le=100, description="New annual rate in percent")


# =============================================================================
# SCHEDULE ROWS AND RESULTS
# =============================================================================

class AmortizationRow(BaseModel):
    """One month of a repayment schedule."""
    model_config = ConfigDict(extra="forbid")

    month: int = Field(..., ge=1, description="1-based month index")
    date: Optional[date_type] = Field(None, description="Billing date, when a start date was given")
    payment: Decimal = Field(..., description="Total paid this month (EMI + extras)")
    principal: Decimal = Field(..., description="Principal repaid this month")
    interest: Decimal = Field(..., description="Interest charged this month")
    balance: Decimal = Field(..., description="Outstanding balance after this month")


class EMIResult(BaseModel):
    """EMI with full amortization schedule."""
    model_config = ConfigDict(extra="forbid")

    emi: Decimal = Field(..., description="Monthly instalment, rounded to cents")
    total_interest: Decimal = Field(..., description="Interest paid over the schedule")
    total_payment: Decimal = Field(..., description="Everything paid over the schedule")
    amortization: List[AmortizationRow] = Field(default_factory=list)


class PaymentResult(EMIResult):
    """Schedule produced by the payment calculator."""
    calculated_term_months: int = Field(..., description="Months actually needed to close the loan")
    calculated_monthly_payment: Decimal = Field(..., description="EMI in force at the end of the schedule")


# =============================================================================
# REQUESTS
# =============================================================================

class LoanType(str, Enum):
    HOME = "home"
    CAR = "car"
    PERSONAL = "personal"
    EDUCATION = "education"


class LoanTypeConfig(BaseModel):
    """Preset input bounds for a loan type."""
    model_config = ConfigDict(extra="forbid")

    loan_type: LoanType
    name: str
    icon: str
    min_amount: Decimal
    max_amount: Decimal
    min_rate: Decimal
    max_rate: Decimal
    min_tenure_years: int
    max_tenure_years: int
    description: str


class EMIRequest(BaseModel):
    """Input for POST /calc/emi."""
    model_config = ConfigDict(extra="forbid")

    principal: Decimal = Field(..., gt=0, description="Loan amount")
    annual_rate: Decimal = Field(..., ge=0, le=100, description="Annual interest rate in percent")
    tenure_months: int = Field(..., gt=0, le=1200, description="Loan tenure in months")
    extra_payments: List[ExtraPayment] = Field(default_factory=list)
    start_date: Optional[date_type] = Field(None, description="First billing date (dates the schedule)")
    loan_type: Optional[LoanType] = Field(None, description="Check inputs against this preset's bounds")


class PaymentMode(str, Enum):
    """
    Payment calculator mode.

    - FIXED_TERM: tenure is given, the EMI is derived
    - FIXED_PAYMENT: the monthly payment is given, the tenure is derived
    """
    FIXED_TERM = "fixed-term"
    FIXED_PAYMENT = "fixed-payment"


class PaymentPlanRequest(BaseModel):
    """Input for POST /calc/payment."""
    model_config = ConfigDict(extra="forbid")

    mode: PaymentMode = Field(PaymentMode.FIXED_TERM)
    principal: Decimal = Field(..., gt=0)
    annual_rate: Decimal = Field(..., ge=0, le=100)
    tenure_months: Optional[int] = Field(None, gt=0, le=1200)
    monthly_payment: Optional[Decimal] = Field(None, gt=0)
    start_date: Optional[date_type] = None
    prepayments: List[Prepayment] = Field(default_factory=list)
    rate_changes: List[RateChange] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_mode_inputs(self) -> 'PaymentPlanRequest':
        if self.mode == PaymentMode.FIXED_TERM and self.tenure_months is None:
            raise ValueError("tenure_months is required in fixed-term mode")
        if self.mode == PaymentMode.FIXED_PAYMENT and self.monthly_payment is None:
            raise ValueError("monthly_payment is required in fixed-payment mode")
        return self


class LoanTermRequest(BaseModel):
    """Input for POST /calc/loan-term."""
    model_config = ConfigDict(extra="forbid")

    principal: Decimal = Field(..., gt=0)
    annual_rate: Decimal = Field(..., ge=0, le=100)
    monthly_payment: Decimal = Field(..., gt=0)


class LoanTermResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    months: int = Field(..., description="Months needed to repay the loan")
    years: int = Field(..., description="Whole years part of the term")
    remaining_months: int = Field(..., description="Months beyond the whole years")


class APRRequest(BaseModel):
    """Input for POST /calc/apr."""
    model_config = ConfigDict(extra="forbid")

    principal: Decimal = Field(..., gt=0)
    annual_rate: Decimal = Field(..., ge=0, le=100)
    tenure_months: int = Field(..., gt=0, le=1200)
    total_fees: Decimal = Field(Decimal("0"), ge=0, description="Fees and closing costs")


class LoanSummary(BaseModel):
    """Cost of a loan including fees, with its APR."""
    model_config = ConfigDict(extra="forbid")

    monthly_payment: Decimal
    total_payment: Decimal
    total_interest: Decimal
    total_fees: Decimal
    total_cost: Decimal
    apr: Decimal = Field(..., description="Annual percentage rate in percent")
