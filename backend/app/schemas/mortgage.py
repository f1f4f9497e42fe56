"""
Pydantic schemas for the mortgage calculators.

**Domain Coverage**:
- FHA: upfront MIP financed into the loan, annual MIP recalculated yearly
- VA: funding fee by loan purpose, prior use and down payment
- Refinance: current vs new loan, break-even and yearly projections
- Affordability: maximum home price under front/back-end DTI limits

**Design Notes**:
- Rates are annual percentages, tax/insurance/HOA are monthly amounts
- Every amount in a result is rounded to cents
"""
from __future__ import annotations

from datetime import date as date_type
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator

from backend.app.schemas.loans import AmortizationRow


class MonthlyHousingCosts(BaseModel):
    """Monthly escrow items paid alongside principal and interest."""
    model_config = ConfigDict(extra="forbid")

    property_tax: Decimal = Field(Decimal("0"), ge=0, description="Monthly property tax")
    home_insurance: Decimal = Field(Decimal("0"), ge=0, description="Monthly homeowners insurance")
    hoa_fees: Decimal = Field(Decimal("0"), ge=0, description="Monthly HOA dues")


class _PurchaseRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    home_price: Decimal = Field(..., gt=0)
    down_payment: Decimal = Field(Decimal("0"), ge=0)
    annual_rate: Decimal = Field(..., ge=0, le=100)
    term_years: int = Field(30, ge=1, le=50)
    start_date: Optional[date_type] = None
    costs: MonthlyHousingCosts = Field(default_factory=MonthlyHousingCosts)

    @model_validator(mode='after')
    def validate_down_payment(self):
        if self.down_payment >= self.home_price:
            raise ValueError("down_payment must be lower than home_price")
        return self


# =============================================================================
# FHA
# =============================================================================

class FHARequest(_PurchaseRequest):
    """Input for POST /calc/mortgage/fha."""
    upfront_mip_rate: Decimal = Field(Decimal("1.75"), ge=0, le=10, description="Upfront MIP, % of base loan")
    annual_mip_rate: Decimal = Field(Decimal("0.55"), ge=0, le=5, description="Annual MIP, % of balance")


class FHAAmortizationRow(AmortizationRow):
    mip: Decimal = Field(..., description="Monthly MIP charged this month")
    total_payment: Decimal = Field(..., description="P&I + MIP + tax + insurance + HOA")


class FHAResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_loan_amount: Decimal
    financed_upfront_mip: Decimal
    total_loan_amount: Decimal
    monthly_principal_and_interest: Decimal
    monthly_mip: Decimal = Field(..., description="MIP of the first month")
    monthly_tax: Decimal
    monthly_insurance: Decimal
    monthly_hoa: Decimal
    total_monthly_payment: Decimal = Field(..., description="First-month total housing payment")
    total_interest: Decimal
    total_payment: Decimal
    total_mip_paid: Decimal
    total_tax_paid: Decimal
    total_insurance_paid: Decimal
    total_hoa_paid: Decimal
    amortization: List[FHAAmortizationRow] = Field(default_factory=list)


# =============================================================================
# VA
# =============================================================================

class VALoanPurpose(str, Enum):
    """
    VA loan purpose, drives the funding fee.

    - PURCHASE: home purchase, fee depends on down payment
    - CASH_OUT: cash-out refinance
    - IRRRL: interest rate reduction refinance
    """
    PURCHASE = "purchase"
    CASH_OUT = "cash-out"
    IRRRL = "irrrl"


class VARequest(_PurchaseRequest):
    """Input for POST /calc/mortgage/va."""
    loan_purpose: VALoanPurpose = VALoanPurpose.PURCHASE
    is_first_use: bool = Field(True, description="First use of the VA loan benefit")
    is_disabled: bool = Field(False, description="Service-connected disability (fee exempt)")


class VAResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_loan_amount: Decimal
    funding_fee_rate: Decimal = Field(..., description="Funding fee in percent")
    funding_fee_amount: Decimal
    total_loan_amount: Decimal
    emi: Decimal
    monthly_tax: Decimal
    monthly_insurance: Decimal
    monthly_hoa: Decimal
    total_monthly_payment: Decimal
    total_interest: Decimal
    total_payment: Decimal
    amortization: List[AmortizationRow] = Field(default_factory=list)


# =============================================================================
# REFINANCE
# =============================================================================

class RefinanceRequest(BaseModel):
    """Input for POST /calc/mortgage/refinance."""
    model_config = ConfigDict(extra="forbid")

    current_balance: Decimal = Field(..., gt=0)
    current_rate: Decimal = Field(..., ge=0, le=100)
    current_term_years: int = Field(..., ge=1, le=50, description="Remaining term of the current loan")
    new_loan_amount: Decimal = Field(..., gt=0)
    new_rate: Decimal = Field(..., ge=0, le=100)
    new_term_years: int = Field(..., ge=1, le=50)
    closing_costs: Decimal = Field(Decimal("0"), ge=0)
    cash_out_amount: Decimal = Field(Decimal("0"), ge=0)


class RefinanceMonthly(BaseModel):
    current_payment: Decimal
    new_payment: Decimal
    savings: Decimal


class RefinanceLifetime(BaseModel):
    current_total_interest: Decimal
    new_total_interest: Decimal
    interest_savings: Decimal
    total_cost_current: Decimal
    total_cost_new: Decimal = Field(..., description="Payments on the new loan plus closing costs")
    net_lifetime_savings: Decimal


class RefinanceProjection(BaseModel):
    month: int
    year: int
    current_balance: Decimal
    new_balance: Decimal
    cumulative_savings: Decimal


class RefinanceResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    monthly: RefinanceMonthly
    lifetime: RefinanceLifetime
    break_even_months: Decimal = Field(..., description="Closing costs / monthly savings, -1 without savings")
    projections: List[RefinanceProjection] = Field(default_factory=list)


# =============================================================================
# AFFORDABILITY
# =============================================================================

class MortgageType(str, Enum):
    CONVENTIONAL = "conventional"
    FHA = "fha"
    VA = "va"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AffordabilityRequest(BaseModel):
    """Input for POST /calc/mortgage/affordability."""
    model_config = ConfigDict(extra="forbid")

    annual_income: Decimal = Field(..., gt=0)
    monthly_debts: Decimal = Field(Decimal("0"), ge=0)
    down_payment: Decimal = Field(Decimal("0"), ge=0)
    annual_rate: Decimal = Field(..., ge=0, le=100)
    term_years: int = Field(30, ge=1, le=50)
    hoa_fees: Decimal = Field(Decimal("0"), ge=0, description="Monthly HOA dues")
    property_tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100, description="Annual tax, % of price")
    home_insurance: Decimal = Field(Decimal("0"), ge=0, description="Monthly insurance")
    mortgage_type: MortgageType = MortgageType.CONVENTIONAL
    front_end_dti: Optional[Decimal] = Field(None, gt=0, le=100, description="Override front-end limit (%)")
    back_end_dti: Optional[Decimal] = Field(None, gt=0, le=100, description="Override back-end limit (%)")
    pmi_rate: Optional[Decimal] = Field(None, ge=0, le=10, description="Override annual PMI rate (%)")


class AffordabilityBreakdown(BaseModel):
    principal_and_interest: Decimal
    property_tax: Decimal
    home_insurance: Decimal
    pmi: Decimal
    hoa_fees: Decimal


class AffordabilityResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_home_price: Decimal
    monthly_payment: Decimal
    loan_amount: Decimal
    down_payment_percent: Decimal
    dti: Decimal = Field(..., description="Back-end DTI at the maximum price, in percent")
    breakdown: AffordabilityBreakdown
    risk_level: RiskLevel
    insights: List[str] = Field(default_factory=list)
