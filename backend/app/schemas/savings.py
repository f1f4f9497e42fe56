"""
Pydantic schemas for the savings and investment planner.

**Domain Coverage**:
- SavingsPlanRequest: lump sum, SIP (monthly investment), both combined, or
  a step-up SIP whose monthly amount grows every year
- SavingsPlanResult: future value, returns, CAGR, optional inflation-adjusted
  and after-tax values, yearly breakdown
- GoalPlanRequest / GoalPlanResult: monthly SIP needed to reach a target

**Design Notes**:
- Compounding is monthly at annual_rate / 12
- SIP instalments are invested at the start of each month
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator

MAX_SAVINGS_YEARS = 50


class SavingsPlanType(str, Enum):
    LUMPSUM = "lumpsum"
    SIP = "sip"
    COMBINED = "combined"
    STEP_UP = "step-up"


class SavingsPlanRequest(BaseModel):
    """Input for POST /calc/savings."""
    model_config = ConfigDict(extra="forbid")

    plan_type: SavingsPlanType
    lumpsum: Decimal = Field(Decimal("0"), ge=0, description="One-off investment at the start")
    monthly_investment: Decimal = Field(Decimal("0"), ge=0, description="Monthly SIP amount (first year for step-up)")
    step_up_rate: Decimal = Field(Decimal("0"), ge=0, le=100, description="Yearly increase of the SIP (%)")
    annual_rate: Decimal = Field(..., ge=0, le=50, description="Expected annual return (%)")
    years: int = Field(..., ge=1, le=MAX_SAVINGS_YEARS)
    inflation_rate: Optional[Decimal] = Field(None, ge=0, le=50)
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=100, description="Tax on returns (%)")

    @model_validator(mode='after')
    def validate_amounts(self):
        needs_lumpsum = self.plan_type in (SavingsPlanType.LUMPSUM, SavingsPlanType.COMBINED)
        needs_sip = self.plan_type != SavingsPlanType.LUMPSUM
        if needs_lumpsum and self.lumpsum <= 0:
            raise ValueError(f"lumpsum must be positive for a {self.plan_type.value} plan")
        if needs_sip and self.monthly_investment <= 0:
            raise ValueError(f"monthly_investment must be positive for a {self.plan_type.value} plan")
        return self


class SavingsYear(BaseModel):
    year: int
    yearly_investment: Decimal
    total_investment: Decimal
    interest_earned: Decimal
    total_interest: Decimal
    balance: Decimal


class SavingsPlanResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    plan_type: SavingsPlanType
    total_investment: Decimal
    total_returns: Decimal
    future_value: Decimal
    real_value: Optional[Decimal] = Field(None, description="Future value in today's money, when inflation > 0")
    after_tax_value: Optional[Decimal] = Field(None, description="Future value after tax on returns, when tax > 0")
    cagr: Decimal = Field(..., description="Compound annual growth of the total investment (%)")
    yearly_breakdown: List[SavingsYear] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class GoalPlanRequest(BaseModel):
    """Input for POST /calc/savings/goal."""
    model_config = ConfigDict(extra="forbid")

    target_amount: Decimal = Field(..., gt=0)
    current_savings: Decimal = Field(Decimal("0"), ge=0)
    annual_rate: Decimal = Field(..., ge=0, le=50)
    years: int = Field(..., ge=1, le=MAX_SAVINGS_YEARS)


class GoalPlanResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    required_monthly_investment: Decimal = Field(..., description="0 when current savings already reach the target")
    future_value_of_savings: Decimal
    total_investment: Decimal = Field(..., description="Current savings plus all SIP instalments")
    goal_reached_by_savings: bool
