"""
Pydantic schemas for the investment-return calculators (IRR, NPV, MIRR).

Cash flows are per period; index 0 is the initial outlay (usually
negative). Rates in requests and results are percentages.
"""
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

# Fifty years of monthly flows
MAX_CASH_FLOWS = 600


class CashFlowRequest(BaseModel):
    """Input for POST /calc/investment/irr."""
    model_config = ConfigDict(extra="forbid")

    cash_flows: List[Decimal] = Field(..., min_length=2, max_length=MAX_CASH_FLOWS, description="Flows per period, index 0 first")
    discount_rate: Optional[Decimal] = Field(None, ge=-99, le=1000, description="Rate for the schedule and sensitivity (%)")


class NPVRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    cash_flows: List[Decimal] = Field(..., min_length=1, max_length=MAX_CASH_FLOWS)
    discount_rate: Decimal = Field(..., ge=-99, le=1000, description="Discount rate in percent")


class MIRRRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    cash_flows: List[Decimal] = Field(..., min_length=2, max_length=MAX_CASH_FLOWS)
    finance_rate: Decimal = Field(..., ge=-99, le=1000, description="Cost of financing outflows (%)")
    reinvestment_rate: Decimal = Field(..., ge=-99, le=1000, description="Return on reinvested inflows (%)")


class InvestmentProjectRequest(BaseModel):
    """Input for POST /calc/investment/project."""
    model_config = ConfigDict(extra="forbid")

    initial_investment: Decimal = Field(..., gt=0)
    periodic_returns: List[Decimal] = Field(..., min_length=1, max_length=MAX_CASH_FLOWS - 1)
    inflation_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100)

    @field_validator('periodic_returns')
    @classmethod
    def validate_returns(cls, v):
        if not any(r > 0 for r in v):
            raise ValueError("At least one periodic return must be positive")
        return v


class CashFlowItem(BaseModel):
    """One period of a cash-flow schedule."""
    period: int
    cash_flow: Decimal
    cumulative: Decimal
    discounted_cash_flow: Decimal
    npv: Decimal = Field(..., description="Running NPV up to this period")


class SensitivityPoint(BaseModel):
    rate: Decimal
    npv: Decimal


class IRRResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    irr: Decimal = Field(..., description="Internal rate of return in percent")
    npv_at_irr: Optional[Decimal] = Field(None, description="NPV at the reported rate; null when it cannot be evaluated")
    iterations: int
    converged: bool
    mirr: Optional[Decimal] = Field(None, description="MIRR in percent (finance 10 %, reinvest at IRR)")
    payback_period: Optional[Decimal] = Field(None, description="Periods to recover the outlay")
    schedule: List[CashFlowItem] = Field(default_factory=list)
    sensitivity: List[SensitivityPoint] = Field(default_factory=list)


class NPVResult(BaseModel):
    discount_rate: Decimal
    npv: Decimal
    schedule: List[CashFlowItem] = Field(default_factory=list)


class MIRRResult(BaseModel):
    mirr: Decimal = Field(..., description="MIRR in percent")


class InvestmentProjectResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    result: IRRResult
    real_irr: Optional[Decimal] = Field(None, description="Inflation-adjusted IRR, when inflation > 0")
    after_tax_irr: Optional[Decimal] = Field(None, description="IRR on returns after tax, when tax > 0")
    total_return: Decimal = Field(..., description="Sum of all cash flows")
