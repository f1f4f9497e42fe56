"""
Pydantic schemas for the simple/compound interest and APY calculators.
"""
from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field, ConfigDict

from backend.app.schemas.common import CompoundFrequency


class YearlyBreakdown(BaseModel):
    """Balance movement over one year."""
    year: int
    opening_balance: Decimal
    interest: Decimal
    closing_balance: Decimal


class SimpleInterestRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    principal: Decimal = Field(..., gt=0)
    annual_rate: Decimal = Field(..., ge=0, le=100)
    years: int = Field(..., ge=1, le=100)


class CompoundInterestRequest(SimpleInterestRequest):
    frequency: CompoundFrequency = Field(CompoundFrequency.YEARLY, description="Compounding frequency")


class InterestResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    principal: Decimal
    annual_rate: Decimal
    years: int
    interest: Decimal
    total_amount: Decimal
    breakdown: List[YearlyBreakdown] = Field(default_factory=list)


class APYRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    nominal_rate: Decimal = Field(..., ge=0, le=100)
    frequency: CompoundFrequency = CompoundFrequency.MONTHLY


class APYResult(BaseModel):
    nominal_rate: Decimal
    frequency: CompoundFrequency
    apy: Decimal = Field(..., description="Annual percentage yield in percent, 2 decimals")
