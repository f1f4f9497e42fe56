"""
Pydantic schemas for the chit fund calculator.

A chit fund is a rotating savings scheme: members pay a fixed monthly
contribution and each month's pot is auctioned. The winning bid (discount)
minus the foreman's commission is shared among members as a dividend.
"""
from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field, ConfigDict


class ChitFundRequest(BaseModel):
    """Input for POST /calc/chit-fund."""
    model_config = ConfigDict(extra="forbid")

    chit_value: Decimal = Field(..., gt=0, description="Total pot value")
    months: int = Field(..., ge=2, le=240, description="Duration in months (equals number of members)")
    commission_percent: Decimal = Field(Decimal("5"), ge=0, le=100, description="Foreman commission, % of value")
    average_bid_percent: Decimal = Field(Decimal("20"), ge=0, le=100, description="Average auction discount, % of value")


class ChitMonth(BaseModel):
    month: int
    contribution: Decimal
    dividend: Decimal
    net_payable: Decimal


class ChitFundResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    chit_value: Decimal
    months: int
    monthly_contribution: Decimal
    total_investment: Decimal = Field(..., description="Nominal contributions (monthly x months)")
    net_payable: Decimal = Field(..., description="Contributions net of dividends")
    total_dividend: Decimal
    return_percentage: Decimal
    monthly_breakdown: List[ChitMonth] = Field(default_factory=list)
