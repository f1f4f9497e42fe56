"""
Pydantic schemas for the debt-to-income (DTI) calculator.

**Domain Coverage**:
- IncomeSource / HousingCosts / DebtItem: monthly inputs
- DTIResult: front-end and back-end ratios, loan qualification, health band
- DTIWhatIfRequest: the same inputs with hypothetical adjustments
- DebtPrioritizeRequest: avalanche (highest rate) or snowball (smallest balance) ordering
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict


class DebtType(str, Enum):
    HOUSING = "housing"
    AUTO = "auto"
    STUDENT = "student"
    CREDIT = "credit"
    PERSONAL = "personal"
    OTHER = "other"


class DebtItem(BaseModel):
    """A recurring monthly debt. Housing items are excluded from non-housing debts."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    monthly_payment: Decimal = Field(..., ge=0)
    balance: Optional[Decimal] = Field(None, ge=0)
    interest_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    type: DebtType = DebtType.OTHER


class IncomeSource(BaseModel):
    """Gross monthly income by source."""
    model_config = ConfigDict(extra="forbid")

    primary: Decimal = Field(Decimal("0"), ge=0)
    secondary: Decimal = Field(Decimal("0"), ge=0)
    bonus: Decimal = Field(Decimal("0"), ge=0)
    rental: Decimal = Field(Decimal("0"), ge=0)
    other: Decimal = Field(Decimal("0"), ge=0)


class HousingCosts(BaseModel):
    """Monthly housing costs."""
    model_config = ConfigDict(extra="forbid")

    mortgage_or_rent: Decimal = Field(Decimal("0"), ge=0)
    property_tax: Decimal = Field(Decimal("0"), ge=0)
    home_insurance: Decimal = Field(Decimal("0"), ge=0)
    hoa_fees: Decimal = Field(Decimal("0"), ge=0)


class DTIRequest(BaseModel):
    """Input for POST /calc/dti."""
    model_config = ConfigDict(extra="forbid")

    income: IncomeSource = Field(default_factory=IncomeSource)
    housing: HousingCosts = Field(default_factory=HousingCosts)
    debts: List[DebtItem] = Field(default_factory=list)


class Qualification(BaseModel):
    conventional: bool = Field(..., description="Front-end <= 28 % and back-end <= 36 %")
    fha: bool = Field(..., description="Front-end <= 31 % and back-end <= 43 %")
    va: bool = Field(..., description="Back-end <= 41 %")


class HealthStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    RISKY = "risky"
    HIGH_RISK = "high-risk"


class DTIResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    front_end_ratio: Decimal = Field(..., description="Housing costs / income, percent")
    back_end_ratio: Decimal = Field(..., description="All debts / income, percent")
    total_monthly_income: Decimal
    total_housing_costs: Decimal
    total_monthly_debts: Decimal = Field(..., description="Housing costs plus non-housing debts")
    qualification: Qualification
    health_status: HealthStatus
    recommendations: List[str] = Field(default_factory=list)


class WhatIfChanges(BaseModel):
    """Hypothetical monthly adjustments."""
    model_config = ConfigDict(extra="forbid")

    income_increase: Decimal = Field(Decimal("0"), ge=0)
    debt_reduction: Decimal = Field(Decimal("0"), ge=0)
    housing_reduction: Decimal = Field(Decimal("0"), ge=0)


class DTIWhatIfRequest(DTIRequest):
    """Input for POST /calc/dti/what-if."""
    changes: WhatIfChanges = Field(default_factory=WhatIfChanges)


class DTIWhatIfResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    current: DTIResult
    scenario: DTIResult


class PrioritizeStrategy(str, Enum):
    """
    Debt payoff ordering.

    - AVALANCHE: highest interest rate first (debts without a rate are skipped)
    - SNOWBALL: smallest balance first (debts without a balance are skipped)
    """
    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"


class DebtPrioritizeRequest(BaseModel):
    """Input for POST /calc/dti/prioritize."""
    model_config = ConfigDict(extra="forbid")

    strategy: PrioritizeStrategy = PrioritizeStrategy.AVALANCHE
    debts: List[DebtItem] = Field(default_factory=list)


class DebtPrioritizeResult(BaseModel):
    strategy: PrioritizeStrategy
    debts: List[DebtItem]
