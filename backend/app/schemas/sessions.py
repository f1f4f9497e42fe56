"""
Schemas for persisted user inputs.

**Domain Coverage**:
- Calculator sessions: last inputs of a calculator, expiring after a TTL
- Preferences: small JSON values per key (e.g. selected currency)
- Saved scenarios: named loan configurations kept for comparison
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

from backend.app.schemas.loans import LoanType


class CalculatorSessionSave(BaseModel):
    """Body of PUT /sessions/{client_id}/{calculator_type}."""
    model_config = ConfigDict(extra="forbid")

    data: Dict[str, Any] = Field(..., description="Calculator inputs as entered by the user")


class CalculatorSessionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    client_id: str
    calculator_type: str
    data: Dict[str, Any]
    updated_at: datetime
    expires_at: datetime


class PreferenceSave(BaseModel):
    """Body of PUT /preferences/{client_id}/{key}."""
    model_config = ConfigDict(extra="forbid")

    value: Any = Field(..., description="Any JSON value")


class PreferenceRead(BaseModel):
    client_id: str
    key: str
    value: Any
    updated_at: datetime


class ScenarioCreate(BaseModel):
    """Body of POST /scenarios/{client_id}."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str = Field(..., max_length=200)
    loan_type: Optional[LoanType] = None
    principal: Decimal = Field(..., gt=0)
    annual_rate: Decimal = Field(..., ge=0, le=100)
    tenure_months: int = Field(..., gt=0, le=1200)
    result: Dict[str, Any] = Field(default_factory=dict, description="Calculated figures shown with the scenario")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v:
            raise ValueError("Title cannot be blank")
        return v


class ScenarioRead(BaseModel):
    id: int
    client_id: str
    title: str
    loan_type: Optional[LoanType] = None
    principal: Decimal
    annual_rate: Decimal
    tenure_months: int
    result: Dict[str, Any]
    created_at: datetime
