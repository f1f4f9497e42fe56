"""
Common schemas shared across calculators.

**Domain Coverage**:
- CompoundFrequency: compounding periods used by interest and savings calculators
- validate_currency_code: ISO 4217 validation for currency-aware payloads
- MessageResponse / ErrorResponse: small envelopes reused by several endpoints

**Design Notes**:
- Rates are annual percentages everywhere (7.5 means 7.5 %)
- Money values are Decimal; JSON serializes them as strings
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

import pycountry
from pydantic import BaseModel, Field, ConfigDict


class CompoundFrequency(str, Enum):
    """
    Frequency of interest compounding.

    - YEARLY: once a year (n=1)
    - HALF_YEARLY: twice a year (n=2)
    - QUARTERLY: every quarter (n=4)
    - MONTHLY: every month (n=12)
    - DAILY: every day (n=365)
    - CONTINUOUS: continuous compounding (A = P * e^(rt))
    """
    YEARLY = "yearly"
    HALF_YEARLY = "half-yearly"
    QUARTERLY = "quarterly"
    MONTHLY = "monthly"
    DAILY = "daily"
    CONTINUOUS = "continuous"


def validate_currency_code(v: Any) -> str:
    """
    Validate and normalize an ISO 4217 currency code.

    Use in Pydantic @field_validator for currency code fields.

    Args:
        v: Currency code to validate

    Returns:
        Uppercase validated currency code

    Raises:
        ValueError: If currency code is not a known ISO 4217 code

    Example:
        @field_validator('currency')
        @classmethod
        def validate_currency(cls, v):
            return validate_currency_code(v)
    """
    if not isinstance(v, str):
        raise ValueError(f"Currency code must be a string, got {type(v)}")

    code = v.upper().strip()
    if not code:
        raise ValueError("Currency code cannot be empty")

    try:
        pycountry.currencies.lookup(code)
    except LookupError:
        raise ValueError(f"Invalid currency code: '{code}'. Must be an ISO 4217 currency.")
    return code


class MessageResponse(BaseModel):
    """Generic success envelope."""
    model_config = ConfigDict(extra="forbid")

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """Error envelope returned with 4xx responses."""
    model_config = ConfigDict(extra="forbid")

    detail: str = Field(..., description="Error description")
    field: Optional[str] = Field(None, description="Offending field, when known")
