"""
Pydantic schemas for report export.
"""
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

from backend.app.schemas.common import validate_currency_code
from backend.app.schemas.loans import AmortizationRow


class CSVExportRequest(BaseModel):
    """
    Input for POST /export/csv.

    Summary values are optional and rendered as N/A when absent; the
    amortization schedule must contain at least one row.
    """
    model_config = ConfigDict(extra="forbid")

    amortization: List[AmortizationRow] = Field(..., min_length=1)
    principal: Optional[Decimal] = None
    rate: Optional[Decimal] = Field(None, description="Annual rate in percent")
    tenure: Optional[int] = Field(None, description="Tenure in months")
    emi: Optional[Decimal] = None
    total_interest: Optional[Decimal] = None
    total_payment: Optional[Decimal] = None
    currency: Optional[str] = Field(None, description="ISO 4217 code for amounts (defaults to settings)")
    locale: Optional[str] = Field(None, description="Babel locale for number formatting, e.g. en_IN")

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v):
        if v is None:
            return v
        return validate_currency_code(v)
