"""
Pydantic schemas for utility endpoints (currency selection).
"""
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict


class CurrencyItem(BaseModel):
    """A supported currency."""
    model_config = ConfigDict(extra="forbid")

    code: str = Field(..., description="ISO 4217 code (e.g., USD, INR)")
    name: str = Field(..., description="Currency name in the requested language")
    symbol: str = Field(..., description="Symbol in the currency's display locale")
    country: str
    country_code: str = Field(..., description="ISO 3166 alpha-2 code (EU for the euro)")
    locale: str = Field(..., description="Display locale used for formatting (e.g., en_IN)")


class CurrencyListResponse(BaseModel):
    """Response for currencies list endpoint."""
    model_config = ConfigDict(extra="forbid")

    currencies: List[CurrencyItem]
    count: int
    default: str = Field(..., description="Default currency code, listed first")
    language: str


class CurrencyNormalizationResponse(BaseModel):
    """Response for currency normalization endpoint."""
    model_config = ConfigDict(extra="forbid")

    query: str = Field(..., description="Original query string")
    iso_codes: List[str] = Field(..., description="Matching ISO 4217 codes")
    match_type: str = Field(..., description="exact, symbol_ambiguous, multi-match, not_found")
    error: Optional[str] = Field(None, description="Error message if normalization failed")
