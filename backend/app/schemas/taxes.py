"""
Pydantic schemas for the tax calculators (GST, sales tax, property tax).
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class GSTRequest(BaseModel):
    """
    Input for POST /calc/tax/gst.

    With is_reverse the amount already includes GST and the base is
    extracted from it; otherwise the amount is the base.
    """
    model_config = ConfigDict(extra="forbid")

    amount: Decimal = Field(..., gt=0)
    gst_rate: Decimal = Field(..., ge=0, le=100, description="GST rate in percent (e.g. 18)")
    is_inter_state: bool = Field(False, description="Inter-state supply: IGST instead of CGST + SGST")
    is_reverse: bool = Field(False, description="Amount is GST-inclusive")


class GSTResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_amount: Decimal
    gst_rate: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    total_gst: Decimal
    final_amount: Decimal
    is_inter_state: bool


class SalesTaxRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: Decimal = Field(..., gt=0)
    rate: Decimal = Field(..., ge=0, le=100, description="Sales tax rate in percent")


class PropertyTaxRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    assessed_value: Decimal = Field(..., gt=0)
    rate: Decimal = Field(..., ge=0, le=100, description="Annual property tax rate in percent")


class TaxResult(BaseModel):
    """Sales or property tax result."""
    model_config = ConfigDict(extra="forbid")

    base_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal = Field(..., description="Base amount plus tax")
    monthly_tax: Optional[Decimal] = Field(None, description="Tax spread over 12 months (property tax only)")
