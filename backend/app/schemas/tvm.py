"""
Pydantic schemas for the time-value-of-money (TVM) calculator.

**Domain Coverage**:
- TVMRequest: the five TVM quantities, one of which (`mode`) is solved for
- TVMResult: the solved value, the completed set of quantities, totals,
  a per-period schedule and plain-text suggestions

**Sign Convention**:
All modes share one balance equation

    FV = PV * (1 + r)^n + PMT * s(n) * k

where s(n) = ((1 + r)^n - 1) / r (n when r = 0) and k = 1 + r for payments
at the start of a period. Money added to the balance is positive: a savings
plan has PV >= 0 and PMT >= 0, a loan of 100,000 repaid to zero has
PV = 100000, FV = 0 and a negative PMT.
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator

from backend.app.schemas.common import CompoundFrequency

MAX_TVM_PERIODS = 1200
MAX_TVM_AMOUNT = Decimal("1000000000000")


class TVMMode(str, Enum):
    """Quantity to solve for."""
    FUTURE_VALUE = "fv"
    PRESENT_VALUE = "pv"
    PAYMENT = "pmt"
    PERIODS = "n"
    RATE = "rate"


class PaymentTiming(str, Enum):
    BEGIN = "begin"
    END = "end"


class TVMRequest(BaseModel):
    """Input for POST /calc/tvm. The field named by `mode` is ignored."""
    model_config = ConfigDict(extra="forbid")

    mode: TVMMode
    present_value: Decimal = Field(Decimal("0"), ge=-MAX_TVM_AMOUNT, le=MAX_TVM_AMOUNT)
    future_value: Decimal = Field(Decimal("0"), ge=-MAX_TVM_AMOUNT, le=MAX_TVM_AMOUNT)
    payment: Decimal = Field(Decimal("0"), ge=-MAX_TVM_AMOUNT, le=MAX_TVM_AMOUNT, description="Payment per period")
    annual_rate: Optional[Decimal] = Field(None, ge=0, le=100, description="Nominal annual rate (%)")
    periods: Optional[int] = Field(None, gt=0, le=MAX_TVM_PERIODS, description="Number of compounding periods")
    frequency: CompoundFrequency = Field(CompoundFrequency.MONTHLY, description="Compounding and payment frequency")
    timing: PaymentTiming = PaymentTiming.END

    @model_validator(mode='after')
    def validate_inputs(self):
        if self.frequency == CompoundFrequency.CONTINUOUS:
            raise ValueError("continuous compounding is not supported for TVM calculations")

        needs_rate = self.mode != TVMMode.RATE
        needs_periods = self.mode != TVMMode.PERIODS
        if needs_rate and self.annual_rate is None:
            raise ValueError(f"annual_rate is required to solve for {self.mode.value}")
        if needs_periods and self.periods is None:
            raise ValueError(f"periods is required to solve for {self.mode.value}")

        if self.mode == TVMMode.FUTURE_VALUE and self.present_value == 0 and self.payment == 0:
            raise ValueError("Either present_value or payment must be non-zero")
        if self.mode == TVMMode.PRESENT_VALUE and self.future_value == 0 and self.payment == 0:
            raise ValueError("Either future_value or payment must be non-zero")
        if self.mode == TVMMode.PAYMENT and self.present_value == 0 and self.future_value == 0:
            raise ValueError("Either present_value or future_value must be non-zero")
        if self.mode == TVMMode.PERIODS and self.present_value == 0 and self.payment == 0:
            raise ValueError("Either present_value or payment must be non-zero")
        return self


class TVMScheduleRow(BaseModel):
    """Balance after one period."""
    period: int
    payment: Decimal
    interest: Decimal
    balance: Decimal
    cumulative_payment: Decimal
    cumulative_interest: Decimal


class TVMResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    mode: TVMMode
    value: Decimal = Field(..., description="The solved quantity (amount, periods, or annual rate in %)")
    present_value: Decimal
    future_value: Decimal
    payment: Decimal
    annual_rate: Decimal = Field(..., description="Nominal annual rate (%)")
    periods: Decimal
    effective_rate: Decimal = Field(..., description="Effective annual rate (%)")
    total_contributions: Decimal = Field(..., description="PV + PMT * n")
    total_interest: Decimal = Field(..., description="FV - PV - PMT * n")
    schedule: List[TVMScheduleRow] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
