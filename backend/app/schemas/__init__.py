"""
Pydantic schemas for CalcBZ.

Request and response models of the calculator API, shared by the API layer
and the services.

**Organization by Domain**:
- common.py: Shared schemas (CompoundFrequency, MessageResponse, currency code validation)
- loans.py: EMI, payment plan, loan term, APR, loan type presets
- mortgage.py: FHA, VA, refinance, affordability
- taxes.py: GST, sales tax, property tax
- interest.py: Simple and compound interest, APY
- chit.py: Chit fund
- dti.py: Debt-to-income analysis, what-if, debt prioritization
- investment.py: IRR, NPV, MIRR, investment project
- tvm.py: Time value of money (FV, PV, PMT, periods, rate)
- savings.py: Lump sum, SIP and step-up SIP plans, goal planning
- rental.py: Rental property analysis
- export.py: CSV report export
- contact.py: Contact form
- sessions.py: Persisted calculator sessions, preferences, saved scenarios
- utilities.py: Currency selection

**Design Notes**:
- All models use Pydantic v2; request models forbid unknown fields
- Rates are percentages (7.5 means 7.5 %); amounts are Decimal
- Schemas separated from API layer (no inline definitions)
"""
from backend.app.schemas.common import (
    CompoundFrequency,
    ErrorResponse,
    MessageResponse,
    )
from backend.app.schemas.loans import (
    AmortizationRow,
    EMIRequest,
    EMIResult,
    LoanType,
    PaymentPlanRequest,
    PaymentResult,
    )

__all__ = [
    # Common
    "CompoundFrequency",
    "ErrorResponse",
    "MessageResponse",
    # Loans
    "AmortizationRow",
    "EMIRequest",
    "EMIResult",
    "LoanType",
    "PaymentPlanRequest",
    "PaymentResult",
    ]
