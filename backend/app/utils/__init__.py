"""
Utility functions for CalcBZ.

This package contains:
- financial_math: Rounding, annuity payment, interest and yield formulas
- amortization: EMI and payment schedules with extras, prepayments and rate changes
- rate_solver: Newton-Raphson, APR, IRR, NPV, MIRR
- currency_utils / translation_utils: Currency selection and Babel formatting
- datetime_utils: UTC helpers and calendar month arithmetic
"""
