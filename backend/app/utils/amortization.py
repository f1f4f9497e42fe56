"""
Amortization engine.

Builds month-by-month repayment schedules for instalment loans:
- calculate_emi: fixed EMI schedule with recurring or lump-sum extra payments
- generate_payment_amortization: dated schedule with prepayments
  (reduce-tenure / reduce-emi) and floating-rate changes

Both functions are pure and operate on Decimal values. Rates are annual
percentages.
"""
from datetime import date as date_type
from decimal import Decimal
from typing import Iterable, List, Optional

from backend.app.logging_config import get_logger
from backend.app.schemas.loans import (
    AmortizationRow,
    EMIResult,
    ExtraPayment,
    ExtraPaymentType,
    PaymentResult,
    Prepayment,
    PrepaymentType,
    RateChange,
    )
from backend.app.utils.datetime_utils import add_months, today_date
from backend.app.utils.financial_math import (
    CENT,
    ZERO,
    annuity_payment,
    monthly_rate,
    round_money,
    )

logger = get_logger(__name__)

DEFAULT_MAX_SCHEDULE_MONTHS = 1200


# ============================================================================
# EMI SCHEDULE
# ============================================================================

def _extra_for_month(extras: Iterable[ExtraPayment], month: int) -> Decimal:
    """Sum of extra payments due in the given 1-based month."""
    total = ZERO
    for extra in extras:
        if extra.type == ExtraPaymentType.MONTHLY:
            if extra.start_month is None or month >= extra.start_month:
                total += extra.amount
        elif extra.type == ExtraPaymentType.LUMP:
            if extra.start_month == month:
                total += extra.amount
    return total


def calculate_emi(
    principal: Decimal,
    annual_rate: Decimal,
    tenure_months: int,
    extras: Iterable[ExtraPayment] = (),
    start_date: Optional[date_type] = None,
    ) -> EMIResult:
    """
    Calculate the EMI of a loan and its amortization schedule.

    The EMI is rounded to cents (standard banking practice). Each month:
    interest = round(balance * r); the payment is EMI + extras, capped at
    balance + interest; the scheduled final month settles whatever balance
    is left so rounding never spills into an extra month.

    Args:
        principal: Loan amount (> 0)
        annual_rate: Annual rate in percent (>= 0)
        tenure_months: Number of monthly instalments (> 0)
        extras: Recurring or lump-sum extra payments
        start_date: Optional first billing date; rows are dated when given

    Returns:
        EMIResult with the rounded EMI, totals and the schedule

    Raises:
        ValueError: If principal or tenure are not positive, or rate is negative

    Example:
        >>> result = calculate_emi(Decimal("1000000"), Decimal("7.5"), 240)
        >>> result.emi
        Decimal('8055.93')
    """
    principal = Decimal(principal)
    annual_rate = Decimal(annual_rate)

    if principal <= ZERO:
        raise ValueError("Principal must be positive")
    if tenure_months <= 0:
        raise ValueError("Tenure must be positive")
    if annual_rate < ZERO:
        raise ValueError("Interest rate cannot be negative")

    extras = list(extras)
    r = monthly_rate(annual_rate)
    emi = round_money(annuity_payment(principal, annual_rate, tenure_months))

    balance = principal
    total_interest = ZERO
    total_payment = ZERO
    rows: List[AmortizationRow] = []

    for month in range(1, tenure_months + 1):
        interest = round_money(balance * r)
        total_required = balance + interest

        payment = emi + _extra_for_month(extras, month)
        if payment > total_required or month >= tenure_months:
            payment = total_required

        principal_paid = payment - interest
        balance = round_money(balance - principal_paid)
        if balance < ZERO:
            balance = ZERO

        total_interest += interest
        total_payment += payment

        rows.append(AmortizationRow(
            month=month,
            date=add_months(start_date, month - 1) if start_date else None,
            payment=round_money(payment),
            principal=round_money(principal_paid),
            interest=interest,
            balance=balance,
            ))

        if balance <= ZERO:
            break

    logger.debug(
        "EMI schedule built",
        principal=str(principal),
        annual_rate=str(annual_rate),
        tenure_months=tenure_months,
        months_scheduled=len(rows),
        )

    return EMIResult(
        emi=emi,
        total_interest=round_money(total_interest),
        total_payment=round_money(total_payment),
        amortization=rows,
        )


# ============================================================================
# PAYMENT SCHEDULE WITH PREPAYMENTS AND RATE CHANGES
# ============================================================================

def _active_rate(rate_changes: List[RateChange], billing_date: date_type, current_rate: Decimal) -> Decimal:
    """Rate of the latest change dated on or before the billing date."""
    active = [rc for rc in rate_changes if rc.date <= billing_date]
    if active:
        return active[-1].new_rate
    return current_rate


def generate_payment_amortization(
    principal: Decimal,
    annual_rate: Decimal,
    tenure_months: int,
    monthly_payment: Decimal,
    start_date: Optional[date_type] = None,
    prepayments: Iterable[Prepayment] = (),
    rate_changes: Iterable[RateChange] = (),
    max_months: int = DEFAULT_MAX_SCHEDULE_MONTHS,
    ) -> PaymentResult:
    """
    Generate a dated amortization schedule for the payment calculator.

    Handles both fixed-term and fixed-payment plans (for fixed-payment,
    tenure_months is the term derived from the payment).

    Rules applied each month, in order:
    1. The latest rate change dated on or before the billing date sets the
       rate. The EMI is kept constant, so the tenure absorbs the change.
    2. Interest accrues on the opening balance.
    3. The regular EMI repays principal; in the final month only the
       outstanding balance plus interest is due.
    4. Prepayments dated in the billing month go fully to principal, capped
       at the remaining balance. A reduce-emi prepayment re-amortizes the
       remaining balance over max(1, tenure - month) months.

    Args:
        principal: Loan amount
        annual_rate: Initial annual rate in percent
        tenure_months: Planned tenure in months
        monthly_payment: Initial EMI
        start_date: First billing date (defaults to today)
        prepayments: Dated prepayments
        rate_changes: Dated rate changes
        max_months: Hard cap on schedule length

    Returns:
        PaymentResult with the schedule, totals, resulting term and final EMI

    Raises:
        ValueError: On non-positive principal/payment, or when the loan is
            still outstanding after max_months (payment below interest)
    """
    principal = Decimal(principal)
    monthly_payment = Decimal(monthly_payment)

    if principal <= ZERO:
        raise ValueError("Principal must be positive")
    if monthly_payment <= ZERO:
        raise ValueError("Monthly payment must be positive")

    start_date = start_date or today_date()
    sorted_prepayments = sorted(prepayments, key=lambda p: p.date)
    sorted_rate_changes = sorted(rate_changes, key=lambda rc: rc.date)

    balance = principal
    total_interest = ZERO
    total_payment = ZERO
    current_rate = Decimal(annual_rate)
    current_payment = monthly_payment
    rows: List[AmortizationRow] = []

    month_index = 1
    billing_date = start_date

    while balance > CENT and month_index <= max_months:
        new_rate = _active_rate(sorted_rate_changes, billing_date, current_rate)
        if new_rate != current_rate:
            logger.debug("Rate change applied", month=month_index, old_rate=str(current_rate), new_rate=str(new_rate))
            current_rate = new_rate
        r = monthly_rate(current_rate)

        month_prepayments = [
            p for p in sorted_prepayments
            if p.date.year == billing_date.year and p.date.month == billing_date.month
            ]
        extra_payment = sum((p.amount for p in month_prepayments), ZERO)
        recalculate_emi = any(p.type == PrepaymentType.REDUCE_EMI for p in month_prepayments)

        interest = balance * r
        principal_part = current_payment - interest
        payment_this_month = current_payment

        if balance < principal_part:
            principal_part = balance
            payment_this_month = principal_part + interest

        ending_balance = balance - principal_part

        if extra_payment > ZERO:
            if extra_payment > ending_balance:
                extra_payment = ending_balance
            ending_balance -= extra_payment

            if recalculate_emi and ending_balance > ZERO:
                remaining_months = max(1, tenure_months - month_index)
                current_payment = annuity_payment(ending_balance, current_rate, remaining_months)
                logger.debug(
                    "EMI recalculated after prepayment",
                    month=month_index,
                    remaining_months=remaining_months,
                    new_emi=str(round_money(current_payment)),
                    )

        month_total = payment_this_month + extra_payment
        total_interest += interest
        total_payment += month_total

        rows.append(AmortizationRow(
            month=month_index,
            date=billing_date,
            payment=round_money(month_total),
            principal=round_money(principal_part + extra_payment),
            interest=round_money(interest),
            balance=round_money(max(ending_balance, ZERO)),
            ))

        balance = ending_balance
        billing_date = add_months(start_date, month_index)
        month_index += 1

    if balance > CENT:
        raise ValueError(
            f"Loan is not repaid within {max_months} months; "
            f"the monthly payment does not cover the interest"
            )

    return PaymentResult(
        emi=round_money(monthly_payment),
        total_interest=round_money(total_interest),
        total_payment=round_money(total_payment),
        amortization=rows,
        calculated_term_months=month_index - 1,
        calculated_monthly_payment=round_money(current_payment),
        )
