"""
Mortgage calculators: FHA, VA, refinance and house affordability.

FHA and VA loans finance their upfront charge (upfront MIP, funding fee) into
the loan and amortize the total with the EMI engine. Refinance compares the
current and the new loan month by month. Affordability searches the highest
home price whose housing payment fits the DTI limits of the mortgage type.
"""
from decimal import Decimal, ROUND_FLOOR
from typing import List, Tuple

from backend.app.logging_config import get_logger
from backend.app.schemas.mortgage import (
    AffordabilityBreakdown,
    AffordabilityRequest,
    AffordabilityResult,
    FHAAmortizationRow,
    FHARequest,
    FHAResult,
    MortgageType,
    RefinanceLifetime,
    RefinanceMonthly,
    RefinanceProjection,
    RefinanceRequest,
    RefinanceResult,
    RiskLevel,
    VALoanPurpose,
    VARequest,
    VAResult,
    )
from backend.app.utils.amortization import calculate_emi
from backend.app.utils.financial_math import (
    HUNDRED,
    TWELVE,
    ZERO,
    annuity_payment,
    monthly_rate,
    percent_of,
    round_money,
    )

logger = get_logger(__name__)

AFFORDABILITY_SEARCH_STEPS = 20
AFFORDABILITY_PRICE_TO_INCOME_CAP = 10
LTV_PMI_THRESHOLD = Decimal("80")

# (front-end DTI, back-end DTI, annual PMI rate) as fractions
MORTGAGE_TYPE_LIMITS = {
    MortgageType.CONVENTIONAL: (Decimal("0.28"), Decimal("0.36"), Decimal("0.005")),
    MortgageType.FHA: (Decimal("0.31"), Decimal("0.43"), Decimal("0.0085")),
    # VA has no front-end limit and no PMI
    MortgageType.VA: (Decimal("1"), Decimal("0.41"), Decimal("0")),
    }


# ============================================================================
# FHA
# ============================================================================

def calculate_fha(request: FHARequest) -> FHAResult:
    """
    FHA loan with financed upfront MIP and yearly-recalculated annual MIP.

    Steps:
    1. base loan = price - down payment
    2. upfront MIP = base loan * upfront rate, added to the loan
    3. EMI over the total loan
    4. annual MIP = balance at the start of each year * annual rate, paid /12
       monthly; the first year uses the total loan amount

    Escrow totals (tax, insurance, HOA) are the monthly amounts times the
    tenure.
    """
    costs = request.costs
    tenure_months = request.term_years * 12

    base_loan = request.home_price - request.down_payment
    upfront_mip = round_money(percent_of(base_loan, request.upfront_mip_rate))
    total_loan = base_loan + upfront_mip

    emi_result = calculate_emi(total_loan, request.annual_rate, tenure_months, start_date=request.start_date)
    escrow = costs.property_tax + costs.home_insurance + costs.hoa_fees

    rows: List[FHAAmortizationRow] = []
    total_mip = ZERO
    monthly_mip = ZERO
    balance_at_year_start = total_loan

    for row in emi_result.amortization:
        if (row.month - 1) % 12 == 0:
            monthly_mip = round_money(percent_of(balance_at_year_start, request.annual_mip_rate) / TWELVE)

        total_mip += monthly_mip
        rows.append(FHAAmortizationRow(
            **row.model_dump(),
            mip=monthly_mip,
            total_payment=round_money(row.payment + monthly_mip + escrow),
            ))

        if row.month % 12 == 0:
            balance_at_year_start = row.balance

    first_mip = rows[0].mip if rows else ZERO
    logger.debug("FHA schedule built", total_loan=str(total_loan), months=len(rows), total_mip=str(total_mip))

    return FHAResult(
        base_loan_amount=round_money(base_loan),
        financed_upfront_mip=upfront_mip,
        total_loan_amount=round_money(total_loan),
        monthly_principal_and_interest=emi_result.emi,
        monthly_mip=first_mip,
        monthly_tax=costs.property_tax,
        monthly_insurance=costs.home_insurance,
        monthly_hoa=costs.hoa_fees,
        total_monthly_payment=round_money(emi_result.emi + first_mip + escrow),
        total_interest=emi_result.total_interest,
        total_payment=emi_result.total_payment,
        total_mip_paid=round_money(total_mip),
        total_tax_paid=round_money(costs.property_tax * tenure_months),
        total_insurance_paid=round_money(costs.home_insurance * tenure_months),
        total_hoa_paid=round_money(costs.hoa_fees * tenure_months),
        amortization=rows,
        )


# ============================================================================
# VA
# ============================================================================

def get_va_funding_fee_rate(
    down_payment_percent: Decimal,
    loan_purpose: VALoanPurpose,
    is_first_use: bool,
    is_disabled: bool,
    ) -> Decimal:
    """
    VA funding fee in percent of the base loan.

    - Service-connected disability: exempt (0)
    - IRRRL: 0.5
    - Cash-out: 2.15 first use, 3.3 subsequent
    - Purchase: < 5 % down 2.15 / 3.3, 5-9.99 % down 1.5, >= 10 % down 1.25
    """
    if is_disabled:
        return Decimal("0")
    if loan_purpose == VALoanPurpose.IRRRL:
        return Decimal("0.5")
    if loan_purpose == VALoanPurpose.CASH_OUT:
        return Decimal("2.15") if is_first_use else Decimal("3.3")

    if down_payment_percent < 5:
        return Decimal("2.15") if is_first_use else Decimal("3.3")
    elif down_payment_percent < 10:
        return Decimal("1.5")
    return Decimal("1.25")


def calculate_va(request: VARequest) -> VAResult:
    """VA loan with the funding fee financed into the loan."""
    costs = request.costs
    base_loan = request.home_price - request.down_payment
    down_payment_percent = request.down_payment / request.home_price * HUNDRED

    fee_rate = get_va_funding_fee_rate(
        down_payment_percent, request.loan_purpose, request.is_first_use, request.is_disabled,
        )
    fee_amount = round_money(percent_of(base_loan, fee_rate))
    total_loan = base_loan + fee_amount

    emi_result = calculate_emi(total_loan, request.annual_rate, request.term_years * 12, start_date=request.start_date)
    logger.debug("VA loan calculated", purpose=request.loan_purpose.value, fee_rate=str(fee_rate), total_loan=str(total_loan))

    return VAResult(
        base_loan_amount=round_money(base_loan),
        funding_fee_rate=fee_rate,
        funding_fee_amount=fee_amount,
        total_loan_amount=round_money(total_loan),
        emi=emi_result.emi,
        monthly_tax=costs.property_tax,
        monthly_insurance=costs.home_insurance,
        monthly_hoa=costs.hoa_fees,
        total_monthly_payment=round_money(emi_result.emi + costs.property_tax + costs.home_insurance + costs.hoa_fees),
        total_interest=emi_result.total_interest,
        total_payment=emi_result.total_payment,
        amortization=emi_result.amortization,
        )


# ============================================================================
# REFINANCE
# ============================================================================

def _amortize_step(balance: Decimal, rate: Decimal, payment: Decimal) -> Decimal:
    balance -= payment - balance * rate
    return balance if balance > ZERO else ZERO


def calculate_refinance(request: RefinanceRequest) -> RefinanceResult:
    """
    Compare the current loan with a refinanced one.

    Payments are level annuities on each loan. Break-even is closing costs
    divided by monthly savings (-1 when the new payment is not lower).
    Cumulative savings start at -closing costs and add the payment
    difference each month; projections are sampled every 12 months.
    """
    n_current = request.current_term_years * 12
    n_new = request.new_term_years * 12

    current_payment = annuity_payment(request.current_balance, request.current_rate, n_current)
    new_payment = annuity_payment(request.new_loan_amount, request.new_rate, n_new)
    monthly_savings = current_payment - new_payment

    total_current = current_payment * n_current
    total_new = new_payment * n_new
    current_interest = total_current - request.current_balance
    new_interest = total_new - request.new_loan_amount
    total_cost_new = total_new + request.closing_costs

    if monthly_savings > ZERO:
        break_even = round_money(request.closing_costs / monthly_savings)
    else:
        break_even = Decimal("-1")

    r_current = monthly_rate(request.current_rate)
    r_new = monthly_rate(request.new_rate)
    balance_current = request.current_balance
    balance_new = request.new_loan_amount
    cumulative = -request.closing_costs
    projections: List[RefinanceProjection] = []

    for month in range(1, max(n_current, n_new) + 1):
        pay_current = current_payment if month <= n_current else ZERO
        pay_new = new_payment if month <= n_new else ZERO
        if month <= n_current:
            balance_current = _amortize_step(balance_current, r_current, current_payment)
        if month <= n_new:
            balance_new = _amortize_step(balance_new, r_new, new_payment)
        cumulative += pay_current - pay_new

        if month % 12 == 0:
            projections.append(RefinanceProjection(
                month=month,
                year=month // 12,
                current_balance=round_money(balance_current),
                new_balance=round_money(balance_new),
                cumulative_savings=round_money(cumulative),
                ))

    logger.info(
        "Refinance compared",
        current_payment=str(round_money(current_payment)),
        new_payment=str(round_money(new_payment)),
        break_even_months=str(break_even),
        )

    return RefinanceResult(
        monthly=RefinanceMonthly(
            current_payment=round_money(current_payment),
            new_payment=round_money(new_payment),
            savings=round_money(monthly_savings),
            ),
        lifetime=RefinanceLifetime(
            current_total_interest=round_money(current_interest),
            new_total_interest=round_money(new_interest),
            interest_savings=round_money(current_interest - new_interest),
            total_cost_current=round_money(total_current),
            total_cost_new=round_money(total_cost_new),
            net_lifetime_savings=round_money(total_current - total_cost_new),
            ),
        break_even_months=break_even,
        projections=projections,
        )


# ============================================================================
# AFFORDABILITY
# ============================================================================

def _housing_cost(price: Decimal, request: AffordabilityRequest, factor: Decimal, pmi_rate: Decimal) -> Tuple[Decimal, Decimal, Decimal, Decimal]:
    """(loan, principal & interest, monthly tax, monthly PMI) at a home price."""
    loan = max(ZERO, price - request.down_payment)
    ltv = loan / price * HUNDRED if price > ZERO else ZERO
    principal_and_interest = loan * factor
    tax = percent_of(price, request.property_tax_rate) / TWELVE
    pmi = ZERO
    if request.mortgage_type != MortgageType.VA and ltv > LTV_PMI_THRESHOLD:
        pmi = loan * pmi_rate / TWELVE
    return loan, principal_and_interest, tax, pmi


def calculate_affordability(request: AffordabilityRequest) -> AffordabilityResult:
    """
    Highest affordable home price.

    The housing budget is the lower of income * front-end limit and
    income * back-end limit - existing debts. The price is found by bisection
    over [0, 10 * annual income] for a fixed number of steps: a price whose
    P&I + tax + insurance + HOA + PMI fits the budget raises the lower bound.
    """
    monthly_income = request.annual_income / TWELVE
    default_front, default_back, default_pmi = MORTGAGE_TYPE_LIMITS[request.mortgage_type]
    front_limit = request.front_end_dti / HUNDRED if request.front_end_dti else default_front
    back_limit = request.back_end_dti / HUNDRED if request.back_end_dti else default_back
    pmi_rate = request.pmi_rate / HUNDRED if request.pmi_rate is not None else default_pmi

    budget = min(monthly_income * back_limit - request.monthly_debts, monthly_income * front_limit)

    if budget <= ZERO:
        return AffordabilityResult(
            max_home_price=ZERO,
            monthly_payment=ZERO,
            loan_amount=ZERO,
            down_payment_percent=ZERO,
            dti=round_money(request.monthly_debts / monthly_income * HUNDRED),
            breakdown=AffordabilityBreakdown(
                principal_and_interest=ZERO, property_tax=ZERO, home_insurance=ZERO, pmi=ZERO, hoa_fees=ZERO,
                ),
            risk_level=RiskLevel.HIGH,
            insights=["Your current debts exceed the allowable amount for a mortgage."],
            )

    factor = annuity_payment(Decimal("1"), request.annual_rate, request.term_years * 12)
    fixed_costs = request.home_insurance + request.hoa_fees

    low = ZERO
    high = request.annual_income * AFFORDABILITY_PRICE_TO_INCOME_CAP
    max_price = ZERO
    for _ in range(AFFORDABILITY_SEARCH_STEPS):
        price = (low + high) / 2
        _, principal_and_interest, tax, pmi = _housing_cost(price, request, factor, pmi_rate)
        if principal_and_interest + tax + pmi + fixed_costs > budget:
            high = price
        else:
            low = price
            max_price = price

    loan, principal_and_interest, tax, pmi = _housing_cost(max_price, request, factor, pmi_rate)
    monthly_payment = principal_and_interest + tax + pmi + fixed_costs
    dti = (request.monthly_debts + monthly_payment) / monthly_income * HUNDRED

    risk_level = RiskLevel.LOW
    if dti > 43:
        risk_level = RiskLevel.HIGH
    elif dti > 36:
        risk_level = RiskLevel.MEDIUM

    insights: List[str] = []
    if dti > 36:
        insights.append("Your DTI is higher than 36%; lenders may offer higher rates.")
    if request.down_payment < max_price * Decimal("0.2"):
        insights.append("Putting less than 20% down requires PMI, increasing your monthly cost.")

    logger.info(
        "Affordability calculated",
        mortgage_type=request.mortgage_type.value,
        max_home_price=str(round_money(max_price, 0)),
        dti=str(round_money(dti)),
        )

    return AffordabilityResult(
        max_home_price=max_price.to_integral_value(rounding=ROUND_FLOOR),
        monthly_payment=round_money(monthly_payment, 0),
        loan_amount=loan.to_integral_value(rounding=ROUND_FLOOR),
        down_payment_percent=round_money(request.down_payment / max_price * HUNDRED) if max_price > ZERO else ZERO,
        dti=round_money(dti),
        breakdown=AffordabilityBreakdown(
            principal_and_interest=round_money(principal_and_interest),
            property_tax=round_money(tax),
            home_insurance=round_money(request.home_insurance),
            pmi=round_money(pmi),
            hoa_fees=round_money(request.hoa_fees),
            ),
        risk_level=risk_level,
        insights=insights,
        )
