"""
Rental property analyzer.

Financing runs through the shared annuity formula; the holding period is
projected year by year with a monthly loan schedule, and the exit combines
the yearly cash flows with the net sale proceeds into ROI and IRR.
"""
from decimal import Decimal
from typing import List, Optional, Tuple

from backend.app.logging_config import get_logger
from backend.app.schemas.rental import (
    RentalExit,
    RentalFinancing,
    RentalMetrics,
    RentalMonthly,
    RentalPropertyRequest,
    RentalPropertyResult,
    RentalYear,
    RuleCheck,
    )
from backend.app.utils.financial_math import (
    HUNDRED,
    ONE,
    TWELVE,
    ZERO,
    annuity_payment,
    calculate_cagr,
    monthly_rate,
    percent_of,
    round_money,
    )
from backend.app.utils.rate_solver import calculate_irr

logger = get_logger(__name__)

# Residential rental depreciation period (years)
DEPRECIATION_YEARS = Decimal("27.5")
ONE_PERCENT_RULE_THRESHOLD = Decimal("1")
FIFTY_PERCENT_RULE_RANGE = (Decimal("40"), Decimal("60"))


def _ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator in percent, 0 for a non-positive denominator."""
    if denominator <= ZERO:
        return ZERO
    return numerator / denominator * HUNDRED


def one_percent_rule(monthly_rent: Decimal, purchase_price: Decimal) -> RuleCheck:
    """Monthly rent should be at least 1% of the purchase price."""
    ratio = round_money(_ratio(monthly_rent, purchase_price))
    return RuleCheck(passes=ratio >= ONE_PERCENT_RULE_THRESHOLD, ratio=ratio)


def fifty_percent_rule(operating_expenses: Decimal, vacancy_loss: Decimal, gross_income: Decimal) -> RuleCheck:
    """Operating costs plus vacancy should take roughly half (40-60%) of gross income."""
    ratio = round_money(_ratio(operating_expenses + vacancy_loss, gross_income))
    low, high = FIFTY_PERCENT_RULE_RANGE
    return RuleCheck(passes=low <= ratio <= high, ratio=ratio)


def annual_depreciation(purchase_price: Decimal, building_value_percent: Decimal, rehab_costs: Decimal) -> Decimal:
    """Straight-line depreciation of the building share plus rehab over 27.5 years."""
    return (percent_of(purchase_price, building_value_percent) + rehab_costs) / DEPRECIATION_YEARS


def _amortize_year(balance: Decimal, rate: Decimal, payment: Decimal) -> Tuple[Decimal, Decimal, Decimal, Decimal]:
    """
    Twelve monthly payments on the loan.

    Returns:
        (new balance, interest paid, principal paid, payments made)
    """
    interest_paid = principal_paid = paid = ZERO
    for _ in range(12):
        if balance <= ZERO:
            break
        interest = balance * rate
        principal = payment - interest
        if principal >= balance:
            principal = balance
        balance -= principal
        interest_paid += interest
        principal_paid += principal
        paid += interest + principal
    return balance, interest_paid, principal_paid, paid


def project_holding_period(
    request: RentalPropertyRequest,
    loan_amount: Decimal,
    mortgage: Decimal,
    monthly_effective_income: Decimal,
    monthly_operating_expenses: Decimal,
    cash_invested: Decimal,
    depreciation: Decimal,
    ) -> List[RentalYear]:
    """
    Year-by-year projection.

    Income grows at rent_increase_rate and operating expenses at
    expense_increase_rate from year 2. The property value (price + rehab)
    appreciates yearly. Debt service stops once the loan is repaid.
    """
    rate = monthly_rate(request.annual_interest_rate)
    rent_growth = ONE + request.rent_increase_rate / HUNDRED
    expense_growth = ONE + request.expense_increase_rate / HUNDRED
    appreciation = ONE + request.appreciation_rate / HUNDRED

    balance = loan_amount
    income = monthly_effective_income * TWELVE
    operating = monthly_operating_expenses * TWELVE
    value = request.purchase_price + request.rehab_costs
    cumulative = ZERO
    years: List[RentalYear] = []

    for year in range(1, request.holding_period_years + 1):
        if year > 1:
            income *= rent_growth
            operating *= expense_growth
        previous_value = value
        value = value * appreciation

        balance, interest, principal, debt_service = _amortize_year(balance, rate, mortgage)
        noi = income - operating
        cash_flow = noi - debt_service
        cumulative += cash_flow

        taxable_income = noi - interest - depreciation
        tax_savings = percent_of(-taxable_income, request.marginal_tax_rate) if taxable_income < ZERO else ZERO

        years.append(RentalYear(
            year=year,
            effective_income=round_money(income),
            operating_expenses=round_money(operating),
            noi=round_money(noi),
            debt_service=round_money(debt_service),
            cash_flow=round_money(cash_flow),
            cumulative_cash_flow=round_money(cumulative),
            cash_on_cash=round_money(_ratio(cash_flow, cash_invested)),
            mortgage_interest=round_money(interest),
            principal_paid=round_money(principal),
            loan_balance=round_money(balance),
            property_value=round_money(value),
            equity=round_money(value - balance),
            tax_savings=round_money(tax_savings),
            roi=round_money(_ratio(cash_flow + principal + value - previous_value, cash_invested)),
            ))
    return years


def _holding_period_irr(cash_invested: Decimal, projections: List[RentalYear], net_sale: Decimal) -> Optional[Decimal]:
    flows = [-float(cash_invested)] + [float(year.cash_flow) for year in projections]
    flows[-1] += float(net_sale)
    computation = calculate_irr(flows)
    if not computation.converged:
        logger.warning("Rental IRR did not converge", iterations=computation.iterations)
        return None
    return round_money(Decimal(str(computation.irr)) * HUNDRED)


def calculate_rental_property(request: RentalPropertyRequest) -> RentalPropertyResult:
    """
    Analyze a buy-and-hold rental.

    Raises:
        ValueError: When the cash invested is not positive
    """
    down_payment = percent_of(request.purchase_price, request.down_payment_percent)
    loan_amount = request.purchase_price - down_payment
    cash_invested = down_payment + request.closing_costs + request.rehab_costs
    if cash_invested <= ZERO:
        raise ValueError("Cash invested must be positive")

    if loan_amount > ZERO:
        mortgage = annuity_payment(loan_amount, request.annual_interest_rate, request.loan_term_years * 12)
    else:
        mortgage = ZERO

    # Monthly
    gross = request.monthly_rent + request.other_monthly_income
    vacancy_loss = percent_of(gross, request.vacancy_rate)
    effective = gross - vacancy_loss
    property_tax = request.annual_property_tax / TWELVE
    insurance = request.annual_insurance / TWELVE
    maintenance = percent_of(gross, request.maintenance_percent)
    management = percent_of(gross, request.management_percent)
    capex = percent_of(gross, request.capex_percent)
    operating = (property_tax + insurance + request.monthly_hoa + request.monthly_utilities
                 + maintenance + management + capex)
    noi = effective - operating
    cash_flow = noi - mortgage

    annual_noi = noi * TWELVE
    annual_debt_service = mortgage * TWELVE
    annual_cash_flow = cash_flow * TWELVE

    metrics = RentalMetrics(
        cap_rate=round_money(_ratio(annual_noi, request.purchase_price + request.rehab_costs)),
        cash_on_cash=round_money(_ratio(annual_cash_flow, cash_invested)),
        gross_rent_multiplier=round_money(request.purchase_price / (request.monthly_rent * TWELVE)),
        dscr=round_money(noi / mortgage) if mortgage > ZERO else None,
        break_even_occupancy=round_money(_ratio(operating + mortgage, gross)),
        operating_expense_ratio=round_money(_ratio(operating, effective)),
        )

    depreciation = annual_depreciation(request.purchase_price, request.building_value_percent, request.rehab_costs)
    projections = project_holding_period(
        request, loan_amount, mortgage, effective, operating, cash_invested, depreciation,
        )

    # Exit at the end of the holding period
    final = projections[-1]
    sale_price = final.property_value
    selling_costs = percent_of(sale_price, request.selling_costs_percent)
    net_sale = sale_price - selling_costs - final.loan_balance
    total_cash_flow = final.cumulative_cash_flow
    total_profit = total_cash_flow + net_sale - cash_invested

    exit_summary = RentalExit(
        sale_price=sale_price,
        selling_costs=round_money(selling_costs),
        loan_payoff=final.loan_balance,
        net_sale_proceeds=round_money(net_sale),
        total_cash_flow=total_cash_flow,
        total_profit=round_money(total_profit),
        total_roi=round_money(_ratio(total_profit, cash_invested)),
        annualized_roi=round_money(
            calculate_cagr(cash_invested, cash_invested + total_profit, Decimal(request.holding_period_years)),
            ),
        irr=_holding_period_irr(cash_invested, projections, net_sale),
        )

    result = RentalPropertyResult(
        financing=RentalFinancing(
            down_payment=round_money(down_payment),
            loan_amount=round_money(loan_amount),
            total_cash_needed=round_money(cash_invested),
            monthly_mortgage=round_money(mortgage),
            ),
        monthly=RentalMonthly(
            gross_income=round_money(gross),
            vacancy_loss=round_money(vacancy_loss),
            effective_income=round_money(effective),
            property_tax=round_money(property_tax),
            insurance=round_money(insurance),
            hoa=round_money(request.monthly_hoa),
            utilities=round_money(request.monthly_utilities),
            maintenance=round_money(maintenance),
            management=round_money(management),
            capex_reserve=round_money(capex),
            operating_expenses=round_money(operating),
            mortgage=round_money(mortgage),
            total_expenses=round_money(operating + mortgage),
            noi=round_money(noi),
            cash_flow=round_money(cash_flow),
            ),
        annual_noi=round_money(annual_noi),
        annual_debt_service=round_money(annual_debt_service),
        annual_cash_flow=round_money(annual_cash_flow),
        metrics=metrics,
        one_percent_rule=one_percent_rule(request.monthly_rent, request.purchase_price),
        fifty_percent_rule=fifty_percent_rule(operating, vacancy_loss, gross),
        annual_depreciation=round_money(depreciation),
        first_year_tax_savings=projections[0].tax_savings,
        projections=projections,
        exit=exit_summary,
        )

    logger.info(
        "Rental property analyzed",
        price=str(request.purchase_price),
        cap_rate=str(metrics.cap_rate),
        cash_on_cash=str(metrics.cash_on_cash),
        irr=str(exit_summary.irr),
        )
    return result
