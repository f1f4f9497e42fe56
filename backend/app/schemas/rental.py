"""
Pydantic schemas for the rental property analyzer.

**Domain Coverage**:
- Financing: down payment, loan, mortgage payment, cash needed to close
- Monthly income and operating expenses, NOI and cash flow
- Return metrics: cap rate, cash-on-cash, GRM, DSCR, break-even occupancy
- Rules of thumb: 1% rule, 50% rule
- Yearly projections over the holding period and the sale at exit

**Design Notes**:
- Tax, insurance are annual amounts; HOA and utilities are monthly
- Maintenance, management and capex reserves are % of gross monthly income
- Operating expenses never include the mortgage
"""
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator

MAX_HOLDING_YEARS = 40


class RentalPropertyRequest(BaseModel):
    """Input for POST /calc/rental-property."""
    model_config = ConfigDict(extra="forbid")

    # Purchase
    purchase_price: Decimal = Field(..., gt=0)
    down_payment_percent: Decimal = Field(Decimal("20"), ge=0, le=100)
    closing_costs: Decimal = Field(Decimal("0"), ge=0)
    rehab_costs: Decimal = Field(Decimal("0"), ge=0)

    # Financing
    annual_interest_rate: Decimal = Field(..., ge=0, le=30)
    loan_term_years: int = Field(30, ge=1, le=40)

    # Income
    monthly_rent: Decimal = Field(..., gt=0)
    other_monthly_income: Decimal = Field(Decimal("0"), ge=0)
    vacancy_rate: Decimal = Field(Decimal("0"), ge=0, le=100, description="% of gross income lost to vacancy")

    # Operating expenses
    annual_property_tax: Decimal = Field(Decimal("0"), ge=0)
    annual_insurance: Decimal = Field(Decimal("0"), ge=0)
    monthly_hoa: Decimal = Field(Decimal("0"), ge=0)
    monthly_utilities: Decimal = Field(Decimal("0"), ge=0)
    maintenance_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    management_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    capex_percent: Decimal = Field(Decimal("0"), ge=0, le=100)

    # Growth and exit
    rent_increase_rate: Decimal = Field(Decimal("0"), ge=0, le=50)
    expense_increase_rate: Decimal = Field(Decimal("0"), ge=0, le=50)
    appreciation_rate: Decimal = Field(Decimal("0"), ge=-50, le=50)
    selling_costs_percent: Decimal = Field(Decimal("0"), ge=0, le=50)
    holding_period_years: int = Field(10, ge=1, le=MAX_HOLDING_YEARS)

    # Tax
    building_value_percent: Decimal = Field(Decimal("80"), ge=0, le=100, description="Depreciable share of the price")
    marginal_tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100)

    @model_validator(mode='after')
    def validate_cash_invested(self):
        down_payment = self.purchase_price * self.down_payment_percent / 100
        if down_payment + self.closing_costs + self.rehab_costs <= 0:
            raise ValueError("A down payment, closing costs or rehab costs are required to measure returns")
        return self


class RentalFinancing(BaseModel):
    down_payment: Decimal
    loan_amount: Decimal
    total_cash_needed: Decimal = Field(..., description="Down payment + closing costs + rehab")
    monthly_mortgage: Decimal


class RentalMonthly(BaseModel):
    gross_income: Decimal
    vacancy_loss: Decimal
    effective_income: Decimal
    property_tax: Decimal
    insurance: Decimal
    hoa: Decimal
    utilities: Decimal
    maintenance: Decimal
    management: Decimal
    capex_reserve: Decimal
    operating_expenses: Decimal
    mortgage: Decimal
    total_expenses: Decimal
    noi: Decimal
    cash_flow: Decimal


class RentalMetrics(BaseModel):
    cap_rate: Decimal = Field(..., description="Annual NOI / (price + rehab), %")
    cash_on_cash: Decimal = Field(..., description="Annual cash flow / cash invested, %")
    gross_rent_multiplier: Decimal
    dscr: Optional[Decimal] = Field(None, description="NOI / debt service; null without a loan")
    break_even_occupancy: Decimal = Field(..., description="(operating expenses + mortgage) / gross income, %")
    operating_expense_ratio: Decimal = Field(..., description="Operating expenses / effective income, %")


class RuleCheck(BaseModel):
    passes: bool
    ratio: Decimal


class RentalYear(BaseModel):
    year: int
    effective_income: Decimal
    operating_expenses: Decimal
    noi: Decimal
    debt_service: Decimal
    cash_flow: Decimal
    cumulative_cash_flow: Decimal
    cash_on_cash: Decimal
    mortgage_interest: Decimal
    principal_paid: Decimal
    loan_balance: Decimal
    property_value: Decimal
    equity: Decimal
    tax_savings: Decimal
    roi: Decimal = Field(..., description="(cash flow + principal paid + appreciation) / cash invested, %")


class RentalExit(BaseModel):
    sale_price: Decimal
    selling_costs: Decimal
    loan_payoff: Decimal
    net_sale_proceeds: Decimal
    total_cash_flow: Decimal
    total_profit: Decimal
    total_roi: Decimal
    annualized_roi: Decimal
    irr: Optional[Decimal] = Field(None, description="IRR of the holding period (%), null when it cannot be solved")


class RentalPropertyResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    financing: RentalFinancing
    monthly: RentalMonthly
    annual_noi: Decimal
    annual_debt_service: Decimal
    annual_cash_flow: Decimal
    metrics: RentalMetrics
    one_percent_rule: RuleCheck
    fifty_percent_rule: RuleCheck
    annual_depreciation: Decimal
    first_year_tax_savings: Decimal
    projections: List[RentalYear] = Field(default_factory=list)
    exit: RentalExit
