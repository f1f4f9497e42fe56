"""
Tests for the mortgage calculators (FHA, VA, refinance, affordability).

Reference: backend/app/services/mortgage_service.py
"""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from backend.app.schemas.mortgage import (
    AffordabilityRequest,
    FHARequest,
    MonthlyHousingCosts,
    MortgageType,
    RefinanceRequest,
    RiskLevel,
    VALoanPurpose,
    VARequest,
    )
from backend.app.services import mortgage_service
from backend.app.utils.financial_math import round_money


# ============================================================================
# FHA
# ============================================================================

class TestFHA:
    """FHA loan with financed upfront MIP."""

    @pytest.fixture
    def result(self):
        request = FHARequest(
            home_price=Decimal("300000"),
            down_payment=Decimal("10500"),
            annual_rate=Decimal("6.5"),
            term_years=30,
            costs=MonthlyHousingCosts(property_tax=Decimal("250"), home_insurance=Decimal("100")),
            )
        return mortgage_service.calculate_fha(request)

    def test_upfront_mip_financed(self, result):
        assert result.base_loan_amount == Decimal("289500.00")
        assert result.financed_upfront_mip == Decimal("5066.25")
        assert result.total_loan_amount == Decimal("294566.25")

    def test_first_month_mip(self, result):
        """294,566.25 * 0.55 % / 12 = 135.01."""
        assert result.monthly_mip == Decimal("135.01")
        assert result.amortization[0].mip == Decimal("135.01")

    def test_mip_recomputed_yearly(self, result):
        rows = result.amortization
        assert rows[11].mip == rows[0].mip
        expected = round_money(rows[11].balance * Decimal("0.55") / 100 / 12)
        assert rows[12].mip == expected
        assert rows[12].mip < rows[0].mip

    def test_total_monthly_payment(self, result):
        expected = result.monthly_principal_and_interest + result.monthly_mip + Decimal("350")
        assert result.total_monthly_payment == expected
        assert result.amortization[0].total_payment == expected

    def test_escrow_totals(self, result):
        assert len(result.amortization) == 360
        assert result.total_tax_paid == Decimal("90000.00")
        assert result.total_insurance_paid == Decimal("36000.00")
        assert result.total_hoa_paid == Decimal("0.00")
        assert result.total_mip_paid == sum(r.mip for r in result.amortization)

    def test_down_payment_must_be_below_price(self):
        with pytest.raises(ValidationError, match="down_payment"):
            FHARequest(home_price=Decimal("100000"), down_payment=Decimal("100000"), annual_rate=Decimal("6"))


# ============================================================================
# VA
# ============================================================================

class TestVA:
    """VA funding fee table and loan."""

    @pytest.mark.parametrize("down_percent, purpose, first_use, disabled, expected", [
        ("0", VALoanPurpose.PURCHASE, True, False, "2.15"),
        ("0", VALoanPurpose.PURCHASE, False, False, "3.3"),
        ("4.99", VALoanPurpose.PURCHASE, True, False, "2.15"),
        ("5", VALoanPurpose.PURCHASE, True, False, "1.5"),
        ("9.99", VALoanPurpose.PURCHASE, False, False, "1.5"),
        ("10", VALoanPurpose.PURCHASE, True, False, "1.25"),
        ("0", VALoanPurpose.CASH_OUT, True, False, "2.15"),
        ("0", VALoanPurpose.CASH_OUT, False, False, "3.3"),
        ("0", VALoanPurpose.IRRRL, False, False, "0.5"),
        ("0", VALoanPurpose.PURCHASE, True, True, "0"),
        ("0", VALoanPurpose.IRRRL, True, True, "0"),
        ])
    def test_funding_fee_rate(self, down_percent, purpose, first_use, disabled, expected):
        rate = mortgage_service.get_va_funding_fee_rate(Decimal(down_percent), purpose, first_use, disabled)
        assert rate == Decimal(expected)

    def test_funding_fee_financed(self):
        result = mortgage_service.calculate_va(
            VARequest(home_price=Decimal("300000"), annual_rate=Decimal("6"), term_years=30)
            )
        assert result.funding_fee_rate == Decimal("2.15")
        assert result.funding_fee_amount == Decimal("6450.00")
        assert result.total_loan_amount == Decimal("306450.00")
        assert result.emi == result.amortization[0].payment

    def test_disabled_veteran_is_exempt(self):
        result = mortgage_service.calculate_va(
            VARequest(home_price=Decimal("300000"), annual_rate=Decimal("6"), is_disabled=True)
            )
        assert result.funding_fee_amount == Decimal("0.00")
        assert result.total_loan_amount == result.base_loan_amount

    def test_escrow_in_total_payment(self):
        result = mortgage_service.calculate_va(
            VARequest(
                home_price=Decimal("300000"),
                down_payment=Decimal("30000"),
                annual_rate=Decimal("6"),
                costs=MonthlyHousingCosts(property_tax=Decimal("200"), hoa_fees=Decimal("50")),
                )
            )
        assert result.funding_fee_rate == Decimal("1.25")
        assert result.total_monthly_payment == result.emi + Decimal("250")


# ============================================================================
# REFINANCE
# ============================================================================

class TestRefinance:
    """Current vs new loan."""

    def test_lower_rate_breaks_even(self):
        result = mortgage_service.calculate_refinance(RefinanceRequest(
            current_balance=Decimal("200000"),
            current_rate=Decimal("7"),
            current_term_years=30,
            new_loan_amount=Decimal("200000"),
            new_rate=Decimal("5.5"),
            new_term_years=30,
            closing_costs=Decimal("4000"),
            ))

        assert result.monthly.current_payment == Decimal("1330.60")
        assert result.monthly.new_payment == Decimal("1135.58")
        assert result.monthly.savings > 0
        assert Decimal("20") < result.break_even_months < Decimal("21")
        assert result.lifetime.interest_savings > 0

    def test_projections_are_yearly(self):
        result = mortgage_service.calculate_refinance(RefinanceRequest(
            current_balance=Decimal("150000"),
            current_rate=Decimal("6"),
            current_term_years=20,
            new_loan_amount=Decimal("150000"),
            new_rate=Decimal("5"),
            new_term_years=15,
            closing_costs=Decimal("3000"),
            ))

        assert len(result.projections) == 20
        assert [p.year for p in result.projections[:3]] == [1, 2, 3]
        assert result.projections[14].new_balance == Decimal("0.00")
        assert result.projections[-1].current_balance == Decimal("0.00")

    def test_no_savings(self):
        result = mortgage_service.calculate_refinance(RefinanceRequest(
            current_balance=Decimal("200000"),
            current_rate=Decimal("5"),
            current_term_years=30,
            new_loan_amount=Decimal("200000"),
            new_rate=Decimal("6"),
            new_term_years=30,
            closing_costs=Decimal("2000"),
            ))
        assert result.break_even_months == Decimal("-1")
        assert result.monthly.savings < 0


# ============================================================================
# AFFORDABILITY
# ============================================================================

class TestAffordability:
    """Maximum home price under DTI limits."""

    def _request(self, **overrides):
        values = dict(
            annual_income=Decimal("120000"),
            monthly_debts=Decimal("500"),
            down_payment=Decimal("60000"),
            annual_rate=Decimal("6.5"),
            term_years=30,
            property_tax_rate=Decimal("1.1"),
            home_insurance=Decimal("120"),
            )
        values.update(overrides)
        return AffordabilityRequest(**values)

    def test_conventional_fits_front_end_budget(self):
        """Income 10,000/month: budget = min(2,800, 3,600 - 500) = 2,800."""
        result = mortgage_service.calculate_affordability(self._request())

        assert result.max_home_price > 0
        assert result.monthly_payment <= Decimal("2800")
        assert result.loan_amount == result.max_home_price - Decimal("60000")
        assert result.risk_level == RiskLevel.LOW
        assert result.breakdown.home_insurance == Decimal("120.00")

    def test_back_end_limit_binds_with_debts(self):
        light = mortgage_service.calculate_affordability(self._request())
        heavy = mortgage_service.calculate_affordability(self._request(monthly_debts=Decimal("1500")))
        assert heavy.max_home_price < light.max_home_price
        assert heavy.monthly_payment <= Decimal("2100")

    def test_va_has_no_pmi(self):
        result = mortgage_service.calculate_affordability(
            self._request(mortgage_type=MortgageType.VA, down_payment=Decimal("0"))
            )
        assert result.breakdown.pmi == Decimal("0.00")

    def test_conventional_low_down_payment_pays_pmi(self):
        result = mortgage_service.calculate_affordability(self._request(down_payment=Decimal("10000")))
        assert result.breakdown.pmi > 0
        assert any("PMI" in insight for insight in result.insights)

    def test_fha_allows_higher_price(self):
        conventional = mortgage_service.calculate_affordability(self._request())
        fha = mortgage_service.calculate_affordability(self._request(mortgage_type=MortgageType.FHA))
        assert fha.max_home_price > conventional.max_home_price

    def test_debts_exceed_budget(self):
        result = mortgage_service.calculate_affordability(self._request(monthly_debts=Decimal("5000")))
        assert result.max_home_price == Decimal("0")
        assert result.risk_level == RiskLevel.HIGH
        assert result.dti == Decimal("50.00")
        assert result.insights == ["Your current debts exceed the allowable amount for a mortgage."]

    def test_dti_override(self):
        default = mortgage_service.calculate_affordability(self._request())
        strict = mortgage_service.calculate_affordability(self._request(front_end_dti=Decimal("20")))
        assert strict.max_home_price < default.max_home_price
