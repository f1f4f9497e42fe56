"""
Tests for the debt-to-income analysis.

Reference: backend/app/services/dti_service.py
"""
from decimal import Decimal

import pytest

from backend.app.schemas.dti import (
    DebtItem,
    DebtType,
    DTIRequest,
    DTIWhatIfRequest,
    HealthStatus,
    HousingCosts,
    IncomeSource,
    PrioritizeStrategy,
    WhatIfChanges,
    )
from backend.app.services import dti_service


def _request(income: str, housing: str, debts=()) -> dict:
    return dict(
        income=IncomeSource(primary=Decimal(income)),
        housing=HousingCosts(mortgage_or_rent=Decimal(housing)),
        debts=list(debts),
        )


# ============================================================================
# RATIOS AND BANDS
# ============================================================================

class TestCalculateDTI:

    def test_healthy_borrower(self):
        request = DTIRequest(
            income=IncomeSource(primary=Decimal("8000")),
            housing=HousingCosts(
                mortgage_or_rent=Decimal("1800"),
                property_tax=Decimal("200"),
                home_insurance=Decimal("100"),
                ),
            debts=[DebtItem(name="Car", monthly_payment=Decimal("400"), type=DebtType.AUTO)],
            )
        result = dti_service.calculate_dti(request)

        assert result.total_housing_costs == Decimal("2100.00")
        assert result.total_monthly_debts == Decimal("2500.00")
        assert result.front_end_ratio == Decimal("26.25")
        assert result.back_end_ratio == Decimal("31.25")
        assert result.health_status == HealthStatus.EXCELLENT
        assert result.qualification.conventional
        assert result.qualification.fha
        assert result.qualification.va
        assert result.recommendations[0].startswith("Your DTI is good")
        assert len(result.recommendations) == 4

    def test_moderate_borrower(self):
        request = DTIRequest(**_request("5000", "1500", [DebtItem(name="Card", monthly_payment=Decimal("500"))]))
        result = dti_service.calculate_dti(request)

        assert result.front_end_ratio == Decimal("30.00")
        assert result.back_end_ratio == Decimal("40.00")
        assert result.health_status == HealthStatus.MODERATE
        assert not result.qualification.conventional
        assert result.qualification.fha
        assert result.qualification.va
        assert "housing costs are high" in result.recommendations[-1]

    def test_housing_debts_not_double_counted(self):
        debts = [DebtItem(name="Mortgage", monthly_payment=Decimal("1500"), type=DebtType.HOUSING)]
        result = dti_service.calculate_dti(DTIRequest(**_request("5000", "1500", debts)))
        assert result.back_end_ratio == result.front_end_ratio

    def test_no_income(self):
        result = dti_service.calculate_dti(DTIRequest(**_request("0", "1000")))
        assert result.front_end_ratio == Decimal("0.00")
        assert result.back_end_ratio == Decimal("0.00")

    @pytest.mark.parametrize("back_end, status", [
        ("33", HealthStatus.EXCELLENT),
        ("33.01", HealthStatus.GOOD),
        ("36", HealthStatus.GOOD),
        ("43", HealthStatus.MODERATE),
        ("50", HealthStatus.RISKY),
        ("50.01", HealthStatus.HIGH_RISK),
        ])
    def test_health_bands(self, back_end, status):
        assert dti_service.get_health_status(Decimal(back_end)) == status

    @pytest.mark.parametrize("front, back, conventional, fha, va", [
        ("28", "36", True, True, True),
        ("29", "36", False, True, True),
        ("31", "42", False, True, False),
        ("32", "43", False, False, False),
        ("40", "41", False, False, True),
        ])
    def test_qualification_thresholds(self, front, back, conventional, fha, va):
        q = dti_service.check_qualification(Decimal(front), Decimal(back))
        assert (q.conventional, q.fha, q.va) == (conventional, fha, va)

    def test_recommendations_for_very_high_dti(self):
        recommendations = dti_service.generate_recommendations(Decimal("55"), Decimal("20"))
        assert recommendations[0].startswith("Urgent")
        assert len(recommendations) == 4


# ============================================================================
# WHAT-IF
# ============================================================================

def test_what_if_scenario():
    request = DTIWhatIfRequest(
        **_request("5000", "1500", [DebtItem(name="Card", monthly_payment=Decimal("500"))]),
        changes=WhatIfChanges(
            income_increase=Decimal("1000"),
            debt_reduction=Decimal("200"),
            housing_reduction=Decimal("300"),
            ),
        )
    result = dti_service.calculate_what_if(request)

    assert result.current.back_end_ratio == Decimal("40.00")
    assert result.scenario.total_monthly_income == Decimal("6000.00")
    assert result.scenario.total_housing_costs == Decimal("1200.00")
    assert result.scenario.total_monthly_debts == Decimal("1500.00")
    assert result.scenario.front_end_ratio == Decimal("20.00")
    assert result.scenario.back_end_ratio == Decimal("25.00")


def test_what_if_never_negative():
    request = DTIWhatIfRequest(
        **_request("5000", "500"),
        changes=WhatIfChanges(debt_reduction=Decimal("9999"), housing_reduction=Decimal("9999")),
        )
    result = dti_service.calculate_what_if(request)
    assert result.scenario.total_housing_costs == Decimal("0.00")
    assert result.scenario.total_monthly_debts == Decimal("0.00")


# ============================================================================
# PRIORITIZATION
# ============================================================================

DEBTS = [
    DebtItem(name="Car", monthly_payment=Decimal("300"), balance=Decimal("12000"), interest_rate=Decimal("7")),
    DebtItem(name="Card", monthly_payment=Decimal("150"), balance=Decimal("3000"), interest_rate=Decimal("24")),
    DebtItem(name="Student", monthly_payment=Decimal("200"), balance=Decimal("20000"), interest_rate=Decimal("5")),
    DebtItem(name="Family", monthly_payment=Decimal("100")),
    ]


def test_avalanche_orders_by_rate():
    ordered = dti_service.prioritize_debts(DEBTS, PrioritizeStrategy.AVALANCHE)
    assert [d.name for d in ordered] == ["Card", "Car", "Student"]


def test_snowball_orders_by_balance():
    ordered = dti_service.prioritize_debts(DEBTS, PrioritizeStrategy.SNOWBALL)
    assert [d.name for d in ordered] == ["Card", "Car", "Student"]
    ordered = dti_service.prioritize_debts(DEBTS[:1] + DEBTS[2:], PrioritizeStrategy.SNOWBALL)
    assert [d.name for d in ordered] == ["Car", "Student"]
