"""
Tests for the calculator endpoints.

Runs the application in-process through httpx's ASGI transport:
- /calc (EMI, payment plan, loan term, APR, loan types, chit fund)
- /calc/mortgage, /calc/tax, /calc/interest, /calc/dti, /calc/investment

Amounts come back as JSON strings (Decimal serialization).
"""
import httpx
import pytest
import pytest_asyncio

from backend.test_scripts.test_db_config import setup_test_database
setup_test_database()

from backend.app.main import app

API = "/api/v1"


@pytest_asyncio.fixture
async def client():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client


# ============================================================
# Loans
# ============================================================

@pytest.mark.asyncio
async def test_emi(client):
    response = await client.post(f"{API}/calc/emi", json={"principal": 100000, "annual_rate": 10, "tenure_months": 12})
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["emi"] == "8791.59"
    assert len(data["amortization"]) == 12
    assert data["amortization"][-1]["balance"] == "0.00"


@pytest.mark.asyncio
async def test_emi_outside_loan_type_bounds(client):
    response = await client.post(f"{API}/calc/emi", json={
        "principal": 1000, "annual_rate": 10, "tenure_months": 12, "loan_type": "car",
        })
    assert response.status_code == 400
    assert "Car Loan" in response.json()["detail"]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"principal": 0, "annual_rate": 10, "tenure_months": 12},
    {"principal": 1000, "annual_rate": 101, "tenure_months": 12},
    {"principal": 1000, "annual_rate": 10},
    {"principal": 1000, "annual_rate": 10, "tenure_months": 12, "unknown": 1},
    ])
async def test_emi_invalid_body(client, body):
    response = await client.post(f"{API}/calc/emi", json=body)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_payment_plan_fixed_payment(client):
    response = await client.post(f"{API}/calc/payment", json={
        "mode": "fixed-payment", "principal": 100000, "annual_rate": 10, "monthly_payment": 2000,
        })
    assert response.status_code == 200, response.text
    assert response.json()["calculated_term_months"] == 65


@pytest.mark.asyncio
async def test_payment_plan_payment_too_low(client):
    response = await client.post(f"{API}/calc/payment", json={
        "mode": "fixed-payment", "principal": 100000, "annual_rate": 10, "monthly_payment": 500,
        })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_loan_term(client):
    response = await client.post(f"{API}/calc/loan-term", json={
        "principal": 100000, "annual_rate": 10, "monthly_payment": 2000,
        })
    assert response.status_code == 200
    assert response.json() == {"months": 65, "years": 5, "remaining_months": 5}


@pytest.mark.asyncio
async def test_apr(client):
    response = await client.post(f"{API}/calc/apr", json={
        "principal": 100000, "annual_rate": 10, "tenure_months": 12,
        })
    assert response.status_code == 200
    data = response.json()
    assert data["monthly_payment"] == "8791.59"
    assert float(data["apr"]) == pytest.approx(10.0)


@pytest.mark.asyncio
async def test_loan_types(client):
    response = await client.get(f"{API}/calc/loan-types")
    assert response.status_code == 200
    types = {item["loan_type"] for item in response.json()}
    assert types == {"home", "car", "personal", "education"}


@pytest.mark.asyncio
async def test_chit_fund(client):
    response = await client.post(f"{API}/calc/chit-fund", json={
        "chit_value": 100000, "months": 20, "commission_percent": 5, "average_bid_percent": 20,
        })
    assert response.status_code == 200
    assert response.json()["return_percentage"] == "15.61"


# ============================================================
# Mortgage
# ============================================================

@pytest.mark.asyncio
async def test_fha(client):
    response = await client.post(f"{API}/calc/mortgage/fha", json={
        "home_price": 300000, "down_payment": 10500, "annual_rate": 6.5,
        "costs": {"property_tax": 250, "home_insurance": 100},
        })
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["financed_upfront_mip"] == "5066.25"
    assert len(data["amortization"]) == 360


@pytest.mark.asyncio
async def test_fha_down_payment_covers_price(client):
    response = await client.post(f"{API}/calc/mortgage/fha", json={
        "home_price": 300000, "down_payment": 300000, "annual_rate": 6.5,
        })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_va(client):
    response = await client.post(f"{API}/calc/mortgage/va", json={
        "home_price": 300000, "annual_rate": 6, "is_disabled": True,
        })
    assert response.status_code == 200
    assert response.json()["funding_fee_amount"] == "0.00"


@pytest.mark.asyncio
async def test_refinance(client):
    response = await client.post(f"{API}/calc/mortgage/refinance", json={
        "current_balance": 200000, "current_rate": 7, "current_term_years": 25,
        "new_loan_amount": 200000, "new_rate": 5.5, "new_term_years": 25, "closing_costs": 4000,
        })
    assert response.status_code == 200
    data = response.json()
    assert float(data["monthly"]["savings"]) > 0
    assert float(data["break_even_months"]) > 0


@pytest.mark.asyncio
async def test_affordability(client):
    response = await client.post(f"{API}/calc/mortgage/affordability", json={
        "annual_income": 120000, "monthly_debts": 500, "down_payment": 60000, "annual_rate": 6.5,
        })
    assert response.status_code == 200
    data = response.json()
    assert float(data["max_home_price"]) > 60000
    assert data["risk_level"] in ("low", "medium", "high")


# ============================================================
# Taxes / Interest
# ============================================================

@pytest.mark.asyncio
async def test_gst(client):
    response = await client.post(f"{API}/calc/tax/gst", json={"amount": 1000, "gst_rate": 18})
    assert response.status_code == 200
    data = response.json()
    assert (data["cgst"], data["sgst"], data["final_amount"]) == ("90.00", "90.00", "1180.00")


@pytest.mark.asyncio
async def test_sales_and_property_tax(client):
    sales = await client.post(f"{API}/calc/tax/sales", json={"amount": 250, "rate": 8.25})
    assert sales.json()["tax_amount"] == "20.63"

    prop = await client.post(f"{API}/calc/tax/property", json={"assessed_value": 350000, "rate": 1.2})
    assert prop.json()["monthly_tax"] == "350.00"


@pytest.mark.asyncio
async def test_interest(client):
    simple = await client.post(f"{API}/calc/interest/simple", json={"principal": 10000, "annual_rate": 8, "years": 5})
    assert simple.json()["interest"] == "4000.00"

    compound = await client.post(f"{API}/calc/interest/compound", json={
        "principal": 10000, "annual_rate": 8, "years": 1, "frequency": "quarterly",
        })
    assert compound.json()["total_amount"] == "10824.32"

    apy = await client.post(f"{API}/calc/interest/apy", json={"nominal_rate": 12, "frequency": "monthly"})
    assert apy.json()["apy"] == "12.68"


# ============================================================
# DTI / Investment
# ============================================================

@pytest.mark.asyncio
async def test_dti(client):
    body = {
        "income": {"primary": 5000},
        "housing": {"mortgage_or_rent": 1500},
        "debts": [{"name": "Card", "monthly_payment": 500}],
        }
    response = await client.post(f"{API}/calc/dti", json=body)
    assert response.status_code == 200
    assert response.json()["health_status"] == "moderate"

    response = await client.post(f"{API}/calc/dti/what-if", json={**body, "changes": {"debt_reduction": 500}})
    assert response.json()["scenario"]["back_end_ratio"] == "30.00"


@pytest.mark.asyncio
async def test_dti_prioritize(client):
    response = await client.post(f"{API}/calc/dti/prioritize", json={
        "strategy": "snowball",
        "debts": [
            {"name": "Car", "monthly_payment": 300, "balance": 12000},
            {"name": "Card", "monthly_payment": 150, "balance": 3000},
            ],
        })
    assert response.status_code == 200
    assert [d["name"] for d in response.json()["debts"]] == ["Card", "Car"]


@pytest.mark.asyncio
async def test_investment_irr_and_npv(client):
    flows = [-1000, 300, 400, 500]
    irr = await client.post(f"{API}/calc/investment/irr", json={"cash_flows": flows})
    assert irr.status_code == 200
    assert 8.8 < float(irr.json()["irr"]) < 9.0

    npv = await client.post(f"{API}/calc/investment/npv", json={"cash_flows": flows, "discount_rate": 10})
    assert npv.json()["npv"] == "-21.04"


@pytest.mark.asyncio
async def test_investment_irr_single_flow(client):
    response = await client.post(f"{API}/calc/investment/irr", json={"cash_flows": [-1000]})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_investment_irr_long_series(client):
    response = await client.post(f"{API}/calc/investment/irr", json={"cash_flows": [-1000] + [1] * 400})
    assert response.status_code == 200, response.text
    assert response.json()["converged"] is False


@pytest.mark.asyncio
async def test_investment_irr_root_out_of_range(client):
    response = await client.post(f"{API}/calc/investment/irr", json={"cash_flows": [-1, 100]})
    assert response.status_code == 200
    data = response.json()
    assert data["converged"] is False
    assert data["npv_at_irr"] == "8.09"


@pytest.mark.asyncio
async def test_investment_npv_extreme_rates(client):
    flows = [-1000] + [1] * 400
    high = await client.post(f"{API}/calc/investment/npv", json={"cash_flows": flows, "discount_rate": 1000})
    assert high.status_code == 200
    assert high.json()["npv"] == "-999.90"

    low = await client.post(f"{API}/calc/investment/npv", json={"cash_flows": flows, "discount_rate": -99})
    assert low.status_code == 400


@pytest.mark.asyncio
async def test_investment_mirr_overflow(client):
    response = await client.post(f"{API}/calc/investment/mirr", json={
        "cash_flows": [-1000] + [1] * 400, "finance_rate": 10, "reinvestment_rate": 1000,
        })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_investment_too_many_flows(client):
    response = await client.post(f"{API}/calc/investment/irr", json={"cash_flows": [-1] + [1] * 600})
    assert response.status_code == 422
