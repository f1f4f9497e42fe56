"""
Tests for the planning endpoints.

Runs the application in-process through httpx's ASGI transport:
- /calc/tvm
- /calc/savings, /calc/savings/goal
- /calc/rental-property
"""
import httpx
import pytest
import pytest_asyncio

from backend.test_scripts.test_db_config import setup_test_database
setup_test_database()

from backend.app.main import app

API = "/api/v1"

RENTAL = {
    "purchase_price": 200000,
    "down_payment_percent": 20,
    "closing_costs": 5000,
    "annual_interest_rate": 6,
    "monthly_rent": 2000,
    "vacancy_rate": 5,
    "annual_property_tax": 2400,
    "annual_insurance": 1200,
    "maintenance_percent": 5,
    }


@pytest_asyncio.fixture
async def client():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client


# ============================================================
# TVM
# ============================================================

@pytest.mark.asyncio
async def test_tvm_payment(client):
    response = await client.post(f"{API}/calc/tvm", json={
        "mode": "pmt", "present_value": 100000, "annual_rate": 12, "periods": 12,
        })
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["value"] == "-8884.88"
    assert data["effective_rate"] == "12.68"
    assert len(data["schedule"]) == 12
    assert data["schedule"][-1]["balance"] == "0.00"


@pytest.mark.asyncio
async def test_tvm_unreachable_goal(client):
    response = await client.post(f"{API}/calc/tvm", json={
        "mode": "n", "payment": -100, "future_value": 1000, "annual_rate": 12,
        })
    assert response.status_code == 400
    assert "cannot be reached" in response.json()["detail"]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"mode": "fv", "present_value": 1000, "periods": 12},
    {"mode": "fv", "present_value": 1000, "annual_rate": 5, "periods": 12, "frequency": "continuous"},
    {"mode": "npv", "present_value": 1000, "annual_rate": 5, "periods": 12},
    ])
async def test_tvm_invalid_body(client, body):
    response = await client.post(f"{API}/calc/tvm", json=body)
    assert response.status_code == 422


# ============================================================
# Savings
# ============================================================

@pytest.mark.asyncio
async def test_savings_sip(client):
    response = await client.post(f"{API}/calc/savings", json={
        "plan_type": "sip", "monthly_investment": 1000, "annual_rate": 12, "years": 1,
        })
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["future_value"] == "12809.33"
    assert data["total_investment"] == "12000.00"
    assert len(data["yearly_breakdown"]) == 1


@pytest.mark.asyncio
async def test_savings_step_up(client):
    response = await client.post(f"{API}/calc/savings", json={
        "plan_type": "step-up", "monthly_investment": 1000, "step_up_rate": 10, "annual_rate": 12, "years": 2,
        })
    assert response.status_code == 200, response.text
    assert response.json()["yearly_breakdown"][1]["yearly_investment"] == "13200.00"


@pytest.mark.asyncio
async def test_savings_missing_lumpsum(client):
    response = await client.post(f"{API}/calc/savings", json={"plan_type": "lumpsum", "annual_rate": 12, "years": 1})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_savings_goal(client):
    response = await client.post(f"{API}/calc/savings/goal", json={
        "target_amount": 12000, "annual_rate": 0, "years": 1,
        })
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["required_monthly_investment"] == "1000.00"
    assert data["goal_reached_by_savings"] is False


# ============================================================
# Rental property
# ============================================================

@pytest.mark.asyncio
async def test_rental_property(client):
    response = await client.post(f"{API}/calc/rental-property", json=RENTAL)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["financing"]["monthly_mortgage"] == "959.28"
    assert data["monthly"]["noi"] == "1500.00"
    assert data["metrics"]["cap_rate"] == "9.00"
    assert data["one_percent_rule"]["passes"] is True
    assert len(data["projections"]) == 10
    assert data["exit"]["irr"] is not None


@pytest.mark.asyncio
async def test_rental_property_all_cash(client):
    response = await client.post(f"{API}/calc/rental-property", json={**RENTAL, "down_payment_percent": 100})
    assert response.status_code == 200, response.text
    assert response.json()["metrics"]["dscr"] is None


@pytest.mark.asyncio
async def test_rental_property_without_cash_invested(client):
    response = await client.post(f"{API}/calc/rental-property", json={
        **RENTAL, "down_payment_percent": 0, "closing_costs": 0,
        })
    assert response.status_code == 422
