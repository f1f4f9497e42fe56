"""
Tests for persisted user inputs.

- /sessions/{client_id}/{calculator_type}: save, load, clear
- /preferences/{client_id}/{key}: set, get
- /scenarios/{client_id}: create, list, delete

Rows are committed to the test database; every test uses its own client id.
"""
import httpx
import pytest
import pytest_asyncio

from backend.test_scripts.test_db_config import create_test_schema, setup_test_database
setup_test_database()

from backend.app.main import app
from backend.test_scripts.test_utils import unique_id

API = "/api/v1"


@pytest.fixture(scope="module", autouse=True)
def schema():
    create_test_schema()


@pytest_asyncio.fixture
async def client():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def client_id() -> str:
    return unique_id("api")


# ============================================================
# Calculator sessions
# ============================================================

@pytest.mark.asyncio
async def test_session_round_trip(client, client_id):
    url = f"{API}/sessions/{client_id}/emi"
    saved = await client.put(url, json={"data": {"principal": 250000, "rate": 8.5, "tenure": 240}})
    assert saved.status_code == 200, saved.text

    loaded = await client.get(url)
    assert loaded.status_code == 200
    body = loaded.json()
    assert body["data"] == {"principal": 250000, "rate": 8.5, "tenure": 240}
    assert body["calculator_type"] == "emi"


@pytest.mark.asyncio
async def test_session_missing(client, client_id):
    response = await client.get(f"{API}/sessions/{client_id}/emi")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_session_clear(client, client_id):
    await client.put(f"{API}/sessions/{client_id}/emi", json={"data": {}})
    await client.put(f"{API}/sessions/{client_id}/gst", json={"data": {}})

    response = await client.delete(f"{API}/sessions/{client_id}/emi")
    assert response.status_code == 200
    assert (await client.delete(f"{API}/sessions/{client_id}/emi")).status_code == 404

    response = await client.delete(f"{API}/sessions/{client_id}")
    assert response.json()["message"] == "1 session(s) cleared"
    assert (await client.get(f"{API}/sessions/{client_id}/gst")).status_code == 404


# ============================================================
# Preferences
# ============================================================

@pytest.mark.asyncio
async def test_preferences(client, client_id):
    url = f"{API}/preferences/{client_id}/currency"
    assert (await client.get(url)).status_code == 404

    assert (await client.put(url, json={"value": "INR"})).status_code == 200
    assert (await client.put(url, json={"value": "EUR"})).status_code == 200

    response = await client.get(url)
    assert response.status_code == 200
    assert response.json()["value"] == "EUR"


# ============================================================
# Saved scenarios
# ============================================================

SCENARIO = {
    "title": "Bank A",
    "loan_type": "home",
    "principal": 250000,
    "annual_rate": 8.5,
    "tenure_months": 240,
    "result": {"emi": "2169.56"},
    }


@pytest.mark.asyncio
async def test_scenarios(client, client_id):
    url = f"{API}/scenarios/{client_id}"
    first = await client.post(url, json=SCENARIO)
    assert first.status_code == 201, first.text
    second = await client.post(url, json={**SCENARIO, "title": "Bank B"})

    listed = (await client.get(url)).json()
    assert [s["title"] for s in listed] == ["Bank B", "Bank A"]

    scenario_id = second.json()["id"]
    assert (await client.delete(f"{url}/{scenario_id}")).status_code == 200
    assert (await client.delete(f"{url}/{scenario_id}")).status_code == 404
    assert [s["title"] for s in (await client.get(url)).json()] == ["Bank A"]


@pytest.mark.asyncio
async def test_scenario_invalid(client, client_id):
    response = await client.post(f"{API}/scenarios/{client_id}", json={**SCENARIO, "title": "  "})
    assert response.status_code == 422
