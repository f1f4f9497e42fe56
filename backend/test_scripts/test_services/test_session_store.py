"""
Tests for SessionStore (calculator sessions, preferences, saved scenarios).

Each test runs in its own session and is rolled back at the end.

Reference: backend/app/services/session_store.py
"""
from datetime import timedelta
from decimal import Decimal

import pytest
import pytest_asyncio

# Setup test database BEFORE the engine is created
from backend.test_scripts.test_db_config import create_test_schema, setup_test_database
setup_test_database()

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import CalculatorSession
from backend.app.db.session import get_async_engine
from backend.app.schemas.loans import LoanType
from backend.app.schemas.sessions import ScenarioCreate
from backend.app.services.session_store import SessionStore
from backend.app.utils.datetime_utils import utcnow
from backend.test_scripts.test_utils import unique_id


# ============================================================================
# PYTEST FIXTURES
# ============================================================================

@pytest.fixture(scope="module")
def engine():
    create_test_schema()
    return get_async_engine()


@pytest_asyncio.fixture
async def session(engine):
    """Fresh session for each test, rolled back afterwards."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session
        await session.rollback()


@pytest.fixture
def client_id() -> str:
    return unique_id("client")


def _scenario(title: str) -> ScenarioCreate:
    return ScenarioCreate(
        title=title,
        loan_type=LoanType.HOME,
        principal=Decimal("250000"),
        annual_rate=Decimal("7.5"),
        tenure_months=240,
        result={"emi": "2013.98"},
        )


# ============================================================================
# CALCULATOR SESSIONS
# ============================================================================

class TestCalculatorSessions:

    @pytest.mark.asyncio
    async def test_save_and_load(self, session, client_id):
        store = SessionStore(session)
        saved = await store.save_calculator_session(client_id, "emi", {"principal": 100000, "rate": 7.5})
        assert saved.expires_at - saved.updated_at == timedelta(hours=24)

        loaded = await store.load_calculator_session(client_id, "emi")
        assert loaded is not None
        assert loaded.data == {"principal": 100000, "rate": 7.5}

    @pytest.mark.asyncio
    async def test_save_overwrites(self, session, client_id):
        store = SessionStore(session)
        await store.save_calculator_session(client_id, "emi", {"principal": 1})
        await store.save_calculator_session(client_id, "emi", {"principal": 2})

        rows = (await session.execute(
            select(CalculatorSession).where(CalculatorSession.client_id == client_id)
            )).scalars().all()
        assert len(rows) == 1
        assert (await store.load_calculator_session(client_id, "emi")).data == {"principal": 2}

    @pytest.mark.asyncio
    async def test_missing_session(self, session, client_id):
        assert await SessionStore(session).load_calculator_session(client_id, "gst") is None

    @pytest.mark.asyncio
    async def test_expired_session_is_deleted(self, session, client_id):
        store = SessionStore(session)
        await store.save_calculator_session(client_id, "emi", {"principal": 1})

        row = (await session.execute(
            select(CalculatorSession).where(CalculatorSession.client_id == client_id)
            )).scalar_one()
        row.updated_at = utcnow() - timedelta(hours=25)
        await session.flush()

        assert await store.load_calculator_session(client_id, "emi") is None
        remaining = (await session.execute(
            select(CalculatorSession).where(CalculatorSession.client_id == client_id)
            )).scalars().all()
        assert remaining == []

    @pytest.mark.asyncio
    async def test_custom_ttl(self, session, client_id):
        store = SessionStore(session, ttl_hours=48)
        saved = await store.save_calculator_session(client_id, "dti", {})
        assert saved.expires_at - saved.updated_at == timedelta(hours=48)

    @pytest.mark.asyncio
    async def test_clear(self, session, client_id):
        store = SessionStore(session)
        await store.save_calculator_session(client_id, "emi", {})
        await store.save_calculator_session(client_id, "gst", {})
        await store.save_calculator_session(client_id, "dti", {})

        assert await store.clear_calculator_session(client_id, "emi")
        assert not await store.clear_calculator_session(client_id, "emi")
        assert await store.clear_all_sessions(client_id) == 2
        assert await store.load_calculator_session(client_id, "gst") is None


# ============================================================================
# PREFERENCES
# ============================================================================

@pytest.mark.asyncio
async def test_preferences(session, client_id):
    store = SessionStore(session)
    assert await store.get_preference(client_id, "currency") is None

    await store.set_preference(client_id, "currency", "INR")
    await store.set_preference(client_id, "currency", "EUR")
    await store.set_preference(client_id, "theme", {"dark": True})

    assert (await store.get_preference(client_id, "currency")).value == "EUR"
    assert (await store.get_preference(client_id, "theme")).value == {"dark": True}


# ============================================================================
# SAVED SCENARIOS
# ============================================================================

@pytest.mark.asyncio
async def test_scenarios_newest_first(session, client_id):
    store = SessionStore(session)
    first = await store.create_scenario(client_id, _scenario("Bank A"))
    second = await store.create_scenario(client_id, _scenario("Bank B"))

    scenarios = await store.list_scenarios(client_id)
    assert [s.id for s in scenarios] == [second.id, first.id]
    assert scenarios[0].loan_type == LoanType.HOME
    assert scenarios[0].principal == Decimal("250000")
    assert scenarios[0].result == {"emi": "2013.98"}


@pytest.mark.asyncio
async def test_scenarios_are_per_client(session, client_id):
    store = SessionStore(session)
    await store.create_scenario(client_id, _scenario("Mine"))
    assert await store.list_scenarios(unique_id("other")) == []


@pytest.mark.asyncio
async def test_delete_scenario(session, client_id):
    store = SessionStore(session)
    scenario = await store.create_scenario(client_id, _scenario("Bank A"))

    assert not await store.delete_scenario(unique_id("other"), scenario.id)
    assert await store.delete_scenario(client_id, scenario.id)
    assert not await store.delete_scenario(client_id, scenario.id)
    assert await store.list_scenarios(client_id) == []
