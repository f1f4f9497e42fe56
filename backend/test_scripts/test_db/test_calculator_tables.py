"""
Database constraint tests for the persistence tables.

- calculator_sessions: one row per (client_id, calculator_type)
- user_preferences: one row per (client_id, key)
- saved_scenarios: any number per client
"""
from decimal import Decimal

import pytest

from backend.test_scripts.test_db_config import create_test_schema, setup_test_database
setup_test_database()

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from backend.app.db.models import CalculatorSession, SavedScenario, UserPreference
from backend.app.db.session import get_sync_engine
from backend.test_scripts.test_utils import unique_id


@pytest.fixture(scope="module")
def engine():
    create_test_schema()
    engine = get_sync_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session
        session.rollback()


def test_tables_exist(engine):
    tables = set(inspect(engine).get_table_names())
    assert {"calculator_sessions", "user_preferences", "saved_scenarios"} <= tables


def test_calculator_session_unique_per_type(session):
    client_id = unique_id("db")
    session.add(CalculatorSession(client_id=client_id, calculator_type="emi", data="{}"))
    session.add(CalculatorSession(client_id=client_id, calculator_type="gst", data="{}"))
    session.flush()

    session.add(CalculatorSession(client_id=client_id, calculator_type="emi", data='{"principal": 1}'))
    with pytest.raises(IntegrityError):
        session.flush()


def test_preference_unique_per_key(session):
    client_id = unique_id("db")
    session.add(UserPreference(client_id=client_id, key="currency", value='"INR"'))
    session.flush()

    session.add(UserPreference(client_id=client_id, key="currency", value='"EUR"'))
    with pytest.raises(IntegrityError):
        session.flush()


def test_scenarios_allow_duplicates(session):
    client_id = unique_id("db")
    for _ in range(2):
        session.add(SavedScenario(
            client_id=client_id,
            title="Same title",
            principal=Decimal("100000"),
            annual_rate=Decimal("7.5"),
            tenure_months=120,
            result="{}",
            ))
    session.flush()
