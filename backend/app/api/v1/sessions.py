"""
Persistence API endpoints for user inputs.

Calculator sessions:
- PUT /sessions/{client_id}/{calculator_type}: Save calculator inputs
- GET /sessions/{client_id}/{calculator_type}: Load inputs (404 when missing or expired)
- DELETE /sessions/{client_id}/{calculator_type}: Clear one calculator
- DELETE /sessions/{client_id}: Clear every calculator of a client

Preferences:
- PUT /preferences/{client_id}/{key}: Set a preference (e.g. currency)
- GET /preferences/{client_id}/{key}: Read a preference

Saved scenarios:
- POST /scenarios/{client_id}: Save a loan scenario
- GET /scenarios/{client_id}: List scenarios, newest first
- DELETE /scenarios/{client_id}/{scenario_id}: Delete a scenario
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.session import get_session_generator
from backend.app.logging_config import get_logger
from backend.app.schemas.common import MessageResponse
from backend.app.schemas.sessions import (
    CalculatorSessionRead,
    CalculatorSessionSave,
    PreferenceRead,
    PreferenceSave,
    ScenarioCreate,
    ScenarioRead,
    )
from backend.app.services.session_store import SessionStore

logger = get_logger(__name__)

session_router = APIRouter(prefix="/sessions", tags=["Sessions"])
preference_router = APIRouter(prefix="/preferences", tags=["Preferences"])
scenario_router = APIRouter(prefix="/scenarios", tags=["Scenarios"])


# ============================================================================
# CALCULATOR SESSIONS
# ============================================================================

@session_router.put("/{client_id}/{calculator_type}", response_model=CalculatorSessionRead)
async def save_calculator_session(
    body: CalculatorSessionSave,
    calculator_type: str,
    client_id: str,
    session: AsyncSession = Depends(get_session_generator),
    ):
    """
    Save the inputs of a calculator. Saving again replaces them and restarts
    the expiry window.

    **Example Request**:
    ```json
    PUT /api/v1/sessions/3f2b.../emi
    {"data": {"principal": "1000000", "annual_rate": "7.5", "tenure_months": 240}}
    ```
    """
    store = SessionStore(session)
    result = await store.save_calculator_session(client_id, calculator_type, body.data)
    await session.commit()
    return result


@session_router.get("/{client_id}/{calculator_type}", response_model=CalculatorSessionRead)
async def load_calculator_session(
    calculator_type: str,
    client_id: str,
    session: AsyncSession = Depends(get_session_generator),
    ):
    """Load saved inputs. Expired sessions are removed and reported as 404."""
    store = SessionStore(session)
    result = await store.load_calculator_session(client_id, calculator_type)
    # Commit the delete of an expired row
    await session.commit()
    if result is None:
        raise HTTPException(status_code=404, detail=f"No saved session for '{calculator_type}'")
    return result


@session_router.delete("/{client_id}/{calculator_type}", response_model=MessageResponse)
async def clear_calculator_session(
    calculator_type: str,
    client_id: str,
    session: AsyncSession = Depends(get_session_generator),
    ):
    store = SessionStore(session)
    deleted = await store.clear_calculator_session(client_id, calculator_type)
    await session.commit()
    if not deleted:
        raise HTTPException(status_code=404, detail=f"No saved session for '{calculator_type}'")
    return MessageResponse(success=True, message="Session cleared")


@session_router.delete("/{client_id}", response_model=MessageResponse)
async def clear_all_sessions(
    client_id: str,
    session: AsyncSession = Depends(get_session_generator),
    ):
    """Clear all saved calculator inputs of a client."""
    store = SessionStore(session)
    deleted = await store.clear_all_sessions(client_id)
    await session.commit()
    return MessageResponse(success=True, message=f"{deleted} session(s) cleared")


# ============================================================================
# PREFERENCES
# ============================================================================

@preference_router.put("/{client_id}/{key}", response_model=PreferenceRead)
async def set_preference(
    body: PreferenceSave,
    key: str,
    client_id: str,
    session: AsyncSession = Depends(get_session_generator),
    ):
    """
    Store a preference value.

    **Example Request**:
    ```json
    PUT /api/v1/preferences/3f2b.../currency
    {"value": "INR"}
    ```
    """
    store = SessionStore(session)
    result = await store.set_preference(client_id, key, body.value)
    await session.commit()
    return result


@preference_router.get("/{client_id}/{key}", response_model=PreferenceRead)
async def get_preference(
    key: str,
    client_id: str,
    session: AsyncSession = Depends(get_session_generator),
    ):
    store = SessionStore(session)
    result = await store.get_preference(client_id, key)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Preference '{key}' not set")
    return result


# ============================================================================
# SAVED SCENARIOS
# ============================================================================

@scenario_router.post("/{client_id}", response_model=ScenarioRead, status_code=201)
async def create_scenario(
    body: ScenarioCreate,
    client_id: str,
    session: AsyncSession = Depends(get_session_generator),
    ):
    """
    Save a named loan scenario.

    **Example Request**:
    ```json
    {
      "title": "20y home loan",
      "loan_type": "home",
      "principal": "1000000",
      "annual_rate": "7.5",
      "tenure_months": 240,
      "result": {"emi": "8055.93"}
    }
    ```
    """
    store = SessionStore(session)
    result = await store.create_scenario(client_id, body)
    await session.commit()
    return result


@scenario_router.get("/{client_id}", response_model=List[ScenarioRead])
async def list_scenarios(
    client_id: str,
    session: AsyncSession = Depends(get_session_generator),
    ):
    store = SessionStore(session)
    return await store.list_scenarios(client_id)


@scenario_router.delete("/{client_id}/{scenario_id}", response_model=MessageResponse)
async def delete_scenario(
    scenario_id: int,
    client_id: str,
    session: AsyncSession = Depends(get_session_generator),
    ):
    store = SessionStore(session)
    deleted = await store.delete_scenario(client_id, scenario_id)
    await session.commit()
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Scenario {scenario_id} not found")
    return MessageResponse(success=True, message="Scenario deleted")
