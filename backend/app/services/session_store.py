"""
Persistence of user inputs.

Server-side storage of what a calculator UI keeps between visits, keyed by
an opaque client id:
- Calculator sessions: last inputs per calculator, expired after
  SESSION_TTL_HOURS (an expired session is deleted on read and reported
  as missing)
- Preferences: JSON value per key
- Saved loan scenarios: listed newest first

Design Notes:
- JSON payloads are serialized to Text columns here
- All methods are async; the caller is responsible for commit/rollback
"""
from __future__ import annotations

import json
from datetime import timedelta
from typing import Any, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import get_settings
from backend.app.db.models import CalculatorSession, SavedScenario, UserPreference
from backend.app.logging_config import get_logger
from backend.app.schemas.sessions import (
    CalculatorSessionRead,
    PreferenceRead,
    ScenarioCreate,
    ScenarioRead,
    )
from backend.app.utils.datetime_utils import ensure_utc, utcnow

logger = get_logger(__name__)


def _dumps(value: Any) -> str:
    return json.dumps(value, default=str)


class SessionStore:
    """
    Store for calculator sessions, preferences and saved scenarios.

    The caller is responsible for commit/rollback.
    """

    def __init__(self, session: AsyncSession, ttl_hours: Optional[int] = None):
        self.session = session
        self.ttl = timedelta(hours=ttl_hours if ttl_hours is not None else get_settings().SESSION_TTL_HOURS)

    # =========================================================================
    # CALCULATOR SESSIONS
    # =========================================================================

    def _session_read(self, row: CalculatorSession) -> CalculatorSessionRead:
        updated_at = ensure_utc(row.updated_at)
        return CalculatorSessionRead(
            client_id=row.client_id,
            calculator_type=row.calculator_type,
            data=json.loads(row.data),
            updated_at=updated_at,
            expires_at=updated_at + self.ttl,
            )

    async def _get_session_row(self, client_id: str, calculator_type: str) -> Optional[CalculatorSession]:
        stmt = select(CalculatorSession).where(
            CalculatorSession.client_id == client_id,
            CalculatorSession.calculator_type == calculator_type,
            )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save_calculator_session(self, client_id: str, calculator_type: str, data: dict) -> CalculatorSessionRead:
        """Upsert the inputs of one calculator; saving refreshes the expiry."""
        row = await self._get_session_row(client_id, calculator_type)
        now = utcnow()
        if row is None:
            row = CalculatorSession(
                client_id=client_id,
                calculator_type=calculator_type,
                data=_dumps(data),
                created_at=now,
                updated_at=now,
                )
            self.session.add(row)
        else:
            row.data = _dumps(data)
            row.updated_at = now
        await self.session.flush()

        logger.debug("Calculator session saved", client_id=client_id, calculator_type=calculator_type)
        return self._session_read(row)

    async def load_calculator_session(self, client_id: str, calculator_type: str) -> Optional[CalculatorSessionRead]:
        """Saved inputs, or None when missing or older than the TTL (expired rows are deleted)."""
        row = await self._get_session_row(client_id, calculator_type)
        if row is None:
            return None

        if utcnow() - ensure_utc(row.updated_at) > self.ttl:
            logger.info("Calculator session expired", client_id=client_id, calculator_type=calculator_type)
            await self.session.delete(row)
            await self.session.flush()
            return None

        return self._session_read(row)

    async def clear_calculator_session(self, client_id: str, calculator_type: str) -> bool:
        stmt = delete(CalculatorSession).where(
            CalculatorSession.client_id == client_id,
            CalculatorSession.calculator_type == calculator_type,
            )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def clear_all_sessions(self, client_id: str) -> int:
        """Delete every calculator session of a client. Returns the number deleted."""
        result = await self.session.execute(delete(CalculatorSession).where(CalculatorSession.client_id == client_id))
        logger.info("Calculator sessions cleared", client_id=client_id, deleted=result.rowcount)
        return result.rowcount

    # =========================================================================
    # PREFERENCES
    # =========================================================================

    async def _get_preference_row(self, client_id: str, key: str) -> Optional[UserPreference]:
        stmt = select(UserPreference).where(UserPreference.client_id == client_id, UserPreference.key == key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_preference(self, client_id: str, key: str, value: Any) -> PreferenceRead:
        row = await self._get_preference_row(client_id, key)
        now = utcnow()
        if row is None:
            row = UserPreference(client_id=client_id, key=key, value=_dumps(value), updated_at=now)
            self.session.add(row)
        else:
            row.value = _dumps(value)
            row.updated_at = now
        await self.session.flush()
        return PreferenceRead(client_id=client_id, key=key, value=value, updated_at=now)

    async def get_preference(self, client_id: str, key: str) -> Optional[PreferenceRead]:
        row = await self._get_preference_row(client_id, key)
        if row is None:
            return None
        return PreferenceRead(
            client_id=row.client_id,
            key=row.key,
            value=json.loads(row.value),
            updated_at=ensure_utc(row.updated_at),
            )

    # =========================================================================
    # SAVED SCENARIOS
    # =========================================================================

    @staticmethod
    def _scenario_read(row: SavedScenario) -> ScenarioRead:
        return ScenarioRead(
            id=row.id,
            client_id=row.client_id,
            title=row.title,
            loan_type=row.loan_type,
            principal=row.principal,
            annual_rate=row.annual_rate,
            tenure_months=row.tenure_months,
            result=json.loads(row.result),
            created_at=ensure_utc(row.created_at),
            )

    async def create_scenario(self, client_id: str, item: ScenarioCreate) -> ScenarioRead:
        row = SavedScenario(
            client_id=client_id,
            title=item.title,
            loan_type=item.loan_type.value if item.loan_type else None,
            principal=item.principal,
            annual_rate=item.annual_rate,
            tenure_months=item.tenure_months,
            result=_dumps(item.result),
            created_at=utcnow(),
            )
        self.session.add(row)
        await self.session.flush()  # Get ID

        logger.info("Scenario saved", client_id=client_id, scenario_id=row.id, title=item.title)
        return self._scenario_read(row)

    async def list_scenarios(self, client_id: str) -> List[ScenarioRead]:
        """Scenarios of a client, newest first."""
        stmt = (
            select(SavedScenario)
            .where(SavedScenario.client_id == client_id)
            .order_by(SavedScenario.created_at.desc(), SavedScenario.id.desc())
            )
        result = await self.session.execute(stmt)
        return [self._scenario_read(row) for row in result.scalars().all()]

    async def delete_scenario(self, client_id: str, scenario_id: int) -> bool:
        stmt = delete(SavedScenario).where(SavedScenario.client_id == client_id, SavedScenario.id == scenario_id)
        result = await self.session.execute(stmt)
        return result.rowcount > 0
