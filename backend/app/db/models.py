"""
Database models for CalcBZ.

Server-side storage for user inputs, keyed by an opaque client id issued by
the UI (the equivalent of browser local/session storage):
- CalculatorSession: last inputs per calculator, expiring after a TTL
- UserPreference: small JSON values such as the selected currency
- SavedScenario: named loan configurations kept for comparison

Conventions:
- JSON payloads are stored as Text and (de)serialized in the service layer
- Decimal columns use Numeric(18, 6)
- Timestamps in UTC
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Index, Numeric, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

from backend.app.utils.datetime_utils import utcnow


class CalculatorSession(SQLModel, table=True):
    """
    Last inputs of one calculator for one client.

    Exactly one row per (client_id, calculator_type); saving again overwrites
    the data and refreshes updated_at, which drives expiry.
    """
    __tablename__ = "calculator_sessions"
    __table_args__ = (
        UniqueConstraint("client_id", "calculator_type", name="uq_calculator_sessions_client_type"),
        )

    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: str = Field(nullable=False, index=True)
    calculator_type: str = Field(nullable=False)
    data: str = Field(sa_column=Column(Text, nullable=False))  # JSON

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class UserPreference(SQLModel, table=True):
    """Preference value per (client_id, key). Example: key='currency', value='"INR"'."""
    __tablename__ = "user_preferences"
    __table_args__ = (
        UniqueConstraint("client_id", "key", name="uq_user_preferences_client_key"),
        )

    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: str = Field(nullable=False, index=True)
    key: str = Field(nullable=False)
    value: str = Field(sa_column=Column(Text, nullable=False))  # JSON

    updated_at: datetime = Field(default_factory=utcnow)


class SavedScenario(SQLModel, table=True):
    """A named loan configuration with the figures calculated for it."""
    __tablename__ = "saved_scenarios"
    __table_args__ = (
        Index("idx_saved_scenarios_client_created", "client_id", "created_at"),
        )

    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: str = Field(nullable=False)
    title: str = Field(nullable=False)
    loan_type: Optional[str] = Field(default=None)
    principal: Decimal = Field(sa_column=Column(Numeric(18, 6), nullable=False))
    annual_rate: Decimal = Field(sa_column=Column(Numeric(18, 6), nullable=False))
    tenure_months: int = Field(nullable=False)
    result: str = Field(sa_column=Column(Text, nullable=False))  # JSON

    created_at: datetime = Field(default_factory=utcnow)
