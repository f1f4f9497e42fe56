"""
Database base module.
SQLModel base classes and metadata.
Import all models here so Alembic can detect them.
"""
from sqlmodel import SQLModel

from backend.app.db.models import (
    CalculatorSession,
    UserPreference,
    SavedScenario,
    )

__all__ = [
    "SQLModel",
    "CalculatorSession",
    "UserPreference",
    "SavedScenario",
    ]
