"""
Database module exports.
"""
from backend.app.db.base import (
    SQLModel,
    CalculatorSession,
    UserPreference,
    SavedScenario,
    )
from backend.app.db.session import get_sync_engine, get_async_engine, get_session_generator

__all__ = [
    "SQLModel",
    "get_sync_engine",  # For migrations and scripts
    "get_async_engine",  # For the FastAPI app
    "get_session_generator",
    "CalculatorSession",
    "UserPreference",
    "SavedScenario",
    ]
