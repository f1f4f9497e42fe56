"""
Database session management.
Handles SQLite connection and session lifecycle with async support.
"""
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from backend.app.config import get_settings


def _ensure_sqlite_dir(db_url: str) -> None:
    if db_url.startswith("sqlite:///"):
        db_path = db_url.replace("sqlite:///", "")
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def get_sync_engine():
    """
    Create a SYNC database engine.

    Used by Alembic migrations and maintenance scripts.
    """
    db_url = get_settings().DATABASE_URL
    _ensure_sqlite_dir(db_url)
    return create_engine(db_url, echo=False, poolclass=NullPool)


def get_async_engine():
    """
    Create the async database engine (aiosqlite).

    Returns:
        AsyncEngine configured for SQLite
    """
    db_url = get_settings().DATABASE_URL
    _ensure_sqlite_dir(db_url)

    # sqlite:/// -> sqlite+aiosqlite:///
    async_db_url = db_url.replace("sqlite:///", "sqlite+aiosqlite:///")
    return create_async_engine(async_db_url, echo=False, poolclass=NullPool)


_async_engine = None


async def get_session_generator() -> AsyncGenerator[AsyncSession, None]:
    """
    Async database session for dependency injection.

    Usage in FastAPI:
        @router.get("/")
        async def endpoint(session: AsyncSession = Depends(get_session_generator)):
            ...

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    global _async_engine
    if _async_engine is None:
        _async_engine = get_async_engine()
    async with AsyncSession(_async_engine, expire_on_commit=False) as session:
        yield session
