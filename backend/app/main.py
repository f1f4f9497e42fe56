"""
CalcBZ FastAPI application.
Main entry point for the calculator API.
"""
import sqlite3
import subprocess
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api.v1.router import router as api_v1_router
from backend.app.config import PROJECT_ROOT, get_settings, is_test_mode, set_test_mode
from backend.app.logging_config import configure_logging, get_logger

# --test must be handled before settings are read
if "--test" in sys.argv:
    set_test_mode(True)
    print("[CalcBZ] Test mode enabled (--test flag detected)")
    sys.argv.remove("--test")

settings = get_settings()

configure_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


def _resolve_sqlite_path(db_url: str) -> Optional[Path]:
    """Filesystem path of a sqlite URL (relative paths from the project root), None for other backends."""
    if not db_url.startswith("sqlite:///"):
        return None
    db_path = Path(db_url.replace("sqlite:///", ""))
    return db_path if db_path.is_absolute() else PROJECT_ROOT / db_path


def _migration_reason(db_path: Path) -> Optional[str]:
    """Why the database must be migrated, or None when it already has tables."""
    if not db_path.exists():
        return "Database file not found"
    if db_path.stat().st_size == 0:
        return "Database file is empty"

    try:
        conn = sqlite3.connect(str(db_path))
        try:
            cursor = conn.execute("SELECT count(*) FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'")
            table_count = cursor.fetchone()[0]
        finally:
            conn.close()
    except sqlite3.DatabaseError as e:
        return f"Database appears corrupted: {e}"

    if table_count == 0:
        return "Database has no tables"
    logger.info("Database ready", tables=table_count, db_path=str(db_path))
    return None


def ensure_database_exists():
    """
    Create and migrate the database when it is missing, empty or unreadable.

    Used on server startup (lifespan) and by the test runner.
    """
    db_path = _resolve_sqlite_path(get_settings().DATABASE_URL)
    if db_path is None:
        return

    reason = _migration_reason(db_path)
    if reason is None:
        return

    logger.warning(f"{reason}, running migrations", db_path=str(db_path))
    db_path.parent.mkdir(parents=True, exist_ok=True)

    alembic_ini = PROJECT_ROOT / "backend" / "alembic.ini"
    try:
        result = subprocess.run(
            ["alembic", "-c", str(alembic_ini), "upgrade", "head"],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
            )
    except OSError as e:
        logger.error("Could not run alembic", error=str(e))
        sys.exit(1)

    if result.returncode != 0:
        logger.error("Database migration failed", stderr=result.stderr)
        sys.exit(1)
    logger.info("Database created and migrated")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    logger.info(
        "Starting CalcBZ",
        version=settings.VERSION,
        database=settings.DATABASE_URL.split("///")[-1],
        test_mode=is_test_mode(),
        )
    ensure_database_exists()

    yield

    logger.info("Shutting down CalcBZ")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Loan, mortgage, tax, interest and investment calculators",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    lifespan=lifespan,
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    )

app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    """Basic API information."""
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": f"{settings.API_V1_PREFIX}/docs",
        "default_currency": settings.DEFAULT_CURRENCY,
        }


if __name__ == "__main__":
    # python -m backend.app.main [--test]
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.TEST_PORT if is_test_mode() else settings.PORT)
