"""
Test Database Configuration

Manages test database setup and teardown.
Tests use a separate database so saved sessions of a development server are never touched.

The test database URL is configured in config.py (TEST_DATABASE_URL).
Can be customized via environment variable.
"""
import os
from pathlib import Path

from backend.app.config import get_settings

# Default test database URL (relative to project root)
DEFAULT_TEST_DATABASE_URL = "sqlite:///./backend/data/sqlite/test_app.db"

# Environment override (CI or local runs may move the file)
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", DEFAULT_TEST_DATABASE_URL)

# sqlite:///./path and sqlite:////absolute/path
if TEST_DATABASE_URL.startswith("sqlite:///"):
    db_path_str = TEST_DATABASE_URL.replace("sqlite:///./", "").replace("sqlite:///", "/")
else:
    db_path_str = TEST_DATABASE_URL

TEST_DB_PATH = Path(db_path_str)
DB_DIR = TEST_DB_PATH.parent


def setup_test_database():
    """
    Configure environment to use test database.
    Must be called BEFORE the first request opens the database engine.

    Returns:
        Path: Path to test database
    """
    DB_DIR.mkdir(parents=True, exist_ok=True)

    # Same effect as the --test flag: get_settings() now returns TEST_DATABASE_URL
    os.environ["CALCBZ_TEST_MODE"] = "1"
    os.environ["TEST_DATABASE_URL"] = TEST_DATABASE_URL

    return TEST_DB_PATH


def create_test_schema():
    """Create any missing table of the test database from the SQLModel metadata."""
    from sqlmodel import SQLModel

    import backend.app.db.models  # noqa: F401 - registers the tables
    from backend.app.db.session import get_sync_engine

    engine = get_sync_engine()
    try:
        SQLModel.metadata.create_all(engine)
    finally:
        engine.dispose()


def cleanup_test_database():
    """Remove test database after tests complete."""
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


def verify_test_database() -> tuple[bool, str]:
    """
    Verify that we're using the test database.

    Returns:
        tuple: (is_test_db, database_url)
    """
    db_url = get_settings().DATABASE_URL
    return "test_app" in db_url, db_url


def initialize_test_database(print_func=None):
    """
    Initialize test database with safety checks.

    Verifies the test database is selected, then migrates it with Alembic
    when missing or empty (same path as server startup).

    Args:
        print_func: Optional print function (e.g., print_info from test_utils)

    Returns:
        bool: True if initialization successful and using test DB, False otherwise
    """
    if print_func is None:
        print_func = print

    is_test, db_url = verify_test_database()
    if not is_test:
        print_func("DANGER: Not using test database!")
        print_func(f"Current DATABASE_URL: {db_url}")
        print_func("Aborting for safety - tests should only modify test database.")
        return False

    print_func(f"Using test database: {db_url}")

    from backend.app.main import ensure_database_exists
    ensure_database_exists()
    return True
