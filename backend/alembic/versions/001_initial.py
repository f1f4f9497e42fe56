"""initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

Tables for persisted user inputs: calculator sessions, preferences and
saved loan scenarios.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = '001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""
    conn = op.get_bind()

    print("🔧 Starting migration 001_initial...")

    print("📦 Creating table: calculator_sessions...")
    conn.execute(sa.text("""CREATE TABLE calculator_sessions
                            (
                                id              INTEGER PRIMARY KEY,
                                client_id       VARCHAR  NOT NULL,
                                calculator_type VARCHAR  NOT NULL,
                                data            TEXT     NOT NULL,
                                created_at      DATETIME NOT NULL,
                                updated_at      DATETIME NOT NULL,
                                CONSTRAINT uq_calculator_sessions_client_type UNIQUE (client_id, calculator_type)
                            )"""))
    conn.execute(sa.text("CREATE INDEX ix_calculator_sessions_client_id ON calculator_sessions (client_id)"))
    print("  ✓ Table and index created")

    print("📦 Creating table: user_preferences...")
    conn.execute(sa.text("""CREATE TABLE user_preferences
                            (
                                id         INTEGER PRIMARY KEY,
                                client_id  VARCHAR  NOT NULL,
                                "key"      VARCHAR  NOT NULL,
                                value      TEXT     NOT NULL,
                                updated_at DATETIME NOT NULL,
                                CONSTRAINT uq_user_preferences_client_key UNIQUE (client_id, "key")
                            )"""))
    conn.execute(sa.text("CREATE INDEX ix_user_preferences_client_id ON user_preferences (client_id)"))
    print("  ✓ Table and index created")

    print("📦 Creating table: saved_scenarios...")
    conn.execute(sa.text("""CREATE TABLE saved_scenarios
                            (
                                id            INTEGER PRIMARY KEY,
                                client_id     VARCHAR        NOT NULL,
                                title         VARCHAR        NOT NULL,
                                loan_type     VARCHAR,
                                principal     NUMERIC(18, 6) NOT NULL,
                                annual_rate   NUMERIC(18, 6) NOT NULL,
                                tenure_months INTEGER        NOT NULL,
                                result        TEXT           NOT NULL,
                                created_at    DATETIME       NOT NULL
                            )"""))
    conn.execute(sa.text("CREATE INDEX idx_saved_scenarios_client_created ON saved_scenarios (client_id, created_at)"))
    print("  ✓ Table and index created")

    print("✅ Migration 001_initial completed successfully!")


def downgrade() -> None:
    """Drop all tables."""
    conn = op.get_bind()
    for table in ['saved_scenarios', 'user_preferences', 'calculator_sessions']:
        conn.execute(sa.text(f"DROP TABLE IF EXISTS {table}"))
