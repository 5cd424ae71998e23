"""Baseline: users and activity session tables.

Revision ID: 001_baseline
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id BIGSERIAL PRIMARY KEY,
            email VARCHAR(320) UNIQUE,
            display_name VARCHAR(64),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Meditation ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS meditation_sessions (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            started_at TIMESTAMPTZ,
            ended_at TIMESTAMPTZ,
            duration_seconds INTEGER,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_meditation_sessions_user_id
        ON meditation_sessions(user_id)
    """)

    # --- Sleep ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS sleep_sessions (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            started_at TIMESTAMPTZ,
            ended_at TIMESTAMPTZ,
            quality SMALLINT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_sleep_sessions_user_id
        ON sleep_sessions(user_id)
    """)

    # --- Exercise ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS exercise_sessions (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            started_at TIMESTAMPTZ,
            ended_at TIMESTAMPTZ,
            duration_seconds INTEGER,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_exercise_sessions_user_id
        ON exercise_sessions(user_id)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS exercise_sessions")
    op.execute("DROP TABLE IF EXISTS sleep_sessions")
    op.execute("DROP TABLE IF EXISTS meditation_sessions")
    op.execute("DROP TABLE IF EXISTS users")
