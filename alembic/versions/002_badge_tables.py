"""Badge tables: badge_definitions and user_badges.

The UNIQUE(user_id, badge_id) constraint is what makes concurrent badge
evaluation safe; the award path relies on ON CONFLICT against it.

Revision ID: 002_badge_tables
Revises: 001_baseline
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "002_badge_tables"
down_revision: str | None = "001_baseline"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Badge Definitions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS badge_definitions (
            id SERIAL PRIMARY KEY,
            slug VARCHAR(64) UNIQUE NOT NULL,
            title_key VARCHAR(128) NOT NULL,
            description_key VARCHAR(128),
            icon_key VARCHAR(128),
            metric VARCHAR(64) NOT NULL,
            threshold INTEGER NOT NULL CHECK (threshold >= 0),
            highlight_duration_hours INTEGER,
            sort_order INTEGER NOT NULL DEFAULT 0,
            is_active BOOLEAN NOT NULL DEFAULT true,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_badge_defs_active_order
        ON badge_definitions(is_active, sort_order)
    """)

    # --- User Badges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_badges (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            badge_id INTEGER NOT NULL REFERENCES badge_definitions(id),
            earned_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            metric_value_at_earn INTEGER NOT NULL,
            CONSTRAINT user_badges_user_id_badge_id_key UNIQUE (user_id, badge_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_badges_user_earned
        ON user_badges(user_id, earned_at DESC)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS user_badges")
    op.execute("DROP TABLE IF EXISTS badge_definitions")
