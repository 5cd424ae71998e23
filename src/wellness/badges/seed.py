"""Default badge catalog, upserted on startup."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.badges.metrics import MetricType
from wellness.database import dialect_insert
from wellness.db.models import BadgeDefinition

logger = structlog.get_logger(__name__)


def _badge(
    slug: str,
    i18n: str,
    metric: MetricType,
    threshold: int,
    sort_order: int,
    highlight_duration_hours: int | None = 72,
) -> dict:
    return {
        "slug": slug,
        "title_key": f"badges.{i18n}.title",
        "description_key": f"badges.{i18n}.description",
        "icon_key": f"{slug}.png",
        "metric": metric.value,
        "threshold": threshold,
        "sort_order": sort_order,
        "highlight_duration_hours": highlight_duration_hours,
    }


BADGE_SEED_DATA: list[dict] = [
    # Meditation
    _badge("first-meditation", "firstMeditation", MetricType.TOTAL_MEDITATION_SESSIONS, 1, 1, 24),
    _badge("zen-10", "zen10", MetricType.TOTAL_MEDITATION_SESSIONS, 10, 2),
    _badge("zen-50", "zen50", MetricType.TOTAL_MEDITATION_SESSIONS, 50, 3),
    _badge("streak-3", "streak3", MetricType.MEDITATION_STREAK_DAYS, 3, 4, 48),
    _badge("streak-7", "streak7", MetricType.MEDITATION_STREAK_DAYS, 7, 5),
    _badge("streak-30", "streak30", MetricType.MEDITATION_STREAK_DAYS, 30, 6, 168),
    # Sleep
    _badge("first-night", "firstNight", MetricType.TOTAL_SLEEP_NIGHTS, 1, 7, 24),
    _badge("sleep-30", "sleep30", MetricType.TOTAL_SLEEP_NIGHTS, 30, 8),
    # Exercise
    _badge("first-workout", "firstWorkout", MetricType.TOTAL_EXERCISE_SESSIONS, 1, 9, 24),
    _badge("workout-25", "workout25", MetricType.TOTAL_EXERCISE_SESSIONS, 25, 10),
    # All activities
    _badge("sessions-100", "sessions100", MetricType.TOTAL_SESSIONS_ANY, 100, 11, 168),
]


async def seed_badges(db: AsyncSession) -> int:
    """Upsert the default badge definitions. Returns number of badges seeded."""
    now = datetime.now(timezone.utc)
    for badge_data in BADGE_SEED_DATA:
        stmt = dialect_insert(db, BadgeDefinition).values(created_at=now, **badge_data)
        stmt = stmt.on_conflict_do_update(
            index_elements=["slug"],
            set_={
                "title_key": stmt.excluded.title_key,
                "description_key": stmt.excluded.description_key,
                "icon_key": stmt.excluded.icon_key,
                "metric": stmt.excluded.metric,
                "threshold": stmt.excluded.threshold,
                "sort_order": stmt.excluded.sort_order,
                "highlight_duration_hours": stmt.excluded.highlight_duration_hours,
            },
        )
        await db.execute(stmt)

    await db.commit()
    logger.info("badges_seeded", count=len(BADGE_SEED_DATA))
    return len(BADGE_SEED_DATA)
