"""Badge service: the entry points request handlers call."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from wellness.badges.award_engine import AwardEngine, NewlyEarnedBadge
from wellness.badges.highlights import HighlightedBadgeView, HighlightSelector
from wellness.db.models import UserBadge


async def evaluate(db: AsyncSession, user_id: int) -> list[NewlyEarnedBadge]:
    """Award any badges the user has newly reached. Returns only this call's awards."""
    return await AwardEngine(db).evaluate(user_id)


async def get_user_badges(db: AsyncSession, user_id: int, limit: int | None = None) -> list[UserBadge]:
    """All earned badges with their definitions, most recent first."""
    return await HighlightSelector(db).list_all(user_id, limit)


async def get_highlighted_badges(
    db: AsyncSession,
    user_id: int,
    limit: int | None = None,
    now: datetime | None = None,
) -> list[HighlightedBadgeView]:
    """Recently earned badges still inside their highlight window."""
    return await HighlightSelector(db).select(user_id, limit, now=now)
