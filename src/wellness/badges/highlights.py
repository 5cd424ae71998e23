"""Highlighted (recently earned) badges and the full earned-badge list."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from wellness.badges.limits import clamp_limit
from wellness.badges.store import UserBadgeStore
from wellness.db.models import UserBadge

HIGHLIGHT_DEFAULT_LIMIT = 3
HIGHLIGHT_MAX_LIMIT = 20
LIST_MAX_LIMIT = 50


@dataclass(frozen=True)
class HighlightedBadgeView:
    """Flattened user badge + badge metadata, as shown in banners."""

    id: int
    badge_id: int
    earned_at: datetime
    slug: str
    title_key: str
    description_key: str | None
    icon_key: str | None

    @classmethod
    def from_user_badge(cls, user_badge: UserBadge) -> HighlightedBadgeView:
        badge = user_badge.badge
        return cls(
            id=user_badge.id,
            badge_id=user_badge.badge_id,
            earned_at=user_badge.earned_at,
            slug=badge.slug,
            title_key=badge.title_key,
            description_key=badge.description_key,
            icon_key=badge.icon_key,
        )


def is_highlighted(user_badge: UserBadge, now: datetime) -> bool:
    """True while now is strictly before earned_at + highlight_duration_hours."""
    hours = user_badge.badge.highlight_duration_hours
    if not hours or hours <= 0:
        return False
    return user_badge.earned_at + timedelta(hours=hours) > now


class HighlightSelector:
    """Read paths over a user's earned badges."""

    def __init__(self, db: AsyncSession, store: UserBadgeStore | None = None) -> None:
        self.store = store or UserBadgeStore(db)

    async def select(
        self,
        user_id: int,
        limit: float | None = None,
        now: datetime | None = None,
    ) -> list[HighlightedBadgeView]:
        """Badges still inside their highlight window, most recent first.

        ``limit`` defaults to 3 when omitted and is clamped to [1, 20].
        """
        safe_limit = clamp_limit(limit, HIGHLIGHT_DEFAULT_LIMIT, 1, HIGHLIGHT_MAX_LIMIT)
        if now is None:
            now = datetime.now(timezone.utc)

        user_badges = await self.store.list_by_user(user_id, with_badge=True)
        visible = [ub for ub in user_badges if is_highlighted(ub, now)]
        return [HighlightedBadgeView.from_user_badge(ub) for ub in visible[:safe_limit]]

    async def list_all(self, user_id: int, limit: float | None = None) -> list[UserBadge]:
        """Every earned badge, most recent first; unbounded unless a limit is given (clamped to [1, 50])."""
        safe_limit = clamp_limit(limit, None, 1, LIST_MAX_LIMIT)
        return await self.store.list_by_user(user_id, with_badge=True, limit=safe_limit)
