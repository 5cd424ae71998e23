"""User-badge store — the only writer of user_badges rows."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from wellness.database import dialect_insert
from wellness.db.models import UserBadge


class BadgeAlreadyEarned(Exception):
    """The (user_id, badge_id) row already exists; another call awarded it first."""

    def __init__(self, user_id: int, badge_id: int) -> None:
        super().__init__(f"user {user_id} already holds badge {badge_id}")
        self.user_id = user_id
        self.badge_id = badge_id


class UserBadgeStore:
    """Reads and creates UserBadge rows for one session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_earned_badge_ids(self, user_id: int) -> set[int]:
        """Ids of every badge the user already holds."""
        result = await self.db.execute(
            select(UserBadge.badge_id).where(UserBadge.user_id == user_id)
        )
        return set(result.scalars().all())

    async def create_if_absent(self, user_id: int, badge_id: int, metric_value: int) -> UserBadge:
        """Insert the user's badge row unless it already exists.

        The uniqueness check happens inside the INSERT
        (ON CONFLICT (user_id, badge_id) DO NOTHING), so two concurrent callers
        can never both succeed. The loser gets BadgeAlreadyEarned; any other
        database error propagates as raised by the driver.
        """
        stmt = dialect_insert(self.db, UserBadge).values(
            user_id=user_id,
            badge_id=badge_id,
            earned_at=datetime.now(timezone.utc),
            metric_value_at_earn=metric_value,
        )
        stmt = stmt.on_conflict_do_nothing(index_elements=["user_id", "badge_id"])
        result = await self.db.scalars(stmt.returning(UserBadge))
        user_badge = result.one_or_none()
        if user_badge is None:
            raise BadgeAlreadyEarned(user_id, badge_id)
        return user_badge

    async def list_by_user(
        self,
        user_id: int,
        *,
        with_badge: bool = True,
        limit: int | None = None,
    ) -> list[UserBadge]:
        """User's badges, most recently earned first."""
        query = (
            select(UserBadge)
            .where(UserBadge.user_id == user_id)
            .order_by(UserBadge.earned_at.desc(), UserBadge.id.desc())
        )
        if with_badge:
            query = query.options(joinedload(UserBadge.badge))
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())
