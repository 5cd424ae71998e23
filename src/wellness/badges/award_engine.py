"""Badge award engine — evaluates the active catalog against a user's metrics."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.activities.store import ActivityStores
from wellness.badges.catalog import BadgeCatalog
from wellness.badges.metrics import MetricResolver
from wellness.badges.store import BadgeAlreadyEarned, UserBadgeStore
from wellness.db.models import BadgeDefinition, UserBadge


@dataclass(frozen=True)
class NewlyEarnedBadge:
    """A badge this evaluation awarded, with the row it created."""

    badge: BadgeDefinition
    user_badge: UserBadge


class AwardEngine:
    """Awards every active badge whose threshold the user has reached.

    Safe to call after every activity write, concurrently and without an
    external lock: each badge is created at most once per user by the
    store's uniqueness check, and a call that loses that race simply leaves
    the badge out of its result.
    """

    def __init__(
        self,
        db: AsyncSession,
        *,
        catalog: BadgeCatalog | None = None,
        user_badges: UserBadgeStore | None = None,
        resolver: MetricResolver | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.db = db
        self.catalog = catalog or BadgeCatalog(db)
        self.user_badges = user_badges or UserBadgeStore(db)
        self.resolver = resolver or MetricResolver(ActivityStores.for_session(db))
        self.logger = logger if logger is not None else structlog.get_logger(__name__)

    async def evaluate(self, user_id: int) -> list[NewlyEarnedBadge]:
        """Award newly reached badges and return them in catalog order.

        Each metric needed by a pending badge is computed once, however many
        badges share it. Awards are committed one by one so that badges
        already granted stay granted if a later step fails.
        """
        log = self.logger.bind(user_id=user_id)

        active = await self.catalog.list_active()
        if not active:
            return []

        earned_ids = await self.user_badges.find_earned_badge_ids(user_id)
        pending = [badge for badge in active if badge.id not in earned_ids]
        if not pending:
            return []

        values = await self._resolve_metrics(user_id, pending)

        newly_earned: list[NewlyEarnedBadge] = []
        for badge in pending:
            value = values[badge.metric]
            if value < badge.threshold:
                continue

            user_badge = await self._award(log, user_id, badge, value)
            if user_badge is not None:
                newly_earned.append(NewlyEarnedBadge(badge=badge, user_badge=user_badge))

        return newly_earned

    async def _resolve_metrics(self, user_id: int, pending: list[BadgeDefinition]) -> dict[str, int]:
        """Compute each distinct metric of the pending badges exactly once."""
        values: dict[str, int] = {}
        for badge in pending:
            if badge.metric not in values:
                values[badge.metric] = await self.resolver.resolve(user_id, badge.metric)
        return values

    async def _award(
        self,
        log: structlog.stdlib.BoundLogger,
        user_id: int,
        badge: BadgeDefinition,
        value: int,
    ) -> UserBadge | None:
        """Create the user's badge row; None when a concurrent call got there first."""
        try:
            user_badge = await self.user_badges.create_if_absent(user_id, badge.id, value)
        except BadgeAlreadyEarned:
            # Nothing was written; commit just closes the transaction.
            await self.db.commit()
            log.debug("badge_award_conflict", badge_slug=badge.slug)
            return None

        await self.db.commit()
        log.info("badge_awarded", badge_slug=badge.slug, metric=badge.metric, value=value)
        return user_badge
