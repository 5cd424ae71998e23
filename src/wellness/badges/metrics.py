"""Registry of per-metric strategies over the activity stores."""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable

import structlog

from wellness.activities.store import ActivityStores
from wellness.badges.streak import compute_streak_days

logger = structlog.get_logger(__name__)


class MetricType(str, enum.Enum):
    """Closed set of metrics a badge threshold can be measured against."""

    TOTAL_MEDITATION_SESSIONS = "TOTAL_MEDITATION_SESSIONS"
    MEDITATION_STREAK_DAYS = "MEDITATION_STREAK_DAYS"
    TOTAL_EXERCISE_SESSIONS = "TOTAL_EXERCISE_SESSIONS"
    TOTAL_SLEEP_NIGHTS = "TOTAL_SLEEP_NIGHTS"
    TOTAL_SESSIONS_ANY = "TOTAL_SESSIONS_ANY"


MetricStrategy = Callable[[ActivityStores, int], Awaitable[int]]

METRIC_REGISTRY: dict[str, MetricStrategy] = {}


def register_metric(
    metric: MetricType | str,
    registry: dict[str, MetricStrategy] | None = None,
) -> Callable[[MetricStrategy], MetricStrategy]:
    """Decorator: register a strategy computing ``metric`` for a user."""
    target = METRIC_REGISTRY if registry is None else registry
    key = metric.value if isinstance(metric, MetricType) else metric

    def decorator(fn: MetricStrategy) -> MetricStrategy:
        target[key] = fn
        return fn

    return decorator


@register_metric(MetricType.TOTAL_MEDITATION_SESSIONS)
async def _total_meditation_sessions(stores: ActivityStores, user_id: int) -> int:
    return await stores.meditation.count_by_user(user_id)


@register_metric(MetricType.TOTAL_EXERCISE_SESSIONS)
async def _total_exercise_sessions(stores: ActivityStores, user_id: int) -> int:
    return await stores.exercise.count_by_user(user_id)


@register_metric(MetricType.TOTAL_SLEEP_NIGHTS)
async def _total_sleep_nights(stores: ActivityStores, user_id: int) -> int:
    return await stores.sleep.count_by_user(user_id)


@register_metric(MetricType.TOTAL_SESSIONS_ANY)
async def _total_sessions_any(stores: ActivityStores, user_id: int) -> int:
    # One AsyncSession runs one statement at a time, so these are awaited in turn.
    meditation = await stores.meditation.count_by_user(user_id)
    exercise = await stores.exercise.count_by_user(user_id)
    sleep = await stores.sleep.count_by_user(user_id)
    return meditation + exercise + sleep


@register_metric(MetricType.MEDITATION_STREAK_DAYS)
async def _meditation_streak_days(stores: ActivityStores, user_id: int) -> int:
    timestamps = await stores.meditation.list_timestamps_by_user(user_id)
    return compute_streak_days(timestamps)


class MetricResolver:
    """Computes the current value of a metric for a user."""

    def __init__(
        self,
        stores: ActivityStores,
        registry: dict[str, MetricStrategy] | None = None,
    ) -> None:
        self.stores = stores
        self.registry = dict(METRIC_REGISTRY if registry is None else registry)

    async def resolve(self, user_id: int, metric: MetricType | str) -> int:
        """Return the metric value (>= 0). Unknown metrics resolve to 0."""
        key = metric.value if isinstance(metric, MetricType) else metric
        strategy = self.registry.get(key)
        if strategy is None:
            logger.debug("unknown_badge_metric", metric=key, user_id=user_id)
            return 0
        return max(0, await strategy(self.stores, user_id))
