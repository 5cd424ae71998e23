"""Award engine unit tests, with fake collaborators."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from wellness.badges.award_engine import AwardEngine
from wellness.badges.store import BadgeAlreadyEarned
from wellness.db.models import BadgeDefinition, UserBadge

USER_ID = 7


def _badge(badge_id: int, metric: str, threshold: int) -> BadgeDefinition:
    return BadgeDefinition(
        id=badge_id,
        slug=f"badge-{badge_id}",
        title_key=f"badges.b{badge_id}.title",
        metric=metric,
        threshold=threshold,
        sort_order=badge_id,
        is_active=True,
    )


class FakeUserBadgeStore:
    """In-memory user-badge store; ``conflicts`` badges behave as if a concurrent call won."""

    def __init__(self, earned: set[int] | None = None, conflicts: set[int] | None = None) -> None:
        self.earned = set(earned or ())
        self.conflicts = set(conflicts or ())
        self.created: list[UserBadge] = []
        self.find_earned_badge_ids = AsyncMock(side_effect=lambda user_id: set(self.earned))

    async def create_if_absent(self, user_id: int, badge_id: int, metric_value: int) -> UserBadge:
        if badge_id in self.earned or badge_id in self.conflicts:
            raise BadgeAlreadyEarned(user_id, badge_id)
        self.earned.add(badge_id)
        row = UserBadge(
            id=len(self.created) + 1,
            user_id=user_id,
            badge_id=badge_id,
            earned_at=datetime.now(timezone.utc),
            metric_value_at_earn=metric_value,
        )
        self.created.append(row)
        return row


def _engine(
    badges: list[BadgeDefinition],
    values: dict[str, int],
    store: FakeUserBadgeStore | None = None,
) -> tuple[AwardEngine, MagicMock, FakeUserBadgeStore, MagicMock]:
    db = MagicMock()
    db.commit = AsyncMock()
    catalog = MagicMock()
    catalog.list_active = AsyncMock(return_value=badges)
    resolver = MagicMock()
    resolver.resolve = AsyncMock(side_effect=lambda user_id, metric: values.get(metric, 0))
    store = store or FakeUserBadgeStore()
    engine = AwardEngine(db, catalog=catalog, user_badges=store, resolver=resolver)  # type: ignore[arg-type]
    return engine, db, store, resolver


class TestShortCircuits:
    """Test early returns."""

    @pytest.mark.asyncio
    async def test_empty_catalog_returns_empty_without_queries(self):
        engine, db, store, resolver = _engine([], {})

        assert await engine.evaluate(USER_ID) == []
        store.find_earned_badge_ids.assert_not_awaited()
        resolver.resolve.assert_not_awaited()
        db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_earned_returns_empty_without_metrics(self):
        badges = [_badge(1, "TOTAL_MEDITATION_SESSIONS", 1), _badge(2, "TOTAL_SLEEP_NIGHTS", 1)]
        engine, _db, _store, resolver = _engine(badges, {}, FakeUserBadgeStore(earned={1, 2}))

        assert await engine.evaluate(USER_ID) == []
        resolver.resolve.assert_not_awaited()


class TestAwarding:
    """Test badge awarding."""

    @pytest.mark.asyncio
    async def test_awards_when_threshold_met(self):
        badge = _badge(1, "TOTAL_MEDITATION_SESSIONS", 2)
        engine, db, store, _ = _engine([badge], {"TOTAL_MEDITATION_SESSIONS": 3})

        result = await engine.evaluate(USER_ID)

        assert len(result) == 1
        assert result[0].badge is badge
        assert result[0].user_badge.metric_value_at_earn == 3
        assert result[0].user_badge.user_id == USER_ID
        db.commit.assert_awaited()

    @pytest.mark.asyncio
    async def test_threshold_boundary(self):
        at = _badge(1, "TOTAL_SLEEP_NIGHTS", 5)
        above = _badge(2, "TOTAL_EXERCISE_SESSIONS", 5)
        engine, _db, _store, _ = _engine(
            [at, above],
            {"TOTAL_SLEEP_NIGHTS": 5, "TOTAL_EXERCISE_SESSIONS": 4},
        )

        result = await engine.evaluate(USER_ID)

        assert [r.badge.id for r in result] == [1]

    @pytest.mark.asyncio
    async def test_zero_threshold_awarded_with_no_activity(self):
        engine, _db, _store, _ = _engine([_badge(1, "TOTAL_SLEEP_NIGHTS", 0)], {})
        result = await engine.evaluate(USER_ID)
        assert [r.user_badge.metric_value_at_earn for r in result] == [0]

    @pytest.mark.asyncio
    async def test_skips_already_earned(self):
        badges = [_badge(1, "TOTAL_MEDITATION_SESSIONS", 1), _badge(2, "TOTAL_MEDITATION_SESSIONS", 2)]
        engine, _db, store, _ = _engine(
            badges, {"TOTAL_MEDITATION_SESSIONS": 5}, FakeUserBadgeStore(earned={1})
        )

        result = await engine.evaluate(USER_ID)

        assert [r.badge.id for r in result] == [2]
        assert [row.badge_id for row in store.created] == [2]

    @pytest.mark.asyncio
    async def test_result_follows_catalog_order(self):
        badges = [
            _badge(3, "TOTAL_SLEEP_NIGHTS", 1),
            _badge(1, "TOTAL_MEDITATION_SESSIONS", 1),
            _badge(2, "TOTAL_EXERCISE_SESSIONS", 1),
        ]
        engine, _db, _store, _ = _engine(
            badges,
            {"TOTAL_SLEEP_NIGHTS": 1, "TOTAL_MEDITATION_SESSIONS": 1, "TOTAL_EXERCISE_SESSIONS": 1},
        )

        result = await engine.evaluate(USER_ID)

        assert [r.badge.id for r in result] == [3, 1, 2]

    @pytest.mark.asyncio
    async def test_second_evaluation_is_idempotent(self):
        engine, _db, _store, _ = _engine(
            [_badge(1, "TOTAL_MEDITATION_SESSIONS", 1)], {"TOTAL_MEDITATION_SESSIONS": 1}
        )

        assert len(await engine.evaluate(USER_ID)) == 1
        assert await engine.evaluate(USER_ID) == []


class TestMetricDeduplication:
    """Test metric resolution counts."""

    @pytest.mark.asyncio
    async def test_shared_metric_computed_once(self):
        badges = [
            _badge(1, "TOTAL_MEDITATION_SESSIONS", 1),
            _badge(2, "TOTAL_MEDITATION_SESSIONS", 10),
            _badge(3, "TOTAL_MEDITATION_SESSIONS", 100),
            _badge(4, "TOTAL_SLEEP_NIGHTS", 1),
        ]
        engine, _db, _store, resolver = _engine(
            badges, {"TOTAL_MEDITATION_SESSIONS": 12, "TOTAL_SLEEP_NIGHTS": 0}
        )

        result = await engine.evaluate(USER_ID)

        assert [r.badge.id for r in result] == [1, 2]
        resolved = [call.args[1] for call in resolver.resolve.await_args_list]
        assert sorted(resolved) == ["TOTAL_MEDITATION_SESSIONS", "TOTAL_SLEEP_NIGHTS"]

    @pytest.mark.asyncio
    async def test_metrics_of_earned_badges_not_computed(self):
        badges = [_badge(1, "TOTAL_SLEEP_NIGHTS", 1), _badge(2, "TOTAL_MEDITATION_SESSIONS", 1)]
        engine, _db, _store, resolver = _engine(
            badges, {"TOTAL_MEDITATION_SESSIONS": 1}, FakeUserBadgeStore(earned={1})
        )

        await engine.evaluate(USER_ID)

        resolver.resolve.assert_awaited_once_with(USER_ID, "TOTAL_MEDITATION_SESSIONS")

    @pytest.mark.asyncio
    async def test_unknown_metric_never_awards(self):
        engine, _db, store, _ = _engine([_badge(1, "TOTAL_YOGA_SESSIONS", 1)], {})
        assert await engine.evaluate(USER_ID) == []
        assert store.created == []


class TestConflicts:
    """Test conflict and error handling."""

    @pytest.mark.asyncio
    async def test_conflict_is_swallowed_and_omitted(self):
        badges = [_badge(1, "TOTAL_MEDITATION_SESSIONS", 1), _badge(2, "TOTAL_MEDITATION_SESSIONS", 1)]
        engine, _db, _store, _ = _engine(
            badges, {"TOTAL_MEDITATION_SESSIONS": 1}, FakeUserBadgeStore(conflicts={1})
        )

        result = await engine.evaluate(USER_ID)

        assert [r.badge.id for r in result] == [2]

    @pytest.mark.asyncio
    async def test_other_store_errors_propagate(self):
        badge = _badge(1, "TOTAL_MEDITATION_SESSIONS", 1)
        store = FakeUserBadgeStore()
        store.create_if_absent = AsyncMock(  # type: ignore[method-assign]
            side_effect=OperationalError("INSERT", {}, Exception("connection lost"))
        )
        engine, _db, _store, _ = _engine([badge], {"TOTAL_MEDITATION_SESSIONS": 1}, store)

        with pytest.raises(OperationalError):
            await engine.evaluate(USER_ID)

    @pytest.mark.asyncio
    async def test_catalog_errors_propagate(self):
        engine, _db, _store, _ = _engine([], {})
        engine.catalog.list_active = AsyncMock(side_effect=RuntimeError("catalog down"))  # type: ignore[method-assign]

        with pytest.raises(RuntimeError, match="catalog down"):
            await engine.evaluate(USER_ID)

    @pytest.mark.asyncio
    async def test_earlier_awards_are_committed_before_a_failure(self):
        badges = [_badge(1, "TOTAL_MEDITATION_SESSIONS", 1), _badge(2, "TOTAL_MEDITATION_SESSIONS", 1)]
        store = FakeUserBadgeStore()
        original = store.create_if_absent

        async def _fail_second(user_id: int, badge_id: int, metric_value: int) -> UserBadge:
            if badge_id == 2:
                raise OperationalError("INSERT", {}, Exception("disk full"))
            return await original(user_id, badge_id, metric_value)

        store.create_if_absent = _fail_second  # type: ignore[method-assign]
        engine, db, _store, _ = _engine(badges, {"TOTAL_MEDITATION_SESSIONS": 1}, store)

        with pytest.raises(OperationalError):
            await engine.evaluate(USER_ID)

        assert [row.badge_id for row in store.created] == [1]
        db.commit.assert_awaited_once()
