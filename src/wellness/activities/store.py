"""Activity stores: read-side aggregates consumed by badge metrics, plus record creation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.badges.streak import activity_anchor
from wellness.db.models import ExerciseSession, MeditationSession, SleepSession

SessionModel = TypeVar("SessionModel", MeditationSession, SleepSession, ExerciseSession)


class ActivityStore(Generic[SessionModel]):
    """Queries one activity table scoped to a user."""

    def __init__(self, db: AsyncSession, model: type[SessionModel]) -> None:
        self.db = db
        self.model = model

    async def count_by_user(self, user_id: int) -> int:
        """Count all of the user's records, no time bound."""
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(self.model.user_id == user_id)
        )
        return result.scalar_one()

    async def list_timestamps_by_user(self, user_id: int) -> list[datetime]:
        """Anchor instant of every record (see activity_anchor), newest first."""
        result = await self.db.execute(
            select(self.model.started_at, self.model.ended_at, self.model.created_at)
            .where(self.model.user_id == user_id)
            .order_by(self.model.created_at.desc())
        )
        return [activity_anchor(row.started_at, row.ended_at, row.created_at) for row in result]

    async def create(self, user_id: int, **fields: Any) -> SessionModel:  # noqa: ANN401
        """Insert a record and flush it; the caller owns the commit."""
        record = self.model(user_id=user_id, created_at=datetime.now(timezone.utc), **fields)
        self.db.add(record)
        await self.db.flush()
        return record


@dataclass(frozen=True)
class ActivityStores:
    """The three activity collaborators, bound to one session."""

    meditation: ActivityStore[MeditationSession]
    sleep: ActivityStore[SleepSession]
    exercise: ActivityStore[ExerciseSession]

    @classmethod
    def for_session(cls, db: AsyncSession) -> ActivityStores:
        return cls(
            meditation=ActivityStore(db, MeditationSession),
            sleep=ActivityStore(db, SleepSession),
            exercise=ActivityStore(db, ExerciseSession),
        )
