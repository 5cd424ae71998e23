"""ORM models for users, activity sessions and badges."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    UniqueConstraint,
    func,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wellness.db.base import Base, UTCDateTime

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
_BigIntId = BigInteger().with_variant(Integer, "sqlite")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Maps to the 'users' table."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(_BigIntId, primary_key=True, autoincrement=True)
    email: Mapped[str | None] = mapped_column(String(320), unique=True, nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, server_default=func.now())


# ---------------------------------------------------------------------------
# Activity sessions
# ---------------------------------------------------------------------------


class MeditationSession(Base):
    """One meditation sitting."""

    __tablename__ = "meditation_sessions"

    id: Mapped[int] = mapped_column(_BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _BigIntId, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    started_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, server_default=func.now())


class SleepSession(Base):
    """One night of sleep."""

    __tablename__ = "sleep_sessions"

    id: Mapped[int] = mapped_column(_BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _BigIntId, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    started_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    quality: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, server_default=func.now())


class ExerciseSession(Base):
    """One workout."""

    __tablename__ = "exercise_sessions"

    id: Mapped[int] = mapped_column(_BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _BigIntId, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    started_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, server_default=func.now())


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------


class BadgeDefinition(Base):
    """Badge catalog entry. Reference data, never written by the award engine."""

    __tablename__ = "badge_definitions"
    __table_args__ = (CheckConstraint("threshold >= 0", name="badge_definitions_threshold_check"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    title_key: Mapped[str] = mapped_column(String(128), nullable=False)
    description_key: Mapped[str | None] = mapped_column(String(128), nullable=True)
    icon_key: Mapped[str | None] = mapped_column(String(128), nullable=True)
    # Plain string rather than an enum column: unknown tags must still load.
    metric: Mapped[str] = mapped_column(String(64), nullable=False)
    threshold: Mapped[int] = mapped_column(Integer, nullable=False)
    highlight_duration_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=true())
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, server_default=func.now())


class UserBadge(Base):
    """Badges earned by users — UNIQUE(user_id, badge_id) prevents duplicates."""

    __tablename__ = "user_badges"
    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="user_badges_user_id_badge_id_key"),
    )

    id: Mapped[int] = mapped_column(_BigIntId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        _BigIntId, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    badge_id: Mapped[int] = mapped_column(Integer, ForeignKey("badge_definitions.id"), nullable=False)
    earned_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    metric_value_at_earn: Mapped[int] = mapped_column(Integer, nullable=False)

    badge: Mapped[BadgeDefinition] = relationship("BadgeDefinition")
