"""Consecutive-day streaks from activity timestamps.

Day boundaries are UTC everywhere: the set of active days and the walk
back from "today" use the same rule, so a record counts for the UTC date
it falls on regardless of the user's locale.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone


def activity_anchor(
    started_at: datetime | None,
    ended_at: datetime | None,
    created_at: datetime,
) -> datetime:
    """Instant a record counts for: started_at, else ended_at, else created_at."""
    if started_at is not None:
        return started_at
    if ended_at is not None:
        return ended_at
    return created_at


def utc_day(dt: datetime) -> date:
    """UTC calendar day of an instant. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.date()
    return dt.astimezone(timezone.utc).date()


def compute_streak_days(timestamps: Iterable[datetime], today: date | None = None) -> int:
    """Count consecutive days with activity, walking back from today.

    Returns 0 when there is no activity today, even if yesterday had some.
    """
    days = {utc_day(ts) for ts in timestamps}
    if not days:
        return 0

    if today is None:
        today = datetime.now(timezone.utc).date()

    streak = 0
    while today - timedelta(days=streak) in days:
        streak += 1
    return streak
