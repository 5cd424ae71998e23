"""Activity session creation — each write is followed by a badge evaluation."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.activities.schemas import (
    ExerciseSessionCreate,
    MeditationSessionCreate,
    SessionCreatedResponse,
    SessionResponse,
    SleepSessionCreate,
)
from wellness.activities.store import ActivityStore, ActivityStores
from wellness.auth.dependencies import get_current_user_id
from wellness.badges import service as badge_service
from wellness.badges.schemas import NewBadgeResponse
from wellness.database import get_session

router = APIRouter(prefix="/api/v1/users/me", tags=["Activities"])


async def _create_and_evaluate(
    db: AsyncSession,
    store: ActivityStore[Any],
    user_id: int,
    body: BaseModel,
) -> SessionCreatedResponse:
    record = await store.create(user_id, **body.model_dump())
    await db.commit()

    newly_earned = await badge_service.evaluate(db, user_id)
    return SessionCreatedResponse(
        session=SessionResponse.model_validate(record),
        new_badges=[NewBadgeResponse.from_newly_earned(item) for item in newly_earned],
    )


@router.post("/meditation-sessions", response_model=SessionCreatedResponse, status_code=201)
async def create_meditation_session(
    body: MeditationSessionCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
):
    """Record a meditation session for the current user."""
    return await _create_and_evaluate(db, ActivityStores.for_session(db).meditation, user_id, body)


@router.post("/sleep-sessions", response_model=SessionCreatedResponse, status_code=201)
async def create_sleep_session(
    body: SleepSessionCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
):
    """Record a night of sleep for the current user."""
    return await _create_and_evaluate(db, ActivityStores.for_session(db).sleep, user_id, body)


@router.post("/exercise-sessions", response_model=SessionCreatedResponse, status_code=201)
async def create_exercise_session(
    body: ExerciseSessionCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
):
    """Record a workout for the current user."""
    return await _create_and_evaluate(db, ActivityStores.for_session(db).exercise, user_id, body)
