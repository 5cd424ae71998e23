"""Request/response models for activity session endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wellness.badges.schemas import NewBadgeResponse


class _SessionCreate(BaseModel):
    started_at: datetime | None = None
    ended_at: datetime | None = None

    @model_validator(mode="after")
    def _check_order(self) -> _SessionCreate:
        if self.started_at and self.ended_at and self.ended_at < self.started_at:
            msg = "ended_at must not be before started_at"
            raise ValueError(msg)
        return self


class MeditationSessionCreate(_SessionCreate):
    duration_seconds: int | None = Field(None, ge=0)


class ExerciseSessionCreate(_SessionCreate):
    duration_seconds: int | None = Field(None, ge=0)


class SleepSessionCreate(_SessionCreate):
    quality: int | None = Field(None, ge=1, le=5)


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    started_at: datetime | None = None
    ended_at: datetime | None = None
    created_at: datetime
    duration_seconds: int | None = None
    quality: int | None = None


class SessionCreatedResponse(BaseModel):
    session: SessionResponse
    new_badges: list[NewBadgeResponse]
