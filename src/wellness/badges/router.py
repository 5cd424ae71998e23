"""Badge API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.auth.dependencies import get_current_user_id
from wellness.badges import service
from wellness.badges.catalog import BadgeCatalog
from wellness.badges.schemas import (
    AllBadgesResponse,
    CatalogBadgeResponse,
    HighlightedBadgeResponse,
    UserBadgeResponse,
)
from wellness.database import get_session

router = APIRouter(prefix="/api/v1", tags=["Badges"])


@router.get("/badges", response_model=AllBadgesResponse)
async def list_badges(db: AsyncSession = Depends(get_session)):
    """Active badge catalog in display order."""
    badges = await BadgeCatalog(db).list_active()
    return AllBadgesResponse(badges=[CatalogBadgeResponse.model_validate(b) for b in badges])


@router.get("/users/me/badges", response_model=list[UserBadgeResponse])
async def get_my_badges(
    limit: int | None = Query(None, ge=1),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
):
    """Every badge the current user has earned, most recent first."""
    user_badges = await service.get_user_badges(db, user_id, limit)
    return [UserBadgeResponse.model_validate(ub) for ub in user_badges]


@router.get("/users/me/badges/highlighted", response_model=list[HighlightedBadgeResponse])
async def get_my_highlighted_badges(
    limit: int | None = Query(None, ge=1),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
):
    """Recently earned badges still inside their highlight window (banner, toasts)."""
    views = await service.get_highlighted_badges(db, user_id, limit)
    return [HighlightedBadgeResponse.model_validate(v) for v in views]
