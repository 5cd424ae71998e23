"""Pydantic response models for badge endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from wellness.badges.award_engine import NewlyEarnedBadge


class BadgeDefinitionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    title_key: str
    description_key: str | None = None
    icon_key: str | None = None


class CatalogBadgeResponse(BadgeDefinitionResponse):
    metric: str
    threshold: int
    sort_order: int


class AllBadgesResponse(BaseModel):
    badges: list[CatalogBadgeResponse]


class UserBadgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    badge_id: int
    earned_at: datetime
    metric_value_at_earn: int
    badge: BadgeDefinitionResponse


class HighlightedBadgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    badge_id: int
    earned_at: datetime
    slug: str
    title_key: str
    description_key: str | None = None
    icon_key: str | None = None


class NewBadgeResponse(BaseModel):
    """A badge awarded by the request that returned it."""

    slug: str
    title_key: str
    description_key: str | None = None
    icon_key: str | None = None
    user_badge_id: int
    earned_at: datetime
    metric_value_at_earn: int

    @classmethod
    def from_newly_earned(cls, item: NewlyEarnedBadge) -> NewBadgeResponse:
        return cls(
            slug=item.badge.slug,
            title_key=item.badge.title_key,
            description_key=item.badge.description_key,
            icon_key=item.badge.icon_key,
            user_badge_id=item.user_badge.id,
            earned_at=item.user_badge.earned_at,
            metric_value_at_earn=item.user_badge.metric_value_at_earn,
        )
