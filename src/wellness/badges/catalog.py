"""Read-only access to the active badge catalog."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.db.models import BadgeDefinition


class BadgeCatalog:
    """Active badge definitions in evaluation and display order."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_active(self) -> list[BadgeDefinition]:
        """Active definitions, sort_order ascending (id breaks ties)."""
        result = await self.db.execute(
            select(BadgeDefinition)
            .where(BadgeDefinition.is_active.is_(True))
            .order_by(BadgeDefinition.sort_order, BadgeDefinition.id)
        )
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str) -> BadgeDefinition | None:
        """Fetch a badge definition by slug, active or not."""
        result = await self.db.execute(
            select(BadgeDefinition).where(BadgeDefinition.slug == slug)
        )
        return result.scalar_one_or_none()
