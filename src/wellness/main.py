"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from wellness.activities.router import router as activities_router
from wellness.badges.router import router as badges_router
from wellness.badges.seed import seed_badges
from wellness.config import get_settings
from wellness.database import close_db, get_session_factory, init_db
from wellness.health.router import router as health_router
from wellness.middleware import setup_middleware

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)

    if settings.seed_badges_on_startup:
        try:
            async with get_session_factory()() as db:
                await seed_badges(db)
        except SQLAlchemyError:
            logger.warning("badge_seeding_failed", reason="tables may not exist yet", exc_info=True)

    yield

    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Wellness API",
        description="Backend API for meditation, sleep and exercise tracking with achievement badges",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.include_router(health_router, tags=["Health"])
    app.include_router(badges_router)
    app.include_router(activities_router)
    setup_middleware(app, settings)

    return app


app = create_app()
