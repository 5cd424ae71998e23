"""Shared test fixtures."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timezone
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

os.environ.setdefault("WELL_LOG_FORMAT", "console")
os.environ.setdefault("WELL_SEED_BADGES_ON_STARTUP", "false")
os.environ.setdefault("WELL_JWT_SECRET", "test-secret-for-the-suite-only-0123456789abcdef")

from wellness.database import close_db, get_engine, get_session_factory, init_db  # noqa: E402
from wellness.db.base import Base  # noqa: E402
from wellness.db.models import BadgeDefinition, User  # noqa: E402

BadgeFactory = Callable[..., Awaitable[BadgeDefinition]]


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncGenerator[None, None]:
    """Fresh on-disk SQLite database with the full schema."""
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'wellness.db'}")
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for setup and assertions."""
    async with get_session_factory()() as session:
        yield session


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    """A committed test user."""
    u = User(email="mindful@example.com", display_name="Mindful", created_at=datetime.now(timezone.utc))
    db_session.add(u)
    await db_session.commit()
    return u


@pytest_asyncio.fixture
async def make_badge(db_session: AsyncSession) -> BadgeFactory:
    """Factory inserting a committed badge definition."""
    counter = 0

    async def _make(
        metric: str = "TOTAL_MEDITATION_SESSIONS",
        threshold: int = 1,
        *,
        slug: str | None = None,
        highlight_duration_hours: int | None = 24,
        sort_order: int | None = None,
        is_active: bool = True,
    ) -> BadgeDefinition:
        nonlocal counter
        counter += 1
        badge = BadgeDefinition(
            slug=slug or f"badge-{counter}",
            title_key=f"badges.b{counter}.title",
            description_key=f"badges.b{counter}.description",
            icon_key=f"badge-{counter}.png",
            metric=metric,
            threshold=threshold,
            highlight_duration_hours=highlight_duration_hours,
            sort_order=counter if sort_order is None else sort_order,
            is_active=is_active,
            created_at=datetime.now(timezone.utc),
        )
        db_session.add(badge)
        await db_session.commit()
        return badge

    return _make


@pytest_asyncio.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app, sharing the test database."""
    from wellness.main import create_app

    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, user: User) -> AsyncClient:
    """Client carrying a bearer token for the test user."""
    from wellness.auth.jwt import create_access_token

    client.headers["Authorization"] = f"Bearer {create_access_token(user.id)}"
    return client
