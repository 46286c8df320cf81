"""Shared test fixtures.

The suite runs against an in-memory SQLite database (aiosqlite with a
StaticPool so every session shares one connection). Catalogs are seeded
for each test, Redis is absent and email goes to a recording fake.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from typing import Any

os.environ["SFDSA_ADMIN_API_TOKEN"] = "test-admin-token"
os.environ["SFDSA_REDIS_URL"] = ""
os.environ["SFDSA_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SFDSA_LOG_FORMAT"] = "console"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sfdsa.config import get_settings
from sfdsa.database import get_session
from sfdsa.db import models  # noqa: F401
from sfdsa.db.base import Base
from sfdsa.db.models import DailyBriefing, User
from sfdsa.dependencies import get_email_dep
from sfdsa.email.service import BaseEmailProvider, EmailService
from sfdsa.gamification.seed import seed_catalogs
from sfdsa.main import create_app

ADMIN_TOKEN = "test-admin-token"
ADMIN_HEADERS = {"X-Admin-Token": ADMIN_TOKEN}

get_settings.cache_clear()


class RecordingEmailProvider(BaseEmailProvider):
    """Collects outgoing messages instead of delivering them."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self.fail = fail

    async def send(self, to_email, subject, html_body, text_body, reply_to=None):  # noqa: ANN001
        if self.fail:
            return False
        self.sent.append({
            "to": to_email,
            "subject": subject,
            "html": html_body,
            "text": text_body,
            "reply_to": reply_to,
        })
        return True


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory schema with seeded catalogs."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await seed_catalogs(session)

    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service-level tests and assertions."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def email_provider() -> RecordingEmailProvider:
    return RecordingEmailProvider()


@pytest_asyncio.fixture
async def client(session_factory, email_provider) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the session and email overridden."""
    app = create_app()

    async def _session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    email_service = EmailService(provider=email_provider, redis=None)
    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_email_dep] = lambda: email_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def make_user(
    session: AsyncSession,
    name: str | None = "Test Recruit",
    email: str | None = None,
    participation_count: int = 0,
    **kwargs: Any,
) -> User:
    """Insert a user directly and commit."""
    user = User(
        name=name,
        email=email or f"{(name or 'user').lower().replace(' ', '.')}@example.com",
        participation_count=participation_count,
        **kwargs,
    )
    session.add(user)
    await session.commit()
    return user


async def make_briefing(session: AsyncSession, day, title: str = "Stand Tall", theme: str = "duty") -> DailyBriefing:  # noqa: ANN001
    briefing = DailyBriefing(date=day, title=title, theme=theme, content="Roll call.", cycle_day=1)
    session.add(briefing)
    await session.commit()
    return briefing


@pytest_asyncio.fixture
async def user(db_session) -> User:
    return await make_user(db_session)
