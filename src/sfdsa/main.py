"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from sfdsa.briefings.router import router as briefings_router
from sfdsa.config import get_settings
from sfdsa.database import close_db, get_session_factory, init_db
from sfdsa.donations.router import router as donations_router
from sfdsa.gamification.router import router as gamification_router
from sfdsa.gamification.seed import seed_catalogs
from sfdsa.health.router import router as health_router
from sfdsa.leaderboard.router import router as leaderboard_router
from sfdsa.middleware import setup_middleware
from sfdsa.notifications.router import router as notifications_router
from sfdsa.redis_client import close_redis, init_redis
from sfdsa.referrals.router import router as referrals_router
from sfdsa.users.router import router as users_router
from sfdsa.volunteers.router import router as volunteers_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.redis_url:
        await init_redis(settings.redis_url)

    # Badge, NFT tier and donation rule catalogs (idempotent)
    try:
        async with get_session_factory()() as db:
            await seed_catalogs(db)
    except SQLAlchemyError:
        logger.warning("Catalog seeding failed (tables may not exist yet)", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="SFDSA Recruitment Engagement API",
        description="Points, badges, NFT awards, leaderboard, donations, referrals and daily briefings "
        "for the SF Deputy Sheriff recruitment platform",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(users_router)
    app.include_router(gamification_router)
    app.include_router(leaderboard_router)
    app.include_router(donations_router)
    app.include_router(referrals_router)
    app.include_router(briefings_router)
    app.include_router(volunteers_router)
    app.include_router(notifications_router)

    return app


app = create_app()
