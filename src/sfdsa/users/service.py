"""User records and profiles."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.db.models import User
from sfdsa.db.upsert import insert_ignore
from sfdsa.errors import DuplicateUserError, UserNotFoundError
from sfdsa.gamification.badge_service import get_user_badges
from sfdsa.gamification.nft_service import get_next_award, get_user_nft_awards

logger = logging.getLogger(__name__)

BIO_MAX_LENGTH = 500


def placeholder_avatar(user_id: str) -> str:
    return f"/placeholder.svg?height=64&width=64&query=user-{user_id}"


async def create_user(
    db: AsyncSession,
    email: str,
    name: str | None = None,
    user_id: str | None = None,
) -> User:
    """Create the platform record for a newly registered user."""
    values: dict[str, Any] = {"email": email.strip().lower(), "name": name}
    if user_id:
        if await db.get(User, user_id) is not None:
            raise DuplicateUserError(f"A user with id {user_id} already exists")
        values["id"] = user_id

    new_id = await insert_ignore(db, User, values, ["email"])
    if new_id is None:
        raise DuplicateUserError(f"A user with email {values['email']} already exists")
    logger.info("Created user %s", new_id)
    return await db.get(User, new_id)


async def get_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def get_rank(db: AsyncSession, user: User) -> int:
    """1 + number of users with strictly more participation points."""
    ahead = (
        await db.execute(
            select(func.count())
            .select_from(User)
            .where(User.participation_count > user.participation_count)
        )
    ).scalar_one()
    return ahead + 1


async def get_profile(db: AsyncSession, user_id: str) -> dict[str, Any]:
    """Profile with earned badges, NFT awards, next award and rank."""
    user = await get_user(db, user_id)
    badges = await get_user_badges(db, user_id)
    nft_awards = await get_user_nft_awards(db, user_id)
    return {
        "user": user,
        "avatar_url": user.avatar_url or placeholder_avatar(user.id),
        "rank": await get_rank(db, user),
        "badges": badges,
        "nft_awards": nft_awards,
        "next_award": await get_next_award(db, user_id, user.participation_count),
    }


async def update_bio(db: AsyncSession, user_id: str, bio: str | None) -> User:
    """Update the bio, the only self-editable profile field."""
    if bio is not None and len(bio) > BIO_MAX_LENGTH:
        raise ValueError(f"Bio must be less than {BIO_MAX_LENGTH} characters")
    user = await get_user(db, user_id)
    user.bio = bio
    user.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return user
