"""Badge award service with duplicate prevention and notification."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.db.models import Badge, User, UserBadge
from sfdsa.db.upsert import insert_ignore
from sfdsa.errors import UserNotFoundError
from sfdsa.gamification.catalog import BadgeType, PointsAction
from sfdsa.gamification.points_service import award_points
from sfdsa.notifications.service import create_notification

logger = logging.getLogger(__name__)


@dataclass
class BadgeAward:
    """Outcome of a badge check. ``awarded`` is True only for a new row."""

    badge: Badge | None
    awarded: bool
    points_awarded: int = 0


async def get_badge_by_type(db: AsyncSession, badge_type: str) -> Badge | None:
    result = await db.execute(select(Badge).where(Badge.type == badge_type))
    return result.scalar_one_or_none()


async def get_user_badges(db: AsyncSession, user_id: str) -> list[UserBadge]:
    """Earned badges, most recent first."""
    result = await db.execute(
        select(UserBadge)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at.desc(), UserBadge.id.desc())
    )
    return list(result.scalars().all())


async def count_user_badges(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(UserBadge).where(UserBadge.user_id == user_id)
    )
    return result.scalar_one()


async def check_and_award_badge(
    db: AsyncSession,
    redis: object,
    user_id: str,
    badge_type: BadgeType | str,
    points: int | None = 0,
) -> BadgeAward:
    """Award a badge unless the user already holds it.

    The UNIQUE(user_id, badge_id) constraint decides; an already earned
    badge is a no-op, not a failure. When the badge is new, ``points``
    participation points are granted (``None`` means the catalog value),
    a notification is persisted and ``pubsub:badge_earned`` is published.
    """
    badge_type = BadgeType(badge_type).value
    badge = await get_badge_by_type(db, badge_type)
    if badge is None:
        logger.warning("Badge not found in catalog: %s", badge_type)
        return BadgeAward(badge=None, awarded=False)

    if await db.get(User, user_id) is None:
        raise UserNotFoundError(user_id)

    user_badge_id = await insert_ignore(
        db,
        UserBadge,
        {"user_id": user_id, "badge_id": badge.id},
        ["user_id", "badge_id"],
    )
    if user_badge_id is None:
        return BadgeAward(badge=badge, awarded=False)

    amount = badge.points if points is None else points
    if amount > 0:
        await award_points(
            db,
            user_id,
            amount,
            PointsAction.BADGE_EARNED.value,
            f'Earned badge: "{badge.name}"',
            redis=redis,
        )

    await _emit_badge_earned(db, redis, user_id, badge)
    logger.info("User %s earned badge %s", user_id, badge_type)
    return BadgeAward(badge=badge, awarded=True, points_awarded=max(amount, 0))


async def _emit_badge_earned(
    db: AsyncSession,
    redis: object,
    user_id: str,
    badge: Badge,
) -> None:
    """Persist the badge notification and broadcast the award."""
    await create_notification(
        db,
        user_id,
        "badge",
        f"You earned the {badge.name} badge!",
        message=badge.description,
        action_url=f"/badge/{badge.type}",
        metadata={"badgeType": badge.type, "badgeName": badge.name},
        redis=redis,
    )

    if redis is not None:
        try:
            await redis.publish(  # type: ignore[union-attr]
                "pubsub:badge_earned",
                json.dumps({
                    "user_id": user_id,
                    "badge_type": badge.type,
                    "badge_name": badge.name,
                    "rarity": badge.rarity,
                }),
            )
        except Exception:
            logger.warning("Failed to publish badge_earned event", exc_info=True)
