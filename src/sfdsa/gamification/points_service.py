"""Participation points: ledger append plus running-total increment.

``users.participation_count`` always equals the sum of the user's
``points_log`` rows; both are written in the caller's transaction.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.db.models import PointsLog, User
from sfdsa.errors import InvalidPointsError, UserNotFoundError
from sfdsa.gamification.nft_service import check_and_award_nfts

logger = logging.getLogger(__name__)


async def lock_user(db: AsyncSession, user_id: str) -> User:
    """Load a user with a row lock (SELECT ... FOR UPDATE on PostgreSQL)."""
    user = await db.get(User, user_id, with_for_update=True, populate_existing=True)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def award_points(
    db: AsyncSession,
    user_id: str,
    amount: int,
    action: str,
    description: str | None = None,
    redis: object = None,
) -> PointsLog | None:
    """Append a points entry and bump the user's running total.

    Zero is a no-op (returns None); negative amounts are rejected.
    NFT tiers are re-evaluated against the new total.
    """
    if amount < 0:
        raise InvalidPointsError(f"Points must be non-negative, got {amount}")
    if amount == 0:
        return None

    user = await lock_user(db, user_id)
    now = datetime.now(timezone.utc)

    entry = PointsLog(
        user_id=user_id,
        action=action,
        points=amount,
        description=description or f"Awarded {amount} points for {action}",
        created_at=now,
    )
    db.add(entry)
    user.participation_count += amount
    user.updated_at = now
    await db.flush()

    logger.debug("Awarded %d points to %s for %s", amount, user_id, action)
    await check_and_award_nfts(db, redis, user_id, user.participation_count)
    return entry


async def get_points_history(
    db: AsyncSession,
    user_id: str,
    page: int = 1,
    per_page: int = 20,
) -> tuple[list[PointsLog], int]:
    """Paginated points log, most recent first."""
    if await db.get(User, user_id) is None:
        raise UserNotFoundError(user_id)
    total = (
        await db.execute(
            select(func.count()).select_from(PointsLog).where(PointsLog.user_id == user_id)
        )
    ).scalar_one()
    result = await db.execute(
        select(PointsLog)
        .where(PointsLog.user_id == user_id)
        .order_by(PointsLog.created_at.desc(), PointsLog.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return list(result.scalars().all()), total
