"""NFT award tiers: threshold checks and next-award lookup.

Awards are recorded only; ``token_id`` and ``contract_address`` stay
empty until on-chain minting ships.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.db.models import NFTAwardTier, UserNFTAward
from sfdsa.db.upsert import insert_ignore
from sfdsa.notifications.service import create_notification

logger = logging.getLogger(__name__)


@dataclass
class NextAward:
    tier: NFTAwardTier
    points_needed: int


async def get_tiers(db: AsyncSession) -> list[NFTAwardTier]:
    """All tiers, ascending by threshold."""
    result = await db.execute(select(NFTAwardTier).order_by(NFTAwardTier.point_threshold))
    return list(result.scalars().all())


async def get_user_nft_awards(db: AsyncSession, user_id: str) -> list[UserNFTAward]:
    result = await db.execute(
        select(UserNFTAward)
        .join(NFTAwardTier, NFTAwardTier.id == UserNFTAward.nft_award_id)
        .where(UserNFTAward.user_id == user_id)
        .order_by(NFTAwardTier.point_threshold)
    )
    return list(result.scalars().all())


async def check_and_award_nfts(
    db: AsyncSession,
    redis: object,
    user_id: str,
    total_points: int,
) -> list[UserNFTAward]:
    """Grant every tier whose threshold is at or below ``total_points``.

    Several tiers may be crossed by one award; they are granted in
    ascending threshold order. Returns only the newly created awards.
    """
    result = await db.execute(
        select(NFTAwardTier)
        .where(NFTAwardTier.point_threshold <= total_points)
        .order_by(NFTAwardTier.point_threshold)
    )
    eligible = result.scalars().all()

    awarded: list[UserNFTAward] = []
    for tier in eligible:
        award_id = await insert_ignore(
            db,
            UserNFTAward,
            {"user_id": user_id, "nft_award_id": tier.id, "points_at_award": total_points},
            ["user_id", "nft_award_id"],
        )
        if award_id is None:
            continue

        award = await db.get(UserNFTAward, award_id)
        awarded.append(award)
        logger.info("User %s unlocked NFT tier %s at %d points", user_id, tier.id, total_points)
        await create_notification(
            db,
            user_id,
            "nft_award",
            f"You unlocked the {tier.name} NFT award!",
            message=tier.description,
            action_url="/profile#nft-awards",
            metadata={"nftAwardId": tier.id, "tier": tier.tier, "pointThreshold": tier.point_threshold},
            redis=redis,
        )

    return awarded


async def get_next_award(db: AsyncSession, user_id: str, points: int) -> NextAward | None:
    """Lowest unearned tier whose threshold is still above ``points``."""
    earned = select(UserNFTAward.nft_award_id).where(UserNFTAward.user_id == user_id)
    result = await db.execute(
        select(NFTAwardTier)
        .where(
            NFTAwardTier.point_threshold > points,
            NFTAwardTier.id.not_in(earned),
        )
        .order_by(NFTAwardTier.point_threshold)
        .limit(1)
    )
    tier = result.scalar_one_or_none()
    if tier is None:
        return None
    return NextAward(tier=tier, points_needed=tier.point_threshold - points)
