"""Pydantic request/response models for points, badge and NFT endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from sfdsa.schemas import CamelModel

# --- Points ---


class AvailableAction(CamelModel):
    action: str
    points: int | str


class AvailableActionsResponse(CamelModel):
    success: bool = True
    message: str = "Points system ready"
    available_actions: list[AvailableAction]


class AwardPointsRequest(CamelModel):
    user_id: str = Field(min_length=1)
    action: str = "chat_participation"
    points: int | None = None
    description: str | None = Field(default=None, max_length=256)


class AwardPointsResponse(CamelModel):
    success: bool = True
    message: str
    points_awarded: int
    action: str
    total_points: int


class PointsHistoryEntry(CamelModel):
    id: int
    action: str
    points: int
    description: str | None = None
    created_at: datetime


class PointsHistoryResponse(CamelModel):
    success: bool = True
    entries: list[PointsHistoryEntry]
    total: int
    page: int
    per_page: int


# --- Badges ---


class BadgeResponse(CamelModel):
    type: str
    name: str
    description: str
    rarity: str
    points: int


class EarnedBadgeResponse(CamelModel):
    id: int
    type: str
    name: str
    description: str
    rarity: str
    earned_at: datetime


class BadgeListResponse(CamelModel):
    success: bool = True
    badges: list[BadgeResponse]


class AwardBadgeRequest(CamelModel):
    user_id: str = Field(min_length=1)
    badge_type: str = Field(min_length=1)
    participation_points: int | None = Field(default=None, ge=0)


class AwardBadgeResponse(CamelModel):
    success: bool = True
    message: str
    already_earned: bool
    badge: BadgeResponse
    points_awarded: int = 0


# --- NFT awards ---


class NFTTierResponse(CamelModel):
    id: str
    tier: int
    name: str
    description: str
    point_threshold: int
    image_url: str


class UserNFTAwardResponse(NFTTierResponse):
    awarded_at: datetime
    points_at_award: int
    token_id: str | None = None
    contract_address: str | None = None


class NextAwardResponse(NFTTierResponse):
    points_needed: int


class NFTTierListResponse(CamelModel):
    success: bool = True
    awards: list[NFTTierResponse]


def earned_badge_response(user_badge) -> EarnedBadgeResponse:  # noqa: ANN001
    badge = user_badge.badge
    return EarnedBadgeResponse(
        id=user_badge.id,
        type=badge.type,
        name=badge.name,
        description=badge.description,
        rarity=badge.rarity,
        earned_at=user_badge.earned_at,
    )


def tier_response(tier) -> NFTTierResponse:  # noqa: ANN001
    return NFTTierResponse.model_validate(tier)


def user_nft_award_response(award) -> UserNFTAwardResponse:  # noqa: ANN001
    tier = award.tier
    return UserNFTAwardResponse(
        id=tier.id,
        tier=tier.tier,
        name=tier.name,
        description=tier.description,
        point_threshold=tier.point_threshold,
        image_url=tier.image_url,
        awarded_at=award.awarded_at,
        points_at_award=award.points_at_award,
        token_id=award.token_id,
        contract_address=award.contract_address,
    )


def next_award_response(next_award) -> NextAwardResponse | None:  # noqa: ANN001
    if next_award is None:
        return None
    tier = next_award.tier
    return NextAwardResponse(
        id=tier.id,
        tier=tier.tier,
        name=tier.name,
        description=tier.description,
        point_threshold=tier.point_threshold,
        image_url=tier.image_url,
        points_needed=next_award.points_needed,
    )
