"""Request/response schemas for user endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field

from sfdsa.gamification.schemas import EarnedBadgeResponse, NextAwardResponse, UserNFTAwardResponse
from sfdsa.schemas import CamelModel


class CreateUserRequest(CamelModel):
    email: EmailStr
    name: str | None = Field(None, max_length=128)
    id: str | None = Field(None, max_length=36)
    referral_code: str | None = Field(None, max_length=32)


class UserResponse(CamelModel):
    id: str
    email: str
    name: str | None = None
    bio: str | None = None
    participation_count: int
    donation_points: int
    has_applied: bool
    referral_code: str | None = None
    referred_by: str | None = None
    created_at: datetime


class UserEnvelope(CamelModel):
    success: bool = True
    user: UserResponse


class ProfileResponse(UserResponse):
    avatar_url: str
    rank: int
    badges: list[EarnedBadgeResponse]
    nft_awards: list[UserNFTAwardResponse]
    badge_count: int
    nft_count: int
    next_award: NextAwardResponse | None = None


class ProfileEnvelope(CamelModel):
    success: bool = True
    profile: ProfileResponse


class ProfileUpdateRequest(CamelModel):
    bio: str | None = None
