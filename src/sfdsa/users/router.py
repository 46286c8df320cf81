"""User endpoints: registration record and public profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.database import get_session
from sfdsa.dependencies import get_redis_dep
from sfdsa.errors import DuplicateUserError, InvalidReferralCodeError, UserNotFoundError
from sfdsa.gamification.schemas import earned_badge_response, next_award_response, user_nft_award_response
from sfdsa.referrals.service import find_recruiter_by_code, record_referral_signup
from sfdsa.users.schemas import (
    CreateUserRequest,
    ProfileEnvelope,
    ProfileResponse,
    ProfileUpdateRequest,
    UserEnvelope,
    UserResponse,
)
from sfdsa.users.service import create_user, get_profile, update_bio

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("", response_model=UserEnvelope, status_code=201)
async def post_user(
    body: CreateUserRequest,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Create the platform record for a newly registered user.

    A ``referralCode`` from a recruiter's link attributes the sign-up to
    that recruiter; an unknown code rejects the registration.
    """
    try:
        recruiter = await find_recruiter_by_code(db, body.referral_code) if body.referral_code else None
        user = await create_user(db, body.email, body.name, body.id)
        if recruiter is not None:
            await record_referral_signup(db, redis, recruiter, user)
    except InvalidReferralCodeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except DuplicateUserError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None
    await db.commit()
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.get("/{user_id}/profile", response_model=ProfileEnvelope)
async def get_user_profile(user_id: str, db: AsyncSession = Depends(get_session)):
    """Profile with badges, NFT awards, next award and leaderboard rank."""
    try:
        data = await get_profile(db, user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found") from None

    user = data["user"]
    badges = [earned_badge_response(b) for b in data["badges"]]
    nft_awards = [user_nft_award_response(a) for a in data["nft_awards"]]
    profile = ProfileResponse(
        **UserResponse.model_validate(user).model_dump(),
        avatar_url=data["avatar_url"],
        rank=data["rank"],
        badges=badges,
        nft_awards=nft_awards,
        badge_count=len(badges),
        nft_count=len(nft_awards),
        next_award=next_award_response(data["next_award"]),
    )
    return ProfileEnvelope(profile=profile)


@router.patch("/{user_id}/profile", response_model=UserEnvelope)
async def patch_user_profile(
    user_id: str,
    body: ProfileUpdateRequest,
    db: AsyncSession = Depends(get_session),
):
    """Update the user's bio."""
    try:
        user = await update_bio(db, user_id, body.bio)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found") from None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    await db.commit()
    return UserEnvelope(user=UserResponse.model_validate(user))
