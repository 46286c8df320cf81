"""Donation points endpoints: 6 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.database import get_session
from sfdsa.dependencies import get_redis_dep, require_admin
from sfdsa.donations.schemas import (
    AwardDonationRequest,
    AwardDonationResponse,
    CreateDonationRuleRequest,
    DonationLeaderboardResponse,
    DonationRuleEnvelope,
    DonationRuleListResponse,
    DonationRuleResponse,
    DonorEntry,
    UpdateDonationRuleRequest,
    UserDonationPointsResponse,
)
from sfdsa.donations.service import (
    award_donation_points,
    create_rule,
    get_donation_leaderboard,
    get_user_donation_points,
    list_rules,
    update_rule,
)
from sfdsa.errors import InvalidRuleError, RuleNotFoundError, RuleOverlapError, UserNotFoundError

router = APIRouter(prefix="/api", tags=["Donations"])


# ── Rules ──


@router.get("/donations/rules", response_model=DonationRuleListResponse)
async def get_rules(
    active_only: bool = Query(False, alias="activeOnly"),
    db: AsyncSession = Depends(get_session),
):
    """Donation point rules ordered by minimum amount."""
    rules = await list_rules(db, active_only=active_only)
    return DonationRuleListResponse(rules=[DonationRuleResponse.model_validate(r) for r in rules])


@router.post(
    "/donations/rules",
    response_model=DonationRuleEnvelope,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def post_rule(body: CreateDonationRuleRequest, db: AsyncSession = Depends(get_session)):
    """Create a donation point rule (admin)."""
    try:
        rule = await create_rule(db, body.model_dump())
    except RuleOverlapError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None
    except InvalidRuleError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    await db.commit()
    return DonationRuleEnvelope(rule=DonationRuleResponse.model_validate(rule))


@router.patch(
    "/donations/rules/{rule_id}",
    response_model=DonationRuleEnvelope,
    dependencies=[Depends(require_admin)],
)
async def patch_rule(
    rule_id: int,
    body: UpdateDonationRuleRequest,
    db: AsyncSession = Depends(get_session),
):
    """Partially update a donation point rule (admin)."""
    try:
        rule = await update_rule(db, rule_id, body.model_dump(exclude_unset=True))
    except RuleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except RuleOverlapError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None
    except InvalidRuleError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    await db.commit()
    return DonationRuleEnvelope(rule=DonationRuleResponse.model_validate(rule))


# ── Awards ──


@router.post(
    "/donations/points",
    response_model=AwardDonationResponse,
    dependencies=[Depends(require_admin)],
)
async def post_donation_points(
    body: AwardDonationRequest,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Award points for a completed donation (payment webhook / admin)."""
    try:
        award = await award_donation_points(
            db, redis, body.user_id, body.donation_id, body.amount, body.is_recurring,
        )
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found") from None
    await db.commit()
    return AwardDonationResponse(
        donation_id=award.donation_id,
        points=award.points,
        duplicate=award.duplicate,
        rule_id=award.rule_id,
        badges_awarded=award.badges_awarded,
    )


# ── Reporting ──


@router.get("/donations/leaderboard", response_model=DonationLeaderboardResponse)
async def donation_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
):
    """Donors ranked by donation points."""
    rows, total = await get_donation_leaderboard(db, limit, offset)
    return DonationLeaderboardResponse(leaderboard=[DonorEntry(**r) for r in rows], total=total)


@router.get("/users/{user_id}/donation-points", response_model=UserDonationPointsResponse)
async def user_donation_points(user_id: str, db: AsyncSession = Depends(get_session)):
    """A user's donation point tally."""
    try:
        summary = await get_user_donation_points(db, user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found") from None
    return UserDonationPointsResponse(user_id=user_id, **summary)
