"""Points, badge and NFT award endpoints: 7 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.database import get_session
from sfdsa.db.models import Badge
from sfdsa.dependencies import get_redis_dep
from sfdsa.errors import InvalidPointsError, UserNotFoundError
from sfdsa.gamification.badge_service import check_and_award_badge
from sfdsa.gamification.catalog import (
    ACTION_POINTS,
    VARIABLE_POINT_ACTIONS,
    BadgeType,
    PointsAction,
)
from sfdsa.gamification.nft_service import get_tiers
from sfdsa.gamification.points_service import award_points, get_points_history, lock_user
from sfdsa.gamification.schemas import (
    AvailableAction,
    AvailableActionsResponse,
    AwardBadgeRequest,
    AwardBadgeResponse,
    AwardPointsRequest,
    AwardPointsResponse,
    BadgeListResponse,
    BadgeResponse,
    NFTTierListResponse,
    PointsHistoryEntry,
    PointsHistoryResponse,
    tier_response,
)

router = APIRouter(prefix="/api", tags=["Gamification"])


# ── Points ──


@router.get("/points", response_model=AvailableActionsResponse)
async def list_point_actions():
    """List the actions that award participation points."""
    actions = [AvailableAction(action=a.value, points=p) for a, p in ACTION_POINTS.items()]
    actions += [AvailableAction(action=a.value, points=p) for a, p in VARIABLE_POINT_ACTIONS.items()]
    return AvailableActionsResponse(available_actions=actions)


@router.post("/points", response_model=AwardPointsResponse)
async def post_points(
    body: AwardPointsRequest,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Award points for a user action.

    Fixed actions use the points table; variable actions take ``points``
    from the request (computed by the game or challenge).
    """
    try:
        action = PointsAction(body.action)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown action: {body.action}") from None

    if action in ACTION_POINTS:
        amount = ACTION_POINTS[action]
    elif action in VARIABLE_POINT_ACTIONS:
        amount = body.points or 0
    else:
        raise HTTPException(status_code=400, detail=f"Action {action.value} is not awarded via this endpoint")

    try:
        await award_points(db, body.user_id, amount, action.value, body.description, redis=redis)
        user = await lock_user(db, body.user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found") from None
    except InvalidPointsError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    if action is PointsAction.APPLICATION_SUBMISSION:
        user.has_applied = True
    await db.commit()

    return AwardPointsResponse(
        message=f"Awarded {amount} points for {action.value}",
        points_awarded=amount,
        action=action.value,
        total_points=user.participation_count,
    )


@router.get("/users/{user_id}/points", response_model=PointsHistoryResponse)
async def points_history(
    user_id: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100, alias="perPage"),
    db: AsyncSession = Depends(get_session),
):
    """Paginated points log for a user."""
    try:
        entries, total = await get_points_history(db, user_id, page, per_page)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found") from None
    return PointsHistoryResponse(
        entries=[PointsHistoryEntry.model_validate(e) for e in entries],
        total=total,
        page=page,
        per_page=per_page,
    )


# ── Badges ──


@router.get("/badges", response_model=BadgeListResponse)
async def list_badges(db: AsyncSession = Depends(get_session)):
    """Badge catalog in display order."""
    result = await db.execute(select(Badge).order_by(Badge.sort_order, Badge.id))
    return BadgeListResponse(badges=[BadgeResponse.model_validate(b) for b in result.scalars()])


@router.post("/award-badge", response_model=AwardBadgeResponse)
async def award_badge(
    body: AwardBadgeRequest,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Award a badge; participation points are granted only when it is new."""
    try:
        badge_type = BadgeType(body.badge_type)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown badge type: {body.badge_type}") from None

    try:
        result = await check_and_award_badge(
            db, redis, body.user_id, badge_type, points=body.participation_points,
        )
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found") from None

    if result.badge is None:
        raise HTTPException(status_code=404, detail="Badge catalog not seeded")
    await db.commit()

    return AwardBadgeResponse(
        message="Badge awarded" if result.awarded else "Badge already earned",
        already_earned=not result.awarded,
        badge=BadgeResponse.model_validate(result.badge),
        points_awarded=result.points_awarded,
    )


# ── NFT awards ──


@router.get("/nft-awards", response_model=NFTTierListResponse)
async def list_nft_awards(db: AsyncSession = Depends(get_session)):
    """NFT award tiers, ascending by threshold."""
    tiers = await get_tiers(db)
    return NFTTierListResponse(awards=[tier_response(t) for t in tiers])
