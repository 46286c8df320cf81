"""Daily briefing endpoints: 5 routes."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.briefings.schemas import (
    AttendRequest,
    AttendResponse,
    BriefingEnvelope,
    BriefingResponse,
    BriefingStatsResponse,
    CreateBriefingRequest,
    CycleRequest,
    CycleResponse,
    ShareRequest,
    ShareResponse,
    TodaysBriefingResponse,
)
from sfdsa.briefings.service import (
    create_briefing,
    cycle_day,
    get_briefing_stats,
    get_todays_briefing,
    normalize_platform,
    record_attendance,
    record_share,
    update_briefing_cycle,
)
from sfdsa.database import get_session
from sfdsa.dependencies import get_redis_dep, require_admin
from sfdsa.errors import BriefingNotFoundError, DuplicateBriefingError, UserNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/daily-briefing", tags=["Daily Briefing"])


def _today():
    return datetime.now(timezone.utc).date()


@router.get("/today", response_model=TodaysBriefingResponse)
async def todays_briefing(
    user_id: str | None = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_session),
):
    """Today's briefing (or the most recent one) with attendance/share stats."""
    today = _today()
    try:
        briefing = await get_todays_briefing(db, today)
        if briefing is None:
            return TodaysBriefingResponse(cycle_day=cycle_day(today), message="No briefing available")
        stats = await get_briefing_stats(db, briefing.id, user_id)
    except SQLAlchemyError:
        logger.warning("Daily briefing lookup failed", exc_info=True)
        return TodaysBriefingResponse(cycle_day=cycle_day(today), message="Briefing temporarily unavailable")

    return TodaysBriefingResponse(
        briefing=BriefingResponse.model_validate(briefing),
        stats=BriefingStatsResponse.model_validate(stats),
        cycle_day=cycle_day(today),
    )


@router.post("/attend", response_model=AttendResponse)
async def attend(
    body: AttendRequest,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Record attendance; points are awarded on the first visit only."""
    try:
        points = await record_attendance(db, body.user_id, body.briefing_id, redis=redis)
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found") from None
    except BriefingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    await db.commit()
    return AttendResponse(points_awarded=points, already_attended=points == 0)


@router.post("/share", response_model=ShareResponse)
async def share(
    body: ShareRequest,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Record a share; points are awarded once per platform."""
    try:
        platform = normalize_platform(body.platform)
        points = await record_share(db, body.user_id, body.briefing_id, platform, redis=redis)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found") from None
    except BriefingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    await db.commit()
    return ShareResponse(platform=platform, points_awarded=points, already_shared=points == 0)


@router.post(
    "",
    response_model=BriefingEnvelope,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def post_briefing(body: CreateBriefingRequest, db: AsyncSession = Depends(get_session)):
    """Create a briefing (admin)."""
    try:
        briefing = await create_briefing(db, body.model_dump())
    except DuplicateBriefingError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    await db.commit()
    return BriefingEnvelope(briefing=BriefingResponse.model_validate(briefing))


@router.post("/cycle", response_model=CycleResponse, dependencies=[Depends(require_admin)])
async def rotate_cycle(body: CycleRequest | None = None, db: AsyncSession = Depends(get_session)):
    """Restart the briefing cycle when today is its last day (admin)."""
    today = (body.today if body and body.today else None) or _today()
    rotated = await update_briefing_cycle(db, today)
    await db.commit()
    return CycleResponse(cycle_day=cycle_day(today), rotated=rotated)
