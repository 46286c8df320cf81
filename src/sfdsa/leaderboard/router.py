"""Leaderboard endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.config import get_settings
from sfdsa.database import get_session
from sfdsa.leaderboard.schemas import LeaderboardCategory, LeaderboardResponse, Timeframe
from sfdsa.leaderboard.service import get_leaderboard

router = APIRouter(prefix="/api", tags=["Leaderboard"])

SEARCH_MAX_LENGTH = 100


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(
    limit: int = Query(10),
    offset: int = Query(0),
    search: str | None = Query(None),
    category: str = Query(LeaderboardCategory.PARTICIPATION.value),
    timeframe: str = Query(Timeframe.ALL_TIME.value),
    current_user_id: str | None = Query(None, alias="currentUserId"),
    db: AsyncSession = Depends(get_session),
):
    """Ranked leaderboard. Out-of-range parameters are clamped, unknown
    category/timeframe values fall back to the defaults and an over-long
    search is truncated."""
    max_limit = get_settings().leaderboard_max_limit
    limit = min(max(limit, 1), max_limit)
    offset = max(offset, 0)
    if search:
        search = search[:SEARCH_MAX_LENGTH]
    try:
        category_value = LeaderboardCategory(category)
    except ValueError:
        category_value = LeaderboardCategory.PARTICIPATION
    try:
        timeframe_value = Timeframe(timeframe)
    except ValueError:
        timeframe_value = Timeframe.ALL_TIME

    return await get_leaderboard(
        db,
        limit=limit,
        offset=offset,
        search=search,
        category=category_value,
        timeframe=timeframe_value,
        current_user_id=current_user_id,
    )
