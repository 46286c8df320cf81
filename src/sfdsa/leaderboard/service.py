"""Leaderboard composer.

Live users are ranked by the selected category and, while the board is
sparse, interleaved with illustrative entries. The board always renders:
database failures fall back to the illustrative dataset.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.db.models import User, UserBadge, UserNFTAward
from sfdsa.leaderboard.placeholders import placeholder_entries
from sfdsa.leaderboard.schemas import (
    LeaderboardCategory,
    LeaderboardEntry,
    LeaderboardResponse,
    LeaderboardSource,
    Timeframe,
)

logger = logging.getLogger(__name__)

# Live boards with fewer entries than this get every placeholder merged in.
SPARSE_THRESHOLD = 3

TIMEFRAME_DAYS: dict[Timeframe, int] = {
    Timeframe.DAILY: 1,
    Timeframe.WEEKLY: 7,
    Timeframe.MONTHLY: 30,
}


def score(entry: LeaderboardEntry, category: LeaderboardCategory) -> tuple[int, ...]:
    """Ranking key for ``category``; higher sorts first."""
    if category is LeaderboardCategory.BADGES:
        return (entry.badge_count,)
    if category is LeaderboardCategory.NFTS:
        return (entry.nft_count,)
    if category is LeaderboardCategory.APPLICATION:
        return (int(entry.has_applied), entry.participation_count)
    return (entry.participation_count,)


def matches_search(entry: LeaderboardEntry, search: str | None) -> bool:
    return not search or search.lower() in entry.name.lower()


def merge_placeholders(
    live: list[LeaderboardEntry],
    placeholders: Sequence[LeaderboardEntry],
    category: LeaderboardCategory,
) -> tuple[list[LeaderboardEntry], bool]:
    """Interleave placeholders into an already ranked live list.

    All placeholders are merged while the live board is sparse; otherwise
    only those that outscore the lowest live entry. Each goes before the
    first entry with a lower score. Returns the merged list and whether
    anything was merged.
    """
    entries = list(live)
    if len(live) >= SPARSE_THRESHOLD:
        lowest = min(score(e, category) for e in live)
        candidates = [p for p in placeholders if score(p, category) > lowest]
    else:
        candidates = list(placeholders)

    for placeholder in candidates:
        key = score(placeholder, category)
        position = next(
            (i for i, e in enumerate(entries) if score(e, category) < key),
            len(entries),
        )
        entries.insert(position, placeholder)

    return entries, bool(candidates)


def rank_and_page(
    entries: list[LeaderboardEntry],
    limit: int,
    offset: int,
) -> list[LeaderboardEntry]:
    """Assign rank = position + 1 over the whole board, then slice."""
    for i, entry in enumerate(entries):
        entry.rank = i + 1
    return entries[offset:offset + limit]


def _fallback(
    source: LeaderboardSource,
    placeholders: Sequence[LeaderboardEntry],
    category: LeaderboardCategory,
    search: str | None,
    limit: int,
    offset: int,
) -> LeaderboardResponse:
    entries = [p for p in placeholders if matches_search(p, search)]
    entries.sort(key=lambda e: score(e, category), reverse=True)
    return LeaderboardResponse(
        entries=rank_and_page(entries, limit, offset),
        total=len(entries),
        source=source,
    )


async def _fetch_live(
    db: AsyncSession,
    search: str | None,
    timeframe: Timeframe,
    now: datetime,
) -> list[LeaderboardEntry]:
    badge_counts = (
        select(UserBadge.user_id, func.count().label("badge_count"))
        .group_by(UserBadge.user_id)
        .subquery()
    )
    nft_counts = (
        select(UserNFTAward.user_id, func.count().label("nft_count"))
        .group_by(UserNFTAward.user_id)
        .subquery()
    )

    query = (
        select(
            User,
            func.coalesce(badge_counts.c.badge_count, 0),
            func.coalesce(nft_counts.c.nft_count, 0),
        )
        .outerjoin(badge_counts, badge_counts.c.user_id == User.id)
        .outerjoin(nft_counts, nft_counts.c.user_id == User.id)
        .where(User.participation_count >= 1)
    )
    if search:
        query = query.where(func.lower(User.name).contains(search.lower(), autoescape=True))
    if timeframe in TIMEFRAME_DAYS:
        query = query.where(User.updated_at >= now - timedelta(days=TIMEFRAME_DAYS[timeframe]))
    query = query.order_by(User.participation_count.desc(), User.created_at, User.id)

    result = await db.execute(query)
    return [
        LeaderboardEntry(
            id=user.id,
            name=user.name or user.email.split("@")[0],
            avatar_url=user.avatar_url,
            participation_count=user.participation_count,
            badge_count=badges,
            nft_count=nfts,
            has_applied=user.has_applied,
        )
        for user, badges, nfts in result.all()
    ]


async def get_leaderboard(
    db: AsyncSession,
    limit: int = 10,
    offset: int = 0,
    search: str | None = None,
    category: LeaderboardCategory = LeaderboardCategory.PARTICIPATION,
    timeframe: Timeframe = Timeframe.ALL_TIME,
    current_user_id: str | None = None,
    placeholders: Sequence[LeaderboardEntry] | None = None,
) -> LeaderboardResponse:
    """Compose the ranked, paginated leaderboard."""
    if placeholders is None:
        placeholders = placeholder_entries()
    search = search.strip() if search else None

    try:
        live = await _fetch_live(db, search, timeframe, datetime.now(timezone.utc))
        for entry in live:
            entry.is_current_user = current_user_id is not None and entry.id == current_user_id
        live.sort(key=lambda e: score(e, category), reverse=True)

        matching = [p for p in placeholders if matches_search(p, search)]
        entries, merged = merge_placeholders(live, matching, category)
    except SQLAlchemyError:
        logger.warning("Leaderboard query failed, serving illustrative data", exc_info=True)
        return _fallback(LeaderboardSource.MOCK_FALLBACK, placeholders, category, search, limit, offset)
    except Exception:
        logger.exception("Leaderboard composition failed, serving illustrative data")
        return _fallback(LeaderboardSource.ERROR_FALLBACK, placeholders, category, None, limit, offset)

    return LeaderboardResponse(
        entries=rank_and_page(entries, limit, offset),
        total=len(entries),
        source=LeaderboardSource.DATABASE_MERGED if merged else LeaderboardSource.DATABASE,
    )
