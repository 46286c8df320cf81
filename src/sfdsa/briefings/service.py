"""Sgt. Ken's daily briefing: lookup, attendance, shares and yearly rotation."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.db.models import BriefingAttendance, BriefingShare, DailyBriefing
from sfdsa.db.upsert import insert_ignore
from sfdsa.errors import BriefingNotFoundError, DuplicateBriefingError
from sfdsa.gamification.catalog import PointsAction, social_share_action
from sfdsa.gamification.points_service import award_points, lock_user

logger = logging.getLogger(__name__)

ATTENDANCE_POINTS = 5
SHARE_POINTS: dict[str, int] = {
    "twitter": 10,
    "facebook": 10,
    "instagram": 10,
    "linkedin": 15,
    "email": 5,
}
DEFAULT_SHARE_POINTS = 10
CYCLE_LENGTH = 365
THEMES = ("duty", "courage", "respect", "service", "leadership", "resilience")

PLATFORM_RE = re.compile(r"^[a-z0-9_-]{1,32}$")

# Rows are parked here while the cycle is re-dated so the unique date
# constraint never sees two briefings on the same day.
_PARKING_EPOCH = date(1, 1, 1)


@dataclass
class BriefingStats:
    total_attendees: int = 0
    total_shares: int = 0
    user_attended: bool = False
    user_shared: bool = False
    user_platforms_shared: list[str] = field(default_factory=list)


def cycle_day(today: date) -> int:
    """Position of ``today`` in the 365-day briefing cycle (1-based)."""
    day_of_year = today.timetuple().tm_yday
    return ((day_of_year - 1) % CYCLE_LENGTH) + 1


def share_points(platform: str) -> int:
    return SHARE_POINTS.get(platform, DEFAULT_SHARE_POINTS)


def normalize_platform(platform: str) -> str:
    """Lower-case and validate a share platform name."""
    value = platform.strip().lower()
    if not PLATFORM_RE.match(value):
        raise ValueError(f"Invalid share platform: {platform!r}")
    return value


async def get_todays_briefing(db: AsyncSession, today: date) -> DailyBriefing | None:
    """Exact date match, else the most recent briefing; None only when empty."""
    briefing = (
        await db.execute(select(DailyBriefing).where(DailyBriefing.date == today))
    ).scalar_one_or_none()
    if briefing is not None:
        return briefing

    briefing = (
        await db.execute(select(DailyBriefing).order_by(DailyBriefing.date.desc()).limit(1))
    ).scalar_one_or_none()
    if briefing is not None:
        logger.info("No briefing dated %s; serving %s", today, briefing.date)
    return briefing


async def _require_briefing(db: AsyncSession, briefing_id: str) -> DailyBriefing:
    briefing = await db.get(DailyBriefing, briefing_id)
    if briefing is None:
        raise BriefingNotFoundError(f"Briefing not found: {briefing_id}")
    return briefing


async def record_attendance(
    db: AsyncSession,
    user_id: str,
    briefing_id: str,
    redis: object = None,
) -> int:
    """Record attendance once per (user, briefing). Returns points awarded."""
    await lock_user(db, user_id)
    await _require_briefing(db, briefing_id)

    attendance_id = await insert_ignore(
        db,
        BriefingAttendance,
        {"user_id": user_id, "briefing_id": briefing_id},
        ["user_id", "briefing_id"],
    )
    if attendance_id is None:
        return 0

    await award_points(
        db,
        user_id,
        ATTENDANCE_POINTS,
        PointsAction.DAILY_BRIEFING_ATTENDANCE.value,
        "Attended Sgt. Ken's Daily Briefing",
        redis=redis,
    )
    return ATTENDANCE_POINTS


async def record_share(
    db: AsyncSession,
    user_id: str,
    briefing_id: str,
    platform: str,
    redis: object = None,
) -> int:
    """Record a share once per (user, briefing, platform). Returns points awarded."""
    platform = normalize_platform(platform)
    await lock_user(db, user_id)
    await _require_briefing(db, briefing_id)

    share_id = await insert_ignore(
        db,
        BriefingShare,
        {"user_id": user_id, "briefing_id": briefing_id, "platform": platform},
        ["user_id", "briefing_id", "platform"],
    )
    if share_id is None:
        return 0

    points = share_points(platform)
    await award_points(
        db,
        user_id,
        points,
        social_share_action(platform),
        f"Shared Sgt. Ken's Daily Briefing on {platform}",
        redis=redis,
    )
    return points


async def get_briefing_stats(
    db: AsyncSession,
    briefing_id: str,
    user_id: str | None = None,
) -> BriefingStats:
    stats = BriefingStats(
        total_attendees=(
            await db.execute(
                select(func.count())
                .select_from(BriefingAttendance)
                .where(BriefingAttendance.briefing_id == briefing_id)
            )
        ).scalar_one(),
        total_shares=(
            await db.execute(
                select(func.count())
                .select_from(BriefingShare)
                .where(BriefingShare.briefing_id == briefing_id)
            )
        ).scalar_one(),
    )
    if user_id:
        attended = (
            await db.execute(
                select(BriefingAttendance.id).where(
                    BriefingAttendance.briefing_id == briefing_id,
                    BriefingAttendance.user_id == user_id,
                )
            )
        ).scalar_one_or_none()
        stats.user_attended = attended is not None

        platforms = (
            await db.execute(
                select(BriefingShare.platform)
                .where(BriefingShare.briefing_id == briefing_id, BriefingShare.user_id == user_id)
                .order_by(BriefingShare.shared_at)
            )
        ).scalars().all()
        stats.user_platforms_shared = list(platforms)
        stats.user_shared = bool(platforms)
    return stats


async def create_briefing(db: AsyncSession, data: dict[str, Any]) -> DailyBriefing:
    """Create a briefing; one per calendar date."""
    if data.get("theme") not in THEMES:
        raise ValueError(f"Theme must be one of {', '.join(THEMES)}")
    briefing = DailyBriefing(**data)
    if briefing.cycle_day is None:
        briefing.cycle_day = cycle_day(briefing.date)
    db.add(briefing)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise DuplicateBriefingError(f"A briefing already exists for {data['date']}") from None
    return briefing


async def update_briefing_cycle(db: AsyncSession, today: date) -> int:
    """Restart the cycle on its last day.

    On cycle day 365 every briefing is re-dated to start tomorrow, keeping
    its relative order, and ``cycle_day`` is renumbered 1..N. Any other
    day is a no-op. Returns the number of briefings re-dated.
    """
    if cycle_day(today) != CYCLE_LENGTH:
        return 0

    briefings = (
        await db.execute(select(DailyBriefing).order_by(DailyBriefing.date, DailyBriefing.id))
    ).scalars().all()
    if not briefings:
        return 0

    for i, briefing in enumerate(briefings):
        briefing.date = _PARKING_EPOCH + timedelta(days=i)
    await db.flush()

    start = today + timedelta(days=1)
    for i, briefing in enumerate(briefings):
        briefing.date = start + timedelta(days=i)
        briefing.cycle_day = i + 1
    await db.flush()

    logger.info("Briefing cycle restarted: %d briefings from %s", len(briefings), start)
    return len(briefings)
