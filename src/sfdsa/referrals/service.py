"""Volunteer recruiter referrals, stats and dashboard."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.config import get_settings
from sfdsa.db.models import RecruiterActivity, RecruiterStats, User, VolunteerEvent, VolunteerReferral
from sfdsa.db.upsert import insert_ignore
from sfdsa.email.service import EmailService
from sfdsa.errors import (
    DuplicateReferralError,
    InvalidReferralCodeError,
    ReferralNotFoundError,
    UserNotFoundError,
)
from sfdsa.gamification.badge_service import check_and_award_badge, get_user_badges
from sfdsa.gamification.catalog import BadgeType
from sfdsa.gamification.nft_service import get_user_nft_awards
from sfdsa.referrals.pipeline import (
    ACTIVE,
    STATUS_POINTS,
    STATUS_PROGRESS,
    ReferralStatus,
    conversion_rate,
    new_referral_code,
    normalize_referral_code,
    validate_transition,
)

logger = logging.getLogger(__name__)

REFERRAL_SENT_POINTS = STATUS_POINTS[ReferralStatus.CONTACTED]
CODE_ATTEMPTS = 5
ACTIVITY_BADGES: list[tuple[int, BadgeType]] = [
    (10, BadgeType.ACTIVE_RECRUITER),
    (50, BadgeType.EXPERT_RECRUITER),
]
HISTORY_DAYS = 30
DASHBOARD_REFERRALS = 20
DASHBOARD_EVENTS = 5

SHARE_MESSAGE = """\
Hi! I'm {recruiter_name}, a volunteer recruiter for the San Francisco Sheriff's Department.

{message}

If you're interested in a meaningful career in law enforcement with excellent benefits and training, I'd love to tell you more about opportunities with SFSD.

Check out: {site_url}

#SFSheriff #LawEnforcementCareers #SanFranciscoJobs"""


@dataclass
class ReferralSent:
    referral: VolunteerReferral
    email_sent: bool


@dataclass
class ReferralUpdate:
    referral: VolunteerReferral
    points_awarded: int
    badges_awarded: list[str] = field(default_factory=list)


def recruiter_display_name(user: User) -> str:
    return user.name or "Volunteer Recruiter"


def referral_link(code: str) -> str:
    return f"{get_settings().site_url}/register?ref={code}"


async def ensure_referral_code(db: AsyncSession, user: User) -> str:
    """The recruiter's stored referral code, issued on first use."""
    if user.referral_code:
        return user.referral_code
    prefix = get_settings().referral_code_prefix
    for _ in range(CODE_ATTEMPTS):
        code = new_referral_code(prefix)
        taken = (
            await db.execute(select(User.id).where(User.referral_code == code))
        ).scalar_one_or_none()
        if taken is None:
            user.referral_code = code
            await db.flush()
            return code
    raise RuntimeError(f"Could not issue a unique referral code for {user.id}")


async def find_recruiter_by_code(db: AsyncSession, code: str) -> User:
    recruiter = (
        await db.execute(select(User).where(User.referral_code == normalize_referral_code(code)))
    ).scalar_one_or_none()
    if recruiter is None:
        raise InvalidReferralCodeError("Invalid referral code")
    return recruiter


async def build_share_payload(db: AsyncSession, recruiter: User, message: str) -> dict[str, str]:
    """Share text and referral link for social posting (no recipient)."""
    code = await ensure_referral_code(db, recruiter)
    return {
        "share_message": SHARE_MESSAGE.format(
            recruiter_name=recruiter_display_name(recruiter),
            message=message,
            site_url=get_settings().site_url,
        ),
        "referral_link": referral_link(code),
    }


async def get_recruiter(db: AsyncSession, recruiter_id: str) -> User:
    user = await db.get(User, recruiter_id)
    if user is None:
        raise UserNotFoundError(recruiter_id)
    return user


async def _credit_recruiter(
    db: AsyncSession,
    redis: object,
    recruiter_id: str,
    activity_type: str,
    points: int,
    description: str,
    referral_id: str | None = None,
    referrals: int = 0,
    successful: int = 0,
) -> list[str]:
    """Upsert recruiter stats, log the activity and grant activity badges."""
    now = datetime.now(timezone.utc)
    await insert_ignore(db, RecruiterStats, {"user_id": recruiter_id}, ["user_id"])
    stats = await db.get(RecruiterStats, recruiter_id, with_for_update=True, populate_existing=True)
    stats.referrals_count += referrals
    stats.successful_referrals += successful
    stats.total_points += points
    stats.last_active = now
    stats.updated_at = now

    db.add(RecruiterActivity(
        recruiter_id=recruiter_id,
        activity_type=activity_type,
        points=points,
        description=description,
        referral_id=referral_id,
        created_at=now,
    ))
    await db.flush()

    activity_count = (
        await db.execute(
            select(func.count())
            .select_from(RecruiterActivity)
            .where(RecruiterActivity.recruiter_id == recruiter_id)
        )
    ).scalar_one()

    earned = []
    for threshold, badge_type in ACTIVITY_BADGES:
        if activity_count >= threshold:
            result = await check_and_award_badge(db, redis, recruiter_id, badge_type, points=0)
            if result.awarded:
                earned.append(badge_type.value)
    return earned


async def send_referral(
    db: AsyncSession,
    email_service: EmailService,
    recruiter_id: str,
    recipient_email: str,
    recipient_name: str | None,
    message: str,
    redis: object = None,
) -> ReferralSent:
    """Record a referral and email the candidate.

    The referral, stats and activity are committed before the email goes
    out; a failed email is logged and the referral is kept.
    """
    recruiter = await get_recruiter(db, recruiter_id)
    email = recipient_email.strip().lower()

    referral_id = await insert_ignore(
        db,
        VolunteerReferral,
        {
            "recruiter_id": recruiter_id,
            "referral_email": email,
            "referral_name": recipient_name,
            "status": ReferralStatus.CONTACTED.value,
            "notes": message,
        },
        ["recruiter_id", "referral_email"],
    )
    if referral_id is None:
        raise DuplicateReferralError(f"Referral already sent to {email}")

    await _credit_recruiter(
        db,
        redis,
        recruiter_id,
        "referral_sent",
        REFERRAL_SENT_POINTS,
        "Sent referral to potential candidate",
        referral_id=referral_id,
        referrals=1,
    )
    code = await ensure_referral_code(db, recruiter)
    await db.commit()
    referral = await db.get(VolunteerReferral, referral_id)

    try:
        email_sent = await email_service.send_referral(
            email,
            recipient_name,
            recruiter_display_name(recruiter),
            message,
            referral_link(code),
        )
    except Exception:
        logger.warning("Referral email to %s failed", email, exc_info=True)
        email_sent = False

    logger.info("Recruiter %s referred %s (email_sent=%s)", recruiter_id, email, email_sent)
    return ReferralSent(referral=referral, email_sent=email_sent)


async def update_referral_status(
    db: AsyncSession,
    redis: object,
    referral_id: str,
    status: ReferralStatus | str,
) -> ReferralUpdate:
    """Advance a referral and credit the recruiter with the new status's points."""
    target = ReferralStatus(status)
    referral = await db.get(VolunteerReferral, referral_id, with_for_update=True, populate_existing=True)
    if referral is None:
        raise ReferralNotFoundError(f"Referral not found: {referral_id}")

    validate_transition(ReferralStatus(referral.status), target)
    referral.status = target.value
    referral.updated_at = datetime.now(timezone.utc)

    points = STATUS_POINTS[target]
    hired = target is ReferralStatus.HIRED
    badges = await _credit_recruiter(
        db,
        redis,
        referral.recruiter_id,
        f"referral_{target.value}",
        points,
        f"Referral moved to {target.value}",
        referral_id=referral.id,
        successful=1 if hired else 0,
    )
    if hired:
        result = await check_and_award_badge(
            db, redis, referral.recruiter_id, BadgeType.SUCCESSFUL_RECRUITER, points=0,
        )
        if result.awarded:
            badges.append(BadgeType.SUCCESSFUL_RECRUITER.value)

    logger.info("Referral %s -> %s (+%d points)", referral_id, target.value, points)
    return ReferralUpdate(referral=referral, points_awarded=points, badges_awarded=badges)


async def record_referral_signup(
    db: AsyncSession,
    redis: object,
    recruiter: User,
    recruit: User,
) -> ReferralUpdate:
    """Attribute a registration made through ``recruiter``'s referral link.

    The recruit's referral is created as ``contacted`` when the recruiter
    never emailed them, or advanced from ``pending``. The recruiter is
    credited only when the status actually moves.
    """
    recruit.referred_by = recruiter.id
    points = STATUS_POINTS[ReferralStatus.CONTACTED]

    referral_id = await insert_ignore(
        db,
        VolunteerReferral,
        {
            "recruiter_id": recruiter.id,
            "referral_email": recruit.email,
            "referral_name": recruit.name,
            "status": ReferralStatus.CONTACTED.value,
            "notes": "Registered through referral link",
        },
        ["recruiter_id", "referral_email"],
    )
    if referral_id is not None:
        badges = await _credit_recruiter(
            db,
            redis,
            recruiter.id,
            "referral_signed_up",
            points,
            "Candidate registered through referral link",
            referral_id=referral_id,
            referrals=1,
        )
        referral = await db.get(VolunteerReferral, referral_id)
        logger.info("Recruit %s registered via %s's link", recruit.id, recruiter.id)
        return ReferralUpdate(referral=referral, points_awarded=points, badges_awarded=badges)

    referral = (
        await db.execute(
            select(VolunteerReferral)
            .where(
                VolunteerReferral.recruiter_id == recruiter.id,
                VolunteerReferral.referral_email == recruit.email,
            )
            .with_for_update()
        )
    ).scalar_one()
    if referral.status != ReferralStatus.PENDING.value:
        return ReferralUpdate(referral=referral, points_awarded=0)

    referral.status = ReferralStatus.CONTACTED.value
    referral.updated_at = datetime.now(timezone.utc)
    badges = await _credit_recruiter(
        db,
        redis,
        recruiter.id,
        "referral_signed_up",
        points,
        "Candidate registered through referral link",
        referral_id=referral.id,
    )
    logger.info("Recruit %s registered via %s's link", recruit.id, recruiter.id)
    return ReferralUpdate(referral=referral, points_awarded=points, badges_awarded=badges)


# ── Dashboard ──


def _points_history(activities: list[RecruiterActivity], today: date) -> list[dict[str, Any]]:
    """30 daily buckets ending today, oldest first."""
    buckets = {today - timedelta(days=i): 0 for i in range(HISTORY_DAYS)}
    for activity in activities:
        day = activity.created_at.date()
        if day in buckets:
            buckets[day] += activity.points
    return [{"date": day.isoformat(), "points": buckets[day]} for day in sorted(buckets)]


def empty_dashboard(referral_code: str = "") -> dict[str, Any]:
    today = datetime.now(timezone.utc).date()
    return {
        "referral_code": referral_code,
        "referrals": [],
        "points_history": _points_history([], today),
        "badges": [],
        "nfts": [],
        "events": [],
        "stats": {
            "total_referrals": 0,
            "pending_referrals": 0,
            "active_referrals": 0,
            "successful_referrals": 0,
            "conversion_rate": 0,
            "total_points": 0,
            "badges_earned": 0,
            "nfts_earned": 0,
        },
    }


async def _load_dashboard(db: AsyncSession, user_id: str, now: datetime) -> dict[str, Any]:
    today = now.date()
    user = await db.get(User, user_id)
    code = await ensure_referral_code(db, user) if user is not None else ""
    stats = await db.get(RecruiterStats, user_id)

    referrals = (
        await db.execute(
            select(VolunteerReferral)
            .where(VolunteerReferral.recruiter_id == user_id)
            .order_by(VolunteerReferral.created_at.desc())
            .limit(DASHBOARD_REFERRALS)
        )
    ).scalars().all()

    status_counts = dict(
        (
            await db.execute(
                select(VolunteerReferral.status, func.count())
                .where(VolunteerReferral.recruiter_id == user_id)
                .group_by(VolunteerReferral.status)
            )
        ).all()
    )

    since = now - timedelta(days=HISTORY_DAYS)
    activities = (
        await db.execute(
            select(RecruiterActivity).where(
                RecruiterActivity.recruiter_id == user_id,
                RecruiterActivity.created_at >= since,
            )
        )
    ).scalars().all()

    events = (
        await db.execute(
            select(VolunteerEvent)
            .where(VolunteerEvent.start_time >= now)
            .order_by(VolunteerEvent.start_time)
            .limit(DASHBOARD_EVENTS)
        )
    ).scalars().all()

    badges = await get_user_badges(db, user_id)
    nfts = await get_user_nft_awards(db, user_id)

    total = stats.referrals_count if stats else 0
    successful = stats.successful_referrals if stats else 0
    return {
        "referral_code": code,
        "referrals": [
            {
                "id": r.id,
                "name": r.referral_name or "Unknown",
                "email": r.referral_email,
                "status": r.status,
                "date": r.created_at,
                "progress": STATUS_PROGRESS[ReferralStatus(r.status)],
                "points": STATUS_POINTS[ReferralStatus(r.status)],
            }
            for r in referrals
        ],
        "points_history": _points_history(list(activities), today),
        "badges": badges,
        "nfts": nfts,
        "events": [
            {
                "id": e.id,
                "title": e.title,
                "description": e.description,
                "date": e.start_time,
                "location": e.location,
                "max_attendees": e.max_participants,
                "status": "upcoming",
            }
            for e in events
        ],
        "stats": {
            "total_referrals": total,
            "pending_referrals": status_counts.get(ReferralStatus.PENDING.value, 0),
            "active_referrals": sum(status_counts.get(s.value, 0) for s in ACTIVE),
            "successful_referrals": successful,
            "conversion_rate": conversion_rate(total, successful),
            "total_points": stats.total_points if stats else 0,
            "badges_earned": len(badges),
            "nfts_earned": len(nfts),
        },
    }


async def get_dashboard(db: AsyncSession, user_id: str) -> tuple[dict[str, Any], str]:
    """Recruiter dashboard data and its source (``database`` or ``fallback``)."""
    try:
        return await _load_dashboard(db, user_id, datetime.now(timezone.utc)), "database"
    except SQLAlchemyError:
        logger.warning("Recruiter dashboard query failed for %s", user_id, exc_info=True)
        return empty_dashboard(), "fallback"
