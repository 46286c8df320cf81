"""Donation points: rule administration and idempotent point awards."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.db.models import DonationPointRule, DonationPoints, User
from sfdsa.db.upsert import insert_ignore
from sfdsa.donations.rules import calculate_points, select_rule, validate_non_overlap
from sfdsa.errors import RuleNotFoundError, UserNotFoundError
from sfdsa.gamification.badge_service import check_and_award_badge
from sfdsa.gamification.catalog import BadgeType, PointsAction
from sfdsa.gamification.points_service import award_points, lock_user

logger = logging.getLogger(__name__)

GENEROUS_DONATION = Decimal("100")
COUNT_MILESTONES: list[tuple[int, BadgeType]] = [
    (5, BadgeType.DONATION_MILESTONE_5),
    (10, BadgeType.DONATION_MILESTONE_10),
    (25, BadgeType.DONATION_MILESTONE_25),
]
AMOUNT_MILESTONES: list[tuple[Decimal, BadgeType]] = [
    (Decimal("250"), BadgeType.DONATION_AMOUNT_250),
    (Decimal("500"), BadgeType.DONATION_AMOUNT_500),
    (Decimal("1000"), BadgeType.DONATION_AMOUNT_1000),
]

_RULE_FIELDS = (
    "name",
    "description",
    "min_amount",
    "max_amount",
    "points_per_dollar",
    "recurring_multiplier",
    "is_active",
    "campaign_id",
)


@dataclass
class DonationAward:
    donation_id: str
    points: int
    duplicate: bool = False
    rule_id: int | None = None
    badges_awarded: list[str] = field(default_factory=list)


# ── Rules ──


async def list_rules(db: AsyncSession, active_only: bool = False) -> list[DonationPointRule]:
    query = select(DonationPointRule).order_by(DonationPointRule.min_amount, DonationPointRule.id)
    if active_only:
        query = query.where(DonationPointRule.is_active.is_(True))
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_rule(db: AsyncSession, data: dict[str, Any]) -> DonationPointRule:
    """Create a rule; an active rule may not overlap another active one."""
    rule = DonationPointRule(**{k: v for k, v in data.items() if k in _RULE_FIELDS})
    if rule.recurring_multiplier is None:
        rule.recurring_multiplier = Decimal("1")
    if rule.is_active is None:
        rule.is_active = True
    if rule.description is None:
        rule.description = ""
    validate_non_overlap(await list_rules(db, active_only=True), rule)

    db.add(rule)
    await db.flush()
    logger.info("Created donation rule %s (%s)", rule.id, rule.name)
    return rule


async def update_rule(db: AsyncSession, rule_id: int, changes: dict[str, Any]) -> DonationPointRule:
    """Apply a partial update, re-validating the resulting range."""
    rule = await db.get(DonationPointRule, rule_id)
    if rule is None:
        raise RuleNotFoundError(f"Donation rule not found: {rule_id}")

    changes = {k: v for k, v in changes.items() if k in _RULE_FIELDS}
    candidate = SimpleNamespace(**{f: getattr(rule, f) for f in _RULE_FIELDS}, id=rule.id)
    for key, value in changes.items():
        setattr(candidate, key, value)
    validate_non_overlap(await list_rules(db, active_only=True), candidate)

    for key, value in changes.items():
        setattr(rule, key, value)
    rule.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return rule


# ── Awards ──


async def award_donation_points(
    db: AsyncSession,
    redis: object,
    user_id: str,
    donation_id: str,
    amount: Decimal,
    is_recurring: bool = False,
) -> DonationAward:
    """Record a donation and award its points exactly once.

    ``donation_id`` is the idempotency key: a replay returns the points
    stored on the first call with ``duplicate=True``. Donation points are
    participation points (logged as ``donation``) and are also tallied in
    ``users.donation_points``.
    """
    amount = Decimal(amount)
    await lock_user(db, user_id)

    rule = select_rule(await list_rules(db, active_only=True), amount)
    points = calculate_points(rule, amount, is_recurring)

    row_id = await insert_ignore(
        db,
        DonationPoints,
        {
            "user_id": user_id,
            "donation_id": donation_id,
            "amount": amount,
            "points": points,
            "is_recurring": is_recurring,
            "rule_id": rule.id if rule else None,
        },
        ["donation_id"],
    )
    if row_id is None:
        existing = (
            await db.execute(select(DonationPoints).where(DonationPoints.donation_id == donation_id))
        ).scalar_one()
        if existing.user_id != user_id:
            logger.warning(
                "Donation %s replayed for user %s but belongs to %s",
                donation_id, user_id, existing.user_id,
            )
        return DonationAward(
            donation_id=donation_id,
            points=existing.points,
            duplicate=True,
            rule_id=existing.rule_id,
        )

    if rule is None:
        logger.warning("No active donation rule covers amount %s (donation %s)", amount, donation_id)

    await award_points(
        db,
        user_id,
        points,
        PointsAction.DONATION.value,
        f"Donation of ${amount:.2f}",
        redis=redis,
    )
    user = await lock_user(db, user_id)
    user.donation_points += points
    await db.flush()

    badges = await _check_donation_badges(db, redis, user_id, amount, is_recurring)
    logger.info("Donation %s awarded %d points to %s", donation_id, points, user_id)
    return DonationAward(
        donation_id=donation_id,
        points=points,
        rule_id=rule.id if rule else None,
        badges_awarded=badges,
    )


async def _check_donation_badges(
    db: AsyncSession,
    redis: object,
    user_id: str,
    amount: Decimal,
    is_recurring: bool,
) -> list[str]:
    """Grant donation badges; returns the newly earned badge types."""
    count, total = (
        await db.execute(
            select(func.count(), func.coalesce(func.sum(DonationPoints.amount), 0))
            .where(DonationPoints.user_id == user_id)
        )
    ).one()
    total = Decimal(str(total))

    candidates: list[BadgeType] = []
    if count >= 1:
        candidates.append(BadgeType.FIRST_DONATION)
    if is_recurring:
        candidates.append(BadgeType.RECURRING_DONOR)
    if amount >= GENEROUS_DONATION:
        candidates.append(BadgeType.GENEROUS_DONOR)
    candidates += [badge for threshold, badge in COUNT_MILESTONES if count >= threshold]
    candidates += [badge for threshold, badge in AMOUNT_MILESTONES if total >= threshold]

    earned = []
    for badge_type in candidates:
        result = await check_and_award_badge(db, redis, user_id, badge_type, points=0)
        if result.awarded:
            earned.append(badge_type.value)
    return earned


# ── Reporting ──


async def get_user_donation_points(db: AsyncSession, user_id: str) -> dict[str, Any]:
    """Donation tally, donation count and lifetime amount for a user."""
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    count, total = (
        await db.execute(
            select(func.count(), func.coalesce(func.sum(DonationPoints.amount), 0))
            .where(DonationPoints.user_id == user_id)
        )
    ).one()
    return {"points": user.donation_points, "donation_count": count, "total_amount": Decimal(str(total))}


async def get_donation_leaderboard(
    db: AsyncSession,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[dict[str, Any]], int]:
    """Donors ranked by donation points."""
    total = (
        await db.execute(select(func.count()).select_from(User).where(User.donation_points > 0))
    ).scalar_one()

    stats = (
        select(
            DonationPoints.user_id,
            func.count().label("donation_count"),
            func.sum(DonationPoints.amount).label("total_amount"),
        )
        .group_by(DonationPoints.user_id)
        .subquery()
    )
    result = await db.execute(
        select(User, stats.c.donation_count, stats.c.total_amount)
        .outerjoin(stats, stats.c.user_id == User.id)
        .where(User.donation_points > 0)
        .order_by(User.donation_points.desc(), User.id)
        .offset(offset)
        .limit(limit)
    )
    rows = [
        {
            "rank": offset + i + 1,
            "user_id": user.id,
            "name": user.name or "Anonymous Donor",
            "donation_points": user.donation_points,
            "donation_count": donation_count or 0,
            "total_amount": Decimal(str(total_amount or 0)),
        }
        for i, (user, donation_count, total_amount) in enumerate(result.all())
    ]
    return rows, total
