"""Referral pipeline: statuses, progress, points and allowed transitions."""

from __future__ import annotations

import secrets
import string
from enum import Enum

from sfdsa.errors import InvalidTransitionError


class ReferralStatus(str, Enum):
    PENDING = "pending"
    CONTACTED = "contacted"
    APPLIED = "applied"
    INTERVIEW = "interview"
    BACKGROUND = "background"
    OFFERED = "offered"
    HIRED = "hired"
    DECLINED = "declined"


# Forward order; DECLINED sits outside the pipeline.
PIPELINE: list[ReferralStatus] = [
    ReferralStatus.PENDING,
    ReferralStatus.CONTACTED,
    ReferralStatus.APPLIED,
    ReferralStatus.INTERVIEW,
    ReferralStatus.BACKGROUND,
    ReferralStatus.OFFERED,
    ReferralStatus.HIRED,
]

STATUS_PROGRESS: dict[ReferralStatus, int] = {
    ReferralStatus.PENDING: 5,
    ReferralStatus.CONTACTED: 15,
    ReferralStatus.APPLIED: 25,
    ReferralStatus.INTERVIEW: 60,
    ReferralStatus.BACKGROUND: 75,
    ReferralStatus.OFFERED: 90,
    ReferralStatus.HIRED: 100,
    ReferralStatus.DECLINED: 0,
}

# Points credited to the recruiter when a referral reaches the status.
STATUS_POINTS: dict[ReferralStatus, int] = {
    ReferralStatus.PENDING: 0,
    ReferralStatus.CONTACTED: 25,
    ReferralStatus.APPLIED: 50,
    ReferralStatus.INTERVIEW: 100,
    ReferralStatus.BACKGROUND: 150,
    ReferralStatus.OFFERED: 300,
    ReferralStatus.HIRED: 500,
    ReferralStatus.DECLINED: 0,
}

TERMINAL = {ReferralStatus.HIRED, ReferralStatus.DECLINED}
ACTIVE = {
    ReferralStatus.CONTACTED,
    ReferralStatus.APPLIED,
    ReferralStatus.INTERVIEW,
    ReferralStatus.BACKGROUND,
}


def can_transition(current: ReferralStatus, target: ReferralStatus) -> bool:
    """Forward-only; stages may be skipped. Declining ends any open referral."""
    if current in TERMINAL:
        return False
    if target is ReferralStatus.DECLINED:
        return True
    return PIPELINE.index(target) > PIPELINE.index(current)


def validate_transition(current: ReferralStatus, target: ReferralStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(f"Cannot move referral from {current.value} to {target.value}")


def conversion_rate(total: int, successful: int) -> int:
    """Hired referrals as a whole-number percentage of all referrals."""
    if total <= 0:
        return 0
    return round(successful / total * 100)


REFERRAL_CODE_LENGTH = 8
_CODE_ALPHABET = string.ascii_uppercase + string.digits


def new_referral_code(prefix: str) -> str:
    """``<prefix>-<8 upper-case alphanumerics>``, stored on the recruiter."""
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH))
    return f"{prefix.upper()}-{suffix}"


def normalize_referral_code(code: str) -> str:
    return code.strip().upper()
