"""Domain exceptions raised by the service layer.

Routers translate these into HTTP errors; services never raise
HTTPException themselves.
"""

from __future__ import annotations


class EngagementError(Exception):
    """Base class for engagement-domain failures."""


class UserNotFoundError(EngagementError, LookupError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class InvalidPointsError(EngagementError, ValueError):
    """Point amounts must be non-negative integers."""


class DuplicateUserError(EngagementError, ValueError):
    """A user with this email already exists."""


class RuleOverlapError(EngagementError, ValueError):
    """An active donation rule range overlaps another active rule."""


class InvalidRuleError(EngagementError, ValueError):
    """A donation rule has an empty or negative amount range."""


class RuleNotFoundError(EngagementError, LookupError):
    """No donation rule with this id."""


class DuplicateReferralError(EngagementError, ValueError):
    """The recruiter already referred this email address."""


class ReferralNotFoundError(EngagementError, LookupError):
    """No referral with this id."""


class InvalidTransitionError(EngagementError, ValueError):
    """Referral status may only move forward along the pipeline."""


class InvalidReferralCodeError(EngagementError, ValueError):
    """No recruiter holds this referral code."""


class BriefingNotFoundError(EngagementError, LookupError):
    """No daily briefing with this id."""


class DuplicateBriefingError(EngagementError, ValueError):
    """A briefing already exists for this date."""
