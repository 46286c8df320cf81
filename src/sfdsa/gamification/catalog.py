"""Badge types, point actions and NFT award tiers.

These values MUST match the frontend badge gallery and points explainer.
"""

from __future__ import annotations

from enum import Enum


class BadgeType(str, Enum):
    # Application preparation
    WRITTEN = "written"
    ORAL = "oral"
    PHYSICAL = "physical"
    POLYGRAPH = "polygraph"
    PSYCHOLOGICAL = "psychological"
    FULL = "full"
    # Participation
    CHAT_PARTICIPATION = "chat-participation"
    FIRST_RESPONSE = "first-response"
    APPLICATION_STARTED = "application-started"
    APPLICATION_COMPLETED = "application-completed"
    FREQUENT_USER = "frequent-user"
    RESOURCE_DOWNLOADER = "resource-downloader"
    HARD_CHARGER = "hard-charger"
    CONNECTOR = "connector"
    DEEP_DIVER = "deep-diver"
    QUICK_LEARNER = "quick-learner"
    PERSISTENT_EXPLORER = "persistent-explorer"
    DEDICATED_APPLICANT = "dedicated-applicant"
    # Donations
    FIRST_DONATION = "first-donation"
    RECURRING_DONOR = "recurring-donor"
    GENEROUS_DONOR = "generous-donor"
    DONATION_MILESTONE_5 = "donation-milestone-5"
    DONATION_MILESTONE_10 = "donation-milestone-10"
    DONATION_MILESTONE_25 = "donation-milestone-25"
    DONATION_AMOUNT_250 = "donation-amount-250"
    DONATION_AMOUNT_500 = "donation-amount-500"
    DONATION_AMOUNT_1000 = "donation-amount-1000"
    # Volunteer recruiters
    SUCCESSFUL_RECRUITER = "successful-recruiter"
    ACTIVE_RECRUITER = "active-recruiter"
    EXPERT_RECRUITER = "expert-recruiter"


class PointsAction(str, Enum):
    PROFILE_COMPLETION = "profile_completion"
    EMAIL_VERIFICATION = "email_verification"
    APPLICATION_SUBMISSION = "application_submission"
    ACHIEVEMENT = "achievement"
    BADGE_EARNED = "badge_earned"
    DAILY_BRIEFING_ATTENDANCE = "daily_briefing_attendance"
    SGT_KEN_GAME_WIN = "sgt_ken_game_win"
    CHAT_PARTICIPATION = "chat_participation"
    CONTACT_FORM_SUBMISSION = "contact_form_submission"
    RESOURCE_DOWNLOAD = "resource_download"
    PRACTICE_TEST = "practice_test"
    REFERRAL = "referral"
    REFERRAL_SENT = "referral_sent"
    DEPUTY_SKILLS_TEST = "deputy_skills_test"
    TRIVIA_GAME_COMPLETION = "trivia_game_completion"
    TIKTOK_CHALLENGE_SUBMISSION = "tiktok_challenge_submission"
    DONATION = "donation"


# Fixed awards for POST /api/points
ACTION_POINTS: dict[PointsAction, int] = {
    PointsAction.CHAT_PARTICIPATION: 5,
    PointsAction.CONTACT_FORM_SUBMISSION: 10,
    PointsAction.RESOURCE_DOWNLOAD: 10,
    PointsAction.PRACTICE_TEST: 20,
    PointsAction.REFERRAL: 50,
    PointsAction.APPLICATION_SUBMISSION: 500,
}

# Awards computed by the caller (game score, challenge type, ...)
VARIABLE_POINT_ACTIONS: dict[PointsAction, str] = {
    PointsAction.BADGE_EARNED: "variable",
    PointsAction.SGT_KEN_GAME_WIN: "variable (100-220)",
    PointsAction.DEPUTY_SKILLS_TEST: "variable (100-220)",
    PointsAction.TRIVIA_GAME_COMPLETION: "variable (60-120)",
    PointsAction.TIKTOK_CHALLENGE_SUBMISSION: "variable (125-200)",
}

SOCIAL_SHARE_PREFIX = "social_share_"


def social_share_action(platform: str) -> str:
    """Points log action for a share on ``platform``."""
    return f"{SOCIAL_SHARE_PREFIX}{platform}"


NFT_AWARD_TIERS: list[dict] = [
    {
        "id": "bronze",
        "tier": 1,
        "name": "Bronze Recruit",
        "description": "Awarded for reaching 1,000 participation points",
        "point_threshold": 1000,
        "image_url": "/nft-awards/bronze-recruit.png",
    },
    {
        "id": "silver",
        "tier": 2,
        "name": "Silver Recruit",
        "description": "Awarded for reaching 2,500 participation points",
        "point_threshold": 2500,
        "image_url": "/nft-awards/silver-recruit.png",
    },
    {
        "id": "gold",
        "tier": 3,
        "name": "Gold Recruit",
        "description": "Awarded for reaching 5,000 participation points",
        "point_threshold": 5000,
        "image_url": "/nft-awards/gold-recruit.png",
    },
    {
        "id": "platinum",
        "tier": 4,
        "name": "Platinum Recruit",
        "description": "Awarded for reaching 10,000 participation points",
        "point_threshold": 10000,
        "image_url": "/nft-awards/platinum-recruit.png",
    },
]
