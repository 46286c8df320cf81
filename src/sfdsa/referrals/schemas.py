"""Pydantic request/response models for volunteer recruiter endpoints."""

from __future__ import annotations

import datetime as dt

from pydantic import EmailStr, Field

from sfdsa.gamification.schemas import EarnedBadgeResponse, UserNFTAwardResponse
from sfdsa.referrals.pipeline import ReferralStatus
from sfdsa.schemas import CamelModel

# --- Send referral ---


class SendReferralRequest(CamelModel):
    recruiter_id: str = Field(min_length=1)
    message: str = Field(min_length=1, max_length=2000)
    recipient_email: EmailStr | None = None
    recipient_name: str | None = Field(default=None, max_length=128)


class SendReferralResponse(CamelModel):
    success: bool = True
    message: str
    referral_id: str | None = None
    email_sent: bool | None = None
    share_message: str | None = None
    referral_link: str | None = None


# --- Status updates ---


class UpdateReferralStatusRequest(CamelModel):
    status: ReferralStatus


class UpdateReferralStatusResponse(CamelModel):
    success: bool = True
    referral_id: str
    status: ReferralStatus
    progress: int
    points_awarded: int
    badges_awarded: list[str] = []


# --- Dashboard ---


class DashboardReferral(CamelModel):
    id: str
    name: str
    email: str
    status: str
    date: dt.datetime
    progress: int
    points: int


class PointsHistoryPoint(CamelModel):
    date: dt.date
    points: int


class DashboardEvent(CamelModel):
    id: int
    title: str
    description: str | None = None
    date: dt.datetime
    location: str | None = None
    max_attendees: int
    status: str


class DashboardStats(CamelModel):
    total_referrals: int
    pending_referrals: int
    active_referrals: int
    successful_referrals: int
    conversion_rate: int
    total_points: int
    badges_earned: int
    nfts_earned: int


class DashboardData(CamelModel):
    referral_code: str
    referrals: list[DashboardReferral]
    points_history: list[PointsHistoryPoint]
    badges: list[EarnedBadgeResponse]
    nfts: list[UserNFTAwardResponse]
    events: list[DashboardEvent]
    stats: DashboardStats


class DashboardResponse(CamelModel):
    success: bool = True
    data: DashboardData
    source: str
    message: str | None = None
