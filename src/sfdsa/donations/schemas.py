"""Pydantic request/response models for donation endpoints."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from sfdsa.schemas import CamelModel


class DonationRuleResponse(CamelModel):
    id: int
    name: str
    description: str
    min_amount: float
    max_amount: float | None = None
    points_per_dollar: float
    recurring_multiplier: float
    is_active: bool
    campaign_id: str | None = None
    created_at: datetime
    updated_at: datetime


class DonationRuleListResponse(CamelModel):
    success: bool = True
    rules: list[DonationRuleResponse]


class DonationRuleEnvelope(CamelModel):
    success: bool = True
    rule: DonationRuleResponse


class CreateDonationRuleRequest(CamelModel):
    name: str = Field(min_length=1, max_length=128)
    description: str = ""
    min_amount: Decimal = Field(ge=0)
    max_amount: Decimal | None = None
    points_per_dollar: Decimal = Field(ge=0)
    recurring_multiplier: Decimal = Field(default=Decimal("1"), gt=0)
    is_active: bool = True
    campaign_id: str | None = None


class UpdateDonationRuleRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    description: str | None = None
    min_amount: Decimal | None = Field(default=None, ge=0)
    max_amount: Decimal | None = None
    points_per_dollar: Decimal | None = Field(default=None, ge=0)
    recurring_multiplier: Decimal | None = Field(default=None, gt=0)
    is_active: bool | None = None
    campaign_id: str | None = None


class AwardDonationRequest(CamelModel):
    user_id: str = Field(min_length=1)
    donation_id: str = Field(min_length=1, max_length=128)
    amount: Decimal = Field(gt=0)
    is_recurring: bool = False


class AwardDonationResponse(CamelModel):
    success: bool = True
    donation_id: str
    points: int
    duplicate: bool
    rule_id: int | None = None
    badges_awarded: list[str] = []


class UserDonationPointsResponse(CamelModel):
    success: bool = True
    user_id: str
    points: int
    donation_count: int
    total_amount: float


class DonorEntry(CamelModel):
    rank: int
    user_id: str
    name: str
    donation_points: int
    donation_count: int
    total_amount: float


class DonationLeaderboardResponse(CamelModel):
    success: bool = True
    leaderboard: list[DonorEntry]
    total: int
