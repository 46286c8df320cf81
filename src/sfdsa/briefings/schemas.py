"""Pydantic request/response models for daily briefing endpoints."""

from __future__ import annotations

import datetime as dt

from pydantic import Field

from sfdsa.schemas import CamelModel


class BriefingResponse(CamelModel):
    id: str
    date: dt.date
    title: str
    theme: str
    content: str
    quote: str | None = None
    quote_author: str | None = None
    sgt_ken_take: str | None = None
    call_to_action: str | None = None
    cycle_day: int


class BriefingStatsResponse(CamelModel):
    total_attendees: int = 0
    total_shares: int = 0
    user_attended: bool = False
    user_shared: bool = False
    user_platforms_shared: list[str] = []


class TodaysBriefingResponse(CamelModel):
    success: bool = True
    briefing: BriefingResponse | None = None
    stats: BriefingStatsResponse | None = None
    cycle_day: int
    message: str | None = None


class AttendRequest(CamelModel):
    user_id: str = Field(min_length=1)
    briefing_id: str = Field(min_length=1)


class AttendResponse(CamelModel):
    success: bool = True
    points_awarded: int
    already_attended: bool


class ShareRequest(CamelModel):
    user_id: str = Field(min_length=1)
    briefing_id: str = Field(min_length=1)
    platform: str = Field(min_length=1, max_length=32)


class ShareResponse(CamelModel):
    success: bool = True
    platform: str
    points_awarded: int
    already_shared: bool


class CreateBriefingRequest(CamelModel):
    date: dt.date
    title: str = Field(min_length=1, max_length=200)
    theme: str
    content: str = ""
    quote: str | None = None
    quote_author: str | None = Field(default=None, max_length=128)
    sgt_ken_take: str | None = None
    call_to_action: str | None = None
    cycle_day: int | None = Field(default=None, ge=1, le=365)


class BriefingEnvelope(CamelModel):
    success: bool = True
    briefing: BriefingResponse


class CycleRequest(CamelModel):
    today: dt.date | None = None


class CycleResponse(CamelModel):
    success: bool = True
    cycle_day: int
    rotated: int
