"""Pydantic models for the leaderboard."""

from __future__ import annotations

from enum import Enum

from sfdsa.schemas import CamelModel


class LeaderboardCategory(str, Enum):
    PARTICIPATION = "participation"
    BADGES = "badges"
    NFTS = "nfts"
    APPLICATION = "application"


class Timeframe(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ALL_TIME = "all-time"


class LeaderboardSource(str, Enum):
    DATABASE = "database"
    DATABASE_MERGED = "database-merged"
    MOCK_FALLBACK = "mock-fallback"
    ERROR_FALLBACK = "error-fallback"


class LeaderboardEntry(CamelModel):
    id: str
    name: str
    avatar_url: str | None = None
    participation_count: int = 0
    badge_count: int = 0
    nft_count: int = 0
    has_applied: bool = False
    rank: int = 0
    is_current_user: bool = False
    is_placeholder: bool = False


class LeaderboardResponse(CamelModel):
    success: bool = True
    entries: list[LeaderboardEntry]
    total: int
    source: LeaderboardSource
