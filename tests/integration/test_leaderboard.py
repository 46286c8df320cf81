"""Leaderboard composition against the database."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from conftest import make_user
from sfdsa.gamification.badge_service import check_and_award_badge
from sfdsa.gamification.catalog import BadgeType
from sfdsa.leaderboard.schemas import LeaderboardCategory, LeaderboardEntry, LeaderboardSource, Timeframe
from sfdsa.leaderboard.service import get_leaderboard


def _placeholder(i: int, name: str, points: int) -> LeaderboardEntry:
    return LeaderboardEntry(id=f"placeholder-{i}", name=name, participation_count=points, is_placeholder=True)


class TestLeaderboardService:
    @pytest.mark.asyncio
    async def test_search_spans_live_and_placeholders(self, db_session):
        await make_user(db_session, name="Anna Smith", participation_count=300)
        await make_user(db_session, name="Bob Jones", participation_count=200)
        placeholders = [
            _placeholder(1, "John Smith", 1850),
            _placeholder(2, "Maria Garcia", 1620),
            _placeholder(3, "Kate Smithers", 100),
            _placeholder(4, "Lisa Taylor", 240),
            _placeholder(5, "Daniel Anderson", 125),
        ]

        board = await get_leaderboard(db_session, search="Smith", placeholders=placeholders)

        assert [e.name for e in board.entries] == ["John Smith", "Anna Smith", "Kate Smithers"]
        assert [e.rank for e in board.entries] == [1, 2, 3]
        assert board.total == 3
        assert board.source is LeaderboardSource.DATABASE_MERGED

    @pytest.mark.asyncio
    async def test_dense_board_is_pure_database(self, db_session):
        for i, points in enumerate([9000, 8000, 7000]):
            await make_user(db_session, name=f"Deputy {i}", participation_count=points)

        board = await get_leaderboard(db_session, limit=10)

        assert board.source is LeaderboardSource.DATABASE
        assert [e.participation_count for e in board.entries] == [9000, 8000, 7000]

    @pytest.mark.asyncio
    async def test_zero_point_users_excluded(self, db_session):
        await make_user(db_session, name="Lurker", participation_count=0)
        board = await get_leaderboard(db_session, search="Lurker")
        assert board.entries == []

    @pytest.mark.asyncio
    async def test_rank_independent_of_offset(self, db_session):
        for i in range(5):
            await make_user(db_session, name=f"Deputy {i}", participation_count=20000 - i)

        full = await get_leaderboard(db_session, limit=100)
        page = await get_leaderboard(db_session, limit=2, offset=3)

        expected = {e.id: e.rank for e in full.entries}
        assert [e.rank for e in page.entries] == [4, 5]
        assert all(expected[e.id] == e.rank for e in page.entries)

    @pytest.mark.asyncio
    async def test_badge_category_uses_real_counts(self, db_session):
        a = await make_user(db_session, name="Few Points", participation_count=1)
        b = await make_user(db_session, name="Many Points", participation_count=5000)
        for badge in (BadgeType.WRITTEN, BadgeType.ORAL, BadgeType.PHYSICAL):
            await check_and_award_badge(db_session, None, a.id, badge, points=0)
        await db_session.commit()

        board = await get_leaderboard(
            db_session, limit=100, category=LeaderboardCategory.BADGES, placeholders=[],
        )
        assert [e.id for e in board.entries] == [a.id, b.id]
        assert board.entries[0].badge_count == 3

    @pytest.mark.asyncio
    async def test_current_user_flag(self, db_session):
        user = await make_user(db_session, name="Me", participation_count=50)
        board = await get_leaderboard(db_session, search="Me", current_user_id=user.id, placeholders=[])
        assert board.entries[0].is_current_user

    @pytest.mark.asyncio
    async def test_timeframe_limits_to_recent_activity(self, db_session):
        stale = datetime.now(timezone.utc) - timedelta(days=10)
        await make_user(db_session, name="Old Timer", participation_count=900, updated_at=stale)
        await make_user(db_session, name="Fresh Face", participation_count=100)

        weekly = await get_leaderboard(db_session, timeframe=Timeframe.WEEKLY, placeholders=[])
        monthly = await get_leaderboard(db_session, timeframe=Timeframe.MONTHLY, placeholders=[])
        all_time = await get_leaderboard(db_session, timeframe=Timeframe.ALL_TIME, placeholders=[])

        assert [e.name for e in weekly.entries] == ["Fresh Face"]
        assert [e.name for e in monthly.entries] == ["Old Timer", "Fresh Face"]
        assert [e.name for e in all_time.entries] == ["Old Timer", "Fresh Face"]

    @pytest.mark.asyncio
    async def test_database_failure_falls_back(self):
        db = AsyncMock()
        db.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        board = await get_leaderboard(db, limit=5, search="smith")

        assert board.source is LeaderboardSource.MOCK_FALLBACK
        assert [e.name for e in board.entries] == ["John Smith"]

    @pytest.mark.asyncio
    async def test_unexpected_failure_falls_back_unfiltered(self):
        db = AsyncMock()
        db.execute.side_effect = RuntimeError("boom")

        board = await get_leaderboard(db, limit=5, search="smith")

        assert board.source is LeaderboardSource.ERROR_FALLBACK
        assert board.total == 12
        assert len(board.entries) == 5


class TestLeaderboardEndpoint:
    @pytest.mark.asyncio
    async def test_default_board(self, client: AsyncClient):
        response = await client.get("/api/leaderboard")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["source"] == "database-merged"
        assert len(data["entries"]) == 10
        assert data["entries"][0]["isPlaceholder"] is True

    @pytest.mark.asyncio
    async def test_out_of_range_params_are_clamped(self, client: AsyncClient):
        response = await client.get("/api/leaderboard", params={
            "limit": 100000, "offset": -5, "category": "nonsense", "timeframe": "yearly",
        })
        assert response.status_code == 200
        assert response.json()["total"] == 12
        assert response.json()["entries"][0]["rank"] == 1

    @pytest.mark.asyncio
    async def test_overlong_search_is_truncated(self, client: AsyncClient):
        response = await client.get("/api/leaderboard", params={"search": "Smith" + "x" * 200})
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["entries"] == []
