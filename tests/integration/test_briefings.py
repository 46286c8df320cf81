"""Sgt. Ken's daily briefing: attendance, shares, lookup and rotation."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from conftest import ADMIN_HEADERS, make_briefing
from sfdsa.briefings.service import cycle_day, normalize_platform, update_briefing_cycle
from sfdsa.db.models import DailyBriefing, PointsLog, User


def _today() -> date:
    return datetime.now(timezone.utc).date()


class TestHelpers:
    def test_cycle_day(self):
        assert cycle_day(date(2025, 1, 1)) == 1
        assert cycle_day(date(2025, 12, 31)) == 365
        # day 366 of a leap year wraps to the start of the next cycle
        assert cycle_day(date(2024, 12, 31)) == 1

    def test_normalize_platform(self):
        assert normalize_platform(" Twitter ") == "twitter"
        with pytest.raises(ValueError):
            normalize_platform("bad platform!")


class TestAttendance:
    @pytest.mark.asyncio
    async def test_attend_twice_awards_once(self, client: AsyncClient, db_session, user):
        briefing = await make_briefing(db_session, _today())
        body = {"userId": user.id, "briefingId": briefing.id}

        first = await client.post("/api/daily-briefing/attend", json=body)
        second = await client.post("/api/daily-briefing/attend", json=body)

        assert first.status_code == second.status_code == 200
        assert first.json() == {"success": True, "pointsAwarded": 5, "alreadyAttended": False}
        assert second.json() == {"success": True, "pointsAwarded": 0, "alreadyAttended": True}

        entries = (
            await db_session.execute(select(PointsLog).where(PointsLog.user_id == user.id))
        ).scalars().all()
        assert [e.action for e in entries] == ["daily_briefing_attendance"]

    @pytest.mark.asyncio
    async def test_attend_unknown_briefing(self, client: AsyncClient, user):
        response = await client.post("/api/daily-briefing/attend", json={"userId": user.id, "briefingId": "nope"})
        assert response.status_code == 404


class TestShares:
    @pytest.mark.asyncio
    async def test_share_points_per_platform(self, client: AsyncClient, db_session, user):
        briefing = await make_briefing(db_session, _today())

        async def share(platform: str):
            return await client.post("/api/daily-briefing/share", json={
                "userId": user.id, "briefingId": briefing.id, "platform": platform,
            })

        assert (await share("linkedin")).json()["pointsAwarded"] == 15
        assert (await share("LinkedIn")).json()["alreadyShared"] is True
        assert (await share("email")).json()["pointsAwarded"] == 5
        assert (await share("mastodon")).json()["pointsAwarded"] == 10

        refreshed = await db_session.get(User, user.id, populate_existing=True)
        assert refreshed.participation_count == 30

        actions = (
            await db_session.execute(select(PointsLog.action).where(PointsLog.user_id == user.id))
        ).scalars().all()
        assert "social_share_linkedin" in actions

    @pytest.mark.asyncio
    async def test_invalid_platform(self, client: AsyncClient, db_session, user):
        briefing = await make_briefing(db_session, _today())
        response = await client.post("/api/daily-briefing/share", json={
            "userId": user.id, "briefingId": briefing.id, "platform": "not valid",
        })
        assert response.status_code == 400


class TestTodaysBriefing:
    @pytest.mark.asyncio
    async def test_today_with_stats(self, client: AsyncClient, db_session, user):
        briefing = await make_briefing(db_session, _today())
        await client.post("/api/daily-briefing/attend", json={"userId": user.id, "briefingId": briefing.id})

        data = (await client.get("/api/daily-briefing/today", params={"userId": user.id})).json()
        assert data["briefing"]["id"] == briefing.id
        assert data["stats"]["totalAttendees"] == 1
        assert data["stats"]["userAttended"] is True
        assert data["stats"]["userShared"] is False

    @pytest.mark.asyncio
    async def test_falls_back_to_most_recent(self, client: AsyncClient, db_session):
        await make_briefing(db_session, _today() - timedelta(days=10), title="Older")
        await make_briefing(db_session, _today() - timedelta(days=3), title="Recent")

        data = (await client.get("/api/daily-briefing/today")).json()
        assert data["briefing"]["title"] == "Recent"

    @pytest.mark.asyncio
    async def test_no_briefings(self, client: AsyncClient):
        data = (await client.get("/api/daily-briefing/today")).json()
        assert data["success"] is True
        assert data["briefing"] is None


class TestAdmin:
    @pytest.mark.asyncio
    async def test_create_briefing(self, client: AsyncClient):
        body = {"date": "2026-03-01", "title": "Hold the Line", "theme": "courage"}
        created = await client.post("/api/daily-briefing", json=body, headers=ADMIN_HEADERS)
        assert created.status_code == 201
        assert created.json()["briefing"]["cycleDay"] == 60

        duplicate = await client.post("/api/daily-briefing", json=body, headers=ADMIN_HEADERS)
        assert duplicate.status_code == 409

    @pytest.mark.asyncio
    async def test_create_briefing_bad_theme(self, client: AsyncClient):
        body = {"date": "2026-03-02", "title": "x", "theme": "bravado"}
        response = await client.post("/api/daily-briefing", json=body, headers=ADMIN_HEADERS)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, client: AsyncClient):
        body = {"date": "2026-03-01", "title": "x", "theme": "duty"}
        response = await client.post("/api/daily-briefing", json=body, headers={"X-Admin-Token": "wrong"})
        assert response.status_code == 403


class TestCycleRotation:
    @pytest.mark.asyncio
    async def test_rotation_on_last_day(self, db_session):
        last_day = date(2025, 12, 31)
        for offset, title in [(300, "A"), (200, "B"), (0, "C")]:
            await make_briefing(db_session, last_day - timedelta(days=offset), title=title)

        rotated = await update_briefing_cycle(db_session, last_day)
        await db_session.commit()

        assert rotated == 3
        briefings = (
            await db_session.execute(select(DailyBriefing).order_by(DailyBriefing.date))
        ).scalars().all()
        assert [b.title for b in briefings] == ["A", "B", "C"]
        assert [b.date for b in briefings] == [date(2026, 1, 1), date(2026, 1, 2), date(2026, 1, 3)]
        assert [b.cycle_day for b in briefings] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_other_days_are_noop(self, db_session):
        await make_briefing(db_session, date(2025, 6, 1))
        assert await update_briefing_cycle(db_session, date(2025, 6, 2)) == 0

    @pytest.mark.asyncio
    async def test_cycle_endpoint(self, client: AsyncClient):
        response = await client.post(
            "/api/daily-briefing/cycle", json={"today": "2025-06-02"}, headers=ADMIN_HEADERS,
        )
        assert response.status_code == 200
        assert response.json()["rotated"] == 0
