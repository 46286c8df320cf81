"""Points, badge and NFT award endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from sfdsa.db.models import User
from sfdsa.gamification.seed import BADGE_SEED_DATA


class TestPointsEndpoints:
    @pytest.mark.asyncio
    async def test_available_actions(self, client: AsyncClient):
        data = (await client.get("/api/points")).json()
        actions = {a["action"]: a["points"] for a in data["availableActions"]}
        assert actions["chat_participation"] == 5
        assert actions["application_submission"] == 500
        assert actions["trivia_game_completion"] == "variable (60-120)"

    @pytest.mark.asyncio
    async def test_award_fixed_action(self, client: AsyncClient, user):
        response = await client.post("/api/points", json={"userId": user.id, "action": "practice_test"})
        assert response.status_code == 200
        data = response.json()
        assert data["pointsAwarded"] == 20
        assert data["totalPoints"] == 20

    @pytest.mark.asyncio
    async def test_application_marks_user(self, client: AsyncClient, db_session, user):
        await client.post("/api/points", json={"userId": user.id, "action": "application_submission"})
        refreshed = await db_session.get(User, user.id, populate_existing=True)
        assert refreshed.has_applied is True
        assert refreshed.participation_count == 500

    @pytest.mark.asyncio
    async def test_variable_action_uses_request_points(self, client: AsyncClient, user):
        response = await client.post(
            "/api/points", json={"userId": user.id, "action": "sgt_ken_game_win", "points": 140},
        )
        assert response.json()["pointsAwarded"] == 140

    @pytest.mark.asyncio
    async def test_negative_variable_points(self, client: AsyncClient, user):
        response = await client.post(
            "/api/points", json={"userId": user.id, "action": "sgt_ken_game_win", "points": -10},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_action(self, client: AsyncClient, user):
        response = await client.post("/api/points", json={"userId": user.id, "action": "hacking"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient):
        response = await client.post("/api/points", json={"userId": "missing"})
        assert response.status_code == 404


class TestBadgeEndpoints:
    @pytest.mark.asyncio
    async def test_catalog(self, client: AsyncClient):
        badges = (await client.get("/api/badges")).json()["badges"]
        assert len(badges) == 30
        assert [b["type"] for b in badges] == [b["type"] for b in BADGE_SEED_DATA]

    @pytest.mark.asyncio
    async def test_award_badge_once(self, client: AsyncClient, user):
        body = {"userId": user.id, "badgeType": "deep-diver", "participationPoints": 40}
        first = (await client.post("/api/award-badge", json=body)).json()
        second = (await client.post("/api/award-badge", json=body)).json()

        assert first["alreadyEarned"] is False
        assert first["pointsAwarded"] == 40
        assert second["alreadyEarned"] is True
        assert second["pointsAwarded"] == 0

    @pytest.mark.asyncio
    async def test_award_badge_catalog_points(self, client: AsyncClient, user):
        body = {"userId": user.id, "badgeType": "full"}
        data = (await client.post("/api/award-badge", json=body)).json()
        assert data["pointsAwarded"] == 200

    @pytest.mark.asyncio
    async def test_unknown_badge(self, client: AsyncClient, user):
        response = await client.post("/api/award-badge", json={"userId": user.id, "badgeType": "wizard"})
        assert response.status_code == 400


class TestNFTAwardEndpoint:
    @pytest.mark.asyncio
    async def test_tiers_ascending(self, client: AsyncClient):
        awards = (await client.get("/api/nft-awards")).json()["awards"]
        assert [a["pointThreshold"] for a in awards] == [1000, 2500, 5000, 10000]
        assert awards[0]["imageUrl"] == "/nft-awards/bronze-recruit.png"
