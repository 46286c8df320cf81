"""User record and profile endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from conftest import make_user
from sfdsa.gamification.badge_service import check_and_award_badge
from sfdsa.gamification.catalog import BadgeType
from sfdsa.gamification.points_service import award_points


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_create(self, client: AsyncClient):
        response = await client.post("/api/users", json={"email": "New.Recruit@Example.com", "name": "New Recruit"})
        assert response.status_code == 201
        user = response.json()["user"]
        assert user["email"] == "new.recruit@example.com"
        assert user["participationCount"] == 0
        assert user["hasApplied"] is False

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client: AsyncClient):
        await client.post("/api/users", json={"email": "dup@example.com"})
        response = await client.post("/api/users", json={"email": "DUP@example.com"})
        assert response.status_code == 409
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_duplicate_id(self, client: AsyncClient):
        first = await client.post("/api/users", json={"email": "a@example.com", "id": "fixed-id"})
        assert first.status_code == 201
        response = await client.post("/api/users", json={"email": "b@example.com", "id": "fixed-id"})
        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "A user with id fixed-id already exists"}

    @pytest.mark.asyncio
    async def test_invalid_email(self, client: AsyncClient):
        response = await client.post("/api/users", json={"email": "nope"})
        assert response.status_code == 400


class TestProfile:
    @pytest.mark.asyncio
    async def test_profile_with_awards_and_rank(self, client: AsyncClient, db_session):
        await make_user(db_session, name="Leader", participation_count=5000)
        user = await make_user(db_session, name="Profile User")
        await award_points(db_session, user.id, 1200, "application_submission")
        await check_and_award_badge(db_session, None, user.id, BadgeType.WRITTEN, points=0)
        await db_session.commit()

        response = await client.get(f"/api/users/{user.id}/profile")
        assert response.status_code == 200
        profile = response.json()["profile"]
        assert profile["participationCount"] == 1200
        assert profile["rank"] == 2
        assert profile["badgeCount"] == 1
        assert profile["badges"][0]["type"] == "written"
        assert profile["nftCount"] == 1
        assert profile["nftAwards"][0]["id"] == "bronze"
        assert profile["nextAward"]["id"] == "silver"
        assert profile["nextAward"]["pointsNeeded"] == 1300
        assert profile["avatarUrl"] == f"/placeholder.svg?height=64&width=64&query=user-{user.id}"

    @pytest.mark.asyncio
    async def test_profile_not_found(self, client: AsyncClient):
        response = await client.get("/api/users/missing/profile")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User not found"}

    @pytest.mark.asyncio
    async def test_update_bio(self, client: AsyncClient, user):
        response = await client.patch(f"/api/users/{user.id}/profile", json={"bio": "Future deputy."})
        assert response.status_code == 200
        assert response.json()["user"]["bio"] == "Future deputy."

    @pytest.mark.asyncio
    async def test_bio_too_long(self, client: AsyncClient, user):
        response = await client.patch(f"/api/users/{user.id}/profile", json={"bio": "x" * 501})
        assert response.status_code == 400
        assert response.json()["message"] == "Bio must be less than 500 characters"


class TestPointsHistoryEndpoint:
    @pytest.mark.asyncio
    async def test_paginated_history(self, client: AsyncClient, db_session, user):
        for _ in range(3):
            await award_points(db_session, user.id, 5, "chat_participation")
        await db_session.commit()

        data = (await client.get(f"/api/users/{user.id}/points", params={"perPage": 2})).json()
        assert data["total"] == 3
        assert len(data["entries"]) == 2
        assert data["perPage"] == 2

    @pytest.mark.asyncio
    async def test_history_unknown_user(self, client: AsyncClient):
        response = await client.get("/api/users/missing/points")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User not found"}
