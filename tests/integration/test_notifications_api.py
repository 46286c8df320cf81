"""Notification endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from sfdsa.gamification.badge_service import check_and_award_badge
from sfdsa.gamification.catalog import BadgeType
from sfdsa.notifications.service import create_notification


class TestNotifications:
    @pytest.mark.asyncio
    async def test_list_and_mark_read(self, client: AsyncClient, db_session, user):
        await check_and_award_badge(db_session, None, user.id, BadgeType.ORAL, points=0)
        await create_notification(db_session, user.id, "system", "Welcome aboard")
        await db_session.commit()

        data = (await client.get("/api/notifications", params={"userId": user.id})).json()
        assert data["total"] == 2
        assert data["unreadCount"] == 2
        badge = next(n for n in data["notifications"] if n["type"] == "badge")
        assert badge["actionUrl"] == "/badge/oral"
        assert badge["metadata"]["badgeName"] == "Oral Board"

        response = await client.post(f"/api/notifications/{badge['id']}/read", params={"userId": user.id})
        assert response.status_code == 200

        unread = (
            await client.get("/api/notifications", params={"userId": user.id, "unreadOnly": "true"})
        ).json()
        assert [n["title"] for n in unread["notifications"]] == ["Welcome aboard"]

        await client.post("/api/notifications/read-all", params={"userId": user.id})
        data = (await client.get("/api/notifications", params={"userId": user.id})).json()
        assert data["unreadCount"] == 0

    @pytest.mark.asyncio
    async def test_mark_other_users_notification(self, client: AsyncClient, db_session, user):
        notification = await create_notification(db_session, user.id, "system", "Private")
        await db_session.commit()

        response = await client.post(f"/api/notifications/{notification.id}/read", params={"userId": "someone-else"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_type_rejected(self, db_session, user):
        with pytest.raises(ValueError):
            await create_notification(db_session, user.id, "spam", "Nope")

    @pytest.mark.asyncio
    async def test_user_id_required(self, client: AsyncClient):
        response = await client.get("/api/notifications")
        assert response.status_code == 400
