"""Health, readiness, version and feature flag endpoints."""

import pytest
from httpx import AsyncClient


class TestProbes:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_ready_without_redis(self, client: AsyncClient):
        data = (await client.get("/ready")).json()
        assert data["status"] == "ready"
        assert data["checks"] == {"database": "ok", "redis": "disabled"}

    @pytest.mark.asyncio
    async def test_version(self, client: AsyncClient):
        data = (await client.get("/version")).json()
        assert data["version"] == "0.1.0"


class TestFeatures:
    @pytest.mark.asyncio
    async def test_default_flags(self, client: AsyncClient):
        data = (await client.get("/api/features")).json()
        assert data["features"] == {"leaderboard": True, "badges": True, "points": True, "debug": False}
