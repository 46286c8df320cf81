"""Middleware and error envelope behaviour."""

import pytest
from httpx import AsyncClient


class TestRequestId:
    @pytest.mark.asyncio
    async def test_generated(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.headers["X-Request-Id"]

    @pytest.mark.asyncio
    async def test_propagated(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-Id": "abc-123"})
        assert response.headers["X-Request-Id"] == "abc-123"


class TestRateLimit:
    @pytest.mark.asyncio
    async def test_passes_through_without_redis(self, client: AsyncClient):
        response = await client.get("/api/badges")
        assert response.status_code == 200
        assert "X-RateLimit-Limit" not in response.headers


class TestErrorEnvelope:
    @pytest.mark.asyncio
    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_validation_error_is_400(self, client: AsyncClient):
        response = await client.post("/api/award-badge", json={"userId": "x"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0]["loc"][-1] == "badgeType"
