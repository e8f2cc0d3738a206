"""Integration tests for plan catalog, health and rate limiting."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestPlans:

    async def test_list_plans(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/plans")

        assert response.status_code == 200
        plans = response.json()
        assert [p["tier"] for p in plans] == ["core", "enhanced", "premium", "business"]
        assert [p["rank"] for p in plans] == [0, 1, 2, 3]

    async def test_get_plan(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/plans/business")

        assert response.status_code == 200
        assert response.json()["name"] == "Business Leader"
        assert response.json()["price_monthly"] == 150

    async def test_unknown_plan(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/plans/enterprise")
        assert response.status_code == 404


class TestHealth:

    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    async def test_health_reports_delivery(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/health")

        delivery = response.json()["delivery"]
        assert delivery["email_provider"] in {"resend", "dev"}
        assert delivery["newsletter_batch_size"] >= 1
        # The test client does not run the app lifespan
        assert delivery["scheduled_publisher"] == "stopped"

    async def test_health_db(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/health/db")
        assert response.json()["database"] == "connected"


class TestRateLimiting:

    async def test_feed_is_rate_limited(self, async_client: AsyncClient):
        for _ in range(60):
            response = await async_client.get("/api/v1/content/feed")
            assert response.status_code == 200

        response = await async_client.get("/api/v1/content/feed")
        assert response.status_code == 429
