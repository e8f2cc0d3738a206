"""Integration tests for content feed, post reads and the author workflow."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestContentFeed:
    """Tests for GET /api/v1/content/feed."""

    async def test_anonymous_feed(self, async_client: AsyncClient, catalog):
        response = await async_client.get("/api/v1/content/feed")

        assert response.status_code == 200
        data = response.json()
        assert [p["slug"] for p in data["items"]] == ["public-post"]
        assert data["total"] == 1

    async def test_premium_feed(self, async_client: AsyncClient, catalog, premium_viewer):
        response = await async_client.get("/api/v1/content/feed", headers=premium_viewer)

        assert response.status_code == 200
        slugs = [p["slug"] for p in response.json()["items"]]
        assert slugs == ["premium-post", "core-post", "subscribers-post", "public-post"]

    async def test_lapsed_subscriber_sees_public_only(
        self, async_client: AsyncClient, catalog, lapsed_viewer
    ):
        response = await async_client.get("/api/v1/content/feed", headers=lapsed_viewer)

        assert [p["slug"] for p in response.json()["items"]] == ["public-post"]

    async def test_admin_sees_everything_published(
        self, async_client: AsyncClient, catalog, admin_headers
    ):
        response = await async_client.get("/api/v1/content/feed", headers=admin_headers)

        slugs = {p["slug"] for p in response.json()["items"]}
        assert slugs == set(catalog) - {"draft-post"}

    async def test_feed_summary_has_no_body(self, async_client: AsyncClient, catalog):
        response = await async_client.get("/api/v1/content/feed")
        assert "content" not in response.json()["items"][0]

    async def test_limit(self, async_client: AsyncClient, catalog, admin_headers):
        response = await async_client.get("/api/v1/content/feed?limit=1", headers=admin_headers)
        assert [p["slug"] for p in response.json()["items"]] == ["business-post"]

    async def test_invalid_token(self, async_client: AsyncClient, catalog):
        response = await async_client.get(
            "/api/v1/content/feed", headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 401


class TestReadPost:
    """Tests for GET /api/v1/content/{slug}."""

    async def test_public_post(self, async_client: AsyncClient, catalog):
        response = await async_client.get("/api/v1/content/public-post")

        assert response.status_code == 200
        assert response.json()["content"] == "Body of public-post"

    async def test_denied_post_says_upgrade_required(self, async_client: AsyncClient, catalog, core_viewer):
        response = await async_client.get("/api/v1/content/premium-post", headers=core_viewer)

        assert response.status_code == 403
        assert response.json() == {"detail": "Upgrade required"}

    async def test_anonymous_subscriber_post(self, async_client: AsyncClient, catalog):
        response = await async_client.get("/api/v1/content/subscribers-post")

        assert response.status_code == 403
        assert response.json()["detail"] == "Upgrade required"

    async def test_tier_at_required_level(self, async_client: AsyncClient, catalog, premium_viewer):
        response = await async_client.get("/api/v1/content/premium-post", headers=premium_viewer)
        assert response.status_code == 200

    async def test_draft_is_not_found(self, async_client: AsyncClient, catalog, admin_headers):
        response = await async_client.get("/api/v1/content/draft-post", headers=admin_headers)
        assert response.status_code == 404

    async def test_unknown_stored_tier_is_denied(
        self, async_client: AsyncClient, make_post, admin_headers
    ):
        await make_post("legacy", visibility="tiered", required_min_tier="enterprise")

        anonymous = await async_client.get("/api/v1/content/legacy")
        admin = await async_client.get("/api/v1/content/legacy", headers=admin_headers)

        assert anonymous.status_code == 403
        assert anonymous.json() == {"detail": "Upgrade required"}
        assert admin.status_code == 403
        assert admin.json() == {"detail": "Upgrade required"}

    async def test_unknown_stored_tier_is_left_out_of_feed(
        self, async_client: AsyncClient, make_post, admin_headers
    ):
        await make_post("legacy", visibility="tiered", required_min_tier="enterprise")

        response = await async_client.get("/api/v1/content/feed", headers=admin_headers)

        assert response.status_code == 200
        assert "legacy" not in [p["slug"] for p in response.json()["items"]]


class TestAuthorWorkflow:
    """Tests for creating and moving posts through their lifecycle."""

    async def test_create_draft(self, async_client: AsyncClient, author_headers, author_id):
        response = await async_client.post(
            "/api/v1/content",
            headers=author_headers,
            json={
                "title": "Medicare Advantage Changes",
                "content": "Details...",
                "visibility": "tiered",
                "required_min_tier": "enhanced",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "medicare-advantage-changes"
        assert data["status"] == "draft"
        assert data["required_min_tier"] == "enhanced"
        assert data["author_id"] == author_id

    async def test_tiered_without_tier_is_rejected(self, async_client: AsyncClient, author_headers):
        response = await async_client.post(
            "/api/v1/content",
            headers=author_headers,
            json={"title": "Oops", "content": "x", "visibility": "tiered"},
        )
        assert response.status_code == 422

    async def test_unknown_tier_is_rejected(self, async_client: AsyncClient, author_headers):
        response = await async_client.post(
            "/api/v1/content",
            headers=author_headers,
            json={
                "title": "Oops",
                "content": "x",
                "visibility": "tiered",
                "required_min_tier": "enterprise",
            },
        )
        assert response.status_code == 422

    async def test_tier_dropped_for_public_post(self, async_client: AsyncClient, author_headers):
        response = await async_client.post(
            "/api/v1/content",
            headers=author_headers,
            json={"title": "Open", "content": "x", "required_min_tier": "core"},
        )
        assert response.status_code == 201
        assert response.json()["required_min_tier"] is None

    async def test_duplicate_slug(self, async_client: AsyncClient, author_headers):
        body = {"title": "Same Title", "content": "x"}
        first = await async_client.post("/api/v1/content", headers=author_headers, json=body)
        second = await async_client.post("/api/v1/content", headers=author_headers, json=body)

        assert first.status_code == 201
        assert second.status_code == 409

    async def test_empty_slug(self, async_client: AsyncClient, author_headers):
        response = await async_client.post(
            "/api/v1/content", headers=author_headers, json={"title": "???", "content": "x"}
        )
        assert response.status_code == 422

    async def test_requires_author_role(self, async_client: AsyncClient, premium_viewer):
        response = await async_client.post(
            "/api/v1/content", headers=premium_viewer, json={"title": "Hi", "content": "x"}
        )
        assert response.status_code == 403

    async def test_requires_authentication(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/content", json={"title": "Hi", "content": "x"})
        assert response.status_code == 401

    async def test_publish_and_unpublish(self, async_client: AsyncClient, author_headers, make_post):
        post = await make_post("my-draft", status="draft")

        published = await async_client.post(
            f"/api/v1/content/{post.id}/publish", headers=author_headers
        )
        assert published.status_code == 200
        assert published.json()["status"] == "published"
        assert published.json()["published_at"] is not None

        feed = await async_client.get("/api/v1/content/feed")
        assert "my-draft" in [p["slug"] for p in feed.json()["items"]]

        unpublished = await async_client.post(
            f"/api/v1/content/{post.id}/unpublish", headers=author_headers
        )
        assert unpublished.status_code == 200
        assert unpublished.json()["status"] == "draft"

    async def test_publish_twice_conflicts(self, async_client: AsyncClient, author_headers, make_post):
        post = await make_post("live-post")

        response = await async_client.post(f"/api/v1/content/{post.id}/publish", headers=author_headers)
        assert response.status_code == 409

    async def test_schedule(self, async_client: AsyncClient, author_headers, make_post):
        post = await make_post("later", status="draft")
        when = datetime.now(UTC) + timedelta(days=2)

        response = await async_client.post(
            f"/api/v1/content/{post.id}/schedule",
            headers=author_headers,
            json={"scheduled_for": when.isoformat()},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "scheduled"

    async def test_schedule_in_past(self, async_client: AsyncClient, author_headers, make_post):
        post = await make_post("later", status="draft")

        response = await async_client.post(
            f"/api/v1/content/{post.id}/schedule",
            headers=author_headers,
            json={"scheduled_for": (datetime.now(UTC) - timedelta(hours=1)).isoformat()},
        )
        assert response.status_code == 422

    async def test_cannot_manage_other_authors_post(
        self, async_client: AsyncClient, author_headers, make_post
    ):
        post = await make_post("someone-elses", status="draft", author_id=str(uuid4()))

        response = await async_client.post(f"/api/v1/content/{post.id}/publish", headers=author_headers)
        assert response.status_code == 404

    async def test_admin_can_manage_any_post(
        self, async_client: AsyncClient, admin_headers, make_post
    ):
        post = await make_post("someone-elses", status="draft", author_id=str(uuid4()))

        response = await async_client.post(f"/api/v1/content/{post.id}/publish", headers=admin_headers)
        assert response.status_code == 200
