"""Post endpoint tests."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from greenlife.models import Post, PostStatus
from tests.conftest import AuthenticatedClient


def post_body(**overrides) -> dict:
    body = {
        "title": "Mangrove Restoration",
        "content": "<p>We restored <strong>4 hectares</strong>.</p>",
        "category": "IMPACT_STORY",
    }
    body.update(overrides)
    return body


class TestPublicReads:
    @pytest.mark.asyncio
    async def test_list_shows_only_published(
        self, client: AsyncClient, published_post: Post, draft_post: Post
    ):
        response = await client.get("/api/posts")
        assert response.status_code == 200
        ids = [p["id"] for p in response.json()["posts"]]
        assert ids == [published_post.id]

    @pytest.mark.asyncio
    async def test_list_includes_author(self, client: AsyncClient, published_post: Post):
        response = await client.get("/api/posts")
        post = response.json()["posts"][0]
        assert post["author"] == {"username": "Admin User", "email": "admin@example.com"}
        assert post["published_at"] is not None

    @pytest.mark.asyncio
    async def test_filter_by_category(self, client: AsyncClient, published_post: Post):
        response = await client.get("/api/posts", params={"category": "CAREER"})
        assert response.json()["posts"] == []

        response = await client.get("/api/posts", params={"category": "blog"})
        assert len(response.json()["posts"]) == 1

    @pytest.mark.asyncio
    async def test_unknown_category_is_rejected(self, client: AsyncClient):
        response = await client.get("/api/posts", params={"category": "NEWS"})
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "category"

    @pytest.mark.asyncio
    async def test_get_published(self, client: AsyncClient, published_post: Post):
        response = await client.get(f"/api/posts/{published_post.id}")
        assert response.status_code == 200
        assert response.json()["post"]["title"] == "Tree Planting Day"

    @pytest.mark.asyncio
    async def test_draft_hidden_from_public(self, client: AsyncClient, draft_post: Post):
        response = await client.get(f"/api/posts/{draft_post.id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_draft_hidden_from_users(
        self, authenticated_client: AuthenticatedClient, draft_post: Post
    ):
        response = await authenticated_client.get(f"/api/posts/{draft_post.id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_draft_visible_to_admin(self, admin_client: AuthenticatedClient, draft_post: Post):
        response = await admin_client.get(f"/api/posts/{draft_post.id}")
        assert response.status_code == 200
        assert response.json()["post"]["status"] == "DRAFT"

    @pytest.mark.asyncio
    async def test_missing_post(self, client: AsyncClient):
        response = await client.get("/api/posts/does-not-exist")
        assert response.status_code == 404
        assert response.json()["detail"] == "Post not found"


class TestCreatePost:
    @pytest.mark.asyncio
    async def test_create_defaults_to_draft(self, admin_client: AuthenticatedClient):
        response = await admin_client.post("/api/posts", json=post_body())
        assert response.status_code == 201
        post = response.json()["post"]
        assert post["status"] == "DRAFT"
        assert post["published_at"] is None
        assert post["author"]["email"] == "admin@example.com"

    @pytest.mark.asyncio
    async def test_create_published(self, admin_client: AuthenticatedClient):
        response = await admin_client.post("/api/posts", json=post_body(status="PUBLISHED"))
        assert response.status_code == 201
        assert response.json()["post"]["published_at"] is not None

    @pytest.mark.asyncio
    async def test_create_sanitizes_content(self, admin_client: AuthenticatedClient):
        response = await admin_client.post(
            "/api/posts",
            json=post_body(content='<p>Hi</p><script>alert("x")</script>'),
        )
        assert "<script>" not in response.json()["post"]["content"]

    @pytest.mark.asyncio
    async def test_create_career_post(self, admin_client: AuthenticatedClient):
        response = await admin_client.post(
            "/api/posts",
            json=post_body(
                category="CAREER",
                apply_url="https://jobs.example.org/42",
                location="Kampala",
                deadline="2026-12-31T17:00:00Z",
            ),
        )
        assert response.status_code == 201
        post = response.json()["post"]
        assert post["apply_url"] == "https://jobs.example.org/42"
        assert post["location"] == "Kampala"

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, authenticated_client: AuthenticatedClient):
        response = await authenticated_client.post("/api/posts", json=post_body())
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_create_requires_auth(self, client: AsyncClient):
        response = await client.post("/api/posts", json=post_body())
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_validation(self, admin_client: AuthenticatedClient):
        response = await admin_client.post(
            "/api/posts",
            json={"title": "", "content": "", "category": "NEWS", "featured_image": "nope"},
        )
        assert response.status_code == 422
        fields = {e["field"] for e in response.json()["errors"]}
        assert {"title", "content", "category", "featured_image"} <= fields


class TestUpdatePost:
    @pytest.mark.asyncio
    async def test_update_replaces_content_keeps_status(
        self, admin_client: AuthenticatedClient, published_post: Post
    ):
        response = await admin_client.put(
            f"/api/posts/{published_post.id}",
            json=post_body(title="Tree Planting Day (updated)", category="BLOG"),
        )
        assert response.status_code == 200
        post = response.json()["post"]
        assert post["title"] == "Tree Planting Day (updated)"
        assert post["status"] == "PUBLISHED"
        assert post["published_at"] is not None

    @pytest.mark.asyncio
    async def test_update_missing(self, admin_client: AuthenticatedClient):
        response = await admin_client.put("/api/posts/nope", json=post_body())
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_requires_admin(
        self, authenticated_client: AuthenticatedClient, published_post: Post
    ):
        response = await authenticated_client.put(
            f"/api/posts/{published_post.id}", json=post_body()
        )
        assert response.status_code == 403


class TestStatusTransitions:
    @pytest.mark.asyncio
    async def test_publish_draft(
        self, admin_client: AuthenticatedClient, draft_post: Post, session: AsyncSession
    ):
        response = await admin_client.put(
            f"/api/posts/{draft_post.id}/status", json={"status": "PUBLISHED"}
        )
        assert response.status_code == 200
        post = response.json()["post"]
        assert post["status"] == "PUBLISHED"
        assert post["published_at"] is not None

        await session.refresh(draft_post)
        assert draft_post.status == PostStatus.PUBLISHED
        assert draft_post.published_at is not None

    @pytest.mark.asyncio
    async def test_unpublish_clears_published_at(
        self, admin_client: AuthenticatedClient, published_post: Post
    ):
        response = await admin_client.put(
            f"/api/posts/{published_post.id}/status", json={"status": "DRAFT"}
        )
        post = response.json()["post"]
        assert post["status"] == "DRAFT"
        assert post["published_at"] is None

    @pytest.mark.asyncio
    async def test_invalid_status(self, admin_client: AuthenticatedClient, draft_post: Post):
        response = await admin_client.put(
            f"/api/posts/{draft_post.id}/status", json={"status": "ARCHIVED"}
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_status_requires_admin(
        self, authenticated_client: AuthenticatedClient, draft_post: Post
    ):
        response = await authenticated_client.put(
            f"/api/posts/{draft_post.id}/status", json={"status": "PUBLISHED"}
        )
        assert response.status_code == 403


class TestAdminListing:
    @pytest.mark.asyncio
    async def test_lists_drafts(
        self, admin_client: AuthenticatedClient, published_post: Post, draft_post: Post
    ):
        response = await admin_client.get("/api/admin/posts")
        assert response.status_code == 200
        ids = {p["id"] for p in response.json()["posts"]}
        assert ids == {published_post.id, draft_post.id}

    @pytest.mark.asyncio
    async def test_filter_by_status(
        self, admin_client: AuthenticatedClient, published_post: Post, draft_post: Post
    ):
        response = await admin_client.get("/api/admin/posts", params={"status": "DRAFT"})
        assert [p["id"] for p in response.json()["posts"]] == [draft_post.id]


@pytest.mark.asyncio
async def test_categories(client: AsyncClient):
    response = await client.get("/api/categories")
    assert response.status_code == 200
    categories = response.json()["categories"]
    assert {"id": "IMPACT_STORY", "name": "Impact Story", "value": "IMPACT_STORY"} in categories
    assert len(categories) == 5
