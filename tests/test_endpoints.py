"""HTTP tests for the link API and the redirect endpoint."""

import pytest

from shortlinks.core.registry_manager import get_link_registry
from shortlinks.core.setting import settings
from shortlinks.main import app


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthz(self, client):
        response = await client.get("/healthz")

        assert response.status_code == 200
        assert response.json() == {"ok": True, "version": settings.APP_VERSION}


class TestCreateLink:
    """POST /api/links"""

    @pytest.mark.asyncio
    async def test_create_with_code(self, client):
        response = await client.post(
            "/api/links", json={"url": "https://example.com", "code": "abcdef"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["code"] == "abcdef"
        assert body["target_url"] == "https://example.com"
        assert body["total_clicks"] == 0
        assert body["last_clicked_at"] is None
        assert body["short_url"].endswith("/abcdef")
        assert isinstance(body["id"], int)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"url": "https://example.com"}, {"url": "https://example.com", "code": ""}])
    async def test_create_without_code_generates_one(self, client, payload):
        response = await client.post("/api/links", json=payload)

        assert response.status_code == 201
        assert len(response.json()["code"]) == 6

    @pytest.mark.asyncio
    async def test_invalid_url(self, client):
        response = await client.post("/api/links", json={"url": "not-a-url"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid URL"
        assert (await client.get("/api/links")).json() == []

    @pytest.mark.asyncio
    async def test_invalid_code(self, client):
        response = await client.post(
            "/api/links", json={"url": "https://example.com", "code": "ab"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Code must be 6-8 letters/numbers"

    @pytest.mark.asyncio
    async def test_reserved_code(self, client):
        response = await client.post(
            "/api/links", json={"url": "https://example.com", "code": "healthz"}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_code(self, client):
        payload = {"url": "https://example.com", "code": "abc123"}
        first = await client.post("/api/links", json=payload)
        second = await client.post("/api/links", json=payload)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["detail"] == "Code already exists"

    @pytest.mark.asyncio
    async def test_missing_url_is_unprocessable(self, client):
        response = await client.post("/api/links", json={"code": "abc123"})

        assert response.status_code == 422


class TestReadAndDelete:
    """GET/DELETE /api/links"""

    @pytest.mark.asyncio
    async def test_get_link(self, client):
        await client.post("/api/links", json={"url": "https://example.com", "code": "abc123"})

        response = await client.get("/api/links/abc123")

        assert response.status_code == 200
        assert response.json()["target_url"] == "https://example.com"

    @pytest.mark.asyncio
    async def test_get_unknown_link(self, client):
        response = await client.get("/api/links/nope00")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_and_search(self, client):
        await client.post("/api/links", json={"url": "https://example.com/a", "code": "first1"})
        await client.post("/api/links", json={"url": "https://python.org", "code": "second"})

        all_links = await client.get("/api/links")
        searched = await client.get("/api/links", params={"q": "PYTHON"})

        assert [link["code"] for link in all_links.json()] == ["second", "first1"]
        assert [link["code"] for link in searched.json()] == ["second"]

    @pytest.mark.asyncio
    async def test_delete(self, client):
        await client.post("/api/links", json={"url": "https://example.com", "code": "abc123"})

        deleted = await client.delete("/api/links/abc123")
        again = await client.delete("/api/links/abc123")

        assert deleted.status_code == 204
        assert again.status_code == 404
        assert (await client.get("/api/links/abc123")).status_code == 404
        assert (await client.get("/abc123")).status_code == 404


class TestTimestamps:
    """The same link serializes identical timestamps on every endpoint."""

    @pytest.mark.asyncio
    async def test_created_at_matches_between_create_and_get(self, client):
        created = await client.post(
            "/api/links", json={"url": "https://example.com", "code": "abcdef"}
        )
        fetched = await client.get("/api/links/abcdef")
        listed = await client.get("/api/links")

        assert fetched.json()["created_at"] == created.json()["created_at"]
        assert listed.json()[0]["created_at"] == created.json()["created_at"]
        assert created.json()["created_at"].endswith("Z")

    @pytest.mark.asyncio
    async def test_last_clicked_at_has_zone_after_redirect(self, client):
        await client.post("/api/links", json={"url": "https://example.com", "code": "abcdef"})
        await client.get("/abcdef", follow_redirects=False)

        body = (await client.get("/api/links/abcdef")).json()

        assert body["last_clicked_at"].endswith("Z")


class TestRedirect:
    """GET /{code}"""

    @pytest.mark.asyncio
    async def test_redirect_counts_visits(self, client):
        await client.post("/api/links", json={"url": "https://example.com/target", "code": "abcdef"})

        for _ in range(3):
            response = await client.get("/abcdef", follow_redirects=False)
            assert response.status_code == 302
            assert response.headers["location"] == "https://example.com/target"

        stats = (await client.get("/api/links/abcdef")).json()
        assert stats["total_clicks"] == 3
        assert stats["last_clicked_at"] is not None

    @pytest.mark.asyncio
    async def test_unknown_code(self, client):
        response = await client.get("/nope00", follow_redirects=False)

        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/ab", "/waytoolongcode", "/code"])
    async def test_malformed_or_reserved_code(self, client, path):
        response = await client.get(path, follow_redirects=False)

        assert response.status_code == 404


class TestStorageFailure:
    """Storage failures become a generic 500."""

    @pytest.mark.asyncio
    async def test_errors_do_not_leak(self, client, broken_registry):
        app.dependency_overrides[get_link_registry] = lambda: broken_registry

        responses = [
            await client.post("/api/links", json={"url": "https://example.com"}),
            await client.get("/api/links"),
            await client.get("/api/links/abc123"),
            await client.delete("/api/links/abc123"),
            await client.get("/abc123", follow_redirects=False),
        ]

        for response in responses:
            assert response.status_code == 500
            assert response.json() == {"detail": "Server error"}
