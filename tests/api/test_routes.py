"""Tests for the HTTP endpoints."""

from unittest.mock import patch

import pytest

from shortener.db.base import DatabaseHealthCheck
from shortener.repositories.base import RepositoryError
from shortener.repositories.url_repository import URLRepository
from tests.utils import create_test_mapping, create_test_user


@pytest.mark.api
class TestIndex:

    @pytest.mark.asyncio
    async def test_index(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.text == "Hello, world! :D"
        assert "X-Request-ID" in response.headers


@pytest.mark.api
class TestShortenEndpoint:

    @pytest.mark.asyncio
    async def test_shorten(self, client):
        response = await client.post("/shorten", json={"url": "http://example.com/page"})

        assert response.status_code == 200
        data = response.json()
        assert len(data["short_code"]) == 6
        assert data["short_url"] == f"http://testserver/{data['short_code']}"

    @pytest.mark.asyncio
    async def test_shorten_twice_same_code(self, client):
        first = await client.post("/shorten", json={"url": "https://a.com"})
        second = await client.post("/shorten", json={"url": "http://a.com"})

        assert first.json()["short_code"] == second.json()["short_code"]

    @pytest.mark.asyncio
    async def test_shorten_empty_url(self, client):
        response = await client.post("/shorten", json={"url": ""})

        assert response.status_code == 400
        assert response.json() == {"detail": "Please provide a URL."}

    @pytest.mark.asyncio
    async def test_shorten_missing_url(self, client):
        response = await client.post("/shorten", json={})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_shorten_store_error(self, client):
        with patch.object(URLRepository, "check_short_code_exists", side_effect=RepositoryError("down")):
            response = await client.post("/shorten", json={"url": "example.com"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Database error."}


@pytest.mark.api
class TestRedirectEndpoint:

    @pytest.mark.asyncio
    async def test_redirect(self, client, test_db):
        await create_test_mapping(test_db, short_code="abc123", original_url="example.com/page")

        response = await client.get("/abc123")

        assert response.status_code == 303
        assert response.headers["location"] == "https://example.com/page"

    @pytest.mark.asyncio
    async def test_redirect_after_shorten(self, client):
        created = await client.post("/shorten", json={"url": "http://example.com/x"})

        response = await client.get(f"/{created.json()['short_code']}")

        assert response.status_code == 303
        assert response.headers["location"] == "https://example.com/x"

    @pytest.mark.asyncio
    async def test_redirect_unknown_code(self, client):
        response = await client.get("/nocode")

        assert response.status_code == 404
        assert response.json() == {"detail": "No URL assigned to that shortcode."}

    @pytest.mark.asyncio
    async def test_redirect_store_error(self, client):
        with patch.object(URLRepository, "find_by_code", side_effect=RepositoryError("down")):
            response = await client.get("/abc123")

        assert response.status_code == 404


@pytest.mark.api
class TestDeleteEndpoint:

    @pytest.mark.asyncio
    async def test_delete(self, client, test_db):
        await create_test_user(test_db, username="admin", password="secret")
        await create_test_mapping(test_db, short_code="delete", original_url="example.com")

        response = await client.request(
            "DELETE", "/delete", json={"username": "admin", "password": "secret"}
        )

        assert response.status_code == 200
        assert response.json() == {"detail": "Short code deleted."}
        assert (await client.get("/delete")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_wrong_password(self, client, test_db):
        await create_test_user(test_db, username="admin", password="secret")
        await create_test_mapping(test_db, short_code="keepme", original_url="example.com")

        response = await client.request(
            "DELETE", "/keepme", json={"username": "admin", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json() == {"detail": "Wrong username and, or password."}
        assert (await client.get("/keepme")).status_code == 303

    @pytest.mark.asyncio
    async def test_delete_unknown_code(self, client, test_db):
        await create_test_user(test_db, username="admin", password="secret")

        response = await client.request(
            "DELETE", "/nocode", json={"username": "admin", "password": "secret"}
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "Unable to find or delete the shortcode."}

    @pytest.mark.asyncio
    async def test_delete_missing_credentials(self, client):
        response = await client.request("DELETE", "/abc123", json={"username": "admin"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete_store_error(self, client, test_db):
        await create_test_user(test_db, username="admin", password="secret")

        with patch.object(URLRepository, "delete_by_code", side_effect=RepositoryError("down")):
            response = await client.request(
                "DELETE", "/abc123", json={"username": "admin", "password": "secret"}
            )

        assert response.status_code == 500
        assert response.json() == {"detail": "Unable to find or delete the shortcode."}


@pytest.mark.api
class TestHealthEndpoint:

    @pytest.mark.asyncio
    async def test_health(self, client):
        healthy = {"status": "healthy", "latency_ms": 1, "error": None}
        with patch.object(DatabaseHealthCheck, "check_connection", return_value=healthy):
            response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["database"]["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_health_degraded(self, client):
        unhealthy = {"status": "unhealthy", "latency_ms": 0, "error": "connection refused"}
        with patch.object(DatabaseHealthCheck, "check_connection", return_value=unhealthy):
            response = await client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
