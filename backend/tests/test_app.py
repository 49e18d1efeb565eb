"""
Blog API — Application-Level Tests
===================================

What:  Health probe, global error handlers and the request ID header.

What we test:
    ✅ /health reports 200 when the database answers and 503 when it does not
    ✅ Unexpected faults become a generic 500 in the error envelope
    ✅ Unknown routes use the same error envelope
    ✅ X-Request-ID is echoed or generated
"""

from unittest.mock import AsyncMock, patch

import pytest

from blogapi.database import build_engine
from blogapi.exceptions import DatabaseError


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client, db_engine, monkeypatch):
        monkeypatch.setattr("blogapi.database.engine", db_engine)
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_unreachable_database(self, test_client, tmp_path, monkeypatch):
        broken = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'blog.db'}")
        monkeypatch.setattr("blogapi.database.engine", broken)
        response = await test_client.get("/health")
        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"
        await broken.dispose()


class TestErrorHandling:

    @pytest.mark.asyncio
    async def test_database_error_is_generic_500(self, test_client):
        failing = AsyncMock(side_effect=DatabaseError(context={"table": "posts"}))
        with patch("blogapi.routes.posts.post_service.list_posts", failing):
            response = await test_client.get("/api/posts")

        assert response.status_code == 500
        body = response.json()
        assert body["errors"][0]["message"] == "An internal error occurred. Please try again later."
        assert "posts" not in response.text

    @pytest.mark.asyncio
    async def test_unknown_route(self, test_client):
        response = await test_client.get("/api/nothing-here")
        assert response.status_code == 404
        assert "errors" in response.json()


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated(self, test_client):
        response = await test_client.get("/api/posts")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_echoed_into_error_body(self, test_client):
        response = await test_client.get("/api/posts/abc", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"


class TestValidationShape:

    @pytest.mark.asyncio
    async def test_query_filter_error_uses_envelope(self, test_client):
        """Parameter errors come from the rule pipeline, in the shared error envelope."""
        response = await test_client.get("/api/posts", params={"user_id": "0"})
        assert response.status_code == 422
        body = response.json()
        assert body["errors"] == [
            {"field": "user_id", "location": "query", "message": "user_id must be a positive integer"}
        ]
        assert "request_id" in body
