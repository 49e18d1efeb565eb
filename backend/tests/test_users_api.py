"""
Blog API — /api/users Endpoint Tests
=====================================

What:  End-to-end tests through the HTTP layer against a SQLite database.
How:   test_client (conftest.py) talks to a fresh app via ASGITransport.

What we test:
    ✅ Registration stores no plaintext and returns no password data
    ✅ Login: unknown email 404, wrong password 404, correct 200 with token
    ✅ Non-numeric id → 422 before the database is touched
    ✅ Listing users needs a token: none 401, expired 401, fresh 200
    ✅ Users can only change or delete their own account
"""

import time
from unittest.mock import patch

import pytest

from blogapi.services.token_service import TokenService
from blogapi.config import settings

DEFAULT_PASSWORD = "correct-horse"


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_success(self, test_client):
        response = await test_client.post(
            "/api/users",
            json={"name": "Ada", "email": "ada@example.com", "password": DEFAULT_PASSWORD},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["result"] == 200
        assert body["data"]["email"] == "ada@example.com"
        assert "password" not in body["data"]
        assert "password_hash" not in body["data"]

    @pytest.mark.asyncio
    async def test_register_missing_name_single_error(self, test_client):
        response = await test_client.post(
            "/api/users", json={"email": "ada@example.com", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 422
        errors = response.json()["errors"]
        assert len(errors) == 1
        assert errors[0]["field"] == "name"
        assert errors[0]["location"] == "body"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, test_client, register_user):
        await register_user()
        response = await test_client.post(
            "/api/users",
            json={"name": "Other", "email": "ada@example.com", "password": DEFAULT_PASSWORD},
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_register_invalid_json(self, test_client):
        response = await test_client.post(
            "/api/users", content=b'{"name": "Ada",', headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "Invalid JSON"


class TestLogin:

    @pytest.mark.asyncio
    async def test_unknown_email(self, test_client):
        response = await test_client.post(
            "/api/users/login", json={"email": "ghost@example.com", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 404
        assert response.json()["errors"][0]["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client, register_user):
        await register_user()
        response = await test_client.post(
            "/api/users/login", json={"email": "ada@example.com", "password": "wrong-password"}
        )
        assert response.status_code == 404
        assert response.json()["errors"][0]["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_success(self, test_client, register_user, token_service):
        user = await register_user()
        response = await test_client.post(
            "/api/users/login", json={"email": "ada@example.com", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert token_service.verify(data["token"]).value == user["id"]
        assert data["user"]["id"] == user["id"]
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]


class TestReadUsers:

    @pytest.mark.asyncio
    async def test_non_numeric_id_rejected_before_persistence(self, test_client):
        with patch("blogapi.routes.users.user_service.get_user") as get_user:
            response = await test_client.get("/api/users/abc")
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "id"
        get_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_out_of_range_id_is_422(self, test_client):
        response = await test_client.get("/api/users/99999999999999999999")
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "id"

    @pytest.mark.asyncio
    async def test_get_missing_user(self, test_client):
        response = await test_client.get("/api/users/999")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_requires_token(self, test_client, register_user, auth_headers):
        user = await register_user()

        missing = await test_client.get("/api/users")
        assert missing.status_code == 401

        past = TokenService(secret=settings.jwt_secret, clock=lambda: time.time() - 7200)
        expired = await test_client.get(
            "/api/users", headers={"Authorization": f"Bearer {past.issue(user['id'])}"}
        )
        assert expired.status_code == 401

        fresh = await test_client.get("/api/users", headers=auth_headers(user["id"]))
        assert fresh.status_code == 200
        assert [u["id"] for u in fresh.json()["data"]] == [user["id"]]

    @pytest.mark.asyncio
    async def test_fallback_token_header(self, test_client, register_user, token_service):
        user = await register_user()
        response = await test_client.get(
            "/api/users", headers={"x-access-token": token_service.issue(user["id"])}
        )
        assert response.status_code == 200


class TestUpdateDeleteUsers:

    @pytest.mark.asyncio
    async def test_update_own_account(self, test_client, register_user, auth_headers):
        user = await register_user()
        response = await test_client.put(
            f"/api/users/{user['id']}", json={"name": "Ada L."}, headers=auth_headers(user["id"])
        )
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Ada L."

    @pytest.mark.asyncio
    async def test_update_password_then_login(self, test_client, register_user, auth_headers):
        user = await register_user()
        await test_client.put(
            f"/api/users/{user['id']}",
            json={"password": "brand-new-pw"},
            headers=auth_headers(user["id"]),
        )
        response = await test_client.post(
            "/api/users/login", json={"email": "ada@example.com", "password": "brand-new-pw"}
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_update_someone_else(self, test_client, register_user, auth_headers):
        ada = await register_user()
        eve = await register_user(name="Eve", email="eve@example.com")
        response = await test_client.put(
            f"/api/users/{ada['id']}", json={"name": "pwned"}, headers=auth_headers(eve["id"])
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_requires_token(self, test_client, register_user):
        user = await register_user()
        response = await test_client.put(f"/api/users/{user['id']}", json={"name": "X"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_update_email_conflict(self, test_client, register_user, auth_headers):
        ada = await register_user()
        await register_user(name="Eve", email="eve@example.com")
        response = await test_client.put(
            f"/api/users/{ada['id']}",
            json={"email": "eve@example.com"},
            headers=auth_headers(ada["id"]),
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_delete_own_account(self, test_client, register_user, auth_headers):
        user = await register_user()
        response = await test_client.delete(
            f"/api/users/{user['id']}", headers=auth_headers(user["id"])
        )
        assert response.status_code == 200
        assert response.json()["data"]["id"] == user["id"]

        after = await test_client.get(f"/api/users/{user['id']}")
        assert after.status_code == 404
