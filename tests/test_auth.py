"""
Unit tests for authentication endpoints.

Tests:
- Login (token issue)
- Self-registration
"""

import pytest

from jobly.core.security import decode_token


class TestLogin:
    """Tests for POST /auth/token"""

    def test_login_success(self, client, seed):
        response = client.post("/api/v1/auth/token", json={"username": "u1", "password": "password1"})

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"

        payload = decode_token(data["access_token"])
        assert payload["sub"] == "u1"
        assert payload["is_admin"] is False

    def test_login_admin_token_carries_flag(self, client, seed):
        response = client.post("/api/v1/auth/token", json={"username": "admin", "password": "password2"})

        assert response.status_code == 200
        assert decode_token(response.json()["access_token"])["is_admin"] is True

    def test_login_unknown_user(self, client, seed):
        response = client.post("/api/v1/auth/token", json={"username": "no-such-user", "password": "password1"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username/password"

    def test_login_wrong_password(self, client, seed):
        response = client.post("/api/v1/auth/token", json={"username": "u1", "password": "nope"})
        assert response.status_code == 401

    @pytest.mark.parametrize("body", [{"username": "u1"}, {"username": 42, "password": "above-is-a-number"}])
    def test_login_invalid_body(self, client, seed, body):
        response = client.post("/api/v1/auth/token", json=body)
        assert response.status_code == 422


class TestRegistration:
    """Tests for POST /auth/register"""

    new_user = {
        "username": "new",
        "firstName": "first",
        "lastName": "last",
        "password": "password",
        "email": "new@email.com",
    }

    def test_register_success(self, client, seed):
        response = client.post("/api/v1/auth/register", json=self.new_user)

        assert response.status_code == 201
        payload = decode_token(response.json()["access_token"])
        assert payload["sub"] == "new"
        assert payload["is_admin"] is False

    def test_registered_user_can_log_in(self, client, seed):
        client.post("/api/v1/auth/register", json=self.new_user)

        response = client.post("/api/v1/auth/token", json={"username": "new", "password": "password"})
        assert response.status_code == 200

    def test_register_cannot_request_admin(self, client, seed):
        response = client.post("/api/v1/auth/register", json={**self.new_user, "isAdmin": True})
        assert response.status_code == 422

    def test_register_missing_fields(self, client, seed):
        response = client.post("/api/v1/auth/register", json={"username": "new"})
        assert response.status_code == 422

    def test_register_invalid_email(self, client, seed):
        response = client.post("/api/v1/auth/register", json={**self.new_user, "email": "not-an-email"})
        assert response.status_code == 422

    def test_register_short_password(self, client, seed):
        response = client.post("/api/v1/auth/register", json={**self.new_user, "password": "abc"})
        assert response.status_code == 422

    def test_register_duplicate_username(self, client, seed):
        response = client.post("/api/v1/auth/register", json={**self.new_user, "username": "u1"})

        assert response.status_code == 409
        assert "duplicate" in response.json()["detail"].lower()
