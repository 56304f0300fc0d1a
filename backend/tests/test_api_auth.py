"""Tests for auth API endpoints."""

import pytest


SIGNUP = {
    "username": "new_user",
    "email": "New@Example.com",
    "password": "Passw0rd",
    "confirm_password": "Passw0rd",
}


class TestAuthAPI:
    """Test signup, login and identity."""

    def test_signup(self, client):
        """Should create a user and never return the password hash."""
        response = client.post("/api/v1/auth/signup", json=SIGNUP)
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "new_user"
        assert data["email"] == "new@example.com"
        assert "hashed_password" not in data

    def test_signup_duplicate_email(self, client, sample_user):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "email": sample_user.email})
        assert response.status_code == 409

    @pytest.mark.parametrize("changes", [
        {"password": "password1", "confirm_password": "password1"},  # no uppercase
        {"confirm_password": "Different1"},
        {"username": "ab"},
        {"username": "bad name"},
        {"email": "not-an-email"},
    ])
    def test_signup_validation(self, client, changes):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, **changes})
        assert response.status_code == 422

    def test_login(self, client, sample_user):
        response = client.post("/api/v1/auth/login", json={"email": "jane@example.com", "password": "Secret123"})
        assert response.status_code == 200
        assert response.json()["id"] == sample_user.id

    def test_login_wrong_password(self, client, sample_user):
        response = client.post("/api/v1/auth/login", json={"email": "jane@example.com", "password": "nope"})
        assert response.status_code == 401

    def test_login_unknown_email(self, client):
        response = client.post("/api/v1/auth/login", json={"email": "ghost@example.com", "password": "Secret123"})
        assert response.status_code == 401

    def test_me(self, client, sample_user, auth_headers):
        response = client.get("/api/v1/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["username"] == "jane_doe"

    def test_me_without_identity(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_me_unknown_user(self, client):
        assert client.get("/api/v1/auth/me", headers={"x-user-id": "missing"}).status_code == 404
