"""Tests for app.routes.auth and app.routes.users."""
from datetime import timedelta

from app.auth import create_access_token


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_login_returns_usable_token(self, client, leader):
        response = client.post("/api/auth/login", json={"email": leader.email, "password": "secret123"})
        assert response.status_code == 200
        token = response.json()["accessToken"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["user"]["role"] == "team_leader"

    def test_wrong_password(self, client, leader):
        response = client.post("/api/auth/login", json={"email": leader.email, "password": "nope"})
        assert response.status_code == 401
        assert response.json()["success"] is False


class TestPrincipalResolution:
    """Tokens that do not resolve to a principal are rejected with 401."""

    def test_missing_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authorized, no token"}

    def test_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == 401

    def test_expired_token(self, client, leader):
        token = create_access_token(leader, expires_delta=timedelta(minutes=-5))
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_inactive_user(self, client, db, auth_headers, leader):
        headers = auth_headers(leader)
        leader.is_active = False
        db.commit()
        assert client.get("/api/auth/me", headers=headers).status_code == 401


class TestUsers:
    """Tests for /api/users/."""

    def test_admin_creates_user(self, client, auth_headers, admin):
        response = client.post(
            "/api/users/",
            json={"name": "New Hand", "email": "new.hand@example.com", "password": "pass1234", "role": "team_member"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "team_member"

        login = client.post("/api/auth/login", json={"email": "new.hand@example.com", "password": "pass1234"})
        assert login.status_code == 200

    def test_duplicate_email_conflicts(self, client, auth_headers, admin, member):
        response = client.post(
            "/api/users/",
            json={"name": "Copy", "email": member.email, "password": "pass1234"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 409

    def test_leader_cannot_create_users(self, client, auth_headers, leader):
        response = client.post(
            "/api/users/",
            json={"name": "X", "email": "x@example.com", "password": "pass1234"},
            headers=auth_headers(leader),
        )
        assert response.status_code == 403

    def test_leader_lists_members(self, client, auth_headers, leader, member, other_member, admin):
        response = client.get("/api/users/?role=team_member", headers=auth_headers(leader))
        assert response.status_code == 200
        assert sorted(u["id"] for u in response.json()["users"]) == sorted([member.id, other_member.id])
