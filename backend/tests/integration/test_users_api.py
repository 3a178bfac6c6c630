# tests/integration/test_users_api.py
from __future__ import annotations

import pytest

from authgate.models.user import Role
from tests.helpers.utils import DEFAULT_PASSWORD, login

API = "/api/v1/users"


@pytest.fixture()
def admin(make_user):
    return make_user(email="admin@test.com", role=Role.ADMIN)


@pytest.fixture()
def regular(make_user):
    return make_user(email="user@test.com", role=Role.USER)


def test_profile_requires_auth(client):
    resp = client.get(f"{API}/profile")

    assert resp.status_code == 401


def test_profile_returns_current_user(client, regular):
    login(client, "user@test.com", DEFAULT_PASSWORD)

    resp = client.get(f"{API}/profile")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "Profile retrieved successfully"
    assert body["data"]["user"]["email"] == "user@test.com"


def test_admin_listing_forbidden_for_user(client, regular):
    login(client, "user@test.com", DEFAULT_PASSWORD)

    resp = client.get(f"{API}/admin/users")

    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Access denied. Insufficient permissions"


def test_admin_listing_requires_auth(client):
    assert client.get(f"{API}/admin/users").status_code == 401


def test_admin_lists_users(client, admin, regular):
    login(client, "admin@test.com", DEFAULT_PASSWORD, "ADMIN")

    resp = client.get(f"{API}/admin/users")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["count"] == 2
    assert {u["email"] for u in data["users"]} == {"admin@test.com", "user@test.com"}
    assert all("passwordHash" not in u for u in data["users"])


def test_admin_cannot_delete_self(client, admin):
    login(client, "admin@test.com", DEFAULT_PASSWORD, "ADMIN")

    resp = client.delete(f"{API}/admin/users/{admin['user_id']}")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Cannot delete your own account"


def test_admin_deletes_user_and_their_refresh_stops_working(app, admin, regular):
    user_client = app.test_client()
    login(user_client, "user@test.com", DEFAULT_PASSWORD)
    admin_client = app.test_client()
    login(admin_client, "admin@test.com", DEFAULT_PASSWORD, "ADMIN")

    resp = admin_client.delete(f"{API}/admin/users/{regular['user_id']}")

    assert resp.status_code == 200
    assert resp.get_json()["message"] == "User deleted successfully"
    assert admin_client.get(f"{API}/admin/users").get_json()["data"]["count"] == 1

    refreshed = user_client.post("/api/v1/auth/refresh")
    assert refreshed.status_code == 401
    assert refreshed.get_json()["message"] == "User not found"


def test_admin_delete_unknown_user(client, admin):
    login(client, "admin@test.com", DEFAULT_PASSWORD, "ADMIN")

    resp = client.delete(f"{API}/admin/users/missing")

    assert resp.status_code == 404
