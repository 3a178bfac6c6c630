# tests/integration/test_auth_api.py
from __future__ import annotations

from types import SimpleNamespace

import pytest

from authgate.core.config import TestingConfig
from authgate.core.extensions import db
from authgate.core.security import get_components
from authgate.factory import create_app
from authgate.models.user import Role, User
from tests.helpers.utils import (
    DEFAULT_PASSWORD,
    both_cleared,
    cookie_header,
    login,
    set_cookie_headers,
)

API = "/api/v1"


@pytest.fixture()
def regular(make_user):
    return make_user(email="user@test.com", role=Role.USER)


def _stored_user(app, user_id: str) -> User | None:
    with app.app_context():
        user = db.session.get(User, user_id)
        if user is not None:
            db.session.expunge(user)
        return user


def _refresh_store(app):
    with app.app_context():
        return get_components().refresh_store


# -------------------------------- Login ----------------------------------- #
def test_login_sets_http_only_cookies_and_returns_public_user(app, client, regular):
    resp = login(client, "user@test.com", DEFAULT_PASSWORD, "USER")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["errors"] is None
    user = body["data"]["user"]
    assert user["userId"] == regular["user_id"]
    assert user["email"] == "user@test.com"
    assert user["role"] == "USER"
    assert "password" not in user and "passwordHash" not in user
    assert "password_hash" not in user

    headers = set_cookie_headers(resp)
    assert len(headers) == 2
    for name in ("accessToken", "refreshToken"):
        header = cookie_header(resp, name)
        assert header is not None
        assert "HttpOnly" in header
        assert "SameSite=Strict" in header
        assert "Path=/" in header

    assert _stored_user(app, regular["user_id"]).last_login is not None


def test_login_wrong_role_is_rejected(app, client, regular):
    resp = login(client, "user@test.com", DEFAULT_PASSWORD, "ADMIN")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid role selected"
    assert set_cookie_headers(resp) == []
    assert _stored_user(app, regular["user_id"]).last_login is None


def test_login_bad_password_and_unknown_email_match(client, regular):
    wrong = login(client, "user@test.com", "not-the-password")
    unknown = login(client, "nobody@test.com", DEFAULT_PASSWORD)

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.get_json() == unknown.get_json()
    assert wrong.get_json()["message"] == "Invalid credentials"


def test_login_inactive_account_is_forbidden(client, make_user):
    make_user(email="off@test.com", is_active=False)

    resp = login(client, "off@test.com", DEFAULT_PASSWORD)

    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Account is deactivated"


def test_login_validation_errors_are_listed(client):
    resp = client.post(f"{API}/auth/login", json={"email": "not-an-email"})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    fields = {e["field"] for e in body["errors"]}
    assert {"email", "password", "role"} <= fields


def test_login_rejects_unknown_role_value(client, regular):
    resp = login(client, "user@test.com", DEFAULT_PASSWORD, "ROOT")

    assert resp.status_code == 400
    assert [e["field"] for e in resp.get_json()["errors"]] == ["role"]


# ------------------------------ Register ---------------------------------- #
def test_register_creates_user(client):
    resp = client.post(
        f"{API}/auth/register",
        json={
            "email": "New@Test.com",
            "password": "Password123!",
            "firstName": "Ada",
            "lastName": "Lovelace",
        },
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "User registered successfully"
    assert body["data"]["user"]["email"] == "new@test.com"
    assert body["data"]["user"]["role"] == "USER"
    assert body["data"]["user"]["lastLogin"] is None


def test_register_duplicate_is_conflict(client, regular):
    resp = client.post(
        f"{API}/auth/register",
        json={
            "email": "user@test.com",
            "password": "Password123!",
            "firstName": "Dup",
            "lastName": "User",
        },
    )

    assert resp.status_code == 409
    assert resp.get_json()["message"] == "User with this email already exists"


def test_register_short_password(client):
    resp = client.post(
        f"{API}/auth/register",
        json={"email": "a@test.com", "password": "short", "firstName": "Al", "lastName": "Bo"},
    )

    assert resp.status_code == 400
    assert resp.get_json()["errors"] == [
        {"field": "password", "message": "Password must be at least 8 characters long"}
    ]


# --------------------------------- Me ------------------------------------- #
def test_me_with_cookie(client, regular):
    login(client, "user@test.com", DEFAULT_PASSWORD)

    resp = client.get(f"{API}/auth/me")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["user"]["userId"] == regular["user_id"]


def test_me_with_bearer_header(client, regular):
    token = cookie_header(login(client, "user@test.com", DEFAULT_PASSWORD), "accessToken")
    value = token.split(";", 1)[0].split("=", 1)[1]
    client.delete_cookie("accessToken")

    resp = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {value}"})

    assert resp.status_code == 200


def test_me_without_credentials_clears_cookies(client):
    resp = client.get(f"{API}/auth/me")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Access token not found"
    assert both_cleared(resp)


def test_me_with_garbage_token(client):
    client.set_cookie("accessToken", "garbage")

    resp = client.get(f"{API}/auth/me")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid or expired token"
    assert both_cleared(resp)


# ------------------------------- Refresh ---------------------------------- #
def test_refresh_sets_only_access_cookie(client, regular):
    login(client, "user@test.com", DEFAULT_PASSWORD)

    resp = client.post(f"{API}/auth/refresh")

    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Token refreshed successfully"
    assert cookie_header(resp, "accessToken") is not None
    assert cookie_header(resp, "refreshToken") is None


def test_refresh_without_cookie(client):
    resp = client.post(f"{API}/auth/refresh")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Refresh token not found"
    assert both_cleared(resp)


def test_refresh_with_unknown_token_clears_cookies(app, client, regular):
    with app.app_context():
        owner = SimpleNamespace(user_id=regular["user_id"])
        issued = get_components().issuer.issue_refresh_token(owner)
    client.set_cookie("refreshToken", issued.token)

    resp = client.post(f"{API}/auth/refresh")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Token not found"
    assert both_cleared(resp)


def test_refresh_after_logout_is_revoked(client, regular):
    login(client, "user@test.com", DEFAULT_PASSWORD)
    refresh_cookie = client.get_cookie("refreshToken").value
    client.post(f"{API}/auth/logout")
    client.set_cookie("refreshToken", refresh_cookie)

    resp = client.post(f"{API}/auth/refresh")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Token has been revoked"


# ------------------------------- Logout ----------------------------------- #
def test_logout_revokes_and_clears(app, client, regular):
    login(client, "user@test.com", DEFAULT_PASSWORD)
    refresh_cookie = client.get_cookie("refreshToken").value

    resp = client.post(f"{API}/auth/logout")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body == {"success": True, "message": "Logout successful", "data": None, "errors": None}
    assert both_cleared(resp)
    assert _refresh_store(app).find_by_token(refresh_cookie).is_revoked is True


def test_logout_is_idempotent_without_cookies(client):
    first = client.post(f"{API}/auth/logout")
    second = client.post(f"{API}/auth/logout")

    assert first.status_code == second.status_code == 200
    assert both_cleared(second)


# ------------------------------ Envelope ---------------------------------- #
def test_unknown_route_uses_envelope(client):
    resp = client.get(f"{API}/nope")

    assert resp.status_code == 404
    assert resp.get_json() == {
        "success": False,
        "message": f"Route {API}/nope not found",
        "data": None,
        "errors": None,
    }


def test_health(client):
    resp = client.get(f"{API}/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "Server is running"
    assert body["data"]["db"] == "ok"
    assert "X-Request-ID" in resp.headers


# ---------------------------- Login throttling ---------------------------- #
class _ThrottledConfig(TestingConfig):
    RATELIMIT_ENABLED = True
    AUTH_LOGIN_RATE_LIMIT = "2 per minute"


@pytest.fixture()
def throttled_app():
    application = create_app(_ThrottledConfig)
    with application.app_context():
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


def test_login_is_throttled_past_the_configured_limit(throttled_app):
    client = throttled_app.test_client()

    for _ in range(2):
        resp = login(client, "nobody@test.com", "WrongPassword1!", "USER")
        assert resp.status_code == 401

    resp = login(client, "nobody@test.com", "WrongPassword1!", "USER")
    assert resp.status_code == 429
    assert resp.get_json() == {
        "success": False,
        "message": "Too many login attempts, please try again later",
        "data": None,
        "errors": None,
    }
