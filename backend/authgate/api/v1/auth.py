"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from authgate.api.cookies import (
    clear_credential_cookies,
    read_refresh_token,
    set_access_cookie,
    set_refresh_cookie,
)
from authgate.api.deps import (
    clears_credentials_on_failure,
    current_principal,
    require_auth,
    success_response,
    timing,
)
from authgate.core.extensions import limiter
from authgate.core.security import get_components
from authgate.schemas import LoginSchema, RegisterSchema, UserSchema
from authgate.services.auth.dto import LoginIn, RegisterIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
user_schema = UserSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "50 per 15 minutes"))


@bp.post("/register")
@timing
def register():
    """Register a new principal (role defaults to ``USER``)."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    user = get_components().auth_service.register(RegisterIn(**payload))
    return success_response(
        {"user": user_schema.dump(user)}, "User registered successfully", status=201
    )


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials for the claimed role and set both credential cookies."""

    data = login_schema.load(request.get_json(silent=True) or {})
    out = get_components().auth_service.login(LoginIn(**data))
    response = success_response({"user": user_schema.dump(out.user)}, "Login successful")
    set_access_cookie(response, out.access_token)
    set_refresh_cookie(response, out.refresh_token)
    return response


@bp.post("/logout")
@timing
def logout():
    """Revoke the refresh session (if any) and clear both cookies. Always succeeds."""

    get_components().auth_service.logout(read_refresh_token())
    response = success_response(None, "Logout successful")
    clear_credential_cookies(response)
    return response


@bp.post("/refresh")
@clears_credentials_on_failure
@timing
def refresh():
    """Mint a new access token from the refresh cookie."""

    out = get_components().auth_service.refresh(read_refresh_token())
    response = success_response({"user": user_schema.dump(out.user)}, "Token refreshed successfully")
    set_access_cookie(response, out.access_token)
    return response


@bp.get("/me")
@clears_credentials_on_failure
@require_auth
@timing
def me():
    """Return the authenticated principal, re-read from the store."""

    user = get_components().auth_service.me(current_principal())
    return success_response({"user": user_schema.dump(user)}, "User retrieved successfully")
