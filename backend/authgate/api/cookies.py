"""Credential cookie helpers.

Both credentials travel as ``HttpOnly`` cookies with ``SameSite`` set from
config and ``Secure`` enabled in production.
"""

from __future__ import annotations

from flask import Response, request

from authgate.core.security import get_components


def _attrs() -> dict[str, object]:
    settings = get_components().settings
    return {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
        "path": "/",
    }


def set_access_cookie(resp: Response, token: str) -> None:
    settings = get_components().settings
    resp.set_cookie(
        settings.access_cookie_name,
        token,
        max_age=int(settings.access_expires.total_seconds()),
        **_attrs(),
    )


def set_refresh_cookie(resp: Response, token: str) -> None:
    settings = get_components().settings
    resp.set_cookie(
        settings.refresh_cookie_name,
        token,
        max_age=int(settings.refresh_expires.total_seconds()),
        **_attrs(),
    )


def clear_credential_cookies(resp: Response) -> None:
    """Expire both credential cookies on the client."""
    settings = get_components().settings
    for name in (settings.access_cookie_name, settings.refresh_cookie_name):
        resp.delete_cookie(name, **_attrs())


def read_access_token() -> str | None:
    """Return the access token from its cookie or an ``Authorization: Bearer`` header."""
    token = request.cookies.get(get_components().settings.access_cookie_name)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def read_refresh_token() -> str | None:
    return request.cookies.get(get_components().settings.refresh_cookie_name) or None
