"""Tiny helpers shared across test modules."""

from __future__ import annotations

from collections.abc import Iterable

from werkzeug.test import TestResponse

DEFAULT_PASSWORD = "Password123!"


def set_cookie_headers(resp: TestResponse) -> list[str]:
    """Return every ``Set-Cookie`` header of ``resp``."""
    return resp.headers.getlist("Set-Cookie")


def cookie_header(resp: TestResponse, name: str) -> str | None:
    """Return the ``Set-Cookie`` header for ``name``, if the response set one."""
    for header in set_cookie_headers(resp):
        if header.startswith(f"{name}="):
            return header
    return None


def cookie_cleared(resp: TestResponse, name: str) -> bool:
    """``True`` when ``resp`` expires cookie ``name`` on the client."""
    header = cookie_header(resp, name)
    return header is not None and header.startswith(f"{name}=;") and "Max-Age=0" in header


def both_cleared(resp: TestResponse, names: Iterable[str] = ("accessToken", "refreshToken")) -> bool:
    return all(cookie_cleared(resp, n) for n in names)


def login(client, email: str, password: str, role: str = "USER") -> TestResponse:
    """POST the login form; the client keeps the credential cookies."""
    return client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password, "role": role},
    )
