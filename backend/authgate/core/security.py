"""Wire the authentication components once per application.

``init_app`` builds :class:`AuthSettings` from ``app.config`` and constructs
the token issuer, the refresh store, the gates and the services with it.
Route code reaches them through :func:`get_components`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import Flask, current_app

from authgate.core.config import PLACEHOLDER_JWT_SECRET, is_production
from authgate.core.extensions import get_redis
from authgate.infra.jwt import JWTTokenIssuer
from authgate.infra.redis import RedisRefreshTokenStore
from authgate.services._shared.ports import (
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
    TokenIssuer,
)
from authgate.services.auth import AuthenticationGate, AuthService, AuthSettings
from authgate.services.credentials import CredentialService
from authgate.services.users import UserAdminService

log = logging.getLogger(__name__)

EXTENSION_KEY = "authgate"


@dataclass(frozen=True, slots=True)
class AuthComponents:
    """Per-application singletons shared by every request."""

    settings: AuthSettings
    issuer: TokenIssuer
    refresh_store: RefreshTokenStore
    authentication: AuthenticationGate
    auth_service: AuthService
    user_admin: UserAdminService


def build_refresh_store(app: Flask) -> RefreshTokenStore:
    """
    Pick the refresh session backend.

    Redis when ``REDIS_URL`` is configured; otherwise an in-process store,
    which production refuses.
    """
    if app.config.get("REDIS_URL"):
        return RedisRefreshTokenStore(
            r=get_redis(app),
            prefix=app.config.get("REFRESH_TOKEN_KEY_PREFIX", "rt:"),
        )
    if is_production(app.config):
        raise RuntimeError("REDIS_URL is required in production.")
    log.warning("REDIS_URL not set; refresh sessions are kept in process memory.")
    return InMemoryRefreshTokenStore()


def init_app(app: Flask, *, refresh_store: RefreshTokenStore | None = None) -> AuthComponents:
    """
    Build and register the auth components on ``app.extensions``.

    :param refresh_store: Explicit store (tests); built from config otherwise.
    :raises RuntimeError: Production boot with the placeholder JWT secret or
        without Redis.
    """
    if is_production(app.config) and app.config.get("JWT_SECRET_KEY") in (
        None,
        "",
        PLACEHOLDER_JWT_SECRET,
    ):
        raise RuntimeError("JWT_SECRET_KEY must be set to a real secret in production.")

    settings = AuthSettings.from_mapping(app.config)
    issuer = JWTTokenIssuer(settings)
    store = refresh_store if refresh_store is not None else build_refresh_store(app)

    components = AuthComponents(
        settings=settings,
        issuer=issuer,
        refresh_store=store,
        authentication=AuthenticationGate(issuer),
        auth_service=AuthService(
            token_issuer=issuer,
            refresh_store=store,
            credentials=CredentialService(),
        ),
        user_admin=UserAdminService(),
    )
    app.extensions[EXTENSION_KEY] = components
    return components


def get_components() -> AuthComponents:
    """Return the components registered on the current application."""
    return current_app.extensions[EXTENSION_KEY]
