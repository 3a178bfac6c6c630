# authgate/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from authgate.models.user import Role, User

# ------------------------ Config DTO --------------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Token emission and cookie configuration.

    Built once from the Flask config in ``create_app`` and handed to every
    component that needs it; nothing reads ``current_app.config`` afterwards.

    :param secret_key: HMAC signing key.
    :type secret_key: str
    :param algorithm: JWT signing algorithm.
    :type algorithm: str
    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    secret_key: str
    algorithm: str = "HS256"
    access_expires: timedelta = timedelta(minutes=15)
    refresh_expires: timedelta = timedelta(days=7)
    access_cookie_name: str = "accessToken"
    refresh_cookie_name: str = "refreshToken"
    cookie_secure: bool = False
    cookie_samesite: str = "Strict"

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthSettings:
        """Build settings from a config mapping (``app.config``)."""
        secret = config.get("JWT_SECRET_KEY")
        if not secret:
            raise RuntimeError("JWT_SECRET_KEY must be configured.")
        return cls(
            secret_key=str(secret),
            algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
            access_expires=timedelta(minutes=int(config.get("JWT_ACCESS_EXPIRES_MINUTES", 15))),
            refresh_expires=timedelta(days=int(config.get("JWT_REFRESH_EXPIRES_DAYS", 7))),
            access_cookie_name=str(config.get("ACCESS_COOKIE_NAME", "accessToken")),
            refresh_cookie_name=str(config.get("REFRESH_COOKIE_NAME", "refreshToken")),
            cookie_secure=bool(config.get("COOKIE_SECURE", False)),
            cookie_samesite=str(config.get("COOKIE_SAMESITE", "Strict")),
        )


# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    :param role: Role the caller claims to log in as.
    :type role: Role
    """

    email: str
    password: str
    role: Role


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """Input DTO for self-registration."""

    email: str
    password: str
    first_name: str
    last_name: str
    role: Role = Role.USER


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class PrincipalOut:
    """
    Sanitized principal view. Never carries the password hash.
    """

    user_id: str
    email: str
    first_name: str
    last_name: str
    role: Role
    is_active: bool
    created_at: int
    updated_at: int
    last_login: int | None

    @classmethod
    def from_model(cls, user: User) -> PrincipalOut:
        return cls(
            user_id=user.user_id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login=user.last_login,
        )


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Output DTO of a successful login.

    :param access_token: Encoded access JWT.
    :param refresh_token: Encoded refresh JWT (also the session key).
    :param user: Sanitized principal.
    """

    access_token: str
    refresh_token: str
    user: PrincipalOut


@dataclass(frozen=True, slots=True)
class RefreshOut:
    """Output DTO of a refresh: a new access token only."""

    access_token: str
    user: PrincipalOut
