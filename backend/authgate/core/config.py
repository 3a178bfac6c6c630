"""Environment-driven settings for the auth service.

One class per deployment profile; ``APP_ENV`` picks the profile and
individual environment variables override single values. A ``.env`` file in
the working directory is loaded first when present.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from typing import Final, TypeVar

from dotenv import load_dotenv

T = TypeVar("T")

ENV_VAR: Final[str] = "APP_ENV"  # development | testing | production
PLACEHOLDER_JWT_SECRET: Final[str] = "CHANGE_ME_JWT"
TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "y", "on"})

load_dotenv()


def _env(name: str, default: T, parse: Callable[[str], T]) -> T:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return parse(raw.strip())


def env_bool(name: str, default: bool = False) -> bool:
    """Read a flag; ``1/true/yes/y/on`` (any case) mean ``True``."""
    return _env(name, default, lambda raw: raw.lower() in TRUTHY)


def env_int(name: str, default: int) -> int:
    return _env(name, default, int)


def env_float(name: str, default: float) -> float:
    return _env(name, default, float)


class BaseConfig:
    """
    Settings shared by every profile.

    Token and cookie values feed :class:`authgate.services.auth.AuthSettings`;
    nothing else reads them at request time.

    Attributes
    ----------
    JWT_SECRET_KEY: str
        HMAC key for access and refresh tokens. Production refuses the
        placeholder.
    JWT_ACCESS_EXPIRES_MINUTES, JWT_REFRESH_EXPIRES_DAYS: int
        Token lifetimes (15 minutes / 7 days).
    ACCESS_COOKIE_NAME, REFRESH_COOKIE_NAME: str
        Credential cookie names.
    COOKIE_SECURE: bool
        Send credential cookies over HTTPS only.
    COOKIE_SAMESITE: str
        ``SameSite`` attribute of both cookies.
    REDIS_URL: str | None
        Refresh session backend. Unset outside production means in-process
        storage.
    AUTH_LOGIN_RATE_LIMIT: str
        Flask-Limiter rule for ``POST /auth/login``.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Signing
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", PLACEHOLDER_JWT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_EXPIRES_MINUTES = env_int("JWT_ACCESS_EXPIRES_MINUTES", 15)
    JWT_REFRESH_EXPIRES_DAYS = env_int("JWT_REFRESH_EXPIRES_DAYS", 7)

    # Cookies
    ACCESS_COOKIE_NAME = os.getenv("ACCESS_COOKIE_NAME", "accessToken")
    REFRESH_COOKIE_NAME = os.getenv("REFRESH_COOKIE_NAME", "refreshToken")
    COOKIE_SECURE = env_bool("COOKIE_SECURE", False)
    COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "Strict")

    # Principal store
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./authgate.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Refresh session store
    REDIS_URL = os.getenv("REDIS_URL") or None
    REDIS_SOCKET_TIMEOUT = env_float("REDIS_SOCKET_TIMEOUT", 2.0)
    REDIS_CONNECT_TIMEOUT = env_float("REDIS_CONNECT_TIMEOUT", 2.0)
    REFRESH_TOKEN_KEY_PREFIX = os.getenv("REFRESH_TOKEN_KEY_PREFIX", "rt:")

    # Login throttling
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "50 per 15 minutes")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)

    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local profile: debug on unless ``FLASK_DEBUG`` says otherwise."""

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """
    Test-suite profile.

    In-memory SQLite (or ``TEST_DATABASE_URL``), in-process refresh sessions,
    a fixed signing key and no rate limiting.
    """

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    JWT_SECRET_KEY = "testing-secret-key-with-enough-length-for-hs256"
    REDIS_URL = None
    RATELIMIT_ENABLED = False
    COOKIE_SECURE = False


class ProductionConfig(BaseConfig):
    """
    Deployed profile.

    Cookies default to HTTPS-only. The factory refuses to boot with the
    placeholder JWT secret or without ``REDIS_URL``.
    """

    SQLALCHEMY_ECHO = False
    COOKIE_SECURE = env_bool("COOKIE_SECURE", True)


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def _env_name() -> str:
    return os.getenv(ENV_VAR, "development").strip().lower()


def get_config() -> type[BaseConfig]:
    """Profile named by ``APP_ENV``; unknown or unset names mean development."""
    return CONFIG_MAP.get(_env_name(), DevelopmentConfig)


def is_production(config: Mapping[str, object]) -> bool:
    """``True`` for a production deploy; testing or debug configs never are."""
    if config.get("TESTING") or config.get("DEBUG"):
        return False
    return _env_name() == "production"
