"""Flask extension singletons and the Redis connection backing refresh sessions."""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

log = logging.getLogger(__name__)

REDIS_EXTENSION = "redis"

# Constraint names stay stable across SQLite and PostgreSQL migrations
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

db: SQLAlchemy = SQLAlchemy(metadata=metadata, session_options={"autoflush": False})
migrate = Migrate(render_as_batch=True)
limiter = Limiter(key_func=get_remote_address)


def connect_redis(app: Flask) -> redis.Redis | None:
    """
    Open and ping the Redis client named by ``REDIS_URL``.

    Replies are decoded to ``str``. Returns ``None`` when no URL is configured.

    :raises RuntimeError: The server did not answer the ping.
    """
    url = app.config.get("REDIS_URL")
    if not url:
        app.extensions.pop(REDIS_EXTENSION, None)
        return None

    client = redis.Redis.from_url(
        url,
        socket_timeout=app.config.get("REDIS_SOCKET_TIMEOUT", 2.0),
        socket_connect_timeout=app.config.get("REDIS_CONNECT_TIMEOUT", 2.0),
        decode_responses=True,
    )
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    app.extensions[REDIS_EXTENSION] = client
    log.info("redis.connected")
    return client


def init_app(app: Flask) -> None:
    """
    Bind the database, migrations, the rate limiter and Redis to ``app``.

    Importing :mod:`authgate.models` here registers the tables on
    ``metadata`` before Alembic or ``create_all`` look at it.
    """
    db.init_app(app)
    from authgate import models as _models  # noqa: F401

    migrate.init_app(app, db)
    limiter.init_app(app)
    connect_redis(app)


def get_redis(app: Flask | None = None) -> redis.Redis:
    """Return the Redis client bound to ``app`` (default: the current app)."""
    client = (app or current_app).extensions.get(REDIS_EXTENSION)
    if client is None:
        raise RuntimeError("Redis client is not initialized; set REDIS_URL.")
    return client
