"""JSON logging with request correlation and credential redaction.

Every record carries the request id (``X-Request-ID`` or generated) and,
once the auth gate has run, the id of the calling principal. Values stored
under credential-looking keys are masked before rendering so tokens and
passwords never reach the log sink.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INBOUND_ID_HEADERS = ("X-Request-ID", "X-Correlation-ID")

# ``extra=`` attributes promoted into the JSON payload
PAYLOAD_EXTRAS = ("endpoint", "elapsed_ms", "method", "path", "status", "user_id", "reason")

REDACTED = "[redacted]"
SENSITIVE_MARKERS = ("token", "password", "secret", "cookie", "authorization")

access_log = logging.getLogger("authgate.access")


def redact(value: Any, key: str = "") -> Any:
    """Mask ``value`` when ``key`` names a credential; recurse into mappings."""
    if any(marker in key.lower() for marker in SENSITIVE_MARKERS):
        return REDACTED
    if isinstance(value, Mapping):
        return {k: redact(v, str(k)) for k, v in value.items()}
    return value


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key in PAYLOAD_EXTRAS:
            if hasattr(record, key):
                payload[key] = redact(getattr(record, key), key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestContextFilter(logging.Filter):
    """Stamp ``request_id`` and, when known, the principal's ``user_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not has_request_context():
            record.request_id = None
            return True
        record.request_id = request_id()
        principal = g.get("principal")
        if principal is not None and not hasattr(record, "user_id"):
            record.user_id = principal.user_id
        return True


def request_id() -> str:
    """Return the id of the current request, adopting an inbound one if sent."""
    if not has_request_context():
        return str(uuid4())
    current = g.get("request_id")
    if current:
        return current
    inbound = next((request.headers[h] for h in INBOUND_ID_HEADERS if request.headers.get(h)), None)
    g.request_id = inbound or str(uuid4())
    return g.request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Route the root logger to stdout as JSON at ``level``."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Seed the request id, echo it on responses and emit one access line per request."""

    app.logger.addFilter(RequestContextFilter())

    @app.before_request
    def _start_request() -> None:
        request_id()
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id())
        started = g.get("request_started")
        access_log.info(
            "request.completed",
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "elapsed_ms": round((time.perf_counter() - started) * 1000, 2) if started else None,
            },
        )
        return response


__all__ = ["configure_logging", "init_app", "redact", "request_id"]
