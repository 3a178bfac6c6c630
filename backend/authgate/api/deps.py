"""Shared API helpers for responses, request timing and the auth gates."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from authgate.api.cookies import read_access_token
from authgate.core.errors import envelope
from authgate.core.security import get_components
from authgate.models.user import Role
from authgate.services.auth.gates import AuthorizationGate, RequestPrincipal

F = TypeVar("F", bound=Callable[..., Any])


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def success_response(data: Any = None, message: str = "Success", *, status: int = 200) -> Response:
    """Wrap ``data`` in the uniform success envelope."""

    return json_response(envelope(success=True, message=message, data=data), status=status)


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


def clears_credentials_on_failure(func: F) -> F:
    """Expire both credential cookies when the handler fails with a session error."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.clear_credentials_on_failure = True
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token; stores ``g.principal``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.principal = get_components().authentication.authenticate(read_access_token())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*roles: Role | str) -> Callable[[F], F]:
    """Allow only principals holding one of ``roles``. Apply below ``require_auth``."""

    gate = AuthorizationGate(roles)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            gate.check(g.get("principal"))
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def current_principal() -> RequestPrincipal:
    """Return the principal stored by :func:`require_auth`."""

    return g.principal
