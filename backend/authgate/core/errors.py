"""Centralized JSON envelope error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, g, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from authgate.services._shared.errors import ServiceError, ValidationFailedError

log = logging.getLogger(__name__)


def envelope(
    *,
    success: bool,
    message: str,
    data: Any = None,
    errors: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """
    Build the uniform response body.

    :param success: Whether the operation succeeded.
    :param message: Human-readable summary (safe for clients).
    :param data: Payload on success, ``None`` otherwise.
    :param errors: Optional per-field error details.
    :returns: ``{"success", "message", "data", "errors"}`` mapping.
    :rtype: dict
    """
    return {"success": success, "message": message, "data": data, "errors": errors}


def error_response(
    status: int,
    message: str,
    errors: list[dict[str, Any]] | None = None,
) -> Response:
    """
    Return a JSON error response carrying the uniform envelope.

    :param status: HTTP status code.
    :param message: Client-safe message.
    :param errors: Optional per-field details.
    :returns: Flask response with ``status`` applied.
    :rtype: flask.Response
    """
    resp = jsonify(envelope(success=False, message=message, errors=errors))
    resp.status_code = int(status)
    return resp


def marshmallow_errors(messages: Any, prefix: str = "") -> list[dict[str, Any]]:
    """
    Flatten marshmallow ``err.messages`` into ``[{"field", "message"}]``.

    Nested schemas produce dotted field paths.
    """
    flat: list[dict[str, Any]] = []
    if isinstance(messages, dict):
        for key, value in messages.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            flat.extend(marshmallow_errors(value, path))
    elif isinstance(messages, list | tuple):
        for item in messages:
            if isinstance(item, dict):
                flat.extend(marshmallow_errors(item, prefix))
            else:
                flat.append({"field": prefix or "_schema", "message": str(item)})
    else:
        flat.append({"field": prefix or "_schema", "message": str(messages)})
    return flat


def validation_failed(err: MarshmallowValidationError) -> ValidationFailedError:
    """Translate a marshmallow failure into the domain validation error."""
    return ValidationFailedError(marshmallow_errors(err.messages))


def _maybe_clear_credentials(resp: Response, err: ServiceError) -> Response:
    """Clear both credential cookies when the current route asked for it."""
    if err.clears_session and g.get("clear_credentials_on_failure"):
        from authgate.api.cookies import clear_credential_cookies

        clear_credential_cookies(resp)
    return resp


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Every handled error is rendered with the uniform envelope.
    - 5xx responses are logged with ``exc_info``; 4xx as warnings.
    - Unknown exceptions never leak details to the caller.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status = int(err.status)
        level = log.error if status >= 500 else log.warning
        level(
            "ServiceError: code=%s status=%s msg=%s path=%s",
            err.code,
            status,
            err.message,
            request.path,
            exc_info=status >= 500,
        )
        resp = error_response(status, err.message, err.details)
        return _maybe_clear_credentials(resp, err)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        return handle_service_error(validation_failed(err))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route {request.path} not found"
        elif status == HTTPStatus.TOO_MANY_REQUESTS:
            message = "Too many login attempts, please try again later"
        else:
            message = HTTPStatus(status).phrase
        level = log.error if status >= 500 else log.warning
        level("HTTPException: status=%s path=%s", status, request.path)
        return error_response(status, message)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError at %s", request.path, exc_info=True)
        return error_response(HTTPStatus.CONFLICT, "Item already exists or condition not met")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError at %s", request.path, exc_info=True)
        return error_response(HTTPStatus.SERVICE_UNAVAILABLE, "Service temporarily unavailable")

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception at %s", request.path, exc_info=True)
        return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")
