"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask, HTTP
helpers, SQLAlchemy or redis. They form the closed taxonomy shared by
repositories, store adapters and application services.

Each class carries the HTTP ``status`` and stable ``code`` it maps to; the
translation into the JSON envelope is done once in ``authgate/core/errors.py``.
Messages are safe to show to clients and never contain store identifiers.
"""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus
from typing import Any

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    :cvar status: HTTP status the error is rendered with.
    :cvar code: Stable machine-readable identifier.
    :cvar default_message: Message used when none is given.
    :cvar clears_session: Whether a failed refresh/me call raising this error
        must clear the client's credential cookies.
    """

    status: int = HTTPStatus.BAD_REQUEST
    code: str = "bad_request"
    default_message: str = "Bad request"
    clears_session: bool = False

    def __init__(self, message: str | None = None, *, status: int | None = None) -> None:
        self.message = message or self.default_message
        if status is not None:
            self.status = int(status)
        super().__init__(self.message)

    @property
    def details(self) -> list[dict[str, Any]] | None:
        """Structured, client-safe error details (``None`` by default)."""
        return None


class AuthenticationError(ServiceError):
    """Base for 401 failures."""

    status = HTTPStatus.UNAUTHORIZED
    code = "unauthorized"
    default_message = "Unauthorized"


# --------------------------------------------------------------------------- #
# Credentials
# --------------------------------------------------------------------------- #


class InvalidCredentialsError(AuthenticationError):
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class RoleMismatchError(AuthenticationError):
    code = "role_mismatch"
    default_message = "Invalid role selected"


class CredentialMissingError(AuthenticationError):
    """No access or refresh credential was presented."""

    code = "credential_missing"
    default_message = "Authentication required"
    clears_session = True


class AccountDisabledError(ServiceError):
    status = HTTPStatus.FORBIDDEN
    code = "account_disabled"
    default_message = "Account is deactivated"
    clears_session = True


class ForbiddenError(ServiceError):
    status = HTTPStatus.FORBIDDEN
    code = "forbidden"
    default_message = "Access denied. Insufficient permissions"


# --------------------------------------------------------------------------- #
# Tokens
# --------------------------------------------------------------------------- #


class TokenError(AuthenticationError):
    """Base for token verification and refresh-session failures."""

    clears_session = True


class TokenInvalidError(TokenError):
    code = "token_invalid"
    default_message = "Invalid or expired token"


class TokenExpiredError(TokenError):
    code = "token_expired"
    default_message = "Token has expired"


class TokenRevokedError(TokenError):
    code = "token_revoked"
    default_message = "Token has been revoked"


class TokenNotFoundError(TokenError):
    code = "token_not_found"
    default_message = "Token not found"


# --------------------------------------------------------------------------- #
# Principals
# --------------------------------------------------------------------------- #


class UserNotFoundError(ServiceError):
    """
    Raised when a principal lookup by id misses.

    Rendered as 404 for direct lookups; the refresh flow raises it with
    ``status=401`` because the credential no longer maps to anyone.
    """

    status = HTTPStatus.NOT_FOUND
    code = "user_not_found"
    default_message = "User not found"
    clears_session = True


class ConflictError(ServiceError):
    status = HTTPStatus.CONFLICT
    code = "conflict"
    default_message = "Conflict"


class DuplicateEmailError(ConflictError):
    code = "duplicate_email"
    default_message = "User with this email already exists"


class SelfDeletionError(ServiceError):
    code = "self_deletion"
    default_message = "Cannot delete your own account"


class ValidationFailedError(ServiceError):
    """
    Request payload failed validation.

    :param errors: Per-field problems as ``[{"field": ..., "message": ...}]``.
    """

    code = "validation_failed"
    default_message = "Validation failed"

    def __init__(self, errors: list[dict[str, Any]], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = errors

    @property
    def details(self) -> list[dict[str, Any]]:
        return self.errors


# --------------------------------------------------------------------------- #
# Persistence faults
# --------------------------------------------------------------------------- #


class StoreFault(Enum):
    """Closed set of infrastructure faults a store adapter may report."""

    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"


class StoreUnavailableError(ServiceError):
    """
    A persistence call failed for infrastructure reasons.

    Retryable; never an authentication outcome.

    :param fault: Which :class:`StoreFault` occurred.
    """

    status = HTTPStatus.SERVICE_UNAVAILABLE
    code = "service_unavailable"
    default_message = "Service temporarily unavailable"

    def __init__(self, fault: StoreFault, message: str | None = None) -> None:
        super().__init__(message)
        self.fault = fault
        self.retryable = True
