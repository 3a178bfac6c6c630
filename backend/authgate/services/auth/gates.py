# authgate/services/auth/gates.py
"""Per-request authentication and role-based authorization.

Both gates are framework-agnostic; ``authgate.api.deps`` wires them into
Flask route decorators.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from authgate.models.user import Role
from authgate.services._shared.errors import (
    CredentialMissingError,
    ForbiddenError,
    TokenError,
)
from authgate.services._shared.ports import TokenIssuer


@dataclass(frozen=True, slots=True)
class RequestPrincipal:
    """
    Identity attached to an authenticated request.

    The role is the snapshot embedded in the access token at issue time.
    """

    user_id: str
    email: str
    role: Role


class AuthenticationGate:
    """
    Turn a presented access token into a :class:`RequestPrincipal`.

    :param issuer: Token issuer used for verification.
    """

    def __init__(self, issuer: TokenIssuer) -> None:
        self.issuer = issuer

    def authenticate(self, token: str | None) -> RequestPrincipal:
        """
        :raises CredentialMissingError: No token presented.
        :raises TokenExpiredError: The token is past its ``exp``.
        :raises TokenInvalidError: Bad signature, malformed or wrong type.
        """
        if not token:
            raise CredentialMissingError("Access token not found")
        try:
            claims = self.issuer.verify_access_token(token)
        except TokenError as exc:
            # Expired and invalid access tokens carry the same client message
            raise type(exc)("Invalid or expired token") from exc
        return RequestPrincipal(user_id=claims.user_id, email=claims.email, role=claims.role)


class AuthorizationGate:
    """Allow a request through only when the principal holds an allowed role."""

    def __init__(self, allowed_roles: Iterable[Role | str]) -> None:
        self.allowed_roles = frozenset(Role(r) for r in allowed_roles)

    def check(self, principal: RequestPrincipal | None) -> RequestPrincipal:
        if principal is None:
            raise CredentialMissingError("Authentication required")
        if principal.role not in self.allowed_roles:
            raise ForbiddenError()
        return principal
