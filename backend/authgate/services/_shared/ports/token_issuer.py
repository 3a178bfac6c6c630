from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from authgate.models.user import Role


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """
    A freshly signed token together with its lifetime bounds.

    :ivar token: Encoded JWT.
    :ivar issued_at: Epoch-ms the token was minted at.
    :ivar expires_at: Epoch-ms the token stops being valid.
    """

    token: str
    issued_at: int
    expires_at: int


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """Identity carried by a verified access token (role is a snapshot)."""

    user_id: str
    email: str
    role: Role


@dataclass(frozen=True, slots=True)
class RefreshClaims:
    """Identity carried by a verified refresh token."""

    user_id: str


class TokenIssuer(Protocol):
    """
    Port for minting and verifying signed credentials.

    Verification is pure: it never consults a store. Expiry raises
    ``TokenExpiredError``; every other defect raises ``TokenInvalidError``.
    """

    def issue_access_token(self, principal) -> str: ...

    def issue_refresh_token(self, principal) -> IssuedToken: ...

    def verify_access_token(self, token: str) -> AccessClaims: ...

    def verify_refresh_token(self, token: str) -> RefreshClaims: ...
