# authgate/infra/jwt/jwt_token_issuer.py
"""PyJWT adapter for the :class:`TokenIssuer` port.

Access token claims: ``userId``, ``email``, ``role``, ``type="access"``.
Refresh token claims: ``userId``, ``type="refresh"``. Both carry ``iat``,
``exp`` and a random ``jti``; the ``jti`` keeps two refresh tokens minted for
the same user within the same second distinct.
"""

from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

import jwt

from authgate.models.user import Role
from authgate.services._shared.errors import TokenExpiredError, TokenInvalidError
from authgate.services._shared.ports import (
    AccessClaims,
    IssuedToken,
    RefreshClaims,
    TokenIssuer,
)
from authgate.services.auth.dto import AuthSettings

ACCESS = "access"
REFRESH = "refresh"


class JWTTokenIssuer(TokenIssuer):
    """
    Sign and verify HMAC JWTs with settings injected at construction.

    :param settings: Frozen auth configuration (key, algorithm, lifetimes).
    """

    def __init__(self, settings: AuthSettings) -> None:
        self.settings = settings

    # -------------------- helpers --------------------

    def _encode(self, claims: dict[str, Any], lifetime_s: int) -> IssuedToken:
        # One instant feeds both ``exp`` and the returned ``expires_at``
        iat = int(time.time())
        exp = iat + lifetime_s
        payload = {**claims, "iat": iat, "exp": exp, "jti": uuid4().hex}
        token = jwt.encode(payload, self.settings.secret_key, algorithm=self.settings.algorithm)
        return IssuedToken(token=token, issued_at=iat * 1000, expires_at=exp * 1000)

    def _decode(self, token: str, expected_type: str) -> dict[str, Any]:
        if not token or not isinstance(token, str):
            raise TokenInvalidError()
        try:
            payload = jwt.decode(
                token,
                self.settings.secret_key,
                algorithms=[self.settings.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError() from exc

        if payload.get("type") != expected_type or not payload.get("userId"):
            raise TokenInvalidError()
        return payload

    # -------------------- API ------------------------

    def issue_access_token(self, principal) -> str:
        claims = {
            "userId": principal.user_id,
            "email": principal.email,
            "role": Role(principal.role).value,
            "type": ACCESS,
        }
        lifetime = int(self.settings.access_expires.total_seconds())
        return self._encode(claims, lifetime).token

    def issue_refresh_token(self, principal) -> IssuedToken:
        claims = {"userId": principal.user_id, "type": REFRESH}
        return self._encode(claims, int(self.settings.refresh_expires.total_seconds()))

    def verify_access_token(self, token: str) -> AccessClaims:
        """
        Verify signature, expiry and type of an access token.

        :raises TokenExpiredError: If ``exp`` has passed.
        :raises TokenInvalidError: For any other defect, including an
            unknown role or a missing email claim.
        """
        payload = self._decode(token, ACCESS)
        email = payload.get("email")
        try:
            role = Role(payload.get("role"))
        except ValueError as exc:
            raise TokenInvalidError() from exc
        if not email:
            raise TokenInvalidError()
        return AccessClaims(user_id=str(payload["userId"]), email=str(email), role=role)

    def verify_refresh_token(self, token: str) -> RefreshClaims:
        """
        Verify signature, expiry and type of a refresh token.

        Does not consult the refresh store.
        """
        payload = self._decode(token, REFRESH)
        return RefreshClaims(user_id=str(payload["userId"]))
