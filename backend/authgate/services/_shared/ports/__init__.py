"""
authgate.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token issuance and refresh-session persistence.

These ports decouple the service layer from concrete implementations
of token signing and refresh storage mechanisms.

Modules
-------
- :mod:`token_issuer`:
    Defines :class:`~.TokenIssuer`: abstraction for minting and verifying
    access and refresh tokens, plus the claim/value types it returns.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore` and :class:`~.RefreshSession`:
    persistence of refresh sessions, with an in-memory adapter.

Design Notes
------------
Concrete adapters (Redis store, PyJWT issuer) live under ``authgate.infra``.
"""

from __future__ import annotations

from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshSession,
    RefreshTokenStore,
)
from .token_issuer import AccessClaims, IssuedToken, RefreshClaims, TokenIssuer

__all__ = [
    "TokenIssuer",
    "IssuedToken",
    "AccessClaims",
    "RefreshClaims",
    "RefreshTokenStore",
    "RefreshSession",
    "InMemoryRefreshTokenStore",
]
