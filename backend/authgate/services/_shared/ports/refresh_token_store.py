from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Protocol

from authgate.models.base import now_ms


@dataclass(frozen=True)
class RefreshSession:
    """
    Persisted refresh session keyed by the refresh token itself.

    :ivar token: Encoded refresh JWT (primary key).
    :ivar user_id: Owner principal id.
    :ivar created_at: Epoch-ms the session was stored.
    :ivar expires_at: Epoch-ms after which the session is unusable.
    :ivar is_revoked: Whether logout revoked the session.
    """

    token: str
    user_id: str
    created_at: int
    expires_at: int
    is_revoked: bool = False

    def is_expired(self, at_ms: int) -> bool:
        return self.expires_at <= at_ms


class RefreshTokenStore(Protocol):
    """
    Stateful store for refresh sessions.

    Implementations map their own infrastructure failures into
    ``StoreUnavailableError``; absence is never an error.
    """

    def create(self, token: str, user_id: str, expires_at: int) -> RefreshSession:
        """
        Persist a brand-new refresh session (overwrites any record with the
        same token).

        This MUST be executed *before* the token is handed to the client.
        """

    def find_by_token(self, token: str) -> RefreshSession | None:
        """Fetch a single session snapshot, or ``None`` when unknown."""

    def revoke(self, token: str) -> bool:
        """
        Mark a session as revoked.

        :returns: ``True`` if a live record was flipped, ``False`` when it was
            absent or already revoked. Both outcomes are a success.
        """


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh session store.

    .. note::
       Uses a threading lock so concurrent requests of the development server
       see consistent records.
    """

    def __init__(self) -> None:
        self._by_token: dict[str, RefreshSession] = {}
        self._lock = threading.Lock()

    def create(self, token: str, user_id: str, expires_at: int) -> RefreshSession:
        session = RefreshSession(
            token=token,
            user_id=str(user_id),
            created_at=now_ms(),
            expires_at=int(expires_at),
        )
        with self._lock:
            self._by_token[token] = session
        return session

    def find_by_token(self, token: str) -> RefreshSession | None:
        with self._lock:
            return self._by_token.get(token)

    def revoke(self, token: str) -> bool:
        with self._lock:
            session = self._by_token.get(token)
            if session is None or session.is_revoked:
                return False
            self._by_token[token] = replace(session, is_revoked=True)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_token)
