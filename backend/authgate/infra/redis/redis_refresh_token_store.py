# comments in English; reST docstrings
from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import redis  # type: ignore[import-untyped]

from authgate.models.base import now_ms
from authgate.services._shared.errors import StoreFault, StoreUnavailableError
from authgate.services._shared.ports import RefreshSession, RefreshTokenStore

log = logging.getLogger(__name__)


def _s(value: str | bytes | None, default: str = "") -> str:
    """Normalize a redis reply to ``str`` whatever ``decode_responses`` is."""
    if value is None:
        return default
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@contextmanager
def _store_faults(op: str) -> Iterator[None]:
    """Map every redis-py failure into :class:`StoreUnavailableError`."""
    try:
        yield
    except redis.exceptions.TimeoutError as exc:
        log.error("refresh_store.%s timed out", op)
        raise StoreUnavailableError(StoreFault.TIMEOUT) from exc
    except redis.exceptions.RedisError as exc:
        log.error("refresh_store.%s failed: %s", op, type(exc).__name__)
        raise StoreUnavailableError(StoreFault.UNAVAILABLE) from exc


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh session store.

    One hash per session under ``<prefix><sha256(token)>`` holding
    ``user_id``, ``created_at``, ``expires_at`` and ``is_revoked``. The key
    expires at ``expires_at`` (``PEXPIREAT``), so expired sessions disappear
    without a sweeper. Raw tokens never appear in key names.

    :param r: A Redis client (already connected).
    :param prefix: Key namespace.
    """

    r: redis.Redis
    prefix: str = "rt:"

    # -------------------- helpers --------------------

    def _k(self, token: str) -> str:
        return f"{self.prefix}{hashlib.sha256(token.encode()).hexdigest()}"

    # -------------------- API ------------------------

    def create(self, token: str, user_id: str, expires_at: int) -> RefreshSession:
        """
        Insert the refresh session *before* the token reaches the client.

        Any existing record under the same token is overwritten.
        """
        session = RefreshSession(
            token=token,
            user_id=str(user_id),
            created_at=now_ms(),
            expires_at=int(expires_at),
        )
        key = self._k(token)
        with _store_faults("create"), self.r.pipeline(transaction=True) as p:
            p.delete(key)
            p.hset(
                key,
                mapping={
                    "user_id": session.user_id,
                    "created_at": str(session.created_at),
                    "expires_at": str(session.expires_at),
                    "is_revoked": "0",
                },
            )
            p.pexpireat(key, session.expires_at)
            p.execute()
        return session

    def find_by_token(self, token: str) -> RefreshSession | None:
        with _store_faults("find"):
            h = self.r.hgetall(self._k(token))
        if not h:
            return None
        fields = {_s(k): _s(v) for k, v in h.items()}
        return RefreshSession(
            token=token,
            user_id=fields.get("user_id", ""),
            created_at=int(fields.get("created_at", "0")),
            expires_at=int(fields.get("expires_at", "0")),
            is_revoked=fields.get("is_revoked", "0") == "1",
        )

    def revoke(self, token: str) -> bool:
        """
        Flip ``is_revoked`` on a live session.

        Uses WATCH/MULTI so a key that expires mid-flight is never recreated;
        the original ``PEXPIREAT`` is re-applied in the same transaction.
        """
        key = self._k(token)
        with _store_faults("revoke"), self.r.pipeline() as p:
            # Retry loop for optimistic locking in case of concurrent modifications
            while True:
                try:
                    p.watch(key)
                    state = p.hmget(key, "is_revoked", "expires_at")
                    revoked, expires_at = _s(state[0], ""), _s(state[1], "")
                    if not revoked or revoked == "1" or not expires_at:
                        p.unwatch()
                        return False
                    p.multi()
                    p.hset(key, "is_revoked", "1")
                    p.pexpireat(key, int(expires_at))
                    p.execute()
                    return True
                except redis.WatchError:
                    continue
