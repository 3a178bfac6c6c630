"""User repository for principal persistence and credential lookups."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError

from authgate.models.base import now_ms
from authgate.models.user import User
from authgate.repositories.base import BaseRepository
from authgate.services._shared.errors import (
    ConflictError,
    DuplicateEmailError,
    StoreFault,
    StoreUnavailableError,
)


def violates(exc: IntegrityError, *markers: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name, SQLite reports ``table.column``;
    callers pass both spellings.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return any(marker.lower() in message for marker in markers)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Store faults raised by SQLAlchemy are mapped here, once, into the domain
    taxonomy. It NEVER handles tokens or sessions.
    """

    model = User
    pk_name = "user_id"
    sortable = {"email": "email", "created_at": "created_at", "last_login": "last_login"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by normalized email (exact match).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == normalize_email(email))
        try:
            result = self.session.execute(stmt).scalars().first()
        except OperationalError as exc:
            raise StoreUnavailableError(StoreFault.UNAVAILABLE) from exc
        return cast(User | None, result)

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.user_id).where(User.email == normalize_email(email))
        return bool(self.session.execute(stmt).first())

    def get(self, entity_id: Any) -> User | None:
        try:
            return super().get(entity_id)
        except OperationalError as exc:
            raise StoreUnavailableError(StoreFault.UNAVAILABLE) from exc

    # ---------------------------- Writes ----------------------------

    def create(self, data: dict[str, Any]) -> User:
        """Insert a new principal, failing atomically on a duplicate email.

        :param data: ``email``, ``password`` (raw), ``first_name``,
            ``last_name`` and optional ``role``.
        :returns: The flushed :class:`User`.
        :raises DuplicateEmailError: If the email is already registered.
        """
        if self.exists_by_email(data["email"]):
            raise DuplicateEmailError()

        user = User(
            email=data["email"],
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
        )
        if data.get("role") is not None:
            user.role = data["role"]
        user.password = data["password"]  # invokes setter → hash

        try:
            return self.add(user)
        except IntegrityError as exc:
            # Concurrent registration won the race on the unique constraint
            self.session.rollback()
            if violates(exc, "uq_users_email", "users.email"):
                raise DuplicateEmailError() from exc
            raise ConflictError("Item already exists or condition not met") from exc
        except OperationalError as exc:
            raise StoreUnavailableError(StoreFault.UNAVAILABLE) from exc

    def update_last_login(self, user: User, *, at: int | None = None) -> int:
        """Stamp ``last_login`` (epoch-ms) and flush.

        :returns: The timestamp written.
        """
        stamp = at if at is not None else now_ms()
        user.last_login = stamp
        self.flush()
        return stamp
