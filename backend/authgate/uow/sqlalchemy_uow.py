"""Units of work over the Flask-SQLAlchemy session.

Both flavours hand out repositories bound to one session. The read-write
flavour commits when its block exits cleanly; the read-only flavour never
commits and refuses to flush pending changes while it is open.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.orm import Session, scoped_session

from authgate.core.extensions import db
from authgate.repositories import UserRepository
from authgate.uow.base import UnitOfWork


class _SessionBound(UnitOfWork):
    """Repositories wired to one session (the Flask-scoped one by default)."""

    def __init__(self, *, session: Session | None = None) -> None:
        self.session = session if session is not None else db.session
        self.users = UserRepository(session=self.session)

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyUnitOfWork(_SessionBound):
    """Commit on clean exit, roll back when the block raises or commit fails."""

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()


class SQLAlchemyReadOnlyUnitOfWork(_SessionBound):
    """
    Read-only scope for ``me``, ``refresh`` and admin listings.

    A ``before_flush`` listener on the current ``Session`` rejects any
    pending insert, update or delete while the scope is open. Exit always
    rolls back.
    """

    def __init__(self, *, session: Session | None = None) -> None:
        super().__init__(session=session)
        self._guarded: Session | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        # Guard this thread's Session only, not the scoped registry
        target = self.session
        self._guarded = target() if isinstance(target, scoped_session) else target
        event.listen(self._guarded, "before_flush", _reject_writes)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            if self._guarded is not None:
                event.remove(self._guarded, "before_flush", _reject_writes)
                self._guarded = None

    def commit(self) -> None:
        """:raises RuntimeError: always."""
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")


def _reject_writes(session, flush_context, instances) -> None:
    if session.new or session.dirty or session.deleted:
        raise RuntimeError("Read-only UnitOfWork: flush blocked, pending writes present.")
