# authgate/services/_shared/base.py
from __future__ import annotations

from authgate.models.base import now_ms
from authgate.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Common ground for the auth, credential and admin services.

    Services orchestrate; they reach persistence only through a unit of work
    opened with :meth:`rw_uow` or :meth:`ro_uow` and read the time through
    :meth:`now_ms`, so tests can freeze both.
    """

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Unit of work that commits on success."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Unit of work that rejects writes and always rolls back."""
        return SQLAlchemyReadOnlyUnitOfWork()

    @staticmethod
    def now_ms() -> int:
        """Current time in epoch milliseconds."""
        return now_ms()
