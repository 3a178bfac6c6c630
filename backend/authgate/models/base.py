"""Reusable SQLAlchemy mixins shared by domain models (typed 2.0)."""

from __future__ import annotations

import time
import uuid

from sqlalchemy import BigInteger
from sqlalchemy.orm import Mapped, mapped_column


def now_ms() -> int:
    """Return the current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def new_uuid() -> str:
    """Return a random opaque identifier."""
    return str(uuid.uuid4())


class TimestampMixin:
    """Provide ``created_at`` and ``updated_at`` epoch-millisecond columns.

    Attributes
    ----------
    created_at:
        Set once on insert.
    updated_at:
        Refreshed by the ORM on every update.
    """

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False, default=now_ms)
    updated_at: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=now_ms,
        onupdate=now_ms,
    )


class ReprMixin:
    """Provide a concise ``__repr__`` including the class name and primary key."""

    __repr_key__ = "id"

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        key = getattr(self, self.__repr_key__, None)
        return f"<{cls} {self.__repr_key__}={key}>"
