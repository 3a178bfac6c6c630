"""Shared persistence plumbing for principal-store repositories (SQLAlchemy 2.x).

Repositories here stay persistence-only:

* they stage, flush and query, and leave ``commit``/``rollback`` to the
  unit of work that owns the session;
* public sort keys are resolved against a per-repository whitelist, so a
  client can never order by an arbitrary column (``password_hash`` included);
* every listing ends with the primary key so equal sort values come back in
  a stable order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from authgate.core.extensions import db

E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class SortKey:
    """One parsed public sort token (``"-created_at"`` -> ``created_at`` desc)."""

    field: str
    descending: bool = False


def parse_sort_tokens(raw: Iterable[str]) -> list[SortKey]:
    """
    Turn public sort tokens into :class:`SortKey` values.

    A leading ``-`` means descending; blank tokens are dropped.
    """
    keys: list[SortKey] = []
    for token in raw:
        descending = token.startswith("-")
        field = token.removeprefix("-").strip()
        if field:
            keys.append(SortKey(field, descending))
    return keys


def apply_sorting(
    stmt: Select[Any],
    columns: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    tiebreaker: InstrumentedAttribute[Any] | None = None,
) -> Select[Any]:
    """
    Order ``stmt`` by the whitelisted ``columns`` named in ``tokens``.

    Tokens naming anything outside ``columns`` are skipped. ``tiebreaker``
    (usually the primary key) is appended last, ascending.
    """
    clauses = [
        columns[key.field].desc() if key.descending else columns[key.field].asc()
        for key in parse_sort_tokens(tokens)
        if key.field in columns
    ]
    if tiebreaker is not None:
        clauses.append(tiebreaker.asc())
    return stmt.order_by(*clauses) if clauses else stmt


class BaseRepository(Generic[E]):
    """
    Thin CRUD over one mapped model.

    Subclasses set :attr:`model`, :attr:`pk_name` and, when listings may be
    sorted, :attr:`sortable` (public key -> model attribute name).
    """

    model: ClassVar[type]
    pk_name: ClassVar[str] = "id"
    sortable: ClassVar[Mapping[str, str]] = {}

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        """The injected session, else the Flask-scoped one."""
        return self._session if self._session is not None else cast(Session, db.session)

    @property
    def pk(self) -> InstrumentedAttribute[Any]:
        return getattr(self.model, self.pk_name)

    def sort_columns(self) -> dict[str, InstrumentedAttribute[Any]]:
        return {public: getattr(self.model, attr) for public, attr in self.sortable.items()}

    # ------------------------------------------------------------------ #
    # CRUD
    # ------------------------------------------------------------------ #

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so constraint violations surface here."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        stmt = select(self.model).where(self.pk == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def list(self, *, sort: Iterable[str] = (), limit: int | None = None) -> list[E]:
        """
        Return every row ordered by ``sort``.

        :param sort: Public sort tokens, e.g. ``["-created_at"]``.
        :param limit: Optional row cap (at least 1).
        """
        stmt = apply_sorting(select(self.model), self.sort_columns(), sort, tiebreaker=self.pk)
        if limit is not None:
            stmt = stmt.limit(max(int(limit), 1))
        return list(self.session.execute(stmt).scalars())

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()
