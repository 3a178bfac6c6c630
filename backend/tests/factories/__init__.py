"""Factory Boy base wired to whatever session the current test bound."""

from __future__ import annotations

import factory

_bound_session = None


def bind_session(session) -> None:
    """Point every factory at ``session`` (``None`` unbinds)."""
    global _bound_session
    _bound_session = session


def bound_session():
    """Return the session bound by the ``session``/``make_user`` fixtures.

    Raises
    ------
    RuntimeError
        If a factory runs outside those fixtures.
    """
    if _bound_session is None:
        raise RuntimeError("No session bound for factories; use the 'session' fixture.")
    return _bound_session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Persist through the bound session and commit, so rows outlive the test's context."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = bound_session
        sqlalchemy_session_persistence = "commit"
