"""Pytest fixtures building an isolated application per test.

Each test gets a fresh app bound to its own in-memory SQLite database and an
in-memory refresh store, so no state leaks between cases.
"""

from __future__ import annotations

import os

import pytest

from authgate.core.config import TestingConfig
from authgate.core.extensions import db as _db
from authgate.core.security import get_components
from authgate.factory import create_app
from authgate.models.user import Role
from tests.helpers.utils import DEFAULT_PASSWORD


@pytest.fixture()
def app():
    """Create a Flask application configured for testing with tables created.

    No application context is left pushed; request-level tests rely on the
    test client to push its own so ``flask.g`` never leaks across requests.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig)
    application.logger.setLevel("WARNING")
    with application.app_context():
        _db.create_all()
    yield application
    with application.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def app_ctx(app):
    """Push an application context for service/repository level tests."""
    with app.app_context():
        yield app
        _db.session.remove()


@pytest.fixture()
def session(app_ctx):
    """Return the Flask-scoped session and wire Factory Boy to it."""
    from tests.factories import bind_session

    bind_session(_db.session)
    yield _db.session
    bind_session(None)


@pytest.fixture()
def components(app_ctx):
    """Auth components (issuer, store, services) registered on the app."""
    return get_components()


@pytest.fixture()
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """
    Persist a principal in a short-lived app context.

    Returns a plain dict (``user_id``, ``email``, ``password``, ``role``) so
    callers never hold a detached ORM instance.
    """
    from tests.factories import bind_session
    from tests.factories.user import UserFactory

    def _make(
        *,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        role: Role = Role.USER,
        is_active: bool = True,
    ) -> dict[str, object]:
        with app.app_context():
            bind_session(_db.session)
            kwargs = {"password": password, "role": role, "is_active": is_active}
            if email is not None:
                kwargs["email"] = email
            user = UserFactory(**kwargs)
            data = {
                "user_id": user.user_id,
                "email": user.email,
                "password": password,
                "role": user.role,
            }
            bind_session(None)
            _db.session.remove()
        return data

    return _make


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk
