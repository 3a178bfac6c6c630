# tests/unit/services/test_user_admin_service.py
from __future__ import annotations

import pytest

from authgate.models.user import Role, User
from authgate.services._shared.errors import SelfDeletionError, UserNotFoundError
from authgate.services.users import UserAdminService
from tests.factories.user import UserFactory


@pytest.fixture()
def service(app_ctx) -> UserAdminService:
    return UserAdminService()


def test_list_users_is_newest_first_and_sanitized(service, session):
    older = UserFactory(email="older@test.com", created_at=1_000)
    newer = UserFactory(email="newer@test.com", created_at=2_000, role=Role.ADMIN)

    users = service.list_users()

    assert [u.user_id for u in users] == [newer.user_id, older.user_id]
    assert all(not hasattr(u, "password_hash") for u in users)


def test_list_users_accepts_sort_tokens(service, session):
    UserFactory(email="b@test.com")
    UserFactory(email="a@test.com")

    users = service.list_users(sort=["email"])

    assert [u.email for u in users] == ["a@test.com", "b@test.com"]


def test_delete_user_removes_the_row(service, session):
    admin = UserFactory(role=Role.ADMIN)
    target = UserFactory()
    target_id = target.user_id

    service.delete_user(actor_id=admin.user_id, user_id=target_id)

    assert session.get(User, target_id) is None


def test_delete_self_is_rejected(service, session):
    admin = UserFactory(role=Role.ADMIN)

    with pytest.raises(SelfDeletionError) as exc:
        service.delete_user(actor_id=admin.user_id, user_id=admin.user_id)

    assert exc.value.status == 400
    assert session.get(User, admin.user_id) is not None


def test_delete_unknown_user_is_not_found(service, session):
    admin = UserFactory(role=Role.ADMIN)

    with pytest.raises(UserNotFoundError) as exc:
        service.delete_user(actor_id=admin.user_id, user_id="does-not-exist")
    assert exc.value.status == 404
