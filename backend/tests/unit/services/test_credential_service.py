# tests/unit/services/test_credential_service.py
from __future__ import annotations

import pytest

from authgate.services._shared.errors import InvalidCredentialsError
from authgate.services.credentials import CredentialService
from tests.factories.user import UserFactory


@pytest.fixture()
def service(app_ctx) -> CredentialService:
    return CredentialService()


def test_verify_returns_the_owner(service, session):
    user = UserFactory(email="owner@test.com", password="s3cret-pass")

    assert service.verify("owner@test.com", "s3cret-pass").user_id == user.user_id


def test_verify_rejects_wrong_password(service, session):
    UserFactory(email="owner@test.com", password="s3cret-pass")

    with pytest.raises(InvalidCredentialsError):
        service.verify("owner@test.com", "S3cret-pass")


def test_verify_rejects_unknown_email_with_same_error(service, session):
    with pytest.raises(InvalidCredentialsError) as exc:
        service.verify("ghost@test.com", "whatever")
    assert exc.value.message == "Invalid credentials"


def test_verify_runs_a_hash_check_for_unknown_email(service, session, monkeypatch):
    calls: list[str] = []

    def _spy(pwhash, password):
        calls.append(pwhash)
        return False

    monkeypatch.setattr("authgate.services.credentials.service.check_password_hash", _spy)

    with pytest.raises(InvalidCredentialsError):
        service.verify("ghost@test.com", "whatever")
    assert len(calls) == 1


def test_verify_empty_password_is_invalid(service, session):
    UserFactory(email="owner@test.com")

    with pytest.raises(InvalidCredentialsError):
        service.verify("owner@test.com", "")
