# authgate/services/credentials/service.py
from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from authgate.models.user import User
from authgate.repositories.user import UserRepository
from authgate.services._shared.base import BaseService
from authgate.services._shared.errors import InvalidCredentialsError

log = logging.getLogger(__name__)

# Verified against when the email is unknown so both branches cost one hash check
_DUMMY_HASH: str = generate_password_hash("authgate-timing-equalizer")


class CredentialService(BaseService):
    """
    Verify an email/password pair against the stored principal.

    Unknown email and wrong password are indistinguishable to callers, in
    both the error raised and the time taken.
    """

    def verify(self, email: str, password: str, *, repo: UserRepository | None = None) -> User:
        """
        Return the principal owning ``email`` when ``password`` matches.

        :param email: Login email (normalized before lookup).
        :param password: Raw password candidate.
        :param repo: Repository bound to the caller's unit of work. When
            omitted a read-only unit of work is opened for the lookup.
        :returns: The matching :class:`User`.
        :raises InvalidCredentialsError: On unknown email or bad password.
        """
        if repo is not None:
            return self._verify(repo, email, password)
        with self.ro_uow() as uow:
            return self._verify(uow.users, email, password)

    @staticmethod
    def _verify(repo: UserRepository, email: str, password: str) -> User:
        user = repo.get_by_email(email)
        if user is None:
            check_password_hash(_DUMMY_HASH, password or "")
            raise InvalidCredentialsError()
        if not user.verify_password(password or ""):
            raise InvalidCredentialsError()
        return user
