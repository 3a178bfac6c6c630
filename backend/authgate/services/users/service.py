# authgate/services/users/service.py
from __future__ import annotations

import logging
from collections.abc import Iterable

from authgate.services._shared.base import BaseService
from authgate.services._shared.errors import SelfDeletionError, UserNotFoundError
from authgate.services.auth.dto import PrincipalOut

log = logging.getLogger(__name__)


class UserAdminService(BaseService):
    """Administrative operations over principals (ADMIN routes only)."""

    def list_users(self, *, sort: Iterable[str] = ("-created_at",)) -> list[PrincipalOut]:
        """Return every principal, sanitized, newest first by default."""
        with self.ro_uow() as uow:
            return [PrincipalOut.from_model(u) for u in uow.users.list(sort=sort)]

    def delete_user(self, *, actor_id: str, user_id: str) -> None:
        """
        Hard-delete a principal.

        Outstanding refresh sessions of the deleted principal stop working
        because refresh re-reads the owner.

        :raises SelfDeletionError: ``actor_id`` targets itself.
        :raises UserNotFoundError: No principal with ``user_id``.
        """
        if actor_id == user_id:
            raise SelfDeletionError()
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise UserNotFoundError()
            uow.users.delete(user)
        log.info("users.deleted", extra={"user_id": user_id})
