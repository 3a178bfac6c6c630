# authgate/services/auth/service.py
from __future__ import annotations

import logging

from authgate.repositories.user import UserRepository
from authgate.services._shared.base import BaseService
from authgate.services._shared.errors import (
    AccountDisabledError,
    CredentialMissingError,
    RoleMismatchError,
    ServiceError,
    StoreUnavailableError,
    TokenExpiredError,
    TokenInvalidError,
    TokenNotFoundError,
    TokenRevokedError,
    UserNotFoundError,
)
from authgate.services._shared.ports import RefreshTokenStore, TokenIssuer
from authgate.services.auth.dto import (
    LoginIn,
    LoginOut,
    PrincipalOut,
    RefreshOut,
    RegisterIn,
)
from authgate.services.auth.gates import RequestPrincipal
from authgate.services.credentials import CredentialService

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Session lifecycle service (register / login / refresh / logout / me).

    Access tokens are stateless and short-lived; every refresh token is
    backed by a server-side :class:`RefreshSession` that logout revokes.
    Refresh mints a new access token only; the refresh token is not rotated.
    """

    def __init__(
        self,
        *,
        token_issuer: TokenIssuer,
        refresh_store: RefreshTokenStore,
        credentials: CredentialService | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_issuer: Adapter for minting/verifying JWTs.
        :param refresh_store: Stateful store for refresh sessions.
        :param credentials: Email/password verifier.
        """
        super().__init__()
        self.tokens = token_issuer
        self.refresh_store = refresh_store
        self.credentials = credentials or CredentialService()

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> PrincipalOut:
        """
        Create a new principal.

        :raises DuplicateEmailError: If the email is already registered.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.create(
                {
                    "email": dto.email,
                    "password": dto.password,
                    "first_name": dto.first_name,
                    "last_name": dto.last_name,
                    "role": dto.role,
                }
            )
            out = PrincipalOut.from_model(user)
        log.info("auth.register.succeeded", extra={"user_id": out.user_id})
        return out

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate credentials and issue an access/refresh pair.

        Checks run in a fixed order: credentials, then account status, then
        the claimed role. No token is issued and ``last_login`` is untouched
        when any of them fails.

        :raises InvalidCredentialsError: Unknown email or wrong password.
        :raises AccountDisabledError: The principal is deactivated.
        :raises RoleMismatchError: The claimed role differs from the stored one.
        :raises StoreUnavailableError: The refresh session could not be stored.
        """
        stored: str | None = None
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = self.credentials.verify(dto.email, dto.password, repo=repo)
                if not user.is_active:
                    raise AccountDisabledError()
                if user.role != dto.role:
                    raise RoleMismatchError()

                repo.update_last_login(user, at=self.now_ms())

                access = self.tokens.issue_access_token(user)
                refresh = self.tokens.issue_refresh_token(user)
                # Persist the session before the token leaves the service
                self.refresh_store.create(refresh.token, user.user_id, refresh.expires_at)
                stored = refresh.token

                out = LoginOut(
                    access_token=access,
                    refresh_token=refresh.token,
                    user=PrincipalOut.from_model(user),
                )
        except ServiceError as err:
            log.info("auth.login.rejected", extra={"reason": err.code})
            raise
        except Exception:
            # The commit failed after the session was stored
            if stored is not None:
                self._discard_session(stored)
            raise

        log.info("auth.login.succeeded", extra={"user_id": out.user.user_id})
        return out

    def _discard_session(self, token: str) -> None:
        """Revoke a session whose token never reached the client."""
        try:
            self.refresh_store.revoke(token)
        except StoreUnavailableError as err:
            # Left to lapse at its own expires_at
            log.warning("auth.login.discard_failed", extra={"reason": err.fault.value})

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str | None) -> RefreshOut:
        """
        Mint a new access token from a valid refresh session.

        :raises CredentialMissingError: No refresh token presented.
        :raises TokenExpiredError: JWT or session past its expiry.
        :raises TokenInvalidError: Bad signature, wrong type or owner mismatch.
        :raises TokenNotFoundError: No session stored for the token.
        :raises TokenRevokedError: The session was revoked by logout.
        :raises UserNotFoundError: The owner no longer exists (401).
        :raises AccountDisabledError: The owner was deactivated.
        """
        try:
            return self._refresh(refresh_token)
        except ServiceError as err:
            log.info("auth.refresh.rejected", extra={"reason": err.code})
            raise

    def _refresh(self, refresh_token: str | None) -> RefreshOut:
        if not refresh_token:
            raise CredentialMissingError("Refresh token not found")

        claims = self.tokens.verify_refresh_token(refresh_token)

        session = self.refresh_store.find_by_token(refresh_token)
        if session is None:
            raise TokenNotFoundError()
        if session.is_revoked:
            raise TokenRevokedError()
        if session.is_expired(self.now_ms()):
            raise TokenExpiredError()
        if session.user_id != claims.user_id:
            raise TokenInvalidError()

        with self.ro_uow() as uow:
            user = uow.users.get(session.user_id)
            if user is None:
                raise UserNotFoundError(status=401)
            if not user.is_active:
                raise AccountDisabledError()
            access = self.tokens.issue_access_token(user)
            out = RefreshOut(access_token=access, user=PrincipalOut.from_model(user))

        log.info("auth.refresh.succeeded", extra={"user_id": out.user.user_id})
        return out

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, refresh_token: str | None) -> bool:
        """
        Revoke the refresh session behind ``refresh_token`` if any.

        Logout always succeeds from the caller's point of view: a store
        outage is logged and the client still drops its credentials.

        :returns: ``True`` when a live session was revoked.
        """
        if not refresh_token:
            return False
        try:
            revoked = self.refresh_store.revoke(refresh_token)
        except StoreUnavailableError as err:
            log.warning("auth.logout.revoke_failed", extra={"reason": err.fault.value})
            return False
        log.info("auth.logout.succeeded", extra={"reason": "revoked" if revoked else "noop"})
        return revoked

    # ------------------------------------------------------------------ #
    # Me
    # ------------------------------------------------------------------ #

    def me(self, principal: RequestPrincipal) -> PrincipalOut:
        """
        Return the current principal re-read from the store.

        :raises UserNotFoundError: The principal was deleted since login (404).
        """
        with self.ro_uow() as uow:
            user = uow.users.get(principal.user_id)
            if user is None:
                raise UserNotFoundError()
            return PrincipalOut.from_model(user)
