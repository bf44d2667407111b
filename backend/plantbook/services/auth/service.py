# plantbook/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Mapping

from sqlalchemy.exc import IntegrityError

from plantbook.models.user import User
from plantbook.repositories.user import UserRepository
from plantbook.services._shared.base import BaseService, ServiceContext
from plantbook.services._shared.errors import (
    AccountDisabledError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationFailedError,
    violates,
)
from plantbook.services._shared.ports import ExternalIdentity, IdentityProvider
from plantbook.services.auth.dto import AuthOut, LoginIn, RefreshIn, RegisterIn
from plantbook.services.identity._converters import user_to_out
from plantbook.services.tokens.dto import SessionOut, TokenPairOut
from plantbook.services.tokens.service import TokenService

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REFRESH = "Invalid or expired refresh token"


class AuthService(BaseService):
    """
    Authentication lifecycle service.

    Covers register / login / refresh / logout / logout-all and sign-in
    through external identity providers. Tokens are issued and revoked via
    :class:`TokenService`; the user rows are read and written through units
    of work. Token calls always run after the unit of work has closed, since
    the SQL session store opens its own.
    """

    def __init__(
        self,
        *,
        tokens: TokenService,
        providers: Mapping[str, IdentityProvider] | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param tokens: Token issuing/rotation service.
        :param providers: Registry of external identity providers by name.
        :param ctx: Request context (the device label comes from here).
        """
        super().__init__(ctx=ctx)
        self.tokens = tokens
        self.providers = dict(providers or {})

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthOut:
        """
        Create an account and sign it in.

        :raises ConflictError: If the email is already registered.
        :raises ValidationFailedError: On malformed email, blank name or weak password.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            if repo.exists_by_email(dto.email):
                raise ConflictError("User", "email already in use")

            try:
                user = User(email=dto.email, display_name=dto.display_name)
                user.password = dto.password
            except ValueError as exc:
                raise ValidationFailedError(str(exc)) from exc

            try:
                repo.add(user)
            except IntegrityError as exc:
                # Lost a race with a concurrent registration.
                if violates(exc, "uq_users_email", columns=["users.email"]):
                    raise ConflictError("User", "email already in use") from exc
                raise
            user_out = user_to_out(user)

        pair = self.tokens.issue_pair(user_out.id, user_out.email, device=self.ctx.device)
        log.info("auth.register.succeeded", extra={"user_id": user_out.id})
        return AuthOut(user=user_out, tokens=pair)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :raises AuthenticationError: Unknown email, password-less account or
            wrong password (one message for all three).
        :raises AccountDisabledError: Correct password on a deactivated account.
        """
        with self.ro_uow() as uow:
            user = uow.users.authenticate(dto.email, dto.password)
            if user is None:
                log.info("auth.login.failed")
                raise AuthenticationError(INVALID_CREDENTIALS)
            if not user.is_active:
                log.info("auth.login.disabled", extra={"user_id": user.id})
                raise AccountDisabledError()
            user_out = user_to_out(user)

        pair = self.tokens.issue_pair(user_out.id, user_out.email, device=self.ctx.device)
        log.info("auth.login.succeeded", extra={"user_id": user_out.id})
        return AuthOut(user=user_out, tokens=pair)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a refresh token for a new pair (rotation).

        :raises AuthenticationError: Bad signature, expired, wrong kind,
            revoked, already rotated, or owner missing/deactivated. The
            caller cannot tell these apart.
        """
        try:
            payload = self.tokens.verify_refresh(dto.refresh_token)
            with self.ro_uow() as uow:
                user = uow.users.get_active(payload.user_id)
                if user is None:
                    raise AuthenticationError("Unknown or inactive user")
                user_id, email = user.id, user.email

            return self.tokens.rotate_refresh(
                dto.refresh_token, user_id, email, device=self.ctx.device
            )
        except AuthenticationError as exc:
            log.warning("auth.refresh.rejected", extra={"status": 401}, exc_info=exc)
            raise AuthenticationError(INVALID_REFRESH) from exc

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: int, refresh_token: str | None = None) -> bool:
        """
        Revoke one refresh session of the caller. Idempotent.

        Without a token there is nothing server-side to revoke; the client
        simply drops its access token.

        :returns: True if a session was removed.
        """
        if not refresh_token:
            return False
        removed = self.tokens.revoke(user_id, refresh_token)
        log.info("auth.logout", extra={"user_id": user_id, "count": int(removed)})
        return removed

    def logout_all(self, user_id: int) -> int:
        """Revoke every refresh session of the caller. :returns: sessions removed."""
        return self.tokens.revoke_all(user_id)

    def sessions(self, user_id: int) -> list[SessionOut]:
        """List live refresh sessions, oldest first, without token material."""
        return [
            SessionOut(device=s.device, issued_at=s.issued_at, expires_at=s.expires_at)
            for s in self.tokens.sessions(user_id)
        ]

    # ------------------------------------------------------------------ #
    # External identity providers
    # ------------------------------------------------------------------ #

    def login_with_provider(self, provider: str, code: str) -> AuthOut:
        """
        Exchange a provider code and sign the resulting identity in.

        :raises NotFoundError: Unknown provider name.
        :raises AuthenticationError: Provider rejected the code.
        """
        idp = self.providers.get(provider)
        if idp is None:
            raise NotFoundError("IdentityProvider", provider)
        identity = idp.exchange(code)
        log.info("auth.oauth.exchanged", extra={"provider": provider})
        return self.login_external(identity)

    def login_external(self, identity: ExternalIdentity) -> AuthOut:
        """
        Resolve or create a password-less user for an external identity.

        An existing account is linked by email; its avatar is filled in when
        it has none.

        :raises AccountDisabledError: If the matching account is deactivated.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(identity.email)
            if user is None:
                display_name = identity.display_name or identity.email.split("@")[0]
                try:
                    user = User(
                        email=identity.email,
                        display_name=display_name,
                        avatar_url=identity.avatar_url,
                    )
                    repo.add(user)
                except ValueError as exc:
                    raise ValidationFailedError(str(exc)) from exc
                except IntegrityError as exc:
                    if violates(exc, "uq_users_email", columns=["users.email"]):
                        raise ConflictError("User", "email already in use") from exc
                    raise
            elif not user.is_active:
                raise AccountDisabledError()
            elif not user.avatar_url and identity.avatar_url:
                repo.update(user, avatar_url=identity.avatar_url)
            user_out = user_to_out(user)

        pair = self.tokens.issue_pair(user_out.id, user_out.email, device=self.ctx.device)
        log.info("auth.login.succeeded", extra={"user_id": user_out.id})
        return AuthOut(user=user_out, tokens=pair)
