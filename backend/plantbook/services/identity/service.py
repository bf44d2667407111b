"""
IdentityService
===============

Aggregate service responsible for the `User` profile:
- Public and private profile reads
- Display name and avatar management
- Password lifecycle
- Deactivation (users are never deleted)

Token issuance lives in :mod:`plantbook.services.auth`; this service only
asks the :class:`TokenService` to drop sessions when credentials change.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, cast

from plantbook.repositories.user import UserRepository
from plantbook.services._shared.base import BaseService, ServiceContext
from plantbook.services._shared.errors import (
    AuthenticationError,
    NotFoundError,
    ValidationFailedError,
)
from plantbook.services._shared.ports import BlobStore
from plantbook.services.identity._converters import user_to_out, user_to_public
from plantbook.services.identity.dto import (
    PasswordChangeIn,
    UploadIn,
    UserOut,
    UserPublicOut,
    UserUpdateIn,
)
from plantbook.services.tokens.service import TokenService

log = logging.getLogger(__name__)

DEFAULT_AVATAR_MAX_BYTES = 5 * 1024 * 1024


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Retrieve user profiles (own and public).
    - Update the display name and avatar.
    - Change passwords, revoking every refresh session afterwards.
    - Deactivate accounts and clear their sessions.
    """

    def __init__(
        self,
        *,
        tokens: TokenService,
        blobs: BlobStore,
        avatar_max_bytes: int = DEFAULT_AVATAR_MAX_BYTES,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.tokens = tokens
        self.blobs = blobs
        self.avatar_max_bytes = avatar_max_bytes

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: int) -> UserOut:
        """
        Retrieve the full profile of a user.

        :param user_id: User primary key.
        :returns: Private profile DTO.
        :raises NotFoundError: If user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return user_to_out(user)

    def get_public_user(self, user_id: int) -> UserPublicOut:
        """
        Retrieve the public fields of an active user.

        :raises NotFoundError: If the user does not exist or is deactivated.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_active(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return user_to_public(user)

    # --------------------------------------------------------------------- #
    # Profile updates
    # --------------------------------------------------------------------- #

    def update_profile(self, user_id: int, dto: UserUpdateIn) -> UserOut:
        """
        Update the display name.

        :raises ValidationFailedError: When the new name is blank.
        :raises NotFoundError: When the user does not exist.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            if dto.display_name is not None:
                try:
                    repo.update(user, display_name=dto.display_name)
                except ValueError as exc:
                    raise ValidationFailedError(str(exc), field="displayName") from exc
            return user_to_out(user)

    def set_avatar(self, user_id: int, upload: UploadIn) -> UserOut:
        """
        Store a new avatar image and link it to the profile.

        The previous avatar blob is removed once the new URL is committed.

        :raises BlobRejectedError: On unsupported type or oversize file.
        :raises NotFoundError: When the user does not exist.
        """
        url = self.blobs.save(
            cast(BinaryIO, upload.stream),
            filename=upload.filename,
            mimetype=upload.mimetype,
            max_bytes=self.avatar_max_bytes,
        )
        try:
            with self.rw_uow() as uow:
                user = uow.users.get(user_id)
                if user is None:
                    raise NotFoundError("User", user_id)
                previous = user.avatar_url
                uow.users.update(user, avatar_url=url)
                out = user_to_out(user)
        except Exception:
            self.blobs.delete(url)
            raise

        if previous:
            self.blobs.delete(previous)
        log.info("users.avatar.updated", extra={"user_id": user_id})
        return out

    def remove_avatar(self, user_id: int) -> UserOut:
        """Unlink and delete the current avatar. Idempotent."""
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            previous = user.avatar_url
            uow.users.update(user, avatar_url=None)
            out = user_to_out(user)

        if previous:
            self.blobs.delete(previous)
        return out

    # --------------------------------------------------------------------- #
    # Password management
    # --------------------------------------------------------------------- #

    def change_password(self, user_id: int, dto: PasswordChangeIn) -> int:
        """
        Change a user's password after verifying the current one.

        Every refresh session is revoked afterwards, so other devices must
        sign in again.

        :returns: Number of sessions revoked.
        :raises NotFoundError: When user not found.
        :raises ValidationFailedError: Password-less account or weak new password.
        :raises AuthenticationError: When the current password is wrong.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            if not user.has_password:
                raise ValidationFailedError(
                    "This account signs in through an external provider and has no password.",
                    field="currentPassword",
                )
            if not user.verify_password(dto.current_password):
                raise AuthenticationError("Current password is incorrect.")

            try:
                repo.update_password(user, dto.new_password)
            except ValueError as exc:
                raise ValidationFailedError(str(exc), field="newPassword") from exc

        revoked = self.tokens.revoke_all(user_id)
        log.info("users.password.changed", extra={"user_id": user_id, "count": revoked})
        return revoked

    # --------------------------------------------------------------------- #
    # Deactivation
    # --------------------------------------------------------------------- #

    def deactivate(self, user_id: int) -> int:
        """
        Soft-disable an account and clear its refresh sessions.

        Outstanding access tokens stop working as soon as the gate sees the
        inactive flag.

        :returns: Number of sessions revoked.
        :raises NotFoundError: When the user does not exist.
        """
        with self.rw_uow() as uow:
            if uow.users.set_active(user_id, False) is None:
                raise NotFoundError("User", user_id)

        revoked = self.tokens.revoke_all(user_id)
        log.info("users.deactivated", extra={"user_id": user_id, "count": revoked})
        return revoked
