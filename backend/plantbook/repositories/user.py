"""User repository for persistence and credential lookups."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from plantbook.models.user import User
from plantbook.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER issues tokens; credential checks return the user or ``None``.
    """

    model = User

    def _filterable_fields(self):
        return {"id": User.id, "email": User.email, "is_active": User.is_active}

    def _updatable_fields(self):
        """Publicly allowed updatable fields (password has its own path)."""
        return {"display_name", "avatar_url"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :returns: User instance or ``None`` when not found.
        """
        stmt = select(User).where(User.email == normalize_email(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == normalize_email(email))
        return bool(self.session.execute(stmt).first())

    def get_active(self, user_id: int) -> User | None:
        """Return the user only if it exists and is active."""
        stmt = select(User).where(User.id == user_id, User.is_active.is_(True))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    # ---------------------------- Credential ops ----------------------------

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when the password matches, else ``None``.

        Accounts without a password hash never authenticate. The active flag
        is not checked here so callers can tell "disabled" apart after a
        correct password.
        """
        user = self.get_by_email(email)
        if user is None or not user.verify_password(password):
            return None
        return user

    def update_password(self, user: User, new_password: str) -> None:
        """Hash and assign a new password through the model setter, then flush."""
        user.password = new_password
        self.flush()

    def set_active(self, user_id: int, active: bool) -> User | None:
        """Flip the active flag; returns ``None`` when the user does not exist."""
        user = self.get(user_id)
        if user is None:
            return None
        user.is_active = active
        self.flush()
        return user
