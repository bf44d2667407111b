"""User identity model."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Boolean, String, UniqueConstraint, true
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from plantbook.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

MIN_PASSWORD_LENGTH = 6


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity and public profile.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed), globally unique.
    password_hash : str | None
        Hashed password (write-only setter via ``password``). ``None`` for
        accounts created through an external identity provider; such accounts
        cannot log in with a password.
    display_name : str
        Public name shown next to posts and comments.
    avatar_url : str | None
        URL returned by the blob store.
    is_active : bool
        Soft-disable flag. Users are deactivated, never deleted.

    Refresh sessions live in ``refresh_sessions`` (or Redis), not here.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(254), nullable=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :raises ValueError: If shorter than :data:`MIN_PASSWORD_LENGTH`.
        """
        if not isinstance(raw, str) or len(raw) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        self.password_hash = generate_password_hash(raw)

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :returns: ``True`` if it matches; ``False`` otherwise or when the
            account has no password.
        """
        if not self.password_hash or not raw:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :returns: Normalized email (lowercased/trimmed).
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("display_name")
    def _normalize_display_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Display name is required.")
        return value.strip()
