"""Server-side record of an issued refresh token."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from plantbook.core.extensions import db

from .base import PKMixin, ReprMixin, utcnow


class RefreshSession(PKMixin, ReprMixin, db.Model):
    """
    One live refresh token of a user.

    Only the SHA-256 hex digest of the token is stored. A refresh token is
    accepted only while its digest has a row here; deleting the row revokes
    the session.
    """

    __tablename__ = "refresh_sessions"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    device: Mapped[str | None] = mapped_column(String(120), nullable=True)
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("token_hash", name="uq_refresh_sessions_token_hash"),
        Index("ix_refresh_sessions_user_id", "user_id"),
    )
