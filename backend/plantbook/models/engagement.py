"""Like and Comment join records behind the engagement counters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from plantbook.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User

LIKE_UNIQUE_CONSTRAINT = "uq_likes_post_user"


class Like(PKMixin, CreatedAtMixin, ReprMixin, db.Model):
    """
    At most one row per ``(post_id, user_id)``.

    Rows are inserted and deleted, never updated. The unique constraint is
    what serializes concurrent likes of the same post by the same user.
    """

    __tablename__ = "likes"

    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name=LIKE_UNIQUE_CONSTRAINT),
        Index("ix_likes_user_id", "user_id"),
    )


class Comment(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """A comment on a post. Only its author may delete it."""

    __tablename__ = "comments"

    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    text: Mapped[str] = mapped_column(String(1000), nullable=False)

    __table_args__ = (Index("ix_comments_post_id_created_at", "post_id", "created_at"),)

    author: Mapped[User] = relationship("User", lazy="joined")
