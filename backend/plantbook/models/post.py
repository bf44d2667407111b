"""Post model carrying the denormalized engagement counters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from plantbook.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Post(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    A user's post about a plant.

    Notes
    -----
    - ``likes_count`` and ``comments_count`` cache ``count(likes)`` and
      ``count(comments)`` for the post. They are only ever changed with
      single ``UPDATE ... SET col = col +/- 1`` statements in the same
      transaction as the Like/Comment write (see ``PostRepository``), and
      can be rebuilt with ``PostRepository.recount``.
    - Check constraints keep both counters non-negative.
    """

    __tablename__ = "posts"

    author_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    plant_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    likes_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    comments_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="likes_count_non_negative"),
        CheckConstraint("comments_count >= 0", name="comments_count_non_negative"),
        Index("ix_posts_author_id", "author_id"),
        Index("ix_posts_created_at", "created_at"),
    )

    author: Mapped[User] = relationship("User", lazy="joined")
