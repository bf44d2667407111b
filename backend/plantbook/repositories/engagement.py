"""Like and Comment repositories."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import Select, select

from plantbook.models.engagement import Comment, Like
from plantbook.models.post import Post
from plantbook.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    apply_sorting,
    paginate_select,
)


class LikeRepository(BaseRepository[Like]):
    """Persistence-only repository for :class:`Like`.

    ``add`` is a blind insert: duplicates are rejected by the
    ``uq_likes_post_user`` constraint, never by a prior read.
    """

    model = Like

    def _filterable_fields(self):
        return {"post_id": Like.post_id, "user_id": Like.user_id}

    def liked_post_ids(self, user_id: int, post_ids: Iterable[int]) -> set[int]:
        """Return the subset of ``post_ids`` liked by ``user_id``."""
        ids = list(post_ids)
        if not ids:
            return set()
        stmt = select(Like.post_id).where(Like.user_id == user_id, Like.post_id.in_(ids))
        return set(self.session.execute(stmt).scalars())

    def liked_posts(self, user_id: int, pagination: Pagination) -> Page[Post]:
        """Page through posts liked by ``user_id``, most recently liked first."""
        stmt: Select[Any] = (
            select(Post)
            .join(Like, Like.post_id == Post.id)
            .where(Like.user_id == user_id)
            .order_by(Like.created_at.desc(), Like.id.desc())
        )
        items, total = paginate_select(
            self.session, stmt, page=pagination.page, limit=pagination.limit
        )
        return Page(items=items, total=total, page=pagination.page, limit=pagination.limit)


class CommentRepository(BaseRepository[Comment]):
    """Persistence-only repository for :class:`Comment`."""

    model = Comment

    def _filterable_fields(self):
        return {"id": Comment.id, "post_id": Comment.post_id, "user_id": Comment.user_id}

    def _sortable_fields(self):
        return {"created_at": Comment.created_at}

    def _default_order(self):
        return (Comment.created_at.desc(),)

    def for_post(self, post_id: int, pagination: Pagination) -> Page[Comment]:
        """Page through a post's comments (newest first unless ``sort`` says otherwise)."""
        stmt = apply_sorting(
            select(Comment).where(Comment.post_id == post_id),
            self._sortable_fields(),
            pagination.sort,
            default=self._default_order(),
            pk_attr=Comment.id,
        )
        items, total = paginate_select(
            self.session, stmt, page=pagination.page, limit=pagination.limit
        )
        return Page(items=items, total=total, page=pagination.page, limit=pagination.limit)
