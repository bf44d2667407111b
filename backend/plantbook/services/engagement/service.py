"""
EngagementService
=================

Likes and comments, and the denormalized ``likes_count`` /
``comments_count`` counters they drive.

Every write runs in one read-write unit of work: the join row and the
counter ``UPDATE`` commit or roll back together. Duplicate likes are
rejected by the ``uq_likes_post_user`` constraint, not by a prior read, so
concurrent requests cannot both succeed.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from plantbook.models.base import as_utc
from plantbook.models.engagement import LIKE_UNIQUE_CONSTRAINT, Comment, Like
from plantbook.repositories.post import CounterDrift
from plantbook.services._shared.base import BaseService, ServiceContext
from plantbook.services._shared.dto import PageOut, PaginationIn
from plantbook.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
    violates,
)
from plantbook.services.engagement.dto import CommentOut, LikeStateOut, RecountOut
from plantbook.services.identity._converters import user_to_public
from plantbook.services.posts._converters import post_to_out
from plantbook.services.posts.dto import PostOut

logger = logging.getLogger(__name__)

DEFAULT_COMMENT_MAX_LENGTH = 1000
_LIKE_COLUMNS = ["likes.post_id", "likes.user_id"]


def _comment_to_out(row: Comment, *, comments_count: int | None = None) -> CommentOut:
    return CommentOut(
        id=row.id,
        post_id=row.post_id,
        author=user_to_public(row.author),
        text=row.text,
        created_at=as_utc(row.created_at),
        comments_count=comments_count,
    )


def _recount_to_out(drift: CounterDrift) -> RecountOut:
    return RecountOut(
        post_id=drift.post_id,
        likes_count=drift.likes_after,
        comments_count=drift.comments_after,
        likes_before=drift.likes_before,
        comments_before=drift.comments_before,
    )


class EngagementService(BaseService):
    """Application service for likes, comments and their counters."""

    def __init__(
        self,
        *,
        comment_max_length: int = DEFAULT_COMMENT_MAX_LENGTH,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.comment_max_length = comment_max_length

    # --------------------------------------------------------------------- #
    # Likes
    # --------------------------------------------------------------------- #

    def like(self, post_id: int, user_id: int) -> LikeStateOut:
        """
        Like a post and bump its counter.

        :returns: New counter value and ``liked=True``.
        :raises NotFoundError: Unknown post.
        :raises ConflictError: The user already likes the post (counter untouched).
        """
        with self.rw_uow() as uow:
            if not uow.posts.exists(id=post_id):
                raise NotFoundError("Post", post_id)

            try:
                uow.likes.add(Like(post_id=post_id, user_id=user_id))
            except IntegrityError as exc:
                if violates(exc, LIKE_UNIQUE_CONSTRAINT, columns=_LIKE_COLUMNS):
                    logger.info(
                        "engagement.like.conflict", extra={"post_id": post_id, "user_id": user_id}
                    )
                    raise ConflictError("Like", "already liked") from exc
                raise

            count = uow.posts.increment(post_id, "likes_count")
            if count is None:
                # Post deleted between the existence check and the update.
                raise NotFoundError("Post", post_id)
            return LikeStateOut(likes_count=count, liked=True)

    def unlike(self, post_id: int, user_id: int) -> LikeStateOut:
        """
        Remove the caller's like and decrement the counter (floored at zero).

        :raises NotFoundError: Unknown post, or the caller does not like it.
        """
        with self.rw_uow() as uow:
            if not uow.posts.exists(id=post_id):
                raise NotFoundError("Post", post_id)

            if uow.likes.delete_where(post_id=post_id, user_id=user_id) == 0:
                raise NotFoundError("Like", f"post={post_id} user={user_id}")

            count = uow.posts.decrement(post_id, "likes_count")
            return LikeStateOut(likes_count=count or 0, liked=False)

    def check_liked(self, post_id: int, user_id: int) -> bool:
        with self.ro_uow() as uow:
            return uow.likes.exists(post_id=post_id, user_id=user_id)

    def liked_posts(self, user_id: int, pagination: PaginationIn) -> PageOut[PostOut]:
        """Posts liked by the user, most recently liked first."""
        page_in = self.ensure_pagination(page=pagination.page, limit=pagination.limit)
        with self.ro_uow() as uow:
            page = uow.likes.liked_posts(user_id, page_in)
            items = [post_to_out(p, liked=True) for p in page.items]
            return PageOut(items=items, total=page.total, page=page.page, limit=page.limit)

    # --------------------------------------------------------------------- #
    # Comments
    # --------------------------------------------------------------------- #

    def add_comment(self, post_id: int, text: str, user_id: int) -> CommentOut:
        """
        Add a comment and bump ``comments_count``.

        :raises ValidationFailedError: Text empty after trimming or too long.
        :raises NotFoundError: Unknown post.
        """
        body = (text or "").strip()
        if not body:
            raise ValidationFailedError("Comment text is required", field="text")
        if len(body) > self.comment_max_length:
            raise ValidationFailedError(
                f"Comment must be at most {self.comment_max_length} characters", field="text"
            )

        with self.rw_uow() as uow:
            if not uow.posts.exists(id=post_id):
                raise NotFoundError("Post", post_id)

            comment = uow.comments.add(Comment(post_id=post_id, user_id=user_id, text=body))
            count = uow.posts.increment(post_id, "comments_count")
            if count is None:
                raise NotFoundError("Post", post_id)
            return _comment_to_out(comment, comments_count=count)

    def delete_comment(self, comment_id: int, user_id: int, *, post_id: int | None = None) -> int:
        """
        Delete the caller's own comment and decrement ``comments_count``.

        :param post_id: When given, the comment must belong to this post.
        :returns: The post's ``comments_count`` after the delete.
        :raises NotFoundError: Unknown comment (or on another post).
        :raises AuthorizationError: Caller is not the author.
        """
        with self.rw_uow() as uow:
            comment = uow.comments.get(comment_id)
            if comment is None or (post_id is not None and comment.post_id != post_id):
                raise NotFoundError("Comment", comment_id)
            self.ensure_owner(user_id, comment.user_id, msg="You can only delete your own comments.")

            target_post = comment.post_id
            uow.session.expunge(comment)
            # A concurrent delete of the same comment leaves nothing to remove.
            if uow.comments.delete_where(id=comment_id) == 0:
                raise NotFoundError("Comment", comment_id)

            count = uow.posts.decrement(target_post, "comments_count")
            logger.info(
                "engagement.comment.deleted",
                extra={"comment_id": comment_id, "post_id": target_post, "user_id": user_id},
            )
            return count or 0

    def list_comments(self, post_id: int, pagination: PaginationIn) -> PageOut[CommentOut]:
        """
        Comments of a post, newest first.

        :raises NotFoundError: Unknown post.
        """
        page_in = self.ensure_pagination(
            page=pagination.page, limit=pagination.limit, sort=pagination.sort
        )
        with self.ro_uow() as uow:
            if not uow.posts.exists(id=post_id):
                raise NotFoundError("Post", post_id)
            page = uow.comments.for_post(post_id, page_in)
            items = [_comment_to_out(c) for c in page.items]
            return PageOut(items=items, total=page.total, page=page.page, limit=page.limit)

    # --------------------------------------------------------------------- #
    # Reconciliation
    # --------------------------------------------------------------------- #

    def recount(self, post_id: int) -> RecountOut:
        """
        Recompute one post's counters from the Like/Comment tables.

        :raises NotFoundError: Unknown post.
        """
        with self.rw_uow() as uow:
            drift = uow.posts.recount(post_id)
            if drift is None:
                raise NotFoundError("Post", post_id)
            out = _recount_to_out(drift)

        if out.drifted:
            logger.warning(
                "engagement.recount.drift",
                extra={"post_id": post_id, "drift": [out.likes_before, out.comments_before]},
            )
        return out

    def recount_all(self) -> list[RecountOut]:
        """
        Repair every post whose counters disagree with the join tables.

        :returns: One entry per post that had drifted (empty when consistent).
        """
        with self.rw_uow() as uow:
            drifts = uow.posts.find_drift()
            uow.posts.recount_many([d.post_id for d in drifts])
            outs = [_recount_to_out(d) for d in drifts]

        for out in outs:
            logger.warning(
                "engagement.recount.drift",
                extra={"post_id": out.post_id, "drift": [out.likes_before, out.comments_before]},
            )
        return outs
