"""Post repository, including the atomic counter statements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, case, func, or_, select, update
from sqlalchemy.orm import InstrumentedAttribute

from plantbook.models.engagement import Comment, Like
from plantbook.models.post import Post
from plantbook.repositories.base import BaseRepository

COUNTER_COLUMNS = ("likes_count", "comments_count")


@dataclass(frozen=True, slots=True)
class CounterDrift:
    """Stored vs. recomputed counters for one post."""

    post_id: int
    likes_before: int
    likes_after: int
    comments_before: int
    comments_after: int

    @property
    def drifted(self) -> bool:
        return (self.likes_before, self.comments_before) != (
            self.likes_after,
            self.comments_after,
        )


def _actual_likes() -> Any:
    return (
        select(func.count(Like.id))
        .where(Like.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )


def _actual_comments() -> Any:
    return (
        select(func.count(Comment.id))
        .where(Comment.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )


class PostRepository(BaseRepository[Post]):
    """Persistence-only repository for :class:`Post`.

    Counters are never assigned from Python values read earlier; they are
    changed by single ``UPDATE`` statements computed by the database, so
    concurrent writers cannot lose each other's increments.
    """

    model = Post

    def _sortable_fields(self):
        return {
            "created_at": Post.created_at,
            "likes_count": Post.likes_count,
            "comments_count": Post.comments_count,
            "title": Post.title,
        }

    def _default_order(self):
        return (Post.created_at.desc(),)

    def _filterable_fields(self):
        return {"id": Post.id, "author_id": Post.author_id, "is_published": Post.is_published}

    def feed_select(self) -> Select[Any]:
        return select(Post).where(Post.is_published.is_(True))

    # ------------------------------ Counters ---------------------------------

    def _expire_counters(self, *post_ids: int) -> None:
        """Expire cached counter attributes of posts already in the session."""
        for post_id in post_ids:
            cached = self.session.identity_map.get(self.session.identity_key(Post, post_id))
            if cached is not None:
                self.session.expire(cached, list(COUNTER_COLUMNS))

    def _column(self, name: str) -> InstrumentedAttribute[int]:
        if name not in COUNTER_COLUMNS:
            raise ValueError(f"Unknown counter column: {name}")
        return getattr(Post, name)

    def adjust_counter(self, post_id: int, column: str, delta: int) -> int | None:
        """Atomically add ``delta`` to a counter and return the new value.

        Negative deltas are floored at zero inside the statement
        (``CASE WHEN col + delta > 0 THEN col + delta ELSE 0 END``).

        :param post_id: Target post.
        :param column: ``"likes_count"`` or ``"comments_count"``.
        :param delta: Signed amount to add.
        :returns: Counter value after the update, or ``None`` when the post
            does not exist.
        """
        col = self._column(column)
        new_value: Any = col + delta
        if delta < 0:
            new_value = case((col + delta > 0, col + delta), else_=0)
        stmt = (
            update(Post)
            .where(Post.id == post_id)
            .values({column: new_value})
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)
        self._expire_counters(post_id)
        value = self.session.execute(select(col).where(Post.id == post_id)).scalar_one_or_none()
        return None if value is None else int(value)

    def increment(self, post_id: int, column: str) -> int | None:
        return self.adjust_counter(post_id, column, 1)

    def decrement(self, post_id: int, column: str) -> int | None:
        return self.adjust_counter(post_id, column, -1)

    def counters(self, post_id: int) -> tuple[int, int] | None:
        row = self.session.execute(
            select(Post.likes_count, Post.comments_count).where(Post.id == post_id)
        ).first()
        return (int(row[0]), int(row[1])) if row else None

    # ---------------------------- Reconciliation -----------------------------

    def recount(self, post_id: int) -> CounterDrift | None:
        """Recompute both counters of one post from the Like/Comment tables."""
        before = self.counters(post_id)
        if before is None:
            return None
        stmt = (
            update(Post)
            .where(Post.id == post_id)
            .values(likes_count=_actual_likes(), comments_count=_actual_comments())
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)
        self._expire_counters(post_id)
        after = self.counters(post_id)
        if after is None:
            return None
        return CounterDrift(post_id, before[0], after[0], before[1], after[1])

    def find_drift(self) -> list[CounterDrift]:
        """Return every post whose stored counters disagree with the join tables."""
        actual_likes = _actual_likes()
        actual_comments = _actual_comments()
        stmt = (
            select(
                Post.id,
                Post.likes_count,
                actual_likes,
                Post.comments_count,
                actual_comments,
            )
            .where(or_(Post.likes_count != actual_likes, Post.comments_count != actual_comments))
            .order_by(Post.id)
        )
        return [
            CounterDrift(int(pid), int(lb), int(la), int(cb), int(ca))
            for pid, lb, la, cb, ca in self.session.execute(stmt)
        ]

    def recount_many(self, post_ids: list[int]) -> None:
        if not post_ids:
            return
        stmt = (
            update(Post)
            .where(Post.id.in_(post_ids))
            .values(likes_count=_actual_likes(), comments_count=_actual_comments())
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)
        self._expire_counters(*post_ids)
