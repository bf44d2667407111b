"""DTOs for EngagementService."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from plantbook.services.identity.dto import UserPublicOut


@dataclass(frozen=True, slots=True)
class LikeStateOut:
    """
    Like state of a post for the caller, right after a like/unlike.

    :param likes_count: Counter value committed with the change.
    :type likes_count: int
    :param liked: Whether the caller now likes the post.
    :type liked: bool
    """

    likes_count: int
    liked: bool


@dataclass(frozen=True, slots=True)
class CommentOut:
    """
    Output DTO for a comment.

    :param comments_count: Post counter right after the comment was added;
        ``None`` in listings.
    :type comments_count: int | None
    """

    id: int
    post_id: int
    author: UserPublicOut
    text: str
    created_at: datetime
    comments_count: int | None = None


@dataclass(frozen=True, slots=True)
class RecountOut:
    """
    Outcome of recomputing a post's counters from the join tables.

    :param post_id: Post that was reconciled.
    :type post_id: int
    :param likes_count: Likes after reconciliation.
    :type likes_count: int
    :param comments_count: Comments after reconciliation.
    :type comments_count: int
    :param likes_before: Stored likes before reconciliation.
    :type likes_before: int
    :param comments_before: Stored comments before reconciliation.
    :type comments_before: int
    """

    post_id: int
    likes_count: int
    comments_count: int
    likes_before: int
    comments_before: int

    @property
    def drifted(self) -> bool:
        return (self.likes_before, self.comments_before) != (self.likes_count, self.comments_count)
