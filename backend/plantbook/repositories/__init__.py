"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from plantbook.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    apply_sorting,
    paginate_select,
)
from plantbook.repositories.engagement import CommentRepository, LikeRepository
from plantbook.repositories.post import CounterDrift, PostRepository
from plantbook.repositories.refresh_session import RefreshSessionRepository
from plantbook.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "Page",
    "Pagination",
    "paginate_select",
    "apply_sorting",
    # Domain
    "UserRepository",
    "PostRepository",
    "CounterDrift",
    "LikeRepository",
    "CommentRepository",
    "RefreshSessionRepository",
]
