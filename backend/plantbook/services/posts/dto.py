"""DTOs for PostService."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from plantbook.services.identity.dto import UploadIn, UserPublicOut

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class PostCreateIn:
    """
    Input DTO for publishing a post.

    :param title: Headline (1..200 chars after trimming).
    :type title: str
    :param content: Body (1..5000 chars after trimming).
    :type content: str
    :param plant_name: Optional plant species/common name.
    :type plant_name: str | None
    :param tags: Free-form tags.
    :type tags: list[str]
    :param image: Optional uploaded image.
    :type image: UploadIn | None
    """

    title: str
    content: str
    plant_name: str | None = None
    tags: list[str] = field(default_factory=list)
    image: UploadIn | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class PostOut:
    """
    Output DTO for a post.

    :param liked: Whether the viewer liked the post; ``None`` for anonymous viewers.
    :type liked: bool | None
    """

    id: int
    author: UserPublicOut
    title: str
    content: str
    image_url: str | None
    plant_name: str | None
    tags: list[str]
    likes_count: int
    comments_count: int
    is_published: bool
    created_at: datetime
    updated_at: datetime
    liked: bool | None = None
