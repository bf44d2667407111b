"""
PostService
===========

Minimal post lifecycle needed around the engagement counters: publish,
list the feed, read one post and delete it. Counters are never written
here; they belong to :class:`~plantbook.services.engagement.service.EngagementService`.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, cast

from plantbook.models.post import Post
from plantbook.repositories.post import PostRepository
from plantbook.services._shared.base import BaseService, ServiceContext
from plantbook.services._shared.dto import PageOut, PaginationIn
from plantbook.services._shared.errors import NotFoundError, ValidationFailedError
from plantbook.services._shared.ports import BlobStore
from plantbook.services.posts._converters import post_to_out
from plantbook.services.posts.dto import PostCreateIn, PostOut

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MAX_BYTES = 10 * 1024 * 1024
TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 5000
PLANT_NAME_MAX_LENGTH = 100
TAG_MAX_LENGTH = 50
MAX_TAGS = 20


def _required_text(value: str | None, *, field: str, max_length: int) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationFailedError(f"{field} is required", field=field)
    if len(text) > max_length:
        raise ValidationFailedError(f"{field} must be at most {max_length} characters", field=field)
    return text


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Trim, drop empties and duplicates (case-insensitive), keep first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for raw in tags or []:
        tag = str(raw).strip()
        if not tag or tag.lower() in seen:
            continue
        if len(tag) > TAG_MAX_LENGTH:
            raise ValidationFailedError(
                f"tags must be at most {TAG_MAX_LENGTH} characters each", field="tags"
            )
        seen.add(tag.lower())
        out.append(tag)
    if len(out) > MAX_TAGS:
        raise ValidationFailedError(f"at most {MAX_TAGS} tags are allowed", field="tags")
    return out


class PostService(BaseService):
    """Application service for the `Post` aggregate."""

    def __init__(
        self,
        *,
        blobs: BlobStore,
        image_max_bytes: int = DEFAULT_IMAGE_MAX_BYTES,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.blobs = blobs
        self.image_max_bytes = image_max_bytes

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def create_post(self, author_id: int, dto: PostCreateIn) -> PostOut:
        """
        Publish a post, storing its image first when one is attached.

        :raises ValidationFailedError: Missing/oversize title or content, bad tags.
        :raises BlobRejectedError: Image of the wrong type or too large.
        """
        title = _required_text(dto.title, field="title", max_length=TITLE_MAX_LENGTH)
        content = _required_text(dto.content, field="content", max_length=CONTENT_MAX_LENGTH)
        plant_name = (dto.plant_name or "").strip() or None
        if plant_name and len(plant_name) > PLANT_NAME_MAX_LENGTH:
            raise ValidationFailedError(
                f"plantName must be at most {PLANT_NAME_MAX_LENGTH} characters", field="plantName"
            )
        tags = normalize_tags(dto.tags)

        image_url = None
        if dto.image is not None:
            image_url = self.blobs.save(
                cast(BinaryIO, dto.image.stream),
                filename=dto.image.filename,
                mimetype=dto.image.mimetype,
                max_bytes=self.image_max_bytes,
            )

        try:
            with self.rw_uow() as uow:
                repo: PostRepository = uow.posts
                post = repo.add(
                    Post(
                        author_id=author_id,
                        title=title,
                        content=content,
                        plant_name=plant_name,
                        tags=tags,
                        image_url=image_url,
                    )
                )
                out = post_to_out(post, liked=False)
        except Exception:
            if image_url:
                self.blobs.delete(image_url)
            raise

        logger.info("posts.created", extra={"post_id": out.id, "user_id": author_id})
        return out

    def delete_post(self, post_id: int, user_id: int) -> None:
        """
        Delete a post together with its likes and comments.

        :raises NotFoundError: Unknown post.
        :raises AuthorizationError: Caller is not the author.
        """
        with self.rw_uow() as uow:
            post = uow.posts.get(post_id)
            if post is None:
                raise NotFoundError("Post", post_id)
            self.ensure_owner(user_id, post.author_id, msg="You can only delete your own posts.")

            image_url = post.image_url
            likes = uow.likes.delete_where(post_id=post_id)
            comments = uow.comments.delete_where(post_id=post_id)
            uow.posts.delete(post)

        if image_url:
            self.blobs.delete(image_url)
        logger.info(
            "posts.deleted",
            extra={"post_id": post_id, "user_id": user_id, "count": likes + comments},
        )

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def list_feed(
        self,
        pagination: PaginationIn,
        *,
        author_id: int | None = None,
        viewer_id: int | None = None,
    ) -> PageOut[PostOut]:
        """
        Published posts, newest first, optionally restricted to one author.

        ``liked`` is filled for authenticated viewers with one extra query
        for the whole page.
        """
        page_in = self.ensure_pagination(
            page=pagination.page, limit=pagination.limit, sort=pagination.sort
        )
        filters = {"author_id": author_id} if author_id is not None else None

        with self.ro_uow() as uow:
            repo: PostRepository = uow.posts
            page = repo.paginate(page_in, filters=filters, stmt=repo.feed_select())
            liked_ids: set[int] = set()
            if viewer_id is not None:
                liked_ids = uow.likes.liked_post_ids(viewer_id, [p.id for p in page.items])
            items = [
                post_to_out(p, liked=(p.id in liked_ids) if viewer_id is not None else None)
                for p in page.items
            ]
            return PageOut(items=items, total=page.total, page=page.page, limit=page.limit)

    def get_post(self, post_id: int, viewer_id: int | None = None) -> PostOut:
        """
        Retrieve one post. Unpublished posts are visible to their author only.

        :raises NotFoundError: Unknown or hidden post.
        """
        with self.ro_uow() as uow:
            post = uow.posts.get(post_id)
            if post is None or (not post.is_published and post.author_id != viewer_id):
                raise NotFoundError("Post", post_id)
            liked = None
            if viewer_id is not None:
                liked = uow.likes.exists(post_id=post_id, user_id=viewer_id)
            return post_to_out(post, liked=liked)
