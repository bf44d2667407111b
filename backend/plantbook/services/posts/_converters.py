from __future__ import annotations

from plantbook.models.base import as_utc
from plantbook.models.post import Post
from plantbook.services.identity._converters import user_to_public

from .dto import PostOut


def post_to_out(row: Post, *, liked: bool | None = None) -> PostOut:
    return PostOut(
        id=row.id,
        author=user_to_public(row.author),
        title=row.title,
        content=row.content,
        image_url=row.image_url,
        plant_name=row.plant_name,
        tags=list(row.tags or []),
        likes_count=row.likes_count,
        comments_count=row.comments_count,
        is_published=row.is_published,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        liked=liked,
    )
