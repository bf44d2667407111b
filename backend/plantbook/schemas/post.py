"""Post resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

from .user import PublicUserSchema


class PostCreateSchema(Schema):
    """
    Payload for publishing a post (JSON body or multipart form fields).

    ``tags`` accepts a list or a single comma-separated string.
    """

    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    content = fields.String(required=True, validate=validate.Length(min=1, max=5000))
    plant_name = fields.String(
        load_default=None, allow_none=True, data_key="plantName", validate=validate.Length(max=100)
    )
    tags = fields.List(fields.String(validate=validate.Length(max=50)), load_default=list)

    @pre_load
    def split_tags(self, data: Any, **_: Any) -> Any:
        if not isinstance(data, dict):
            return data
        tags = data.get("tags")
        if isinstance(tags, str):
            data = dict(data)
            data["tags"] = [t.strip() for t in tags.split(",") if t.strip()]
        return data


class PostListQuerySchema(Schema):
    """Feed filters accepted in the query string."""

    class Meta:
        unknown = EXCLUDE

    author = fields.Integer(load_default=None, validate=validate.Range(min=1))


class PostSchema(Schema):
    """Public representation of a post."""

    id = fields.Integer(required=True)
    author = fields.Nested(PublicUserSchema, required=True)
    title = fields.String(required=True)
    content = fields.String(required=True)
    image_url = fields.String(allow_none=True, data_key="imageUrl")
    plant_name = fields.String(allow_none=True, data_key="plantName")
    tags = fields.List(fields.String())
    likes_count = fields.Integer(data_key="likesCount")
    comments_count = fields.Integer(data_key="commentsCount")
    is_published = fields.Boolean(data_key="isPublished")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
    liked = fields.Boolean(allow_none=True)
