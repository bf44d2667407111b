"""Like and comment schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .user import PublicUserSchema


class CommentCreateSchema(Schema):
    """Payload for adding a comment. Trimming and length are enforced by the service."""

    text = fields.String(required=True, validate=validate.Length(max=10_000))


class CommentSchema(Schema):
    """Public representation of a comment."""

    id = fields.Integer(required=True)
    post_id = fields.Integer(required=True, data_key="postId")
    author = fields.Nested(PublicUserSchema, required=True)
    text = fields.String(required=True)
    created_at = fields.DateTime(data_key="createdAt")


class LikeStateSchema(Schema):
    """Counter and like flag right after a like/unlike."""

    likes_count = fields.Integer(required=True, data_key="likesCount")
    liked = fields.Boolean(required=True)
