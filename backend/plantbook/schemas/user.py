"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from plantbook.models.user import MIN_PASSWORD_LENGTH


class PublicUserSchema(Schema):
    """Fields of a user anyone may see (post/comment authors, public profiles)."""

    id = fields.Integer(required=True)
    display_name = fields.String(required=True, data_key="displayName")
    avatar_url = fields.String(allow_none=True, data_key="avatarUrl")
    created_at = fields.DateTime(required=True, data_key="createdAt")


class UserSchema(PublicUserSchema):
    """Representation of the authenticated user's own profile."""

    email = fields.Email(required=True)
    has_password = fields.Boolean(data_key="hasPassword")


class ProfileUpdateSchema(Schema):
    """Payload for ``PATCH /users/me``."""

    display_name = fields.String(
        required=True, data_key="displayName", validate=validate.Length(min=1, max=100)
    )


class PasswordChangeSchema(Schema):
    """Payload for ``PUT /users/me/password``."""

    current_password = fields.String(required=True, data_key="currentPassword")
    new_password = fields.String(
        required=True,
        data_key="newPassword",
        validate=validate.Length(min=MIN_PASSWORD_LENGTH, max=128),
    )
