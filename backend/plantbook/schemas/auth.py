"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from plantbook.models.user import MIN_PASSWORD_LENGTH

from .user import UserSchema


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True, validate=validate.Length(min=MIN_PASSWORD_LENGTH, max=128)
    )
    display_name = fields.String(
        required=True, data_key="displayName", validate=validate.Length(min=1, max=100)
    )


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(Schema):
    """Input payload carrying the refresh token to rotate."""

    refresh_token = fields.String(
        required=True, data_key="refreshToken", validate=validate.Length(min=1)
    )


class LogoutSchema(Schema):
    """Optional refresh token whose session should be revoked."""

    refresh_token = fields.String(load_default=None, allow_none=True, data_key="refreshToken")


class OAuthCallbackSchema(Schema):
    """One-time code returned by an external identity provider."""

    code = fields.String(required=True, validate=validate.Length(min=1, max=2048))


class TokenPairSchema(Schema):
    """Response payload containing an access/refresh pair."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class AuthResponseSchema(Schema):
    """Response of register/login/oauth: the user and a fresh token pair."""

    user = fields.Nested(UserSchema, required=True)
    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class SessionSchema(Schema):
    """Live refresh session; never includes token material."""

    device = fields.String(allow_none=True)
    issued_at = fields.DateTime(required=True, data_key="issuedAt")
    expires_at = fields.DateTime(required=True, data_key="expiresAt")
