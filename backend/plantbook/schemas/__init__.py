"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthResponseSchema,
    LoginSchema,
    LogoutSchema,
    OAuthCallbackSchema,
    RefreshSchema,
    RegisterSchema,
    SessionSchema,
    TokenPairSchema,
)
from .common import MessageSchema, MetaSchema, PaginationQuerySchema, SortQuerySchema, build_meta
from .engagement import CommentCreateSchema, CommentSchema, LikeStateSchema
from .post import PostCreateSchema, PostListQuerySchema, PostSchema
from .user import PasswordChangeSchema, ProfileUpdateSchema, PublicUserSchema, UserSchema

__all__ = [
    "RegisterSchema",
    "LoginSchema",
    "RefreshSchema",
    "LogoutSchema",
    "OAuthCallbackSchema",
    "TokenPairSchema",
    "AuthResponseSchema",
    "SessionSchema",
    "PaginationQuerySchema",
    "SortQuerySchema",
    "MetaSchema",
    "MessageSchema",
    "build_meta",
    "PostCreateSchema",
    "PostListQuerySchema",
    "PostSchema",
    "CommentCreateSchema",
    "CommentSchema",
    "LikeStateSchema",
    "UserSchema",
    "PublicUserSchema",
    "ProfileUpdateSchema",
    "PasswordChangeSchema",
]
