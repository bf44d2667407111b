from __future__ import annotations

from plantbook.models.base import as_utc
from plantbook.models.user import User

from .dto import UserOut, UserPublicOut


def user_to_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        avatar_url=user.avatar_url,
        has_password=user.has_password,
        created_at=as_utc(user.created_at),
    )


def user_to_public(user: User) -> UserPublicOut:
    return UserPublicOut(
        id=user.id,
        display_name=user.display_name,
        avatar_url=user.avatar_url,
        created_at=as_utc(user.created_at),
    )
