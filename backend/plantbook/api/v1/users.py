"""User profile endpoints."""

from __future__ import annotations

from flask import Blueprint

from plantbook.api.deps import (
    engagement_service,
    identity_service,
    json_body,
    json_response,
    parse_pagination,
    require_auth,
    timing,
    upload_from_request,
)
from plantbook.schemas import (
    PasswordChangeSchema,
    PostSchema,
    ProfileUpdateSchema,
    PublicUserSchema,
    UserSchema,
    build_meta,
)
from plantbook.services.auth.dto import Identity
from plantbook.services.identity.dto import PasswordChangeIn, UserUpdateIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()
public_user_schema = PublicUserSchema()
profile_update_schema = ProfileUpdateSchema()
password_change_schema = PasswordChangeSchema()
post_list_schema = PostSchema(many=True)


@bp.get("/me")
@require_auth
@timing
def me(identity: Identity):
    """Return the caller's profile."""

    user = identity_service(identity).get_user(identity.user_id)
    return json_response({"data": user_schema.dump(user)})


@bp.patch("/me")
@require_auth
@timing
def update_me(identity: Identity):
    """Update the caller's display name."""

    data = profile_update_schema.load(json_body())
    user = identity_service(identity).update_profile(identity.user_id, UserUpdateIn(**data))
    return json_response({"data": user_schema.dump(user)})


@bp.put("/me/password")
@require_auth
@timing
def change_password(identity: Identity):
    """Change the password; every refresh session is revoked."""

    data = password_change_schema.load(json_body())
    revoked = identity_service(identity).change_password(
        identity.user_id, PasswordChangeIn(**data)
    )
    return json_response({"message": "Password updated", "revoked": revoked})


@bp.post("/me/avatar")
@require_auth
@timing
def upload_avatar(identity: Identity):
    """Replace the avatar with the uploaded ``avatar`` file."""

    upload = upload_from_request("avatar", required=True)
    user = identity_service(identity).set_avatar(identity.user_id, upload)
    return json_response({"data": user_schema.dump(user)})


@bp.delete("/me/avatar")
@require_auth
@timing
def delete_avatar(identity: Identity):
    """Remove the avatar."""

    user = identity_service(identity).remove_avatar(identity.user_id)
    return json_response({"data": user_schema.dump(user)})


@bp.get("/me/likes")
@require_auth
@timing
def my_likes(identity: Identity):
    """Posts the caller liked, most recent like first."""

    pagination = parse_pagination()
    page = engagement_service(identity).liked_posts(identity.user_id, pagination)
    data = post_list_schema.dump(page.items)
    meta = build_meta(total=page.total, page=page.page, limit=page.limit)
    return json_response({"data": data, "meta": meta})


@bp.get("/<id:user_id>")
@timing
def public_profile(user_id: int):
    """Return the public fields of a user."""

    user = identity_service().get_public_user(user_id)
    return json_response({"data": public_user_schema.dump(user)})
