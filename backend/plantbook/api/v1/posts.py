"""Post, like and comment endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from plantbook.api.deps import (
    engagement_service,
    json_body,
    json_response,
    optional_auth,
    parse_pagination,
    post_service,
    require_auth,
    timing,
    upload_from_request,
)
from plantbook.schemas import (
    CommentCreateSchema,
    CommentSchema,
    LikeStateSchema,
    PostCreateSchema,
    PostListQuerySchema,
    PostSchema,
    build_meta,
)
from plantbook.services.auth.dto import Identity
from plantbook.services.posts.dto import PostCreateIn

bp = Blueprint("posts", __name__)

post_schema = PostSchema()
post_list_schema = PostSchema(many=True)
post_create_schema = PostCreateSchema()
post_query_schema = PostListQuerySchema()
comment_schema = CommentSchema()
comment_list_schema = CommentSchema(many=True)
comment_create_schema = CommentCreateSchema()
like_state_schema = LikeStateSchema()


def _post_payload() -> dict:
    """Collect post fields from a form (multipart or urlencoded) or a JSON body."""

    if request.mimetype in ("multipart/form-data", "application/x-www-form-urlencoded"):
        raw: dict = {k: v for k, v in request.form.items() if k != "tags"}
        tags = request.form.getlist("tags")
        if tags:
            raw["tags"] = tags[0] if len(tags) == 1 else tags
        return raw
    return json_body()


# --------------------------------------------------------------------------- #
# Posts
# --------------------------------------------------------------------------- #


@bp.get("")
@optional_auth
@timing
def list_posts(identity: Identity | None):
    """Return the published feed, newest first."""

    filters = post_query_schema.load(request.args)
    pagination = parse_pagination()
    page = post_service(identity).list_feed(
        pagination,
        author_id=filters["author"],
        viewer_id=identity.user_id if identity else None,
    )
    data = post_list_schema.dump(page.items)
    meta = build_meta(total=page.total, page=page.page, limit=page.limit)
    return json_response({"data": data, "meta": meta})


@bp.post("")
@require_auth
@timing
def create_post(identity: Identity):
    """Publish a post; accepts JSON or multipart with an ``image`` file."""

    data = post_create_schema.load(_post_payload())
    dto = PostCreateIn(
        title=data["title"],
        content=data["content"],
        plant_name=data["plant_name"],
        tags=data["tags"],
        image=upload_from_request("image"),
    )
    post = post_service(identity).create_post(identity.user_id, dto)
    return json_response({"data": post_schema.dump(post)}, status=201)


@bp.get("/<id:post_id>")
@optional_auth
@timing
def get_post(post_id: int, identity: Identity | None):
    """Return a single post."""

    post = post_service(identity).get_post(post_id, identity.user_id if identity else None)
    return json_response({"data": post_schema.dump(post)})


@bp.delete("/<id:post_id>")
@require_auth
@timing
def delete_post(post_id: int, identity: Identity):
    """Delete the caller's own post with its likes and comments."""

    post_service(identity).delete_post(post_id, identity.user_id)
    return json_response({"message": "Post deleted"})


# --------------------------------------------------------------------------- #
# Likes
# --------------------------------------------------------------------------- #


@bp.post("/<id:post_id>/like")
@require_auth
@timing
def like_post(post_id: int, identity: Identity):
    """Like a post. 409 when already liked."""

    state = engagement_service(identity).like(post_id, identity.user_id)
    return json_response(like_state_schema.dump(state), status=201)


@bp.delete("/<id:post_id>/like")
@require_auth
@timing
def unlike_post(post_id: int, identity: Identity):
    """Remove the caller's like. 404 when there is none."""

    state = engagement_service(identity).unlike(post_id, identity.user_id)
    return json_response(like_state_schema.dump(state))


@bp.get("/<id:post_id>/liked")
@require_auth
@timing
def check_liked(post_id: int, identity: Identity):
    """Return whether the caller likes the post."""

    liked = engagement_service(identity).check_liked(post_id, identity.user_id)
    return json_response({"liked": liked})


# --------------------------------------------------------------------------- #
# Comments
# --------------------------------------------------------------------------- #


@bp.get("/<id:post_id>/comments")
@timing
def list_comments(post_id: int):
    """Return a post's comments, newest first."""

    pagination = parse_pagination()
    page = engagement_service().list_comments(post_id, pagination)
    data = comment_list_schema.dump(page.items)
    meta = build_meta(total=page.total, page=page.page, limit=page.limit)
    return json_response({"data": data, "meta": meta})


@bp.post("/<id:post_id>/comments")
@require_auth
@timing
def add_comment(post_id: int, identity: Identity):
    """Add a comment; the response carries the updated ``commentsCount``."""

    data = comment_create_schema.load(json_body())
    comment = engagement_service(identity).add_comment(post_id, data["text"], identity.user_id)
    body = {"data": comment_schema.dump(comment), "commentsCount": comment.comments_count}
    return json_response(body, status=201)


@bp.delete("/<id:post_id>/comments/<id:comment_id>")
@require_auth
@timing
def delete_comment(post_id: int, comment_id: int, identity: Identity):
    """Delete the caller's own comment."""

    count = engagement_service(identity).delete_comment(
        comment_id, identity.user_id, post_id=post_id
    )
    return json_response({"commentsCount": count})
