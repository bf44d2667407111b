"""Shared API helpers for request parsing, authentication and service wiring."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from plantbook.core.errors import BadRequest
from plantbook.schemas.common import PaginationQuerySchema
from plantbook.services._shared.base import ServiceContext
from plantbook.services._shared.dto import PaginationIn
from plantbook.services.auth.dto import AuthResult, Identity
from plantbook.services.auth.gate import AuthGate
from plantbook.services.auth.service import AuthService
from plantbook.services.engagement.service import EngagementService
from plantbook.services.identity.dto import UploadIn
from plantbook.services.identity.service import IdentityService
from plantbook.services.posts.service import PostService
from plantbook.services.tokens.service import TokenService

F = TypeVar("F", bound=Callable[..., Any])

DEVICE_MAX_LENGTH = 120


# --------------------------------------------------------------------------- #
# Request parsing
# --------------------------------------------------------------------------- #


def parse_pagination(default_limit: int = 20, max_limit: int = 100) -> PaginationIn:
    """Parse pagination parameters from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return PaginationIn(page=data["page"], limit=data["limit"], sort=data["sort"])


def json_body() -> dict[str, Any]:
    """Return the JSON object body, or an empty dict when absent."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def upload_from_request(field: str, *, required: bool = False) -> UploadIn | None:
    """Wrap a multipart file for the service layer."""

    storage = request.files.get(field)
    if storage is None or not storage.filename:
        if required:
            raise BadRequest(f"Multipart field '{field}' is required")
        return None
    return UploadIn(stream=storage.stream, filename=storage.filename, mimetype=storage.mimetype)


def device_label() -> str | None:
    """Client label stored with refresh sessions (the User-Agent, truncated)."""

    agent = (request.headers.get("User-Agent") or "").strip()
    return agent[:DEVICE_MAX_LENGTH] or None


# --------------------------------------------------------------------------- #
# Service wiring
# --------------------------------------------------------------------------- #


def service_context(identity: Identity | None = None) -> ServiceContext:
    return ServiceContext(
        actor_id=identity.user_id if identity else None,
        request_id=g.get("request_id"),
        device=device_label(),
    )


def token_service() -> TokenService:
    ext = current_app.extensions
    return TokenService(
        token_provider=ext["token_provider"],
        refresh_store=ext["refresh_store"],
        token_cfg=ext["token_config"],
    )


def auth_gate() -> AuthGate:
    return AuthGate(tokens=token_service(), ctx=service_context())


def auth_service() -> AuthService:
    return AuthService(
        tokens=token_service(),
        providers=current_app.extensions.get("identity_providers", {}),
        ctx=service_context(),
    )


def identity_service(identity: Identity | None = None) -> IdentityService:
    return IdentityService(
        tokens=token_service(),
        blobs=current_app.extensions["blob_store"],
        avatar_max_bytes=int(current_app.config["AVATAR_MAX_BYTES"]),
        ctx=service_context(identity),
    )


def post_service(identity: Identity | None = None) -> PostService:
    return PostService(
        blobs=current_app.extensions["blob_store"],
        image_max_bytes=int(current_app.config["POST_IMAGE_MAX_BYTES"]),
        ctx=service_context(identity),
    )


def engagement_service(identity: Identity | None = None) -> EngagementService:
    return EngagementService(
        comment_max_length=int(current_app.config["COMMENT_MAX_LENGTH"]),
        ctx=service_context(identity),
    )


# --------------------------------------------------------------------------- #
# Authentication decorators
# --------------------------------------------------------------------------- #


def authenticate_request() -> AuthResult:
    """Run the auth gate against the current request's ``Authorization`` header."""

    return auth_gate().authenticate(request.headers.get("Authorization"))


def require_auth(func: F) -> F:
    """Reject the request with 401 unless it carries a valid access token.

    The resolved :class:`Identity` is passed to the view as ``identity=``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        result = authenticate_request()
        if result.identity is None:
            raise result.error  # type: ignore[misc]
        kwargs["identity"] = result.identity
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Pass ``identity=`` when a valid token is present, else ``identity=None``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        kwargs["identity"] = authenticate_request().identity
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
