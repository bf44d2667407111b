"""HTTP layer: versioned JSON API plus the uploaded-media route."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask
from werkzeug.routing import IntegerConverter

MEDIA_URL_PREFIX = "/uploads"

# Primary keys are 32-bit INTEGER columns on PostgreSQL.
MAX_ROW_ID = 2**31 - 1


class RowIdConverter(IntegerConverter):
    """``<id:...>`` path segment: a positive integer that fits a primary key.

    Out-of-range ids fail URL matching and surface as a plain 404.
    """

    def __init__(self, map, *args, **kwargs):  # noqa: A002 - werkzeug signature
        super().__init__(map, min=1, max=MAX_ROW_ID)


def _join_prefix(*segments: str) -> str:
    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount each ``(blueprint, relative_prefix)`` pair under ``base_prefix``.

    An empty relative prefix mounts the blueprint at ``base_prefix`` itself
    (the health check lives at ``/api/v1/health`` this way).
    """

    for bp, rel_prefix in entries:
        app.register_blueprint(bp, url_prefix=_join_prefix(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    """Register API v1 under ``API_BASE_PREFIX`` and the media blueprint."""

    from plantbook.api.media import bp as media_bp
    from plantbook.api.v1 import API_VERSION as V1
    from plantbook.api.v1 import REGISTRY as V1_REGISTRY

    app.url_map.converters["id"] = RowIdConverter

    api_base = app.config.get("API_BASE_PREFIX", "/api")
    register_blueprint_group(app, base_prefix=_join_prefix(api_base, V1), entries=V1_REGISTRY)

    # URLs handed out by LocalBlobStore look like /uploads/<name>.
    app.register_blueprint(media_bp, url_prefix=MEDIA_URL_PREFIX)


__all__ = ["init_app", "register_blueprint_group", "MEDIA_URL_PREFIX", "MAX_ROW_ID"]
