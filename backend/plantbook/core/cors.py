"""CORS configuration for the API and uploaded media."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from plantbook.core.logger import REQUEST_ID_HEADER


def init_app(app: Flask) -> None:
    """Configure CORS for ``/api/*`` and ``/uploads/*`` from ``CORS_ORIGINS``.

    Bearer tokens travel in the ``Authorization`` header, so that header is
    always allowed and the request id header is exposed to browsers. A blank
    or ``"*"`` origin list allows any origin without credentials.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    wildcard = len(origins) == 0 or origins == ["*"]
    allowed = "*" if wildcard else origins

    CORS(
        app,
        resources={r"/api/*": {"origins": allowed}, r"/uploads/*": {"origins": allowed}},
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        supports_credentials=not wildcard,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
