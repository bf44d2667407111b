"""Serve files written by the local blob store."""

from __future__ import annotations

from flask import Blueprint, current_app, send_from_directory

bp = Blueprint("media", __name__)


@bp.get("/<path:name>")
def uploaded_file(name: str):
    """Return an uploaded image; 404 for unknown names or paths outside the folder."""

    return send_from_directory(current_app.config["UPLOAD_FOLDER"], name, max_age=86400)
