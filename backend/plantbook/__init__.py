"""Expose the application factory at package level.

Provide convenient access to :func:`plantbook.factory.create_app` so callers
(gunicorn, ``flask --app``) can ``from plantbook import create_app``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
