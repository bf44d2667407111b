"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .engagement import engagement_cli
from .users import users_cli


def init_app(app: Flask) -> None:
    """Register application-specific CLI command groups.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry will receive the
        ``engagement`` and ``users`` command groups.
    """
    app.cli.add_command(engagement_cli)
    app.cli.add_command(users_cli)
