"""Application factory: configuration, extensions, API and CLI in one place."""

from __future__ import annotations

from flask import Flask

from plantbook.core.config import BaseConfig, check_secrets, get_config
from plantbook.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build the Plantbook Flask application.

    Parameters
    ----------
    config:
        Config object/class (or import path) passed to
        :meth:`flask.Config.from_object`. Defaults to the class selected by
        ``APP_ENV``.
    instance_relative_config:
        Also read ``instance/<instance_config_filename>`` when present.
    instance_config_filename:
        File name of the optional instance override.

    Raises
    ------
    RuntimeError
        When the JWT secrets are missing, identical, or still placeholders
        outside debug/testing (see :func:`check_secrets`).
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)
    check_secrets(app.config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Order matters: ProxyFix wraps the raw WSGI app, errors go last so they
    # see every blueprint.
    from plantbook.core import cors, errors, extensions, proxy

    proxy.init_app(app)
    extensions.init_app(app)
    init_logging(app)
    cors.init_app(app)

    from plantbook.api import init_app as init_api

    init_api(app)
    errors.init_app(app)

    from plantbook import cli as app_cli

    app_cli.init_app(app)
    _register_shell_context(app)

    return app


def _register_shell_context(app: Flask) -> None:
    """Expose ``db`` and the models inside ``flask shell``."""

    from plantbook import models
    from plantbook.core.extensions import db

    @app.shell_context_processor
    def _shell_context() -> dict[str, object]:
        return {"db": db, **{name: getattr(models, name) for name in models.__all__}}
