"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Global naming convention for all constraints.
# Composite constraints are named explicitly in the models.
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
redis_client: redis.Redis | None = None


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, Redis and the auth/storage adapters.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`plantbook.models` package to ensure SQLAlchemy metadata is ready
        for migrations.

    Notes
    -----
    Adapters are published on ``app.extensions`` under ``token_config``,
    ``token_provider``, ``refresh_store``, ``blob_store`` and
    ``identity_providers`` so request handlers can build services without
    module-level state.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from plantbook import models as _models  # noqa: F401

    migrate.init_app(app, db)

    _init_redis(app)
    _init_auth_backends(app)
    _init_blob_store(app)


def _init_redis(app: Flask) -> None:
    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        return

    redis_client = redis.Redis.from_url(redis_url)
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client


def _init_auth_backends(app: Flask) -> None:
    """Build the token provider and pick the refresh-session backend."""
    from plantbook.infra.jwt.pyjwt_token_provider import PyJWTTokenProvider
    from plantbook.services.tokens.dto import AuthTokenConfig

    token_cfg = AuthTokenConfig.from_mapping(app.config)
    app.extensions["token_config"] = token_cfg
    app.extensions["token_provider"] = PyJWTTokenProvider(
        access_secret=app.config["JWT_ACCESS_SECRET"],
        refresh_secret=app.config["JWT_REFRESH_SECRET"],
        algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
        issuer=app.config.get("JWT_ISSUER"),
    )

    client = app.extensions.get("redis_client")
    if client is not None:
        from plantbook.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

        store = RedisRefreshTokenStore(r=client, max_sessions=token_cfg.max_sessions)
    else:
        from plantbook.infra.sql.sql_refresh_token_store import SQLRefreshTokenStore

        store = SQLRefreshTokenStore(max_sessions=token_cfg.max_sessions)
    app.extensions["refresh_store"] = store

    # Populated by deployments (or tests) with IdentityProvider adapters.
    app.extensions.setdefault("identity_providers", {})


def _init_blob_store(app: Flask) -> None:
    from plantbook.api import MEDIA_URL_PREFIX
    from plantbook.infra.storage.local_blob_store import LocalBlobStore

    app.extensions["blob_store"] = LocalBlobStore(
        root=app.config["UPLOAD_FOLDER"], url_prefix=MEDIA_URL_PREFIX
    )
