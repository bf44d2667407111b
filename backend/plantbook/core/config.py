"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Placeholder secrets; production refuses to boot with them.
DEFAULT_SECRET: Final[str] = "CHANGE_ME"
DEFAULT_ACCESS_SECRET: Final[str] = "CHANGE_ME_ACCESS"
DEFAULT_REFRESH_SECRET: Final[str] = "CHANGE_ME_REFRESH"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}

# Load .env in development (no-op when absent)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


def parse_duration(raw: str | int | timedelta) -> timedelta:
    """Convert ``"15m"``/``"7d"``/``"3600"`` style values into a timedelta.

    Parameters
    ----------
    raw: str | int | timedelta
        Bare integers are seconds. Strings accept an optional ``s``, ``m``,
        ``h`` or ``d`` suffix.

    Returns
    -------
    datetime.timedelta
        Parsed, strictly positive duration.

    Raises
    ------
    ValueError
        If the value is malformed or not positive.
    """
    if isinstance(raw, timedelta):
        value = raw
    elif isinstance(raw, int):
        value = timedelta(seconds=raw)
    else:
        match = _DURATION_RE.match(str(raw))
        if not match:
            raise ValueError(f"Invalid duration: {raw!r}")
        amount, unit = match.groups()
        value = timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})
    if value <= timedelta(0):
        raise ValueError(f"Duration must be positive: {raw!r}")
    return value


def env_duration(name: str, default: str) -> timedelta:
    """Read a duration (see :func:`parse_duration`) from the environment."""
    return parse_duration(os.getenv(name) or default)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_ACCESS_SECRET: str
        HMAC key for access tokens. Must differ from the refresh secret.
    JWT_REFRESH_SECRET: str
        HMAC key for refresh tokens.
    JWT_ALGORITHM: str
        Signing algorithm (``HS256`` by default).
    JWT_ISSUER: str
        ``iss`` claim stamped on and required from every token.
    ACCESS_TOKEN_EXPIRES / REFRESH_TOKEN_EXPIRES: timedelta
        Token lifetimes, parsed from ``"15m"`` / ``"7d"`` style values.
    REFRESH_SESSION_LIMIT: int
        Maximum live refresh sessions per user; oldest are evicted first.
    REDIS_URL: str | None
        When set, refresh sessions live in Redis instead of the database.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    UPLOAD_FOLDER: str
        Directory used by the local blob store.
    POST_IMAGE_MAX_BYTES / AVATAR_MAX_BYTES: int
        Upload size ceilings.
    COMMENT_MAX_LENGTH: int
        Maximum comment length after trimming.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", DEFAULT_SECRET)
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", DEFAULT_ACCESS_SECRET)
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", DEFAULT_REFRESH_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "plantbook")
    ACCESS_TOKEN_EXPIRES = env_duration("ACCESS_TOKEN_EXPIRES", "15m")
    REFRESH_TOKEN_EXPIRES = env_duration("REFRESH_TOKEN_EXPIRES", "7d")
    REFRESH_SESSION_LIMIT = env_int("REFRESH_SESSION_LIMIT", 10)
    REDIS_URL = os.getenv("REDIS_URL") or None

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Uploads
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.abspath("./uploads"))
    POST_IMAGE_MAX_BYTES = env_int("POST_IMAGE_MAX_BYTES", 10 * 1024 * 1024)
    AVATAR_MAX_BYTES = env_int("AVATAR_MAX_BYTES", 5 * 1024 * 1024)
    # Hard ceiling for any request body; a bit above the largest upload.
    MAX_CONTENT_LENGTH = env_int("MAX_CONTENT_LENGTH", 12 * 1024 * 1024)

    # Engagement
    COMMENT_MAX_LENGTH = env_int("COMMENT_MAX_LENGTH", 1000)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never talks to Redis; refresh sessions use the SQL store.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    REDIS_URL = None
    PROPAGATE_EXCEPTIONS = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled. :func:`check_secrets` refuses to
    start with placeholder secrets.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def check_secrets(config: Mapping[str, Any]) -> None:
    """Validate signing secrets on a loaded Flask config.

    Raises
    ------
    RuntimeError
        When access and refresh secrets are identical (tokens of one kind
        would verify as the other), or when a non-debug, non-testing app still
        uses a placeholder secret.
    """
    access = config.get("JWT_ACCESS_SECRET")
    refresh = config.get("JWT_REFRESH_SECRET")
    if not access or not refresh:
        raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be set.")
    if access == refresh:
        raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ.")
    if config.get("DEBUG") or config.get("TESTING"):
        return
    placeholders = {DEFAULT_SECRET, DEFAULT_ACCESS_SECRET, DEFAULT_REFRESH_SECRET}
    if {config.get("SECRET_KEY"), access, refresh} & placeholders:
        raise RuntimeError("Refusing to start with placeholder secrets; configure them.")
