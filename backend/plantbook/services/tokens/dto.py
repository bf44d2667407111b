from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """
    Verified token claims.

    :param user_id: Subject (user id).
    :type user_id: int
    :param email: Email claim at issue time.
    :type email: str
    :param token_type: ``"access"`` or ``"refresh"``.
    :type token_type: str
    :param jti: Token identifier.
    :type jti: str
    :param issued_at: ``iat`` claim (UTC).
    :type issued_at: datetime
    :param expires_at: ``exp`` claim (UTC).
    :type expires_at: datetime
    """

    user_id: int
    email: str
    token_type: str
    jti: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class SessionOut:
    """
    Public view of a refresh session (no token material).

    :param device: Client label captured at sign-in.
    :type device: str | None
    :param issued_at: Issue time (UTC).
    :type issued_at: datetime
    :param expires_at: Expiry (UTC).
    :type expires_at: datetime
    """

    device: str | None
    issued_at: datetime
    expires_at: datetime


# ------------------------------ Config DTO -------------------------------- #

DEFAULT_ACCESS_EXPIRES = timedelta(minutes=15)
DEFAULT_REFRESH_EXPIRES = timedelta(days=7)
DEFAULT_MAX_SESSIONS = 10


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    :param max_sessions: Live refresh sessions kept per user.
    :type max_sessions: int
    """

    access_expires: timedelta = DEFAULT_ACCESS_EXPIRES
    refresh_expires: timedelta = DEFAULT_REFRESH_EXPIRES
    max_sessions: int = DEFAULT_MAX_SESSIONS

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        """Build from a Flask config mapping."""
        return cls(
            access_expires=config.get("ACCESS_TOKEN_EXPIRES", DEFAULT_ACCESS_EXPIRES),
            refresh_expires=config.get("REFRESH_TOKEN_EXPIRES", DEFAULT_REFRESH_EXPIRES),
            max_sessions=int(config.get("REFRESH_SESSION_LIMIT", DEFAULT_MAX_SESSIONS)),
        )
