from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

from plantbook.services._shared.errors import AuthenticationError

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenProvider(Protocol):
    """
    Port for encoding and decoding signed tokens.

    Each token type is signed with its own key, so a token of one kind can
    never be decoded as the other. ``decode`` raises ``AuthenticationError``
    for any failure (bad signature, expired, wrong type, malformed).
    """

    def encode(
        self,
        *,
        subject: int | str,
        token_type: str,
        claims: dict[str, Any] | None = None,
        expires_delta: timedelta,
    ) -> str: ...

    def decode(self, token: str, *, token_type: str) -> dict[str, Any]: ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests.

    Tokens are opaque ``"{type}.{sub}.{seq}"`` strings kept in a dict. The
    clock is read on every call so freezegun can move it.
    """

    def __init__(self) -> None:
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}

    def encode(
        self,
        *,
        subject: int | str,
        token_type: str,
        claims: dict[str, Any] | None = None,
        expires_delta: timedelta,
    ) -> str:
        self._seq += 1
        now = datetime.now(tz=UTC)
        token = f"{token_type}.{subject}.{self._seq}"
        payload: dict[str, Any] = {
            "sub": str(subject),
            "type": token_type,
            "jti": f"jti-{self._seq}",
            "iat": int(now.timestamp()),
            "exp": int((now + expires_delta).timestamp()),
        }
        if claims:
            payload.update(claims)
        self._issued[token] = payload
        return token

    def decode(self, token: str, *, token_type: str) -> dict[str, Any]:
        payload = self._issued.get(token)
        if payload is None or payload["type"] != token_type:
            raise AuthenticationError("Invalid token")
        if payload["exp"] <= int(datetime.now(tz=UTC).timestamp()):
            raise AuthenticationError("Token expired")
        return dict(payload)
