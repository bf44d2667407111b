# plantbook/infra/jwt/pyjwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from plantbook.services._shared.errors import AuthenticationError
from plantbook.services._shared.ports import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE, TokenProvider

_REQUIRED_CLAIMS = ["exp", "iat", "sub", "type", "jti"]


@dataclass(slots=True)
class PyJWTTokenProvider(TokenProvider):
    """
    Adapter for PyJWT with one signing key per token type.

    Access and refresh tokens are signed with different secrets, so a token
    signed for one purpose fails signature verification for the other even
    before the ``type`` claim is compared.

    :param access_secret: HMAC key for access tokens.
    :param refresh_secret: HMAC key for refresh tokens.
    :param algorithm: JWS algorithm (default ``HS256``).
    :param issuer: Value of the ``iss`` claim, verified on decode when set.
    :param leeway: Clock skew tolerated on ``exp``/``iat`` (seconds).
    """

    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    issuer: str | None = None
    leeway: int = 0

    def _secret_for(self, token_type: str) -> str:
        if token_type == ACCESS_TOKEN_TYPE:
            return self.access_secret
        if token_type == REFRESH_TOKEN_TYPE:
            return self.refresh_secret
        raise ValueError(f"Unknown token type: {token_type!r}")

    def encode(
        self,
        *,
        subject: int | str,
        token_type: str,
        claims: dict[str, Any] | None = None,
        expires_delta: timedelta,
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = dict(claims or {})
        payload.update(
            {
                "sub": str(subject),
                "type": token_type,
                # Random jti keeps two pairs issued in the same second distinct.
                "jti": uuid4().hex,
                "iat": now,
                "exp": now + expires_delta,
            }
        )
        if self.issuer:
            payload["iss"] = self.issuer
        return jwt.encode(payload, self._secret_for(token_type), algorithm=self.algorithm)

    def decode(self, token: str, *, token_type: str) -> dict[str, Any]:
        options: dict[str, Any] = {"require": list(_REQUIRED_CLAIMS)}
        try:
            payload = jwt.decode(
                token,
                self._secret_for(token_type),
                algorithms=[self.algorithm],
                issuer=self.issuer,
                leeway=self.leeway,
                options=options,
            )
        except jwt.PyJWTError as exc:
            raise AuthenticationError(str(exc)) from exc

        if payload.get("type") != token_type:
            raise AuthenticationError("Wrong token type")
        return payload
