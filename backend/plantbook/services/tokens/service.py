# plantbook/services/tokens/service.py
from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from plantbook.services._shared.errors import AuthenticationError
from plantbook.services._shared.ports import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    RefreshSessionView,
    RefreshTokenStore,
    TokenProvider,
    hash_token,
)
from plantbook.services.tokens.dto import AuthTokenConfig, TokenPairOut, TokenPayload

log = logging.getLogger(__name__)


class TokenService:
    """
    Issue, verify, rotate and revoke access/refresh token pairs.

    Access tokens are stateless: a valid signature and an unexpired ``exp``
    are enough. Refresh tokens must additionally have their hash present in
    the owner's session set held by the :class:`RefreshTokenStore`; removing
    the hash revokes the token.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        refresh_store: RefreshTokenStore,
        token_cfg: AuthTokenConfig | None = None,
    ) -> None:
        """
        :param token_provider: Adapter for signing/decoding tokens.
        :param refresh_store: Per-user set of valid refresh sessions.
        :param token_cfg: Lifetimes and session cap.
        """
        self.tokens = token_provider
        self.store = refresh_store
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue_pair(self, user_id: int, email: str, *, device: str | None = None) -> TokenPairOut:
        """
        Sign a fresh access/refresh pair and register the refresh session.

        :param user_id: Subject.
        :param email: Email claim.
        :param device: Client label stored with the session.
        :returns: Encoded token pair.
        """
        claims = {"email": email}
        access = self.tokens.encode(
            subject=user_id,
            token_type=ACCESS_TOKEN_TYPE,
            claims=claims,
            expires_delta=self.cfg.access_expires,
        )
        refresh = self.tokens.encode(
            subject=user_id,
            token_type=REFRESH_TOKEN_TYPE,
            claims=claims,
            expires_delta=self.cfg.refresh_expires,
        )
        now = datetime.now(UTC)
        self.store.add(
            user_id=user_id,
            token_hash=hash_token(refresh),
            issued_at=now,
            expires_at=now + self.cfg.refresh_expires,
            device=device,
        )
        return TokenPairOut(access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Verify
    # ------------------------------------------------------------------ #

    def verify_access(self, token: str) -> TokenPayload:
        """
        Validate an access token (signature, expiry, type). Never hits the store.

        :raises AuthenticationError: On any failure.
        """
        return self._payload(self.tokens.decode(token, token_type=ACCESS_TOKEN_TYPE))

    def verify_refresh(self, token: str) -> TokenPayload:
        """
        Validate a refresh token statelessly, using the refresh key only.

        :raises AuthenticationError: On any failure.
        """
        return self._payload(self.tokens.decode(token, token_type=REFRESH_TOKEN_TYPE))

    def is_refresh_active(self, user_id: int, token: str) -> bool:
        """Return True while the token's session has not been revoked or rotated."""
        return self.store.contains(user_id, hash_token(token))

    # ------------------------------------------------------------------ #
    # Rotate / revoke
    # ------------------------------------------------------------------ #

    def rotate_refresh(
        self, old_token: str, user_id: int, email: str, *, device: str | None = None
    ) -> TokenPairOut:
        """
        Consume ``old_token`` and issue a new pair.

        The store's atomic discard decides the winner: of several concurrent
        rotations of one token exactly one succeeds, and a replay of a
        rotated token always fails.

        :raises AuthenticationError: If the token is invalid, belongs to
            another user, or was already consumed/revoked.
        """
        payload = self.verify_refresh(old_token)
        if payload.user_id != user_id:
            raise AuthenticationError("Refresh token subject mismatch")
        if not self.store.discard(user_id, hash_token(old_token)):
            log.warning("auth.refresh.replayed", extra={"user_id": user_id})
            raise AuthenticationError("Refresh token is no longer valid")
        return self.issue_pair(user_id, email, device=device)

    def revoke(self, user_id: int, token: str) -> bool:
        """Remove a single refresh session. Idempotent."""
        return self.store.discard(user_id, hash_token(token))

    def revoke_all(self, user_id: int) -> int:
        """Remove every refresh session of the user. :returns: sessions removed."""
        removed = self.store.clear(user_id)
        log.info("auth.sessions.revoked_all", extra={"user_id": user_id, "count": removed})
        return removed

    def sessions(self, user_id: int) -> list[RefreshSessionView]:
        return self.store.sessions(user_id)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def _payload(claims: dict[str, Any]) -> TokenPayload:
        try:
            return TokenPayload(
                user_id=int(claims["sub"]),
                email=str(claims.get("email", "")),
                token_type=str(claims["type"]),
                jti=str(claims["jti"]),
                issued_at=datetime.fromtimestamp(int(claims["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=UTC),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthenticationError("Malformed token claims") from exc
