from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol


def hash_token(token: str) -> str:
    """
    Return the SHA-256 hex digest stored in place of a raw refresh token.

    :param token: Encoded refresh token.
    :returns: 64-char lowercase hex digest.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class RefreshSessionView:
    """
    Read-model for a refresh session. Never carries token material.

    :ivar user_id: Owner user id.
    :ivar token_hash: SHA-256 of the refresh token (internal identifier).
    :ivar issued_at: Issue time (UTC).
    :ivar expires_at: Absolute expiration (UTC).
    :ivar device: Client label captured at issuance.
    """

    user_id: int
    token_hash: str
    issued_at: datetime
    expires_at: datetime
    device: str | None = None


class RefreshTokenStore(Protocol):
    """
    Per-user set of currently valid refresh tokens (hashed).

    ``discard`` MUST be atomic: among concurrent callers discarding the same
    hash, exactly one gets ``True``. Implementations prune expired entries
    lazily and keep at most ``max_sessions`` live entries per user.
    """

    def add(
        self,
        *,
        user_id: int,
        token_hash: str,
        issued_at: datetime,
        expires_at: datetime,
        device: str | None = None,
    ) -> None:
        """Register a session, evicting the oldest ones above the cap."""

    def contains(self, user_id: int, token_hash: str) -> bool:
        """Return True if the hash is a live session of the user."""

    def discard(self, user_id: int, token_hash: str) -> bool:
        """Remove one session. :returns: True only if this call removed it."""

    def clear(self, user_id: int) -> int:
        """Remove every session of the user. :returns: number removed."""

    def sessions(self, user_id: int) -> list[RefreshSessionView]:
        """List live sessions, oldest first."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh session store.

    .. note::
       Uses a threading lock to make ``discard`` atomic in unit tests.
    """

    def __init__(self, *, max_sessions: int = 10) -> None:
        self.max_sessions = max_sessions
        self._by_user: dict[int, dict[str, RefreshSessionView]] = {}
        self._lock = threading.Lock()

    # ------------------------- helpers -------------------------

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def _live(self, user_id: int) -> dict[str, RefreshSessionView]:
        """Return the user's bucket after dropping expired entries (lock held)."""
        bucket = self._by_user.setdefault(user_id, {})
        now = self._now()
        for token_hash in [h for h, s in bucket.items() if s.expires_at <= now]:
            del bucket[token_hash]
        return bucket

    # -------------------------- API ----------------------------

    def add(
        self,
        *,
        user_id: int,
        token_hash: str,
        issued_at: datetime,
        expires_at: datetime,
        device: str | None = None,
    ) -> None:
        with self._lock:
            bucket = self._live(user_id)
            bucket[token_hash] = RefreshSessionView(
                user_id=user_id,
                token_hash=token_hash,
                issued_at=issued_at,
                expires_at=expires_at,
                device=device,
            )
            overflow = len(bucket) - self.max_sessions
            if overflow > 0:
                oldest = sorted(bucket.values(), key=lambda s: s.issued_at)[:overflow]
                for session in oldest:
                    del bucket[session.token_hash]

    def contains(self, user_id: int, token_hash: str) -> bool:
        with self._lock:
            return token_hash in self._live(user_id)

    def discard(self, user_id: int, token_hash: str) -> bool:
        with self._lock:
            return self._live(user_id).pop(token_hash, None) is not None

    def clear(self, user_id: int) -> int:
        with self._lock:
            bucket = self._live(user_id)
            count = len(bucket)
            bucket.clear()
            return count

    def sessions(self, user_id: int) -> list[RefreshSessionView]:
        with self._lock:
            return sorted(self._live(user_id).values(), key=lambda s: s.issued_at)
