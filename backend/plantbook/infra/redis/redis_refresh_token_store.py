# comments in English; reST docstrings
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import cast

import redis  # type: ignore[import-untyped]

from plantbook.services._shared.ports import RefreshSessionView, RefreshTokenStore


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store.

    One hash per user (``rt:u:{user_id}``) maps ``token_hash`` to a JSON
    document ``{"iat", "exp", "device"}``. ``HDEL`` returns how many fields
    it removed, which makes ``discard`` atomic across processes: among
    concurrent rotations of the same token exactly one sees ``1``.

    :param r: A Redis client (already connected).
    :param max_sessions: Live sessions kept per user; oldest are evicted.
    """

    r: redis.Redis
    max_sessions: int = 10

    # -------------------- helpers --------------------

    @staticmethod
    def _ku(user_id: int) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> float:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt.timestamp()

    @staticmethod
    def _now_ts() -> float:
        return datetime.now(UTC).timestamp()

    @staticmethod
    def _s(value: bytes | str) -> str:
        return value.decode() if isinstance(value, bytes | bytearray) else str(value)

    def _live(self, user_id: int) -> dict[str, dict]:
        """Load the user's sessions and drop expired fields from the hash."""
        key = self._ku(user_id)
        now_ts = self._now_ts()
        live: dict[str, dict] = {}
        stale: list[str] = []
        for field, raw in self.r.hgetall(key).items():
            token_hash = self._s(field)
            doc = json.loads(self._s(raw))
            if float(doc["exp"]) <= now_ts:
                stale.append(token_hash)
            else:
                live[token_hash] = doc
        if stale:
            self.r.hdel(key, *stale)
        return live

    # -------------------- API ------------------------

    def add(
        self,
        *,
        user_id: int,
        token_hash: str,
        issued_at: datetime,
        expires_at: datetime,
        device: str | None = None,
    ) -> None:
        key = self._ku(user_id)
        live = self._live(user_id)
        doc = {"iat": self._to_ts(issued_at), "exp": self._to_ts(expires_at), "device": device}
        live[token_hash] = doc

        overflow = len(live) - self.max_sessions
        evict = (
            [h for h, _ in sorted(live.items(), key=lambda kv: kv[1]["iat"])[:overflow]]
            if overflow > 0
            else []
        )
        # The hash lives as long as its longest-lived session.
        horizon = max(float(d["exp"]) for h, d in live.items() if h not in evict)
        ttl = max(1, int(horizon - self._now_ts()) + 1)

        pipe = self.r.pipeline(transaction=True)
        pipe.hset(key, token_hash, json.dumps(doc))
        if evict:
            pipe.hdel(key, *evict)
        pipe.expire(key, ttl)
        pipe.execute()

    def contains(self, user_id: int, token_hash: str) -> bool:
        raw = self.r.hget(self._ku(user_id), token_hash)
        if raw is None:
            return False
        doc = json.loads(self._s(raw))
        if float(doc["exp"]) <= self._now_ts():
            self.r.hdel(self._ku(user_id), token_hash)
            return False
        return True

    def discard(self, user_id: int, token_hash: str) -> bool:
        pipe = self.r.pipeline(transaction=True)
        pipe.hget(self._ku(user_id), token_hash)
        pipe.hdel(self._ku(user_id), token_hash)
        raw, removed = cast(list, pipe.execute())
        if not removed:
            return False
        # An expired entry counts as already gone.
        return float(json.loads(self._s(raw))["exp"]) > self._now_ts()

    def clear(self, user_id: int) -> int:
        live = self._live(user_id)
        self.r.delete(self._ku(user_id))
        return len(live)

    def sessions(self, user_id: int) -> list[RefreshSessionView]:
        views = [
            RefreshSessionView(
                user_id=user_id,
                token_hash=token_hash,
                issued_at=datetime.fromtimestamp(float(doc["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(float(doc["exp"]), tz=UTC),
                device=doc.get("device"),
            )
            for token_hash, doc in self._live(user_id).items()
        ]
        return sorted(views, key=lambda v: v.issued_at)
