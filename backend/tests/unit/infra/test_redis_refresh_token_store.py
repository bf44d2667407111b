"""
Unit tests for RedisRefreshTokenStore using fakeredis.

These tests exercise the main flows:
- add + contains
- discard (single winner, replay, expired entries)
- clear
- sessions ordering and the per-user cap
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest

from plantbook.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore


def _now() -> datetime:
    """Return a timezone-aware UTC "now"."""
    return datetime.now(UTC)


def _hash(i: int) -> str:
    """Predictable token hashes for tests."""
    return f"{i:064x}"


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def store(fake_redis):
    return RedisRefreshTokenStore(r=fake_redis, max_sessions=3)


def _add(store, user_id: int, i: int, *, issued: datetime, ttl: timedelta, device=None) -> None:
    store.add(
        user_id=user_id,
        token_hash=_hash(i),
        issued_at=issued,
        expires_at=issued + ttl,
        device=device,
    )


def test_add_and_contains(store, fake_redis):
    now = _now()
    _add(store, 1, 1, issued=now, ttl=timedelta(hours=1), device="phone")

    assert store.contains(1, _hash(1))
    assert not store.contains(1, _hash(2))
    assert not store.contains(2, _hash(1))
    assert 0 < fake_redis.ttl("rt:u:1") <= 3601


def test_discard_succeeds_once(store):
    now = _now()
    _add(store, 1, 1, issued=now, ttl=timedelta(hours=1))

    assert store.discard(1, _hash(1)) is True
    assert store.discard(1, _hash(1)) is False
    assert not store.contains(1, _hash(1))


def test_expired_entries_are_not_live(store):
    past = _now() - timedelta(hours=2)
    _add(store, 1, 1, issued=past, ttl=timedelta(hours=1))

    assert not store.contains(1, _hash(1))
    assert store.discard(1, _hash(1)) is False
    assert store.sessions(1) == []


def test_clear_returns_live_count(store):
    now = _now()
    _add(store, 1, 1, issued=now, ttl=timedelta(hours=1))
    _add(store, 1, 2, issued=now, ttl=timedelta(hours=1))
    _add(store, 2, 3, issued=now, ttl=timedelta(hours=1))

    assert store.clear(1) == 2
    assert store.sessions(1) == []
    assert store.contains(2, _hash(3))


def test_cap_evicts_oldest_sessions(store):
    base = _now()
    for i in range(5):
        _add(store, 1, i, issued=base + timedelta(seconds=i), ttl=timedelta(hours=1), device=f"d{i}")

    sessions = store.sessions(1)
    assert [s.device for s in sessions] == ["d2", "d3", "d4"]
    assert not store.contains(1, _hash(0))
    assert store.contains(1, _hash(4))
