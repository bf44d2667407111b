"""Unit tests for SQLRefreshTokenStore against the transactional test database."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from plantbook.infra.sql.sql_refresh_token_store import SQLRefreshTokenStore
from tests.factories.user import UserFactory


@pytest.fixture()
def user_id(session) -> int:
    user = UserFactory()
    session.commit()
    return user.id


@pytest.fixture()
def store() -> SQLRefreshTokenStore:
    return SQLRefreshTokenStore(max_sessions=2)


def _add(store, user_id: int, token_hash: str, *, issued: datetime, ttl: timedelta, device=None):
    store.add(
        user_id=user_id,
        token_hash=token_hash,
        issued_at=issued,
        expires_at=issued + ttl,
        device=device,
    )


class TestSQLRefreshTokenStore:
    def test_add_contains_discard(self, store, user_id):
        _add(store, user_id, "a" * 64, issued=datetime.now(UTC), ttl=timedelta(hours=1))

        assert store.contains(user_id, "a" * 64)
        assert store.discard(user_id, "a" * 64) is True
        assert store.discard(user_id, "a" * 64) is False
        assert not store.contains(user_id, "a" * 64)

    def test_expired_sessions_are_rejected_and_purged(self, store, user_id):
        past = datetime.now(UTC) - timedelta(days=2)
        _add(store, user_id, "e" * 64, issued=past, ttl=timedelta(days=1))

        assert not store.contains(user_id, "e" * 64)
        assert store.discard(user_id, "e" * 64) is False
        assert store.sessions(user_id) == []

    def test_cap_evicts_oldest(self, store, user_id):
        base = datetime.now(UTC)
        for i, h in enumerate("abc"):
            _add(
                store,
                user_id,
                h * 64,
                issued=base + timedelta(seconds=i),
                ttl=timedelta(hours=1),
                device=f"device-{h}",
            )

        sessions = store.sessions(user_id)
        assert [s.device for s in sessions] == ["device-b", "device-c"]
        assert all(s.expires_at.tzinfo is not None for s in sessions)
        assert not store.contains(user_id, "a" * 64)

    def test_clear(self, store, user_id):
        now = datetime.now(UTC)
        _add(store, user_id, "a" * 64, issued=now, ttl=timedelta(hours=1))
        _add(store, user_id, "b" * 64, issued=now, ttl=timedelta(hours=1))

        assert store.clear(user_id) == 2
        assert store.clear(user_id) == 0

    def test_long_device_label_is_truncated(self, store, user_id):
        _add(
            store, user_id, "d" * 64, issued=datetime.now(UTC), ttl=timedelta(hours=1), device="x" * 300
        )
        assert len(store.sessions(user_id)[0].device) == 120
