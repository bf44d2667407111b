"""Unit tests for TokenService with the stub provider and in-memory store."""

from __future__ import annotations

from datetime import timedelta

import pytest
from freezegun import freeze_time

from plantbook.services._shared.errors import AuthenticationError
from plantbook.services._shared.ports import hash_token


class TestIssueAndVerify:
    def test_issue_pair_registers_hashed_refresh_session(self, tokens, refresh_store):
        pair = tokens.issue_pair(1, "a@example.com", device="phone")

        assert pair.access_token.startswith("access.")
        assert pair.refresh_token.startswith("refresh.")
        sessions = refresh_store.sessions(1)
        assert len(sessions) == 1
        assert sessions[0].token_hash == hash_token(pair.refresh_token)
        assert sessions[0].token_hash != pair.refresh_token
        assert sessions[0].device == "phone"

    def test_verify_access_returns_payload(self, tokens):
        pair = tokens.issue_pair(5, "fern@example.com")
        payload = tokens.verify_access(pair.access_token)

        assert payload.user_id == 5
        assert payload.email == "fern@example.com"
        assert payload.token_type == "access"
        assert payload.expires_at - payload.issued_at == timedelta(minutes=15)

    def test_tokens_are_not_interchangeable(self, tokens):
        pair = tokens.issue_pair(5, "fern@example.com")
        with pytest.raises(AuthenticationError):
            tokens.verify_access(pair.refresh_token)
        with pytest.raises(AuthenticationError):
            tokens.verify_refresh(pair.access_token)

    def test_access_token_expires(self, tokens):
        with freeze_time("2024-05-01 10:00:00"):
            pair = tokens.issue_pair(5, "fern@example.com")
        with freeze_time("2024-05-01 10:15:01"), pytest.raises(AuthenticationError):
            tokens.verify_access(pair.access_token)


class TestRotation:
    def test_rotate_consumes_old_token(self, tokens):
        pair = tokens.issue_pair(1, "a@example.com")

        new_pair = tokens.rotate_refresh(pair.refresh_token, 1, "a@example.com")

        assert new_pair.refresh_token != pair.refresh_token
        assert not tokens.is_refresh_active(1, pair.refresh_token)
        assert tokens.is_refresh_active(1, new_pair.refresh_token)

    def test_replay_of_rotated_token_fails(self, tokens):
        pair = tokens.issue_pair(1, "a@example.com")
        tokens.rotate_refresh(pair.refresh_token, 1, "a@example.com")

        with pytest.raises(AuthenticationError):
            tokens.rotate_refresh(pair.refresh_token, 1, "a@example.com")

    def test_subject_mismatch_rejected(self, tokens):
        pair = tokens.issue_pair(1, "a@example.com")
        with pytest.raises(AuthenticationError, match="mismatch"):
            tokens.rotate_refresh(pair.refresh_token, 2, "b@example.com")
        assert tokens.is_refresh_active(1, pair.refresh_token)


class TestRevocation:
    def test_revoke_is_idempotent(self, tokens):
        pair = tokens.issue_pair(1, "a@example.com")

        assert tokens.revoke(1, pair.refresh_token) is True
        assert tokens.revoke(1, pair.refresh_token) is False

    def test_revoke_all_leaves_other_users(self, tokens):
        tokens.issue_pair(1, "a@example.com")
        tokens.issue_pair(1, "a@example.com")
        other = tokens.issue_pair(2, "b@example.com")

        assert tokens.revoke_all(1) == 2
        assert tokens.sessions(1) == []
        assert tokens.is_refresh_active(2, other.refresh_token)

    def test_session_cap_evicts_oldest(self, tokens):
        with freeze_time("2024-05-01 10:00:00") as frozen:
            first = tokens.issue_pair(1, "a@example.com")
            for _ in range(3):
                frozen.tick(timedelta(seconds=1))
                tokens.issue_pair(1, "a@example.com")

            assert len(tokens.sessions(1)) == 3
            assert not tokens.is_refresh_active(1, first.refresh_token)
