"""Unit tests for the PyJWT token provider."""

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest
from freezegun import freeze_time

from plantbook.infra.jwt.pyjwt_token_provider import PyJWTTokenProvider
from plantbook.services._shared.errors import AuthenticationError
from plantbook.services._shared.ports import ACCESS_TOKEN_TYPE, REFRESH_TOKEN_TYPE


@pytest.fixture()
def provider() -> PyJWTTokenProvider:
    return PyJWTTokenProvider(
        access_secret="access-key", refresh_secret="refresh-key", issuer="plantbook"
    )


def _encode(provider, token_type, *, minutes=15, subject=7):
    return provider.encode(
        subject=subject,
        token_type=token_type,
        claims={"email": "ivy@example.com"},
        expires_delta=timedelta(minutes=minutes),
    )


def test_round_trip_carries_claims(provider):
    token = _encode(provider, ACCESS_TOKEN_TYPE)
    claims = provider.decode(token, token_type=ACCESS_TOKEN_TYPE)

    assert claims["sub"] == "7"
    assert claims["type"] == ACCESS_TOKEN_TYPE
    assert claims["email"] == "ivy@example.com"
    assert claims["iss"] == "plantbook"
    assert claims["jti"]


def test_two_tokens_issued_together_differ(provider):
    assert _encode(provider, REFRESH_TOKEN_TYPE) != _encode(provider, REFRESH_TOKEN_TYPE)


def test_refresh_token_is_not_an_access_token(provider):
    refresh = _encode(provider, REFRESH_TOKEN_TYPE)
    with pytest.raises(AuthenticationError):
        provider.decode(refresh, token_type=ACCESS_TOKEN_TYPE)


def test_type_claim_checked_even_with_shared_secret():
    shared = PyJWTTokenProvider(access_secret="same", refresh_secret="same")
    refresh = _encode(shared, REFRESH_TOKEN_TYPE)
    with pytest.raises(AuthenticationError, match="Wrong token type"):
        shared.decode(refresh, token_type=ACCESS_TOKEN_TYPE)


def test_expired_token_rejected(provider):
    with freeze_time("2024-01-01 12:00:00"):
        token = _encode(provider, ACCESS_TOKEN_TYPE, minutes=15)
    with freeze_time("2024-01-01 12:16:00"), pytest.raises(AuthenticationError):
        provider.decode(token, token_type=ACCESS_TOKEN_TYPE)


def test_tampered_or_foreign_token_rejected(provider):
    token = _encode(provider, ACCESS_TOKEN_TYPE)
    with pytest.raises(AuthenticationError):
        provider.decode(token[:-2] + "xx", token_type=ACCESS_TOKEN_TYPE)

    foreign = jwt.encode(
        {"sub": "7", "type": "access", "jti": "j", "iat": 0, "exp": 4102444800, "iss": "other"},
        "access-key",
        algorithm="HS256",
    )
    with pytest.raises(AuthenticationError):
        provider.decode(foreign, token_type=ACCESS_TOKEN_TYPE)


def test_missing_required_claim_rejected(provider):
    token = jwt.encode(
        {"sub": "7", "type": "access", "exp": 4102444800, "iss": "plantbook"},
        "access-key",
        algorithm="HS256",
    )
    with pytest.raises(AuthenticationError):
        provider.decode(token, token_type=ACCESS_TOKEN_TYPE)
