"""Tests for configuration helpers."""

from __future__ import annotations

from datetime import timedelta

import pytest

from plantbook.core.config import (
    DEFAULT_ACCESS_SECRET,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    check_secrets,
    env_bool,
    get_config,
    parse_duration,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("15m", timedelta(minutes=15)),
        ("7d", timedelta(days=7)),
        (" 2H ", timedelta(hours=2)),
        ("3600", timedelta(seconds=3600)),
        ("30s", timedelta(seconds=30)),
        (90, timedelta(seconds=90)),
        (timedelta(minutes=1), timedelta(minutes=1)),
    ],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "10w", "-5m", "0", 0])
def test_parse_duration_rejects(raw):
    with pytest.raises(ValueError):
        parse_duration(raw)


def test_env_bool(monkeypatch):
    monkeypatch.setenv("PB_FLAG", "Yes")
    assert env_bool("PB_FLAG") is True
    monkeypatch.setenv("PB_FLAG", "off")
    assert env_bool("PB_FLAG", True) is False
    monkeypatch.delenv("PB_FLAG")
    assert env_bool("PB_FLAG", True) is True


@pytest.mark.parametrize(
    "value,expected",
    [("testing", TestingConfig), ("PRODUCTION", ProductionConfig), ("bogus", DevelopmentConfig)],
)
def test_get_config(monkeypatch, value, expected):
    monkeypatch.setenv("APP_ENV", value)
    assert get_config() is expected


class TestCheckSecrets:
    def test_identical_secrets_rejected(self):
        with pytest.raises(RuntimeError, match="differ"):
            check_secrets({"JWT_ACCESS_SECRET": "same", "JWT_REFRESH_SECRET": "same", "TESTING": True})

    def test_missing_secret_rejected(self):
        with pytest.raises(RuntimeError):
            check_secrets({"JWT_ACCESS_SECRET": "a", "JWT_REFRESH_SECRET": ""})

    def test_placeholders_refused_in_production(self):
        config = {
            "SECRET_KEY": "real",
            "JWT_ACCESS_SECRET": DEFAULT_ACCESS_SECRET,
            "JWT_REFRESH_SECRET": "real-refresh",
        }
        with pytest.raises(RuntimeError, match="placeholder"):
            check_secrets(config)

    def test_placeholders_allowed_when_testing(self):
        check_secrets(
            {
                "TESTING": True,
                "JWT_ACCESS_SECRET": DEFAULT_ACCESS_SECRET,
                "JWT_REFRESH_SECRET": "other",
            }
        )

    def test_real_secrets_pass(self):
        check_secrets(
            {"SECRET_KEY": "s", "JWT_ACCESS_SECRET": "a" * 32, "JWT_REFRESH_SECRET": "b" * 32}
        )
