"""Tests for environment-driven settings."""

import pytest

from bible_mcp.config import DEFAULT_BASE_URL, DEFAULT_BIBLE_ID, ConfigError, Settings

ENV_VARS = [
    "BIBLE_API_KEY",
    "BIBLE_ID",
    "BIBLE_API_BASE_URL",
    "BASE_URL",
    "BIBLE_API_TIMEOUT",
    "SSE_KEEPALIVE_SECONDS",
    "PORT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_requires_api_key():
    with pytest.raises(ConfigError, match="BIBLE_API_KEY"):
        Settings.from_env()


def test_defaults(monkeypatch):
    monkeypatch.setenv("BIBLE_API_KEY", "secret")
    settings = Settings.from_env()
    assert settings.api_key == "secret"
    assert settings.bible_id == DEFAULT_BIBLE_ID
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout == 30.0
    assert settings.port == 8000


def test_overrides(monkeypatch):
    monkeypatch.setenv("BIBLE_API_KEY", "secret")
    monkeypatch.setenv("BIBLE_ID", "kjv")
    monkeypatch.setenv("BASE_URL", "https://mirror.example/v1/")
    monkeypatch.setenv("SSE_KEEPALIVE_SECONDS", "5")
    monkeypatch.setenv("PORT", "9000")
    settings = Settings.from_env()
    assert settings.bible_id == "kjv"
    assert settings.base_url == "https://mirror.example/v1"
    assert settings.keepalive_seconds == 5.0
    assert settings.port == 9000


def test_invalid_number(monkeypatch):
    monkeypatch.setenv("BIBLE_API_KEY", "secret")
    monkeypatch.setenv("PORT", "eighty")
    with pytest.raises(ConfigError, match="Invalid configuration"):
        Settings.from_env()
