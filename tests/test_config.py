"""Tests for environment-driven settings (core/config.py)."""

import pytest
from pydantic import ValidationError

from core.config import DEFAULT_EXCHANGE_API_URL, DEFAULT_WEATHER_API_URL, Settings, load_settings
from core.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("WEATHER_API_URL", "EXCHANGE_API_URL", "HTTP_TIMEOUT_SECONDS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()

    assert settings.weather_api_url == DEFAULT_WEATHER_API_URL
    assert settings.exchange_api_url == DEFAULT_EXCHANGE_API_URL
    assert settings.http_timeout_seconds == 5.0
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch):
    monkeypatch.setenv("WEATHER_API_URL", "http://localhost:8080/")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.weather_api_url == "http://localhost:8080"
    assert settings.http_timeout_seconds == 2.5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["soon", "0", "-1"])
def test_bad_timeout(monkeypatch, raw):
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", raw)
    with pytest.raises(ConfigError, match="HTTP_TIMEOUT_SECONDS"):
        load_settings()


def test_settings_are_frozen():
    settings = load_settings()
    with pytest.raises(ValidationError):
        settings.log_level = "DEBUG"


def test_field_names_accepted():
    settings = Settings(weather_api_url="https://wttr.example/", http_timeout_seconds=1)

    assert settings.weather_api_url == "https://wttr.example"
    assert settings.http_timeout_seconds == 1.0
