"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from nfl_picker.config import Settings


@pytest.fixture
def provider_keys(monkeypatch):
    monkeypatch.setenv("MYSPORTSFEEDS_API_KEY", "stats_key")
    monkeypatch.setenv("OPENWEATHER_API_KEY", "weather_key")


def test_defaults(provider_keys):
    settings = Settings(_env_file=None)

    assert settings.mysportsfeeds_api_key == "stats_key"
    assert settings.mysportsfeeds_rate_limit == 100
    assert settings.mysportsfeeds_request_spacing == 0.1
    assert settings.openweather_rate_limit == 60
    assert settings.openweather_request_spacing == 0.2
    assert settings.enable_weather_updates is True
    assert settings.home_field_advantage == 0.03
    assert settings.log_mode == "development"


def test_environment_overrides(provider_keys, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("ENABLE_WEATHER_UPDATES", "false")
    monkeypatch.setenv("OPENWEATHER_RATE_LIMIT", "30")

    settings = Settings(_env_file=None)

    assert settings.log_mode == "production"
    assert settings.enable_weather_updates is False
    assert settings.openweather_rate_limit == 30


def test_missing_keys_fail_validation(monkeypatch):
    monkeypatch.delenv("MYSPORTSFEEDS_API_KEY", raising=False)
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_rate_limit_must_be_positive(provider_keys, monkeypatch):
    monkeypatch.setenv("MYSPORTSFEEDS_RATE_LIMIT", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
