"""Tests for environment configuration."""

import pytest
from pydantic import ValidationError

from truthmeter.infrastructure.config import AppConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in AppConfig.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)


def test_defaults():
    config = AppConfig.from_env()

    assert config.openai_model == "gpt-4o-mini"
    assert config.search_provider == "serper"
    assert config.database_path == "./truthmeter.db"
    assert config.cache_ttl_days == 7
    assert config.target_sources == 100
    assert config.max_sources_per_category == 10
    assert config.enable_translations is True
    assert config.display_language == "en"
    assert config.search_api_key == ""


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("SEARCH_PROVIDER", "tavily")
    monkeypatch.setenv("TAVILY_API_KEY", "tvly-test")
    monkeypatch.setenv("CACHE_TTL_DAYS", "3")
    monkeypatch.setenv("ENABLE_TRANSLATIONS", "false")
    monkeypatch.setenv("SEARCH_TIMEOUT", "7.5")
    monkeypatch.setenv("DISPLAY_LANGUAGE", "fr")

    config = AppConfig.from_env()

    assert config.openai_api_key == "sk-test"
    assert config.search_api_key == "tvly-test"
    assert config.cache_ttl_days == 3
    assert config.enable_translations is False
    assert config.search_timeout == 7.5
    assert config.display_language == "fr"


def test_blank_values_use_defaults(monkeypatch):
    monkeypatch.setenv("TARGET_SOURCES", "  ")

    assert AppConfig.from_env().target_sources == 100


def test_invalid_values_are_rejected(monkeypatch):
    monkeypatch.setenv("CACHE_TTL_DAYS", "0")

    with pytest.raises(ValidationError):
        AppConfig.from_env()
