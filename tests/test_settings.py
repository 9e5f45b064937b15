"""Unit tests for review_insights.infrastructure.config.settings."""

from __future__ import annotations

import dataclasses

import pytest

from review_insights.infrastructure.config import (
    LLMSettings,
    PipelineSettings,
    RetrySettings,
    ReviewSourceSettings,
    Settings,
    get_settings,
)
from tests.conftest import make_settings

ENV_VARS = (
    "PLAYSTORE_API_URL", "REVIEW_SOURCE_TIMEOUT", "DEEPSEEK_API_KEY", "DEEPSEEK_API_URL",
    "DEEPSEEK_MODEL", "LLM_TIMEOUT", "RETRY_ATTEMPTS", "RETRY_INITIAL_DELAY", "RETRY_BACKOFF",
    "REVIEW_SAMPLE_SIZE", "NORMALIZE_SENTIMENT", "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:
    def test_defaults(self, clean_env) -> None:
        settings = Settings()
        assert settings.review_source.base_url == "https://playstore-api-wrapper.onrender.com"
        assert settings.llm.api_url == "https://api.deepseek.com/v1/chat/completions"
        assert settings.llm.model == "deepseek-chat"
        assert settings.llm.timeout_seconds == 120.0
        assert settings.retry == RetrySettings(max_attempts=3, initial_delay_seconds=1.0, backoff_multiplier=2.0)
        assert settings.pipeline == PipelineSettings(sample_size=500, normalize_sentiment=False)
        assert settings.log_level == "INFO"
        assert not settings.llm.has_credential

    def test_is_immutable(self, clean_env) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().log_level = "DEBUG"


class TestEnvironment:
    def test_env_overrides(self, clean_env) -> None:
        clean_env.setenv("PLAYSTORE_API_URL", "https://mirror.test")
        clean_env.setenv("DEEPSEEK_API_KEY", "sk-abcdefgh")
        clean_env.setenv("DEEPSEEK_MODEL", "deepseek-reasoner")
        clean_env.setenv("LLM_TIMEOUT", "60")
        clean_env.setenv("RETRY_ATTEMPTS", "5")
        clean_env.setenv("REVIEW_SAMPLE_SIZE", "100")
        clean_env.setenv("NORMALIZE_SENTIMENT", "true")
        clean_env.setenv("LOG_LEVEL", "debug")

        settings = Settings()
        assert settings.review_source.base_url == "https://mirror.test"
        assert settings.llm.has_credential
        assert settings.llm.model == "deepseek-reasoner"
        assert settings.llm.timeout_seconds == 60.0
        assert settings.retry.max_attempts == 5
        assert settings.pipeline.sample_size == 100
        assert settings.pipeline.normalize_sentiment is True
        assert settings.log_level == "DEBUG"

    def test_empty_values_fall_back_to_defaults(self, clean_env) -> None:
        clean_env.setenv("LLM_TIMEOUT", "")
        clean_env.setenv("RETRY_ATTEMPTS", "")
        assert Settings().llm.timeout_seconds == 120.0
        assert Settings().retry.max_attempts == 3

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()


class TestCredential:
    @pytest.mark.parametrize("key, expected", [
        ("", False), ("  ", False), ("YOUR_DEEPSEEK_API_KEY_HERE", False), ("sk-real", True),
    ])
    def test_has_credential(self, key: str, expected: bool) -> None:
        assert LLMSettings(api_key=key).has_credential is expected

    def test_masked_key(self) -> None:
        assert LLMSettings(api_key="sk-1234567890abcd").masked_key() == "sk-1...abcd"
        assert LLMSettings(api_key="").masked_key() == "not set"


class TestValidate:
    def test_valid_settings(self) -> None:
        assert make_settings().validate() == []

    def test_reports_problems(self) -> None:
        settings = Settings(
            review_source=ReviewSourceSettings(base_url="https://x", timeout_seconds=0),
            llm=LLMSettings(api_key="", timeout_seconds=-1),
            retry=RetrySettings(max_attempts=0),
            pipeline=PipelineSettings(sample_size=0),
        )
        issues = settings.validate()
        assert len(issues) == 5
        assert any("DEEPSEEK_API_KEY" in issue for issue in issues)
        assert any("REVIEW_SAMPLE_SIZE" in issue for issue in issues)
