"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- All configuration is loaded from environment variables (no hardcoded secrets)
- Settings are immutable dataclasses, built once at process start
- Core classes receive a Settings instance; they never read os.environ

EXTENSIBILITY:
- To switch LLM provider: point DEEPSEEK_API_URL at any OpenAI-compatible
  chat completions endpoint and set DEEPSEEK_MODEL accordingly
- To use another review source: set PLAYSTORE_API_URL
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file if present (development convenience)
load_dotenv()

PLACEHOLDER_API_KEYS = frozenset({
    "YOUR_DEEPSEEK_API_KEY_HERE",
    "your_api_key_here",
})


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value in (None, ""):
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ReviewSourceSettings:
    """Third-party review API (Play Store wrapper)."""

    base_url: str = field(
        default_factory=lambda: os.getenv(
            "PLAYSTORE_API_URL", "https://playstore-api-wrapper.onrender.com"
        )
    )
    timeout_seconds: float = field(default_factory=lambda: _env_float("REVIEW_SOURCE_TIMEOUT", 30.0))


@dataclass(frozen=True)
class LLMSettings:
    """OpenAI-compatible chat completions provider (DeepSeek by default)."""

    api_key: str = field(default_factory=lambda: os.getenv("DEEPSEEK_API_KEY", ""))
    api_url: str = field(
        default_factory=lambda: os.getenv(
            "DEEPSEEK_API_URL", "https://api.deepseek.com/v1/chat/completions"
        )
    )
    model: str = field(default_factory=lambda: os.getenv("DEEPSEEK_MODEL", "deepseek-chat"))

    # Large prompts (500 reviews) take a while to analyze
    timeout_seconds: float = field(default_factory=lambda: _env_float("LLM_TIMEOUT", 120.0))

    @property
    def has_credential(self) -> bool:
        key = self.api_key.strip()
        return bool(key) and key not in PLACEHOLDER_API_KEYS

    def masked_key(self) -> str:
        """First and last four characters only, for diagnostics."""
        if not self.has_credential:
            return "not set"
        return f"{self.api_key[:4]}...{self.api_key[-4:]}"


@dataclass(frozen=True)
class RetrySettings:
    """Exponential backoff around network calls."""

    max_attempts: int = field(default_factory=lambda: _env_int("RETRY_ATTEMPTS", 3))
    initial_delay_seconds: float = field(default_factory=lambda: _env_float("RETRY_INITIAL_DELAY", 1.0))
    backoff_multiplier: float = field(default_factory=lambda: _env_float("RETRY_BACKOFF", 2.0))


@dataclass(frozen=True)
class PipelineSettings:
    """Insight generation tunables."""

    # How many reviews go into one prompt. 100 is a good low-latency value.
    sample_size: int = field(default_factory=lambda: _env_int("REVIEW_SAMPLE_SIZE", 500))

    # Rescale model sentiment percentages so they sum to 100
    normalize_sentiment: bool = field(default_factory=lambda: _env_bool("NORMALIZE_SENTIMENT"))


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from review_insights.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.llm.model)
    """

    # Sub-settings groups
    review_source: ReviewSourceSettings = field(default_factory=ReviewSourceSettings)
    llm: LLMSettings = field(default_factory=LLMSettings)
    retry: RetrySettings = field(default_factory=RetrySettings)
    pipeline: PipelineSettings = field(default_factory=PipelineSettings)

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings/errors.
        Returns empty list if all settings are valid.
        """
        issues = []

        if not self.llm.has_credential:
            issues.append(
                "WARNING: DEEPSEEK_API_KEY not set. "
                "Reviews will be shown without AI insights."
            )

        if self.llm.timeout_seconds <= 0:
            issues.append("WARNING: LLM_TIMEOUT must be positive.")

        if self.review_source.timeout_seconds <= 0:
            issues.append("WARNING: REVIEW_SOURCE_TIMEOUT must be positive.")

        if self.retry.max_attempts < 1:
            issues.append("WARNING: RETRY_ATTEMPTS must be at least 1.")

        if self.pipeline.sample_size < 1:
            issues.append(
                "WARNING: REVIEW_SAMPLE_SIZE must be at least 1. "
                "Prompts will contain no reviews."
            )

        return issues


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()
