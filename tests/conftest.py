"""Shared fixtures: offline settings, fake HTTP responses, fake collaborators."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, List, Optional
from unittest.mock import MagicMock

import pytest

from review_insights.domain.errors import MissingCredential, PipelineError
from review_insights.infrastructure.config import (
    LLMSettings,
    PipelineSettings,
    RetrySettings,
    ReviewSourceSettings,
    Settings,
)

FIXED_NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)

VALID_INSIGHTS = {
    "commonPraises": ["Huge music library", "Great playlists", "Smooth offline mode"],
    "commonComplaints": ["Too many ads", "Shuffle repeats songs"],
    "featureRequests": ["Lyrics for every song", "Better podcast search"],
    "userExperience": "Users enjoy the catalogue but dislike ads on the free tier.",
    "sentimentAnalysis": {
        "positivePercentage": 67,
        "negativePercentage": 33,
        "keyEmotions": ["joy", "frustration"],
    },
    "actionableRecommendations": ["Reduce ad frequency", "Fix shuffle", "Add lyrics"],
}


def make_settings(
    api_key: str = "sk-test-1234567890",
    max_attempts: int = 3,
    sample_size: int = 500,
    normalize_sentiment: bool = False,
) -> Settings:
    return Settings(
        review_source=ReviewSourceSettings(base_url="https://reviews.test", timeout_seconds=5.0),
        llm=LLMSettings(
            api_key=api_key,
            api_url="https://llm.test/v1/chat/completions",
            model="test-model",
            timeout_seconds=10.0,
        ),
        retry=RetrySettings(max_attempts=max_attempts, initial_delay_seconds=0.0, backoff_multiplier=2.0),
        pipeline=PipelineSettings(sample_size=sample_size, normalize_sentiment=normalize_sentiment),
        log_level="DEBUG",
    )


def make_response(status_code: int = 200, json_data: Any = None, text: Optional[str] = None) -> MagicMock:
    """Stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if json_data is not None:
        response.json.return_value = json_data
        response.text = text if text is not None else json.dumps(json_data)
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
        response.text = text or ""
    return response


def completion(content: Any) -> dict:
    """Chat completions envelope around `content`."""
    return {"model": "test-model", "choices": [{"message": {"role": "assistant", "content": content}}]}


class FakeReviewSource:
    """Returns `records` or raises each error in `errors` in turn."""

    def __init__(self, records: Optional[List[Any]] = None, errors: Optional[List[Exception]] = None):
        self.records = records if records is not None else []
        self.errors = list(errors or [])
        self.calls = 0

    def fetch_reviews(self, app_id: str) -> List[Any]:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.records


class FakeInsightClient:
    """Returns `content` or raises each error in `errors` in turn."""

    model = "test-model"

    def __init__(self, content: str = "", errors: Optional[List[Exception]] = None, has_credential: bool = True):
        self.content = content
        self.errors = list(errors or [])
        self.has_credential = has_credential
        self.prompts: List[str] = []

    def ensure_credential(self) -> None:
        if not self.has_credential:
            raise MissingCredential("Valid DeepSeek API key is required.")

    def complete(self, prompt: str, app_name: str = "") -> str:
        self.prompts.append(prompt)
        if self.errors:
            raise self.errors.pop(0)
        return self.content

    @property
    def calls(self) -> int:
        return len(self.prompts)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def spotify_records() -> List[dict]:
    return [
        {"id": "r1", "score": 5, "text": "Love the playlists", "userName": "Ana", "date": "2025-03-01T10:00:00Z"},
        {"id": "r2", "score": 5, "text": "Best music app", "userName": "Ben", "date": "2025-03-02T11:00:00Z"},
        {"id": "r3", "score": 1, "text": "Way too many ads", "userName": "Cy", "date": "2025-03-03T12:00:00Z"},
    ]


@pytest.fixture
def insights_json() -> str:
    return json.dumps(VALID_INSIGHTS)
