"""
Domain Models - Reviews, Insights and Pipeline Results
======================================================

ARCHITECTURAL DECISION:
- Review / ReviewBatch / PipelineResult are plain frozen dataclasses:
  they are produced by our own code and never need validation.
- Insights is a pydantic model: it is built from untrusted LLM output,
  so missing fields get safe defaults and wrong types are rejected.
- JSON field names are camelCase to match the exposed API; Python
  attributes stay snake_case.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ANONYMOUS_AUTHOR = "Anonymous"

SAMPLE_DATA_MESSAGE = (
    "Using sample reviews as the API did not return real reviews. "
    "Check the server logs for details."
)


@dataclass(frozen=True)
class Review:
    """A single user review, always fully populated after normalization."""
    id: str
    rating: int          # 0 = unknown, otherwise 1 to 5
    text: str
    author: str
    date: str            # ISO-8601

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "rating": self.rating,
            "text": self.text,
            "author": self.author,
            "date": self.date,
        }


@dataclass(frozen=True)
class FetchTiming:
    """Wall-clock timing of one review fetch. Observability only."""
    start: str
    end: str
    duration_ms: float

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end, "durationMs": self.duration_ms}


@dataclass(frozen=True)
class ReviewBatch:
    """Normalized result of one fetch, source order preserved."""
    app_name: str
    reviews: List[Review] = field(default_factory=list)
    fetch_timing: Optional[FetchTiming] = field(default=None, compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.reviews


# ── Insights (validated LLM output) ──────────────────────────────

def _as_string_list(value: Any) -> List[str]:
    """Coerce a model-provided list into a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [item if isinstance(item, str) else str(item) for item in value if item is not None]
    raise ValueError(f"expected a list of strings, got {type(value).__name__}")


def _as_percentage(value: Any) -> Any:
    if value is None:
        return 0.0
    if isinstance(value, str):
        return value.strip().rstrip("%").strip()
    return value


class SentimentAnalysis(BaseModel):
    """Positive/negative split as reported by the model (not renormalized)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    positive_percentage: float = Field(0.0, alias="positivePercentage", allow_inf_nan=False)
    negative_percentage: float = Field(0.0, alias="negativePercentage", allow_inf_nan=False)
    key_emotions: List[str] = Field(default_factory=list, alias="keyEmotions")

    @field_validator("key_emotions", mode="before")
    @classmethod
    def _coerce_emotions(cls, value: Any) -> List[str]:
        return _as_string_list(value)

    @field_validator("positive_percentage", "negative_percentage", mode="before")
    @classmethod
    def _coerce_percentages(cls, value: Any) -> Any:
        return _as_percentage(value)

    def renormalized(self) -> "SentimentAnalysis":
        """
        Clamp both percentages to 0..100 and rescale them to sum to 100.
        Leaves a 0/0 split untouched.
        """
        positive = min(max(self.positive_percentage, 0.0), 100.0)
        negative = min(max(self.negative_percentage, 0.0), 100.0)
        total = positive + negative
        if total > 0:
            positive = round(positive * 100.0 / total, 2)
            negative = round(100.0 - positive, 2)
        return self.model_copy(update={
            "positive_percentage": positive,
            "negative_percentage": negative,
        })


class Insights(BaseModel):
    """
    Structured feedback produced by one LLM invocation.

    Missing lists default to empty, a missing paragraph to "", and a
    missing sentiment block to a 0/0 split. Extra keys are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    common_praises: List[str] = Field(default_factory=list, alias="commonPraises")
    common_complaints: List[str] = Field(default_factory=list, alias="commonComplaints")
    feature_requests: List[str] = Field(default_factory=list, alias="featureRequests")
    user_experience: str = Field("", alias="userExperience")
    sentiment_analysis: SentimentAnalysis = Field(default_factory=SentimentAnalysis, alias="sentimentAnalysis")
    actionable_recommendations: List[str] = Field(default_factory=list, alias="actionableRecommendations")

    @field_validator(
        "common_praises", "common_complaints", "feature_requests", "actionable_recommendations",
        mode="before",
    )
    @classmethod
    def _coerce_lists(cls, value: Any) -> List[str]:
        return _as_string_list(value)

    @field_validator("user_experience", mode="before")
    @classmethod
    def _coerce_paragraph(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return " ".join(str(part) for part in value)
        return value if isinstance(value, str) else str(value)

    @field_validator("sentiment_analysis", mode="before")
    @classmethod
    def _coerce_sentiment(cls, value: Any) -> Any:
        return {} if value is None else value

    def with_normalized_sentiment(self) -> "Insights":
        return self.model_copy(update={"sentiment_analysis": self.sentiment_analysis.renormalized()})

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


# ── Pipeline output ─────────────────────────────────────────────

@dataclass(frozen=True)
class PipelineResult:
    """
    Combined output of one pipeline run.

    insights and insight_error are mutually exclusive; neither being set
    means insight generation was not attempted.
    """
    review_batch: ReviewBatch
    insights: Optional[Insights] = None
    insight_error: Optional[str] = None
    used_sample_data: bool = False

    def __post_init__(self):
        if self.insights is not None and self.insight_error is not None:
            raise ValueError("PipelineResult cannot carry both insights and insight_error")

    @property
    def insights_attempted(self) -> bool:
        return self.insights is not None or self.insight_error is not None

    def to_dict(self) -> dict:
        data = {
            "appName": self.review_batch.app_name,
            "reviews": [review.to_dict() for review in self.review_batch.reviews],
            "insights": self.insights.to_dict() if self.insights is not None else None,
        }
        if self.insight_error:
            data["insightError"] = self.insight_error
        if self.used_sample_data:
            data["message"] = SAMPLE_DATA_MESSAGE
        return data
