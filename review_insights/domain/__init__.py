# Domain Layer
# ============
# Pure business logic with no I/O:
# - models:    Review, ReviewBatch, Insights, PipelineResult
# - app_names: display-name resolution from application identifiers
# - prompts:   deterministic analysis prompt + rating summary
# - errors:    error taxonomy shared by every layer

from .errors import (
    PipelineError,
    SourceUnavailable,
    MissingCredential,
    RequestTimeout,
    ProviderError,
    EmptyResponse,
    MalformedInsights,
)
from .models import (
    Review,
    FetchTiming,
    ReviewBatch,
    SentimentAnalysis,
    Insights,
    PipelineResult,
)
from .app_names import resolve_app_name
from .prompts import RatingSummary, summarize_ratings, build_prompt, SYSTEM_PROMPT

__all__ = [
    "PipelineError",
    "SourceUnavailable",
    "MissingCredential",
    "RequestTimeout",
    "ProviderError",
    "EmptyResponse",
    "MalformedInsights",
    "Review",
    "FetchTiming",
    "ReviewBatch",
    "SentimentAnalysis",
    "Insights",
    "PipelineResult",
    "resolve_app_name",
    "RatingSummary",
    "summarize_ratings",
    "build_prompt",
    "SYSTEM_PROMPT",
]
