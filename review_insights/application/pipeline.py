"""
Insight Pipeline - Review-to-Insight Orchestration
==================================================

Runs one request through:

    FETCHING_REVIEWS -> REVIEWS_EMPTY | REVIEWS_READY
                     -> GENERATING_INSIGHTS -> INSIGHTS_READY | INSIGHTS_FAILED
                     -> DONE

FAILURE HANDLING:
- Review fetch fails after retries -> fixed sample batch, no insights
- Zero reviews                      -> empty batch, no insight attempt
- Insight stage fails               -> insightError string, reviews kept

A downstream failure never discards what an upstream stage produced.
The pipeline holds no mutable state, so one instance can serve
concurrent requests.
"""

import logging
import threading
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Sequence

from ..domain.app_names import resolve_app_name
from ..domain.errors import (
    PipelineError,
    ProviderError,
    RequestTimeout,
    SourceUnavailable,
)
from ..domain.models import FetchTiming, Insights, PipelineResult, Review, ReviewBatch
from ..domain.prompts import build_prompt
from ..infrastructure.config import Settings
from ..infrastructure.llm import InsightClient, parse_insights
from ..infrastructure.retry import RetryPolicy
from ..infrastructure.reviews import ReviewSourceClient, normalize_reviews, sample_batch

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    """Stages of one pipeline run, used for logging."""
    FETCHING_REVIEWS = "fetching_reviews"
    REVIEWS_EMPTY = "reviews_empty"
    REVIEWS_READY = "reviews_ready"
    GENERATING_INSIGHTS = "generating_insights"
    INSIGHTS_READY = "insights_ready"
    INSIGHTS_FAILED = "insights_failed"
    DONE = "done"


def is_transient(error: PipelineError) -> bool:
    """LLM failures worth another attempt: timeouts, outages, 429 and 5xx."""
    if isinstance(error, (RequestTimeout, SourceUnavailable)):
        return True
    return isinstance(error, ProviderError) and error.is_transient


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InsightPipeline:
    """
    Fetch reviews for an app and summarize them with the LLM.

    USAGE:
        pipeline = InsightPipeline(get_settings())
        result = pipeline.run("com.spotify.music")
        print(result.to_dict())

    Collaborators can be injected for testing; by default they are built
    from `settings`.
    """

    def __init__(
        self,
        settings: Settings,
        review_source: Optional[ReviewSourceClient] = None,
        insight_client: Optional[InsightClient] = None,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._settings = settings
        self._review_source = review_source or ReviewSourceClient(settings.review_source)
        self._insight_client = insight_client or InsightClient(settings.llm)
        self._retry = RetryPolicy.from_settings(settings.retry)
        self._clock = clock
        self._sleep = sleep

    @property
    def settings(self) -> Settings:
        return self._settings

    # ── Full run ───────────────────────────────────────────────

    def run(
        self,
        app_id: str,
        with_insights: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> PipelineResult:
        """
        Run the whole pipeline for one application identifier.

        Never raises for review-source or LLM failures; only an error while
        building the fallback batch itself escapes.
        """
        app_name = resolve_app_name(app_id)
        self._log_stage(app_id, PipelineStage.FETCHING_REVIEWS)

        try:
            batch = self.fetch_review_batch(app_id, app_name=app_name, cancel_event=cancel_event)
        except PipelineError as e:
            logger.warning(f"Review fetch for {app_id} failed ({e}); using sample reviews")
            fallback = sample_batch(app_name, self._clock())
            self._log_stage(app_id, PipelineStage.DONE)
            return PipelineResult(review_batch=fallback, used_sample_data=True)

        if batch.is_empty:
            self._log_stage(app_id, PipelineStage.REVIEWS_EMPTY)
            self._log_stage(app_id, PipelineStage.DONE)
            return PipelineResult(review_batch=batch)

        self._log_stage(app_id, PipelineStage.REVIEWS_READY)
        if not with_insights:
            self._log_stage(app_id, PipelineStage.DONE)
            return PipelineResult(review_batch=batch)

        self._log_stage(app_id, PipelineStage.GENERATING_INSIGHTS)
        try:
            insights = self.generate_insights(app_name, batch.reviews, cancel_event=cancel_event)
        except PipelineError as e:
            logger.error(f"Error generating insights for {app_name}: {e}")
            self._log_stage(app_id, PipelineStage.INSIGHTS_FAILED)
            return PipelineResult(review_batch=batch, insight_error=self._describe_failure(e))
        except Exception as e:
            logger.exception(f"Unexpected error generating insights for {app_name}: {e}")
            self._log_stage(app_id, PipelineStage.INSIGHTS_FAILED)
            return PipelineResult(review_batch=batch, insight_error=self._describe_failure(e))

        self._log_stage(app_id, PipelineStage.INSIGHTS_READY)
        self._log_stage(app_id, PipelineStage.DONE)
        return PipelineResult(review_batch=batch, insights=insights)

    # ── Stages ─────────────────────────────────────────────────

    def fetch_review_batch(
        self,
        app_id: str,
        app_name: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ReviewBatch:
        """Fetch (with retries) and normalize reviews. Raises PipelineError."""
        started_at = self._clock()
        started = time.perf_counter()

        records = self._retry.call(
            lambda: self._review_source.fetch_reviews(app_id),
            cancel_event=cancel_event,
            sleep=self._sleep,
            description=f"Review fetch for {app_id}",
        )

        finished_at = self._clock()
        timing = FetchTiming(
            start=started_at.isoformat(),
            end=finished_at.isoformat(),
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        reviews = normalize_reviews(records, fetched_at=finished_at)
        logger.info(f"Normalized {len(reviews)} reviews for {app_id} in {timing.duration_ms}ms")

        return ReviewBatch(
            app_name=app_name or resolve_app_name(app_id),
            reviews=reviews,
            fetch_timing=timing,
        )

    def generate_insights(
        self,
        app_name: str,
        reviews: Sequence[Review],
        sample_size: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Insights:
        """
        Build the prompt, call the LLM and parse its answer.

        Raises:
            MissingCredential: before any network call when no key is set.
            PipelineError: any other insight-stage failure.
        """
        self._insight_client.ensure_credential()

        size = sample_size if sample_size is not None else self._settings.pipeline.sample_size
        logger.info(
            f"Generating insights for {app_name} with {min(len(reviews), size)} "
            f"of {len(reviews)} reviews using model: {self._insight_client.model}"
        )
        prompt = build_prompt(app_name, reviews, sample_size=size)

        content = self._retry.call(
            lambda: self._insight_client.complete(prompt, app_name=app_name),
            retry_if=is_transient,
            cancel_event=cancel_event,
            sleep=self._sleep,
            description=f"Insight generation for {app_name}",
        )

        insights = parse_insights(content)
        if self._settings.pipeline.normalize_sentiment:
            insights = insights.with_normalized_sentiment()

        logger.info(f"Successfully generated insights for {app_name}")
        return insights

    # ── Helpers ────────────────────────────────────────────────

    @staticmethod
    def _describe_failure(error: Exception) -> str:
        reason = str(error) or type(error).__name__
        return f"Failed to generate AI insights: {reason}. Reviews are still available."

    @staticmethod
    def _log_stage(app_id: str, stage: PipelineStage) -> None:
        logger.debug(f"[{app_id}] -> {stage.value}")
