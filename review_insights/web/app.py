"""
FastAPI Web Application - Review Insights API
=============================================

JSON endpoints over the insight pipeline:
    GET  /api/reviews?appId=...   reviews + AI insights for one app
    POST /api/insights            insights for reviews supplied by the caller
    GET  /api/debug               masked configuration and warnings
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..application import InsightPipeline
from ..domain.errors import MissingCredential, PipelineError
from ..infrastructure.config import get_settings
from ..infrastructure.reviews import normalize_review

logging.basicConfig(
    level=get_settings().log_level,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ── Globals ────────────────────────────────────────────────────────
pipeline: Optional[InsightPipeline] = None


def _get_pipeline() -> InsightPipeline:
    global pipeline
    if pipeline is None:
        pipeline = InsightPipeline(get_settings())
    return pipeline


# ── Lifespan ───────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    for issue in settings.validate():
        logger.warning(issue)
    _get_pipeline()
    logger.info("Insight pipeline ready")
    yield


app = FastAPI(
    title="Review Insights",
    description="App review aggregation and AI summarization",
    lifespan=lifespan,
)


# ── Request models ─────────────────────────────────────────────────

class ReviewIn(BaseModel):
    id: Optional[str] = None
    rating: Optional[float] = None
    text: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None

    def to_source_record(self) -> dict:
        """Same shape as a review-source record, so the normalizer fills gaps."""
        return {
            "id": self.id,
            "score": self.rating,
            "text": self.text,
            "userName": self.author,
            "date": self.date,
        }


class InsightsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    app_name: str = Field("", alias="appName")
    reviews: List[ReviewIn] = Field(default_factory=list)
    sample_size: Optional[int] = Field(None, alias="sampleSize", ge=1)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
    return _error("Valid app name and reviews array are required", 400)


# ── API Endpoints ──────────────────────────────────────────────────

@app.get("/api/reviews")
def api_reviews(appId: Optional[str] = None):
    if not appId or not appId.strip():
        return _error("App ID is required", 400)

    app_id = appId.strip()
    logger.info(f"Fetching reviews for app ID: {app_id}")
    try:
        result = _get_pipeline().run(app_id)
    except Exception as e:
        logger.exception(f"Error in reviews API: {e}")
        return _error("Failed to fetch reviews", 500)

    return result.to_dict()


@app.post("/api/insights")
def api_insights(body: InsightsRequest):
    if not body.app_name.strip() or not body.reviews:
        return _error("Valid app name and reviews array are required", 400)

    received_at = datetime.now(timezone.utc)
    reviews = [
        normalize_review(r.to_source_record(), i, received_at)
        for i, r in enumerate(body.reviews)
    ]

    try:
        insights = _get_pipeline().generate_insights(
            body.app_name, reviews, sample_size=body.sample_size
        )
    except MissingCredential as e:
        return _error(str(e), 400)
    except PipelineError as e:
        logger.error(f"Error generating insights: {e}")
        return _error(f"Failed to generate insights: {e}", 500)
    except Exception as e:
        logger.exception(f"Error in insights API: {e}")
        return _error("Failed to generate insights", 500)

    return {"insights": insights.to_dict()}


@app.get("/api/debug")
def api_debug():
    settings = _get_pipeline().settings
    return {
        "config": {
            "hasApiKey": settings.llm.has_credential,
            "apiKeyPreview": settings.llm.masked_key(),
            "llmUrl": settings.llm.api_url,
            "model": settings.llm.model,
            "reviewSourceUrl": settings.review_source.base_url,
            "sampleSize": settings.pipeline.sample_size,
        },
        "warnings": settings.validate(),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
