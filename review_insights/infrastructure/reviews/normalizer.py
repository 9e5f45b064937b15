"""
Review Normalizer
=================

Maps raw review-source records into canonical Review objects.

Every field has its own fallback, so normalization never fails:
    id       -> position in the batch (1-based) when missing
    score    -> rating 0 ("unknown") when missing, unparsable or out of 1..5
    text     -> ""
    userName -> "Anonymous"
    date     -> fetch time when missing or not ISO-8601
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from ...domain.models import ANONYMOUS_AUTHOR, Review

logger = logging.getLogger(__name__)


class SourceReview(BaseModel):
    """Raw record as sent by the review source. Every field is optional."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[Any] = None
    score: Optional[Any] = None
    text: Optional[Any] = None
    userName: Optional[Any] = None
    date: Optional[Any] = None


def _normalize_id(value: Any, index: int) -> str:
    if value is None or value == "":
        return str(index + 1)
    return value if isinstance(value, str) else str(value)


def _normalize_rating(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    rating = int(round(number))
    return rating if 1 <= rating <= 5 else 0


def _normalize_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _normalize_author(value: Any) -> str:
    author = _normalize_text(value).strip()
    return author or ANONYMOUS_AUTHOR


def _normalize_date(value: Any, fetched_at: datetime) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            datetime.fromisoformat(text.replace("Z", "+00:00"))
            return text
        except ValueError:
            logger.debug(f"Unparsable review date {text!r}, using fetch time")
    return fetched_at.isoformat()


def normalize_review(record: Any, index: int, fetched_at: datetime) -> Review:
    """Normalize one raw record; non-dict records become an all-default review."""
    raw = SourceReview.model_validate(record) if isinstance(record, dict) else SourceReview()
    return Review(
        id=_normalize_id(raw.id, index),
        rating=_normalize_rating(raw.score),
        text=_normalize_text(raw.text),
        author=_normalize_author(raw.userName),
        date=_normalize_date(raw.date, fetched_at),
    )


def normalize_reviews(records: Iterable[Any], fetched_at: Optional[datetime] = None) -> List[Review]:
    """Normalize a whole batch, preserving source order."""
    fetched_at = fetched_at or datetime.now(timezone.utc)
    return [normalize_review(record, index, fetched_at) for index, record in enumerate(records)]
