from .review_source import ReviewSourceClient
from .normalizer import SourceReview, normalize_review, normalize_reviews
from .samples import SAMPLE_REVIEWS, sample_batch

__all__ = [
    "ReviewSourceClient",
    "SourceReview",
    "normalize_review",
    "normalize_reviews",
    "SAMPLE_REVIEWS",
    "sample_batch",
]
