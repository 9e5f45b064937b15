"""
Fallback sample reviews, shown when the review source cannot be reached.

The batch is fixed (five placeholders, ratings 2 to 5) apart from the
date, which is the day of the request.
"""

from datetime import datetime
from typing import List

from ...domain.models import Review, ReviewBatch

SAMPLE_REVIEWS = (
    ("1", 5, "This is a sample review since the API did not return real reviews. Great app with lots of features!"),
    ("2", 4, "Sample review: The app works well but has some minor bugs that need fixing."),
    ("3", 3, "Sample review: Average app, needs more features to compete with others."),
    ("4", 5, "Sample review: I use this daily and it helps me a lot with productivity."),
    ("5", 2, "Sample review: The app crashes frequently on my device."),
)


def sample_reviews(today: datetime) -> List[Review]:
    day = today.date().isoformat()
    return [
        Review(id=review_id, rating=rating, text=text, author=f"Sample User {review_id}", date=day)
        for review_id, rating, text in SAMPLE_REVIEWS
    ]


def sample_batch(app_name: str, today: datetime) -> ReviewBatch:
    return ReviewBatch(app_name=app_name, reviews=sample_reviews(today))
