"""
Prompt Builder - Deterministic Analysis Prompt
==============================================

Renders a bounded review sample plus rating statistics into the single
user prompt sent to the LLM. The same app name and reviews always give a
byte-identical prompt.

The JSON shape at the end of the prompt is the only contract the insight
parser relies on, so field names and order must stay in sync with
domain.models.Insights.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .models import Review

DEFAULT_SAMPLE_SIZE = 500

SYSTEM_PROMPT = (
    "You are an expert app review analyst that provides structured insights "
    "from app reviews."
)

PROMPT_TEMPLATE = """
You are an expert app review analyst for the app "{app_name}". The average rating is {average:.1f}/5.

Rating distribution:
5 stars: {count_5} reviews
4 stars: {count_4} reviews
3 stars: {count_3} reviews
2 stars: {count_2} reviews
1 star: {count_1} reviews

REVIEWS:
{reviews}

Based on these reviews, provide the following insights:

1. Common Praises: What features or aspects do users love about the app? (Provide 3-5 specific things that multiple users mention positively)

2. Common Complaints: What issues or areas for improvement do users mention? (Provide 3-5 specific problems that multiple users report)

3. Feature Requests: What new features or improvements do users want to see? (Provide 3-5 specific feature requests mentioned by users)

4. User Experience: Summarize the overall user experience in a paragraph. Highlight strengths and weaknesses.

5. Sentiment Analysis: What percentage of reviews are positive vs negative? What emotions do users express?

6. Actionable Recommendations: What 3 specific actions should the developers take to improve the app based on this feedback?

Format your response strictly as JSON with the following structure:
{{
  "commonPraises": ["praise 1", "praise 2", ...],
  "commonComplaints": ["complaint 1", "complaint 2", ...],
  "featureRequests": ["feature 1", "feature 2", ...],
  "userExperience": "A paragraph summarizing overall user experience",
  "sentimentAnalysis": {{
    "positivePercentage": number,
    "negativePercentage": number,
    "keyEmotions": ["emotion 1", "emotion 2", ...]
  }},
  "actionableRecommendations": ["recommendation 1", "recommendation 2", "recommendation 3"]
}}
"""


@dataclass(frozen=True)
class RatingSummary:
    """Histogram and mean rating of a review sample."""
    total: int
    average: float
    histogram: Tuple[int, int, int, int, int]   # counts for 1..5 stars

    def count(self, stars: int) -> int:
        return self.histogram[stars - 1]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "average": round(self.average, 2),
            "histogram": {str(stars): self.count(stars) for stars in range(5, 0, -1)},
        }


def sample_reviews(reviews: Sequence[Review], sample_size: int = DEFAULT_SAMPLE_SIZE) -> List[Review]:
    """First `sample_size` reviews, original order kept."""
    return list(reviews[:max(sample_size, 0)])


def summarize_ratings(reviews: Sequence[Review]) -> RatingSummary:
    """
    Count ratings into 1..5 buckets and average the sample.

    Ratings outside 1..5 (including 0 = unknown) are left out of the
    histogram but still count towards the mean, which is 0 for an empty
    sample.
    """
    counts = [0, 0, 0, 0, 0]
    for review in reviews:
        if 1 <= review.rating <= 5:
            counts[review.rating - 1] += 1

    total = len(reviews)
    average = sum(review.rating for review in reviews) / total if total else 0.0
    return RatingSummary(total=total, average=average, histogram=tuple(counts))


def format_review(review: Review) -> str:
    return f'[Rating: {review.rating}/5] "{review.text}" - {review.author}, {review.date}'


def build_prompt(app_name: str, reviews: Sequence[Review], sample_size: int = DEFAULT_SAMPLE_SIZE) -> str:
    """Render the analysis prompt for the first `sample_size` reviews."""
    sampled = sample_reviews(reviews, sample_size)
    summary = summarize_ratings(sampled)

    return PROMPT_TEMPLATE.format(
        app_name=app_name,
        average=summary.average,
        count_5=summary.count(5),
        count_4=summary.count(4),
        count_3=summary.count(3),
        count_2=summary.count(2),
        count_1=summary.count(1),
        reviews="\n\n".join(format_review(review) for review in sampled),
    )
