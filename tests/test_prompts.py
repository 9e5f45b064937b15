"""Unit tests for review_insights.domain.prompts."""

import re

import pytest

from review_insights.domain.models import Insights, Review
from review_insights.domain.prompts import (
    RatingSummary,
    build_prompt,
    format_review,
    sample_reviews,
    summarize_ratings,
)


def _review(i: int, rating: int, text: str = "text") -> Review:
    return Review(id=str(i), rating=rating, text=f"{text} {i}", author=f"user{i}", date="2025-01-01")


def _reviews(ratings):
    return [_review(i, r) for i, r in enumerate(ratings, start=1)]


class TestSummarizeRatings:
    def test_spotify_scenario(self) -> None:
        summary = summarize_ratings(_reviews([5, 5, 1]))
        assert round(summary.average, 2) == 3.67
        assert summary.histogram == (1, 0, 0, 0, 2)
        assert {s: summary.count(s) for s in range(5, 0, -1)} == {5: 2, 4: 0, 3: 0, 2: 0, 1: 1}

    def test_empty_sample_has_zero_mean(self) -> None:
        summary = summarize_ratings([])
        assert summary == RatingSummary(total=0, average=0.0, histogram=(0, 0, 0, 0, 0))

    @pytest.mark.parametrize(
        "ratings",
        [[0, 0, 0], [1, 2, 3, 4, 5], [0, 5, 7, -2, 3], [4] * 20, []],
    )
    def test_histogram_counts_only_one_to_five(self, ratings) -> None:
        summary = summarize_ratings(_reviews(ratings))
        assert sum(summary.histogram) == sum(1 for r in ratings if 1 <= r <= 5)

    def test_out_of_range_ratings_still_count_towards_mean(self) -> None:
        summary = summarize_ratings(_reviews([0, 4]))
        assert summary.average == 2.0
        assert summary.histogram == (0, 0, 0, 1, 0)

    def test_to_dict(self) -> None:
        data = summarize_ratings(_reviews([5, 5, 1])).to_dict()
        assert data["average"] == 3.67
        assert data["histogram"] == {"5": 2, "4": 0, "3": 0, "2": 0, "1": 1}


class TestSampleReviews:
    @pytest.mark.parametrize("count, cap", [(0, 5), (3, 5), (5, 5), (12, 5), (600, 500)])
    def test_length_is_min_of_input_and_cap(self, count: int, cap: int) -> None:
        reviews = _reviews([3] * count)
        assert len(sample_reviews(reviews, cap)) == min(count, cap)

    def test_keeps_the_first_reviews_in_order(self) -> None:
        reviews = _reviews([1, 2, 3, 4, 5])
        assert [r.id for r in sample_reviews(reviews, 3)] == ["1", "2", "3"]


class TestBuildPrompt:
    def test_is_deterministic(self) -> None:
        reviews = _reviews([5, 4, 1])
        assert build_prompt("Spotify Music", reviews) == build_prompt("Spotify Music", list(reviews))

    def test_header_and_distribution(self) -> None:
        prompt = build_prompt("Spotify Music", _reviews([5, 5, 1]))
        assert 'for the app "Spotify Music". The average rating is 3.7/5.' in prompt
        assert "5 stars: 2 reviews\n4 stars: 0 reviews\n3 stars: 0 reviews\n2 stars: 0 reviews\n1 star: 1 reviews" in prompt

    def test_reviews_are_rendered_and_separated_by_blank_lines(self) -> None:
        reviews = _reviews([5, 2])
        prompt = build_prompt("App", reviews)
        expected = '[Rating: 5/5] "text 1" - user1, 2025-01-01\n\n[Rating: 2/5] "text 2" - user2, 2025-01-01'
        assert expected in prompt

    def test_format_review(self) -> None:
        review = Review(id="1", rating=4, text="Solid", author="Ann", date="2025-02-03")
        assert format_review(review) == '[Rating: 4/5] "Solid" - Ann, 2025-02-03'

    def test_truncates_to_sample_size(self) -> None:
        prompt = build_prompt("App", _reviews([4] * 10), sample_size=3)
        assert prompt.count("[Rating:") == 3
        assert '"text 4"' not in prompt
        assert "4 stars: 3 reviews" in prompt

    def test_section_order(self) -> None:
        prompt = build_prompt("App", _reviews([3]))
        markers = [
            "The average rating is",
            "Rating distribution:",
            "REVIEWS:",
            "1. Common Praises",
            "2. Common Complaints",
            "3. Feature Requests",
            "4. User Experience",
            "5. Sentiment Analysis",
            "6. Actionable Recommendations",
            '"commonPraises"',
        ]
        positions = [prompt.index(marker) for marker in markers]
        assert positions == sorted(positions)

    def test_json_shape_matches_insights_fields(self) -> None:
        prompt = build_prompt("App", _reviews([3]))
        keys = re.findall(r'"(\w+)":', prompt)
        aliases = {field.alias for field in Insights.model_fields.values()}
        assert aliases <= set(keys)
        assert {"positivePercentage", "negativePercentage", "keyEmotions"} <= set(keys)

    def test_text_with_braces_is_rendered_verbatim(self) -> None:
        review = Review(id="1", rating=3, text='uses {json} "quotes"', author="A", date="d")
        prompt = build_prompt("App", [review])
        assert '"uses {json} "quotes""' in prompt
