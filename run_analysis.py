"""
Analysis Runner - Review Insights from the Command Line
=======================================================

Runs the insight pipeline once for an application identifier and prints
a short summary, or the full JSON result with --json.

    python run_analysis.py com.spotify.music
    python run_analysis.py com.google.maps --sample-size 100 --json
"""

import argparse
import dataclasses
import json
import logging
import sys

from review_insights.application import InsightPipeline
from review_insights.domain.prompts import summarize_ratings
from review_insights.infrastructure.config import get_settings

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize app reviews with an LLM.")
    parser.add_argument("app_id", help="Application identifier, e.g. com.spotify.music")
    parser.add_argument("--sample-size", type=int, default=None,
                        help="Number of reviews sent to the LLM")
    parser.add_argument("--no-insights", action="store_true",
                        help="Only fetch reviews, skip the LLM call")
    parser.add_argument("--json", action="store_true",
                        help="Print the full JSON result")
    return parser.parse_args(argv)


def run_analysis(argv=None) -> int:
    """Run one analysis. Returns the process exit code."""
    args = parse_args(argv)

    settings = get_settings()
    if args.sample_size is not None:
        settings = dataclasses.replace(
            settings,
            pipeline=dataclasses.replace(settings.pipeline, sample_size=args.sample_size),
        )

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    for issue in settings.validate():
        logger.warning(issue)

    pipeline = InsightPipeline(settings)
    try:
        result = pipeline.run(args.app_id, with_insights=not args.no_insights)
    except KeyboardInterrupt:
        print("\nCancelled")
        return 130
    except Exception as e:
        logger.exception(f"Analysis failed for {args.app_id}: {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return 0

    batch = result.review_batch
    summary = summarize_ratings(batch.reviews)

    print("\n" + "=" * 60)
    print(f"   {batch.app_name}")
    print("=" * 60)
    if result.used_sample_data:
        print("   (review source unavailable - showing sample reviews)")
    print(f"   Reviews: {summary.total} | Average: {summary.average:.2f}/5")
    for stars in range(5, 0, -1):
        print(f"   {stars} star{'s' if stars > 1 else ' '}: {summary.count(stars)}")

    if result.insights is not None:
        insights = result.insights
        sentiment = insights.sentiment_analysis
        print(f"\n   Sentiment: {sentiment.positive_percentage:g}% positive, "
              f"{sentiment.negative_percentage:g}% negative")
        for title, items in (
            ("Praises", insights.common_praises),
            ("Complaints", insights.common_complaints),
            ("Feature requests", insights.feature_requests),
            ("Recommendations", insights.actionable_recommendations),
        ):
            print(f"\n   {title}:")
            for item in items:
                print(f"     - {item}")
        print(f"\n   {insights.user_experience}")
    elif result.insight_error:
        print(f"\n   {result.insight_error}")

    print("=" * 60 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(run_analysis())
