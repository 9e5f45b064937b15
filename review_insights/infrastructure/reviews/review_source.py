"""
Review Source Client - Play Store API Wrapper
=============================================

Fetches raw review records for an application identifier:

    GET {base_url}/reviews?appId=<id>
    -> {"reviews": [{"id", "score", "text", "userName", "date"}, ...]}

Returns the raw records untouched; normalization happens in
normalizer.py. Every failure is raised as a PipelineError so the
pipeline can retry it and fall back to sample data.
"""

import logging
from typing import Any, List

import requests

from ...domain.errors import ProviderError, RequestTimeout, SourceUnavailable
from ..config import ReviewSourceSettings

logger = logging.getLogger(__name__)

SERVICE_NAME = "Review source"


class ReviewSourceClient:
    """
    HTTP client for the third-party review API.

    USAGE:
        client = ReviewSourceClient(settings.review_source)
        records = client.fetch_reviews("com.spotify.music")
    """

    def __init__(self, settings: ReviewSourceSettings):
        self._base_url = settings.base_url.rstrip("/")
        self._timeout = settings.timeout_seconds

    @property
    def reviews_url(self) -> str:
        return f"{self._base_url}/reviews"

    def fetch_reviews(self, app_id: str) -> List[Any]:
        """
        Fetch raw review records.

        Raises:
            RequestTimeout: the source did not answer in time.
            ProviderError: non-2xx status.
            SourceUnavailable: connection failure or malformed body.
        """
        logger.info(f"Fetching reviews for {app_id} from {self.reviews_url}")

        try:
            response = requests.get(
                self.reviews_url,
                params={"appId": app_id},
                timeout=self._timeout,
            )
        except requests.Timeout:
            raise RequestTimeout(SERVICE_NAME, self._timeout)
        except requests.RequestException as e:
            raise SourceUnavailable(f"{SERVICE_NAME} unreachable: {e}")

        logger.info(f"Review source response status: {response.status_code}")

        if not response.ok:
            logger.error(f"Review source error response: {response.text[:500]}")
            raise ProviderError(SERVICE_NAME, response.status_code, response.text)

        try:
            data = response.json()
        except ValueError:
            raise SourceUnavailable(f"{SERVICE_NAME} returned a non-JSON body")

        records = data.get("reviews") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise SourceUnavailable(f"{SERVICE_NAME} body has no 'reviews' list")

        logger.info(f"Found {len(records)} reviews for {app_id}")
        return records
