"""
Insight Parser
==============

Turns the raw LLM content string into a validated Insights object.

Cleanup before parsing (models often wrap JSON in Markdown):
    1. strip a leading/trailing ``` code fence
    2. strip **bold** markers
    3. trim whitespace

Missing Insights fields get safe defaults (see domain.models.Insights).
Anything that is not a JSON object after cleanup raises
MalformedInsights carrying the original string.
"""

import json
import logging
import re

from pydantic import ValidationError

from ...domain.errors import MalformedInsights
from ...domain.models import Insights

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```[a-zA-Z]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?```$")
_BOLD = re.compile(r"\*\*(.*?)\*\*", re.DOTALL)

PARSE_ERROR_MESSAGE = "Failed to parse the generated insights JSON from API response"


def clean_content(content: str) -> str:
    """Remove Markdown fences and bold markers around the JSON payload."""
    text = content.strip()
    text = _OPENING_FENCE.sub("", text)
    text = _CLOSING_FENCE.sub("", text)
    text = _BOLD.sub(r"\1", text)
    return text.strip()


def parse_insights(content: str) -> Insights:
    """
    Parse LLM content into Insights.

    Raises:
        MalformedInsights: content is not a JSON object, or a field has an
            unusable type (e.g. a number where a list is expected).
    """
    if not isinstance(content, str):
        raise MalformedInsights(PARSE_ERROR_MESSAGE, raw=repr(content))

    cleaned = clean_content(content)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse LLM content as JSON: {e}")
        logger.debug(f"Original content string was: {content}")
        raise MalformedInsights(PARSE_ERROR_MESSAGE, raw=content)

    if not isinstance(data, dict):
        logger.error(f"LLM content is JSON but not an object: {type(data).__name__}")
        raise MalformedInsights(PARSE_ERROR_MESSAGE, raw=content)

    try:
        return Insights.model_validate(data)
    except ValidationError as e:
        logger.error(f"LLM content does not match the insights shape: {e}")
        raise MalformedInsights(PARSE_ERROR_MESSAGE, raw=content)
