"""
Insight Client - LLM Chat Completions Call
==========================================

ARCHITECTURAL DECISION:
- Talks to any OpenAI-compatible chat completions endpoint (DeepSeek by
  default) with plain HTTP, one request per analysis
- Asks for a JSON object response; parsing is left to insight_parser.py
  so network failures and parse failures stay distinguishable
- No local state: the only side effect is the outbound request

FAILURES (all PipelineError subclasses):
- MissingCredential: no usable API key, no request is made
- RequestTimeout:    no answer within the configured timeout
- ProviderError:     non-2xx status, or an error object in the body
- EmptyResponse:     no message content in the first choice
"""

import logging
from typing import Any

import requests

from ...domain.errors import (
    EmptyResponse,
    MissingCredential,
    ProviderError,
    RequestTimeout,
    SourceUnavailable,
)
from ...domain.prompts import SYSTEM_PROMPT
from ..config import LLMSettings

logger = logging.getLogger(__name__)

SERVICE_NAME = "LLM API"


class InsightClient:
    """
    Sends an analysis prompt to the LLM provider and returns the raw
    content string.

    USAGE:
        client = InsightClient(settings.llm)
        content = client.complete(prompt, app_name="Spotify Music")
    """

    def __init__(self, settings: LLMSettings, system_prompt: str = SYSTEM_PROMPT):
        self._settings = settings
        self._system_prompt = system_prompt

    @property
    def model(self) -> str:
        return self._settings.model

    def ensure_credential(self) -> None:
        if not self._settings.has_credential:
            raise MissingCredential(
                "Valid DeepSeek API key is required. "
                "Please set the DEEPSEEK_API_KEY environment variable in .env."
            )

    def complete(self, prompt: str, app_name: str = "") -> str:
        """
        Run one chat completion.

        Args:
            prompt: Rendered analysis prompt (user message).
            app_name: Display name, used for logging only.

        Returns:
            The first choice's message content.
        """
        self.ensure_credential()

        headers = {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "model": self._settings.model,
            "messages": [
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": prompt},
            ],
            "response_format": {"type": "json_object"},
        }

        logger.info(f"Requesting insights for {app_name or 'app'} using model: {self._settings.model}")

        try:
            response = requests.post(
                self._settings.api_url,
                headers=headers,
                json=payload,
                timeout=self._settings.timeout_seconds,
            )
        except requests.Timeout:
            raise RequestTimeout(SERVICE_NAME, self._settings.timeout_seconds)
        except requests.RequestException as e:
            raise SourceUnavailable(f"{SERVICE_NAME} unreachable: {e}", service=SERVICE_NAME)

        if not response.ok:
            logger.error(f"LLM API error response: {response.text[:500]}")
            raise ProviderError(SERVICE_NAME, response.status_code, response.text)

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Failed to parse LLM API response as JSON: {response.text[:500]}")
            raise ProviderError(
                SERVICE_NAME, response.status_code, response.text,
                message="Could not parse API response",
            )

        if not isinstance(data, dict):
            raise EmptyResponse("LLM API response is not a JSON object")

        logger.info(f"LLM model used: {data.get('model', self._settings.model)}")

        if data.get("error"):
            error = data["error"]
            detail = error.get("message", "Unknown error") if isinstance(error, dict) else str(error)
            raise ProviderError(
                SERVICE_NAME, response.status_code, response.text,
                message=f"API returned error: {detail}",
            )

        content = self._extract_response_content(data)
        if not content:
            logger.error("No content found in LLM API response")
            raise EmptyResponse("No content returned from API")

        logger.debug(f"Raw LLM content: {content}")
        return content

    def _extract_response_content(self, data: Any) -> str:
        """Extract text content from API response."""
        try:
            choices = data.get("choices", [])
            if choices:
                message = choices[0].get("message", {})
                content = message.get("content")
                return content if isinstance(content, str) else ""
        except (AttributeError, KeyError, IndexError, TypeError):
            pass
        return ""
