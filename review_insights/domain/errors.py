"""
Pipeline Errors - Failure Taxonomy
==================================

Every failure that can happen while fetching reviews or generating
insights is raised as a PipelineError subclass. Infrastructure code
translates library exceptions (requests, json) into these types, so the
orchestrator only ever has to catch one family.

HANDLING:
- Review stage:  any PipelineError -> fallback sample batch
- Insight stage: any PipelineError -> insightError string, reviews kept
"""

from typing import Optional


class PipelineError(Exception):
    """Base exception for review/insight pipeline errors."""
    pass


class SourceUnavailable(PipelineError):
    """A remote service could not be reached or returned an unusable body."""

    def __init__(self, message: str, service: str = "review source"):
        super().__init__(message)
        self.service = service


class MissingCredential(PipelineError):
    """LLM API key is absent or still set to a placeholder."""
    pass


class RequestTimeout(PipelineError):
    """A network call exceeded its deadline."""

    def __init__(self, service: str, timeout: float):
        super().__init__(f"{service} request timed out after {timeout:g}s")
        self.service = service
        self.timeout = timeout


class ProviderError(PipelineError):
    """A remote service answered with a non-success status."""

    def __init__(self, service: str, status_code: int, body: str = "", message: Optional[str] = None):
        detail = message or body
        text = f"{service} error: {status_code}"
        if detail:
            text += f" - {detail}"
        super().__init__(text)
        self.service = service
        self.status_code = status_code
        self.body = body

    @property
    def is_transient(self) -> bool:
        """Rate limiting and server-side failures are worth retrying."""
        return self.status_code == 429 or self.status_code >= 500


class EmptyResponse(PipelineError):
    """The LLM response envelope carried no message content."""
    pass


class MalformedInsights(PipelineError):
    """The LLM content could not be parsed into insights."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw
