from .settings import (
    Settings,
    ReviewSourceSettings,
    LLMSettings,
    RetrySettings,
    PipelineSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "ReviewSourceSettings",
    "LLMSettings",
    "RetrySettings",
    "PipelineSettings",
    "get_settings",
]
