# Application Layer
# =================
# Use-case orchestration only: sequences the review fetch and the insight
# stage and decides how failures degrade. No HTTP or parsing details here.

from .pipeline import InsightPipeline, PipelineStage, is_transient

__all__ = ["InsightPipeline", "PipelineStage", "is_transient"]
