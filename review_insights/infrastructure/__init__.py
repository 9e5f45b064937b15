# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - reviews/: Play Store API wrapper client, normalizer, sample fallback
# - llm/:     LLM chat completions client and response parser
# - config/:  Environment and settings management
# - retry:    Exponential backoff around network calls
#
# This layer can be replaced entirely without affecting domain/application layers.
