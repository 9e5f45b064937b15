# Review Insights - App Review Aggregation & AI Summarization
# ============================================================
# Fetches user reviews for an application, forwards a bounded sample to
# an LLM provider and returns structured feedback next to the raw reviews.
#
# ARCHITECTURE LAYERS:
# - Web:            FastAPI JSON endpoints (thin, no business rules)
# - Application:    Pipeline orchestration (fetch -> normalize -> analyze)
# - Domain:         Pure logic: entities, app names, prompt building
# - Infrastructure: External services (review source, LLM provider, config)
#
# Infrastructure components can be swapped (e.g. another review source or
# LLM provider) without touching the domain or application layers.
