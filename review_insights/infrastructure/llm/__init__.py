from .insight_client import InsightClient
from .insight_parser import clean_content, parse_insights

__all__ = ["InsightClient", "clean_content", "parse_insights"]
