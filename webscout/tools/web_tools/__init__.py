"""Web tools for search and web content retrieval."""

from .artifacts import ArtifactRegistry
from .crawl import BatchFetcher, WebContentFetcher, WebFetchConfig, extract_content
from .memory import MemoryMonitor, MemorySnapshot
from .rate_limiter import RateLimiter
from .reducer import ContentReducer, html_to_text
from .search import (
    DuckDuckGoSearchClient,
    SearchResult,
    WebSearchConfig,
    format_results_for_llm,
    web_search,
)

__all__ = [
    "web_search",
    "extract_content",
    "ArtifactRegistry",
    "BatchFetcher",
    "ContentReducer",
    "DuckDuckGoSearchClient",
    "MemoryMonitor",
    "MemorySnapshot",
    "RateLimiter",
    "SearchResult",
    "WebContentFetcher",
    "WebFetchConfig",
    "WebSearchConfig",
    "format_results_for_llm",
    "html_to_text",
]
