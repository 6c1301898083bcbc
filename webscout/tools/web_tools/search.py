"""Web search using DuckDuckGo's HTML endpoint.

Results are scraped from the lightweight HTML results page, so no API key is
needed. Each client owns its own rate limiter.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional
from urllib.parse import parse_qs, urlparse

import aiohttp
from bs4 import BeautifulSoup
from loguru import logger

from agents import function_tool

from .rate_limiter import RateLimiter

DEFAULT_BASE_URL = "https://html.duckduckgo.com/html"
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/91.0.4472.124 Safari/537.36"
    ),
}
DEFAULT_TIMEOUT = 30
DEFAULT_REQUESTS_PER_MINUTE = 30
DEFAULT_MAX_RESULTS = 10

NO_RESULTS_MESSAGE = (
    "No results were found for your search query. "
    "Please try rephrasing your search or try again in a few minutes."
)


@dataclass
class SearchResult:
    """Single ranked search hit."""

    title: str
    link: str
    snippet: str
    position: int


@dataclass
class WebSearchConfig:
    """Configuration for the web search client."""

    base_url: str = DEFAULT_BASE_URL
    headers: dict[str, str] = None  # type: ignore[assignment]
    region: str = ""
    timeout: int = DEFAULT_TIMEOUT
    requests_per_minute: int = DEFAULT_REQUESTS_PER_MINUTE

    def __post_init__(self) -> None:
        merged_headers = dict(DEFAULT_HEADERS)
        if self.headers:
            merged_headers.update(self.headers)
        self.headers = merged_headers


class DuckDuckGoSearchClient:
    """DuckDuckGo search client that scrapes HTML results."""

    def __init__(
        self,
        config: Optional[WebSearchConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self.config = config or WebSearchConfig()
        self.rate_limiter = rate_limiter or RateLimiter(self.config.requests_per_minute)

    async def search(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> List[SearchResult]:
        """Run ``query`` and return at most ``max_results`` ranked results.

        Timeouts, HTTP failures and unparseable pages all yield an empty list.
        """
        if max_results < 1:
            return []

        try:
            await self.rate_limiter.acquire()

            logger.info(f"Searching DuckDuckGo for: {query}")
            html = await self._fetch_results(query)
            results = self.parse_results(html, max_results)

            logger.info(f"Successfully found {len(results)} results")
            return results

        except asyncio.TimeoutError:
            logger.warning("Search request timed out")
        except aiohttp.ClientError as exc:
            logger.warning(f"HTTP error occurred: {exc}")
        except Exception as exc:
            logger.exception(f"Unexpected error during search: {exc}")
        return []

    async def _fetch_results(self, query: str) -> str:
        data = {
            "q": query,
            "b": "",
            "kl": self.config.region,
        }

        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(
                self.config.base_url,
                data=data,
                headers=self.config.headers,
            ) as response:
                response.raise_for_status()
                return await response.text(errors="replace")

    def parse_results(self, html: str, max_results: int = DEFAULT_MAX_RESULTS) -> List[SearchResult]:
        soup = BeautifulSoup(html, "html.parser")
        results: List[SearchResult] = []

        for item in soup.select(".result"):
            title_elem = item.select_one(".result__title")
            if title_elem is None:
                continue

            link_elem = title_elem.find("a")
            if link_elem is None:
                continue

            title = link_elem.get_text().strip()
            link = link_elem.get("href") or ""

            # Ads are routed through y.js
            if "y.js" in link:
                continue

            snippet_elem = item.select_one(".result__snippet")
            snippet = snippet_elem.get_text().strip() if snippet_elem else ""

            results.append(
                SearchResult(
                    title=title,
                    link=self._normalize_url(link),
                    snippet=snippet,
                    position=len(results) + 1,
                )
            )

            if len(results) >= max_results:
                break

        return results

    @staticmethod
    def _normalize_url(url: str) -> str:
        """Decode DuckDuckGo redirect URLs to their destination."""
        if not url.startswith("/"):
            return url

        uddg = parse_qs(urlparse(url).query).get("uddg")
        if uddg:
            return uddg[0]
        return url


def format_results_for_llm(results: List[SearchResult]) -> str:
    """Render results as a numbered plain-text list."""
    if not results:
        return NO_RESULTS_MESSAGE

    output = [f"Found {len(results)} search results:\n"]
    for result in results:
        output.append(f"{result.position}. {result.title}")
        output.append(f"   URL: {result.link}")
        output.append(f"   Summary: {result.snippet}")
        output.append("")

    return "\n".join(output)


@lru_cache(maxsize=1)
def get_default_search_client() -> DuckDuckGoSearchClient:
    """Shared client for the agent tool so its rate limit spans calls."""
    return DuckDuckGoSearchClient()


@function_tool
async def web_search(query: str, max_results: int = DEFAULT_MAX_RESULTS) -> str:
    """Search the web with DuckDuckGo and return a numbered list of findings.

    Args:
        query: Keywords, question, or topic to search for.
        max_results: Maximum number of search entries to return (default: 10).

    Returns:
        A numbered list with the title, URL and summary of each result, or a
        message saying nothing was found.
    """
    results = await get_default_search_client().search(query, max_results=max_results)
    return format_results_for_llm(results)


__all__ = [
    "web_search",
    "format_results_for_llm",
    "DuckDuckGoSearchClient",
    "SearchResult",
    "WebSearchConfig",
    "NO_RESULTS_MESSAGE",
]
