"""Fetching and extracting readable text from web pages."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from functools import lru_cache
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Union

import aiohttp
from loguru import logger

from agents import function_tool

from .artifacts import DEFAULT_PREFIX, ArtifactRegistry
from .memory import MemoryMonitor, MemorySnapshot
from .rate_limiter import RateLimiter
from .reducer import MAX_CONTENT_LENGTH, TRUNCATION_MARKER, ContentReducer

DEFAULT_TIMEOUT = 30
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_REQUESTS_PER_MINUTE = 20
DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
}

TIMEOUT_MESSAGE = "Error: The request timed out while trying to fetch the webpage."


@dataclass
class WebFetchConfig:
    """Configuration for the content fetcher and batch orchestration."""

    headers: dict[str, str] = None  # type: ignore[assignment]
    timeout: int = DEFAULT_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    requests_per_minute: int = DEFAULT_REQUESTS_PER_MINUTE
    max_in_memory_size: int = 5 * 1024 * 1024  # 5MB
    max_content_length: int = MAX_CONTENT_LENGTH
    truncation_marker: str = TRUNCATION_MARKER
    high_memory_ratio: float = 0.70
    low_memory_ratio: float = 0.30
    constrained_batch_size: int = 1
    default_batch_size: int = 3
    relaxed_batch_size: int = 5
    batch_pause: float = 0.5
    temp_dir: Optional[str] = None
    temp_prefix: str = DEFAULT_PREFIX

    def __post_init__(self) -> None:
        merged_headers = dict(DEFAULT_HEADERS)
        if self.headers:
            merged_headers.update(self.headers)
        self.headers = merged_headers


class WebContentFetcher:
    """Fetches a single URL and reduces its HTML to text.

    ``fetch_and_parse`` never raises: timeouts, transport failures and any
    other error come back as an ``Error: ...`` string.
    """

    def __init__(
        self,
        config: Optional[WebFetchConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
        memory_monitor: Optional[MemoryMonitor] = None,
        reducer: Optional[ContentReducer] = None,
        artifacts: Optional[ArtifactRegistry] = None,
    ) -> None:
        self.config = config or WebFetchConfig()
        self.rate_limiter = rate_limiter or RateLimiter(self.config.requests_per_minute)
        self.memory_monitor = memory_monitor or MemoryMonitor()
        self.reducer = reducer or ContentReducer(
            max_length=self.config.max_content_length,
            marker=self.config.truncation_marker,
        )
        self.artifacts = artifacts or ArtifactRegistry(
            directory=self.config.temp_dir,
            prefix=self.config.temp_prefix,
        )

    async def fetch_and_parse(self, url: str) -> str:
        """Fetch ``url`` and return its extracted text or an error message."""
        try:
            await self.rate_limiter.acquire()

            logger.info(f"Fetching content from: {url}")
            html = await self._fetch_html(url)
            text = await self._process_html(html)

            logger.info(f"Successfully fetched and parsed content ({len(text)} characters)")
            return text

        except asyncio.TimeoutError:
            logger.warning(f"Request timed out for URL: {url}")
            return TIMEOUT_MESSAGE
        except aiohttp.ClientError as exc:
            logger.warning(f"HTTP error occurred while fetching {url}: {exc}")
            return f"Error: Could not access the webpage ({exc})"
        except Exception as exc:
            logger.exception(f"Error fetching content from {url}: {exc}")
            return f"Error: An unexpected error occurred while fetching the webpage ({exc})"

    async def _fetch_html(self, url: str) -> str:
        """GET ``url`` and return the body; non-2xx responses raise."""
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(
                url,
                headers=self.config.headers,
                allow_redirects=True,
                max_redirects=self.config.max_redirects,
            ) as response:
                response.raise_for_status()
                return await response.text(errors="replace")

    def should_spill(self, html: str, snapshot: MemorySnapshot) -> bool:
        return (
            len(html) > self.config.max_in_memory_size
            or snapshot.usage_ratio > self.config.high_memory_ratio
        )

    async def _process_html(self, html: str) -> str:
        snapshot = self.memory_monitor.snapshot()

        if not self.should_spill(html, snapshot):
            return self.reducer.reduce(html)

        logger.debug(
            f"Spilling {len(html)} characters to disk "
            f"(memory usage {snapshot.usage_percent:.1f}%)"
        )
        async with self.artifacts.spill(html) as path:
            spilled = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return self.reducer.reduce(spilled)


def select_batch_size(snapshot: MemorySnapshot, config: Optional[WebFetchConfig] = None) -> int:
    """Pick a group size from one memory snapshot."""
    config = config or WebFetchConfig()
    if snapshot.usage_ratio > config.high_memory_ratio:
        return config.constrained_batch_size
    if snapshot.usage_ratio < config.low_memory_ratio:
        return config.relaxed_batch_size
    return config.default_batch_size


def plan_batches(urls: Sequence[str], batch_size: int) -> List[List[str]]:
    """Split ``urls`` into consecutive groups of at most ``batch_size``."""
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1.")
    return [list(urls[i:i + batch_size]) for i in range(0, len(urls), batch_size)]


class BatchFetcher:
    """Fetches many URLs in memory-sized groups.

    The group size is decided once from a single memory snapshot taken at the
    start of :meth:`fetch_many`. URLs inside a group are fetched concurrently
    and joined before the next group starts; a short pause separates groups.
    """

    def __init__(
        self,
        fetcher: Optional[WebContentFetcher] = None,
        memory_monitor: Optional[MemoryMonitor] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.fetcher = fetcher or WebContentFetcher()
        self.config = self.fetcher.config
        self.memory_monitor = memory_monitor or self.fetcher.memory_monitor
        self._sleep = sleep

    async def fetch_many(self, urls: Sequence[str]) -> Dict[str, str]:
        results: Dict[str, str] = {}
        batch_size = select_batch_size(self.memory_monitor.snapshot(), self.config)
        batches = plan_batches(urls, batch_size)

        logger.info(f"Processing {len(urls)} URLs in batches of {batch_size}")

        for index, batch in enumerate(batches, start=1):
            logger.info(f"Processing batch {index}/{len(batches)}")

            batch_results = await asyncio.gather(
                *(self._fetch_one(url) for url in batch)
            )
            for url, content in batch_results:
                results[url] = content

            if index < len(batches):
                await self._sleep(self.config.batch_pause)

        return results

    async def _fetch_one(self, url: str) -> tuple[str, str]:
        try:
            return url, await self.fetcher.fetch_and_parse(url)
        except Exception as exc:
            logger.exception(f"Error processing URL {url}: {exc}")
            return url, f"Error processing URL: {exc}"


@lru_cache(maxsize=1)
def get_default_batch_fetcher() -> BatchFetcher:
    """Shared fetcher for the agent tool so its rate limit spans calls.

    Leftover spill files are swept at interpreter exit. Signal handlers are left
    to the host application.
    """
    fetcher = WebContentFetcher()
    fetcher.artifacts.install(handle_signals=False)
    return BatchFetcher(fetcher)


@function_tool
async def extract_content(url: Union[str, List[str]]) -> str:
    """Fetch a web page and extract its readable text content.

    Scripts, styles, navigation, headers and footers are removed, whitespace is
    collapsed, and long pages are truncated to 8000 characters.

    Args:
        url: The URL of the webpage to fetch, or a list of URLs to fetch
            several pages at once.

    Returns:
        The extracted text for a single URL, or a JSON object mapping each URL
        to its extracted text (or an error message) for a list of URLs.
    """
    batch = get_default_batch_fetcher()
    if isinstance(url, str):
        return await batch.fetcher.fetch_and_parse(url)
    results = await batch.fetch_many(url)
    return json.dumps(results, indent=2, ensure_ascii=False)


__all__ = [
    "extract_content",
    "BatchFetcher",
    "WebContentFetcher",
    "WebFetchConfig",
    "plan_batches",
    "select_batch_size",
    "TIMEOUT_MESSAGE",
]
