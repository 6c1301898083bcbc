"""Tool surface shared by the MCP server and other dispatchers.

``WebToolkit`` owns one search client and one batch fetcher, so every call made
through the same toolkit shares their rate limiters. ``call`` validates the raw
arguments, dispatches by tool name, and always returns a ``ToolResponse``.
"""

from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, Field

from .web_tools.crawl import BatchFetcher, WebContentFetcher, WebFetchConfig
from .web_tools.search import (
    DEFAULT_MAX_RESULTS,
    DuckDuckGoSearchClient,
    WebSearchConfig,
    format_results_for_llm,
)

if TYPE_CHECKING:
    from webscout.utils.config import WebScoutConfig

SEARCH_TOOL = "DuckDuckGoWebSearch"
EXTRACT_TOOL = "UrlContentExtractor"

SEARCH_DESCRIPTION = (
    "Initiates a web search query using the DuckDuckGo search engine and returns a "
    "well-structured list of findings. Input the keywords, question, or topic you want "
    "to search for using DuckDuckGo as your query. Input the maximum number of search "
    "entries you'd like to receive using maxResults - defaults to 10 if not provided."
)
EXTRACT_DESCRIPTION = (
    "Fetches and extracts content from a given webpage URL. Input the URL of the webpage "
    "you want to extract content from as a string using the url parameter. You can also "
    "input an array of URLs to fetch content from multiple pages at once."
)

SEARCH_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "query": {"type": "string", "description": "Search query string"},
        "maxResults": {
            "type": "number",
            "description": "Maximum number of results to return (default: 10)",
        },
    },
    "required": ["query"],
}
EXTRACT_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "url": {
            "oneOf": [
                {"type": "string", "description": "The webpage URL to fetch content from"},
                {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "List of webpage URLs to get content from",
                },
            ]
        }
    },
    "required": ["url"],
}


class InvalidParamsError(ValueError):
    """Raised when tool arguments do not match the expected shape."""


class ToolSpec(BaseModel):
    name: str
    description: str
    input_schema: Dict[str, Any]


class ToolResponse(BaseModel):
    """Result handed back to the caller; errors are flagged, never raised."""

    text: str = Field(description="Text payload returned to the caller")
    is_error: bool = Field(default=False, description="Whether the payload describes a failure")
    error_code: Optional[str] = Field(default=None, description="invalid_params, unknown_tool or internal_error")


TOOL_SPECS = [
    ToolSpec(name=SEARCH_TOOL, description=SEARCH_DESCRIPTION, input_schema=SEARCH_INPUT_SCHEMA),
    ToolSpec(name=EXTRACT_TOOL, description=EXTRACT_DESCRIPTION, input_schema=EXTRACT_INPUT_SCHEMA),
]


def validate_search_args(arguments: Mapping[str, Any]) -> tuple[str, int]:
    query = arguments.get("query")
    if not isinstance(query, str):
        raise InvalidParamsError(
            "Invalid search arguments. Expected { query: string, maxResults?: number }"
        )

    max_results = arguments.get("maxResults")
    if (
        isinstance(max_results, bool)
        or not isinstance(max_results, (int, float))
        or not math.isfinite(max_results)
    ):
        max_results = DEFAULT_MAX_RESULTS
    return query, int(max_results)


def validate_extract_args(arguments: Mapping[str, Any]) -> str | List[str]:
    url = arguments.get("url")
    if isinstance(url, str):
        return url
    if isinstance(url, list) and all(isinstance(item, str) for item in url):
        return list(url)
    raise InvalidParamsError("Invalid URL format. Expected string or array of strings.")


class WebToolkit:
    """Search and content extraction tools behind a single dispatcher."""

    def __init__(
        self,
        search_client: Optional[DuckDuckGoSearchClient] = None,
        batch_fetcher: Optional[BatchFetcher] = None,
    ) -> None:
        self.search_client = search_client or DuckDuckGoSearchClient()
        self.batch_fetcher = batch_fetcher or BatchFetcher()

    @classmethod
    def from_config(cls, config: "WebScoutConfig") -> "WebToolkit":
        from webscout.utils.config import ConfigError

        search, fetch = config.search_config(), config.fetch_config()
        try:
            return cls.from_settings(search, fetch)
        except ValueError as exc:
            raise ConfigError(f"Invalid settings: {exc}") from exc

    @classmethod
    def from_settings(
        cls,
        search: Optional[WebSearchConfig] = None,
        fetch: Optional[WebFetchConfig] = None,
    ) -> "WebToolkit":
        return cls(
            search_client=DuckDuckGoSearchClient(search),
            batch_fetcher=BatchFetcher(WebContentFetcher(fetch)),
        )

    @property
    def fetcher(self) -> WebContentFetcher:
        return self.batch_fetcher.fetcher

    @staticmethod
    def list_tools() -> List[ToolSpec]:
        return list(TOOL_SPECS)

    async def search(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> str:
        results = await self.search_client.search(query, max_results=max_results)
        return format_results_for_llm(results)

    async def extract_content(self, url: str | List[str]) -> str:
        if isinstance(url, str):
            return await self.fetcher.fetch_and_parse(url)
        results = await self.batch_fetcher.fetch_many(url)
        return json.dumps(results, indent=2, ensure_ascii=False)

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]]) -> ToolResponse:
        """Validate ``arguments`` and run the tool called ``name``."""
        try:
            if arguments is None:
                return ToolResponse(text="Error: No arguments provided", is_error=True, error_code="invalid_params")
            if not isinstance(arguments, Mapping):
                raise InvalidParamsError("Tool arguments must be an object.")

            if name == SEARCH_TOOL:
                query, max_results = validate_search_args(arguments)
                return ToolResponse(text=await self.search(query, max_results))

            if name == EXTRACT_TOOL:
                url = validate_extract_args(arguments)
                return ToolResponse(text=await self.extract_content(url))

            return ToolResponse(text=f"Unknown tool: {name}", is_error=True, error_code="unknown_tool")

        except InvalidParamsError as exc:
            logger.warning(f"Rejected call to {name}: {exc}")
            return ToolResponse(text=f"Invalid parameters: {exc}", is_error=True, error_code="invalid_params")
        except Exception as exc:
            logger.exception(f"Tool {name} failed: {exc}")
            return ToolResponse(text=f"Error: {exc}", is_error=True, error_code="internal_error")


__all__ = [
    "EXTRACT_INPUT_SCHEMA",
    "EXTRACT_TOOL",
    "SEARCH_INPUT_SCHEMA",
    "SEARCH_TOOL",
    "InvalidParamsError",
    "ToolResponse",
    "ToolSpec",
    "WebToolkit",
    "validate_extract_args",
    "validate_search_args",
]
