"""
MCP server exposing the web search and content extraction tools over stdio.

Both tools delegate to a single :class:`WebToolkit`, so rate limits are shared
across every call the server handles. Error responses are raised as
``ToolError`` so clients receive an error-flagged result instead of a crash.
"""

from __future__ import annotations

from typing import Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from loguru import logger

from webscout.tools.toolkit import (
    EXTRACT_TOOL,
    SEARCH_TOOL,
    ToolResponse,
    ToolSpec,
    WebToolkit,
)

SERVER_NAME = "web-scout"
SERVER_VERSION = "1.0.0"


def _unwrap(response: ToolResponse) -> str:
    if response.is_error:
        raise ToolError(response.text)
    return response.text


def _register(mcp: FastMCP, fn, spec: ToolSpec) -> None:
    # Advertise the hand-written schema; arguments reach the toolkit unvalidated.
    tool = Tool.from_function(fn, name=spec.name, description=spec.description)
    mcp.add_tool(tool.model_copy(update={"parameters": spec.input_schema}))


def create_server(toolkit: Optional[WebToolkit] = None) -> FastMCP:
    """Return a FastMCP server with both tools registered on ``toolkit``."""
    toolkit = toolkit or WebToolkit()
    mcp = FastMCP(SERVER_NAME, version=SERVER_VERSION)
    specs = {spec.name: spec for spec in WebToolkit.list_tools()}

    async def search(query: Any = None, maxResults: Any = None) -> str:
        arguments = {"query": query}
        if maxResults is not None:
            arguments["maxResults"] = maxResults
        return _unwrap(await toolkit.call(SEARCH_TOOL, arguments))

    async def extract(url: Any = None) -> str:
        return _unwrap(await toolkit.call(EXTRACT_TOOL, {"url": url}))

    _register(mcp, search, specs[SEARCH_TOOL])
    _register(mcp, extract, specs[EXTRACT_TOOL])
    return mcp


def run_server(toolkit: Optional[WebToolkit] = None) -> None:
    """Serve over stdio until the client disconnects."""
    server = create_server(toolkit)
    logger.info("Web Scout MCP Server running on stdio")
    server.run(transport="stdio")


__all__ = ["SERVER_NAME", "SERVER_VERSION", "create_server", "run_server"]
