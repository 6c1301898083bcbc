"""MCP server and client factory for the web tools."""

from webscout.mcp.client import WebScoutMCP
from webscout.mcp.server import create_server, run_server

__all__ = ["WebScoutMCP", "create_server", "run_server"]
