"""Web search and page content extraction tools for agents."""

from webscout.tools import ToolResponse, WebToolkit, extract_content, web_search

__version__ = "1.0.0"

__all__ = [
    "ToolResponse",
    "WebToolkit",
    "extract_content",
    "web_search",
]
