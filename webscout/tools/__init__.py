"""Tools for agent workflows."""

# Re-export web tools
from .web_tools import (
    web_search,
    extract_content,
)
from .toolkit import ToolResponse, WebToolkit

__all__ = [
    "web_search",
    "extract_content",
    "ToolResponse",
    "WebToolkit",
]
