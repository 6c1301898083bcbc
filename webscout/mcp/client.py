from __future__ import annotations

"""
Web Scout MCP server factory for agent runtimes.

Spawns ``python -m webscout`` using stdio transport, so the search and content
extraction tools can be consumed by the "agents" runtime through MCP.
"""

import sys
from typing import List, Optional

from agents.mcp import MCPServer, MCPServerStdio


def WebScoutMCP(config_path: Optional[str] = None, log_level: Optional[str] = None) -> MCPServer:
    """Return a configured Web Scout MCP server (stdio subprocess).

    Uses the current interpreter so the server runs in the same environment as
    the caller.
    """
    args: List[str] = ["-m", "webscout"]
    if config_path:
        args += ["--config", str(config_path)]
    if log_level:
        args += ["--log-level", log_level]

    return MCPServerStdio(
        name="web-scout",
        cache_tools_list=True,
        params={
            "command": sys.executable,
            "args": args,
        },
    )
