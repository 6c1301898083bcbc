"""Command line entry point: run the Web Scout MCP server on stdio."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from loguru import logger

from webscout.mcp.server import run_server
from webscout.tools.toolkit import WebToolkit
from webscout.utils.config import ConfigError, resolve_config
from webscout.utils.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Web Scout MCP Server")
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML or JSON config file")
    parser.add_argument("--log-level", type=str, default=None, help="Override the configured log level")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args.config)
        toolkit = WebToolkit.from_config(config)
    except (ConfigError, FileNotFoundError) as exc:
        configure_logging("ERROR")
        logger.error(f"Error starting server: {exc}")
        return 1

    configure_logging(args.log_level or config.log_level)
    toolkit.fetcher.artifacts.install()

    run_server(toolkit)
    return 0


if __name__ == "__main__":
    sys.exit(main())
