"""
Utility helpers for the web tools server.

This package provides utilities for:
- Configuration management (config.py)
- Logging setup (logging.py)
"""

from webscout.utils.config import (
    ConfigError,
    WebScoutConfig,
    get_env_with_prefix,
    load_config,
    resolve_config,
)
from webscout.utils.logging import configure_logging

__all__ = [
    # Config
    "ConfigError",
    "WebScoutConfig",
    "get_env_with_prefix",
    "load_config",
    "resolve_config",
    # Logging
    "configure_logging",
]
