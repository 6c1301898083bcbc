"""
Configuration loading for the web tools server.

Config files may be YAML or JSON; ``${VAR_NAME}`` placeholders are replaced with
environment values, and a handful of ``WEBSCOUT_*`` variables override the file.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from webscout.tools.web_tools.crawl import WebFetchConfig
from webscout.tools.web_tools.search import WebSearchConfig

ENV_PREFIX = "WEBSCOUT_"


class ConfigError(ValueError):
    """Raised when a configuration file or value is invalid."""


def get_env_with_prefix(base_name: str, prefix: str = ENV_PREFIX, default: str = None) -> str:
    """
    Retrieves an environment variable, checking for a prefixed version first.

    Args:
        base_name: The base name of the environment variable (e.g., "LOG_LEVEL").
        prefix: The prefix to check for. Defaults to "WEBSCOUT_".
        default: Value returned when neither variable is set.

    Returns:
        The value of the environment variable, or the default value, or None.
    """
    value = os.getenv(f"{prefix}{base_name}")
    if value is not None:
        return value
    return os.getenv(base_name, default)


def _substitute_env_vars(obj: Any) -> Any:
    """Recursively substitute ${VAR_NAME} with environment variable values."""
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return re.sub(r"\$\{([^}]+)\}", lambda m: os.getenv(m.group(1), ""), obj)
    else:
        return obj


def load_config(config_file: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file with env variable substitution.

    Args:
        config_file: Path to config file (YAML or JSON)

    Returns:
        Dictionary containing the configuration

    Example:
        config = load_config("configs/webscout.yaml")
    """
    config_path = Path(config_file)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            if config_path.suffix in [".yaml", ".yml"]:
                config = yaml.safe_load(f)
            elif config_path.suffix == ".json":
                config = json.load(f)
            else:
                raise ConfigError(f"Unsupported config file format: {config_path.suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Could not parse config file {config_file}: {exc}") from exc

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping at the top level.")

    return _substitute_env_vars(config)


class WebScoutConfig(BaseModel):
    """Top-level settings for the search and fetch tools."""

    search: Dict[str, Any] = Field(default_factory=dict)
    fetch: Dict[str, Any] = Field(default_factory=dict)
    log_level: str = "INFO"

    model_config = ConfigDict(extra="ignore")

    def search_config(self) -> WebSearchConfig:
        try:
            return WebSearchConfig(**self.search)
        except TypeError as exc:
            raise ConfigError(f"Invalid search settings: {exc}") from exc

    def fetch_config(self) -> WebFetchConfig:
        try:
            return WebFetchConfig(**self.fetch)
        except TypeError as exc:
            raise ConfigError(f"Invalid fetch settings: {exc}") from exc


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(data)

    log_level = get_env_with_prefix("LOG_LEVEL", default=None)
    if log_level:
        data["log_level"] = log_level

    for section, env_name in (("search", "SEARCH_RPM"), ("fetch", "FETCH_RPM")):
        raw = os.getenv(f"{ENV_PREFIX}{env_name}")
        if raw is None:
            continue
        try:
            rpm = int(raw)
        except ValueError as exc:
            raise ConfigError(f"{ENV_PREFIX}{env_name} must be an integer, got {raw!r}") from exc
        data[section] = {**(data.get(section) or {}), "requests_per_minute": rpm}

    return data


def resolve_config(source: Optional[Union[str, Path, Mapping[str, Any]]] = None) -> WebScoutConfig:
    """Build a :class:`WebScoutConfig` from a path, a mapping, or nothing.

    Environment overrides are applied last.
    """
    load_dotenv()

    if source is None:
        data: Dict[str, Any] = {}
    elif isinstance(source, Mapping):
        data = _substitute_env_vars(dict(source))
    else:
        data = load_config(source)

    data = _apply_env_overrides(data)

    try:
        return WebScoutConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


__all__ = [
    "ConfigError",
    "WebScoutConfig",
    "get_env_with_prefix",
    "load_config",
    "resolve_config",
]
