"""Tests for configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from webscout.tools.toolkit import WebToolkit
from webscout.utils.config import (
    ConfigError,
    get_env_with_prefix,
    load_config,
    resolve_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("WEBSCOUT_LOG_LEVEL", "LOG_LEVEL", "WEBSCOUT_SEARCH_RPM", "WEBSCOUT_FETCH_RPM"):
        monkeypatch.delenv(name, raising=False)


def test_load_yaml_with_env_substitution(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("SCOUT_UA", "scout-test/1.0")
    config_file = tmp_path / "webscout.yaml"
    config_file.write_text(
        "log_level: DEBUG\n"
        "fetch:\n"
        "  timeout: 10\n"
        "  headers:\n"
        "    User-Agent: ${SCOUT_UA}\n"
    )

    config = load_config(config_file)

    assert config["fetch"]["headers"]["User-Agent"] == "scout-test/1.0"
    assert config["fetch"]["timeout"] == 10


def test_load_json(tmp_path: Path):
    config_file = tmp_path / "webscout.json"
    config_file.write_text(json.dumps({"search": {"requests_per_minute": 12}}))

    assert load_config(config_file) == {"search": {"requests_per_minute": 12}}


def test_empty_yaml_is_empty_mapping(tmp_path: Path):
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")

    assert load_config(config_file) == {}


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_unsupported_extension(tmp_path: Path):
    config_file = tmp_path / "webscout.toml"
    config_file.write_text("x = 1")

    with pytest.raises(ConfigError):
        load_config(config_file)


def test_non_mapping_document(tmp_path: Path):
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- a\n- b\n")

    with pytest.raises(ConfigError):
        load_config(config_file)


def test_defaults_match_tool_constants():
    config = resolve_config()
    search = config.search_config()
    fetch = config.fetch_config()

    assert config.log_level == "INFO"
    assert search.requests_per_minute == 30
    assert search.timeout == 30
    assert fetch.requests_per_minute == 20
    assert fetch.timeout == 30
    assert fetch.max_redirects == 5
    assert fetch.max_in_memory_size == 5 * 1024 * 1024
    assert fetch.max_content_length == 8000
    assert fetch.batch_pause == 0.5


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("WEBSCOUT_LOG_LEVEL", "warning")
    monkeypatch.setenv("WEBSCOUT_FETCH_RPM", "5")

    config = resolve_config({"fetch": {"timeout": 12}})

    assert config.log_level == "warning"
    assert config.fetch_config().requests_per_minute == 5
    assert config.fetch_config().timeout == 12


def test_bad_env_override(monkeypatch):
    monkeypatch.setenv("WEBSCOUT_SEARCH_RPM", "lots")

    with pytest.raises(ConfigError):
        resolve_config()


def test_unknown_section_key_is_rejected():
    config = resolve_config({"fetch": {"max_pages": 3}})

    with pytest.raises(ConfigError):
        config.fetch_config()


def test_toolkit_from_config_applies_settings():
    config = resolve_config({"search": {"requests_per_minute": 7}, "fetch": {"requests_per_minute": 3}})

    toolkit = WebToolkit.from_config(config)

    assert toolkit.search_client.rate_limiter.requests_per_minute == 7
    assert toolkit.fetcher.rate_limiter.requests_per_minute == 3


def test_get_env_with_prefix_prefers_prefixed(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    assert get_env_with_prefix("LOG_LEVEL") == "ERROR"

    monkeypatch.setenv("WEBSCOUT_LOG_LEVEL", "DEBUG")
    assert get_env_with_prefix("LOG_LEVEL") == "DEBUG"

    assert get_env_with_prefix("NOT_SET_ANYWHERE", default="fallback") == "fallback"
