"""Settings layering, validation and logging configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from ProjectDocs.errors import ConfigLoadError
from ProjectDocs.logging_utils import LOGGER_NAME, JSONFormatter, configure_logging, get_logger
from ProjectDocs.settings import (
    DEFAULT_PLACEHOLDER_PATTERNS,
    ProjectDocsSettings,
    load_settings,
    load_yaml_config,
)


def test_defaults() -> None:
    settings = ProjectDocsSettings()

    assert settings.docs_dir_name == "docs"
    assert settings.generated_dir_name == "generated"
    assert settings.base_url == "http://localhost:3000"
    assert tuple(settings.placeholder_patterns) == DEFAULT_PLACEHOLDER_PATTERNS
    assert settings.log_level == "WARNING"


def test_environment_prefix(monkeypatch) -> None:
    monkeypatch.setenv("PDOCS_BASE_URL", "https://staging.example.com")
    monkeypatch.setenv("PDOCS_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.base_url == "https://staging.example.com"
    assert settings.log_level == "DEBUG"


def test_yaml_file_then_overrides(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("PDOCS_BASE_URL", "https://env.example.com")
    config = tmp_path / "pdocs.yaml"
    config.write_text(
        "base_url: https://file.example.com\nlog_level: info\ndocs_dir_name: documentation\n",
        encoding="utf-8",
    )

    settings = load_settings(config, log_level="ERROR", log_format=None)

    assert settings.base_url == "https://file.example.com"
    assert settings.log_level == "ERROR"
    assert settings.docs_dir_name == "documentation"
    assert settings.log_format == "console"


@pytest.mark.parametrize(
    "body",
    ["base_url: [unclosed\n", "- just\n- a list\n"],
)
def test_bad_config_file(tmp_path: Path, body: str) -> None:
    config = tmp_path / "pdocs.yaml"
    config.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigLoadError):
        load_yaml_config(config)


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError):
        load_settings(tmp_path / "absent.yaml")


def test_empty_config_file(tmp_path: Path) -> None:
    config = tmp_path / "pdocs.yaml"
    config.write_text("", encoding="utf-8")

    assert load_yaml_config(config) == {}


@pytest.mark.parametrize(
    "overrides",
    [{"log_level": "LOUD"}, {"log_format": "xml"}, {"placeholder_patterns": ["(unclosed"]}],
)
def test_invalid_values(overrides) -> None:
    with pytest.raises(ConfigLoadError):
        load_settings(**overrides)


def test_json_formatter_merges_extra_fields() -> None:
    record = logging.makeLogRecord(
        {"name": "ProjectDocs.test", "levelname": "INFO", "msg": "hello %s", "args": ("x",)}
    )
    record.extra_fields = {"command": "check"}

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "hello x"
    assert payload["command"] == "check"
    assert payload["logger"] == "ProjectDocs.test"


def test_configure_logging_replaces_managed_handler() -> None:
    logger = configure_logging("INFO", "json")
    configure_logging("DEBUG", "console")

    managed = [h for h in logger.handlers if getattr(h, "_pdocs_managed", False)]
    assert len(managed) == 1
    assert logger.level == logging.DEBUG
    assert logger.name == LOGGER_NAME


def test_structured_logger_binds_fields() -> None:
    adapter = get_logger("ProjectDocs.test", command="list").bind(docs_dir="/tmp/docs", skip=None)

    msg, kwargs = adapter.process("m", {"extra": {"extra_fields": {"count": 3}}})

    assert kwargs["extra"]["extra_fields"] == {
        "command": "list",
        "docs_dir": "/tmp/docs",
        "count": 3,
    }
