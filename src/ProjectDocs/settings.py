# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs.settings",
#   "purpose": "Typed settings for the pdocs CLI with ENV and YAML layering.",
#   "sections": [
#     {
#       "id": "projectdocssettings",
#       "name": "ProjectDocsSettings",
#       "anchor": "class-projectdocssettings",
#       "kind": "class"
#     },
#     {
#       "id": "load-yaml-config",
#       "name": "load_yaml_config",
#       "anchor": "function-load-yaml-config",
#       "kind": "function"
#     },
#     {
#       "id": "load-settings",
#       "name": "load_settings",
#       "anchor": "function-load-settings",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Typed settings for the pdocs CLI with ENV and YAML layering.

Settings are a Pydantic v2 ``BaseSettings`` model using the ``PDOCS_``
environment prefix. A YAML file passed through ``--config`` is layered on top
of the environment, and explicit CLI flags win over both.

Precedence: CLI args > config file > ENV vars > defaults
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigLoadError

__all__ = [
    "DEFAULT_PLACEHOLDER_PATTERNS",
    "ProjectDocsSettings",
    "load_yaml_config",
    "load_settings",
]

# Hash-and-number ids such as ``F-##`` and bracketed prompts such as
# ``[type of user]`` are what the bundled templates ship with.
DEFAULT_PLACEHOLDER_PATTERNS: tuple[str, ...] = (
    r"^[A-Za-z]+-#+$",
    r"\[type",
)

_VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class ProjectDocsSettings(BaseSettings):
    """Effective configuration for a single ``pdocs`` invocation."""

    model_config = SettingsConfigDict(
        env_prefix="PDOCS_",
        case_sensitive=False,
        extra="ignore",
    )

    docs_dir_name: str = Field(
        default="docs",
        min_length=1,
        description="Folder name that marks the documentation root",
    )
    generated_dir_name: str = Field(
        default="generated",
        min_length=1,
        description="Default output folder for 'generate', relative to the docs root",
    )
    base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL used by 'list apis --format curl'",
    )
    placeholder_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PLACEHOLDER_PATTERNS),
        description="Regular expressions matching template values that were never filled in",
    )
    templates_dir: Optional[Path] = Field(
        default=None,
        description="Directory overriding the bundled template resources",
    )
    log_level: str = Field(default="WARNING", description="Logging level for stderr diagnostics")
    log_format: Literal["console", "json"] = Field(
        default="console", description="Diagnostic log format"
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = str(value).strip().upper()
        if level not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(sorted(_VALID_LOG_LEVELS))}"
            )
        return level

    @field_validator("placeholder_patterns")
    @classmethod
    def _compile_check_patterns(cls, value: List[str]) -> List[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid placeholder pattern {pattern!r}: {exc}") from exc
        return value


def load_yaml_config(path: Path) -> Dict[str, Any]:
    """Read a settings overlay from a YAML file.

    Args:
        path: YAML document whose top level maps setting names to values.

    Returns:
        Mapping of raw setting values (possibly empty).

    Raises:
        ConfigLoadError: If the file is unreadable, malformed, or not a mapping.
    """

    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Cannot read config file {path}: {exc}") from exc
    try:
        payload = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"Failed to parse YAML configuration payload in {path}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigLoadError(f"Config file {path} must contain a mapping at the top level")
    return payload


def load_settings(config_path: Optional[Path] = None, **overrides: Any) -> ProjectDocsSettings:
    """Build settings from environment, an optional YAML file, and CLI overrides.

    ``None`` overrides are ignored so unset CLI flags fall through to lower layers.

    Raises:
        ConfigLoadError: If the config file or the merged values are invalid.
    """

    layered: Dict[str, Any] = {}
    if config_path is not None:
        layered.update(load_yaml_config(config_path))
    layered.update({key: value for key, value in overrides.items() if value is not None})
    try:
        settings = ProjectDocsSettings(**layered)
    except ValueError as exc:
        raise ConfigLoadError(f"Invalid configuration: {exc}") from exc
    logging.getLogger(__name__).debug("Loaded settings: %s", settings.model_dump())
    return settings
