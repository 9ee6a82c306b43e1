"""
Structured Logging Utilities

Diagnostics for the documentation tool go through the standard ``logging``
module under the ``ProjectDocs`` logger and are written to standard error, so
they never interleave with the reports commands print on standard output.
This module owns handler installation, the JSON line formatter, and a small
adapter that carries bound context fields (command name, docs root) into every
record.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

__all__ = [
    "LOGGER_NAME",
    "JSONFormatter",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]

LOGGER_NAME = "ProjectDocs"


class JSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per record.

    Examples:
        >>> formatter = JSONFormatter()
        >>> isinstance(formatter.format(logging.makeLogRecord({'msg': 'test'})), str)
        True
    """

    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now(timezone.utc)
        log_obj: Dict[str, Any] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_obj.update(extra_fields)
        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, default=str)


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter that merges bound fields into ``extra_fields``."""

    def __init__(
        self, logger: logging.Logger, base_fields: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(logger, {})
        self.base_fields: Dict[str, Any] = dict(base_fields or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        extra = kwargs.setdefault("extra", {})
        fields = dict(self.base_fields)
        extra_fields = extra.get("extra_fields")
        if isinstance(extra_fields, dict):
            fields.update(extra_fields)
        extra["extra_fields"] = fields
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **fields: object) -> "StructuredLogger":
        """Attach additional persistent fields to the adapter and return ``self``."""

        self.base_fields.update({k: v for k, v in fields.items() if v is not None})
        return self


def configure_logging(level: str = "WARNING", fmt: str = "console") -> logging.Logger:
    """Install the stderr handler on the ``ProjectDocs`` logger.

    Handlers installed by a previous call are removed first, so repeated
    invocations inside one process (tests, ``CliRunner``) do not stack output
    or write to streams that have since been closed.

    Args:
        level: Logging level name.
        fmt: ``"console"`` for ``LEVEL: message`` lines or ``"json"``.

    Returns:
        The configured package logger.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for handler in list(logger.handlers):
        if getattr(handler, "_pdocs_managed", False):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    handler._pdocs_managed = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = LOGGER_NAME, **fields: object) -> StructuredLogger:
    """Return a :class:`StructuredLogger` for ``name`` bound to ``fields``."""

    bound = {k: v for k, v in fields.items() if v is not None}
    return StructuredLogger(logging.getLogger(name), bound)
