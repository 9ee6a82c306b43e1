"""Exception hierarchy shared across discovery, listing, generation, and templates.

The documentation tool deliberately swallows file-system and YAML failures at
the loader layer, so the exceptions defined here only describe conditions a
command cannot recover from on its own: a missing documentation root, a
required source file that is absent, an unrecognised user choice, or a broken
installation. The CLI entry point converts every :class:`ProjectDocsError` into
a one-line ``Error:`` message and exit status 1.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

__all__ = [
    "ProjectDocsError",
    "ConfigLoadError",
    "DocsRootNotFoundError",
    "SourceMissingError",
    "InvalidChoiceError",
    "TemplateResourceError",
]


class ProjectDocsError(RuntimeError):
    """Base exception for failures that should stop a ``pdocs`` command."""


class ConfigLoadError(ProjectDocsError):
    """Raised when a ``--config`` document cannot be read or deserialized."""


class DocsRootNotFoundError(ProjectDocsError):
    """Raised when no documentation root exists above the working directory."""

    def __init__(self, marker: str = "docs", *, start: Optional[Path] = None) -> None:
        super().__init__(f"Could not find {marker}/ directory")
        self.marker = marker
        self.start = start
        self.hint = (
            f"Please run this command from a project directory containing a {marker}/ folder"
        )


class SourceMissingError(ProjectDocsError):
    """Raised when a command requires a category source that does not exist."""

    def __init__(self, category: str, path: Path) -> None:
        super().__init__(f"File '{path}' not found")
        self.category = category
        self.path = path


class InvalidChoiceError(ProjectDocsError):
    """Raised when a user supplies a value outside a fixed set of choices."""

    def __init__(self, kind: str, value: Optional[str], choices: Sequence[str]) -> None:
        if value:
            message = f"Invalid {kind} '{value}'"
        else:
            message = f"Missing required argument: {kind}"
        super().__init__(message)
        self.kind = kind
        self.value = value
        self.choices = tuple(choices)


class TemplateResourceError(ProjectDocsError):
    """Raised when a bundled template cannot be located or read."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path
