"""Console reporter used by every command to write user-facing output.

Commands never call ``print`` directly; they write through a :class:`Reporter`
so tests can capture output in memory and so styling stays in one place.
Rich markup is disabled because report lines contain literal brackets such as
``[WARN]``.
"""

from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console
from rich.text import Text

__all__ = ["RULE_CHAR", "STYLES", "Reporter", "make_console"]

RULE_CHAR = "━"

STYLES = {
    "error": "bold red",
    "warn": "yellow",
    "pass": "green",
    "info": "dim",
    "check": "cyan",
    "heading": "bold",
}


def make_console(file=None) -> Console:
    """Return a console that neither wraps nor highlights output."""

    return Console(file=file, highlight=False, soft_wrap=True, emoji=False)


class Reporter:
    """Thin line-oriented wrapper around :class:`rich.console.Console`."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or make_console()

    def line(self, text: str = "", style: Optional[str] = None) -> None:
        self.console.print(Text(text, style=STYLES.get(style or "", style or "")))

    def lines(self, texts: Iterable[str], style: Optional[str] = None) -> None:
        for text in texts:
            self.line(text, style)

    def block(self, text: str) -> None:
        """Write a pre-rendered multi-line string verbatim, tabs included."""

        self.console.file.write(text + "\n")

    def rule(self, width: int = 50) -> None:
        self.line(RULE_CHAR * width)

    def banner(self, title: str, width: int = 50) -> None:
        self.rule(width)
        self.line(title, "heading")
        self.rule(width)
