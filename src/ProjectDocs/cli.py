# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs.cli",
#   "purpose": "Typer application wiring the pdocs commands to their implementations.",
#   "sections": [
#     {
#       "id": "root-callback",
#       "name": "root_callback",
#       "anchor": "function-root-callback",
#       "kind": "function"
#     },
#     {
#       "id": "commands",
#       "name": "check / list / generate / info / template",
#       "anchor": "commands",
#       "kind": "function"
#     },
#     {
#       "id": "main",
#       "name": "main",
#       "anchor": "function-main",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Typer application wiring the pdocs commands to their implementations.

Global options precede the command name and apply to every command::

    pdocs --log-level DEBUG check --verbose
    pdocs --config pdocs.yaml list apis --format curl

Each command delegates to :mod:`ProjectDocs.commands` and converts the
returned status into :class:`typer.Exit`. :func:`main` runs the app in
non-standalone mode so that status comes back as an integer, and is the only
function that hands it to the interpreter (via :func:`run`).
"""

from __future__ import annotations

import sys
from importlib import import_module
from pathlib import Path
from typing import Annotated, List, Optional

import click
import typer

from . import __version__
from .commands import AppContext, run_check, run_generate, run_info, run_list, run_template
from .console import Reporter
from .errors import ConfigLoadError, ProjectDocsError
from .listing import ListOptions
from .logging_utils import configure_logging, get_logger
from .settings import load_settings

__all__ = ["app", "main", "run", "COMMAND_SUMMARIES"]

# Recent typer releases bundle their own click; usage errors come from that copy.
_typer_click_exceptions = import_module(typer.Abort.__module__)
USAGE_ERRORS = tuple({click.UsageError, _typer_click_exceptions.UsageError})
ABORTS = tuple({click.Abort, _typer_click_exceptions.Abort})

COMMAND_SUMMARIES = (
    ("check", "Check documentation for completeness"),
    ("list", "List documentation by type"),
    ("generate", "Generate readable docs from YAML"),
    ("info", "Display project overview"),
    ("template", "Get template for documentation type"),
)

app = typer.Typer(
    name="pdocs",
    help="CLI tool for managing YAML-based project documentation",
    add_completion=False,
    pretty_exceptions_enable=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _context(ctx: typer.Context) -> AppContext:
    app_ctx = ctx.obj
    if not isinstance(app_ctx, AppContext):
        app_ctx = AppContext()
        ctx.obj = app_ctx
    return app_ctx


def _finish(status: int) -> None:
    raise typer.Exit(code=status)


@app.callback(invoke_without_command=True)
def root_callback(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", envvar="PDOCS_CONFIG", help="YAML file with pdocs settings"),
    ] = None,
    log_level: Annotated[
        Optional[str], typer.Option("--log-level", help="Diagnostic log level (DEBUG|INFO|WARNING|ERROR)")
    ] = None,
    log_format: Annotated[
        Optional[str], typer.Option("--log-format", help="Diagnostic log format (console|json)")
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Manage YAML-based project documentation.

    Diagnostics go to stderr; reports always go to stdout.
    """
    reporter = Reporter()
    try:
        settings = load_settings(config, log_level=log_level, log_format=log_format)
    except ConfigLoadError as exc:
        reporter.line(f"Error: {exc}", "error")
        raise typer.Exit(code=1)

    configure_logging(settings.log_level, settings.log_format)
    get_logger(__name__).debug(
        "Starting pdocs", extra={"extra_fields": {"command": ctx.invoked_subcommand}}
    )
    ctx.obj = AppContext(settings=settings, reporter=reporter)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# --- commands ---


@app.command()
def check(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show verbose output")] = False,
    links: Annotated[
        bool, typer.Option("--links/--no-links", help="Run cross-reference validation")
    ] = True,
    fmt: Annotated[
        str, typer.Option("--format", help="Output format: summary|detailed|json")
    ] = "summary",
) -> None:
    """Check project documentation for completeness and consistency."""
    _finish(run_check(_context(ctx), verbose=verbose, check_links=links, fmt=fmt))


@app.command("list")
def list_command(
    ctx: typer.Context,
    list_type: Annotated[
        Optional[str],
        typer.Argument(metavar="[TYPE]", help="features, apis, stories or flows"),
    ] = None,
    show_all: Annotated[
        bool, typer.Option("--all", "-a", help="Show all items (default: only incomplete)")
    ] = False,
    status: Annotated[
        Optional[str],
        typer.Option("--status", help="Filter by status: incomplete|in-progress|complete"),
    ] = None,
    sort: Annotated[
        Optional[str], typer.Option("--sort", help="Sort by field (features: id|status|title)")
    ] = None,
    method: Annotated[
        Optional[str], typer.Option("--method", help="Filter APIs by HTTP method")
    ] = None,
    path: Annotated[Optional[str], typer.Option("--path", help="Filter APIs by path pattern")] = None,
    base_url: Annotated[
        Optional[str], typer.Option("--base-url", help="Base URL for curl commands")
    ] = None,
    feature: Annotated[
        Optional[str], typer.Option("--feature", help="Filter stories by feature ID")
    ] = None,
    persona: Annotated[
        Optional[str], typer.Option("--persona", help="Filter flows by persona name")
    ] = None,
    fmt: Annotated[
        Optional[str], typer.Option("--format", help="Output format (varies by type)")
    ] = None,
) -> None:
    """List documentation by type: features, apis, stories, flows."""
    app_ctx = _context(ctx)
    options = ListOptions(
        show_all=show_all,
        status=status or "",
        sort=sort or "",
        method=method or "",
        path=path or "",
        feature=feature or "",
        persona=persona or "",
        base_url=base_url or app_ctx.settings.base_url,
        fmt=fmt or "summary",
    )
    _finish(run_list(app_ctx, list_type, options))


@app.command()
def generate(
    ctx: typer.Context,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output directory (default: docs/generated)"),
    ] = None,
    fmt: Annotated[
        str, typer.Option("--format", "-f", help="Output format: markdown|html")
    ] = "markdown",
    toc: Annotated[
        bool, typer.Option("--toc/--no-toc", help="Include tables of contents")
    ] = True,
) -> None:
    """Generate human-readable documentation from YAML files."""
    _finish(run_generate(_context(ctx), output=output, fmt=fmt, include_toc=toc))


@app.command()
def info(ctx: typer.Context) -> None:
    """Display quick overview of project documentation."""
    _finish(run_info(_context(ctx)))


@app.command()
def template(
    ctx: typer.Context,
    template_type: Annotated[
        Optional[str], typer.Argument(metavar="[TYPE]", help="Template type to print")
    ] = None,
) -> None:
    """Get template for documentation type."""
    _finish(run_template(_context(ctx), template_type))


# --- main ---


def _usage_error(exc: Exception) -> int:
    reporter = Reporter()
    reporter.line(f"Error: {exc.format_message()}", "error")
    reporter.line()
    reporter.line("Available commands:")
    reporter.lines(f"  {name:<12} {summary}" for name, summary in COMMAND_SUMMARIES)
    reporter.line()
    reporter.line('Run "pdocs --help" for more information')
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit status instead of exiting.

    Args:
        argv: Arguments without the program name; defaults to ``sys.argv[1:]``.

    Returns:
        ``0`` on success, ``1`` for command failures and usage errors.
    """

    args = list(sys.argv[1:] if argv is None else argv)
    try:
        result = app(args=args, prog_name="pdocs", standalone_mode=False)
    except USAGE_ERRORS as exc:
        return _usage_error(exc)
    except ProjectDocsError as exc:
        Reporter().line(f"Error: {exc}", "error")
        return 1
    except ABORTS:
        return 1
    return result if isinstance(result, int) else 0


def run() -> None:
    sys.exit(main())
