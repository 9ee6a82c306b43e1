# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs.commands",
#   "purpose": "Command implementations returning exit statuses for the pdocs CLI.",
#   "sections": [
#     {
#       "id": "appcontext",
#       "name": "AppContext",
#       "anchor": "class-appcontext",
#       "kind": "class"
#     },
#     {
#       "id": "open-docs-root",
#       "name": "open_docs_root",
#       "anchor": "function-open-docs-root",
#       "kind": "function"
#     },
#     {
#       "id": "run-check",
#       "name": "run_check",
#       "anchor": "function-run-check",
#       "kind": "function"
#     },
#     {
#       "id": "run-list",
#       "name": "run_list",
#       "anchor": "function-run-list",
#       "kind": "function"
#     },
#     {
#       "id": "run-generate",
#       "name": "run_generate",
#       "anchor": "function-run-generate",
#       "kind": "function"
#     },
#     {
#       "id": "run-info",
#       "name": "run_info",
#       "anchor": "function-run-info",
#       "kind": "function"
#     },
#     {
#       "id": "run-template",
#       "name": "run_template",
#       "anchor": "function-run-template",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Command implementations returning exit statuses for the pdocs CLI.

Every ``run_*`` function writes user-facing text through the context's
:class:`~ProjectDocs.console.Reporter` and returns ``0`` or ``1``. None of them
terminate the process; :func:`ProjectDocs.cli.main` is the only place where a
status becomes an exit code, which keeps the commands callable from tests.

NAVMAP:
- AppContext: Settings, reporter and starting directory for one invocation
- open_docs_root: Discover the documentation root and install CLAUDE.md
- run_check / run_list / run_generate / run_info / run_template
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .checks import REPORT_FORMATS, PlaceholderMatcher, render_check_report, run_checks
from .console import Reporter
from .doc_templates import ensure_claude_doc, read_template, render_template_help
from .errors import DocsRootNotFoundError, InvalidChoiceError, SourceMissingError, TemplateResourceError
from .generate import OUTPUT_FORMATS, generate_docs
from .info import collect_info, render_info
from .layout import DocsLayout, resolve_docs_root
from .listing import LIST_TYPES, ListOptions, list_documents, render_list_type_help
from .logging_utils import get_logger
from .settings import ProjectDocsSettings

__all__ = [
    "AppContext",
    "open_docs_root",
    "run_check",
    "run_list",
    "run_generate",
    "run_info",
    "run_template",
]


@dataclass
class AppContext:
    """Per-invocation state shared by every command."""

    settings: ProjectDocsSettings = field(default_factory=ProjectDocsSettings)
    reporter: Reporter = field(default_factory=Reporter)
    start: Optional[Path] = None


def _report_choice_error(app: AppContext, exc: InvalidChoiceError) -> int:
    app.reporter.line(f"Error: {exc}", "error")
    if exc.choices:
        app.reporter.line(f"Valid values: {', '.join(exc.choices)}")
    return 1


def open_docs_root(app: AppContext, *, announce: bool = True) -> Optional[DocsLayout]:
    """Discover the documentation root and make sure ``CLAUDE.md`` is installed.

    Args:
        app: Invocation context.
        announce: Print the CLAUDE.md installation line; machine-readable
            outputs pass ``False`` and the outcome is only logged.

    Returns:
        The layout, or ``None`` after printing the not-found error.
    """

    log = get_logger(__name__, command="discover")
    try:
        layout = resolve_docs_root(app.settings.docs_dir_name, app.start)
    except DocsRootNotFoundError as exc:
        log.debug("Documentation root not found", extra={"extra_fields": {"start": str(app.start)}})
        app.reporter.line(f"Error: {exc}", "error")
        app.reporter.line(exc.hint)
        return None

    log.bind(docs_dir=str(layout.root)).debug("Documentation root resolved")
    outcome = ensure_claude_doc(layout.root, app.settings.templates_dir)
    if outcome.message:
        if announce:
            app.reporter.line(outcome.message, "warn" if outcome.warning else "pass")
        else:
            log.info(outcome.message)
    return layout


def run_check(
    app: AppContext, *, verbose: bool = False, check_links: bool = True, fmt: str = "summary"
) -> int:
    """Validate the documentation tree; ``1`` when any error was recorded."""

    if fmt not in REPORT_FORMATS:
        return _report_choice_error(app, InvalidChoiceError("format", fmt, REPORT_FORMATS))

    layout = open_docs_root(app, announce=fmt != "json")
    if layout is None:
        return 1

    run = run_checks(
        layout,
        check_links=check_links,
        placeholders=PlaceholderMatcher(app.settings.placeholder_patterns),
    )
    for text, style in render_check_report(run, verbose=verbose, fmt=fmt):
        if fmt == "json":
            app.reporter.block(text)
        else:
            app.reporter.line(text, style)
    get_logger(__name__, command="check").debug(
        "Check finished",
        extra={"extra_fields": {"errors": run.totals.errors, "warnings": run.totals.warnings}},
    )
    return run.exit_code


def run_list(app: AppContext, list_type: Optional[str], options: ListOptions) -> int:
    """List one category; ``1`` for a missing/invalid type or a missing source."""

    if list_type not in LIST_TYPES:
        error = InvalidChoiceError("list type", list_type, LIST_TYPES)
        if list_type:
            app.reporter.line(f"Error: {error}", "error")
        else:
            app.reporter.line("Error: Missing required argument: type", "error")
        app.reporter.line()
        app.reporter.lines(render_list_type_help())
        return 1

    layout = open_docs_root(app, announce=options.fmt not in ("json", "ids", "curl"))
    if layout is None:
        return 1

    try:
        lines = list_documents(layout, list_type, options)
    except SourceMissingError as exc:
        app.reporter.line(f"Error: {exc}", "error")
        return 1
    except InvalidChoiceError as exc:
        return _report_choice_error(app, exc)

    app.reporter.lines(lines)
    return 0


def run_generate(
    app: AppContext,
    *,
    output: Optional[Path] = None,
    fmt: str = "markdown",
    include_toc: bool = True,
) -> int:
    """Write the Markdown documentation set."""

    if fmt not in OUTPUT_FORMATS:
        return _report_choice_error(app, InvalidChoiceError("format", fmt, OUTPUT_FORMATS))

    layout = open_docs_root(app)
    if layout is None:
        return 1

    output_dir = output if output is not None else layout.root / app.settings.generated_dir_name
    reporter = app.reporter
    reporter.banner("Documentation Generator")
    reporter.line()
    generate_docs(layout, output_dir, fmt=fmt, include_toc=include_toc, reporter=reporter)
    reporter.line()
    reporter.rule()
    reporter.line("✓ Documentation generation complete!", "pass")
    reporter.line(f"→ Output directory: {output_dir}")
    reporter.line()
    return 0


def run_info(app: AppContext) -> int:
    layout = open_docs_root(app)
    if layout is None:
        return 1
    app.reporter.block(render_info(collect_info(layout)))
    return 0


def run_template(app: AppContext, template_type: Optional[str]) -> int:
    """Print a bundled template verbatim; ``1`` for unknown types or missing resources."""

    try:
        content = read_template(template_type, app.settings.templates_dir)
    except InvalidChoiceError as exc:
        app.reporter.line(f"Error: {exc}", "error")
        app.reporter.line()
        app.reporter.lines(render_template_help())
        if not template_type:
            app.reporter.line()
            app.reporter.line("Usage: pdocs template <type>")
        return 1
    except TemplateResourceError as exc:
        app.reporter.line(f"Error: {exc}", "error")
        app.reporter.line("This may indicate an installation issue.")
        return 1

    app.reporter.block(content)
    return 0
