# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs.checks",
#   "purpose": "Rule-based completeness and cross-reference checks over a docs tree.",
#   "sections": [
#     {"id": "results", "name": "CheckResult & SectionReport", "anchor": "RES", "kind": "api"},
#     {"id": "placeholders", "name": "PlaceholderMatcher", "anchor": "PLH", "kind": "api"},
#     {"id": "categories", "name": "Category Checks", "anchor": "CAT", "kind": "api"},
#     {"id": "crossref", "name": "Cross-Reference Check", "anchor": "XRF", "kind": "api"},
#     {"id": "runner", "name": "run_checks", "anchor": "RUN", "kind": "api"},
#     {"id": "report", "name": "Report Rendering", "anchor": "REP", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Rule-based completeness and cross-reference checks over a docs tree.

The engine runs a fixed sequence of category checks (PRD, user flows, user
stories, feature specs, system design, API contracts, data plan, design spec)
followed by an optional cross-reference pass between PRD feature ids, feature
specs and user stories. Each check returns an immutable :class:`CheckResult`
holding its counters and messages; :func:`run_checks` merges them into a
:class:`CheckRun`. A missing file or directory only short-circuits the checks
of its own category.

Warnings never fail a run. The exit status is ``0`` when no errors were
recorded and ``1`` otherwise, independent of verbosity or output format.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import reduce
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import DocsRootNotFoundError
from .layout import Category, DocsLayout
from .models import (
    STATUS_COMPLETE,
    load_api_contract,
    prd_feature_ids,
)
from .records import Document, find_yaml_files, load_document
from .settings import DEFAULT_PLACEHOLDER_PATTERNS

__all__ = [
    "Level",
    "CheckMessage",
    "CheckResult",
    "SectionReport",
    "CheckRun",
    "PlaceholderMatcher",
    "CheckContext",
    "check_prd",
    "check_user_flows",
    "check_user_stories",
    "check_feature_specs",
    "check_system_design",
    "check_api_contracts",
    "check_data_plan",
    "check_design_spec",
    "check_cross_references",
    "CATEGORY_CHECKS",
    "run_checks",
    "REPORT_FORMATS",
    "render_check_report",
]

PRD_REQUIRED_FIELDS: Tuple[str, ...] = ("project_name", "summary", "goal")

CROSS_REFERENCE_TITLE = "Cross-Reference Validation"

REPORT_FORMATS: Tuple[str, ...] = ("summary", "detailed", "json")

TEMPLATE_TYPES_HINT = (
    "product-requirements, system-design, api-contracts,",
    "data-plan, design-spec, user-flow, user-story, feature-spec",
)


# --- CheckResult & SectionReport ---


class Level(str, Enum):
    CHECK = "check"
    PASS = "pass"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class CheckMessage:
    level: Level
    text: str
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"level": self.level.value, "message": self.text}
        if self.hint:
            payload["hint"] = self.hint
        return payload


@dataclass(frozen=True)
class CheckResult:
    """Counters and messages accumulated by one or more checks.

    Every recording method returns a new instance; results are combined with
    :meth:`merge`.

    Examples:
        >>> result = CheckResult().check("Checking for PRD").warn("PRD: 'goal' is empty")
        >>> (result.checks, result.warnings, result.errors)
        (1, 1, 0)
    """

    checks: int = 0
    warnings: int = 0
    errors: int = 0
    messages: Tuple[CheckMessage, ...] = ()

    def record(self, level: Level, text: str, hint: Optional[str] = None) -> "CheckResult":
        return replace(
            self,
            checks=self.checks + (level is Level.CHECK),
            warnings=self.warnings + (level is Level.WARN),
            errors=self.errors + (level is Level.ERROR),
            messages=self.messages + (CheckMessage(level, text, hint),),
        )

    def check(self, text: str) -> "CheckResult":
        return self.record(Level.CHECK, text)

    def passed(self, text: str) -> "CheckResult":
        return self.record(Level.PASS, text)

    def info(self, text: str) -> "CheckResult":
        return self.record(Level.INFO, text)

    def warn(self, text: str) -> "CheckResult":
        return self.record(Level.WARN, text)

    def error(self, text: str, hint: Optional[str] = None) -> "CheckResult":
        return self.record(Level.ERROR, text, hint)

    def merge(self, other: "CheckResult") -> "CheckResult":
        return CheckResult(
            checks=self.checks + other.checks,
            warnings=self.warnings + other.warnings,
            errors=self.errors + other.errors,
            messages=self.messages + other.messages,
        )

    @property
    def exit_code(self) -> int:
        return 0 if self.errors == 0 else 1


@dataclass(frozen=True)
class SectionReport:
    title: str
    result: CheckResult = field(default_factory=CheckResult)


@dataclass(frozen=True)
class CheckRun:
    """Outcome of a full validation run."""

    docs_dir: Path
    sections: Tuple[SectionReport, ...]

    @property
    def totals(self) -> CheckResult:
        return reduce(
            lambda acc, section: acc.merge(section.result), self.sections, CheckResult()
        )

    @property
    def exit_code(self) -> int:
        return self.totals.exit_code

    def to_dict(self) -> Dict[str, Any]:
        totals = self.totals
        return {
            "docs_dir": str(self.docs_dir),
            "checks": totals.checks,
            "warnings": totals.warnings,
            "errors": totals.errors,
            "exit_code": totals.exit_code,
            "sections": [
                {
                    "title": section.title,
                    "checks": section.result.checks,
                    "warnings": section.result.warnings,
                    "errors": section.result.errors,
                    "messages": [message.to_dict() for message in section.result.messages],
                }
                for section in self.sections
            ],
        }


# --- PlaceholderMatcher ---


class PlaceholderMatcher:
    """Recognise template values that were never filled in.

    Examples:
        >>> matcher = PlaceholderMatcher()
        >>> matcher.matches("F-##"), matcher.matches("[type of user]"), matcher.matches("F-01")
        (True, True, False)
    """

    def __init__(self, patterns: Sequence[str] = DEFAULT_PLACEHOLDER_PATTERNS) -> None:
        self.patterns = tuple(re.compile(pattern) for pattern in patterns)

    def matches(self, value: str) -> bool:
        return any(pattern.search(value) for pattern in self.patterns)


@dataclass(frozen=True)
class CheckContext:
    layout: DocsLayout
    placeholders: PlaceholderMatcher = field(default_factory=PlaceholderMatcher)


# --- Category Checks ---


def _template_hint(category: Category) -> str:
    return f"Get template with: pdocs template {category.template_type}"


def _is_blank(value: str) -> bool:
    stripped = value.strip()
    return not stripped or stripped == '""'


def _require_file(
    result: CheckResult, layout: DocsLayout, category: Category
) -> Tuple[CheckResult, Optional[Path]]:
    path = layout.path_for(category)
    result = result.check(f"Checking for {category.label}")
    if layout.exists(category):
        return result.passed(f"{category.label} found"), path
    return result.error(f"{category.label} missing: {path}", _template_hint(category)), None


def _require_directory(
    result: CheckResult, layout: DocsLayout, category: Category
) -> Tuple[CheckResult, Optional[Path]]:
    path = layout.path_for(category)
    result = result.check(f"Checking for {category.label} directory")
    if path.is_dir():
        return result.passed(f"{category.label} directory found"), path
    return (
        result.error(f"{category.label} directory missing: {path}", _template_hint(category)),
        None,
    )


def _check_string_field(result: CheckResult, doc: Document, key: str, label: str) -> CheckResult:
    if _is_blank(doc.string(key)):
        name = doc.path.name if doc.path is not None else "document"
        return result.warn(f"{label}: '{key}' is empty in {name}")
    return result


def check_prd(ctx: CheckContext) -> SectionReport:
    """Check the PRD exists, has its summary fields, and declares features."""

    result, path = _require_file(CheckResult(), ctx.layout, Category.PRD)
    if path is not None:
        doc = load_document(path)
        for key in PRD_REQUIRED_FIELDS:
            result = _check_string_field(result, doc, key, "PRD")
        features = doc.array("features")
        result = result.info(f"Features defined in PRD: {len(features)}")
        if not features:
            result = result.warn("No features defined in PRD")
    return SectionReport(Category.PRD.label, result)


def check_user_flows(ctx: CheckContext) -> SectionReport:
    """Check every flow file declares at least one primary flow."""

    result, directory = _require_directory(CheckResult(), ctx.layout, Category.USER_FLOWS)
    if directory is not None:
        files = find_yaml_files(directory)
        result = result.info(f"User flow files found: {len(files)}")
        if not files:
            result = result.warn("No user flow files found")
        for path in files:
            result = result.check(f"Checking flow: {path.stem}")
            if not load_document(path).array("primary_flows"):
                result = result.warn(f"No flows defined in {path.stem}")
    return SectionReport(Category.USER_FLOWS.label, result)


def check_user_stories(ctx: CheckContext) -> SectionReport:
    """Tally story status and check each story names its persona."""

    result, directory = _require_directory(CheckResult(), ctx.layout, Category.USER_STORIES)
    if directory is None:
        return SectionReport(Category.USER_STORIES.label, result)

    files = find_yaml_files(directory)
    result = result.info(f"User story files found: {len(files)}")
    if not files:
        return SectionReport(Category.USER_STORIES.label, result.warn("No user story files found"))

    complete = 0
    for path in files:
        doc = load_document(path)
        story_id = doc.string("story_id") or path.stem
        if doc.string("status") == STATUS_COMPLETE:
            complete += 1
        as_a = doc.nested_string("user_story", "as_a")
        if _is_blank(as_a) or ctx.placeholders.matches(as_a):
            result = result.warn(f"Story {story_id} has incomplete user story definition")
    result = result.info(f"Complete stories: {complete}")
    result = result.info(f"Incomplete stories: {len(files) - complete}")
    return SectionReport(Category.USER_STORIES.label, result)


def check_feature_specs(ctx: CheckContext) -> SectionReport:
    """Tally feature status and check each spec carries a summary."""

    result, directory = _require_directory(CheckResult(), ctx.layout, Category.FEATURE_SPECS)
    if directory is None:
        return SectionReport(Category.FEATURE_SPECS.label, result)

    files = find_yaml_files(directory)
    result = result.info(f"Feature spec files found: {len(files)}")
    if not files:
        return SectionReport(
            Category.FEATURE_SPECS.label, result.warn("No feature spec files found")
        )

    complete = 0
    for path in files:
        doc = load_document(path)
        feature_id = doc.string("feature_id") or path.stem
        if doc.string("status") == STATUS_COMPLETE:
            complete += 1
        result = _check_string_field(result, doc, "summary", f"Feature {feature_id}")
    result = result.info(f"Complete features: {complete}")
    result = result.info(f"Incomplete features: {len(files) - complete}")
    return SectionReport(Category.FEATURE_SPECS.label, result)


def check_system_design(ctx: CheckContext) -> SectionReport:
    result, path = _require_file(CheckResult(), ctx.layout, Category.SYSTEM_DESIGN)
    if path is not None:
        doc = load_document(path)
        result = _check_string_field(result, doc, "goal", "System Design")
        if not doc.has_content("tech_stack"):
            result = result.warn("No tech stack defined in system design")
    return SectionReport(Category.SYSTEM_DESIGN.label, result)


def check_api_contracts(ctx: CheckContext) -> SectionReport:
    result, path = _require_file(CheckResult(), ctx.layout, Category.API_CONTRACTS)
    if path is not None:
        contract = load_api_contract(ctx.layout)
        count = contract.path_count if contract is not None else 0
        result = result.info(f"API endpoints defined: {count}")
        if count == 0:
            result = result.warn("No API endpoints defined")
    return SectionReport(Category.API_CONTRACTS.label, result)


def check_data_plan(ctx: CheckContext) -> SectionReport:
    result, path = _require_file(CheckResult(), ctx.layout, Category.DATA_PLAN)
    if path is not None:
        sources = load_document(path).array("data_sources")
        if sources:
            result = result.info(f"Data sources defined: {len(sources)}")
    return SectionReport(Category.DATA_PLAN.label, result)


def check_design_spec(ctx: CheckContext) -> SectionReport:
    result, path = _require_file(CheckResult(), ctx.layout, Category.DESIGN_SPEC)
    if path is not None:
        doc = load_document(path)
        if not doc.has_content("design_goals"):
            result = result.warn(f"Design Spec: 'design_goals' is empty in {path.name}")
    return SectionReport(Category.DESIGN_SPEC.label, result)


CATEGORY_CHECKS: Tuple[Callable[[CheckContext], SectionReport], ...] = (
    check_prd,
    check_user_flows,
    check_user_stories,
    check_feature_specs,
    check_system_design,
    check_api_contracts,
    check_data_plan,
    check_design_spec,
)


# --- Cross-Reference Check ---


def check_cross_references(ctx: CheckContext) -> SectionReport:
    """Match PRD feature ids against feature specs and story references.

    Every PRD id without a feature spec declaring the same ``feature_id`` is
    reported, as is every story whose ``feature_id`` is filled in but absent
    from the PRD. Placeholder values are ignored.
    """

    result = CheckResult()
    layout = ctx.layout
    prd = load_document(layout.prd_file)
    if not prd.exists:
        return SectionReport(CROSS_REFERENCE_TITLE, result.warn("No PRD file to cross-reference"))

    feature_ids = prd_feature_ids(prd)
    if not feature_ids:
        return SectionReport(
            CROSS_REFERENCE_TITLE, result.warn("No features in PRD to cross-reference")
        )

    if layout.features_dir.is_dir():
        specs = [load_document(path) for path in find_yaml_files(layout.features_dir)]
        for feature_id in feature_ids:
            result = result.check(f"Checking if {feature_id} has specification")
            if any(spec.string("feature_id") == feature_id for spec in specs):
                result = result.passed(f"Feature {feature_id} has specification")
            else:
                result = result.warn(f"Feature {feature_id} (in PRD) has no specification file")

    if layout.stories_dir.is_dir():
        known = set(feature_ids)
        for path in find_yaml_files(layout.stories_dir):
            story = load_document(path)
            if not story.exists:
                continue
            reference = story.string("feature_id").strip()
            if _is_blank(reference) or ctx.placeholders.matches(reference):
                continue
            if reference not in known:
                story_id = story.string("story_id") or path.stem
                result = result.warn(f"Story {story_id} references unknown feature: {reference}")

    return SectionReport(CROSS_REFERENCE_TITLE, result)


# --- run_checks ---


def run_checks(
    layout: DocsLayout,
    *,
    check_links: bool = True,
    placeholders: Optional[PlaceholderMatcher] = None,
) -> CheckRun:
    """Run every category check in order and, optionally, the cross-reference pass.

    Args:
        layout: Documentation root to validate.
        check_links: Run :func:`check_cross_references` after the category checks.
        placeholders: Matcher for unfilled template values.

    Returns:
        :class:`CheckRun` with one :class:`SectionReport` per executed check.

    Raises:
        DocsRootNotFoundError: If the documentation root itself does not exist.
    """

    if not layout.root.is_dir():
        raise DocsRootNotFoundError(layout.root.name, start=layout.root)

    ctx = CheckContext(layout, placeholders or PlaceholderMatcher())
    steps: List[Callable[[CheckContext], SectionReport]] = list(CATEGORY_CHECKS)
    if check_links:
        steps.append(check_cross_references)
    return CheckRun(docs_dir=layout.root, sections=tuple(step(ctx) for step in steps))


# --- Report Rendering ---

ReportLine = Tuple[str, Optional[str]]

_ALWAYS_SHOWN = {Level.WARN, Level.ERROR}


def _message_lines(message: CheckMessage) -> Iterable[ReportLine]:
    yield f"[{message.level.value.upper()}] {message.text}", message.level.value
    if message.hint:
        yield f"        💡 {message.hint}", "info"


def _summary_lines(totals: CheckResult) -> List[ReportLine]:
    rule = "━" * 50
    lines: List[ReportLine] = [
        ("", None),
        (rule, None),
        ("Summary", "heading"),
        (rule, None),
        ("", None),
        (f"Checks performed: {totals.checks}", None),
        (f"Errors: {totals.errors}{' ✓' if totals.errors == 0 else ''}", None),
        (f"Warnings: {totals.warnings}{' ✓' if totals.warnings == 0 else ''}", None),
        ("", None),
    ]
    if totals.errors == 0 and totals.warnings == 0:
        lines.append(("✓ All checks passed!", "pass"))
    elif totals.errors == 0:
        lines.append(("⚠ All checks passed with warnings", "warn"))
    else:
        lines.extend(
            [
                ("✗ Some checks failed", "error"),
                ("", None),
                ("💡 Complete project documentation is essential for effective development.", None),
                ("   Get started with templates: pdocs template <type>", None),
                (f"   Available types: {TEMPLATE_TYPES_HINT[0]}", None),
                (f"                    {TEMPLATE_TYPES_HINT[1]}", None),
            ]
        )
    return lines


def render_check_report(
    run: CheckRun, *, verbose: bool = False, fmt: str = "summary"
) -> List[ReportLine]:
    """Render ``run`` as ``(text, style)`` lines.

    ``summary`` shows warnings and errors plus check/pass/info lines when
    ``verbose``; ``detailed`` always shows every message; ``json`` yields a
    single line holding the serialised run.
    """

    if fmt == "json":
        return [(json.dumps(run.to_dict(), indent=2, ensure_ascii=False), None)]

    show_all = verbose or fmt == "detailed"
    rule = "━" * 50
    lines: List[ReportLine] = [
        (rule, None),
        ("Project Documentation Check", "heading"),
        (rule, None),
        (f"Documentation directory: {run.docs_dir}", None),
    ]
    for section in run.sections:
        lines.append(("", None))
        lines.append((f"━━━ {section.title} ━━━", "heading"))
        for message in section.result.messages:
            if show_all or message.level in _ALWAYS_SHOWN:
                lines.extend(_message_lines(message))
    lines.extend(_summary_lines(run.totals))
    return lines
