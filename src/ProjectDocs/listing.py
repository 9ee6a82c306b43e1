# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs.listing",
#   "purpose": "Filter, sort and render features, APIs, stories and flows for 'pdocs list'.",
#   "sections": [
#     {
#       "id": "listoptions",
#       "name": "ListOptions",
#       "anchor": "class-listoptions",
#       "kind": "class"
#     },
#     {
#       "id": "filters",
#       "name": "filter_features / filter_stories / filter_endpoints / filter_flows",
#       "anchor": "function-filters",
#       "kind": "function"
#     },
#     {
#       "id": "renderers",
#       "name": "render_features / render_apis / render_stories / render_flows",
#       "anchor": "function-renderers",
#       "kind": "function"
#     },
#     {
#       "id": "list-documents",
#       "name": "list_documents",
#       "anchor": "function-list-documents",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Filter, sort and render features, APIs, stories and flows for ``pdocs list``.

Every invocation loads the whole category into memory, narrows it with the
requested filters, orders it, and renders one of the supported encodings:
an aligned text table (``summary``), newline-delimited JSON (``json``), a bare
identifier list (``ids``), and per-type extras (``stats`` for features, ``curl``
and ``markdown`` for APIs). Features and stories marked ``complete`` are hidden
unless ``--all`` is given; ``--status`` narrows what remains.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from .errors import InvalidChoiceError, SourceMissingError
from .formatters import format_json_lines, format_table, status_label, truncate
from .layout import Category, DocsLayout
from .models import (
    STATUS_COMPLETE,
    ApiContract,
    ApiEndpoint,
    FeatureRecord,
    FlowRecord,
    StatusTally,
    StoryRecord,
    load_api_contract,
    load_features,
    load_flows,
    load_stories,
)

__all__ = [
    "LIST_TYPES",
    "LIST_TYPE_DESCRIPTIONS",
    "LIST_FORMATS",
    "SORT_FIELDS",
    "ListOptions",
    "filter_features",
    "filter_stories",
    "filter_endpoints",
    "filter_flows",
    "sort_features",
    "sort_stories",
    "render_features",
    "render_apis",
    "render_stories",
    "render_flows",
    "render_list_type_help",
    "list_documents",
]

LIST_TYPE_DESCRIPTIONS: Dict[str, str] = {
    "features": "List all feature specifications",
    "apis": "List all API endpoints",
    "stories": "List all user stories",
    "flows": "List all user flows",
}

LIST_TYPES: Tuple[str, ...] = tuple(LIST_TYPE_DESCRIPTIONS)

LIST_FORMATS: Dict[str, Tuple[str, ...]] = {
    "features": ("summary", "json", "ids", "stats"),
    "apis": ("summary", "json", "ids", "curl", "markdown"),
    "stories": ("summary", "json", "ids"),
    "flows": ("summary", "json", "ids"),
}

SORT_FIELDS: Dict[str, Tuple[str, ...]] = {
    "features": ("id", "title", "status"),
    "apis": ("path", "method"),
    "stories": ("id", "title", "status"),
    "flows": ("title",),
}

_BODYLESS_METHODS = {"GET", "DELETE", "HEAD", "OPTIONS"}


@dataclass(frozen=True)
class ListOptions:
    """Filters and presentation choices for one ``list`` invocation."""

    show_all: bool = False
    status: str = ""
    sort: str = ""
    method: str = ""
    path: str = ""
    feature: str = ""
    persona: str = ""
    base_url: str = "http://localhost:3000"
    fmt: str = "summary"


def _hide_complete(options: ListOptions) -> bool:
    return not options.show_all


def filter_features(
    features: Sequence[FeatureRecord], options: ListOptions
) -> List[FeatureRecord]:
    selected = list(features)
    if _hide_complete(options):
        selected = [f for f in selected if f.status != STATUS_COMPLETE]
    if options.status:
        selected = [f for f in selected if f.status == options.status]
    if options.feature:
        selected = [f for f in selected if f.feature_id == options.feature]
    return selected


def filter_stories(stories: Sequence[StoryRecord], options: ListOptions) -> List[StoryRecord]:
    selected = list(stories)
    if _hide_complete(options):
        selected = [s for s in selected if s.status != STATUS_COMPLETE]
    if options.status:
        selected = [s for s in selected if s.status == options.status]
    if options.feature:
        selected = [s for s in selected if s.feature_id == options.feature]
    return selected


def filter_endpoints(
    endpoints: Sequence[ApiEndpoint], options: ListOptions
) -> List[ApiEndpoint]:
    selected = list(endpoints)
    if options.method:
        method = options.method.upper()
        selected = [ep for ep in selected if ep.method == method]
    if options.path:
        needle = options.path.lower()
        selected = [ep for ep in selected if needle in ep.path.lower()]
    if options.feature:
        selected = [ep for ep in selected if ep.feature_id == options.feature]
    return selected


def filter_flows(flows: Sequence[FlowRecord], options: ListOptions) -> List[FlowRecord]:
    if not options.persona:
        return list(flows)
    needle = options.persona.lower()
    return [f for f in flows if any(needle in persona.lower() for persona in f.key_personas)]


def _check_sort(kind: str, sort: str) -> str:
    if sort and sort not in SORT_FIELDS[kind]:
        raise InvalidChoiceError("sort field", sort, SORT_FIELDS[kind])
    return sort


def sort_features(features: Sequence[FeatureRecord], sort: str = "") -> List[FeatureRecord]:
    """Order features by ``id`` (default), ``title`` or ``status``."""

    sort = _check_sort("features", sort) or "id"
    if sort == "title":
        return sorted(features, key=lambda f: f.title.casefold())
    if sort == "status":
        return sorted(features, key=lambda f: f.status)
    return sorted(features, key=lambda f: f.feature_id)


def sort_stories(stories: Sequence[StoryRecord], sort: str = "") -> List[StoryRecord]:
    sort = _check_sort("stories", sort) or "id"
    if sort == "title":
        return sorted(stories, key=lambda s: s.title.casefold())
    if sort == "status":
        return sorted(stories, key=lambda s: s.status)
    return sorted(stories, key=lambda s: s.story_id)


def _sort_endpoints(endpoints: Sequence[ApiEndpoint], sort: str) -> List[ApiEndpoint]:
    sort = _check_sort("apis", sort)
    if sort == "path":
        return sorted(endpoints, key=lambda ep: (ep.path, ep.method))
    if sort == "method":
        return sorted(endpoints, key=lambda ep: (ep.method, ep.path))
    return list(endpoints)


def _sort_flows(flows: Sequence[FlowRecord], sort: str) -> List[FlowRecord]:
    if _check_sort("flows", sort) == "title":
        return sorted(flows, key=lambda f: f.title.casefold())
    return list(flows)


def _check_format(kind: str, fmt: str) -> str:
    fmt = fmt or "summary"
    if fmt not in LIST_FORMATS[kind]:
        raise InvalidChoiceError(f"{kind} format", fmt, LIST_FORMATS[kind])
    return fmt


def _feature_stats(features: Sequence[FeatureRecord]) -> List[str]:
    tally = StatusTally.from_statuses(f.status for f in features)
    rule = "━" * 50
    lines = [
        rule,
        "Feature Specifications Statistics",
        rule,
        "",
        f"Total Features: {tally.total}",
        f"  Complete: {tally.complete}",
        f"  In Progress: {tally.in_progress}",
        f"  Incomplete: {tally.incomplete}",
        "",
    ]
    if tally.total:
        lines.extend(
            [
                "Progress:",
                f"  Complete: {tally.complete * 100 // tally.total}%",
                f"  Started: {(tally.complete + tally.in_progress) * 100 // tally.total}%",
            ]
        )
    return lines


def render_features(
    features: Sequence[FeatureRecord], options: ListOptions, source_dir: Path
) -> List[str]:
    """Render already-filtered features in ``options.fmt``."""

    fmt = _check_format("features", options.fmt)
    if fmt == "json":
        return format_json_lines(f.to_dict() for f in features)
    if fmt == "ids":
        return [f.feature_id for f in features]

    rows = [
        (
            f.feature_id,
            truncate(f.title, 40),
            f"{int(f.progress):>3}%",
            status_label(f.status),
        )
        for f in features
    ]
    rule = "━" * 80
    return [
        f"Feature Specifications in {source_dir}",
        rule,
        format_table(("ID", "Title", "Progress", "Status"), rows),
        rule,
        f"Found {len(features)} matching features",
    ]


def _curl_lines(endpoint: ApiEndpoint, base_url: str) -> List[str]:
    url = f"{base_url.rstrip('/')}{endpoint.path}"
    if endpoint.method in _BODYLESS_METHODS:
        return [f'curl -X {endpoint.method} "{url}"', ""]
    return [
        f'curl -X {endpoint.method} "{url}" \\',
        '  -H "Content-Type: application/json" \\',
        "  -d '{\"key\": \"value\"}'",
        "",
    ]


def render_apis(
    contract: ApiContract, endpoints: Sequence[ApiEndpoint], options: ListOptions
) -> List[str]:
    """Render already-filtered endpoints of ``contract`` in ``options.fmt``."""

    fmt = _check_format("apis", options.fmt)
    if fmt == "json":
        return format_json_lines(ep.to_dict() for ep in endpoints)
    if fmt == "ids":
        return [f"{ep.method} {ep.path}" for ep in endpoints]
    if fmt == "curl":
        lines: List[str] = []
        for endpoint in endpoints:
            lines.extend(_curl_lines(endpoint, options.base_url))
        return lines
    if fmt == "markdown":
        lines = [f"# {contract.title} v{contract.version}", ""]
        for endpoint in endpoints:
            lines.extend([f"### {endpoint.method} `{endpoint.path}`", endpoint.summary, ""])
        return lines

    rule = "━" * 80
    rows = [(ep.method, ep.path, truncate(ep.summary, 60)) for ep in endpoints]
    return [
        rule,
        f"{contract.title} v{contract.version}",
        rule,
        "",
        format_table(("Method", "Path", "Summary"), rows),
        "",
        rule,
        f"Found {len(endpoints)} endpoint(s)",
    ]


def render_stories(
    stories: Sequence[StoryRecord], options: ListOptions, source_dir: Path
) -> List[str]:
    fmt = _check_format("stories", options.fmt)
    if fmt == "json":
        return format_json_lines(s.to_dict() for s in stories)
    if fmt == "ids":
        return [s.story_id for s in stories]

    rule = "━" * 70
    rows = [
        (s.story_id, s.feature_id, truncate(s.title, 40), status_label(s.status))
        for s in stories
    ]
    return [
        f"User Stories in {source_dir}",
        rule,
        format_table(("ID", "Feature", "Title", "Status"), rows),
        rule,
        f"Found {len(stories)} matching stories",
    ]


def render_flows(flows: Sequence[FlowRecord], options: ListOptions, source_dir: Path) -> List[str]:
    fmt = _check_format("flows", options.fmt)
    if fmt == "json":
        return format_json_lines(f.to_dict() for f in flows)
    if fmt == "ids":
        return [f.title for f in flows]

    rule = "━" * 65
    rows = [
        (truncate(f.title, 40), f"{f.total_flows} flows", f"{len(f.key_personas)} personas")
        for f in flows
    ]
    return [
        f"User Flows in {source_dir}",
        rule,
        format_table(("Title", "Flows", "Personas"), rows),
        rule,
        f"Found {len(flows)} flow file(s)",
    ]


def render_list_type_help() -> List[str]:
    """Usage text printed when ``list`` gets no type or an unknown one."""

    lines = ["Valid types:"]
    lines.extend(f"  {name:<11} {text}" for name, text in LIST_TYPE_DESCRIPTIONS.items())
    lines.extend(["", "Usage: pdocs list <type> [options]"])
    return lines


def list_documents(layout: DocsLayout, list_type: str, options: ListOptions) -> List[str]:
    """Load, filter, sort and render one category.

    Args:
        layout: Documentation root.
        list_type: One of :data:`LIST_TYPES`.
        options: Filters and output format.

    Returns:
        Output lines ready to print.

    Raises:
        InvalidChoiceError: For an unknown type, format or sort field.
        SourceMissingError: When listing APIs and no contract source parses.
    """

    if list_type not in LIST_TYPES:
        raise InvalidChoiceError("list type", list_type, LIST_TYPES)

    if list_type == "apis":
        contract = load_api_contract(layout)
        if contract is None:
            raise SourceMissingError(Category.API_CONTRACTS.value, layout.api_contracts_file)
        endpoints = _sort_endpoints(filter_endpoints(contract.endpoints, options), options.sort)
        return render_apis(contract, endpoints, options)

    category = {
        "features": Category.FEATURE_SPECS,
        "stories": Category.USER_STORIES,
        "flows": Category.USER_FLOWS,
    }[list_type]
    source_dir = layout.path_for(category)
    if not layout.files(category):
        noun = {"features": "feature", "stories": "story", "flows": "flow"}[list_type]
        return [f"No {noun} files found in {source_dir}"]

    if list_type == "features":
        features = load_features(layout)
        if options.fmt == "stats":
            stats_options = ListOptions(
                show_all=True, status=options.status, feature=options.feature
            )
            return _feature_stats(filter_features(features, stats_options))
        features = sort_features(filter_features(features, options), options.sort)
        return render_features(features, options, source_dir)
    if list_type == "stories":
        stories = sort_stories(filter_stories(load_stories(layout), options), options.sort)
        return render_stories(stories, options, source_dir)
    flows = _sort_flows(filter_flows(load_flows(layout), options), options.sort)
    return render_flows(flows, options, source_dir)

