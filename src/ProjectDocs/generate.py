# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs.generate",
#   "purpose": "Render the YAML documentation tree into a set of Markdown documents.",
#   "sections": [
#     {"id": "grouping", "name": "Endpoint Grouping", "anchor": "GRP", "kind": "helpers"},
#     {"id": "renderers", "name": "Pure Markdown Renderers", "anchor": "REN", "kind": "api"},
#     {"id": "writer", "name": "generate_docs", "anchor": "GEN", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Render the YAML documentation tree into a set of Markdown documents.

``pdocs generate`` writes five files into the output directory:

- ``overview.md``       project name, summary, goal and PRD features
- ``features.md``       feature catalogue, linked to the API reference
- ``api-reference.md``  endpoints grouped by feature identifier
- ``architecture.md``   system design goal, components and tech stack
- ``README.md``         index of the generated documents

Each ``render_*`` function is pure (records in, Markdown out) so it can be
tested without touching the filesystem; :func:`generate_docs` loads the
sources, skips any document whose source is missing, and writes the rest.
Endpoints are linked through explicit anchors built by
:func:`~ProjectDocs.models.endpoint_anchor`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .console import Reporter
from .errors import ProjectDocsError
from .layout import Category, DocsLayout
from .models import (
    ApiContract,
    ApiEndpoint,
    FeatureRecord,
    endpoint_anchor,
    load_api_contract,
    load_features,
    prd_feature_ids,
    prd_features,
)
from .records import Document, get_string, load_document

__all__ = [
    "OUTPUT_FORMATS",
    "GENERATED_DOCUMENTS",
    "UNCATEGORIZED",
    "feature_anchor",
    "group_endpoints",
    "render_overview",
    "render_features",
    "render_api_reference",
    "render_architecture",
    "render_index",
    "GenerationReport",
    "generate_docs",
]

OUTPUT_FORMATS: Tuple[str, ...] = ("markdown", "html")

GENERATED_DOCUMENTS: Tuple[Tuple[str, str], ...] = (
    ("overview.md", "Project Overview"),
    ("features.md", "Feature Specifications"),
    ("api-reference.md", "API Reference"),
    ("architecture.md", "System Architecture"),
)

INDEX_FILE = "README.md"
UNCATEGORIZED = "Uncategorized"

_ID_STRIP_RE = re.compile(r"[^a-z0-9]")


# --- Endpoint Grouping ---


def feature_anchor(feature_id: str) -> str:
    """Anchor of a feature section in ``features.md``."""

    return "feature-" + _ID_STRIP_RE.sub("", feature_id.lower())


def _group_anchor(feature_id: Optional[str]) -> str:
    if feature_id is None:
        return "group-uncategorized"
    return "group-" + _ID_STRIP_RE.sub("", feature_id.lower())


def _endpoint_order(endpoint: ApiEndpoint) -> Tuple[str, str]:
    return endpoint.path, endpoint.method


def group_endpoints(
    endpoints: Iterable[ApiEndpoint], known_ids: Iterable[str]
) -> List[Tuple[Optional[str], List[ApiEndpoint]]]:
    """Group endpoints by recognised feature id.

    Groups are ordered lexicographically by id with the uncategorised group
    (key ``None``) last; endpoints inside a group are ordered by path, then
    method.
    """

    known = set(known_ids)
    groups: Dict[Optional[str], List[ApiEndpoint]] = {}
    for endpoint in endpoints:
        key = endpoint.feature_id if endpoint.feature_id in known else None
        groups.setdefault(key, []).append(endpoint)

    ordered: List[Tuple[Optional[str], List[ApiEndpoint]]] = [
        (key, sorted(groups[key], key=_endpoint_order))
        for key in sorted(k for k in groups if k is not None)
    ]
    if None in groups:
        ordered.append((None, sorted(groups[None], key=_endpoint_order)))
    return ordered


# --- Pure Markdown Renderers ---


def _top_or_overview(doc: Document, key: str) -> str:
    return doc.string(key) or doc.nested_string("overview", key)


def render_overview(prd: Document) -> str:
    """Render ``overview.md`` from the PRD."""

    project_name = prd.string("project_name") or "Project"
    summary = _top_or_overview(prd, "summary") or "No summary provided"
    goal = _top_or_overview(prd, "goal") or "No goal defined"

    parts = [
        f"# {project_name} Overview\n",
        "## Summary\n",
        f"{summary}\n",
        "## Goal\n",
        f"{goal}\n",
        "## Features\n",
    ]
    bullets = [
        f"- **{feature.id}:** {feature.description or feature.name}"
        for feature in prd_features(prd)
        if feature.description or feature.name
    ]
    parts.append("\n".join(bullets) + "\n" if bullets else "_No features defined._\n")
    return "\n".join(parts)


def _feature_endpoint_lines(
    feature: FeatureRecord, contract_endpoints: Sequence[ApiEndpoint]
) -> List[str]:
    linked = {
        (ep.method, ep.path): ep
        for ep in contract_endpoints
        if feature.feature_id and ep.feature_id == feature.feature_id
    }
    declared = {(ref.method, ref.endpoint) for ref in feature.apis}
    contract_index = {(ep.method, ep.path): ep for ep in contract_endpoints}

    lines: List[str] = []
    for method, path in sorted(set(linked) | declared, key=lambda key: (key[1], key[0])):
        endpoint = linked.get((method, path)) or contract_index.get((method, path))
        if endpoint is not None:
            lines.append(
                f"- [**{method}** `{path}`](api-reference.md#{endpoint.anchor})"
                f" - {endpoint.summary}"
            )
        else:
            lines.append(f"- **{method}** `{path}` (not in API contract)")
    return lines


def render_features(
    features: Sequence[FeatureRecord],
    endpoints: Sequence[ApiEndpoint] = (),
    *,
    include_toc: bool = True,
) -> str:
    """Render ``features.md``: one section per feature, sorted by identifier."""

    ordered = sorted(features, key=lambda f: f.feature_id)
    out = [
        "# Feature Specifications\n",
        "This document provides detailed specifications for all features.\n",
    ]
    if include_toc and ordered:
        out.append("## Table of Contents\n")
        out.append(
            "\n".join(
                f"- [{f.feature_id} - {f.title}](#{feature_anchor(f.feature_id or f.title)})"
                for f in ordered
            )
            + "\n"
        )
    out.append("---\n")

    for feature in ordered:
        endpoint_lines = _feature_endpoint_lines(feature, endpoints)
        out.extend(
            [
                f'<a id="{feature_anchor(feature.feature_id or feature.title)}"></a>\n',
                f"## {feature.feature_id} - {feature.title}\n",
                f"**Status:** {feature.status}\n",
                "### Summary\n",
                f"{feature.summary}\n",
                "### Core Logic\n",
                f"{feature.core_logic}\n",
                "### API Endpoints\n",
                ("\n".join(endpoint_lines) if endpoint_lines else "_No endpoints linked._")
                + "\n",
                "---\n",
            ]
        )
    return "\n".join(out)


def _endpoint_section(endpoint: ApiEndpoint, feature_id: Optional[str]) -> List[str]:
    lines = [
        f'<a id="{endpoint.anchor}"></a>\n',
        f"#### {endpoint.method} `{endpoint.path}`\n",
        f"{endpoint.summary}\n",
    ]
    if endpoint.description:
        lines.append(f"{endpoint.description}\n")
    if feature_id is not None:
        lines.append(f"**Feature:** [{feature_id}](features.md#{feature_anchor(feature_id)})\n")
    if endpoint.responses:
        lines.append("**Responses:**\n")
        lines.append(
            "\n".join(
                f"- `{code}`: {description}" for code, description in endpoint.responses
            )
            + "\n"
        )
    lines.append("---\n")
    return lines


def render_api_reference(
    contract: ApiContract,
    known_ids: Iterable[str] = (),
    *,
    feature_titles: Optional[Mapping[str, str]] = None,
    include_toc: bool = True,
) -> str:
    """Render ``api-reference.md`` with endpoints grouped by feature."""

    titles = dict(feature_titles or {})
    groups = group_endpoints(contract.endpoints, known_ids)

    def heading(feature_id: Optional[str]) -> str:
        if feature_id is None:
            return UNCATEGORIZED
        title = titles.get(feature_id)
        return f"{feature_id} - {title}" if title else feature_id

    out = [
        "# API Reference\n",
        f"**{contract.title}** - Version {contract.version}\n",
    ]
    if include_toc and groups:
        toc: List[str] = []
        for feature_id, endpoints in groups:
            toc.append(f"- [{heading(feature_id)}](#{_group_anchor(feature_id)})")
            toc.extend(
                f"  - [{ep.method} {ep.path}](#{ep.anchor})" for ep in endpoints
            )
        out.append("## Table of Contents\n")
        out.append("\n".join(toc) + "\n")

    out.append("## Endpoints\n")
    if not groups:
        out.append("_No endpoints defined._\n")
    for feature_id, endpoints in groups:
        out.append(f'<a id="{_group_anchor(feature_id)}"></a>\n')
        out.append(f"### {heading(feature_id)}\n")
        for endpoint in endpoints:
            out.extend(_endpoint_section(endpoint, feature_id))
    return "\n".join(out)


def _format_stack_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, Mapping):
        return ", ".join(f"{key}: {item}" for key, item in value.items())
    return str(value)


def render_architecture(system: Document) -> str:
    """Render ``architecture.md`` from the system design document."""

    goal = _top_or_overview(system, "goal")
    out = ["# System Architecture\n", "## Overview\n", f"{goal}\n", "## Components\n"]

    for component in system.array("core_components"):
        name = get_string(component, "component")
        description = get_string(component, "description")
        if name and description:
            out.append(f"### {name}\n")
            out.append(f"{description}\n")

    out.append("## Tech Stack\n")
    tech_stack = system.data.get("tech_stack") if system.data else None
    if isinstance(tech_stack, Mapping):
        out.append(
            "\n".join(
                f"- **{key}:** {_format_stack_value(value)}" for key, value in tech_stack.items()
            )
            + "\n"
        )
    elif isinstance(tech_stack, (list, tuple)) and tech_stack:
        out.append("\n".join(f"- {_format_stack_value(item)}" for item in tech_stack) + "\n")
    elif isinstance(tech_stack, str) and tech_stack.strip():
        out.append(f"{tech_stack.strip()}\n")
    return "\n".join(out)


def render_index(docs_dir: Path, available: Iterable[str], generated_at: datetime) -> str:
    """Render ``README.md`` linking the documents generated in this run."""

    written = set(available)
    links = [
        f"- [{title}](./{name})" for name, title in GENERATED_DOCUMENTS if name in written
    ]
    return "\n".join(
        [
            "# Project Documentation\n",
            "This documentation is automatically generated from YAML specification files.\n",
            "## Table of Contents\n",
            ("\n".join(links) if links else "_No documents were generated._") + "\n",
            "## Source Files\n",
            "This documentation is generated from:",
            f"- Product Requirements: `{docs_dir}/product-requirements.yaml`",
            f"- Feature Specs: `{docs_dir}/feature-specs/*.yaml`",
            f"- API Contracts: `{docs_dir}/api-contracts.yaml`",
            f"- System Design: `{docs_dir}/system-design.yaml`\n",
            "To regenerate this documentation, run:",
            "```bash",
            "pdocs generate",
            "```\n",
            "---\n",
            f"*Generated on {generated_at.strftime('%Y-%m-%d %H:%M:%S')}*\n",
        ]
    )


# --- generate_docs ---


@dataclass
class GenerationReport:
    output_dir: Path
    written: List[Path] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def _write(path: Path, markdown: str) -> None:
    try:
        path.write_text(markdown, encoding="utf-8")
    except OSError as exc:
        raise ProjectDocsError(f"Failed to write {path}: {exc}") from exc


def generate_docs(
    layout: DocsLayout,
    output_dir: Path,
    *,
    fmt: str = "markdown",
    include_toc: bool = True,
    reporter: Optional[Reporter] = None,
    now: Optional[datetime] = None,
) -> GenerationReport:
    """Generate every Markdown document for ``layout`` into ``output_dir``.

    Args:
        layout: Documentation root providing the sources.
        output_dir: Destination folder, created when absent.
        fmt: ``markdown`` or ``html``; HTML is not implemented and falls back to Markdown.
        include_toc: Add tables of contents to the feature and API documents.
        reporter: Destination for progress lines; a default console when omitted.
        now: Timestamp recorded in the index.

    Returns:
        :class:`GenerationReport` listing written files and skipped documents.

    Raises:
        ProjectDocsError: If the output directory or a document cannot be written.
    """

    reporter = reporter or Reporter()
    report = GenerationReport(output_dir=output_dir)

    if fmt == "html":
        reporter.line("⚠ HTML output is not implemented yet; generating Markdown instead", "warn")

    if not output_dir.exists():
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProjectDocsError(f"Failed to create {output_dir}: {exc}") from exc
        reporter.line(f"✓ Created output directory: {output_dir}", "pass")

    def emit(name: str, label: str, markdown: str) -> None:
        target = output_dir / name
        _write(target, markdown)
        report.written.append(target)
        reporter.line(f"✓ Generated {label}: {target}", "pass")

    def skip(name: str, message: str) -> None:
        report.skipped.append(name)
        reporter.line(f"⚠ {message}", "warn")

    prd = load_document(layout.prd_file)
    features = load_features(layout) if layout.features_dir.is_dir() else []
    contract = load_api_contract(layout)
    known_ids = set(prd_feature_ids(prd)) | {f.feature_id for f in features if f.feature_id}
    titles: Dict[str, str] = {
        feature.id: feature.name or feature.description for feature in prd_features(prd)
    }
    titles.update({f.feature_id: f.title for f in features if f.feature_id})

    if prd.exists:
        reporter.line("→ Generating project overview...")
        emit("overview.md", "overview", render_overview(prd))
    else:
        skip("overview.md", "PRD file not found, skipping overview")

    if layout.features_dir.is_dir():
        reporter.line("→ Generating feature documentation...")
        endpoints = contract.endpoints if contract is not None else ()
        emit("features.md", "feature docs", render_features(features, endpoints, include_toc=include_toc))
    else:
        skip("features.md", "Feature specs directory not found, skipping")

    if contract is not None:
        reporter.line("→ Generating API documentation...")
        emit(
            "api-reference.md",
            "API docs",
            render_api_reference(
                contract, known_ids, feature_titles=titles, include_toc=include_toc
            ),
        )
    else:
        skip("api-reference.md", "API contracts file not found, skipping")

    system = load_document(layout.path_for(Category.SYSTEM_DESIGN))
    if system.exists:
        reporter.line("→ Generating architecture documentation...")
        emit("architecture.md", "architecture docs", render_architecture(system))
    else:
        skip("architecture.md", "System design file not found, skipping")

    reporter.line("→ Generating documentation index...")
    emit(
        INDEX_FILE,
        "index",
        render_index(layout.root, (path.name for path in report.written), now or datetime.now()),
    )
    return report
