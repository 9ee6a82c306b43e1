"""Quick overview of a documentation tree for ``pdocs info``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .console import RULE_CHAR
from .layout import Category, DocsLayout
from .models import StatusTally, load_api_contract, load_features, load_stories
from .records import load_document

__all__ = ["DocsInfo", "collect_info", "render_info"]


@dataclass(frozen=True)
class DocsInfo:
    """Counts shown by ``pdocs info``; ``None`` marks an absent category."""

    docs_dir: Path
    prd_found: bool
    project_name: str = ""
    prd_feature_count: int = 0
    features: Optional[StatusTally] = None
    feature_files: int = 0
    stories: Optional[StatusTally] = None
    story_files: int = 0
    flow_files: Optional[int] = None
    endpoint_count: Optional[int] = None
    component_count: Optional[int] = None


def collect_info(layout: DocsLayout) -> DocsInfo:
    prd = load_document(layout.prd_file)

    features = None
    feature_files = 0
    if layout.features_dir.is_dir():
        feature_files = len(layout.files(Category.FEATURE_SPECS))
        features = StatusTally.from_statuses(f.status for f in load_features(layout))

    stories = None
    story_files = 0
    if layout.stories_dir.is_dir():
        story_files = len(layout.files(Category.USER_STORIES))
        stories = StatusTally.from_statuses(s.status for s in load_stories(layout))

    flow_files = len(layout.files(Category.USER_FLOWS)) if layout.flows_dir.is_dir() else None

    contract = load_api_contract(layout)
    system = load_document(layout.system_design_file)

    return DocsInfo(
        docs_dir=layout.root,
        prd_found=layout.prd_file.is_file(),
        project_name=prd.string("project_name"),
        prd_feature_count=len(prd.array("features")),
        features=features,
        feature_files=feature_files,
        stories=stories,
        story_files=story_files,
        flow_files=flow_files,
        endpoint_count=len(contract.endpoints) if contract is not None else None,
        component_count=len(system.array("core_components")) if system.exists else None,
    )


def _tally_lines(heading: str, total: int, tally: StatusTally) -> List[str]:
    return [
        f"{heading}:",
        f"  Total: {total}",
        f"  Complete: {tally.complete}",
        f"  In Progress: {tally.in_progress}",
        f"  Incomplete: {tally.incomplete}",
        "",
    ]


def render_info(info: DocsInfo) -> str:
    """Render the report as a single block of text.

    Totals count files on disk, so a file that fails to parse still appears in
    ``Total`` but in none of the status buckets.
    """

    rule = RULE_CHAR * 50
    lines = [rule, "Project Documentation Info", rule, "", f"Documentation directory: {info.docs_dir}", ""]

    if info.prd_found:
        lines.extend(
            [
                "Project:",
                f"  Name: {info.project_name or 'Not set'}",
                f"  Features (PRD): {info.prd_feature_count}",
                "",
            ]
        )
    else:
        lines.extend(["⚠ No product-requirements.yaml found", ""])

    if info.features is not None:
        lines.extend(_tally_lines("Feature Specifications", info.feature_files, info.features))
    if info.stories is not None:
        lines.extend(_tally_lines("User Stories", info.story_files, info.stories))
    if info.flow_files is not None:
        lines.extend(["User Flows:", f"  Total: {info.flow_files}", ""])
    if info.endpoint_count is not None:
        lines.extend(["API Contracts:", f"  Endpoints: {info.endpoint_count}", ""])
    if info.component_count is not None:
        lines.extend(["System Design:", f"  Components: {info.component_count}", ""])

    lines.append(rule)
    return "\n".join(lines)
