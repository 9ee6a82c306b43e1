# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs.models",
#   "purpose": "Typed views over feature, story, flow, PRD and API contract records.",
#   "sections": [
#     {"id": "status", "name": "Status Helpers", "anchor": "STA", "kind": "helpers"},
#     {"id": "prd", "name": "PRD Features", "anchor": "PRD", "kind": "api"},
#     {"id": "features", "name": "FeatureRecord", "anchor": "FEA", "kind": "api"},
#     {"id": "apis", "name": "ApiEndpoint & ApiContract", "anchor": "API", "kind": "api"},
#     {"id": "stories", "name": "StoryRecord", "anchor": "STO", "kind": "api"},
#     {"id": "flows", "name": "FlowRecord", "anchor": "FLO", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Typed views over feature, story, flow, PRD and API contract records.

Each dataclass is built from a :class:`~ProjectDocs.records.Document` through
the field accessors, so a malformed file yields a record full of defaults
rather than an exception. Files that fail to parse at all are skipped by the
``load_*`` helpers. The listing, generation and info commands all share these
views.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .layout import Category, DocsLayout
from .records import Document, get_string, load_document

__all__ = [
    "STATUS_COMPLETE",
    "STATUS_IN_PROGRESS",
    "STATUS_INCOMPLETE",
    "HTTP_METHODS",
    "status_bucket",
    "StatusTally",
    "PrdFeature",
    "prd_features",
    "prd_feature_ids",
    "FeatureRecord",
    "SpecApiRef",
    "ApiEndpoint",
    "ApiContract",
    "endpoint_anchor",
    "StoryRecord",
    "FlowRecord",
    "load_features",
    "load_stories",
    "load_flows",
    "load_api_contract",
]

STATUS_COMPLETE = "complete"
STATUS_IN_PROGRESS = "in-progress"
STATUS_INCOMPLETE = "incomplete"

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options", "trace")

_TITLE_PREFIX_RE = re.compile(r"^Technical Specification - ")
_ANCHOR_STRIP_RE = re.compile(r"[^a-z0-9]")
_GENERIC_FLOW_TITLE = "User Flows"


# --- Status Helpers ---


def status_bucket(status: str) -> str:
    """Map a raw status onto one of the three known values.

    Unrecognised values count as incomplete.
    """

    if status in (STATUS_COMPLETE, STATUS_IN_PROGRESS):
        return status
    return STATUS_INCOMPLETE


@dataclass(frozen=True)
class StatusTally:
    """Counts of records per status bucket."""

    complete: int = 0
    in_progress: int = 0
    incomplete: int = 0

    @classmethod
    def from_statuses(cls, statuses: Iterable[str]) -> "StatusTally":
        buckets = [status_bucket(status) for status in statuses]
        return cls(
            complete=buckets.count(STATUS_COMPLETE),
            in_progress=buckets.count(STATUS_IN_PROGRESS),
            incomplete=buckets.count(STATUS_INCOMPLETE),
        )

    @property
    def total(self) -> int:
        return self.complete + self.in_progress + self.incomplete


# --- PRD Features ---


@dataclass(frozen=True)
class PrdFeature:
    id: str
    description: str = ""
    name: str = ""


def prd_features(prd: Document) -> List[PrdFeature]:
    """Return the PRD's declared features in document order.

    Entries may be mappings with ``id``/``description``/``name`` keys or bare
    identifier strings; anything else is ignored.
    """

    features: List[PrdFeature] = []
    for entry in prd.array("features"):
        if isinstance(entry, Mapping):
            feature_id = get_string(entry, "id")
            if feature_id:
                features.append(
                    PrdFeature(
                        id=feature_id,
                        description=get_string(entry, "description"),
                        name=get_string(entry, "name"),
                    )
                )
        elif isinstance(entry, str) and entry.strip():
            features.append(PrdFeature(id=entry.strip()))
    return features


def prd_feature_ids(prd: Document) -> List[str]:
    """Return unique PRD feature identifiers, preserving first occurrence order."""

    seen: Dict[str, None] = {}
    for feature in prd_features(prd):
        seen.setdefault(feature.id, None)
    return list(seen)


# --- FeatureRecord ---


@dataclass(frozen=True)
class SpecApiRef:
    """An endpoint named inside a feature spec's ``detailed_design.apis``."""

    method: str
    endpoint: str


@dataclass(frozen=True)
class FeatureRecord:
    file: Path
    feature_id: str
    title: str
    status: str
    summary: str
    progress: float
    core_logic: str = ""
    apis: Tuple[SpecApiRef, ...] = ()

    @classmethod
    def from_document(cls, doc: Document, path: Path) -> "FeatureRecord":
        title = _TITLE_PREFIX_RE.sub("", doc.string("title") or path.stem)
        apis: List[SpecApiRef] = []
        for entry in doc.child("detailed_design").array("apis"):
            method = get_string(entry, "method")
            endpoint = get_string(entry, "endpoint")
            if method and endpoint:
                apis.append(SpecApiRef(method=method.upper(), endpoint=endpoint))
        return cls(
            file=path,
            feature_id=doc.string("feature_id"),
            title=title,
            status=doc.string("status") or STATUS_INCOMPLETE,
            summary=doc.string("summary"),
            progress=doc.child("implementation_status").number("progress"),
            core_logic=doc.nested_string("functional_overview", "core_logic"),
            apis=tuple(apis),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feature_id": self.feature_id,
            "title": self.title,
            "status": self.status,
            "progress": self.progress,
            "summary": self.summary,
            "file": str(self.file),
        }


# --- ApiEndpoint & ApiContract ---


def endpoint_anchor(method: str, path: str) -> str:
    """Return the Markdown anchor for an endpoint.

    Examples:
        >>> endpoint_anchor("GET", "/users/{id}")
        'getusersid'
    """

    return _ANCHOR_STRIP_RE.sub("", f"{method}{path}".lower())


@dataclass(frozen=True)
class ApiEndpoint:
    method: str
    path: str
    summary: str
    description: str = ""
    feature_id: str = ""
    responses: Tuple[Tuple[str, str], ...] = ()

    @property
    def anchor(self) -> str:
        return endpoint_anchor(self.method, self.path)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "method": self.method,
            "path": self.path,
            "summary": self.summary,
        }
        if self.feature_id:
            payload["feature_id"] = self.feature_id
        return payload


def _parse_endpoints(paths: Mapping[str, Any]) -> List[ApiEndpoint]:
    endpoints: List[ApiEndpoint] = []
    for path, operations in paths.items():
        if not isinstance(operations, Mapping):
            continue
        for method, details in operations.items():
            if str(method).lower() not in HTTP_METHODS:
                continue
            details = details if isinstance(details, Mapping) else {}
            responses = details.get("responses")
            response_rows: List[Tuple[str, str]] = []
            if isinstance(responses, Mapping):
                for code, response in responses.items():
                    response_rows.append((str(code), get_string(response, "description")))
            endpoints.append(
                ApiEndpoint(
                    method=str(method).upper(),
                    path=str(path),
                    summary=get_string(details, "summary") or "No description",
                    description=get_string(details, "description"),
                    feature_id=get_string(details, "x-feature-id")
                    or get_string(details, "feature_id"),
                    responses=tuple(response_rows),
                )
            )
    return endpoints


@dataclass(frozen=True)
class ApiContract:
    """Endpoints merged from the contract file or contract directory."""

    title: str
    version: str
    sources: Tuple[Path, ...]
    path_count: int
    endpoints: Tuple[ApiEndpoint, ...] = field(default_factory=tuple)


def load_api_contract(layout: DocsLayout) -> Optional[ApiContract]:
    """Load the API contract for ``layout``.

    Returns:
        The merged contract, or ``None`` when no contract source exists or
        none of them parse.
    """

    documents = [load_document(path) for path in layout.api_contract_sources()]
    documents = [doc for doc in documents if doc.exists]
    if not documents:
        return None

    info = documents[0].child("info")
    paths: Dict[str, Any] = {}
    for doc in documents:
        paths.update(doc.mapping("paths"))
    return ApiContract(
        title=info.string("title") or "API",
        version=info.string("version") or "1.0.0",
        sources=tuple(doc.path for doc in documents if doc.path is not None),
        path_count=len(paths),
        endpoints=tuple(_parse_endpoints(paths)),
    )


# --- StoryRecord ---


@dataclass(frozen=True)
class StoryRecord:
    file: Path
    story_id: str
    title: str
    feature_id: str
    status: str

    @classmethod
    def from_document(cls, doc: Document, path: Path) -> "StoryRecord":
        return cls(
            file=path,
            story_id=doc.string("story_id"),
            title=doc.string("title") or path.stem,
            feature_id=doc.string("feature_id"),
            status=doc.string("status") or STATUS_INCOMPLETE,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "story_id": self.story_id,
            "title": self.title,
            "feature_id": self.feature_id,
            "status": self.status,
            "file": str(self.file),
        }


# --- FlowRecord ---


@dataclass(frozen=True)
class FlowRecord:
    file: Path
    title: str
    key_personas: Tuple[str, ...]
    primary_count: int
    secondary_count: int

    @property
    def total_flows(self) -> int:
        return self.primary_count + self.secondary_count

    @classmethod
    def from_document(cls, doc: Document, path: Path) -> "FlowRecord":
        title = doc.string("title") or path.stem
        if title == _GENERIC_FLOW_TITLE:
            title = path.stem
        return cls(
            file=path,
            title=title,
            key_personas=tuple(str(persona) for persona in doc.array("key_personas")),
            primary_count=len(doc.array("primary_flows")),
            secondary_count=len(doc.array("secondary_flows")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "primary_flows": self.primary_count,
            "secondary_flows": self.secondary_count,
            "personas": ",".join(self.key_personas),
            "file": str(self.file),
        }


def _load_records(paths: Sequence[Path], factory) -> list:
    records = []
    for path in paths:
        doc = load_document(path)
        if doc.exists:
            records.append(factory(doc, path))
    return records


def load_features(layout: DocsLayout) -> List[FeatureRecord]:
    return _load_records(layout.files(Category.FEATURE_SPECS), FeatureRecord.from_document)


def load_stories(layout: DocsLayout) -> List[StoryRecord]:
    return _load_records(layout.files(Category.USER_STORIES), StoryRecord.from_document)


def load_flows(layout: DocsLayout) -> List[FlowRecord]:
    return _load_records(layout.files(Category.USER_FLOWS), FlowRecord.from_document)
