# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs.doc_templates",
#   "purpose": "Bundled documentation templates and CLAUDE.md installation.",
#   "sections": [
#     {"id": "registry", "name": "Template Registry", "anchor": "REG", "kind": "constants"},
#     {"id": "read", "name": "read_template", "anchor": "READ", "kind": "api"},
#     {"id": "install", "name": "ensure_claude_doc", "anchor": "INST", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Bundled documentation templates and CLAUDE.md installation.

Templates ship as package data in ``ProjectDocs/templates`` and are read with
:mod:`importlib.resources`; ``templates_dir`` (``PDOCS_TEMPLATES_DIR``) points
at a directory holding replacements with the same file names.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import InvalidChoiceError, TemplateResourceError

__all__ = [
    "TEMPLATE_FILES",
    "TEMPLATE_ALIASES",
    "TEMPLATE_GROUPS",
    "TEMPLATE_TYPES",
    "CLAUDE_DOC",
    "canonical_template_type",
    "template_path",
    "read_template",
    "render_template_help",
    "InstallOutcome",
    "ensure_claude_doc",
]

logger = logging.getLogger(__name__)

# --- Template Registry ---

TEMPLATE_FILES: Dict[str, str] = {
    "product-requirements": "product-requirements.yaml",
    "system-design": "system-design.yaml",
    "api-contracts": "api-contract.yaml",
    "data-plan": "data-plan.yaml",
    "design-spec": "design-spec.yaml",
    "user-flow": "user-flow.yaml",
    "user-story": "user-story.yaml",
    "feature-spec": "feature-spec.yaml",
    "requirements": "requirements.yaml",
    "investigation-topic": "investigation-topic.yaml",
    "plan": "plan.yaml",
    "epic-plan": "epic-plan.yaml",
    "claude": "CLAUDE-template.md",
}

TEMPLATE_ALIASES: Dict[str, str] = {"api-contract": "api-contracts"}

TEMPLATE_TYPES: Tuple[str, ...] = tuple(TEMPLATE_FILES)

TEMPLATE_GROUPS: Tuple[Tuple[str, Tuple[Tuple[str, str], ...]], ...] = (
    (
        "Root documents",
        (
            ("product-requirements", "Product Requirements Document"),
            ("system-design", "System Design Document"),
            ("api-contracts", "API Contracts (OpenAPI)"),
            ("data-plan", "Data Plan (Analytics & Events)"),
            ("design-spec", "Design Specification"),
        ),
    ),
    (
        "Multi-file documents",
        (
            ("user-flow", "User Flow Template"),
            ("user-story", "User Story Template"),
            ("feature-spec", "Feature Specification Template"),
            ("requirements", "Feature Requirements Template"),
        ),
    ),
    (
        "Planning & Investigation",
        (
            ("investigation-topic", "Investigation/Context Template"),
            ("plan", "Implementation Plan Template"),
            ("epic-plan", "Epic Plan Template"),
        ),
    ),
    ("Meta", (("claude", "CLAUDE.md Quick Reference"),)),
)

CLAUDE_DOC = "CLAUDE.md"


# --- read_template ---


def canonical_template_type(template_type: Optional[str]) -> str:
    """Resolve aliases, raising :class:`InvalidChoiceError` for unknown types."""

    name = TEMPLATE_ALIASES.get(template_type or "", template_type or "")
    if name not in TEMPLATE_FILES:
        raise InvalidChoiceError("template type", template_type, TEMPLATE_TYPES)
    return name


def template_path(template_type: str, templates_dir: Optional[Path] = None):
    """Return a traversable handle for the template's resource file."""

    filename = TEMPLATE_FILES[canonical_template_type(template_type)]
    if templates_dir is not None:
        return Path(templates_dir) / filename
    return resources.files(__package__).joinpath("templates").joinpath(filename)


def read_template(template_type: Optional[str], templates_dir: Optional[Path] = None) -> str:
    """Return the verbatim text of a template.

    Raises:
        InvalidChoiceError: If ``template_type`` is missing or unknown.
        TemplateResourceError: If the resource is absent or unreadable.
    """

    resource = template_path(canonical_template_type(template_type), templates_dir)
    if not resource.is_file():
        raise TemplateResourceError(
            f"Template file not found: {resource}", path=Path(str(resource))
        )
    try:
        return resource.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateResourceError(
            f"Failed to read template file: {exc}", path=Path(str(resource))
        ) from exc


def render_template_help() -> List[str]:
    lines = ["Valid template types:"]
    for index, (group, entries) in enumerate(TEMPLATE_GROUPS):
        if index:
            lines.append("")
        lines.append(f"  {group}:")
        lines.extend(f"    {name:<23} {description}" for name, description in entries)
    return lines


# --- ensure_claude_doc ---


@dataclass(frozen=True)
class InstallOutcome:
    """Result of :func:`ensure_claude_doc`; ``message`` is empty when nothing happened."""

    installed: bool
    message: str = ""
    warning: bool = False


def ensure_claude_doc(docs_dir: Path, templates_dir: Optional[Path] = None) -> InstallOutcome:
    """Copy the ``claude`` template to ``docs_dir/CLAUDE.md`` when it is absent.

    Never raises: a missing template or a failed write is reported as a
    warning outcome so the calling command carries on.
    """

    target = docs_dir / CLAUDE_DOC
    if target.exists():
        return InstallOutcome(installed=False)

    try:
        content = read_template("claude", templates_dir)
    except TemplateResourceError as exc:
        logger.warning("CLAUDE.md template unavailable: %s", exc)
        return InstallOutcome(
            installed=False,
            message="Warning: CLAUDE.md template not found, skipping auto-install",
            warning=True,
        )

    try:
        target.write_text(content, encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to write %s: %s", target, exc)
        return InstallOutcome(
            installed=False, message=f"Warning: Failed to install CLAUDE.md: {exc}", warning=True
        )

    logger.info("Installed %s", target)
    return InstallOutcome(installed=True, message="✓ Installed CLAUDE.md in docs/ directory")
