# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs.layout",
#   "purpose": "Documentation categories, their on-disk locations, and root discovery.",
#   "sections": [
#     {
#       "id": "category",
#       "name": "Category",
#       "anchor": "class-category",
#       "kind": "class"
#     },
#     {
#       "id": "docslayout",
#       "name": "DocsLayout",
#       "anchor": "class-docslayout",
#       "kind": "class"
#     },
#     {
#       "id": "find-docs-dir",
#       "name": "find_docs_dir",
#       "anchor": "function-find-docs-dir",
#       "kind": "function"
#     },
#     {
#       "id": "resolve-docs-root",
#       "name": "resolve_docs_root",
#       "anchor": "function-resolve-docs-root",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Documentation categories, their on-disk locations, and root discovery.

A documentation root holds five single-file categories at the top level and
three multi-file categories as sub-directories::

    docs/
      product-requirements.yaml
      system-design.yaml
      api-contracts.yaml        (or api-contracts/*.yaml)
      data-plan.yaml
      design-spec.yaml
      user-flows/*.yaml
      user-stories/*.yaml
      feature-specs/*.yaml

The root is found by walking upward from the working directory; discovery
never looks at siblings or descendants.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .errors import DocsRootNotFoundError
from .records import YAML_SUFFIXES, find_yaml_files

__all__ = [
    "Category",
    "DocsLayout",
    "find_docs_dir",
    "resolve_docs_root",
]

logger = logging.getLogger(__name__)


class Category(str, Enum):
    """The eight fixed documentation kinds."""

    PRD = "product-requirements"
    USER_FLOWS = "user-flows"
    USER_STORIES = "user-stories"
    FEATURE_SPECS = "feature-specs"
    SYSTEM_DESIGN = "system-design"
    API_CONTRACTS = "api-contracts"
    DATA_PLAN = "data-plan"
    DESIGN_SPEC = "design-spec"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_directory(self) -> bool:
        return self in _DIRECTORY_CATEGORIES

    @property
    def template_type(self) -> str:
        """Name accepted by ``pdocs template`` for this category."""

        return _TEMPLATE_TYPES[self]


_LABELS = {
    Category.PRD: "Product Requirements Document",
    Category.USER_FLOWS: "User Flows",
    Category.USER_STORIES: "User Stories",
    Category.FEATURE_SPECS: "Feature Specifications",
    Category.SYSTEM_DESIGN: "System Design",
    Category.API_CONTRACTS: "API Contracts",
    Category.DATA_PLAN: "Data Plan",
    Category.DESIGN_SPEC: "Design Specification",
}

_DIRECTORY_CATEGORIES = frozenset(
    {Category.USER_FLOWS, Category.USER_STORIES, Category.FEATURE_SPECS}
)

_TEMPLATE_TYPES = {
    Category.PRD: "product-requirements",
    Category.USER_FLOWS: "user-flow",
    Category.USER_STORIES: "user-story",
    Category.FEATURE_SPECS: "feature-spec",
    Category.SYSTEM_DESIGN: "system-design",
    Category.API_CONTRACTS: "api-contracts",
    Category.DATA_PLAN: "data-plan",
    Category.DESIGN_SPEC: "design-spec",
}


@dataclass(frozen=True)
class DocsLayout:
    """Resolved locations of every category under one documentation root."""

    root: Path

    def path_for(self, category: Category) -> Path:
        """Return the expected location of ``category``.

        Single-file categories prefer an existing ``.yaml`` file, then an
        existing ``.yml`` file, and otherwise report the ``.yaml`` name.
        """

        if category.is_directory:
            return self.root / category.value
        for suffix in YAML_SUFFIXES:
            candidate = self.root / f"{category.value}{suffix}"
            if candidate.is_file():
                return candidate
        return self.root / f"{category.value}{YAML_SUFFIXES[0]}"

    def exists(self, category: Category) -> bool:
        if category is Category.API_CONTRACTS and self.api_contracts_dir.is_dir():
            return True
        path = self.path_for(category)
        return path.is_dir() if category.is_directory else path.is_file()

    def files(self, category: Category) -> List[Path]:
        """Return the YAML sources backing ``category`` (possibly empty)."""

        if category is Category.API_CONTRACTS:
            return self.api_contract_sources()
        if category.is_directory:
            return find_yaml_files(self.path_for(category))
        path = self.path_for(category)
        return [path] if path.is_file() else []

    @property
    def api_contracts_dir(self) -> Path:
        return self.root / Category.API_CONTRACTS.value

    def api_contract_sources(self) -> List[Path]:
        """Return the single contract file, or every fragment in ``api-contracts/``."""

        single = self.path_for(Category.API_CONTRACTS)
        if single.is_file():
            return [single]
        return find_yaml_files(self.api_contracts_dir)

    @property
    def prd_file(self) -> Path:
        return self.path_for(Category.PRD)

    @property
    def system_design_file(self) -> Path:
        return self.path_for(Category.SYSTEM_DESIGN)

    @property
    def api_contracts_file(self) -> Path:
        return self.path_for(Category.API_CONTRACTS)

    @property
    def flows_dir(self) -> Path:
        return self.path_for(Category.USER_FLOWS)

    @property
    def stories_dir(self) -> Path:
        return self.path_for(Category.USER_STORIES)

    @property
    def features_dir(self) -> Path:
        return self.path_for(Category.FEATURE_SPECS)


def find_docs_dir(start: Optional[Path] = None, marker: str = "docs") -> Optional[Path]:
    """Walk upward from ``start`` looking for a ``marker`` sub-directory.

    Args:
        start: Directory to begin from; defaults to the current working directory.
        marker: Folder name identifying the documentation root.

    Returns:
        Absolute path of the first ``marker`` directory found, or ``None`` once
        the filesystem root is reached. The filesystem root itself is not searched.
    """

    current = (start or Path.cwd()).resolve()
    while current != Path(current.anchor):
        candidate = current / marker
        if candidate.is_dir():
            logger.debug("Found documentation root at %s", candidate)
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    logger.debug("No %s/ directory above %s", marker, start or Path.cwd())
    return None


def resolve_docs_root(marker: str = "docs", start: Optional[Path] = None) -> DocsLayout:
    """Return the :class:`DocsLayout` for the discovered root.

    Raises:
        DocsRootNotFoundError: If no ``marker`` directory exists above ``start``.
    """

    found = find_docs_dir(start, marker)
    if found is None:
        raise DocsRootNotFoundError(marker, start=start)
    return DocsLayout(found)
