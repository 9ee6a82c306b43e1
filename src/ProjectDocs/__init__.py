# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs",
#   "purpose": "Package initialization for ProjectDocs",
#   "sections": [
#     {
#       "id": "getattr",
#       "name": "__getattr__",
#       "anchor": "function-getattr",
#       "kind": "function"
#     },
#     {
#       "id": "dir",
#       "name": "__dir__",
#       "anchor": "function-dir",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Public API for ``pdocs``, the YAML project documentation toolkit.

The facade re-exports the entry points library callers need to validate,
list and render a ``docs/`` tree without going through the CLI. Attributes
are imported lazily so ``import ProjectDocs`` stays cheap for ``--version``.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple

__version__ = "1.0.0"

_EXPORTS: Dict[str, Tuple[str, str]] = {
    "DocsLayout": ("ProjectDocs.layout", "DocsLayout"),
    "find_docs_dir": ("ProjectDocs.layout", "find_docs_dir"),
    "resolve_docs_root": ("ProjectDocs.layout", "resolve_docs_root"),
    "load_yaml": ("ProjectDocs.records", "load_yaml"),
    "find_yaml_files": ("ProjectDocs.records", "find_yaml_files"),
    "run_checks": ("ProjectDocs.checks", "run_checks"),
    "CheckResult": ("ProjectDocs.checks", "CheckResult"),
    "list_documents": ("ProjectDocs.listing", "list_documents"),
    "ListOptions": ("ProjectDocs.listing", "ListOptions"),
    "generate_docs": ("ProjectDocs.generate", "generate_docs"),
    "collect_info": ("ProjectDocs.info", "collect_info"),
    "read_template": ("ProjectDocs.doc_templates", "read_template"),
    "ProjectDocsError": ("ProjectDocs.errors", "ProjectDocsError"),
    "ProjectDocsSettings": ("ProjectDocs.settings", "ProjectDocsSettings"),
}

__all__ = ["__version__", *_EXPORTS]


def __getattr__(name: str) -> Any:
    """Lazily import public exports on first access."""

    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
    module_name, attribute = target
    value = getattr(import_module(module_name), attribute)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    """Expose lazily-populated attributes in ``dir()`` results."""

    return sorted(set(globals()) | set(_EXPORTS))
