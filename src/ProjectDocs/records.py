# === NAVMAP v1 ===
# {
#   "module": "ProjectDocs.records",
#   "purpose": "Load YAML documentation records and read fields with typed defaults.",
#   "sections": [
#     {
#       "id": "load-yaml",
#       "name": "load_yaml",
#       "anchor": "function-load-yaml",
#       "kind": "function"
#     },
#     {
#       "id": "get-typed",
#       "name": "get_typed",
#       "anchor": "function-get-typed",
#       "kind": "function"
#     },
#     {
#       "id": "document",
#       "name": "Document",
#       "anchor": "class-document",
#       "kind": "class"
#     },
#     {
#       "id": "find-yaml-files",
#       "name": "find_yaml_files",
#       "anchor": "function-find-yaml-files",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Load YAML documentation records and read fields with typed defaults.

Every command in the tool consumes loosely structured YAML written by people,
so nothing here is allowed to raise on bad input. :func:`load_yaml` turns I/O
and parser failures into ``None``; the accessor family turns missing or
mistyped fields into zero values (``""``, ``0``, ``[]``, ``{}``); and
:func:`find_yaml_files` treats an absent directory as an empty one. Higher
layers decide whether an empty value deserves a warning.
"""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

import yaml

__all__ = [
    "Record",
    "YAML_SUFFIXES",
    "load_yaml",
    "get_typed",
    "get_string",
    "get_number",
    "get_array",
    "get_mapping",
    "get_nested_string",
    "Document",
    "load_document",
    "find_yaml_files",
]

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Number = Union[int, float]
T = TypeVar("T")

YAML_SUFFIXES: Tuple[str, ...] = (".yaml", ".yml")

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def load_yaml(path: Union[str, Path]) -> Optional[Record]:
    """Parse ``path`` as a YAML mapping.

    Args:
        path: File to read.

    Returns:
        The parsed mapping, or ``None`` when the file cannot be read, fails to
        parse, or does not contain a mapping at the top level. Callers treat
        ``None`` exactly like a missing file.
    """

    try:
        text = Path(path).read_text(encoding="utf-8")
        parsed = yaml.safe_load(text)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        logger.debug("Unable to load %s: %s", path, exc)
        return None
    if not isinstance(parsed, dict):
        logger.debug("Ignoring %s: top-level value is %s", path, type(parsed).__name__)
        return None
    return parsed


def get_typed(
    record: Optional[Mapping[str, Any]],
    key: str,
    expected: Union[Type[T], Tuple[type, ...]],
    default: T,
) -> T:
    """Return ``record[key]`` when it is an instance of ``expected``, else ``default``."""

    if not isinstance(record, Mapping):
        return default
    value = record.get(key)
    if isinstance(value, expected):
        return value  # type: ignore[return-value]
    return default


def get_string(record: Optional[Mapping[str, Any]], key: str) -> str:
    """Return the string stored at ``key`` or ``""``."""

    return get_typed(record, key, str, "")


def get_number(record: Optional[Mapping[str, Any]], key: str) -> Number:
    """Return a numeric field, parsing base-10 integer prefixes out of strings.

    Booleans are not treated as numbers even though ``bool`` subclasses ``int``.
    Non-finite floats (``.nan``, ``.inf``) degrade to ``0``.
    """

    if not isinstance(record, Mapping):
        return 0
    value = record.get(key)
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match:
            return int(match.group(1))
    return 0


def get_array(record: Optional[Mapping[str, Any]], key: str) -> List[Any]:
    """Return the sequence stored at ``key`` or a fresh empty list."""

    return get_typed(record, key, list, [])


def get_mapping(record: Optional[Mapping[str, Any]], key: str) -> Dict[str, Any]:
    """Return the nested mapping stored at ``key`` or a fresh empty dict."""

    return get_typed(record, key, dict, {})


def get_nested_string(record: Optional[Mapping[str, Any]], parent: str, child: str) -> str:
    """Return ``record[parent][child]`` when both levels are present and typed."""

    return get_string(get_mapping(record, parent), child)


class Document:
    """Read-only view over an optionally parsed record.

    Wraps the module-level accessors so call sites can read fields without
    first checking whether the file parsed.

    Examples:
        >>> doc = Document({"title": "Login", "progress": "40"})
        >>> doc.string("title"), doc.number("progress"), doc.array("steps")
        ('Login', 40, [])
        >>> Document(None).string("title")
        ''
    """

    __slots__ = ("data", "path")

    def __init__(self, data: Optional[Mapping[str, Any]], path: Optional[Path] = None) -> None:
        self.data = data if isinstance(data, Mapping) else None
        self.path = path

    @property
    def exists(self) -> bool:
        return self.data is not None

    def string(self, key: str) -> str:
        return get_string(self.data, key)

    def number(self, key: str) -> Number:
        return get_number(self.data, key)

    def array(self, key: str) -> List[Any]:
        return get_array(self.data, key)

    def mapping(self, key: str) -> Dict[str, Any]:
        return get_mapping(self.data, key)

    def nested_string(self, parent: str, child: str) -> str:
        return get_nested_string(self.data, parent, child)

    def child(self, key: str) -> "Document":
        """Return a :class:`Document` over the nested mapping at ``key``."""

        return Document(self.mapping(key) or None, self.path)

    def has_content(self, key: str) -> bool:
        """Return ``True`` when ``key`` holds a non-empty value of any type."""

        if self.data is None:
            return False
        value = self.data.get(key)
        if value is None:
            return False
        if isinstance(value, str):
            stripped = value.strip()
            return bool(stripped) and stripped != '""'
        if isinstance(value, (list, tuple, dict)):
            return bool(value)
        return True

    def __repr__(self) -> str:
        return f"Document(path={self.path!s}, exists={self.exists})"


def load_document(path: Union[str, Path]) -> Document:
    """Load ``path`` into a :class:`Document`; unreadable files yield an empty one."""

    resolved = Path(path)
    return Document(load_yaml(resolved), resolved)


def find_yaml_files(directory: Union[str, Path]) -> List[Path]:
    """List YAML files directly inside ``directory``.

    Args:
        directory: Folder to scan. Sub-directories are not descended into.

    Returns:
        Absolute paths of regular files ending in ``.yaml`` or ``.yml``,
        sorted lexicographically. Missing or unreadable directories yield
        an empty list.
    """

    folder = Path(directory)
    try:
        entries = list(folder.iterdir())
    except OSError as exc:
        logger.debug("Skipping directory %s: %s", folder, exc)
        return []
    files = [
        entry.absolute()
        for entry in entries
        if entry.name.endswith(YAML_SUFFIXES) and entry.is_file()
    ]
    return sorted(files, key=str)
