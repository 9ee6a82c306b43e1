# === NAVMAP v1 ===
# {
#   "module": "tests.project_docs.test_records",
#   "purpose": "Loader, accessor and directory scanner behaviour on well-formed and hostile input.",
#   "sections": [
#     {"id": "loader", "name": "load_yaml", "anchor": "LDR", "kind": "tests"},
#     {"id": "accessors", "name": "Field Accessors", "anchor": "ACC", "kind": "tests"},
#     {"id": "properties", "name": "Accessor Properties", "anchor": "PRP", "kind": "tests"},
#     {"id": "scanner", "name": "find_yaml_files", "anchor": "SCN", "kind": "tests"}
#   ]
# }
# === /NAVMAP ===

"""Loader, accessor and directory scanner behaviour on well-formed and hostile input.

Every consumer in the package relies on these helpers never raising, so the
tests concentrate on the "absent" paths: missing files, malformed YAML,
non-mapping documents, and fields holding the wrong type.
"""

from __future__ import annotations

from pathlib import Path

import pytest

try:
    import hypothesis
    from hypothesis import strategies as st  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    pytest.skip("hypothesis is required for these tests", allow_module_level=True)

from ProjectDocs.records import (
    Document,
    find_yaml_files,
    get_array,
    get_mapping,
    get_nested_string,
    get_number,
    get_string,
    load_document,
    load_yaml,
)

given = hypothesis.given

# --- load_yaml ---


def test_load_yaml_returns_mapping(tmp_path: Path) -> None:
    path = tmp_path / "prd.yaml"
    path.write_text("project_name: Foo\nfeatures:\n  - id: F-01\n", encoding="utf-8")

    assert load_yaml(path) == {"project_name": "Foo", "features": [{"id": "F-01"}]}


def test_load_yaml_missing_file_is_none(tmp_path: Path) -> None:
    assert load_yaml(tmp_path / "absent.yaml") is None


def test_load_yaml_malformed_is_none(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("key: [unclosed\n  - : :\n", encoding="utf-8")

    assert load_yaml(path) is None


@pytest.mark.parametrize("body", ["", "- a\n- b\n", "just a string\n", "42\n"])
def test_load_yaml_non_mapping_is_none(tmp_path: Path, body: str) -> None:
    path = tmp_path / "doc.yaml"
    path.write_text(body, encoding="utf-8")

    assert load_yaml(path) is None


def test_load_yaml_directory_is_none(tmp_path: Path) -> None:
    assert load_yaml(tmp_path) is None


def test_load_document_wraps_failures(tmp_path: Path) -> None:
    doc = load_document(tmp_path / "absent.yaml")

    assert not doc.exists
    assert doc.string("title") == ""
    assert doc.path == tmp_path / "absent.yaml"


# --- Field Accessors ---


def test_get_string_type_mismatch() -> None:
    record = {"title": 42, "name": "Login"}

    assert get_string(record, "title") == ""
    assert get_string(record, "name") == "Login"
    assert get_string(None, "name") == ""


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (40, 40),
        (2.5, 2.5),
        (float("nan"), 0),
        (float("inf"), 0),
        (float("-inf"), 0),
        ("75", 75),
        ("  12% done", 12),
        ("-3", -3),
        ("abc", 0),
        (True, 0),
        (None, 0),
        ([1], 0),
    ],
)
def test_get_number(value, expected) -> None:
    assert get_number({"progress": value}, "progress") == expected


def test_get_array_and_mapping_defaults() -> None:
    record = {"items": "not a list", "meta": ["not", "a", "dict"]}

    assert get_array(record, "items") == []
    assert get_mapping(record, "meta") == {}
    assert get_array(record, "missing") == []
    assert get_mapping(record, "missing") == {}


def test_get_nested_string() -> None:
    record = {"overview": {"goal": "Ship"}, "flat": "value"}

    assert get_nested_string(record, "overview", "goal") == "Ship"
    assert get_nested_string(record, "overview", "summary") == ""
    assert get_nested_string(record, "flat", "goal") == ""


def test_document_child_and_has_content() -> None:
    doc = Document(
        {
            "implementation_status": {"progress": "60"},
            "tech_stack": {"language": "Python"},
            "design_goals": [],
            "quoted": '""',
            "blank": "   ",
        }
    )

    assert doc.child("implementation_status").number("progress") == 60
    assert not doc.child("missing").exists
    assert doc.has_content("tech_stack")
    assert not doc.has_content("design_goals")
    assert not doc.has_content("quoted")
    assert not doc.has_content("blank")
    assert not doc.has_content("absent")


# --- Accessor Properties ---

_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.floats(allow_nan=False),
    st.text(max_size=20),
    st.lists(st.integers(), max_size=3),
    st.dictionaries(st.text(max_size=5), st.integers(), max_size=3),
)


@given(st.dictionaries(st.text(max_size=8), _scalars, max_size=6), st.text(max_size=8))
def test_accessors_never_raise_and_return_declared_types(record, key) -> None:
    assert isinstance(get_string(record, key), str)
    assert isinstance(get_number(record, key), (int, float))
    assert not isinstance(get_number(record, key), bool)
    assert isinstance(get_array(record, key), list)
    assert isinstance(get_mapping(record, key), dict)


@given(st.text(max_size=8))
def test_absent_record_yields_zero_values(key) -> None:
    doc = Document(None)

    assert (doc.string(key), doc.number(key), doc.array(key), doc.mapping(key)) == ("", 0, [], {})


@given(st.integers(min_value=-10_000, max_value=10_000), st.text(alphabet="% abc", max_size=5))
def test_numeric_prefix_parsing(number, suffix) -> None:
    assert get_number({"n": f"{number}{suffix}"}, "n") == number


# --- find_yaml_files ---


def test_find_yaml_files_missing_directory(tmp_path: Path) -> None:
    assert find_yaml_files(tmp_path / "nope") == []


def test_find_yaml_files_on_regular_file(tmp_path: Path) -> None:
    path = tmp_path / "file.yaml"
    path.write_text("a: 1\n", encoding="utf-8")

    assert find_yaml_files(path) == []


def test_find_yaml_files_filters_and_sorts(tmp_path: Path) -> None:
    for name in ["b.yml", "a.yaml", "notes.txt", "c.YAML.bak"]:
        (tmp_path / name).write_text("x: 1\n", encoding="utf-8")
    (tmp_path / "nested.yaml").mkdir()
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "deep.yaml").write_text("x: 1\n", encoding="utf-8")

    found = find_yaml_files(tmp_path)

    assert [p.name for p in found] == ["a.yaml", "b.yml"]
    assert all(p.is_absolute() for p in found)
