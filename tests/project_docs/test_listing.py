"""Filtering, sorting and output formats of ``pdocs list``."""

from __future__ import annotations

import json
import shutil

import pytest

from ProjectDocs.errors import InvalidChoiceError, SourceMissingError
from ProjectDocs.listing import (
    ListOptions,
    filter_features,
    list_documents,
    render_list_type_help,
    sort_features,
)
from ProjectDocs.models import load_features


@pytest.fixture
def features_layout(layout, yaml_writer):
    """Three extra features covering every status bucket."""

    yaml_writer(
        layout.features_dir / "F-03-search.yaml",
        {"feature_id": "F-03", "title": "Search", "status": "in-progress", "summary": "s"},
    )
    yaml_writer(
        layout.features_dir / "F-02-export.yaml",
        {
            "feature_id": "F-02",
            "title": "Technical Specification - Export",
            "summary": "e",
            "implementation_status": {"progress": "40"},
        },
    )
    yaml_writer(
        layout.features_dir / "F-04-legacy.yaml",
        {"feature_id": "F-04", "title": "Legacy", "status": "deprecated", "summary": "l"},
    )
    return layout


class TestFeatures:
    def test_default_hides_complete(self, features_layout) -> None:
        lines = list_documents(features_layout, "features", ListOptions(fmt="ids"))

        assert lines == ["F-02", "F-03", "F-04"]

    def test_all_includes_complete(self, features_layout) -> None:
        lines = list_documents(features_layout, "features", ListOptions(show_all=True, fmt="ids"))

        assert lines == ["F-01", "F-02", "F-03", "F-04"]

    def test_complete_status_needs_all(self, features_layout) -> None:
        hidden = list_documents(
            features_layout, "features", ListOptions(status="complete", fmt="ids")
        )
        shown = list_documents(
            features_layout, "features", ListOptions(show_all=True, status="complete", fmt="ids")
        )

        assert hidden == []
        assert shown == ["F-01"]

    @pytest.mark.parametrize("progress", [".nan", ".inf", "-.inf"])
    def test_non_finite_progress_renders_as_zero(self, layout, progress) -> None:
        (layout.features_dir / "F-09-broken.yaml").write_text(
            "feature_id: F-09\ntitle: Broken\nimplementation_status:\n"
            f"  progress: {progress}\n",
            encoding="utf-8",
        )

        summary = list_documents(layout, "features", ListOptions(show_all=True))
        (line,) = [
            entry
            for entry in list_documents(layout, "features", ListOptions(show_all=True, fmt="json"))
            if "F-09" in entry
        ]

        assert any("F-09" in row and "  0%" in row for row in summary)
        assert json.loads(line)["progress"] == 0

    def test_filtered_never_contains_complete_without_all(self, features_layout) -> None:
        features = load_features(features_layout)

        assert all(f.status != "complete" for f in filter_features(features, ListOptions()))

    def test_sort_by_title(self, features_layout) -> None:
        features = sort_features(load_features(features_layout), "title")

        assert [f.title for f in features] == ["Export", "Legacy", "Login", "Search"]

    def test_invalid_sort_field(self, features_layout) -> None:
        with pytest.raises(InvalidChoiceError) as excinfo:
            list_documents(features_layout, "features", ListOptions(sort="size"))

        assert "id" in excinfo.value.choices

    def test_summary_table(self, features_layout) -> None:
        lines = list_documents(features_layout, "features", ListOptions())
        table = lines[2]

        assert lines[0] == f"Feature Specifications in {features_layout.features_dir}"
        assert table.splitlines()[0].startswith("ID   | Title")
        assert "F-02 | Export" in table
        assert " 40%" in table
        assert "○ incomplete" in table
        assert "● in-progress" in table
        assert lines[-1] == "Found 3 matching features"

    def test_json_lines(self, features_layout) -> None:
        lines = list_documents(features_layout, "features", ListOptions(show_all=True, fmt="json"))
        payloads = [json.loads(line) for line in lines]

        assert [p["feature_id"] for p in payloads] == ["F-01", "F-02", "F-03", "F-04"]
        assert payloads[0]["title"] == "Login"
        assert payloads[0]["progress"] == 100

    def test_stats_ignore_default_hide(self, features_layout) -> None:
        lines = list_documents(features_layout, "features", ListOptions(fmt="stats"))

        assert "Total Features: 4" in lines
        assert "  Complete: 1" in lines
        assert "  In Progress: 1" in lines
        assert "  Incomplete: 2" in lines
        assert "  Complete: 25%" in lines
        assert "  Started: 50%" in lines

    def test_invalid_format(self, features_layout) -> None:
        with pytest.raises(InvalidChoiceError):
            list_documents(features_layout, "features", ListOptions(fmt="curl"))

    def test_missing_directory(self, layout) -> None:
        shutil.rmtree(layout.features_dir)

        assert list_documents(layout, "features", ListOptions()) == [
            f"No feature files found in {layout.features_dir}"
        ]


class TestApis:
    def test_summary(self, layout) -> None:
        lines = list_documents(layout, "apis", ListOptions())

        assert lines[1] == "Foo API v2.0.0"
        assert "POST   | /sessions | Create session" in lines[4]
        assert lines[-1] == "Found 2 endpoint(s)"

    def test_method_and_path_filters(self, layout) -> None:
        by_method = list_documents(layout, "apis", ListOptions(method="get", fmt="ids"))
        by_path = list_documents(layout, "apis", ListOptions(path="SESS", fmt="ids"))

        assert by_method == ["GET /health"]
        assert by_path == ["POST /sessions"]

    def test_sort_by_path(self, layout) -> None:
        lines = list_documents(layout, "apis", ListOptions(sort="path", fmt="ids"))

        assert lines == ["GET /health", "POST /sessions"]

    def test_curl(self, layout) -> None:
        lines = list_documents(
            layout, "apis", ListOptions(fmt="curl", base_url="https://api.example.com/")
        )

        assert 'curl -X POST "https://api.example.com/sessions" \\' in lines
        assert '  -H "Content-Type: application/json" \\' in lines
        assert 'curl -X GET "https://api.example.com/health"' in lines

    def test_markdown(self, layout) -> None:
        lines = list_documents(layout, "apis", ListOptions(fmt="markdown"))

        assert lines[0] == "# Foo API v2.0.0"
        assert "### POST `/sessions`" in lines

    def test_json_carries_feature_id(self, layout) -> None:
        lines = list_documents(layout, "apis", ListOptions(fmt="json", sort="path"))

        assert [json.loads(line) for line in lines] == [
            {"method": "GET", "path": "/health", "summary": "Health check"},
            {"method": "POST", "path": "/sessions", "summary": "Create session", "feature_id": "F-01"},
        ]

    def test_missing_contract(self, layout) -> None:
        layout.api_contracts_file.unlink()

        with pytest.raises(SourceMissingError) as excinfo:
            list_documents(layout, "apis", ListOptions())

        assert str(excinfo.value) == f"File '{layout.root / 'api-contracts.yaml'}' not found"


class TestStoriesAndFlows:
    def test_stories_feature_filter(self, layout, yaml_writer) -> None:
        yaml_writer(
            layout.stories_dir / "US-002.yaml",
            {"story_id": "US-002", "feature_id": "F-02", "status": "incomplete"},
        )

        assert list_documents(layout, "stories", ListOptions(feature="F-02", fmt="ids")) == [
            "US-002"
        ]

    def test_stories_hide_complete(self, layout, yaml_writer) -> None:
        yaml_writer(
            layout.stories_dir / "US-000.yaml",
            {"story_id": "US-000", "feature_id": "F-01", "status": "complete"},
        )

        assert list_documents(layout, "stories", ListOptions(fmt="ids")) == ["US-001"]

    def test_stories_summary(self, layout) -> None:
        lines = list_documents(layout, "stories", ListOptions())

        assert "US-001 | F-01    | Log in with email | ● in-progress" in lines[2]
        assert lines[-1] == "Found 1 matching stories"

    def test_flows_persona_filter(self, layout, yaml_writer) -> None:
        yaml_writer(
            layout.flows_dir / "checkout.yaml",
            {"title": "User Flows", "key_personas": ["Shopper"], "primary_flows": [{}]},
        )

        assert list_documents(layout, "flows", ListOptions(persona="shop", fmt="ids")) == [
            "checkout"
        ]
        assert list_documents(layout, "flows", ListOptions(persona="admin", fmt="ids")) == [
            "Onboarding"
        ]

    def test_flows_summary(self, layout) -> None:
        lines = list_documents(layout, "flows", ListOptions())

        assert "Onboarding | 2 flows | 2 personas" in lines[2]
        assert lines[-1] == "Found 1 flow file(s)"

    def test_flows_json(self, layout) -> None:
        (line,) = list_documents(layout, "flows", ListOptions(fmt="json"))

        payload = json.loads(line)
        assert payload["primary_flows"] == 1
        assert payload["secondary_flows"] == 1
        assert payload["personas"] == "Admin,Guest"


def test_unknown_list_type(layout) -> None:
    with pytest.raises(InvalidChoiceError) as excinfo:
        list_documents(layout, "widgets", ListOptions())

    assert str(excinfo.value) == "Invalid list type 'widgets'"


def test_list_type_help() -> None:
    lines = render_list_type_help()

    assert lines[0] == "Valid types:"
    assert "  features    List all feature specifications" in lines
    assert lines[-1] == "Usage: pdocs list <type> [options]"
