"""Markdown rendering and the ``generate`` writer."""

from __future__ import annotations

import io
import shutil
from datetime import datetime
from pathlib import Path

import pytest

from ProjectDocs.console import Reporter, make_console
from ProjectDocs.generate import (
    feature_anchor,
    generate_docs,
    group_endpoints,
    render_api_reference,
    render_architecture,
    render_features,
    render_index,
    render_overview,
)
from ProjectDocs.models import (
    ApiEndpoint,
    FeatureRecord,
    SpecApiRef,
    endpoint_anchor,
    load_api_contract,
    load_features,
)
from ProjectDocs.records import Document, load_document

FIXED_TIME = datetime(2024, 5, 17, 9, 30, 0)


@pytest.fixture
def reporter_stream():
    stream = io.StringIO()
    return Reporter(make_console(file=stream)), stream


def _endpoint(method, path, feature_id=""):
    return ApiEndpoint(method=method, path=path, summary=f"{method} {path}", feature_id=feature_id)


class TestGrouping:
    def test_endpoint_anchor(self) -> None:
        assert endpoint_anchor("GET", "/users/{id}") == "getusersid"
        assert endpoint_anchor("post", "/v1/orders/{order_id}/items") == "postv1ordersorderiditems"

    def test_groups_sorted_with_uncategorized_last(self) -> None:
        endpoints = [
            _endpoint("POST", "/b", "F-02"),
            _endpoint("GET", "/z"),
            _endpoint("GET", "/b", "F-02"),
            _endpoint("GET", "/a", "F-01"),
            _endpoint("GET", "/x", "F-99"),
        ]

        groups = group_endpoints(endpoints, {"F-01", "F-02"})

        assert [key for key, _ in groups] == ["F-01", "F-02", None]
        assert [(e.method, e.path) for e in groups[1][1]] == [("GET", "/b"), ("POST", "/b")]
        assert [e.path for e in groups[2][1]] == ["/x", "/z"]

    def test_each_endpoint_in_exactly_one_group(self) -> None:
        endpoints = [_endpoint("GET", f"/r{i}", f"F-0{i % 3}") for i in range(7)]

        groups = group_endpoints(endpoints, {"F-01"})

        assert sum(len(items) for _, items in groups) == len(endpoints)


class TestRenderers:
    def test_overview_uses_nested_fallbacks(self) -> None:
        prd = Document(
            {
                "project_name": "Foo",
                "overview": {"summary": "Nested summary", "goal": "Nested goal"},
                "features": [{"id": "F-01", "description": "Login"}, "F-02"],
            }
        )

        markdown = render_overview(prd)

        assert markdown.startswith("# Foo Overview\n")
        assert "Nested summary" in markdown
        assert "Nested goal" in markdown
        assert "- **F-01:** Login" in markdown
        assert "F-02" not in markdown

    def test_overview_defaults(self) -> None:
        markdown = render_overview(Document({}))

        assert "# Project Overview" in markdown
        assert "No summary provided" in markdown
        assert "No goal defined" in markdown

    def test_features_link_endpoints_and_declared_apis(self, layout) -> None:
        features = load_features(layout)
        contract = load_api_contract(layout)

        markdown = render_features(features, contract.endpoints)

        assert "## Table of Contents" in markdown
        assert f"- [F-01 - Login](#{feature_anchor('F-01')})" in markdown
        assert '<a id="feature-f01"></a>' in markdown
        assert "**Status:** complete" in markdown
        assert "Validate credentials and issue a session" in markdown
        assert "- [**POST** `/sessions`](api-reference.md#postsessions) - Create session" in markdown
        assert "/health" not in markdown

    def test_features_list_declared_api_missing_from_contract(self, tmp_path: Path) -> None:
        feature = FeatureRecord(
            file=tmp_path / "F-05.yaml",
            feature_id="F-05",
            title="Reports",
            status="incomplete",
            summary="",
            progress=0,
            apis=(SpecApiRef("GET", "/reports"),),
        )

        markdown = render_features([feature], [], include_toc=False)

        assert "## Table of Contents" not in markdown
        assert "- **GET** `/reports` (not in API contract)" in markdown

    def test_api_reference_groups_and_anchors(self, layout) -> None:
        contract = load_api_contract(layout)

        markdown = render_api_reference(contract, {"F-01"}, feature_titles={"F-01": "Login"})

        assert "**Foo API** - Version 2.0.0" in markdown
        assert "### F-01 - Login" in markdown
        assert "### Uncategorized" in markdown
        assert markdown.index("### F-01 - Login") < markdown.index("### Uncategorized")
        assert '<a id="postsessions"></a>' in markdown
        assert '<a id="gethealth"></a>' in markdown
        assert "  - [POST /sessions](#postsessions)" in markdown
        assert "**Feature:** [F-01](features.md#feature-f01)" in markdown
        assert "- `201`: Created" in markdown

    def test_api_reference_every_link_has_anchor(self, layout) -> None:
        features_md = render_features(load_features(layout), load_api_contract(layout).endpoints)
        api_md = render_api_reference(load_api_contract(layout), {"F-01"})

        for endpoint in load_api_contract(layout).endpoints:
            if f"api-reference.md#{endpoint.anchor}" in features_md:
                assert f'<a id="{endpoint.anchor}"></a>' in api_md

    def test_architecture(self, layout) -> None:
        markdown = render_architecture(load_document(layout.system_design_file))

        assert "Serve users reliably" in markdown
        assert "### API\n\nREST backend" in markdown
        assert "- **language:** Python" in markdown
        assert "- **database:** PostgreSQL, Redis" in markdown

    @pytest.mark.parametrize(
        ("stack", "expected"),
        [(["Go", "Redis"], "- Go\n- Redis"), ("Rust everywhere", "Rust everywhere")],
    )
    def test_architecture_tech_stack_shapes(self, stack, expected) -> None:
        markdown = render_architecture(Document({"overview": {"goal": "g"}, "tech_stack": stack}))

        assert expected in markdown
        assert "## Overview\n\ng\n" in markdown

    def test_index_lists_only_written_documents(self, tmp_path: Path) -> None:
        markdown = render_index(tmp_path, ["overview.md", "features.md"], FIXED_TIME)

        assert "- [Project Overview](./overview.md)" in markdown
        assert "- [Feature Specifications](./features.md)" in markdown
        assert "api-reference.md)" not in markdown
        assert "*Generated on 2024-05-17 09:30:00*" in markdown
        assert "pdocs generate" in markdown


class TestGenerateDocs:
    def test_writes_all_documents(self, layout, tmp_path, reporter_stream) -> None:
        reporter, stream = reporter_stream
        output = tmp_path / "out" / "nested"

        report = generate_docs(layout, output, reporter=reporter, now=FIXED_TIME)

        names = sorted(path.name for path in report.written)
        assert names == ["README.md", "api-reference.md", "architecture.md", "features.md", "overview.md"]
        assert report.skipped == []
        assert f"✓ Created output directory: {output}" in stream.getvalue()
        assert (output / "overview.md").read_text(encoding="utf-8").startswith("# Foo Overview")

    def test_missing_sources_are_skipped(self, layout, tmp_path, reporter_stream) -> None:
        reporter, stream = reporter_stream
        layout.prd_file.unlink()
        layout.api_contracts_file.unlink()
        shutil.rmtree(layout.features_dir)

        report = generate_docs(layout, tmp_path / "out", reporter=reporter, now=FIXED_TIME)

        assert sorted(report.skipped) == ["api-reference.md", "features.md", "overview.md"]
        assert sorted(p.name for p in report.written) == ["README.md", "architecture.md"]
        readme = (tmp_path / "out" / "README.md").read_text(encoding="utf-8")
        assert "./architecture.md" in readme
        assert "./overview.md" not in readme
        assert "⚠ PRD file not found, skipping overview" in stream.getvalue()

    def test_no_toc(self, layout, tmp_path, reporter_stream) -> None:
        reporter, _ = reporter_stream

        generate_docs(layout, tmp_path / "out", include_toc=False, reporter=reporter)

        assert "Table of Contents" not in (tmp_path / "out" / "features.md").read_text(encoding="utf-8")
        assert "Table of Contents" not in (tmp_path / "out" / "api-reference.md").read_text(encoding="utf-8")

    def test_html_falls_back_to_markdown(self, layout, tmp_path, reporter_stream) -> None:
        reporter, stream = reporter_stream

        report = generate_docs(layout, tmp_path / "out", fmt="html", reporter=reporter)

        assert "HTML output is not implemented" in stream.getvalue()
        assert all(path.suffix == ".md" for path in report.written)
