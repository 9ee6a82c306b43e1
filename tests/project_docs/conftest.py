"""Shared fixtures for the ProjectDocs test-suite.

``docs_root`` builds a fully populated documentation tree under ``tmp_path``:
every category exists, every required field is filled in, and the single PRD
feature ``F-01`` has a matching feature specification, so ``pdocs check``
reports zero errors and zero warnings. Tests mutate individual files to
exercise a specific rule.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from ProjectDocs.layout import DocsLayout
from ProjectDocs.logging_utils import LOGGER_NAME


def write_yaml(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


PRD = {
    "project_name": "Foo",
    "summary": "bar",
    "goal": "baz",
    "features": [{"id": "F-01", "name": "Login", "description": "User login"}],
}

FEATURE_SPEC = {
    "feature_id": "F-01",
    "title": "Technical Specification - Login",
    "status": "complete",
    "summary": "done",
    "functional_overview": {"core_logic": "Validate credentials and issue a session"},
    "detailed_design": {"apis": [{"method": "post", "endpoint": "/sessions"}]},
    "implementation_status": {"progress": 100},
}

STORY = {
    "story_id": "US-001",
    "feature_id": "F-01",
    "title": "Log in with email",
    "status": "in-progress",
    "user_story": {"as_a": "registered user", "i_want": "to log in", "so_that": "I see my data"},
}

FLOW = {
    "title": "Onboarding",
    "key_personas": ["Admin", "Guest"],
    "primary_flows": [{"name": "Sign up"}],
    "secondary_flows": [{"name": "Reset password"}],
}

SYSTEM_DESIGN = {
    "goal": "Serve users reliably",
    "core_components": [{"component": "API", "description": "REST backend"}],
    "tech_stack": {"language": "Python", "database": ["PostgreSQL", "Redis"]},
}

API_CONTRACT = {
    "openapi": "3.0.3",
    "info": {"title": "Foo API", "version": "2.0.0"},
    "paths": {
        "/sessions": {
            "post": {
                "summary": "Create session",
                "description": "Exchange credentials for a session token.",
                "x-feature-id": "F-01",
                "responses": {"201": {"description": "Created"}},
            }
        },
        "/health": {"get": {"summary": "Health check"}},
    },
}

DATA_PLAN = {"data_sources": [{"name": "events", "type": "event stream"}]}

DESIGN_SPEC = {"design_goals": ["Clarity"]}


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def docs_root(project_dir: Path) -> Path:
    """Fully populated ``docs/`` directory inside ``project_dir``."""

    docs = project_dir / "docs"
    write_yaml(docs / "product-requirements.yaml", PRD)
    write_yaml(docs / "feature-specs" / "F-01-login.yaml", FEATURE_SPEC)
    write_yaml(docs / "user-stories" / "US-001-login.yaml", STORY)
    write_yaml(docs / "user-flows" / "onboarding.yaml", FLOW)
    write_yaml(docs / "system-design.yaml", SYSTEM_DESIGN)
    write_yaml(docs / "api-contracts.yaml", API_CONTRACT)
    write_yaml(docs / "data-plan.yaml", DATA_PLAN)
    write_yaml(docs / "design-spec.yaml", DESIGN_SPEC)
    return docs


@pytest.fixture
def layout(docs_root: Path) -> DocsLayout:
    return DocsLayout(docs_root)


@pytest.fixture
def yaml_writer() -> Callable[[Path, Any], Path]:
    return write_yaml


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by ``configure_logging`` between tests."""

    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_pdocs_managed", False):
            logger.removeHandler(handler)
            handler.close()
    logger.propagate = True
