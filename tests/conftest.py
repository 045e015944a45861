"""Shared pytest fixtures for draftwright tests."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from draftwright.core.manifest import ProjectManifest, load_manifest
from draftwright.core.orchestrator import BuildOrchestrator
from draftwright.core.ownership import OwnershipPolicy
from draftwright.core.state import StateStore
from draftwright.generators.base import GeneratorContext

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

BLOG_DRAFT = """\
models:
  Post:
    title: string:255
    body: text nullable
    relationships:
      belongsTo: User
  User:
    name: string:255
    email: string:255 unique
"""


@pytest.fixture
def blog_draft() -> str:
    """A small valid draft with two related models."""
    return BLOG_DRAFT


@pytest.fixture
def project(tmp_path: Path, blog_draft: str) -> Path:
    """Create a temporary project with a draft and a draftwright.toml."""
    (tmp_path / "draftwright.toml").write_text(
        """
[project]
name = "blog"

[paths]
draft = "draft.yaml"
"""
    )
    (tmp_path / "draft.yaml").write_text(blog_draft)
    return tmp_path


@pytest.fixture
def manifest(project: Path) -> ProjectManifest:
    return load_manifest(project)


@pytest.fixture
def orchestrator(manifest: ProjectManifest) -> BuildOrchestrator:
    """Orchestrator for ``project`` with a fixed clock."""
    orchestrator = BuildOrchestrator.from_manifest(manifest)
    orchestrator.context.clock = lambda: FIXED_NOW
    return orchestrator


@pytest.fixture
def state_store(tmp_path: Path) -> StateStore:
    return StateStore(tmp_path / ".draftwright" / "state.json", lock_timeout=0.5)


@pytest.fixture
def generator_context(tmp_path: Path, state_store: StateStore) -> GeneratorContext:
    """Generator context writing into ``tmp_path / "out"``."""
    return GeneratorContext(
        output_root=tmp_path / "out",
        ownership=OwnershipPolicy.default(),
        state=state_store,
        clock=lambda: FIXED_NOW,
    )
