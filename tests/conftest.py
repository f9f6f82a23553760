"""Shared test fixtures for snipsync."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def tmp_project(tmp_path: Path) -> Path:
    """Create a minimal project: ``src/`` for sources, ``docs/`` for targets."""
    project = tmp_path / "proj"
    (project / "src").mkdir(parents=True)
    (project / "docs").mkdir()
    return project
