"""Tests for snipsync.infrastructure.targets: target discovery."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from snipsync.infrastructure.targets import resolve_targets

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


class TestResolveTargets:
    def test_directory_is_walked_recursively(self, tmp_project: Path) -> None:
        a = _touch(tmp_project / "docs" / "a.md")
        b = _touch(tmp_project / "docs" / "guide" / "b.mdx")
        assert resolve_targets(tmp_project, ["docs"]) == [a, b]

    def test_single_file(self, tmp_project: Path) -> None:
        readme = _touch(tmp_project / "README.md")
        assert resolve_targets(tmp_project, ["README.md"]) == [readme]

    def test_hidden_directories_skipped(self, tmp_project: Path) -> None:
        visible = _touch(tmp_project / "docs" / "a.md")
        _touch(tmp_project / "docs" / ".cache" / "b.md")
        assert resolve_targets(tmp_project, ["docs"]) == [visible]

    def test_overlapping_entries_deduplicated(self, tmp_project: Path) -> None:
        a = _touch(tmp_project / "docs" / "a.md")
        assert resolve_targets(tmp_project, ["docs", "docs/a.md", "./docs"]) == [a]

    def test_absolute_path(self, tmp_path: Path, tmp_project: Path) -> None:
        outside = _touch(tmp_path / "elsewhere" / "x.md")
        assert resolve_targets(tmp_project, [str(outside)]) == [outside]

    def test_missing_entry_warns(self, tmp_project: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            assert resolve_targets(tmp_project, ["nope"]) == []
        assert "does not exist" in caplog.text
