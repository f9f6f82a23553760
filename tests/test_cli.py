"""Tests for the `snipsync` CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from click.testing import CliRunner

from snipsync import __version__
from snipsync.cli import main

if TYPE_CHECKING:
    from pathlib import Path


CONFIG = """\
origins:
  - files:
      pattern: src/**/*.ts
      owner: temporalio
      repo: docs
      ref: main
targets:
  - docs
features:
  enable_source_link: false
"""

SOURCE = "// @@@SNIPSTART greet\nexport const greet = (n: string) => `Hi ${n}`;\n// @@@SNIPEND\n"

DOC = "# Greeting\n\n<!--SNIPSTART greet -->\n<!--SNIPEND-->\n"


def _setup_project(tmp_path: Path) -> Path:
    project = tmp_path / "proj"
    (project / "src").mkdir(parents=True)
    (project / "docs").mkdir()
    (project / "snipsync.config.yaml").write_text(CONFIG, encoding="utf-8")
    (project / "src" / "greet.ts").write_text(SOURCE, encoding="utf-8")
    (project / "docs" / "index.md").write_text(DOC, encoding="utf-8")
    return project


class TestMain:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        for name in ("run", "clear", "list"):
            assert name in result.output


class TestRunCommand:
    def test_run_updates_docs(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        result = CliRunner().invoke(main, ["run", "--project", str(project)])

        assert result.exit_code == 0, result.output
        assert "docs/index.md" in result.output
        assert "1 snippets" in result.output
        assert "1 changed" in result.output
        text = (project / "docs" / "index.md").read_text(encoding="utf-8")
        assert "```ts\nexport const greet" in text

    def test_run_json(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        result = CliRunner().invoke(main, ["run", "--project", str(project), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["mode"] == "run"
        assert data["summary"] == {"snippets": 1, "targets_scanned": 1, "changed": 1, "issues": 0}
        assert data["changed"] == ["docs/index.md"]
        assert data["issues"] == []

    def test_check_exits_2_and_writes_nothing(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        result = CliRunner().invoke(main, ["run", "--project", str(project), "--check"])

        assert result.exit_code == 2
        assert "would change" in result.output
        assert (project / "docs" / "index.md").read_text(encoding="utf-8") == DOC

    def test_check_passes_when_in_sync(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        runner = CliRunner()
        runner.invoke(main, ["run", "--project", str(project)])
        result = runner.invoke(main, ["run", "--project", str(project), "--check"])
        assert result.exit_code == 0, result.output
        assert "0 would change" in result.output

    def test_issues_reported_in_json(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        (project / "docs" / "index.md").write_text(
            "<!--SNIPSTART greet -->\n{/* SNIPEND */}\n", encoding="utf-8"
        )
        result = CliRunner().invoke(main, ["-q", "run", "--project", str(project), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["summary"]["changed"] == 0
        [issue] = data["issues"]
        assert issue["kind"] == "style_mismatch"
        assert issue["path"] == "docs/index.md"
        assert issue["line"] == 2

    def test_missing_config(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["run", "--project", str(tmp_path)])
        assert result.exit_code == 1
        assert "Error" in result.output
        assert "not found" in result.output

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        alt = tmp_path / "alt.yaml"
        (project / "snipsync.config.yaml").rename(alt)
        result = CliRunner().invoke(
            main, ["run", "--project", str(project), "--config", str(alt), "--json"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["summary"]["changed"] == 1

    def test_invalid_config(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        (project / "snipsync.config.yaml").write_text("origins: []\ntargets: [docs]\n", encoding="utf-8")
        result = CliRunner().invoke(main, ["run", "--project", str(project)])
        assert result.exit_code == 1
        assert "origins" in result.output


class TestClearCommand:
    def test_clear_after_run(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        runner = CliRunner()
        runner.invoke(main, ["run", "--project", str(project)])
        result = runner.invoke(main, ["clear", "--project", str(project)])

        assert result.exit_code == 0, result.output
        assert "clear:" in result.output
        assert (project / "docs" / "index.md").read_text(encoding="utf-8") == DOC

    def test_clear_check(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        runner = CliRunner()
        runner.invoke(main, ["run", "--project", str(project)])
        result = runner.invoke(main, ["clear", "--project", str(project), "--check", "--json"])

        assert result.exit_code == 2
        assert json.loads(result.output)["mode"] == "clear"
        assert "export const greet" in (project / "docs" / "index.md").read_text(encoding="utf-8")


class TestListCommand:
    def test_table(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        result = CliRunner().invoke(main, ["list", "--project", str(project)])
        assert result.exit_code == 0, result.output
        assert "greet" in result.output
        assert "src/greet.ts" in result.output

    def test_json(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        result = CliRunner().invoke(main, ["list", "--project", str(project), "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == [
            {
                "id": "greet",
                "ext": "ts",
                "lines": 1,
                "path": "src/greet.ts",
                "url": "https://github.com/temporalio/docs/blob/main/src/greet.ts",
            }
        ]

    def test_empty(self, tmp_path: Path) -> None:
        project = _setup_project(tmp_path)
        (project / "src" / "greet.ts").write_text("export {};\n", encoding="utf-8")
        result = CliRunner().invoke(main, ["list", "--project", str(project)])
        assert result.exit_code == 0
        assert "No snippets found." in result.output
