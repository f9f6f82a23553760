"""Snipsync CLI entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from snipsync import __version__

if TYPE_CHECKING:
    from snipsync.config import SyncConfig
    from snipsync.sync import SyncReport


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, show_time=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="snipsync")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Snipsync - keep documentation code snippets in sync with source files."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    _configure_logging(verbose=verbose, quiet=quiet)


_project_option = click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)
_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: <project>/snipsync.config.yaml).",
)


def _load(project: Path | None, config_path: Path | None) -> SyncConfig:
    from snipsync.config import load_config
    from snipsync.errors import ConfigError

    project_root = (project or Path.cwd()).resolve()
    try:
        return load_config(project_root, config_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _report_json(report: SyncReport, project_root: Path) -> str:
    def rel(path: Path) -> str:
        try:
            return str(path.relative_to(project_root))
        except ValueError:
            return str(path)

    data = {
        "mode": report.mode.value,
        "summary": {
            "snippets": report.snippets_count,
            "targets_scanned": report.targets_scanned,
            "changed": len(report.changed),
            "issues": len(report.issues),
        },
        "changed": [rel(p) for p in report.changed],
        "issues": [
            {
                "kind": issue.kind.value,
                "path": rel(issue.path),
                "line": issue.line,
                "message": issue.message,
            }
            for issue in report.issues
        ],
    }
    return json.dumps(data, ensure_ascii=False, indent=2)


def _print_report(report: SyncReport, project_root: Path, *, check: bool, quiet: bool) -> None:
    from rich.console import Console
    from rich.table import Table

    console = Console()
    verb = "would change" if check else "changed"

    if not quiet:
        for path in report.changed:
            try:
                shown = path.relative_to(project_root)
            except ValueError:
                shown = path
            console.print(f"  [green]✓[/] {shown}")

    if report.issues and not quiet:
        table = Table(title="Issues", box=None, padding=(0, 1))
        table.add_column("kind", style="yellow")
        table.add_column("location", style="cyan")
        table.add_column("message")
        for issue in report.issues:
            table.add_row(issue.kind.value, issue.location(), issue.message)
        console.print(table)

    console.print(
        f"{report.mode.value}: [bold]{report.snippets_count}[/] snippets, "
        f"[bold]{report.targets_scanned}[/] targets scanned, "
        f"[bold]{len(report.changed)}[/] {verb}, "
        f"[bold]{len(report.issues)}[/] issues"
    )


def _execute(
    ctx: click.Context,
    *,
    clear: bool,
    project: Path | None,
    config_path: Path | None,
    check: bool,
    output_json: bool,
) -> None:
    from snipsync.errors import OriginError
    from snipsync.sync import Sync

    config = _load(project, config_path)
    synctron = Sync(config)
    try:
        report = synctron.clear(check=check) if clear else synctron.run(check=check)
    except OriginError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_json:
        click.echo(_report_json(report, config.project_root))
    else:
        _print_report(report, config.project_root, check=check, quiet=ctx.obj.get("quiet", False))

    if check and report.has_changes:
        sys.exit(2)


@main.command()
@_project_option
@_config_option
@click.option("--check", is_flag=True, help="Report files that would change; write nothing.")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    *,
    project: Path | None,
    config_path: Path | None,
    check: bool,
    output_json: bool,
) -> None:
    """Splice snippets from the origins into all target documents.

    Exit codes: 0 = ok, 1 = error, 2 = files would change (with --check).
    """
    _execute(
        ctx, clear=False, project=project, config_path=config_path,
        check=check, output_json=output_json,
    )


@main.command()
@_project_option
@_config_option
@click.option("--check", is_flag=True, help="Report files that would change; write nothing.")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def clear(
    ctx: click.Context,
    *,
    project: Path | None,
    config_path: Path | None,
    check: bool,
    output_json: bool,
) -> None:
    """Remove spliced snippet content, leaving the markers in place."""
    _execute(
        ctx, clear=True, project=project, config_path=config_path,
        check=check, output_json=output_json,
    )


@main.command("list")
@_project_option
@_config_option
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
def list_snippets(*, project: Path | None, config_path: Path | None, output_json: bool) -> None:
    """List the snippets found in the configured origins."""
    from snipsync.errors import OriginError
    from snipsync.sync import Sync

    config = _load(project, config_path)
    try:
        registry = Sync(config).registry()
    except OriginError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    snippets = sorted(registry.values(), key=lambda s: s.id)
    if output_json:
        data = [
            {
                "id": s.id,
                "ext": s.ext,
                "lines": len(s.lines),
                "path": s.build_path(),
                "url": s.build_url(),
            }
            for s in snippets
        ]
        click.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not snippets:
        click.echo("No snippets found.")
        return

    from rich.console import Console
    from rich.table import Table

    table = Table(title=f"Snippets ({len(snippets)})", padding=(0, 1))
    table.add_column("id", style="cyan")
    table.add_column("ext")
    table.add_column("lines", justify="right")
    table.add_column("source")
    for s in snippets:
        table.add_row(s.id, s.ext, str(len(s.lines)), f"{s.owner}/{s.repo}: {s.build_path()}")
    Console().print(table)
