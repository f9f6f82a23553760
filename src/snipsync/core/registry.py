"""Snippet registry builder: scan source files for delimited regions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from snipsync.core.issues import IssueKind, record
from snipsync.core.markers import is_source_end, parse_source_start
from snipsync.core.snippet import FilePath, Snippet

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from snipsync.core.issues import Issue

logger = logging.getLogger(__name__)

Registry = dict[str, Snippet]


@dataclass(frozen=True)
class SourceFile:
    """A readable local file belonging to an origin repository."""

    path: Path
    owner: str
    repo: str
    ref: str | None
    file_path: FilePath
    root: Path | None = None

    @property
    def ext(self) -> str:
        return self.path.suffix.lstrip(".") or self.path.name


def extract_snippets(
    source: SourceFile,
    text: str,
    issues: list[Issue] | None = None,
) -> list[Snippet]:
    """Extract every complete ``@@@SNIPSTART``/``@@@SNIPEND`` region from *text*."""
    snippets: list[Snippet] = []
    current: Snippet | None = None
    start_line = 0

    for line_num, line in enumerate(text.splitlines(), 1):
        snippet_id = parse_source_start(line)
        if snippet_id is not None:
            if current is not None:
                record(
                    issues, logger, IssueKind.MALFORMED_SOURCE, source.path, start_line,
                    f"snippet {current.id!r} is never closed before the next @@@SNIPSTART",
                )
            if not snippet_id:
                record(
                    issues, logger, IssueKind.MALFORMED_SOURCE, source.path, line_num,
                    "@@@SNIPSTART without a snippet id",
                )
                current = None
                continue
            current = Snippet(
                id=snippet_id,
                ext=source.ext,
                owner=source.owner,
                repo=source.repo,
                ref=source.ref,
                file_path=source.file_path,
                source_root=source.root,
            )
            start_line = line_num
            continue

        if current is None:
            continue

        if is_source_end(line):
            snippets.append(current)
            current = None
        else:
            current.lines.append(line)

    if current is not None:
        record(
            issues, logger, IssueKind.MALFORMED_SOURCE, source.path, start_line,
            f"snippet {current.id!r} has no matching @@@SNIPEND",
        )
    return snippets


def read_source(source: SourceFile, issues: list[Issue] | None = None) -> str | None:
    """Read a source file as UTF-8, or ``None`` when it cannot be scanned."""
    try:
        return source.path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        # Binary assets in downloaded repositories are expected.
        logger.debug("Skipping non-text source %s", source.path)
        return None
    except OSError as exc:
        record(issues, logger, IssueKind.IO_ERROR, source.path, None, f"cannot read source: {exc}")
        return None


def build_registry(
    sources: Iterable[SourceFile],
    issues: list[Issue] | None = None,
) -> Registry:
    """Build the ``id -> Snippet`` registry from all *sources*.

    Later definitions of an id replace earlier ones.
    """
    registry: Registry = {}
    for source in sources:
        text = read_source(source, issues)
        if text is None:
            continue
        for snippet in extract_snippets(source, text, issues):
            if snippet.id in registry:
                logger.debug("Snippet %r redefined in %s", snippet.id, source.path)
            registry[snippet.id] = snippet
    logger.info("Registry built with %d snippets", len(registry))
    return registry


def load_file_snippet(template: Snippet, rel_path: str) -> Snippet:
    """Build a snippet covering a whole file of *template*'s repository.

    Used when a marker selects a file by path instead of a delimited region.
    Raises ``OSError`` when the file cannot be read.
    """
    if template.source_root is None:
        msg = f"snippet {template.id!r} has no local checkout to read {rel_path!r} from"
        raise OSError(msg)
    if ".." in rel_path.split("/"):
        msg = f"file path {rel_path!r} escapes the repository"
        raise OSError(msg)
    path = template.source_root / rel_path.lstrip("/")
    text = path.read_text(encoding="utf-8")
    directory = "/".join(
        p for p in [template.source_root.name, *path.relative_to(template.source_root).parent.parts]
        if p
    )
    return Snippet(
        id=template.id,
        ext=path.suffix.lstrip(".") or path.name,
        owner=template.owner,
        repo=template.repo,
        ref=template.ref,
        file_path=FilePath(directory=directory, name=path.name),
        lines=text.splitlines(),
        source_root=template.source_root,
    )
