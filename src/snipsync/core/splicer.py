"""Target splicer: pair markers in a document and rewrite the regions between them.

Pairing is a two-state machine scanning the document once, top to bottom:

* ``SEARCHING_OPEN`` -- an opening marker of any style starts a region;
* ``SEARCHING_CLOSE`` -- a closing marker of the *same* style completes the
  pair; a closing marker of another style is a mismatch and the region is left
  untouched.

Regions never nest: a region holding a second opening marker is left untouched.
Only lines strictly between the two markers are ever replaced; marker lines
are copied verbatim.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from snipsync.core.issues import IssueKind, record
from snipsync.core.markers import MarkerError, MarkerStyle, OpenMarker, match_close, match_open, parse_open
from snipsync.core.registry import load_file_snippet
from snipsync.core.renderer import RenderOptions, render
from snipsync.core.selector import SelectionSpec, merge_options, select_lines
from snipsync.errors import SelectionError

if TYPE_CHECKING:
    from pathlib import Path

    from snipsync.core.issues import Issue
    from snipsync.core.registry import Registry

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    RUN = "run"
    CLEAR = "clear"


class ScanState(Enum):
    SEARCHING_OPEN = "searching_open"
    SEARCHING_CLOSE = "searching_close"


@dataclass(frozen=True)
class MarkerPair:
    """A validly paired region: marker lines at *open_index* and *close_index*."""

    open_index: int
    close_index: int
    marker: OpenMarker

    @property
    def snippet_id(self) -> str:
        return self.marker.snippet_id

    @property
    def style(self) -> MarkerStyle:
        return self.marker.style


class MarkerScanner:
    """Explicit pairing state machine for one document.

    Feed lines in order with :meth:`feed`; call :meth:`finish` at end of file.
    Problems are logged and collected in *issues*.
    """

    def __init__(self, path: Path, issues: list[Issue] | None = None) -> None:
        self.path = path
        self.issues = issues
        self.state = ScanState.SEARCHING_OPEN
        self._style: MarkerStyle | None = None
        self._marker: OpenMarker | None = None
        self._marker_error: str | None = None
        self._open_index = -1
        self._nested = False

    def _reset(self) -> None:
        self.state = ScanState.SEARCHING_OPEN
        self._style = None
        self._marker = None
        self._marker_error = None
        self._open_index = -1
        self._nested = False

    def _record(self, kind: IssueKind, index: int, message: str) -> None:
        record(self.issues, logger, kind, self.path, index + 1, message)

    @property
    def _pending_label(self) -> str:
        if self._marker is not None:
            return repr(self._marker.snippet_id)
        return "<unparsed>"

    def feed(self, index: int, line: str) -> MarkerPair | None:
        if self.state is ScanState.SEARCHING_OPEN:
            style = match_open(line)
            if style is not None:
                self.state = ScanState.SEARCHING_CLOSE
                self._style = style
                self._open_index = index
                try:
                    self._marker = parse_open(line, style)
                except MarkerError as exc:
                    self._marker_error = str(exc)
            elif match_close(line) is not None:
                logger.debug("%s:%d: closing marker without an opening marker", self.path, index + 1)
            return None

        # SEARCHING_CLOSE
        if match_open(line) is not None:
            self._nested = True
            self._record(
                IssueKind.NESTED_MARKER, index,
                f"opening marker inside region {self._pending_label} opened on line "
                f"{self._open_index + 1}; region left unchanged",
            )
            return None

        close_style = match_close(line)
        if close_style is None:
            return None

        assert self._style is not None
        if close_style is not self._style:
            self._record(
                IssueKind.STYLE_MISMATCH, index,
                f"region {self._pending_label} opened with {self._style.name} marker on line "
                f"{self._open_index + 1} is closed with a {close_style.name} marker; left unchanged",
            )
            self._reset()
            return None

        if self._nested:
            self._reset()
            return None

        if self._marker is None:
            self._record(
                IssueKind.INVALID_OPTIONS, self._open_index,
                f"{self._marker_error}; region left unchanged",
            )
            self._reset()
            return None

        pair = MarkerPair(open_index=self._open_index, close_index=index, marker=self._marker)
        self._reset()
        return pair

    def finish(self) -> None:
        if self.state is ScanState.SEARCHING_CLOSE:
            self._record(
                IssueKind.UNTERMINATED_REGION, self._open_index,
                f"region {self._pending_label} is never closed; left unchanged",
            )
            self._reset()


def find_pairs(lines: list[str], path: Path, issues: list[Issue] | None = None) -> list[MarkerPair]:
    """Return every valid marker pair of a document, in order."""
    scanner = MarkerScanner(path, issues)
    pairs: list[MarkerPair] = []
    for index, line in enumerate(lines):
        pair = scanner.feed(index, line)
        if pair is not None:
            pairs.append(pair)
    scanner.finish()
    return pairs


@dataclass
class SpliceContext:
    """Everything the splicer needs besides the document itself."""

    registry: Registry
    mode: Mode = Mode.RUN
    options: RenderOptions = field(default_factory=RenderOptions)
    selections: dict[str, dict[str, Any]] = field(default_factory=dict)
    issues: list[Issue] | None = None


def _detect_newline(lines: list[str]) -> str:
    for line in lines:
        if line.endswith("\r\n"):
            return "\r\n"
        if line.endswith(("\n", "\r")):
            return line[-1]
    return "\n"


def _render_pair(pair: MarkerPair, ctx: SpliceContext, path: Path) -> list[str] | None:
    """Rendered replacement lines for *pair*, or ``None`` to keep the region."""
    snippet = ctx.registry.get(pair.snippet_id)
    if snippet is None:
        record(
            ctx.issues, logger, IssueKind.UNKNOWN_SNIPPET, path, pair.open_index + 1,
            f"unknown snippet {pair.snippet_id!r}; region left unchanged",
        )
        return None
    if ctx.mode is Mode.CLEAR:
        return []

    try:
        spec = SelectionSpec.from_options(
            merge_options(ctx.selections.get(pair.snippet_id), pair.marker.options)
        )
        if spec.file_path:
            snippet = load_file_snippet(snippet, spec.file_path)
        selected = select_lines(snippet.lines, spec)
    except SelectionError as exc:
        record(
            ctx.issues, logger, IssueKind.INVALID_OPTIONS, path, pair.open_index + 1,
            f"snippet {pair.snippet_id!r}: {exc}; region left unchanged",
        )
        return None
    except OSError as exc:
        record(
            ctx.issues, logger, IssueKind.IO_ERROR, path, pair.open_index + 1,
            f"snippet {pair.snippet_id!r}: {exc}; region left unchanged",
        )
        return None

    rendered = render(snippet, selected, ctx.options, spec.highlighted_lines)
    # Marker lines in the body would pair with the region's own markers next run.
    for offset, line in enumerate(rendered):
        if match_open(line) is not None or match_close(line) is not None:
            record(
                ctx.issues, logger, IssueKind.EMBEDDED_MARKER, path, pair.open_index + 1,
                f"snippet {pair.snippet_id!r} line {offset + 1} contains a target marker; "
                "region left unchanged",
            )
            return None
    return rendered


def splice_lines(lines: list[str], ctx: SpliceContext, path: Path) -> list[str]:
    """Return the document *lines* (with line endings) after run/clear."""
    newline = _detect_newline(lines)
    out: list[str] = []
    cursor = 0
    for pair in find_pairs(lines, path, ctx.issues):
        replacement = _render_pair(pair, ctx, path)
        if replacement is None:
            continue
        out.extend(lines[cursor:pair.open_index + 1])
        out.extend(line + newline for line in replacement)
        cursor = pair.close_index
    out.extend(lines[cursor:])
    return out


def splice_text(text: str, ctx: SpliceContext, path: Path) -> str:
    return "".join(splice_lines(text.splitlines(keepends=True), ctx, path))


def _write_atomic(path: Path, content: str) -> None:
    """Replace *path* with *content* in one step."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def splice_file(path: Path, ctx: SpliceContext, *, check: bool = False) -> bool:
    """Run/clear one target document.  Returns ``True`` if it changed.

    Files outside ``allowed_target_extensions`` are skipped.  Nothing is
    written when the content is unchanged or *check* is set.  I/O failures are
    recorded and reported as "unchanged".
    """
    if not ctx.options.allows_extension(path.suffix):
        logger.debug("Skipping %s: extension not allowed", path)
        return False

    try:
        with path.open(encoding="utf-8", newline="") as fh:
            original = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        record(ctx.issues, logger, IssueKind.IO_ERROR, path, None, f"cannot read target: {exc}")
        return False

    updated = splice_text(original, ctx, path)
    if updated == original:
        return False
    if check:
        logger.info("Would update %s", path)
        return True

    try:
        _write_atomic(path, updated)
    except OSError as exc:
        record(ctx.issues, logger, IssueKind.IO_ERROR, path, None, f"cannot write target: {exc}")
        return False
    logger.info("Updated %s", path)
    return True
