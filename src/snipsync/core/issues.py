"""Non-fatal problems found while scanning sources and targets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class IssueKind(str, Enum):
    MALFORMED_SOURCE = "malformed_source"
    UNKNOWN_SNIPPET = "unknown_snippet"
    STYLE_MISMATCH = "style_mismatch"
    UNTERMINATED_REGION = "unterminated_region"
    NESTED_MARKER = "nested_marker"
    EMBEDDED_MARKER = "embedded_marker"
    INVALID_OPTIONS = "invalid_options"
    IO_ERROR = "io_error"


@dataclass(frozen=True)
class Issue:
    """A region or file that could not be processed safely."""

    kind: IssueKind
    path: Path
    line: int | None
    message: str

    def location(self) -> str:
        return f"{self.path}:{self.line}" if self.line is not None else str(self.path)


def record(
    issues: list[Issue] | None,
    logger: logging.Logger,
    kind: IssueKind,
    path: Path,
    line: int | None,
    message: str,
) -> None:
    """Log *message* as a warning and append it to *issues* when collecting."""
    issue = Issue(kind=kind, path=path, line=line, message=message)
    logger.warning("%s: %s", issue.location(), message)
    if issues is not None:
        issues.append(issue)
