"""Marker vocabulary for source files and documentation targets.

Sources delimit a snippet with ``@@@SNIPSTART <id>`` / ``@@@SNIPEND`` inside
whatever comment syntax the language uses.  Targets use one of the comment
styles in :class:`MarkerStyle`; a region opened in one style must be closed in
the same style.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

SOURCE_START = "@@@SNIPSTART"
SOURCE_END = "@@@SNIPEND"


class MarkerStyle(Enum):
    """Recognized target marker styles: (open token, terminator, close token)."""

    HTML = ("<!--SNIPSTART", "-->", "<!--SNIPEND")
    JSX = ("{/* SNIPSTART", "*/}", "{/* SNIPEND")

    def __init__(self, open_token: str, terminator: str, close_token: str) -> None:
        self.open_token = open_token
        self.terminator = terminator
        self.close_token = close_token

    def opens(self, line: str) -> bool:
        return line.lstrip().startswith(self.open_token)

    def closes(self, line: str) -> bool:
        return line.lstrip().startswith(self.close_token)


class MarkerError(ValueError):
    """Raised when an opening marker cannot be parsed."""


@dataclass(frozen=True)
class OpenMarker:
    """A parsed opening target marker."""

    style: MarkerStyle
    snippet_id: str
    options: dict[str, Any] = field(default_factory=dict)


def match_open(line: str) -> MarkerStyle | None:
    """Return the style whose opening token starts *line*, if any."""
    for style in MarkerStyle:
        if style.opens(line):
            return style
    return None


def match_close(line: str) -> MarkerStyle | None:
    """Return the style whose closing token starts *line*, if any."""
    for style in MarkerStyle:
        if style.closes(line):
            return style
    return None


def parse_open(line: str, style: MarkerStyle) -> OpenMarker:
    """Parse ``<open-token> <id> [json-options] <terminator>``.

    Raises :class:`MarkerError` when the id is missing or the options are not
    a JSON object.
    """
    body = line.strip()[len(style.open_token):]
    end = body.rfind(style.terminator)
    if end != -1:
        body = body[:end]
    parts = body.strip().split(None, 1)
    if not parts:
        msg = f"missing snippet id in marker {line.strip()!r}"
        raise MarkerError(msg)

    snippet_id = parts[0]
    if len(parts) == 1:
        return OpenMarker(style=style, snippet_id=snippet_id)

    try:
        options = json.loads(parts[1])
    except json.JSONDecodeError as exc:
        msg = f"invalid options for snippet {snippet_id!r}: {exc.msg}"
        raise MarkerError(msg) from exc
    if not isinstance(options, dict):
        msg = f"options for snippet {snippet_id!r} must be a JSON object"
        raise MarkerError(msg)
    return OpenMarker(style=style, snippet_id=snippet_id, options=options)


def parse_source_start(line: str) -> str | None:
    """Return the snippet id if *line* carries a source start token.

    The id is the first whitespace-delimited word after the token, so trailing
    comment closers (``*/``, ``-->``) are ignored.
    """
    pos = line.find(SOURCE_START)
    if pos == -1:
        return None
    rest = line[pos + len(SOURCE_START):].split()
    return rest[0] if rest else ""


def is_source_end(line: str) -> bool:
    return SOURCE_END in line
