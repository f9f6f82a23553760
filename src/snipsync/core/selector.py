"""Selector: narrow a snippet body to the lines a target asked for."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from snipsync.errors import SelectionError

_RANGE_RE = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$")

# Option keys accepted in markers and in the ``selections`` config section.
_OPTION_KEYS = {
    "selectedLines": "selected_lines",
    "startPattern": "start_pattern",
    "endPattern": "end_pattern",
    "highlightedLines": "highlighted_lines",
    "filePath": "file_path",
}


@dataclass(frozen=True)
class SelectionSpec:
    """Per-marker selection of a snippet's lines."""

    selected_lines: tuple[str, ...] = ()
    start_pattern: str | None = None
    end_pattern: str | None = None
    highlighted_lines: str | None = None
    file_path: str | None = None

    @classmethod
    def from_options(cls, options: dict[str, Any]) -> SelectionSpec:
        """Build a selection from camelCase marker/config options.

        Unknown keys are rejected so that typos do not silently select the
        whole snippet.
        """
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            attr = _OPTION_KEYS.get(key)
            if attr is None:
                msg = f"unknown option {key!r}"
                raise SelectionError(msg)
            kwargs[attr] = value

        raw_lines = kwargs.get("selected_lines", ())
        if isinstance(raw_lines, (str, int)):
            raw_lines = [raw_lines]
        if not isinstance(raw_lines, (list, tuple)):
            msg = "selectedLines must be a list of line ranges"
            raise SelectionError(msg)
        kwargs["selected_lines"] = tuple(str(r) for r in raw_lines)

        highlighted = kwargs.get("highlighted_lines")
        if isinstance(highlighted, (list, tuple)):
            kwargs["highlighted_lines"] = ",".join(str(h) for h in highlighted)
        elif highlighted is not None:
            kwargs["highlighted_lines"] = str(highlighted)

        for attr in ("start_pattern", "end_pattern", "file_path"):
            value = kwargs.get(attr)
            if value is not None and not isinstance(value, str):
                key = next(k for k, v in _OPTION_KEYS.items() if v == attr)
                msg = f"{key} must be a string"
                raise SelectionError(msg)
        return cls(**kwargs)

    @property
    def is_empty(self) -> bool:
        return not (self.selected_lines or self.start_pattern or self.end_pattern)


def parse_range(text: str) -> tuple[int, int]:
    """Parse ``"3"`` or ``"2-5"`` into an inclusive 1-indexed pair."""
    m = _RANGE_RE.match(text)
    if m is None:
        msg = f"invalid line range {text!r}"
        raise SelectionError(msg)
    start = int(m.group(1))
    end = int(m.group(2)) if m.group(2) else start
    return start, end


def select_ranges(lines: list[str], ranges: tuple[str, ...]) -> list[str]:
    """Keep the union of the inclusive *ranges*, in original order.

    Bounds outside the body are clamped; a range lying entirely outside
    contributes nothing.
    """
    keep: set[int] = set()
    for text in ranges:
        start, end = parse_range(text)
        start = max(start, 1)
        end = min(end, len(lines))
        keep.update(range(start - 1, end))
    return [line for i, line in enumerate(lines) if i in keep]


def _compile(pattern: str, key: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        msg = f"invalid {key} {pattern!r}: {exc}"
        raise SelectionError(msg) from exc


def slice_by_patterns(
    lines: list[str],
    start_pattern: str | None,
    end_pattern: str | None,
) -> list[str]:
    """Slice from the first start match up to (excluding) the next end match.

    Without a start pattern the slice begins at the top.  If the start pattern
    never matches, *lines* are returned unchanged.  If the end pattern never
    matches after the start, the slice runs to the end.
    """
    start_idx = 0
    if start_pattern:
        start_re = _compile(start_pattern, "startPattern")
        for i, line in enumerate(lines):
            if start_re.search(line):
                start_idx = i
                break
        else:
            return list(lines)

    end_idx = len(lines)
    if end_pattern:
        end_re = _compile(end_pattern, "endPattern")
        # A start line never closes its own slice.
        first = start_idx + 1 if start_pattern else start_idx
        for i in range(first, len(lines)):
            if end_re.search(lines[i]):
                end_idx = i
                break

    return lines[start_idx:end_idx]


def select_lines(lines: list[str], spec: SelectionSpec) -> list[str]:
    """Apply line ranges, then pattern slicing.  Returns a new list."""
    selected = list(lines)
    if spec.selected_lines:
        selected = select_ranges(selected, spec.selected_lines)
    if spec.start_pattern or spec.end_pattern:
        selected = slice_by_patterns(selected, spec.start_pattern, spec.end_pattern)
    return selected


def merge_options(*layers: dict[str, Any] | None) -> dict[str, Any]:
    """Merge option mappings; later layers win key by key."""
    merged: dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged
