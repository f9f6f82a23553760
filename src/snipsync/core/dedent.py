"""Dedenter: strip the common leading whitespace from a snippet body.

Snippets are usually cut out of an indented context (a method body, a nested
block) and read better flush-left in documentation.  Only the whitespace that
*every* substantive line shares is removed, so relative indentation inside the
snippet survives.
"""

from __future__ import annotations

import re

# Lines that only close a block: "}", "});", "]),", "end".
# They conventionally sit one level left of the block body.
_CLOSING_ONLY_RE = re.compile(r"^(?:[\]\)\}]+[;,]?|end)$")

# Extensions where leading whitespace is syntax, not layout.
SENSITIVE_INDENT_EXTS = frozenset({"make", "mk", "Makefile", "diff"})


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def _is_closing_only(line: str) -> bool:
    return bool(_CLOSING_ONLY_RE.match(line.strip()))


def common_indent_prefix(lines: list[str]) -> str:
    """Return the longest leading whitespace shared by all substantive lines.

    Blank lines never count.  Closing-only lines are ignored unless nothing
    else is left.  Tabs and spaces are compared character by character, so a
    tab never matches a run of spaces.
    """
    non_blank = [line for line in lines if line.strip()]
    if not non_blank:
        return ""

    candidates = [line for line in non_blank if not _is_closing_only(line)]
    pool = candidates or non_blank

    prefix = _leading_whitespace(pool[0])
    for line in pool[1:]:
        indent = _leading_whitespace(line)
        i = 0
        while i < len(prefix) and i < len(indent) and prefix[i] == indent[i]:
            i += 1
        prefix = prefix[:i]
        if not prefix:
            break
    return prefix


def dedent_lines(lines: list[str]) -> list[str]:
    """Remove the common indent prefix from *lines*.

    Always returns a new list.  Lines that do not start with the prefix
    (typically a closing brace sitting left of the body) are kept as-is.
    """
    prefix = common_indent_prefix(lines)
    if not prefix:
        return list(lines)
    size = len(prefix)
    return [line[size:] if line.startswith(prefix) else line for line in lines]


def is_indent_sensitive(ext: str) -> bool:
    """Whether snippets with extension *ext* must keep their whitespace."""
    return ext in SENSITIVE_INDENT_EXTS
