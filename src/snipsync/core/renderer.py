"""Renderer: turn selected snippet lines into the text spliced into a target."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from snipsync.core.dedent import dedent_lines, is_indent_sensitive

if TYPE_CHECKING:
    from snipsync.core.snippet import Snippet

CODE_FENCE = "```"


@dataclass(frozen=True)
class RenderOptions:
    """Global rendering features."""

    enable_source_link: bool = True
    enable_code_block: bool = True
    enable_code_dedenting: bool = False
    allowed_target_extensions: tuple[str, ...] = ()

    def allows_extension(self, suffix: str) -> bool:
        """Empty allow-list means every target extension is eligible."""
        return not self.allowed_target_extensions or suffix in self.allowed_target_extensions


def fmt_start_code_block(ext: str, highlighted_lines: str | None = None) -> str:
    fence = CODE_FENCE + ext
    if highlighted_lines:
        fence += f" {{{highlighted_lines}}}"
    return fence


def render(
    snippet: Snippet,
    lines: list[str],
    options: RenderOptions,
    highlighted_lines: str | None = None,
) -> list[str]:
    """Render *lines* of *snippet*: dedent, fence, then prepend the source link.

    *lines* is never modified.
    """
    out = list(lines)
    if options.enable_code_dedenting and not is_indent_sensitive(snippet.ext):
        out = dedent_lines(out)
    if options.enable_code_block:
        out = [fmt_start_code_block(snippet.ext, highlighted_lines), *out, CODE_FENCE]
    if options.enable_source_link:
        out.insert(0, snippet.fmt_source_link())
    return out
