"""Core engine: snippet extraction, selection, rendering and splicing."""

from snipsync.core.dedent import (
    common_indent_prefix,
    dedent_lines,
)
from snipsync.core.issues import (
    Issue,
    IssueKind,
)
from snipsync.core.markers import (
    MarkerStyle,
    OpenMarker,
)
from snipsync.core.registry import (
    Registry,
    SourceFile,
    build_registry,
)
from snipsync.core.renderer import (
    RenderOptions,
    render,
)
from snipsync.core.selector import (
    SelectionSpec,
    select_lines,
)
from snipsync.core.snippet import (
    FilePath,
    Snippet,
)
from snipsync.core.splicer import (
    MarkerPair,
    Mode,
    SpliceContext,
    find_pairs,
    splice_file,
    splice_text,
)

__all__ = [
    "FilePath",
    "Issue",
    "IssueKind",
    "MarkerPair",
    "MarkerStyle",
    "Mode",
    "OpenMarker",
    "Registry",
    "RenderOptions",
    "SelectionSpec",
    "Snippet",
    "SourceFile",
    "SpliceContext",
    "build_registry",
    "common_indent_prefix",
    "dedent_lines",
    "find_pairs",
    "render",
    "select_lines",
    "splice_file",
    "splice_text",
]
