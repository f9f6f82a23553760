"""Tests for snipsync.core.renderer and snippet link building."""

from __future__ import annotations

from snipsync.core.renderer import RenderOptions, fmt_start_code_block, render
from snipsync.core.snippet import FilePath, Snippet

BODY = [
    "  export async function greet(name: string): Promise<string> {",
    "    return `Hello, ${name}!`;",
    "  }",
]


def _snippet(*, ref: str | None = "main", ext: str = "ts") -> Snippet:
    return Snippet(
        id="greet",
        ext=ext,
        owner="temporalio",
        repo="samples-typescript",
        ref=ref,
        file_path=FilePath(directory="samples-typescript-main/hello-world/src", name="activities.ts"),
        lines=list(BODY),
    )


class TestSourceLink:
    def test_path_drops_checkout_root(self) -> None:
        assert _snippet().build_path() == "hello-world/src/activities.ts"

    def test_url(self) -> None:
        assert _snippet().build_url() == (
            "https://github.com/temporalio/samples-typescript/blob/main/hello-world/src/activities.ts"
        )

    def test_ref_defaults_to_master(self) -> None:
        assert "/blob/master/" in _snippet(ref=None).build_url()
        assert "/blob/master/" in _snippet(ref="").build_url()

    def test_link_line(self) -> None:
        assert _snippet().fmt_source_link() == (
            "[hello-world/src/activities.ts]"
            "(https://github.com/temporalio/samples-typescript/blob/main/hello-world/src/activities.ts)"
        )

    def test_file_at_checkout_root(self) -> None:
        assert FilePath(directory="repo-root", name="main.go").public_path == "main.go"


class TestRender:
    def test_all_options_on(self) -> None:
        snippet = _snippet()
        out = render(snippet, snippet.lines, RenderOptions(enable_code_dedenting=True))
        assert out == [
            snippet.fmt_source_link(),
            "```ts",
            "export async function greet(name: string): Promise<string> {",
            "  return `Hello, ${name}!`;",
            "}",
            "```",
        ]

    def test_no_code_block(self) -> None:
        snippet = _snippet()
        out = render(snippet, snippet.lines, RenderOptions(enable_code_block=False))
        assert out == [snippet.fmt_source_link(), *BODY]

    def test_no_source_link(self) -> None:
        snippet = _snippet()
        out = render(snippet, snippet.lines, RenderOptions(enable_source_link=False))
        assert out == ["```ts", *BODY, "```"]

    def test_bare_body(self) -> None:
        snippet = _snippet()
        opts = RenderOptions(enable_source_link=False, enable_code_block=False)
        out = render(snippet, snippet.lines, opts)
        assert out == BODY
        assert out is not snippet.lines

    def test_dedent_disabled_keeps_indentation(self) -> None:
        snippet = _snippet()
        out = render(snippet, snippet.lines, RenderOptions(enable_source_link=False))
        assert out[1].startswith("  export")

    def test_highlighted_lines_in_fence(self) -> None:
        snippet = _snippet()
        out = render(snippet, snippet.lines, RenderOptions(enable_source_link=False), "1,3")
        assert out[0] == "```ts {1,3}"

    def test_does_not_mutate_snippet(self) -> None:
        snippet = _snippet()
        render(snippet, snippet.lines, RenderOptions(enable_code_dedenting=True))
        assert snippet.lines == BODY

    def test_makefile_never_dedented(self) -> None:
        snippet = _snippet(ext="Makefile")
        lines = ["\tgo build ./...", "\tgo test ./..."]
        opts = RenderOptions(enable_source_link=False, enable_code_block=False, enable_code_dedenting=True)
        assert render(snippet, lines, opts) == lines


class TestRenderOptions:
    def test_empty_allow_list_allows_all(self) -> None:
        assert RenderOptions().allows_extension(".txt")

    def test_allow_list(self) -> None:
        opts = RenderOptions(allowed_target_extensions=(".md",))
        assert opts.allows_extension(".md")
        assert not opts.allows_extension(".txt")

    def test_fence_helper(self) -> None:
        assert fmt_start_code_block("go") == "```go"
        assert fmt_start_code_block("go", "2-4") == "```go {2-4}"
