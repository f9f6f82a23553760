"""Snippet model and source-link building."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_REF = "master"
GITHUB_URL = "https://github.com"


@dataclass(frozen=True)
class FilePath:
    """Directory + file name of a snippet source.

    The first segment of ``directory`` is the local checkout root and is not
    part of the public path.
    """

    directory: str
    name: str

    @property
    def public_path(self) -> str:
        parts = [p for p in self.directory.split("/") if p]
        return "/".join([*parts[1:], self.name])


@dataclass
class Snippet:
    """A named region of code extracted from one source file."""

    id: str
    ext: str
    owner: str
    repo: str
    ref: str | None
    file_path: FilePath
    lines: list[str] = field(default_factory=list)
    source_root: Path | None = None

    @property
    def link_ref(self) -> str:
        return self.ref or DEFAULT_REF

    def build_path(self) -> str:
        """Repository-relative path of the source file."""
        return self.file_path.public_path

    def build_url(self) -> str:
        """GitHub blob URL of the source file at the snippet's ref."""
        return "/".join(
            [GITHUB_URL, self.owner, self.repo, "blob", self.link_ref, self.build_path()]
        )

    def fmt_source_link(self) -> str:
        return f"[{self.build_path()}]({self.build_url()})"
