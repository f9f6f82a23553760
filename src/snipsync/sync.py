"""Sync orchestrator: build the registry, then run or clear every target."""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from snipsync.core.registry import build_registry
from snipsync.core.splicer import Mode, SpliceContext, splice_file
from snipsync.infrastructure.origins import collect_sources
from snipsync.infrastructure.targets import resolve_targets

if TYPE_CHECKING:
    import httpx

    from snipsync.config import SyncConfig
    from snipsync.core.issues import Issue
    from snipsync.core.registry import Registry

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Outcome of one run/clear pass."""

    mode: Mode
    snippets_count: int = 0
    targets_scanned: int = 0
    changed: list[Path] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.changed)


class Sync:
    """Keeps documentation targets in sync with the configured origins.

    One instance can be reused; every call rebuilds the registry from scratch
    so source edits are always picked up.
    """

    def __init__(self, config: SyncConfig, http_client: httpx.Client | None = None) -> None:
        self.config = config
        self.http_client = http_client

    def build_registry(self, extraction_root: Path, issues: list[Issue] | None = None) -> Registry:
        sources = collect_sources(
            self.config.origins,
            self.config.project_root,
            extraction_root,
            self.http_client,
        )
        return build_registry(sources, issues)

    def registry(self) -> Registry:
        """Build the registry on its own (downloads are discarded afterwards)."""
        with tempfile.TemporaryDirectory(prefix="snipsync-") as tmp:
            return self.build_registry(Path(tmp))

    def _process(self, mode: Mode, *, check: bool) -> SyncReport:
        report = SyncReport(mode=mode)
        with tempfile.TemporaryDirectory(prefix="snipsync-") as tmp:
            registry = self.build_registry(Path(tmp), report.issues)
            report.snippets_count = len(registry)

            ctx = SpliceContext(
                registry=registry,
                mode=mode,
                options=self.config.features,
                selections=self.config.selections,
                issues=report.issues,
            )
            targets = resolve_targets(self.config.project_root, self.config.targets)
            for target in targets:
                if not self.config.features.allows_extension(target.suffix):
                    continue
                report.targets_scanned += 1
                if splice_file(target, ctx, check=check):
                    report.changed.append(target)

        logger.info(
            "%s: %d snippets, %d targets scanned, %d changed, %d issues",
            mode.value, report.snippets_count, report.targets_scanned,
            len(report.changed), len(report.issues),
        )
        return report

    def run(self, *, check: bool = False) -> SyncReport:
        """Splice the current snippet content into every eligible target."""
        return self._process(Mode.RUN, check=check)

    def clear(self, *, check: bool = False) -> SyncReport:
        """Empty every spliced region, leaving the markers in place."""
        return self._process(Mode.CLEAR, check=check)
