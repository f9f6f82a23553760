"""Target discovery: expand configured target paths into documentation files."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def _walk(directory: Path) -> list[Path]:
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(directory):
        # Hidden directories (.git, .venv, ...) never hold targets.
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        files.extend(Path(dirpath) / name for name in sorted(filenames))
    return files


def resolve_targets(project_root: Path, targets: tuple[str, ...] | list[str]) -> list[Path]:
    """Return the deduplicated, sorted list of target files.

    Each entry is a file or directory relative to *project_root* (absolute
    paths are used as-is).  Missing entries are logged and skipped.
    """
    seen: set[Path] = set()
    result: list[Path] = []
    for entry in targets:
        path = Path(entry)
        if not path.is_absolute():
            path = project_root / entry
        if path.is_dir():
            candidates = _walk(path)
        elif path.is_file():
            candidates = [path]
        else:
            logger.warning("Target %s does not exist", path)
            continue

        for candidate in candidates:
            resolved = candidate.resolve()
            if resolved in seen or not candidate.is_file():
                continue
            seen.add(resolved)
            result.append(candidate)
    return sorted(result)
