"""Infrastructure: origin acquisition and target discovery."""

from snipsync.infrastructure.origins import (
    collect_local,
    collect_remote,
    collect_sources,
    download_remote,
    extract_archive,
)
from snipsync.infrastructure.targets import resolve_targets

__all__ = [
    "collect_local",
    "collect_remote",
    "collect_sources",
    "download_remote",
    "extract_archive",
    "resolve_targets",
]
