"""Origin acquisition: turn configured origins into local source files.

Remote origins are GitHub repositories fetched as zipball archives and
extracted below the extraction directory.  Local origins are glob patterns
relative to the project root.
"""

from __future__ import annotations

import glob
import io
import logging
import os
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from snipsync.config import LocalOrigin, RemoteOrigin
from snipsync.core.registry import SourceFile
from snipsync.core.snippet import FilePath
from snipsync.errors import OriginError

if TYPE_CHECKING:
    from snipsync.config import Origin

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
_SKIP_DIRS = frozenset({".git", "node_modules", "__pycache__"})


def zipball_url(origin: RemoteOrigin) -> str:
    url = f"{GITHUB_API_URL}/repos/{origin.owner}/{origin.repo}/zipball"
    return f"{url}/{origin.ref}" if origin.ref else url


def _auth_headers() -> dict[str, str]:
    token = os.environ.get("GITHUB_TOKEN")
    return {"Authorization": f"Bearer {token}"} if token else {}


def _source_file(path: Path, root: Path, owner: str, repo: str, ref: str | None) -> SourceFile:
    """Describe *path* inside checkout *root*; the root name heads the directory."""
    rel_parent = path.relative_to(root).parent
    directory = "/".join([root.name, *rel_parent.parts])
    return SourceFile(
        path=path,
        owner=owner,
        repo=repo,
        ref=ref,
        file_path=FilePath(directory=directory, name=path.name),
        root=root,
    )


def extract_archive(data: bytes, dest: Path) -> Path:
    """Extract a zipball into *dest* and return its single top-level folder."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        msg = f"downloaded archive is not a zip file: {exc}"
        raise OriginError(msg) from exc

    dest.mkdir(parents=True, exist_ok=True)
    base = dest.resolve()
    with archive:
        for member in archive.namelist():
            target = (base / member).resolve()
            if target != base and base not in target.parents:
                msg = f"archive member escapes extraction directory: {member}"
                raise OriginError(msg)
        archive.extractall(base)

    roots = [p for p in base.iterdir() if p.is_dir()]
    if len(roots) != 1:
        msg = f"expected one top-level folder in archive, found {len(roots)}"
        raise OriginError(msg)
    return roots[0]


def download_remote(origin: RemoteOrigin, dest: Path, client: httpx.Client | None = None) -> Path:
    """Download and extract *origin*; return the local checkout root."""
    url = zipball_url(origin)
    logger.info("Downloading %s/%s (%s)", origin.owner, origin.repo, origin.ref or "default branch")
    own_client = client is None
    http = client or httpx.Client(follow_redirects=True, timeout=120.0)
    try:
        response = http.get(url, headers=_auth_headers())
        if response.status_code != 200:
            msg = f"failed to download {origin.owner}/{origin.repo}: HTTP {response.status_code}"
            raise OriginError(msg)
        data = response.content
    except httpx.HTTPError as exc:
        msg = f"failed to download {origin.owner}/{origin.repo}: {exc}"
        raise OriginError(msg) from exc
    finally:
        if own_client:
            http.close()
    return extract_archive(data, dest)


def iter_checkout(root: Path) -> list[Path]:
    """All regular files below *root*, sorted, skipping VCS and vendor dirs."""
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if path.is_file():
                files.append(path)
    return files


def collect_remote(
    origin: RemoteOrigin,
    extraction_root: Path,
    client: httpx.Client | None = None,
    index: int = 0,
) -> list[SourceFile]:
    """Download *origin* into its own folder; *index* keeps refs of one repo apart."""
    dest = extraction_root / f"{index}_{origin.owner}_{origin.repo}"
    root = download_remote(origin, dest, client)
    return [
        _source_file(path, root, origin.owner, origin.repo, origin.ref)
        for path in iter_checkout(root)
    ]


def collect_local(origin: LocalOrigin, project_root: Path) -> list[SourceFile]:
    """Expand a local glob; paths outside the project are rooted at their parent."""
    pattern = origin.pattern
    if not os.path.isabs(pattern):
        pattern = str(project_root / pattern.removeprefix("./"))

    sources: list[SourceFile] = []
    for match in sorted(glob.glob(pattern, recursive=True)):
        path = Path(match)
        if not path.is_file():
            continue
        root = project_root
        try:
            path.relative_to(project_root)
        except ValueError:
            root = path.parent
        sources.append(_source_file(path, root, origin.owner, origin.repo, origin.ref))

    if not sources:
        logger.warning("Pattern %r matched no files", origin.pattern)
    return sources


def collect_sources(
    origins: tuple[Origin, ...],
    project_root: Path,
    extraction_root: Path,
    client: httpx.Client | None = None,
) -> list[SourceFile]:
    """Source files of every origin, in configuration order."""
    sources: list[SourceFile] = []
    for index, origin in enumerate(origins):
        if isinstance(origin, LocalOrigin):
            sources.extend(collect_local(origin, project_root))
        else:
            sources.extend(collect_remote(origin, extraction_root, client, index))
    logger.debug("Collected %d source files from %d origins", len(sources), len(origins))
    return sources
