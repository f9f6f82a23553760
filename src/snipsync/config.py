"""Configuration: load and validate ``snipsync.config.yaml``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from snipsync.core.renderer import RenderOptions
from snipsync.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE = "snipsync.config.yaml"

_FEATURE_FLAGS = ("enable_source_link", "enable_code_block", "enable_code_dedenting")


@dataclass(frozen=True)
class RemoteOrigin:
    """A GitHub repository downloaded as an archive."""

    owner: str
    repo: str
    ref: str | None = None


@dataclass(frozen=True)
class LocalOrigin:
    """Local files matched by a glob, published under owner/repo/ref."""

    pattern: str
    owner: str
    repo: str
    ref: str | None = None


Origin = RemoteOrigin | LocalOrigin


@dataclass(frozen=True)
class SyncConfig:
    """Fully validated configuration, built once and passed down."""

    project_root: Path
    origins: tuple[Origin, ...]
    targets: tuple[str, ...]
    features: RenderOptions = field(default_factory=RenderOptions)
    selections: dict[str, dict[str, Any]] = field(default_factory=dict)


def _require_str(data: dict[str, Any], key: str, where: str, *, required: bool = True) -> str | None:
    value = data.get(key)
    if value is None or value == "":
        if required:
            msg = f"{where}: missing '{key}'"
            raise ConfigError(msg)
        return None
    if not isinstance(value, (str, int, float)):
        msg = f"{where}: '{key}' must be a string"
        raise ConfigError(msg)
    return str(value)


def _parse_origin(raw: Any, index: int) -> Origin:
    where = f"origins[{index}]"
    if not isinstance(raw, dict):
        msg = f"{where}: expected a mapping"
        raise ConfigError(msg)

    files = raw.get("files")
    if files is not None:
        if not isinstance(files, dict):
            msg = f"{where}.files: expected a mapping"
            raise ConfigError(msg)
        return LocalOrigin(
            pattern=_require_str(files, "pattern", f"{where}.files") or "",
            owner=_require_str(files, "owner", f"{where}.files") or "",
            repo=_require_str(files, "repo", f"{where}.files") or "",
            ref=_require_str(files, "ref", f"{where}.files", required=False),
        )

    return RemoteOrigin(
        owner=_require_str(raw, "owner", where) or "",
        repo=_require_str(raw, "repo", where) or "",
        ref=_require_str(raw, "ref", where, required=False),
    )


def _normalize_extension(ext: Any) -> str:
    if not isinstance(ext, str) or not ext.strip():
        msg = f"allowed_target_extensions: invalid extension {ext!r}"
        raise ConfigError(msg)
    ext = ext.strip()
    return ext if ext.startswith(".") else f".{ext}"


def _parse_features(raw: Any) -> RenderOptions:
    if raw is None:
        return RenderOptions()
    if not isinstance(raw, dict):
        msg = "features: expected a mapping"
        raise ConfigError(msg)

    defaults = RenderOptions()
    kwargs: dict[str, Any] = {}
    for flag in _FEATURE_FLAGS:
        value = raw.get(flag)
        if value is None:
            kwargs[flag] = getattr(defaults, flag)
        elif isinstance(value, bool):
            kwargs[flag] = value
        else:
            msg = f"features.{flag}: expected true or false"
            raise ConfigError(msg)

    extensions = raw.get("allowed_target_extensions") or []
    if not isinstance(extensions, list):
        msg = "features.allowed_target_extensions: expected a list"
        raise ConfigError(msg)
    kwargs["allowed_target_extensions"] = tuple(_normalize_extension(e) for e in extensions)

    unknown = sorted(set(raw) - {*_FEATURE_FLAGS, "allowed_target_extensions"})
    if unknown:
        logger.warning("Ignoring unknown feature keys: %s", ", ".join(unknown))
    return RenderOptions(**kwargs)


def _parse_selections(raw: Any) -> dict[str, dict[str, Any]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict) or not all(isinstance(v, dict) for v in raw.values()):
        msg = "selections: expected a mapping of snippet id to options"
        raise ConfigError(msg)
    return {str(k): dict(v) for k, v in raw.items()}


def parse_config(data: Any, project_root: Path) -> SyncConfig:
    """Validate a decoded YAML document and build a :class:`SyncConfig`."""
    if not isinstance(data, dict):
        msg = "configuration must be a mapping"
        raise ConfigError(msg)

    raw_origins = data.get("origins")
    if not isinstance(raw_origins, list) or not raw_origins:
        msg = "origins: expected a non-empty list"
        raise ConfigError(msg)

    raw_targets = data.get("targets")
    if not isinstance(raw_targets, list) or not raw_targets:
        msg = "targets: expected a non-empty list"
        raise ConfigError(msg)
    if not all(isinstance(t, str) and t for t in raw_targets):
        msg = "targets: every entry must be a path string"
        raise ConfigError(msg)

    return SyncConfig(
        project_root=project_root,
        origins=tuple(_parse_origin(o, i) for i, o in enumerate(raw_origins)),
        targets=tuple(raw_targets),
        features=_parse_features(data.get("features")),
        selections=_parse_selections(data.get("selections")),
    )


def load_config(project_root: Path, config_path: Path | None = None) -> SyncConfig:
    """Read and validate the configuration file.

    *config_path* defaults to ``<project_root>/snipsync.config.yaml``.
    """
    path = config_path or (project_root / CONFIG_FILE)
    if not path.is_file():
        msg = f"configuration file not found: {path}"
        raise ConfigError(msg)

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        msg = f"failed to read {path}: {exc}"
        raise ConfigError(msg) from exc

    logger.debug("Loaded configuration from %s", path)
    return parse_config(data, project_root)
