"""Exception hierarchy for snipsync."""

from __future__ import annotations


class SnipsyncError(Exception):
    """Base class for fatal snipsync errors."""


class ConfigError(SnipsyncError):
    """Raised when the configuration file is missing or invalid."""


class OriginError(SnipsyncError):
    """Raised when an origin repository cannot be acquired."""


class SelectionError(SnipsyncError):
    """Raised when a snippet selection (line range, pattern) is invalid."""
