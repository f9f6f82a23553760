"""Snipsync: keep code examples in documentation in sync with source files."""

__version__ = "1.0.0"
