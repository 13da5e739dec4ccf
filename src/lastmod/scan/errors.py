"""Traversal errors."""

from __future__ import annotations

from pathlib import Path


class ScanError(Exception):
    """Base exception for traversal failures that abort a scan."""


class RootUnreadableError(ScanError):
    """Raised when the directory a scan starts from cannot be listed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot open {path}: {reason}")
        self.path = path
        self.reason = reason
