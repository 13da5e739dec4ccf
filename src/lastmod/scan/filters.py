"""Eligibility filters applied to each directory entry."""

from __future__ import annotations

from typing import Optional

from .dates import local_midnight
from .models import FileRecord, TraversalConfig


def modified_on_or_after(modification_time: float, cutoff: float) -> bool:
    """Return True when the modification time is at or after the cutoff."""
    return modification_time >= cutoff


def name_contains(name: str, pattern: str) -> bool:
    """Return True when `pattern` occurs anywhere in `name` (case-sensitive)."""
    return pattern in name


class FilterChain:
    """Apply the date filter, then the name filter, stopping at the first rejection."""

    def __init__(self, *, cutoff: Optional[float] = None, exclude_pattern: Optional[str] = None) -> None:
        self.cutoff = cutoff
        self.exclude_pattern = exclude_pattern

    @classmethod
    def from_config(cls, config: TraversalConfig) -> "FilterChain":
        cutoff = local_midnight(config.min_date) if config.min_date is not None else None
        return cls(cutoff=cutoff, exclude_pattern=config.exclude_pattern)

    def admits(self, record: FileRecord) -> bool:
        """Return True when the record survives every active filter."""
        if self.cutoff is not None and not modified_on_or_after(record.modification_time, self.cutoff):
            return False
        if self.exclude_pattern is not None and name_contains(record.name, self.exclude_pattern):
            return False
        return True


__all__ = ["FilterChain", "modified_on_or_after", "name_contains"]
