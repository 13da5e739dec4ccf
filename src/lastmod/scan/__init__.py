"""Traversal engine that locates the most recently changed entry in a tree."""

from .dates import local_midnight, parse_min_date
from .errors import RootUnreadableError, ScanError
from .filters import FilterChain
from .models import FileRecord, ScanIssue, ScanResult, TraversalConfig
from .selector import SelectionState, consider
from .walker import Walker, WalkStats, find_latest

__all__ = [
    "FileRecord",
    "FilterChain",
    "RootUnreadableError",
    "ScanError",
    "ScanIssue",
    "ScanResult",
    "SelectionState",
    "TraversalConfig",
    "WalkStats",
    "Walker",
    "consider",
    "find_latest",
    "local_midnight",
    "parse_min_date",
]
