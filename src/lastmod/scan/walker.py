"""Depth-first directory traversal feeding the latest-entry selection."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional

from .errors import RootUnreadableError
from .filters import FilterChain
from .models import FileRecord, ScanIssue, ScanResult, TraversalConfig
from .selector import SelectionState, consider

LOGGER = logging.getLogger(__name__)

DirectoryCallback = Callable[[Path], None]


@dataclass(slots=True)
class WalkStats:
    """Counters and recovered failures collected by a walk."""

    directories_scanned: int = 0
    entries_seen: int = 0
    entries_eligible: int = 0
    issues: list[ScanIssue] = field(default_factory=list)


class Walker:
    """Enumerate a directory tree in pre-order and select the latest eligible entry.

    Each entry is stat'ed, passed through the filter chain and, when it
    survives, offered to the selection state. Surviving directories are
    descended into before the next sibling is visited. Pending listings are
    kept on an explicit stack, so tree depth is not limited by the
    interpreter's recursion limit.
    """

    def __init__(
        self,
        config: TraversalConfig,
        *,
        on_directory: Optional[DirectoryCallback] = None,
    ) -> None:
        self.config = config
        self.filters = FilterChain.from_config(config)
        self.on_directory = on_directory

    def walk(self, directory: Path, state: SelectionState) -> WalkStats:
        """Scan the tree rooted at `directory`, updating `state` in place.

        Args:
            directory: Directory to start from.
            state: Selection state shared across the whole walk.

        Returns:
            WalkStats: Counters and per-entry failures for the walk.

        Raises:
            RootUnreadableError: If `directory` itself cannot be listed.
        """
        stats = WalkStats()
        root_names = self._enter(directory, stats, is_root=True)
        pending: list[tuple[Path, Iterator[str]]] = [(directory, iter(root_names or []))]

        while pending:
            parent, names = pending[-1]
            name = next(names, None)
            if name is None:
                pending.pop()
                continue

            record = self._read_record(parent / name, name, stats)
            if record is None:
                continue
            stats.entries_seen += 1

            if not self.filters.admits(record):
                continue
            stats.entries_eligible += 1
            consider(record, state)

            if record.is_directory:
                children = self._enter(record.path, stats)
                if children is not None:
                    pending.append((record.path, iter(children)))

        return stats

    def _enter(self, directory: Path, stats: WalkStats, *, is_root: bool = False) -> Optional[list[str]]:
        """List `directory`, returning None when a nested directory cannot be opened."""
        try:
            # scandir never yields the "." and ".." pseudo-entries.
            with os.scandir(directory) as iterator:
                names = [entry.name for entry in iterator]
        except OSError as exc:
            reason = exc.strerror or str(exc)
            if is_root:
                raise RootUnreadableError(directory, reason) from exc
            LOGGER.warning("Cannot open %s: %s", directory, reason)
            stats.issues.append(ScanIssue(path=str(directory), kind="directory", message=reason))
            return None

        LOGGER.debug("Entering %s", directory)
        if self.config.verbose and self.on_directory is not None:
            self.on_directory(directory)
        stats.directories_scanned += 1
        return names

    def _read_record(self, path: Path, name: str, stats: WalkStats) -> Optional[FileRecord]:
        try:
            info = path.stat(follow_symlinks=self.config.follow_symlinks)
        except OSError as exc:
            reason = exc.strerror or str(exc)
            LOGGER.warning("Cannot get the file information of %s: %s", path, reason)
            stats.issues.append(ScanIssue(path=str(path), kind="entry", message=reason))
            return None

        return FileRecord(
            path=path,
            name=name,
            creation_time=getattr(info, "st_birthtime", info.st_ctime),
            modification_time=info.st_mtime,
            is_directory=stat.S_ISDIR(info.st_mode),
        )


def find_latest(
    config: TraversalConfig,
    *,
    on_directory: Optional[DirectoryCallback] = None,
) -> ScanResult:
    """Scan `config.base_path` and return the latest eligible entry.

    Args:
        config: Validated traversal settings.
        on_directory: Called with each directory entered when `config.verbose` is set.

    Returns:
        ScanResult: The selected entry (if any) plus traversal counters.

    Raises:
        RootUnreadableError: If the base path cannot be listed.
    """
    root = config.base_path.expanduser()
    state = SelectionState()
    stats = Walker(config, on_directory=on_directory).walk(root, state)

    return ScanResult(
        root=root,
        path=state.best_path,
        timestamp=state.best_time if state.best_path is not None else None,
        directories_scanned=stats.directories_scanned,
        entries_seen=stats.entries_seen,
        entries_eligible=stats.entries_eligible,
        issues=stats.issues,
    )


__all__ = ["Walker", "WalkStats", "DirectoryCallback", "find_latest"]
