"""Running selection of the latest entry."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .models import FileRecord


@dataclass(slots=True)
class SelectionState:
    """Best candidate observed so far during one traversal.

    Attributes:
        best_path: Path of the current best entry, None until one is seen.
        best_time: Candidate time of `best_path`.
    """

    best_path: Optional[Path] = None
    best_time: float = 0.0


def consider(record: FileRecord, state: SelectionState) -> SelectionState:
    """Replace the best candidate when `record` is strictly newer.

    Ties keep the entry that was discovered first.
    """
    candidate_time = record.candidate_time
    if state.best_path is None or candidate_time > state.best_time:
        state.best_path = record.path
        state.best_time = candidate_time
    return state


__all__ = ["SelectionState", "consider"]
