"""Data models used by the traversal engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lastmod.config.exceptions import ConfigError

from .dates import parse_min_date


class TraversalConfig(BaseModel):
    """Validated settings for a single scan.

    Attributes:
        base_path: Root directory to scan.
        min_date: Entries modified before local midnight of this date are ineligible.
        exclude_pattern: Entries whose name contains this substring are ineligible.
        verbose: Whether to report each directory as it is entered.
        follow_symlinks: Whether symbolic links are resolved when reading metadata.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_path: Path
    min_date: Optional[date] = None
    exclude_pattern: Optional[str] = Field(default=None, min_length=1)
    verbose: bool = False
    follow_symlinks: bool = True

    @field_validator("base_path", mode="before")
    @classmethod
    def _require_base_path(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("a base path is required")
        return value

    @field_validator("min_date", mode="before")
    @classmethod
    def _parse_min_date(cls, value: Any) -> Any:
        # DateParseError is not a ValueError, so it escapes pydantic unchanged.
        if isinstance(value, str):
            return parse_min_date(value)
        return value

    @classmethod
    def build(cls, **values: Any) -> "TraversalConfig":
        """Validate keyword values, surfacing failures as `ConfigError`."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid scan options: {exc}") from exc


@dataclass(slots=True, frozen=True)
class FileRecord:
    """Metadata captured for one directory entry.

    Attributes:
        path: Full path of the entry.
        name: Entry name within its parent directory.
        creation_time: Birth time where the platform reports one, otherwise `st_ctime`.
        modification_time: Last modification time.
        is_directory: Whether the entry is a directory.
    """

    path: Path
    name: str
    creation_time: float
    modification_time: float
    is_directory: bool

    @property
    def candidate_time(self) -> float:
        """Return the comparison key used when selecting the latest entry."""
        return max(self.creation_time, self.modification_time)


class ScanIssue(BaseModel):
    """A recoverable failure recorded while scanning."""

    path: str
    kind: Literal["directory", "entry"]
    message: str


class ScanResult(BaseModel):
    """Outcome of a scan: the latest entry plus traversal counters.

    Attributes:
        root: Directory the scan started from.
        path: Latest eligible entry, or None when nothing was eligible.
        timestamp: Candidate time of `path` as a POSIX timestamp.
        directories_scanned: Directories successfully listed.
        entries_seen: Entries whose metadata could be read.
        entries_eligible: Entries that survived the filter chain.
        issues: Recoverable failures encountered along the way.
    """

    root: Path
    path: Optional[Path] = None
    timestamp: Optional[float] = None
    directories_scanned: int = 0
    entries_seen: int = 0
    entries_eligible: int = 0
    issues: List[ScanIssue] = Field(default_factory=list)

    @property
    def found(self) -> bool:
        """Return True when an eligible entry was selected."""
        return self.path is not None

    @property
    def modified_at(self) -> Optional[datetime]:
        """Return the selected entry's candidate time in local time."""
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp)


__all__ = ["TraversalConfig", "FileRecord", "ScanIssue", "ScanResult"]
