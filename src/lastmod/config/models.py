"""Configuration models describing lastmod settings."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LastmodBaseModel(BaseModel):
    """Shared configuration for lastmod Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class ScanDefaults(LastmodBaseModel):
    """Defaults applied to `lastmod find` when the flag is not given.

    Attributes:
        exclude_pattern: Substring that makes an entry ineligible by name.
        verbose: Whether to report each directory as it is entered.
        follow_symlinks: Whether symbolic links are resolved while scanning.
    """

    exclude_pattern: Optional[str] = Field(default=None, min_length=1)
    verbose: bool = False
    follow_symlinks: bool = True


class LoggingSettings(LastmodBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(LastmodBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        time_format: `strftime` pattern used to render result timestamps.
    """

    quiet_default: bool = False
    time_format: str = "%Y-%m-%d %H:%M:%S"


class LastmodConfig(LastmodBaseModel):
    """Top-level configuration struct for lastmod.

    Attributes:
        scan: Traversal defaults.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    scan: ScanDefaults = Field(default_factory=ScanDefaults)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "LastmodBaseModel",
    "ScanDefaults",
    "LoggingSettings",
    "CLIOptions",
    "LastmodConfig",
]
