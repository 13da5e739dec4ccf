"""Custom exceptions for configuration handling."""


class ConfigError(Exception):
    """Raised when configuration data cannot be processed."""


class DateParseError(ConfigError):
    """Raised when a cutoff date is not a valid `YYYY-MM-DD` calendar date."""
