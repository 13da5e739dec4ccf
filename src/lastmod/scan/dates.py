"""Cutoff date parsing."""

from __future__ import annotations

import re
from datetime import date, datetime, time

from lastmod.config.exceptions import DateParseError

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_min_date(value: str) -> date:
    """Parse a `YYYY-MM-DD` string into a calendar date.

    Args:
        value: Text supplied by the user.

    Returns:
        date: The parsed calendar date.

    Raises:
        DateParseError: If the text is not a real date in `YYYY-MM-DD` form.
    """
    text = value.strip()
    if not _DATE_PATTERN.match(text):
        raise DateParseError(f"Invalid date {value!r}; expected YYYY-MM-DD.")
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise DateParseError(f"Invalid date {value!r}: {exc}") from exc


def local_midnight(day: date) -> float:
    """Return the POSIX timestamp of local midnight at the start of `day`."""
    return datetime.combine(day, time.min).timestamp()


__all__ = ["parse_min_date", "local_midnight"]
