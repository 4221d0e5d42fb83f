"""Datetime utilities for persistence layer."""

from datetime import datetime
from typing import Any

from pocketlog.domain.services.datetimes import normalize_to_utc


def format_datetime(dt: datetime | None) -> str | None:
    """Serialize a datetime as an ISO 8601 UTC string (None stays None)."""
    if dt is None:
        return None
    return normalize_to_utc(dt).isoformat()


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO 8601 string (or datetime) into an aware UTC datetime.

    Raises:
        ValueError: The string is not ISO 8601.
        TypeError: The value is neither None, str nor datetime.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return normalize_to_utc(value)
    if isinstance(value, str):
        return normalize_to_utc(datetime.fromisoformat(value))
    raise TypeError(f"Unsupported datetime value: {value!r}")
