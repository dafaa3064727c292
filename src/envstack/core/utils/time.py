"""Timezone-aware time helpers.

Timestamps are persisted as ISO 8601 UTC strings with a ``Z`` suffix and
second precision.
"""
from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current timezone-aware UTC datetime without microseconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def from_timestamp(seconds: float) -> datetime:
    """Convert a POSIX timestamp (e.g. ``st_mtime``) to a UTC datetime."""
    return datetime.fromtimestamp(int(seconds), tz=timezone.utc)


def format_iso8601(dt: datetime) -> str:
    """Format ``dt`` as ISO 8601 UTC with a ``Z`` suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_iso8601(value: str | datetime) -> datetime:
    """Parse an ISO 8601 timestamp string into a UTC datetime.

    PyYAML may already have produced a ``datetime`` for unquoted timestamps;
    those are normalized the same way.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


__all__ = ["utc_now", "from_timestamp", "format_iso8601", "parse_iso8601"]
