"""
Helpers for the JSON record format shared by every collection.

Instants are stored as ISO-8601 UTC strings with millisecond precision and
a trailing ``Z``.
"""
from datetime import datetime, timezone
from typing import Optional

from django.utils.dateparse import parse_datetime


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Format an instant for storage (None passes through)."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_instant(value) -> Optional[datetime]:
    """
    Parse a stored instant.

    Naive values are read as UTC. Empty values yield None.

    Raises:
        ValueError: If the value is not an ISO-8601 datetime
    """
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(str(value))
        if parsed is None:
            raise ValueError(f"Invalid datetime: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
