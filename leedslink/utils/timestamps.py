"""
Timestamp helpers.

All record timestamps are timezone-aware UTC datetimes, persisted as ISO-8601.
"""

from datetime import datetime, timezone
from typing import Union


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Serialize a datetime as ISO-8601 with a trailing Z."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def from_iso(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO-8601 string (or pass through a datetime).

    Naive values are assumed to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
