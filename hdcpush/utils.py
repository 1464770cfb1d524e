"""Timestamp utilities for sync records."""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

# =============================================================================
# Watermark bounds
# =============================================================================

# Lower bound used when a device has no watermark yet
MIN_WATERMARK: datetime = datetime.min.replace(tzinfo=timezone.utc)

# Baseline recorded for a first run that found no files
EPOCH: datetime = datetime(1970, 1, 1, tzinfo=timezone.utc)

_FRACTION_RE = re.compile(r"(\.\d+)")


# =============================================================================
# Conversion utilities
# =============================================================================


def mtime_from_ns(mtime_ns: int) -> datetime:
    """Convert a nanosecond modification time to a UTC datetime.

    The value is truncated to microseconds so that a timestamp written to the
    record file compares equal to the file's mtime when read back.

    Args:
        mtime_ns: ``st_mtime_ns`` value from ``os.stat``

    Returns:
        Timezone-aware UTC datetime
    """
    seconds, nanos = divmod(mtime_ns, 1_000_000_000)
    return EPOCH + timedelta(seconds=seconds, microseconds=nanos // 1000)


def format_rfc3339(value: datetime) -> str:
    """Format a datetime as an RFC 3339 string in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_rfc3339(timestamp_str: str) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp into a UTC datetime.

    Accepts a ``Z`` suffix and fractional seconds of any length
    (e.g., ``2024-03-01T08:15:30.123456789+00:00``); extra digits beyond
    microseconds are dropped.

    Args:
        timestamp_str: RFC 3339 timestamp string

    Returns:
        Timezone-aware UTC datetime, or None if the string can't be parsed
        or carries no offset
    """
    if not isinstance(timestamp_str, str) or not timestamp_str:
        return None

    value = timestamp_str.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"

    value = _FRACTION_RE.sub(lambda m: m.group(1)[:7].ljust(7, "0"), value, count=1)

    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None

    if dt.tzinfo is None:
        return None
    return dt.astimezone(timezone.utc)
