"""Date and time utilities for Calendar Mirror application."""

from datetime import datetime, timedelta
from typing import Optional

import pytz


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure datetime is in UTC.

    Args:
        dt: Datetime to convert

    Returns:
        UTC datetime
    """
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def get_full_sync_start(
    lookback_days: int = 30,
    now: Optional[datetime] = None,
    timezone: Optional[str] = None,
) -> datetime:
    """
    Get the lower bound of a full-sync window.

    The bound is midnight, ``lookback_days`` days before ``now``, in the
    given timezone (UTC when not set). There is no upper bound.

    Args:
        lookback_days: Days to look back from now
        now: Reference time (defaults to the current time)
        timezone: Timezone name used to find midnight

    Returns:
        Timezone-aware start of the window
    """
    tz = pytz.timezone(timezone) if timezone else pytz.utc
    if now is None:
        now = datetime.now(tz)
    else:
        now = ensure_utc(now).astimezone(tz)

    day = (now - timedelta(days=lookback_days)).replace(tzinfo=None)
    midnight = day.replace(hour=0, minute=0, second=0, microsecond=0)
    return tz.localize(midnight)


def to_rfc3339(dt: datetime) -> str:
    """Format a datetime the way the Calendar API expects (``timeMin``)."""
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_rfc3339(value: str) -> datetime:
    """Parse a Calendar API ``dateTime`` value into an aware UTC datetime."""
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))
