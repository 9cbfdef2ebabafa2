"""
Centralized datetime and timezone utilities.

Due dates and "today" are naive datetimes in the configured local timezone,
so bucketing compares like with like.
"""

from datetime import datetime
from typing import Any, Optional
import json

import pytz

from config import settings


def get_local_tz(tz_name: Optional[str] = None) -> pytz.BaseTzInfo:
    """Get tz_name, or the configured local timezone."""
    return pytz.timezone(tz_name or settings.timezone)


def get_local_now(tz_name: Optional[str] = None) -> datetime:
    """Get current time in local timezone (naive)."""
    local_tz = get_local_tz(tz_name)
    return datetime.now(local_tz).replace(tzinfo=None)


def start_of_day(dt: datetime) -> datetime:
    """Midnight of dt's calendar day."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def get_start_of_today(tz_name: Optional[str] = None) -> datetime:
    """Local midnight today (naive)."""
    return start_of_day(get_local_now(tz_name))


def parse_due_date(value: Any) -> Optional[datetime]:
    """
    Parse a monday.com date column payload into a naive local datetime.

    Accepts the JSON-encoded value string or its decoded dict:
    - {"date": "2026-01-18"}
    - {"date": "2026-01-18", "time": "14:30:00"}

    Args:
        value: Date column value

    Returns:
        Naive datetime, or None if missing or malformed
    """
    if not value:
        return None

    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None

    if not isinstance(value, dict) or not value.get("date"):
        return None

    try:
        due = datetime.strptime(str(value["date"]), "%Y-%m-%d")
    except ValueError:
        return None

    time_str = value.get("time")
    if time_str:
        try:
            t = datetime.strptime(str(time_str), "%H:%M:%S").time()
            due = due.replace(hour=t.hour, minute=t.minute, second=t.second)
        except ValueError:
            pass

    return due


def format_due_date(dt: Optional[datetime]) -> str:
    """
    Format a due date for display.

    Returns:
        Formatted string or "No date" if None
    """
    if dt is None:
        return "No date"
    if dt.hour or dt.minute:
        return dt.strftime("%b %d, %Y %I:%M %p")
    return dt.strftime("%b %d, %Y")
