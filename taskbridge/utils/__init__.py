"""Utility modules for Task Bridge."""

from .datetime_utils import (
    get_local_tz,
    get_local_now,
    start_of_day,
    get_start_of_today,
    parse_due_date,
    format_due_date,
)

__all__ = [
    "get_local_tz",
    "get_local_now",
    "start_of_day",
    "get_start_of_today",
    "parse_due_date",
    "format_due_date",
]
