"""Wall-clock access for request handlers.

Timestamps are stored as naive datetimes in the configured local timezone,
so the reporting core can compare them directly.
"""
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from app.config import get_settings


def local_zone() -> ZoneInfo:
    return ZoneInfo(get_settings().TIMEZONE)


def now_local() -> datetime:
    """Current time as a naive datetime in the configured timezone."""
    return datetime.now(local_zone()).replace(tzinfo=None)


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(local_zone()).replace(tzinfo=None)
