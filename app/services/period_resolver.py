"""
Period resolution for analytics.

Turns a named reporting period (week, month, year, ...) into a concrete
date range. The current time is always passed in by the caller so the
result depends only on the arguments.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Union

from app.core.exceptions import InvalidRange


class Period(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    LAST_YEAR = "last_year"
    ALL = "all"
    CUSTOM = "custom"


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidRange(
                "Range start must not be after range end",
                {"start": self.start.isoformat(), "end": self.end.isoformat()},
            )

    @property
    def span(self) -> timedelta:
        return self.end - self.start

    def contains(self, moment: datetime) -> bool:
        """Half-open membership: start inclusive, end exclusive."""
        return self.start <= moment < self.end


def _epoch_like(now: datetime) -> datetime:
    if now.tzinfo is not None:
        return datetime.fromtimestamp(0, tz=timezone.utc).astimezone(now.tzinfo)
    return datetime(1970, 1, 1)


def parse_period(value: Union[Period, str]) -> Period:
    """Accept a Period or its string value."""
    if isinstance(value, Period):
        return value
    try:
        return Period(value)
    except ValueError:
        raise InvalidRange(
            f"Unknown period '{value}'",
            {"allowed": [p.value for p in Period]},
        )


def resolve(
    period: Union[Period, str],
    now: datetime,
    custom_start: Optional[datetime] = None,
    custom_end: Optional[datetime] = None,
) -> DateRange:
    """Map a period to a concrete [start, end] range relative to ``now``.

    Args:
        period: Period token (enum or string value)
        now: Reference instant; its tzinfo is carried into the result
        custom_start: Explicit start, required for the custom period
        custom_end: Explicit end, required for the custom period

    Raises:
        InvalidRange: Unknown period, or custom bounds missing/inverted
    """
    period = parse_period(period)

    if period == Period.CUSTOM:
        if custom_start is None or custom_end is None:
            raise InvalidRange(
                "Custom period requires both start and end",
                {"start": custom_start, "end": custom_end},
            )
        if custom_start > custom_end:
            raise InvalidRange(
                "Custom period start is after end",
                {"start": custom_start.isoformat(), "end": custom_end.isoformat()},
            )
        return DateRange(custom_start, custom_end)

    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if period == Period.WEEK:
        return DateRange(now - timedelta(days=7), now)
    if period == Period.MONTH:
        return DateRange(midnight.replace(day=1), now)
    if period == Period.YEAR:
        return DateRange(midnight.replace(month=1, day=1), now)
    if period == Period.LAST_YEAR:
        last_year = now.year - 1
        return DateRange(
            midnight.replace(year=last_year, month=1, day=1),
            midnight.replace(year=last_year, month=12, day=31, hour=23, minute=59, second=59),
        )
    # Period.ALL
    return DateRange(_epoch_like(now), now)
