"""
Bucketing of timestamped records for trend charts.

A date range is split into calendar-aligned buckets (day, week or month).
Every bucket is emitted even when empty so charts get a continuous axis.
"""
import logging
from bisect import bisect_right
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from app.core.exceptions import UnsupportedGranularity
from app.core.money import ZERO
from app.services.period_resolver import DateRange, Period

logger = logging.getLogger(__name__)

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTH_LABELS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

# Ranges up to this span get daily buckets, anything longer monthly ones.
DAILY_MAX_SPAN = timedelta(days=31)
# Daily buckets are labelled by weekday up to this span.
WEEKDAY_LABEL_MAX_SPAN = timedelta(days=7)


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class Record:
    """A single expense or backlink reduced to what the reports need."""
    timestamp: datetime
    amount: Decimal = ZERO
    category: Optional[str] = None
    project_id: Optional[int] = None


@dataclass
class Bucket:
    label: str
    start: datetime
    end: datetime
    count: int = 0
    sum: Decimal = ZERO


def parse_granularity(value: Union[Granularity, str]) -> Granularity:
    if isinstance(value, Granularity):
        return value
    try:
        return Granularity(value)
    except ValueError:
        raise UnsupportedGranularity(
            f"Unsupported granularity '{value}'",
            {"allowed": [g.value for g in Granularity]},
        )


def choose_granularity(
    date_range: DateRange,
    period: Optional[Period] = None,
) -> Granularity:
    """Default bucket width for a range.

    All-time reports are always monthly and the week view always daily.
    Other periods pick by span.
    """
    if period == Period.ALL:
        return Granularity.MONTH
    if period == Period.WEEK or date_range.span <= DAILY_MAX_SPAN:
        return Granularity.DAY
    return Granularity.MONTH


def _floor(moment: datetime, granularity: Granularity) -> datetime:
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    if granularity == Granularity.DAY:
        return midnight
    if granularity == Granularity.WEEK:
        return midnight - timedelta(days=midnight.weekday())
    return midnight.replace(day=1)


def _next_edge(moment: datetime, granularity: Granularity) -> datetime:
    floor = _floor(moment, granularity)
    if granularity == Granularity.DAY:
        return floor + timedelta(days=1)
    if granularity == Granularity.WEEK:
        return floor + timedelta(days=7)
    if floor.month == 12:
        return floor.replace(year=floor.year + 1, month=1)
    return floor.replace(month=floor.month + 1)


def effective_range(
    period: Period,
    date_range: DateRange,
    records: Sequence[Record],
) -> DateRange:
    """Pull the start of an all-time range forward to the earliest record's month.

    Other periods are returned unchanged.
    """
    if period != Period.ALL:
        return date_range

    in_range = [r.timestamp for r in records if date_range.contains(r.timestamp)]
    anchor = min(in_range) if in_range else date_range.end
    start = max(date_range.start, _floor(anchor, Granularity.MONTH))
    return DateRange(start, date_range.end)


def _label(
    start: datetime,
    index: int,
    granularity: Granularity,
    date_range: DateRange,
    single_year: bool,
    total: int,
) -> str:
    if granularity == Granularity.DAY:
        # A partial leading day would repeat the last weekday label
        leading_overlap = index == 0 and total > len(WEEKDAY_LABELS)
        if date_range.span <= WEEKDAY_LABEL_MAX_SPAN and not leading_overlap:
            return WEEKDAY_LABELS[start.weekday()]
        return f"{start.month:02d}/{start.day:02d}"
    if granularity == Granularity.WEEK:
        return f"W{index + 1}"
    if single_year:
        return MONTH_LABELS[start.month - 1]
    return f"{start.year}-{start.month:02d}"


def empty_buckets(
    date_range: DateRange,
    granularity: Union[Granularity, str],
) -> List[Bucket]:
    """Split ``date_range`` into contiguous half-open buckets."""
    granularity = parse_granularity(granularity)

    edges = []
    cursor = date_range.start
    while cursor < date_range.end:
        upper = min(_next_edge(cursor, granularity), date_range.end)
        edges.append((cursor, upper))
        cursor = upper

    single_year = bool(edges) and edges[0][0].year == edges[-1][0].year
    return [
        Bucket(
            label=_label(start, i, granularity, date_range, single_year, len(edges)),
            start=start,
            end=end,
        )
        for i, (start, end) in enumerate(edges)
    ]


def aggregate(
    records: Iterable[Record],
    date_range: DateRange,
    granularity: Union[Granularity, str],
) -> List[Bucket]:
    """Count and sum records into buckets covering ``date_range``.

    A record on a bucket edge lands in the later bucket. Records outside
    the range are dropped.
    """
    buckets = empty_buckets(date_range, granularity)
    starts = [b.start for b in buckets]

    skipped = 0
    for record in records:
        if not date_range.contains(record.timestamp):
            skipped += 1
            continue
        bucket = buckets[bisect_right(starts, record.timestamp) - 1]
        bucket.count += 1
        bucket.sum += record.amount

    logger.debug(
        f"Aggregated into {len(buckets)} {parse_granularity(granularity).value} buckets "
        f"({skipped} records outside range)"
    )
    return buckets
