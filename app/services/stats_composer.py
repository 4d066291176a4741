"""
Scalar reductions over aggregated buckets.

Builds the Summary handed to the API layer: totals, per-category sums and
top-N rankings.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Collection, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from app.core.money import ZERO
from app.services.aggregator import Bucket, Record
from app.services.period_resolver import DateRange

OTHER_CATEGORY = "other"


@dataclass
class Summary:
    total_count: int = 0
    total_amount: Decimal = ZERO
    buckets: List[Bucket] = field(default_factory=list)
    by_category: Dict[str, Decimal] = field(default_factory=dict)


@dataclass
class RankedEntry:
    key: Any
    name: str
    amount: Decimal


def normalize_category(
    category: Optional[str],
    known_categories: Optional[Collection[str]] = None,
) -> str:
    """Lower-case a category; blank or unknown ones become ``other``."""
    key = (category or "").strip().lower()
    if not key:
        return OTHER_CATEGORY
    if known_categories is not None and key not in known_categories:
        return OTHER_CATEGORY
    return key


def group_by_category(
    records: Iterable[Record],
    known_categories: Optional[Collection[str]] = None,
) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = {}
    for record in records:
        key = normalize_category(record.category, known_categories)
        totals[key] = totals.get(key, ZERO) + record.amount
    return totals


def percentages(totals: Dict[Hashable, Decimal]) -> Dict[Hashable, float]:
    """Share of each entry in the grand total, one decimal place."""
    grand_total = sum(totals.values(), ZERO)
    if grand_total <= 0:
        return {key: 0.0 for key in totals}
    return {
        key: round(float(amount / grand_total * 100), 1)
        for key, amount in totals.items()
    }


def rank_top(
    entries: Iterable[Tuple[Hashable, str, Decimal]],
    limit: int = 5,
) -> List[RankedEntry]:
    """Group (key, name, amount) entries by key and keep the largest.

    Ties keep the order in which keys were first seen.
    """
    grouped: Dict[Hashable, RankedEntry] = {}
    for key, name, amount in entries:
        if key in grouped:
            grouped[key].amount += amount
        else:
            grouped[key] = RankedEntry(key=key, name=name, amount=amount)

    ranked = sorted(grouped.values(), key=lambda e: e.amount, reverse=True)
    return ranked[:limit]


def compose(
    buckets: Sequence[Bucket],
    records: Iterable[Record],
    known_categories: Optional[Collection[str]] = None,
) -> Summary:
    """Combine buckets and the records they were built from into a Summary.

    Only records inside the span covered by ``buckets`` count towards the
    category totals, so they always agree with the bucket counts.
    """
    if not buckets:
        return Summary()

    span = DateRange(buckets[0].start, buckets[-1].end)
    in_span = [r for r in records if span.contains(r.timestamp)]

    return Summary(
        total_count=sum(b.count for b in buckets),
        total_amount=sum((b.sum for b in buckets), ZERO),
        buckets=list(buckets),
        by_category=group_by_category(in_span, known_categories),
    )
