import logging
from datetime import datetime
from typing import Optional, List, Tuple, Union

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import now_local
from app.core.money import to_decimal, to_float
from app.db.repositories.backlink_repo import BacklinkRepository
from app.db.repositories.expense_repo import ExpenseRepository
from app.models.backlink import Backlink
from app.models.enums import BacklinkStatus, EXPENSE_CATEGORY_LABELS
from app.models.expense import Expense
from app.schemas.analytics import (
    BucketResponse,
    TrendResponse,
    CategorySlice,
    CategoryBreakdownResponse,
    ProjectCost,
    ProjectCostResponse,
    AnalyticsSummaryResponse,
    get_category_color,
)
from app.services.aggregator import (
    Granularity,
    Record,
    aggregate,
    choose_granularity,
    effective_range,
    parse_granularity,
)
from app.services.period_resolver import DateRange, Period, parse_period, resolve
from app.services.stats_composer import (
    Summary,
    compose,
    group_by_category,
    percentages,
    rank_top,
)

logger = logging.getLogger(__name__)

# Name used for expenses that are not attached to any project
FIXED_COST_NAME = "fixed_cost"


def expense_record(expense: Expense) -> Record:
    return Record(
        timestamp=expense.paid_at,
        amount=to_decimal(expense.amount),
        category=expense.category,
        project_id=expense.project_id,
    )


def backlink_record(backlink: Backlink) -> Record:
    """Backlinks are bucketed by creation time and grouped by status."""
    return Record(
        timestamp=backlink.created_at,
        amount=to_decimal(backlink.cost),
        category=backlink.status,
        project_id=backlink.project_id,
    )


class AnalyticsService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.expenses = ExpenseRepository(db)
        self.backlinks = BacklinkRepository(db)

    def _resolve(
        self,
        period: Union[Period, str],
        start: Optional[datetime],
        end: Optional[datetime],
        now: Optional[datetime],
    ) -> Tuple[Period, DateRange]:
        period = parse_period(period)
        date_range = resolve(period, now or now_local(), start, end)
        logger.info(
            f"Resolved period={period.value} to start={date_range.start.isoformat()}, "
            f"end={date_range.end.isoformat()}"
        )
        return period, date_range

    def _build_trend(
        self,
        period: Period,
        date_range: DateRange,
        records: List[Record],
        granularity: Optional[Union[Granularity, str]],
    ) -> TrendResponse:
        report_range = effective_range(period, date_range, records)
        width = (
            parse_granularity(granularity)
            if granularity is not None
            else choose_granularity(report_range, period)
        )
        buckets = aggregate(records, report_range, width)
        summary = compose(buckets, records)
        return self._trend_response(period, report_range, width, summary)

    def _trend_response(
        self,
        period: Period,
        date_range: DateRange,
        granularity: Granularity,
        summary: Summary,
    ) -> TrendResponse:
        return TrendResponse(
            period=period.value,
            start=date_range.start,
            end=date_range.end,
            granularity=granularity.value,
            total_count=summary.total_count,
            total_amount=to_float(summary.total_amount),
            buckets=[
                BucketResponse(
                    label=b.label,
                    start=b.start,
                    end=b.end,
                    count=b.count,
                    sum=to_float(b.sum),
                )
                for b in summary.buckets
            ],
            by_category={k: to_float(v) for k, v in summary.by_category.items()},
        )

    async def get_expense_trend(
        self,
        period: Union[Period, str],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        granularity: Optional[Union[Granularity, str]] = None,
        now: Optional[datetime] = None,
    ) -> TrendResponse:
        """Expense amounts per bucket over the selected period."""
        period, date_range = self._resolve(period, start, end, now)
        expenses = await self.expenses.list_paid_between(date_range.start, date_range.end)
        records = [expense_record(e) for e in expenses]
        return self._build_trend(period, date_range, records, granularity)

    async def get_backlink_trend(
        self,
        period: Union[Period, str],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        granularity: Optional[Union[Granularity, str]] = None,
        now: Optional[datetime] = None,
    ) -> TrendResponse:
        """New backlinks (count and cost) per bucket over the selected period."""
        period, date_range = self._resolve(period, start, end, now)
        backlinks = await self.backlinks.list_created_between(date_range.start, date_range.end)
        records = [backlink_record(b) for b in backlinks]
        return self._build_trend(period, date_range, records, granularity)

    async def get_category_breakdown(
        self,
        period: Union[Period, str],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> CategoryBreakdownResponse:
        """Expense totals per category for the pie chart, largest first."""
        period, date_range = self._resolve(period, start, end, now)
        expenses = await self.expenses.list_paid_between(date_range.start, date_range.end)
        records = [
            r for r in (expense_record(e) for e in expenses)
            if date_range.contains(r.timestamp)
        ]

        totals = group_by_category(records)
        shares = percentages(totals)
        ranked = rank_top(
            ((key, key, amount) for key, amount in totals.items()),
            limit=len(totals),
        )

        categories = [
            CategorySlice(
                category=entry.key,
                name=EXPENSE_CATEGORY_LABELS.get(entry.key, entry.key),
                amount=to_float(entry.amount),
                percentage=shares[entry.key],
                color_hex=get_category_color(entry.key),
            )
            for entry in ranked
        ]

        return CategoryBreakdownResponse(
            period=period.value,
            start=date_range.start,
            end=date_range.end,
            total_amount=to_float(sum((r.amount for r in records), to_decimal(0))),
            categories=categories,
        )

    async def get_project_cost_comparison(
        self,
        limit: int = 5,
    ) -> ProjectCostResponse:
        """Top cost centres over all expenses.

        Expenses without a project are pooled under ``fixed_cost``.
        """
        expenses = await self.expenses.get_all()

        entries = []
        # Oldest first so ties rank by whichever cost centre appeared first
        for expense in reversed(expenses):
            if expense.project_id is None:
                entries.append((None, FIXED_COST_NAME, to_decimal(expense.amount)))
            else:
                name = expense.project_name or f"Project {expense.project_id}"
                entries.append((expense.project_id, name, to_decimal(expense.amount)))

        ranked = rank_top(entries, limit=limit)
        logger.info(f"Project cost comparison: {len(ranked)} cost centres from {len(expenses)} expenses")

        return ProjectCostResponse(
            projects=[
                ProjectCost(project_id=e.key, name=e.name, amount=to_float(e.amount))
                for e in ranked
            ]
        )

    async def get_summary(
        self,
        period: Union[Period, str],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> AnalyticsSummaryResponse:
        """Headline numbers for the analytics cards."""
        period, date_range = self._resolve(period, start, end, now)

        expenses = await self.expenses.list_paid_between(date_range.start, date_range.end)
        backlinks = await self.backlinks.list_created_between(date_range.start, date_range.end)

        expense_records = [
            r for r in (expense_record(e) for e in expenses)
            if date_range.contains(r.timestamp)
        ]
        backlink_records = [
            r for r in (backlink_record(b) for b in backlinks)
            if date_range.contains(r.timestamp)
        ]

        zero = to_decimal(0)
        return AnalyticsSummaryResponse(
            period=period.value,
            start=date_range.start,
            end=date_range.end,
            total_cost=to_float(sum((r.amount for r in expense_records), zero)),
            expense_count=len(expense_records),
            backlink_count=len(backlink_records),
            backlink_cost=to_float(sum((r.amount for r in backlink_records), zero)),
            live_backlinks=sum(
                1 for r in backlink_records if r.category == BacklinkStatus.LIVE.value
            ),
        )
