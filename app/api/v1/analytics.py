import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_now
from app.config import get_settings
from app.core.clock import to_local_naive
from app.schemas.analytics import (
    TrendResponse,
    CategoryBreakdownResponse,
    ProjectCostResponse,
    AnalyticsSummaryResponse,
)
from app.services.aggregator import Granularity
from app.services.analytics_service import AnalyticsService
from app.services.period_resolver import Period

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter()

PERIOD_DESCRIPTION = "Period: week, month, year, last_year, all, or custom"


@router.get("/summary", response_model=AnalyticsSummaryResponse)
async def get_summary(
    period: Period = Query(Period.MONTH, description=PERIOD_DESCRIPTION),
    start: Optional[datetime] = Query(None, description="Start for custom period"),
    end: Optional[datetime] = Query(None, description="End for custom period"),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Get headline numbers for a period.

    Total expense cost and count, plus new backlinks with their cost and
    how many of them are live.
    """
    analytics = AnalyticsService(db)
    result = await analytics.get_summary(
        period, to_local_naive(start), to_local_naive(end), now=now
    )

    logger.info(
        f"Analytics summary result: period={period.value}, "
        f"expense_count={result.expense_count}, backlink_count={result.backlink_count}"
    )

    return result


@router.get("/expense-trend", response_model=TrendResponse)
async def get_expense_trend(
    period: Period = Query(Period.MONTH, description=PERIOD_DESCRIPTION),
    start: Optional[datetime] = Query(None, description="Start for custom period"),
    end: Optional[datetime] = Query(None, description="End for custom period"),
    granularity: Optional[Granularity] = Query(
        None, description="Bucket width: day, week or month (chosen from the span if omitted)"
    ),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Get expense amounts bucketed over a period.

    Every bucket in the range is returned, empty ones included.
    """
    analytics = AnalyticsService(db)
    result = await analytics.get_expense_trend(
        period, to_local_naive(start), to_local_naive(end), granularity, now=now
    )

    logger.info(
        f"Expense trend result: period={period.value}, buckets={len(result.buckets)}, "
        f"total_amount={result.total_amount}"
    )

    return result


@router.get("/backlink-trend", response_model=TrendResponse)
async def get_backlink_trend(
    period: Period = Query(Period.MONTH, description=PERIOD_DESCRIPTION),
    start: Optional[datetime] = Query(None, description="Start for custom period"),
    end: Optional[datetime] = Query(None, description="End for custom period"),
    granularity: Optional[Granularity] = Query(
        None, description="Bucket width: day, week or month (chosen from the span if omitted)"
    ),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Get new backlinks bucketed over a period.

    Bucket counts are new backlinks, sums their cost. ``by_category`` groups
    them by status.
    """
    analytics = AnalyticsService(db)
    result = await analytics.get_backlink_trend(
        period, to_local_naive(start), to_local_naive(end), granularity, now=now
    )

    logger.info(
        f"Backlink trend result: period={period.value}, buckets={len(result.buckets)}, "
        f"total_count={result.total_count}"
    )

    return result


@router.get("/categories", response_model=CategoryBreakdownResponse)
async def get_categories(
    period: Period = Query(Period.MONTH, description=PERIOD_DESCRIPTION),
    start: Optional[datetime] = Query(None, description="Start for custom period"),
    end: Optional[datetime] = Query(None, description="End for custom period"),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Get expense totals per category with percentages (pie chart)."""
    analytics = AnalyticsService(db)
    return await analytics.get_category_breakdown(
        period, to_local_naive(start), to_local_naive(end), now=now
    )


@router.get("/project-costs", response_model=ProjectCostResponse)
async def get_project_costs(
    limit: int = Query(settings.TOP_PROJECTS_LIMIT, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the most expensive cost centres over all time.

    Expenses without a project are grouped together as ``fixed_cost``.
    """
    analytics = AnalyticsService(db)
    return await analytics.get_project_cost_comparison(limit=limit)
