"""
Expense bookkeeping on top of the repository.

Keeps a project's domain expiry in step with its domain expenses and
computes the numbers shown on the expenses page.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import now_local
from app.core.exceptions import ResourceNotFoundError
from app.core.money import ZERO, to_decimal, to_float
from app.db.repositories.expense_repo import ExpenseRepository
from app.db.repositories.project_repo import ProjectRepository
from app.models.enums import ExpenseCategory
from app.models.expense import Expense
from app.schemas.expense import (
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseResponse,
    ExpenseStats,
    MonthlyAmount,
    MonthlyTrendResponse,
    UpcomingExpiry,
    UpcomingExpiriesResponse,
)
from app.services.aggregator import Granularity, aggregate
from app.services.analytics_service import expense_record
from app.services.period_resolver import DateRange

logger = logging.getLogger(__name__)

TREND_MONTHS = 12


def _months_back(moment: datetime, months: int) -> datetime:
    """First day of the month ``months`` before ``moment``'s month, at midnight."""
    index = moment.year * 12 + (moment.month - 1) - months
    return moment.replace(
        year=index // 12, month=index % 12 + 1, day=1,
        hour=0, minute=0, second=0, microsecond=0,
    )


class ExpenseService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.expenses = ExpenseRepository(db)
        self.projects = ProjectRepository(db)

    async def _ensure_project(self, project_id: Optional[int]) -> None:
        if project_id is not None and await self.projects.get_by_id(project_id) is None:
            raise ResourceNotFoundError(f"Project {project_id} not found")

    async def _sync_domain_expiry(self, expense: Expense) -> None:
        """Copy a domain expense's expiry onto its project."""
        if (
            expense.category == ExpenseCategory.DOMAIN.value
            and expense.project_id is not None
            and expense.expires_at is not None
        ):
            logger.info(
                f"Updating domain expiry of project {expense.project_id} "
                f"to {expense.expires_at.isoformat()} from expense {expense.id}"
            )
            await self.projects.set_domain_expiry(expense.project_id, expense.expires_at)

    async def create(self, data: ExpenseCreate) -> Expense:
        await self._ensure_project(data.project_id)
        expense = await self.expenses.create(**data.model_dump())
        await self._sync_domain_expiry(expense)
        return expense

    async def update(self, expense_id: int, data: ExpenseUpdate) -> Expense:
        if await self.expenses.get_by_id(expense_id) is None:
            raise ResourceNotFoundError(f"Expense {expense_id} not found")
        await self._ensure_project(data.project_id)

        expense = await self.expenses.update(expense_id, **data.model_dump(exclude_unset=True))
        await self._sync_domain_expiry(expense)
        return expense

    async def get_stats(self, now: Optional[datetime] = None) -> ExpenseStats:
        """Spend this month and this year, split into global and project costs."""
        now = now or now_local()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        year_start = month_start.replace(month=1)

        this_month = this_year = global_cost = project_cost = ZERO
        expenses = await self.expenses.get_all()
        for expense in expenses:
            amount = to_decimal(expense.amount)
            if expense.paid_at >= month_start:
                this_month += amount
            if expense.paid_at >= year_start:
                this_year += amount
            if expense.project_id is None:
                global_cost += amount
            else:
                project_cost += amount

        return ExpenseStats(
            this_month=to_float(this_month),
            this_year=to_float(this_year),
            global_cost=to_float(global_cost),
            project_cost=to_float(project_cost),
            total=len(expenses),
        )

    async def get_monthly_trend(self, now: Optional[datetime] = None) -> MonthlyTrendResponse:
        """Rolling twelve months ending with the current one, empty months included."""
        now = now or now_local()
        date_range = DateRange(_months_back(now, TREND_MONTHS - 1), now)

        expenses = await self.expenses.list_paid_between(date_range.start, date_range.end)
        buckets = aggregate(
            [expense_record(e) for e in expenses], date_range, Granularity.MONTH
        )

        return MonthlyTrendResponse(
            months=[
                MonthlyAmount(
                    name=f"{b.start.year}-{b.start.month:02d}",
                    amount=to_float(b.sum),
                )
                for b in buckets
            ]
        )

    async def get_upcoming_expiries(
        self, days: int = 30, now: Optional[datetime] = None
    ) -> UpcomingExpiriesResponse:
        """Expenses (domains, subscriptions) expiring within ``days``."""
        now = now or now_local()
        expenses = await self.expenses.list_expiring_between(now, now + timedelta(days=days))

        expiries: List[UpcomingExpiry] = [
            UpcomingExpiry(
                expense=ExpenseResponse.model_validate(e),
                days_left=(e.expires_at - now).days,
            )
            for e in expenses
        ]
        return UpcomingExpiriesResponse(days=days, expiries=expiries)
