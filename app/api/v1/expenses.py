import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_now
from app.config import get_settings
from app.core.exceptions import InvalidRange, ResourceNotFoundError
from app.core.money import to_decimal, to_float
from app.db.repositories.expense_repo import ExpenseRepository
from app.schemas.common import MessageResponse
from app.schemas.expense import (
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseResponse,
    ExpenseListResponse,
    ExpenseStats,
    MonthlyTrendResponse,
    UpcomingExpiriesResponse,
)
from app.services.expense_service import ExpenseService

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter()


def _calendar_window(year: Optional[int], month: Optional[int]):
    """[start, end) for a whole year, or a single month of it."""
    if year is None:
        if month is not None:
            raise InvalidRange("month filter requires a year", {"month": month})
        return None, None
    if month is None:
        return datetime(year, 1, 1), datetime(year + 1, 1, 1)
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


@router.get("", response_model=ExpenseListResponse)
async def list_expenses(
    category: Optional[str] = Query(None, description="Filter by category"),
    project_id: Optional[int] = Query(None, description="Filter by project"),
    global_only: bool = Query(False, description="Only expenses without a project"),
    year: Optional[int] = Query(None, ge=1970, le=9998, description="Filter by paid year"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Filter by paid month (needs year)"),
    db: AsyncSession = Depends(get_db),
):
    """
    List expenses with optional filters, most recently paid first.
    """
    start, end = _calendar_window(year, month)

    expense_repo = ExpenseRepository(db)
    expenses = await expense_repo.get_all(
        category=category,
        project_id=project_id,
        global_only=global_only,
        start=start,
        end=end,
    )

    total_amount = sum((to_decimal(e.amount) for e in expenses), to_decimal(0))
    return ExpenseListResponse(
        expenses=[ExpenseResponse.model_validate(e) for e in expenses],
        total=len(expenses),
        total_amount=to_float(total_amount),
    )


@router.get("/stats", response_model=ExpenseStats)
async def get_expense_stats(
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Spend this month / this year, split into global and project costs."""
    return await ExpenseService(db).get_stats(now=now)


@router.get("/monthly-trend", response_model=MonthlyTrendResponse)
async def get_monthly_trend(
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Spend per month for the last twelve months, current month last."""
    return await ExpenseService(db).get_monthly_trend(now=now)


@router.get("/upcoming", response_model=UpcomingExpiriesResponse)
async def get_upcoming_expiries(
    days: int = Query(settings.UPCOMING_EXPIRY_DAYS, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Expenses (domains, subscriptions) expiring within the next ``days`` days."""
    return await ExpenseService(db).get_upcoming_expiries(days=days, now=now)


@router.post("", response_model=ExpenseResponse, status_code=201)
async def create_expense(
    data: ExpenseCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Record an expense.

    A domain expense with a project and an expiry date also updates the
    project's domain expiry.
    """
    expense = await ExpenseService(db).create(data)
    logger.info(f"Created expense {expense.id} ({expense.category}, {expense.amount})")
    return ExpenseResponse.model_validate(expense)


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(expense_id: int, db: AsyncSession = Depends(get_db)):
    """Get a specific expense by ID."""
    expense = await ExpenseRepository(db).get_by_id(expense_id)
    if not expense:
        raise ResourceNotFoundError(f"Expense {expense_id} not found")
    return ExpenseResponse.model_validate(expense)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    data: ExpenseUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update an expense."""
    expense = await ExpenseService(db).update(expense_id, data)
    return ExpenseResponse.model_validate(expense)


@router.delete("/{expense_id}", response_model=MessageResponse)
async def delete_expense(expense_id: int, db: AsyncSession = Depends(get_db)):
    """Delete an expense."""
    deleted = await ExpenseRepository(db).delete(expense_id)
    if not deleted:
        raise ResourceNotFoundError(f"Expense {expense_id} not found")
    return MessageResponse(message="Expense deleted successfully")
