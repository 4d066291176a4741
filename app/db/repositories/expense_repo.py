from datetime import datetime
from typing import Optional, List, Any

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import now_local
from app.models.expense import Expense


class ExpenseRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        result = await self.db.execute(
            select(Expense).where(Expense.id == expense_id)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        category: Optional[str] = None,
        project_id: Optional[int] = None,
        global_only: bool = False,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Expense]:
        """Get expenses with filters, most recently paid first.

        ``global_only`` selects expenses without a project and wins over
        ``project_id``. ``start`` is inclusive, ``end`` exclusive.
        """
        conditions = []

        if category:
            conditions.append(Expense.category == category)
        if global_only:
            conditions.append(Expense.project_id.is_(None))
        elif project_id is not None:
            conditions.append(Expense.project_id == project_id)
        if start is not None:
            conditions.append(Expense.paid_at >= start)
        if end is not None:
            conditions.append(Expense.paid_at < end)

        query = select(Expense)
        if conditions:
            query = query.where(and_(*conditions))

        result = await self.db.execute(
            query.order_by(Expense.paid_at.desc(), Expense.id.desc())
        )
        return list(result.scalars().all())

    async def list_paid_between(self, start: datetime, end: datetime) -> List[Expense]:
        """Expenses paid in [start, end]. The caller narrows to half-open buckets."""
        result = await self.db.execute(
            select(Expense).where(
                and_(
                    Expense.paid_at >= start,
                    Expense.paid_at <= end,
                )
            )
        )
        return list(result.scalars().all())

    async def list_expiring_between(self, start: datetime, end: datetime) -> List[Expense]:
        """Expenses whose expiry falls in [start, end], soonest first."""
        result = await self.db.execute(
            select(Expense)
            .where(
                and_(
                    Expense.expires_at.is_not(None),
                    Expense.expires_at >= start,
                    Expense.expires_at <= end,
                )
            )
            .order_by(Expense.expires_at)
        )
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> Expense:
        """Create a new expense."""
        now = now_local()
        expense = Expense(created_at=now, updated_at=now, **fields)
        self.db.add(expense)
        await self.db.flush()
        await self.db.refresh(expense)
        return expense

    async def update(self, expense_id: int, **fields: Any) -> Optional[Expense]:
        """Update the given fields; None values are skipped."""
        expense = await self.get_by_id(expense_id)
        if not expense:
            return None

        for name, value in fields.items():
            if value is not None:
                setattr(expense, name, value)
        expense.updated_at = now_local()

        await self.db.flush()
        await self.db.refresh(expense)
        return expense

    async def delete(self, expense_id: int) -> bool:
        """Delete an expense."""
        expense = await self.get_by_id(expense_id)
        if not expense:
            return False

        await self.db.delete(expense)
        await self.db.flush()
        return True
