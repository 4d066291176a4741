from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from app.schemas.common import LocalDateTime


class ExpenseBase(BaseModel):
    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    category: str = Field(..., min_length=1)  # ExpenseCategory value or a custom one
    project_id: Optional[int] = None  # None = global fixed cost
    paid_at: LocalDateTime
    expires_at: Optional[LocalDateTime] = None
    notes: Optional[str] = None


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1)
    project_id: Optional[int] = None
    paid_at: Optional[LocalDateTime] = None
    expires_at: Optional[LocalDateTime] = None
    notes: Optional[str] = None


class ExpenseResponse(ExpenseBase):
    id: int
    project_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpenseListResponse(BaseModel):
    expenses: List[ExpenseResponse]
    total: int
    total_amount: float


class ExpenseStats(BaseModel):
    this_month: float
    this_year: float
    global_cost: float
    project_cost: float
    total: int  # Number of expenses


class MonthlyAmount(BaseModel):
    name: str  # "2026-03"
    amount: float


class MonthlyTrendResponse(BaseModel):
    months: List[MonthlyAmount]


class UpcomingExpiry(BaseModel):
    expense: ExpenseResponse
    days_left: int


class UpcomingExpiriesResponse(BaseModel):
    days: int
    expiries: List[UpcomingExpiry]
