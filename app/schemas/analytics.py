from typing import List, Optional, Dict
from datetime import datetime

from pydantic import BaseModel


# Colors for the category pie chart
CATEGORY_COLORS: Dict[str, str] = {
    "subscription": "#3498DB",
    "domain": "#9B59B6",
    "hosting": "#2ECC71",
    "marketing": "#F39C12",
    "tool": "#E74C3C",
    "other": "#BDC3C7",
}

DEFAULT_CATEGORY_COLOR = "#95A5A6"


def get_category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, DEFAULT_CATEGORY_COLOR)


class ReportRange(BaseModel):
    period: str
    start: datetime
    end: datetime


class BucketResponse(BaseModel):
    """One slice of a trend chart."""
    label: str
    start: datetime
    end: datetime
    count: int
    sum: float


class TrendResponse(ReportRange):
    granularity: str  # "day", "week", "month"
    total_count: int
    total_amount: float
    buckets: List[BucketResponse]
    by_category: Dict[str, float]


class CategorySlice(BaseModel):
    category: str  # Normalized key, e.g. "hosting"
    name: str  # Display label, e.g. "Hosting"
    amount: float
    percentage: float
    color_hex: str


class CategoryBreakdownResponse(ReportRange):
    total_amount: float
    categories: List[CategorySlice]


class ProjectCost(BaseModel):
    project_id: Optional[int] = None  # None = global fixed cost
    name: str
    amount: float


class ProjectCostResponse(BaseModel):
    projects: List[ProjectCost]


class AnalyticsSummaryResponse(ReportRange):
    total_cost: float
    expense_count: int
    backlink_count: int
    backlink_cost: float
    live_backlinks: int
