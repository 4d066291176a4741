from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from app.models.enums import BacklinkStatus
from app.schemas.common import LocalDateTime


class BacklinkBase(BaseModel):
    project_id: int
    resource_id: Optional[int] = None
    target_url: str = Field(..., min_length=1)
    source_url: str = Field(..., min_length=1)
    anchor_text: Optional[str] = None
    da_score: Optional[int] = Field(None, ge=0)
    cost: float = Field(0, ge=0)
    status: BacklinkStatus = BacklinkStatus.PLANNED
    acquired_date: Optional[LocalDateTime] = None

    class Config:
        use_enum_values = True


class BacklinkCreate(BacklinkBase):
    pass


class BacklinkUpdate(BaseModel):
    resource_id: Optional[int] = None
    target_url: Optional[str] = Field(None, min_length=1)
    source_url: Optional[str] = Field(None, min_length=1)
    anchor_text: Optional[str] = None
    da_score: Optional[int] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    status: Optional[BacklinkStatus] = None
    acquired_date: Optional[LocalDateTime] = None

    class Config:
        use_enum_values = True


class BacklinkResponse(BacklinkBase):
    id: int
    cost: Optional[float] = 0
    created_at: datetime

    class Config:
        from_attributes = True


class BacklinkStats(BaseModel):
    total: int
    live: int
    total_cost: float


class BacklinkListResponse(BaseModel):
    backlinks: List[BacklinkResponse]
    stats: BacklinkStats
