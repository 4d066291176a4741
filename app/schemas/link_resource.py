from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from app.models.enums import ResourceType, ResourceStatus
from app.schemas.backlink import BacklinkResponse
from app.schemas.expense import ExpenseResponse


class LinkResourceBase(BaseModel):
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    type: ResourceType = ResourceType.OTHER
    da_score: Optional[int] = Field(None, ge=0)
    dr_score: Optional[int] = Field(None, ge=0)
    price: float = Field(0, ge=0)
    is_free: bool = True
    status: ResourceStatus = ResourceStatus.ACTIVE
    notes: Optional[str] = None

    class Config:
        use_enum_values = True


class LinkResourceCreate(LinkResourceBase):
    pass


class LinkResourceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    url: Optional[str] = Field(None, min_length=1)
    type: Optional[ResourceType] = None
    da_score: Optional[int] = Field(None, ge=0)
    dr_score: Optional[int] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)
    is_free: Optional[bool] = None
    status: Optional[ResourceStatus] = None
    notes: Optional[str] = None

    class Config:
        use_enum_values = True


class LinkResourceResponse(LinkResourceBase):
    id: int
    price: Optional[float] = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LinkResourceStats(BaseModel):
    total: int
    active: int
    free: int
    used: int  # Resources with at least one backlink


class LinkResourceListResponse(BaseModel):
    resources: List[LinkResourceResponse]
    stats: LinkResourceStats


class ProjectRef(BaseModel):
    id: int
    name: str
    site_url: Optional[str] = None

    class Config:
        from_attributes = True


class LinkedBacklink(BaseModel):
    backlink: BacklinkResponse
    project: ProjectRef


class LinkResourceDetail(BaseModel):
    resource: LinkResourceResponse
    linked_backlinks: List[LinkedBacklink]
    unlinked_projects: List[ProjectRef]


class LinkRequest(BaseModel):
    project_id: int
    # Page that receives the link; a link without one is only planned
    target_url: Optional[str] = None


class LinkResult(BaseModel):
    backlink: BacklinkResponse
    expense: Optional[ExpenseResponse] = None  # Set when the resource is paid
