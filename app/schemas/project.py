from datetime import datetime
from typing import Optional, List, Literal

from pydantic import BaseModel, Field

from app.models.enums import ProjectStatus, AdsenseStatus
from app.schemas.common import LocalDateTime


HealthStatus = Literal["good", "warning", "danger"]


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1)
    site_url: Optional[str] = None
    niche_category: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    github_account_id: Optional[int] = None
    repo_owner: Optional[str] = None
    repo_name: Optional[str] = None
    last_content_update: Optional[LocalDateTime] = None
    domain_expiry: Optional[LocalDateTime] = None
    domain_purchase_date: Optional[LocalDateTime] = None
    domain_registrar: Optional[str] = None
    hosting_platform: Optional[str] = None
    hosting_account: Optional[str] = None
    monetization_type: Optional[str] = None
    adsense_status: AdsenseStatus = AdsenseStatus.NONE
    notes: Optional[str] = None
    launched_at: Optional[LocalDateTime] = None

    class Config:
        use_enum_values = True


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    """All fields optional; only the ones sent are changed."""
    name: Optional[str] = Field(None, min_length=1)
    site_url: Optional[str] = None
    niche_category: Optional[str] = None
    status: Optional[ProjectStatus] = None
    github_account_id: Optional[int] = None
    repo_owner: Optional[str] = None
    repo_name: Optional[str] = None
    last_content_update: Optional[LocalDateTime] = None
    domain_expiry: Optional[LocalDateTime] = None
    domain_purchase_date: Optional[LocalDateTime] = None
    domain_registrar: Optional[str] = None
    hosting_platform: Optional[str] = None
    hosting_account: Optional[str] = None
    monetization_type: Optional[str] = None
    adsense_status: Optional[AdsenseStatus] = None
    notes: Optional[str] = None
    launched_at: Optional[LocalDateTime] = None

    class Config:
        use_enum_values = True


class ProjectResponse(ProjectBase):
    id: int
    github_username: Optional[str] = None
    last_github_push: Optional[datetime] = None
    last_manual_update: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectWithHealth(ProjectResponse):
    health_status: HealthStatus
    health_reasons: List[str] = []
    backlink_count: int = 0
    live_backlink_count: int = 0


class ProjectListResponse(BaseModel):
    projects: List[ProjectWithHealth]
    total: int
