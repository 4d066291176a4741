from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from app.schemas.common import LocalDateTime


class GitHubAccountBase(BaseModel):
    username: str = Field(..., min_length=1)
    token_expires_at: Optional[LocalDateTime] = None
    notes: Optional[str] = None


class GitHubAccountCreate(GitHubAccountBase):
    token: str = Field(..., min_length=1)


class GitHubAccountUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1)
    token: Optional[str] = Field(None, min_length=1)
    token_expires_at: Optional[LocalDateTime] = None
    notes: Optional[str] = None


class GitHubAccountResponse(GitHubAccountBase):
    """The token itself is never sent back, only its last characters."""
    id: int
    token_hint: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GitHubAccountListResponse(BaseModel):
    accounts: List[GitHubAccountResponse]
    total: int
