import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_now
from app.db.repositories.backlink_repo import BacklinkRepository
from app.db.repositories.expense_repo import ExpenseRepository
from app.db.repositories.github_account_repo import GitHubAccountRepository
from app.db.repositories.link_resource_repo import LinkResourceRepository
from app.db.repositories.project_repo import ProjectRepository
from app.schemas.backlink import BacklinkResponse
from app.schemas.expense import ExpenseResponse
from app.schemas.github_account import GitHubAccountResponse
from app.schemas.link_resource import LinkResourceResponse
from app.schemas.project import ProjectResponse

logger = logging.getLogger(__name__)

router = APIRouter()

EXPORT_VERSION = "1.1.0"


class ExportData(BaseModel):
    # Accounts are exported without their tokens
    github_accounts: List[GitHubAccountResponse]
    projects: List[ProjectResponse]
    link_resources: List[LinkResourceResponse]
    backlinks: List[BacklinkResponse]
    expenses: List[ExpenseResponse]


class ExportResponse(BaseModel):
    version: str
    exported_at: datetime
    data: ExportData


@router.get("", response_model=ExportResponse)
async def export_data(
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Dump every stored record as one JSON document."""
    accounts = await GitHubAccountRepository(db).get_all()
    projects = await ProjectRepository(db).get_all()
    resources = await LinkResourceRepository(db).get_all()
    backlinks = await BacklinkRepository(db).get_all()
    expenses = await ExpenseRepository(db).get_all()

    logger.info(
        f"Exporting {len(accounts)} GitHub accounts, {len(projects)} projects, "
        f"{len(resources)} link resources, {len(backlinks)} backlinks, "
        f"{len(expenses)} expenses"
    )

    return ExportResponse(
        version=EXPORT_VERSION,
        exported_at=now,
        data=ExportData(
            github_accounts=[GitHubAccountResponse.model_validate(a) for a in accounts],
            projects=[ProjectResponse.model_validate(p) for p in projects],
            link_resources=[LinkResourceResponse.model_validate(r) for r in resources],
            backlinks=[BacklinkResponse.model_validate(b) for b in backlinks],
            expenses=[ExpenseResponse.model_validate(e) for e in expenses],
        ),
    )
