import logging
from datetime import datetime
from typing import Optional, Tuple

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_now
from app.api.v1.backlinks import build_backlink_list
from app.core.exceptions import ResourceNotFoundError
from app.core.money import to_decimal, to_float
from app.db.repositories.backlink_repo import BacklinkRepository
from app.db.repositories.expense_repo import ExpenseRepository
from app.db.repositories.github_account_repo import GitHubAccountRepository
from app.db.repositories.project_repo import ProjectRepository
from app.models.project import Project
from app.schemas.backlink import BacklinkListResponse
from app.schemas.common import MessageResponse
from app.schemas.expense import ExpenseListResponse, ExpenseResponse
from app.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectWithHealth,
    ProjectListResponse,
)
from app.services.project_health import assess_project_health

logger = logging.getLogger(__name__)

router = APIRouter()


def with_health(
    project: Project,
    now: datetime,
    counts: Tuple[int, int] = (0, 0),
) -> ProjectWithHealth:
    report = assess_project_health(
        domain_expiry=project.domain_expiry,
        last_update=project.last_update,
        adsense_status=project.adsense_status,
        now=now,
    )
    return ProjectWithHealth(
        **ProjectResponse.model_validate(project).model_dump(),
        health_status=report.status,
        health_reasons=report.reasons,
        backlink_count=counts[0],
        live_backlink_count=counts[1],
    )


async def _get_project_or_404(repo: ProjectRepository, project_id: int) -> Project:
    project = await repo.get_by_id(project_id)
    if not project:
        raise ResourceNotFoundError(f"Project {project_id} not found")
    return project


async def _ensure_github_account(db: AsyncSession, account_id: Optional[int]) -> None:
    if account_id is not None and await GitHubAccountRepository(db).get_by_id(account_id) is None:
        raise ResourceNotFoundError(f"GitHub account {account_id} not found")


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    List all projects with their health status and backlink counts.
    """
    project_repo = ProjectRepository(db)
    projects = await project_repo.get_all()
    counts = await project_repo.get_backlink_counts()

    return ProjectListResponse(
        projects=[with_health(p, now, counts.get(p.id, (0, 0))) for p in projects],
        total=len(projects),
    )


@router.post("", response_model=ProjectWithHealth, status_code=201)
async def create_project(
    data: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Add a site to the portfolio."""
    await _ensure_github_account(db, data.github_account_id)
    project = await ProjectRepository(db).create(**data.model_dump())
    logger.info(f"Created project {project.id} ({project.name})")
    return with_health(project, now)


@router.get("/{project_id}", response_model=ProjectWithHealth)
async def get_project(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Get a specific project by ID."""
    project_repo = ProjectRepository(db)
    project = await _get_project_or_404(project_repo, project_id)
    counts = await project_repo.get_backlink_counts()
    return with_health(project, now, counts.get(project.id, (0, 0)))


@router.put("/{project_id}", response_model=ProjectWithHealth)
async def update_project(
    project_id: int,
    data: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Update a project."""
    await _ensure_github_account(db, data.github_account_id)
    project_repo = ProjectRepository(db)
    project = await project_repo.update(project_id, **data.model_dump(exclude_unset=True))
    if not project:
        raise ResourceNotFoundError(f"Project {project_id} not found")
    counts = await project_repo.get_backlink_counts()
    return with_health(project, now, counts.get(project.id, (0, 0)))


@router.post("/{project_id}/touch", response_model=ProjectWithHealth)
async def touch_project(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Mark a project as manually updated just now."""
    project_repo = ProjectRepository(db)
    project = await project_repo.update(project_id, last_manual_update=now)
    if not project:
        raise ResourceNotFoundError(f"Project {project_id} not found")
    counts = await project_repo.get_backlink_counts()
    return with_health(project, now, counts.get(project.id, (0, 0)))


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(project_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete a project together with its backlinks.

    Its expenses are kept and become global costs.
    """
    deleted = await ProjectRepository(db).delete(project_id)
    if not deleted:
        raise ResourceNotFoundError(f"Project {project_id} not found")
    return MessageResponse(message="Project deleted successfully")


@router.get("/{project_id}/expenses", response_model=ExpenseListResponse)
async def list_project_expenses(project_id: int, db: AsyncSession = Depends(get_db)):
    """Expenses booked against a project, with their total."""
    await _get_project_or_404(ProjectRepository(db), project_id)

    expenses = await ExpenseRepository(db).get_all(project_id=project_id)
    total_amount = sum((to_decimal(e.amount) for e in expenses), to_decimal(0))
    return ExpenseListResponse(
        expenses=[ExpenseResponse.model_validate(e) for e in expenses],
        total=len(expenses),
        total_amount=to_float(total_amount),
    )


@router.get("/{project_id}/backlinks", response_model=BacklinkListResponse)
async def list_project_backlinks(project_id: int, db: AsyncSession = Depends(get_db)):
    """Backlinks of a project with total / live / cost stats."""
    await _get_project_or_404(ProjectRepository(db), project_id)

    backlinks = await BacklinkRepository(db).get_all(project_id=project_id)
    return build_backlink_list(backlinks)
