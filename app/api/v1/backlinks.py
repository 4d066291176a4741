from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.core.exceptions import ResourceNotFoundError
from app.core.money import to_decimal, to_float
from app.db.repositories.backlink_repo import BacklinkRepository
from app.db.repositories.link_resource_repo import LinkResourceRepository
from app.db.repositories.project_repo import ProjectRepository
from app.models.enums import BacklinkStatus
from app.schemas.backlink import (
    BacklinkCreate,
    BacklinkUpdate,
    BacklinkResponse,
    BacklinkStats,
    BacklinkListResponse,
)
from app.schemas.common import MessageResponse

router = APIRouter()


def build_backlink_list(backlinks) -> BacklinkListResponse:
    """Backlinks plus total / live / cost stats computed in one pass."""
    total_cost = sum((to_decimal(b.cost) for b in backlinks), to_decimal(0))
    return BacklinkListResponse(
        backlinks=[BacklinkResponse.model_validate(b) for b in backlinks],
        stats=BacklinkStats(
            total=len(backlinks),
            live=sum(1 for b in backlinks if b.status == BacklinkStatus.LIVE.value),
            total_cost=to_float(total_cost),
        ),
    )


async def _ensure_resource(db: AsyncSession, resource_id: int) -> None:
    if await LinkResourceRepository(db).get_by_id(resource_id) is None:
        raise ResourceNotFoundError(f"Link resource {resource_id} not found")


@router.get("", response_model=BacklinkListResponse)
async def list_backlinks(
    project_id: Optional[int] = Query(None, description="Filter by project"),
    resource_id: Optional[int] = Query(None, description="Filter by link resource"),
    db: AsyncSession = Depends(get_db),
):
    """List backlinks, newest first."""
    backlinks = await BacklinkRepository(db).get_all(
        project_id=project_id, resource_id=resource_id
    )
    return build_backlink_list(backlinks)


@router.post("", response_model=BacklinkResponse, status_code=201)
async def create_backlink(
    data: BacklinkCreate,
    db: AsyncSession = Depends(get_db),
):
    """Add a backlink to a project."""
    if await ProjectRepository(db).get_by_id(data.project_id) is None:
        raise ResourceNotFoundError(f"Project {data.project_id} not found")
    if data.resource_id is not None:
        await _ensure_resource(db, data.resource_id)

    backlink = await BacklinkRepository(db).create(**data.model_dump())
    return BacklinkResponse.model_validate(backlink)


@router.get("/{backlink_id}", response_model=BacklinkResponse)
async def get_backlink(backlink_id: int, db: AsyncSession = Depends(get_db)):
    """Get a specific backlink by ID."""
    backlink = await BacklinkRepository(db).get_by_id(backlink_id)
    if not backlink:
        raise ResourceNotFoundError(f"Backlink {backlink_id} not found")
    return BacklinkResponse.model_validate(backlink)


@router.put("/{backlink_id}", response_model=BacklinkResponse)
async def update_backlink(
    backlink_id: int,
    data: BacklinkUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a backlink, e.g. to mark it live."""
    if data.resource_id is not None:
        await _ensure_resource(db, data.resource_id)
    backlink = await BacklinkRepository(db).update(
        backlink_id, **data.model_dump(exclude_unset=True)
    )
    if not backlink:
        raise ResourceNotFoundError(f"Backlink {backlink_id} not found")
    return BacklinkResponse.model_validate(backlink)


@router.delete("/{backlink_id}", response_model=MessageResponse)
async def delete_backlink(backlink_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a backlink."""
    deleted = await BacklinkRepository(db).delete(backlink_id)
    if not deleted:
        raise ResourceNotFoundError(f"Backlink {backlink_id} not found")
    return MessageResponse(message="Backlink deleted successfully")
