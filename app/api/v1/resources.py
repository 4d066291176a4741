import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_now
from app.core.exceptions import ResourceNotFoundError
from app.db.repositories.link_resource_repo import LinkResourceRepository
from app.models.enums import ResourceStatus, ResourceType
from app.schemas.common import MessageResponse
from app.schemas.link_resource import (
    LinkResourceCreate,
    LinkResourceUpdate,
    LinkResourceResponse,
    LinkResourceStats,
    LinkResourceListResponse,
    LinkResourceDetail,
    LinkRequest,
    LinkResult,
)
from app.services.resource_service import ResourceService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=LinkResourceListResponse)
async def list_resources(
    status: Optional[ResourceStatus] = Query(None, description="Filter by status"),
    resource_type: Optional[ResourceType] = Query(
        None, alias="type", description="Filter by resource type"
    ),
    db: AsyncSession = Depends(get_db),
):
    """
    List link resources, most recently updated first.

    Stats always cover every resource, whatever the filters.
    """
    resources = await LinkResourceRepository(db).get_all(
        status=status.value if status else None,
        resource_type=resource_type.value if resource_type else None,
    )
    return LinkResourceListResponse(
        resources=[LinkResourceResponse.model_validate(r) for r in resources],
        stats=await ResourceService(db).get_stats(),
    )


@router.get("/stats", response_model=LinkResourceStats)
async def get_resource_stats(db: AsyncSession = Depends(get_db)):
    """Total, active, free and used (has a backlink) resource counts."""
    return await ResourceService(db).get_stats()


@router.post("", response_model=LinkResourceResponse, status_code=201)
async def create_resource(data: LinkResourceCreate, db: AsyncSession = Depends(get_db)):
    """Add a place where backlinks can be built."""
    resource = await LinkResourceRepository(db).create(**data.model_dump())
    logger.info(f"Created link resource {resource.id} ({resource.name})")
    return LinkResourceResponse.model_validate(resource)


@router.get("/{resource_id}", response_model=LinkResourceDetail)
async def get_resource(resource_id: int, db: AsyncSession = Depends(get_db)):
    """Get a resource with its backlinks and the projects not linked to it yet."""
    return await ResourceService(db).get_detail(resource_id)


@router.put("/{resource_id}", response_model=LinkResourceResponse)
async def update_resource(
    resource_id: int,
    data: LinkResourceUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a link resource."""
    resource = await LinkResourceRepository(db).update(
        resource_id, **data.model_dump(exclude_unset=True)
    )
    if not resource:
        raise ResourceNotFoundError(f"Link resource {resource_id} not found")
    return LinkResourceResponse.model_validate(resource)


@router.delete("/{resource_id}", response_model=MessageResponse)
async def delete_resource(resource_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a link resource. Backlinks placed on it are kept."""
    deleted = await LinkResourceRepository(db).delete(resource_id)
    if not deleted:
        raise ResourceNotFoundError(f"Link resource {resource_id} not found")
    return MessageResponse(message="Link resource deleted successfully")


@router.post("/{resource_id}/links", response_model=LinkResult, status_code=201)
async def link_resource(
    resource_id: int,
    data: LinkRequest,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Place a backlink for a project on this resource.

    For a paid resource the price is booked as a marketing expense of the
    project.
    """
    return await ResourceService(db).link_to_project(resource_id, data, now=now)


@router.delete("/{resource_id}/links/{backlink_id}", response_model=MessageResponse)
async def unlink_resource(
    resource_id: int,
    backlink_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Remove a backlink placed on this resource."""
    await ResourceService(db).unlink(resource_id, backlink_id)
    return MessageResponse(message="Backlink removed from resource")
