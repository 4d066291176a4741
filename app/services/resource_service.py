"""
Link resources and the backlinks placed on them.

Linking a resource to a project records a backlink from the resource's URL.
Paid resources also book the placement fee as a marketing expense.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import now_local
from app.core.exceptions import ResourceNotFoundError
from app.db.repositories.backlink_repo import BacklinkRepository
from app.db.repositories.link_resource_repo import LinkResourceRepository
from app.db.repositories.project_repo import ProjectRepository
from app.models.enums import BacklinkStatus, ExpenseCategory
from app.models.link_resource import LinkResource
from app.schemas.backlink import BacklinkResponse
from app.schemas.expense import ExpenseCreate, ExpenseResponse
from app.schemas.link_resource import (
    LinkResourceResponse,
    LinkResourceStats,
    LinkResourceDetail,
    LinkedBacklink,
    ProjectRef,
    LinkRequest,
    LinkResult,
)
from app.services.expense_service import ExpenseService

logger = logging.getLogger(__name__)


class ResourceService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.resources = LinkResourceRepository(db)
        self.backlinks = BacklinkRepository(db)
        self.projects = ProjectRepository(db)

    async def _get_or_404(self, resource_id: int) -> LinkResource:
        resource = await self.resources.get_by_id(resource_id)
        if not resource:
            raise ResourceNotFoundError(f"Link resource {resource_id} not found")
        return resource

    async def get_stats(self) -> LinkResourceStats:
        total, active, free, used = await self.resources.get_stats()
        return LinkResourceStats(total=total, active=active, free=free, used=used)

    async def get_detail(self, resource_id: int) -> LinkResourceDetail:
        """The resource, its backlinks with their project, and projects not linked yet."""
        resource = await self._get_or_404(resource_id)
        backlinks = await self.backlinks.get_all(resource_id=resource_id)
        projects = {p.id: p for p in await self.projects.get_all()}

        linked = [
            LinkedBacklink(
                backlink=BacklinkResponse.model_validate(b),
                project=ProjectRef.model_validate(projects[b.project_id]),
            )
            for b in backlinks
            if b.project_id in projects
        ]
        linked_ids = {b.project_id for b in backlinks}

        return LinkResourceDetail(
            resource=LinkResourceResponse.model_validate(resource),
            linked_backlinks=linked,
            unlinked_projects=[
                ProjectRef.model_validate(p)
                for p in projects.values()
                if p.id not in linked_ids
            ],
        )

    async def link_to_project(
        self,
        resource_id: int,
        data: LinkRequest,
        now: Optional[datetime] = None,
    ) -> LinkResult:
        """Place a backlink for a project on this resource.

        The backlink is live when a target URL is given, planned otherwise.
        """
        now = now or now_local()
        resource = await self._get_or_404(resource_id)
        project = await self.projects.get_by_id(data.project_id)
        if not project:
            raise ResourceNotFoundError(f"Project {data.project_id} not found")

        target_url = data.target_url or project.site_url or ""
        backlink = await self.backlinks.create(
            project_id=project.id,
            resource_id=resource.id,
            target_url=target_url,
            source_url=resource.url,
            da_score=resource.da_score,
            status=(BacklinkStatus.LIVE if data.target_url else BacklinkStatus.PLANNED).value,
            created_at=now,
        )
        logger.info(
            f"Linked resource {resource.id} ({resource.name}) to project {project.id}: "
            f"backlink {backlink.id} is {backlink.status}"
        )

        expense = None
        if not resource.is_free and resource.price and resource.price > 0:
            expense = await ExpenseService(self.db).create(
                ExpenseCreate(
                    name=f"Backlink placement: {resource.name}",
                    amount=resource.price,
                    category=ExpenseCategory.MARKETING.value,
                    project_id=project.id,
                    paid_at=now,
                    notes=f"Resource: {resource.url}",
                )
            )
            logger.info(f"Booked placement fee {resource.price} as expense {expense.id}")

        return LinkResult(
            backlink=BacklinkResponse.model_validate(backlink),
            expense=ExpenseResponse.model_validate(expense) if expense else None,
        )

    async def unlink(self, resource_id: int, backlink_id: int) -> None:
        """Remove a backlink that was placed on this resource.

        Any placement expense is kept.
        """
        await self._get_or_404(resource_id)
        backlink = await self.backlinks.get_by_id(backlink_id)
        if not backlink or backlink.resource_id != resource_id:
            raise ResourceNotFoundError(
                f"Backlink {backlink_id} not found on link resource {resource_id}"
            )
        await self.backlinks.delete(backlink_id)
