from typing import Optional, List, Any, Tuple

from sqlalchemy import select, func, case, distinct
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import now_local
from app.models.backlink import Backlink
from app.models.enums import ResourceStatus
from app.models.link_resource import LinkResource


class LinkResourceRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, resource_id: int) -> Optional[LinkResource]:
        """Get link resource by ID."""
        result = await self.db.execute(
            select(LinkResource).where(LinkResource.id == resource_id)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        status: Optional[str] = None,
        resource_type: Optional[str] = None,
    ) -> List[LinkResource]:
        """Resources, most recently updated first."""
        query = select(LinkResource)
        if status is not None:
            query = query.where(LinkResource.status == status)
        if resource_type is not None:
            query = query.where(LinkResource.type == resource_type)
        result = await self.db.execute(
            query.order_by(LinkResource.updated_at.desc(), LinkResource.id.desc())
        )
        return list(result.scalars().all())

    async def get_stats(self) -> Tuple[int, int, int, int]:
        """(total, active, free, used) where used counts resources with a backlink."""
        result = await self.db.execute(
            select(
                func.count(LinkResource.id),
                func.sum(case((LinkResource.status == ResourceStatus.ACTIVE.value, 1), else_=0)),
                func.sum(case((LinkResource.is_free.is_(True), 1), else_=0)),
            )
        )
        total, active, free = result.one()

        used = await self.db.scalar(
            select(func.count(distinct(Backlink.resource_id))).where(
                Backlink.resource_id.is_not(None)
            )
        )
        return total or 0, int(active or 0), int(free or 0), used or 0

    async def create(self, **fields: Any) -> LinkResource:
        """Create a new link resource."""
        now = now_local()
        resource = LinkResource(created_at=now, updated_at=now, **fields)
        self.db.add(resource)
        await self.db.flush()
        await self.db.refresh(resource)
        return resource

    async def update(self, resource_id: int, **fields: Any) -> Optional[LinkResource]:
        """Update the given fields; None values are skipped."""
        resource = await self.get_by_id(resource_id)
        if not resource:
            return None

        for name, value in fields.items():
            if value is not None:
                setattr(resource, name, value)
        resource.updated_at = now_local()

        await self.db.flush()
        await self.db.refresh(resource)
        return resource

    async def delete(self, resource_id: int) -> bool:
        """Delete a resource. Its backlinks stay, with resource_id cleared."""
        resource = await self.get_by_id(resource_id)
        if not resource:
            return False

        await self.db.delete(resource)
        await self.db.flush()
        return True
