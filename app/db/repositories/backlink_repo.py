from datetime import datetime
from typing import Optional, List, Any

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import now_local
from app.models.backlink import Backlink


class BacklinkRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, backlink_id: int) -> Optional[Backlink]:
        """Get backlink by ID."""
        result = await self.db.execute(
            select(Backlink).where(Backlink.id == backlink_id)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        project_id: Optional[int] = None,
        resource_id: Optional[int] = None,
    ) -> List[Backlink]:
        """Backlinks, newest first, optionally for one project or link resource."""
        query = select(Backlink)
        if project_id is not None:
            query = query.where(Backlink.project_id == project_id)
        if resource_id is not None:
            query = query.where(Backlink.resource_id == resource_id)
        result = await self.db.execute(
            query.order_by(Backlink.created_at.desc(), Backlink.id.desc())
        )
        return list(result.scalars().all())

    async def list_created_between(
        self, start: datetime, end: datetime
    ) -> List[Backlink]:
        """Backlinks created in [start, end]. The caller narrows to half-open buckets."""
        result = await self.db.execute(
            select(Backlink).where(
                and_(
                    Backlink.created_at >= start,
                    Backlink.created_at <= end,
                )
            )
        )
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> Backlink:
        """Create a new backlink, stamped now unless created_at is given."""
        fields.setdefault("created_at", now_local())
        backlink = Backlink(**fields)
        self.db.add(backlink)
        await self.db.flush()
        await self.db.refresh(backlink)
        return backlink

    async def update(self, backlink_id: int, **fields: Any) -> Optional[Backlink]:
        """Update the given fields; None values are skipped."""
        backlink = await self.get_by_id(backlink_id)
        if not backlink:
            return None

        for name, value in fields.items():
            if value is not None:
                setattr(backlink, name, value)

        await self.db.flush()
        await self.db.refresh(backlink)
        return backlink

    async def delete(self, backlink_id: int) -> bool:
        """Delete a backlink."""
        backlink = await self.get_by_id(backlink_id)
        if not backlink:
            return False

        await self.db.delete(backlink)
        await self.db.flush()
        return True
