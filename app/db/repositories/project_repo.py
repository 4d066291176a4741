from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import now_local
from app.models.backlink import Backlink
from app.models.enums import BacklinkStatus
from app.models.project import Project


class ProjectRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        result = await self.db.execute(
            select(Project).where(Project.id == project_id)
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> List[Project]:
        """All projects, newest first."""
        result = await self.db.execute(
            select(Project).order_by(Project.created_at.desc(), Project.id.desc())
        )
        return list(result.scalars().all())

    async def get_backlink_counts(self) -> Dict[int, Tuple[int, int]]:
        """Map project_id -> (backlink count, live backlink count)."""
        result = await self.db.execute(
            select(
                Backlink.project_id,
                func.count(Backlink.id),
                func.sum(case((Backlink.status == BacklinkStatus.LIVE.value, 1), else_=0)),
            ).group_by(Backlink.project_id)
        )
        return {
            project_id: (total, int(live or 0))
            for project_id, total, live in result.all()
        }

    async def create(self, **fields: Any) -> Project:
        """Create a new project."""
        now = now_local()
        project = Project(created_at=now, updated_at=now, **fields)
        self.db.add(project)
        await self.db.flush()
        await self.db.refresh(project)
        return project

    async def update(self, project_id: int, **fields: Any) -> Optional[Project]:
        """Update the given fields; None values are skipped."""
        project = await self.get_by_id(project_id)
        if not project:
            return None

        for name, value in fields.items():
            if value is not None:
                setattr(project, name, value)
        project.updated_at = now_local()

        await self.db.flush()
        await self.db.refresh(project)
        return project

    async def set_domain_expiry(self, project_id: int, expires_at: datetime) -> None:
        project = await self.get_by_id(project_id)
        if project is None:
            return
        project.domain_expiry = expires_at
        project.updated_at = now_local()
        await self.db.flush()

    async def delete(self, project_id: int) -> bool:
        """Delete a project and its backlinks. Expenses are kept as global costs."""
        project = await self.get_by_id(project_id)
        if not project:
            return False

        await self.db.delete(project)
        await self.db.flush()
        return True
