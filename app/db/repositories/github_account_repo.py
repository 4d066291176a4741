from typing import Optional, List, Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import now_local
from app.models.project import Project
from app.models.github_account import GitHubAccount


class GitHubAccountRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, account_id: int) -> Optional[GitHubAccount]:
        """Get GitHub account by ID."""
        result = await self.db.execute(
            select(GitHubAccount).where(GitHubAccount.id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> List[GitHubAccount]:
        """All accounts, most recently updated first."""
        result = await self.db.execute(
            select(GitHubAccount).order_by(
                GitHubAccount.updated_at.desc(), GitHubAccount.id.desc()
            )
        )
        return list(result.scalars().all())

    async def create(self, **fields: Any) -> GitHubAccount:
        """Create a new GitHub account."""
        now = now_local()
        account = GitHubAccount(created_at=now, updated_at=now, **fields)
        self.db.add(account)
        await self.db.flush()
        await self.db.refresh(account)
        return account

    async def update(self, account_id: int, **fields: Any) -> Optional[GitHubAccount]:
        """Update the given fields; None values are skipped."""
        account = await self.get_by_id(account_id)
        if not account:
            return None

        for name, value in fields.items():
            if value is not None:
                setattr(account, name, value)
        account.updated_at = now_local()

        await self.db.flush()
        await self.db.refresh(account)
        return account

    async def delete(self, account_id: int) -> bool:
        """Delete an account. Projects using it are detached, not deleted."""
        account = await self.get_by_id(account_id)
        if not account:
            return False

        # Clear the relationship on loaded projects too, not just the column
        result = await self.db.execute(
            select(Project).where(Project.github_account_id == account_id)
        )
        for project in result.scalars().all():
            project.github_account = None

        await self.db.delete(account)
        await self.db.flush()
        return True
