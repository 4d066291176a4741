from datetime import datetime
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import String, DateTime, Integer, Text, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.enums import ProjectStatus, AdsenseStatus

if TYPE_CHECKING:
    from app.models.backlink import Backlink
    from app.models.expense import Expense
    from app.models.github_account import GitHubAccount


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Basics
    name: Mapped[str] = mapped_column(String, nullable=False)
    site_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    niche_category: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ProjectStatus.ACTIVE.value, index=True
    )

    # Maintenance
    github_account_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("github_accounts.id", ondelete="SET NULL"), nullable=True, index=True
    )
    repo_owner: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    repo_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_github_push: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    last_content_update: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    last_manual_update: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Domain and hosting
    domain_expiry: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    domain_purchase_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    domain_registrar: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    hosting_platform: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    hosting_account: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    # Monetization
    monetization_type: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    adsense_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AdsenseStatus.NONE.value
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )
    launched_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    backlinks: Mapped[List["Backlink"]] = relationship(
        "Backlink", back_populates="project", cascade="all, delete-orphan"
    )
    expenses: Mapped[List["Expense"]] = relationship("Expense", back_populates="project")
    github_account: Mapped[Optional["GitHubAccount"]] = relationship(
        "GitHubAccount", back_populates="projects", lazy="selectin"
    )

    __table_args__ = (
        Index("ix_projects_domain_expiry", "domain_expiry"),
    )

    @property
    def last_update(self) -> Optional[datetime]:
        """Most recent of GitHub push, content update and manual update."""
        stamps = [
            s for s in (self.last_github_push, self.last_content_update, self.last_manual_update)
            if s is not None
        ]
        return max(stamps) if stamps else None

    @property
    def github_username(self) -> Optional[str]:
        return self.github_account.username if self.github_account is not None else None
