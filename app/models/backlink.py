from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, Integer, Float, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.enums import BacklinkStatus

if TYPE_CHECKING:
    from app.models.link_resource import LinkResource
    from app.models.project import Project


class Backlink(Base):
    __tablename__ = "backlinks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    resource_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("link_resources.id", ondelete="SET NULL"), nullable=True, index=True
    )

    target_url: Mapped[str] = mapped_column(String, nullable=False)
    source_url: Mapped[str] = mapped_column(String, nullable=False)
    anchor_text: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    da_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BacklinkStatus.PLANNED.value, index=True
    )
    acquired_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), index=True
    )

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="backlinks")
    resource: Mapped[Optional["LinkResource"]] = relationship(
        "LinkResource", back_populates="backlinks"
    )

    __table_args__ = (
        Index("ix_backlinks_project_status", "project_id", "status"),
    )
