from datetime import datetime
from typing import TYPE_CHECKING, Optional, List

from sqlalchemy import String, DateTime, Integer, Float, Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.enums import ResourceType, ResourceStatus

if TYPE_CHECKING:
    from app.models.backlink import Backlink


class LinkResource(Base):
    """A site where backlinks can be placed (directory, forum, guest post...)."""
    __tablename__ = "link_resources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    url: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ResourceType.OTHER.value
    )
    da_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    dr_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=0)
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ResourceStatus.ACTIVE.value, index=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    # Relationships. Deleting a resource keeps its backlinks and clears resource_id.
    backlinks: Mapped[List["Backlink"]] = relationship("Backlink", back_populates="resource")
