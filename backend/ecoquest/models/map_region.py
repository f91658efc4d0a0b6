"""Per-user map region model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from ecoquest.db.base import Base


class MapRegion(Base):
    """Corruption state of one region for one user. Created lazily."""

    __tablename__ = "map_regions"
    __table_args__ = (
        UniqueConstraint("user_id", "region", name="uq_map_regions_user_region"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    region: Mapped[str] = mapped_column(String(50), nullable=False)
    corruption_level: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    is_unlocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    missions_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_missions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_cleared: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
