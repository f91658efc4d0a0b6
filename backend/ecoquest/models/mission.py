"""Mission catalog model."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from ecoquest.db.base import Base


class Mission(Base):
    """A catalog mission. Seeded externally, read-only for gameplay."""

    __tablename__ = "missions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="action")
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    god: Mapped[str | None] = mapped_column(String(50), nullable=True)
    region: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reward_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    corruption_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_corruption_mission: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    requires_corruption_cleared: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    unlocks_after_mission_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("missions.id", ondelete="SET NULL"),
        nullable=True,
    )
    requirements: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
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
