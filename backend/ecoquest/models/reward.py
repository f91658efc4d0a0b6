"""Reward ledger model."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from ecoquest.db.base import Base


class Reward(Base):
    """Immutable ledger entry. At most one per (user, mission_progress_id)."""

    __tablename__ = "rewards"
    __table_args__ = (
        UniqueConstraint("user_id", "mission_progress_id", name="uq_rewards_user_mission_progress"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Not a foreign key: badge rewards store the badge id here
    mission_progress_id: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    reward_metadata: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON, nullable=True)
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
