"""Badge schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel


class BadgeOut(BaseModel):
    id: uuid.UUID
    code: str
    name: str
    description: str | None
    icon: str | None
    requirement_type: str
    requirement_value: int
    reward_amount: int

    model_config = {"from_attributes": True}


class EarnedBadgeOut(BaseModel):
    badge: BadgeOut
    earned_at: datetime

    model_config = {"from_attributes": True}
