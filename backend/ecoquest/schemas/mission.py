"""Mission schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from ecoquest.schemas.envelope import Pagination


class MissionOut(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    type: str
    category: str | None
    god: str | None
    region: str | None
    reward_amount: int
    corruption_level: int
    is_corruption_mission: bool
    requires_corruption_cleared: bool
    unlocks_after_mission_id: uuid.UUID | None
    requirements: dict[str, Any] | None

    model_config = {"from_attributes": True}


class MissionProgressOut(BaseModel):
    id: uuid.UUID
    mission_id: uuid.UUID
    status: str
    progress: int
    started_at: datetime | None
    completed_at: datetime | None

    model_config = {"from_attributes": True}


class MissionListItem(BaseModel):
    mission: MissionOut
    is_unlocked: bool
    progress: MissionProgressOut | None


class MissionListOut(BaseModel):
    missions: list[MissionListItem]
    pagination: Pagination


class ProgressUpdateRequest(BaseModel):
    progress: int = Field(ge=0, le=100)


class MissionProgressWithMission(BaseModel):
    progress: MissionProgressOut
    mission: MissionOut | None


class EffectOutcomeOut(BaseModel):
    name: str
    ok: bool
    error: str | None = None


class MissionCompletionOut(BaseModel):
    progress: MissionProgressOut
    mission: MissionOut
    effects: list[EffectOutcomeOut]
