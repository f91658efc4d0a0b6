"""Reward schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from ecoquest.schemas.envelope import Pagination


class RewardOut(BaseModel):
    id: uuid.UUID
    mission_progress_id: str
    amount: int
    type: str
    metadata: dict[str, Any] | None = Field(default=None, validation_alias="reward_metadata")
    issued_at: datetime

    model_config = {"from_attributes": True}


class RewardListOut(BaseModel):
    rewards: list[RewardOut]
    pagination: Pagination


class BalanceOut(BaseModel):
    coins: int
