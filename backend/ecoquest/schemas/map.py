"""Map region schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RegionOut(BaseModel):
    id: str
    name: str
    description: str
    corruption_level: int
    is_unlocked: bool
    missions_completed: int
    total_missions: int
    last_cleared: datetime | None = None


class MapStateOut(BaseModel):
    average_corruption: int
    total_regions: int
    regions: list[RegionOut]


class ClearCorruptionRequest(BaseModel):
    corruption_cleared: int = Field(ge=0)


class ClearCorruptionOut(BaseModel):
    region: str
    corruption_level: int
    cleared: int
