"""Player stats and god alignment schemas."""

from __future__ import annotations

from pydantic import BaseModel


class XPProgressOut(BaseModel):
    current_level_xp: int
    next_level_xp: int
    percent: int


class UserStatsOut(BaseModel):
    level: int
    xp: int
    xp_progress: XPProgressOut
    total_eco_karma: int
    corruption_cleared: int
    selected_god: str | None
    missions_completed: int
    badges_earned: int
    coins: int


class GodOut(BaseModel):
    id: str
    name: str
    description: str
    power: str
    color: str


class SelectGodRequest(BaseModel):
    god: str
    force: bool = False


class SelectedGodOut(BaseModel):
    selected_god: GodOut | None
