"""Proof schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class ProofCreateRequest(BaseModel):
    mission_progress_id: uuid.UUID
    type: Literal["photo", "video"]


class ProofOut(BaseModel):
    id: uuid.UUID
    mission_progress_id: uuid.UUID
    type: str
    storage_key: str
    status: str
    anti_cheat_score: float | None
    verified_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AntiCheatCheckOut(BaseModel):
    name: str
    passed: bool
    score: float
    message: str | None = None


class ProofVerificationOut(BaseModel):
    proof: ProofOut
    checks: list[AntiCheatCheckOut]


class ProofUploadOut(BaseModel):
    proof: ProofOut
    upload_url: str
    expires_at: datetime
