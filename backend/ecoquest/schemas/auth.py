"""Auth schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=30)
    password: str = Field(min_length=8)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserMe(BaseModel):
    id: uuid.UUID
    email: str
    username: str
    selected_god: str | None
    xp: int
    level: int
    total_eco_karma: int
    corruption_cleared: int
    created_at: datetime

    model_config = {"from_attributes": True}
