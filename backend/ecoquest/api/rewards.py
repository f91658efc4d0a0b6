"""Rewards API."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ecoquest.core.deps import get_current_user
from ecoquest.db.session import get_db
from ecoquest.models.user import User
from ecoquest.schemas.envelope import ApiResponse
from ecoquest.schemas.reward import BalanceOut, RewardListOut
from ecoquest.services.reward_ledger import coin_balance, list_rewards, reward_history

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("", response_model=ApiResponse[RewardListOut])
def rewards(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    type: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    listing = list_rewards(db, current_user.id, page=page, limit=limit, reward_type=type)
    return ApiResponse(data=RewardListOut.model_validate(listing, from_attributes=True))


@router.get("/history", response_model=ApiResponse[RewardListOut])
def history(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    type: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    listing = reward_history(
        db,
        current_user.id,
        page=page,
        limit=limit,
        reward_type=type,
        start_date=start_date,
        end_date=end_date,
    )
    return ApiResponse(data=RewardListOut.model_validate(listing, from_attributes=True))


@router.get("/balance", response_model=ApiResponse[BalanceOut])
def balance(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ApiResponse(data=BalanceOut(coins=coin_balance(db, current_user.id)))
