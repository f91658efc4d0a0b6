"""Badges API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ecoquest.core.deps import get_current_user
from ecoquest.db.session import get_db
from ecoquest.models.user import User
from ecoquest.schemas.badge import BadgeOut, EarnedBadgeOut
from ecoquest.schemas.envelope import ApiResponse
from ecoquest.services.badge_service import claim_badge, evaluate_and_award, list_badges, list_user_badges

router = APIRouter(prefix="/badges", tags=["badges"])


@router.get("", response_model=ApiResponse[list[BadgeOut]])
def badges(db: Session = Depends(get_db)):
    return ApiResponse(data=[BadgeOut.model_validate(b) for b in list_badges(db)])


@router.get("/me", response_model=ApiResponse[list[EarnedBadgeOut]])
def my_badges(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    earned = list_user_badges(db, current_user.id)
    return ApiResponse(data=[EarnedBadgeOut.model_validate(e, from_attributes=True) for e in earned])


@router.post("/evaluate", response_model=ApiResponse[list[BadgeOut]])
def evaluate(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Re-check badge thresholds and return the badges granted by this call."""
    granted = evaluate_and_award(db, current_user.id)
    return ApiResponse(data=[BadgeOut.model_validate(b) for b in granted])


@router.post("/{badge_id}/claim", response_model=ApiResponse[BadgeOut])
def claim(
    badge_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    badge = claim_badge(db, current_user.id, badge_id)
    return ApiResponse(data=BadgeOut.model_validate(badge))
