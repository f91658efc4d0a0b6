"""Player stats API."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ecoquest.core.deps import get_current_user
from ecoquest.db.session import get_db
from ecoquest.models.user import User
from ecoquest.schemas.envelope import ApiResponse
from ecoquest.schemas.user import UserStatsOut
from ecoquest.services.user_service import get_stats

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/stats", response_model=ApiResponse[UserStatsOut])
def my_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ApiResponse(data=UserStatsOut.model_validate(get_stats(db, current_user.id)))
