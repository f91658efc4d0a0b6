"""Missions API."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ecoquest.core.deps import get_current_user
from ecoquest.db.session import get_db
from ecoquest.models.user import User
from ecoquest.schemas.envelope import ApiResponse
from ecoquest.schemas.mission import (
    EffectOutcomeOut,
    MissionCompletionOut,
    MissionListOut,
    MissionOut,
    MissionProgressOut,
    MissionProgressWithMission,
    ProgressUpdateRequest,
)
from ecoquest.services.mission_service import complete_mission, list_missions, start_mission, update_progress

router = APIRouter(prefix="/missions", tags=["missions"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ApiResponse[MissionListOut])
def missions(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    category: str | None = None,
    god: str | None = None,
    region: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    listing = list_missions(db, current_user.id, page=page, limit=limit, category=category, god=god, region=region)
    return ApiResponse(data=MissionListOut.model_validate(listing, from_attributes=True))


@router.post("/{mission_id}/start", response_model=ApiResponse[MissionProgressWithMission])
def start(
    mission_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    progress, mission = start_mission(db, current_user.id, mission_id)
    return ApiResponse(
        data=MissionProgressWithMission(
            progress=MissionProgressOut.model_validate(progress),
            mission=MissionOut.model_validate(mission),
        )
    )


@router.post("/{mission_id}/progress", response_model=ApiResponse[MissionProgressWithMission])
def progress(
    mission_id: uuid.UUID,
    data: ProgressUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    row, mission = update_progress(db, current_user.id, mission_id, data.progress)
    return ApiResponse(
        data=MissionProgressWithMission(
            progress=MissionProgressOut.model_validate(row),
            mission=MissionOut.model_validate(mission) if mission else None,
        )
    )


@router.post("/{mission_id}/complete", response_model=ApiResponse[MissionCompletionOut])
def complete(
    mission_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = complete_mission(db, current_user.id, mission_id)
    failed = [e.name for e in result.effects if not e.ok]
    if failed:
        logger.warning("mission_completed_with_failed_effects user_id=%s effects=%s", current_user.id, failed)
    return ApiResponse(
        data=MissionCompletionOut(
            progress=MissionProgressOut.model_validate(result.progress),
            mission=MissionOut.model_validate(result.mission),
            effects=[EffectOutcomeOut(name=e.name, ok=e.ok, error=e.error) for e in result.effects],
        )
    )
