"""World map API."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ecoquest.core.deps import get_current_user
from ecoquest.db.session import get_db
from ecoquest.models.user import User
from ecoquest.schemas.envelope import ApiResponse
from ecoquest.schemas.map import ClearCorruptionOut, ClearCorruptionRequest, MapStateOut, RegionOut
from ecoquest.services.region_service import clear_region_corruption, list_regions, map_state

router = APIRouter(prefix="/map", tags=["map"])


@router.get("/regions", response_model=ApiResponse[list[RegionOut]])
def regions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ApiResponse(data=[RegionOut.model_validate(r) for r in list_regions(db, current_user.id)])


@router.get("/state", response_model=ApiResponse[MapStateOut])
def state(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ApiResponse(data=MapStateOut.model_validate(map_state(db, current_user.id)))


@router.post("/regions/{region}/clear", response_model=ApiResponse[ClearCorruptionOut])
def clear(
    region: str,
    data: ClearCorruptionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    row = clear_region_corruption(db, current_user.id, region, data.corruption_cleared)
    return ApiResponse(
        data=ClearCorruptionOut(region=row.region, corruption_level=row.corruption_level, cleared=data.corruption_cleared)
    )
