"""God alignment API."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ecoquest.core.deps import get_current_user
from ecoquest.db.session import get_db
from ecoquest.models.user import User
from ecoquest.schemas.envelope import ApiResponse
from ecoquest.schemas.user import GodOut, SelectedGodOut, SelectGodRequest
from ecoquest.services.god_service import get_selected_god, list_gods, select_god

router = APIRouter(prefix="/gods", tags=["gods"])


@router.get("", response_model=ApiResponse[list[GodOut]])
def gods():
    return ApiResponse(data=[GodOut.model_validate(g) for g in list_gods()])


@router.get("/selected", response_model=ApiResponse[SelectedGodOut])
def selected_god(current_user: User = Depends(get_current_user)):
    return ApiResponse(data=SelectedGodOut(selected_god=get_selected_god(current_user)))


@router.post("/select", response_model=ApiResponse[SelectedGodOut])
def choose_god(
    data: SelectGodRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    god = select_god(db, current_user.id, data.god, force=data.force)
    return ApiResponse(data=SelectedGodOut(selected_god=GodOut.model_validate(god)))
