"""Proof upload API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ecoquest.core.deps import get_current_user
from ecoquest.db.session import get_db
from ecoquest.models.user import User
from ecoquest.schemas.envelope import ApiResponse
from ecoquest.schemas.proof import (
    AntiCheatCheckOut,
    ProofCreateRequest,
    ProofOut,
    ProofUploadOut,
    ProofVerificationOut,
)
from ecoquest.services.proof_service import get_proof, register_proof, verify_proof
from ecoquest.services.storage_service import ProofStorage, get_proof_storage

router = APIRouter(prefix="/proofs", tags=["proofs"])


@router.post("", response_model=ApiResponse[ProofUploadOut], status_code=status.HTTP_201_CREATED)
def create_proof(
    data: ProofCreateRequest,
    db: Session = Depends(get_db),
    storage: ProofStorage = Depends(get_proof_storage),
    current_user: User = Depends(get_current_user),
):
    """Register a pending proof and hand back a presigned PUT URL for the media."""
    upload = register_proof(db, current_user.id, data.mission_progress_id, data.type, storage)
    return ApiResponse(
        data=ProofUploadOut(
            proof=ProofOut.model_validate(upload.proof),
            upload_url=upload.upload_url,
            expires_at=upload.expires_at,
        )
    )


@router.post("/{proof_id}/verify", response_model=ApiResponse[ProofVerificationOut])
def verify(
    proof_id: uuid.UUID,
    db: Session = Depends(get_db),
    storage: ProofStorage = Depends(get_proof_storage),
    current_user: User = Depends(get_current_user),
):
    proof, result = verify_proof(db, current_user.id, proof_id, storage)
    return ApiResponse(
        data=ProofVerificationOut(
            proof=ProofOut.model_validate(proof),
            checks=[AntiCheatCheckOut.model_validate(c, from_attributes=True) for c in result.checks],
        )
    )


@router.get("/{proof_id}", response_model=ApiResponse[ProofOut])
def proof_status(
    proof_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ApiResponse(data=ProofOut.model_validate(get_proof(db, current_user.id, proof_id)))
