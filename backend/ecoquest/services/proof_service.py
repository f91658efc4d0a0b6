"""Proof registration and verification."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from ecoquest.core.errors import Forbidden, ProgressNotFound, ProofFileMissing, ProofNotFound
from ecoquest.core.game_rules import PROOF_UPLOAD_CONTENT_TYPES, PROOF_UPLOAD_EXPIRES_SECONDS
from ecoquest.models.mission_progress import MissionProgress
from ecoquest.models.proof import Proof
from ecoquest.services import anti_cheat
from ecoquest.services.anti_cheat import AntiCheatResult
from ecoquest.services.storage_service import ProofStorage

logger = logging.getLogger(__name__)

_EXTENSIONS = {"photo": "jpg", "video": "mp4"}


@dataclass
class ProofUpload:
    proof: Proof
    upload_url: str
    expires_at: datetime


def _owned_progress(db: Session, user_id: uuid.UUID, mission_progress_id: uuid.UUID) -> MissionProgress:
    progress = db.get(MissionProgress, mission_progress_id)
    if not progress:
        raise ProgressNotFound("Mission progress not found")
    if progress.user_id != user_id:
        raise Forbidden("Unauthorized access to mission progress")
    return progress


def get_proof(db: Session, user_id: uuid.UUID, proof_id: uuid.UUID) -> Proof:
    proof = db.get(Proof, proof_id)
    if not proof:
        raise ProofNotFound()
    if proof.user_id != user_id:
        raise Forbidden("Unauthorized access to proof")
    return proof


def register_proof(
    db: Session,
    user_id: uuid.UUID,
    mission_progress_id: uuid.UUID,
    proof_type: str,
    storage: ProofStorage,
) -> ProofUpload:
    """Create a PENDING proof and a presigned URL the client PUTs the media to.

    The extension in the key is cosmetic; verification reads the content type
    the bucket recorded for the uploaded object.
    """
    _owned_progress(db, user_id, mission_progress_id)
    now = datetime.now(timezone.utc)
    stamp = int(now.timestamp() * 1000)
    storage_key = f"proofs/{user_id}/{proof_type}-{stamp}-{uuid.uuid4().hex[:8]}.{_EXTENSIONS[proof_type]}"
    upload_url = storage.upload_url(
        storage_key, PROOF_UPLOAD_CONTENT_TYPES[proof_type], PROOF_UPLOAD_EXPIRES_SECONDS
    )

    proof = Proof(
        user_id=user_id,
        mission_progress_id=mission_progress_id,
        type=proof_type,
        storage_key=storage_key,
        status="PENDING",
    )
    db.add(proof)
    db.commit()
    db.refresh(proof)
    logger.info("proof_registered proof_id=%s user_id=%s type=%s", proof.id, user_id, proof_type)
    return ProofUpload(
        proof=proof,
        upload_url=upload_url,
        expires_at=now + timedelta(seconds=PROOF_UPLOAD_EXPIRES_SECONDS),
    )


def verify_proof(
    db: Session, user_id: uuid.UUID, proof_id: uuid.UUID, storage: ProofStorage
) -> tuple[Proof, AntiCheatResult]:
    """Score the uploaded object and record the verdict.

    An approved proof moves an unfinished attempt to PENDING_REVIEW. A rejected
    proof leaves the attempt untouched.
    """
    proof = get_proof(db, user_id, proof_id)
    metadata = storage.get_metadata(proof.storage_key)
    if metadata is None:
        raise ProofFileMissing()

    result = anti_cheat.score(proof.type, metadata)
    verdict = anti_cheat.classify(result.score)

    proof.status = verdict
    proof.anti_cheat_score = result.score
    proof.verified_at = datetime.now(timezone.utc)

    if verdict == "APPROVED":
        progress = db.get(MissionProgress, proof.mission_progress_id)
        if progress and progress.status != "COMPLETED":
            progress.status = "PENDING_REVIEW"

    db.commit()
    db.refresh(proof)
    logger.info("proof_verified proof_id=%s status=%s score=%s", proof.id, verdict, result.score)
    return proof, result
