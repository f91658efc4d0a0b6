"""Mission lifecycle: start, progress, completion and the reward cascade.

State of a (user, mission) pair::

    ABSENT --start--> IN_PROGRESS --progress=100--> PENDING_REVIEW
       IN_PROGRESS / PENDING_REVIEW --complete--> COMPLETED (final)

Restarting an unfinished attempt re-enters IN_PROGRESS. FAILED exists in the
schema but nothing produces it yet.
"""

from __future__ import annotations

import enum
import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecoquest.core.errors import (
    AlreadyCompleted,
    InvalidProgress,
    MissionInactive,
    MissionLocked,
    MissionNotFound,
    NotStarted,
    ProgressNotFound,
    UserNotFound,
)
from ecoquest.core.game_rules import CORRUPTION_UNLOCK_THRESHOLD
from ecoquest.models.mission import Mission
from ecoquest.models.mission_progress import MissionProgress
from ecoquest.models.user import User
from ecoquest.services.badge_service import evaluate_and_award
from ecoquest.services.effects import EffectList, EffectOutcome
from ecoquest.services.progression import grant_corruption_clear, grant_xp, xp_for_mission_reward
from ecoquest.services.region_service import apply_mission_corruption_clear
from ecoquest.services.reward_ledger import issue_reward

logger = logging.getLogger(__name__)

MISSION_REWARD_TYPE = "coins"


class MissionState(str, enum.Enum):
    ABSENT = "ABSENT"
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    PENDING_REVIEW = "PENDING_REVIEW"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


def mission_state(progress: MissionProgress | None) -> MissionState:
    """Map a progress row (or its absence) to an explicit state."""
    if progress is None:
        return MissionState.ABSENT
    return MissionState(progress.status)


@dataclass
class CompletionResult:
    progress: MissionProgress
    mission: Mission
    effects: list[EffectOutcome]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_mission(db: Session, mission_id: uuid.UUID) -> Mission:
    mission = db.get(Mission, mission_id)
    if not mission:
        raise MissionNotFound()
    return mission


def get_progress(db: Session, user_id: uuid.UUID, mission_id: uuid.UUID) -> MissionProgress | None:
    return db.execute(
        select(MissionProgress).where(
            MissionProgress.user_id == user_id,
            MissionProgress.mission_id == mission_id,
        )
    ).scalar_one_or_none()


def _completed_mission_ids(db: Session, user_id: uuid.UUID) -> set[uuid.UUID]:
    result = db.execute(
        select(MissionProgress.mission_id).where(
            MissionProgress.user_id == user_id,
            MissionProgress.status == MissionState.COMPLETED.value,
        )
    )
    return set(result.scalars().all())


def is_mission_unlocked(mission: Mission, user: User, completed_ids: set[uuid.UUID]) -> bool:
    if mission.unlocks_after_mission_id and mission.unlocks_after_mission_id not in completed_ids:
        return False
    if mission.requires_corruption_cleared and user.corruption_cleared < CORRUPTION_UNLOCK_THRESHOLD:
        return False
    return True


def _check_unlocked(db: Session, mission: Mission, user: User) -> None:
    if mission.unlocks_after_mission_id:
        prerequisite = get_progress(db, user.id, mission.unlocks_after_mission_id)
        if mission_state(prerequisite) is not MissionState.COMPLETED:
            raise MissionLocked()
    if mission.requires_corruption_cleared and user.corruption_cleared < CORRUPTION_UNLOCK_THRESHOLD:
        raise MissionLocked("This mission requires clearing corruption first.")


def start_mission(db: Session, user_id: uuid.UUID, mission_id: uuid.UUID) -> tuple[MissionProgress, Mission]:
    mission = get_mission(db, mission_id)
    if not mission.is_active:
        raise MissionInactive()

    user = db.get(User, user_id)
    if not user:
        raise UserNotFound()
    _check_unlocked(db, mission, user)

    progress = get_progress(db, user_id, mission_id)
    state = mission_state(progress)
    if state is MissionState.COMPLETED:
        raise AlreadyCompleted()

    if progress is None:
        progress = MissionProgress(
            user_id=user_id,
            mission_id=mission_id,
            status=MissionState.IN_PROGRESS.value,
            progress=0,
            started_at=_utcnow(),
        )
        db.add(progress)
        try:
            db.commit()
        except IntegrityError:
            # A concurrent start created the row; restart that one instead.
            db.rollback()
            progress = get_progress(db, user_id, mission_id)
            if progress is None:
                raise
            if mission_state(progress) is MissionState.COMPLETED:
                raise AlreadyCompleted() from None
            progress.status = MissionState.IN_PROGRESS.value
            progress.started_at = _utcnow()
            db.commit()
    else:
        # Restart keeps the recorded progress value, only the timing resets.
        progress.status = MissionState.IN_PROGRESS.value
        progress.started_at = _utcnow()
        db.commit()

    db.refresh(progress)
    logger.info("mission_started user_id=%s mission_id=%s previous_state=%s", user_id, mission_id, state.value)
    return progress, mission


def update_progress(
    db: Session, user_id: uuid.UUID, mission_id: uuid.UUID, value: int
) -> tuple[MissionProgress, Mission | None]:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 100:
        raise InvalidProgress()

    progress = get_progress(db, user_id, mission_id)
    state = mission_state(progress)
    if state is MissionState.ABSENT:
        raise ProgressNotFound()
    if state is MissionState.COMPLETED:
        raise AlreadyCompleted()

    progress.progress = value
    progress.status = (MissionState.PENDING_REVIEW if value == 100 else MissionState.IN_PROGRESS).value
    db.commit()
    db.refresh(progress)
    return progress, db.get(Mission, mission_id)


def _queue_completion_effects(
    effects: EffectList, db: Session, user_id: uuid.UUID, progress_id: uuid.UUID, mission: Mission
) -> None:
    reward_amount = mission.reward_amount
    effects.add(
        "coins",
        lambda: issue_reward(db, user_id, progress_id, reward_amount, MISSION_REWARD_TYPE),
    )
    effects.add("xp", lambda: grant_xp(db, user_id, xp_for_mission_reward(reward_amount)))
    effects.add("badges", lambda: evaluate_and_award(db, user_id))

    if mission.is_corruption_mission and mission.corruption_level > 0:
        amount = mission.corruption_level
        region = mission.region
        effects.add("eco_karma", lambda: grant_corruption_clear(db, user_id, amount))
        if region:
            effects.add("region", lambda: apply_mission_corruption_clear(db, user_id, region, amount))
        effects.add("badges_after_corruption", lambda: evaluate_and_award(db, user_id))


def complete_mission(db: Session, user_id: uuid.UUID, mission_id: uuid.UUID) -> CompletionResult:
    """Mark the attempt COMPLETED, then apply rewards as isolated follow-on effects.

    Once the status change is committed the call succeeds, whatever happens to
    the coins, XP, badge, eco-karma and region effects. Their outcomes are
    reported in the result.
    """
    progress = get_progress(db, user_id, mission_id)
    state = mission_state(progress)
    if state is MissionState.ABSENT:
        raise ProgressNotFound("Mission progress not found")
    if state is MissionState.COMPLETED:
        raise AlreadyCompleted()
    if state is MissionState.NOT_STARTED:
        raise NotStarted()

    mission = get_mission(db, mission_id)

    progress.status = MissionState.COMPLETED.value
    progress.progress = 100
    progress.completed_at = _utcnow()
    db.commit()
    db.refresh(progress)
    progress_id = progress.id
    logger.info("mission_completed user_id=%s mission_id=%s progress_id=%s", user_id, mission_id, progress_id)

    effects = EffectList(db, context={"user_id": user_id, "progress_id": progress_id})
    _queue_completion_effects(effects, db, user_id, progress_id, mission)
    outcomes = effects.run_all()

    db.refresh(progress)
    db.refresh(mission)
    return CompletionResult(progress=progress, mission=mission, effects=outcomes)


def list_missions(
    db: Session,
    user_id: uuid.UUID,
    *,
    page: int = 1,
    limit: int = 20,
    category: str | None = None,
    god: str | None = None,
    region: str | None = None,
) -> dict[str, Any]:
    """Active missions with the caller's progress and unlock state."""
    user = db.get(User, user_id)
    if not user:
        raise UserNotFound()

    page = max(1, page)
    limit = max(1, limit)
    conditions = [Mission.is_active.is_(True)]
    if category:
        conditions.append(Mission.category == category)
    if god:
        conditions.append(Mission.god == god)
    if region:
        conditions.append(Mission.region == region)

    total = db.execute(select(func.count(Mission.id)).where(*conditions)).scalar_one()
    missions = db.execute(
        select(Mission)
        .where(*conditions)
        .order_by(Mission.created_at.desc(), Mission.title.asc())
        .limit(limit)
        .offset((page - 1) * limit)
    ).scalars().all()

    mission_ids = [m.id for m in missions]
    progresses: dict[uuid.UUID, MissionProgress] = {}
    if mission_ids:
        rows = db.execute(
            select(MissionProgress).where(
                MissionProgress.user_id == user_id,
                MissionProgress.mission_id.in_(mission_ids),
            )
        ).scalars().all()
        progresses = {row.mission_id: row for row in rows}

    completed_ids = _completed_mission_ids(db, user_id)
    return {
        "missions": [
            {
                "mission": mission,
                "is_unlocked": is_mission_unlocked(mission, user, completed_ids),
                "progress": progresses.get(mission.id),
            }
            for mission in missions
        ],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": int(total),
            "total_pages": math.ceil(total / limit),
        },
    }
