"""Reward ledger: append-only reward records with at-most-once issuance."""

from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecoquest.core.errors import DuplicateReward, InvalidAmount
from ecoquest.models.reward import Reward

logger = logging.getLogger(__name__)


def _find_reward_id(db: Session, user_id: uuid.UUID, key: str) -> uuid.UUID | None:
    return db.execute(
        select(Reward.id).where(Reward.user_id == user_id, Reward.mission_progress_id == key).limit(1)
    ).scalar_one_or_none()


def issue_reward(
    db: Session,
    user_id: uuid.UUID,
    mission_progress_id: uuid.UUID | str,
    amount: int,
    reward_type: str,
    metadata: dict[str, Any] | None = None,
) -> Reward:
    """Append one reward for ``(user_id, mission_progress_id)``.

    Badge rewards pass the badge id as ``mission_progress_id``. The unique
    constraint on the pair decides the outcome of concurrent calls; the read
    beforehand only gives the common case a cheaper failure.

    Does not touch the user's xp or eco-karma.
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmount()

    key = str(mission_progress_id)
    if _find_reward_id(db, user_id, key):
        raise DuplicateReward()

    reward = Reward(
        user_id=user_id,
        mission_progress_id=key,
        amount=amount,
        type=reward_type,
        reward_metadata=metadata,
    )
    db.add(reward)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # Only a row already holding this key means we lost the race.
        if _find_reward_id(db, user_id, key):
            raise DuplicateReward() from None
        logger.error("reward_insert_failed user_id=%s key=%s", user_id, key)
        raise
    db.refresh(reward)

    logger.info(
        "reward_issued user_id=%s mission_progress_id=%s amount=%s type=%s",
        user_id,
        key,
        amount,
        reward_type,
    )
    return reward


def _paginate(
    db: Session,
    conditions: list[Any],
    page: int,
    limit: int,
) -> dict[str, Any]:
    page = max(1, page)
    limit = max(1, limit)
    total = db.execute(select(func.count(Reward.id)).where(*conditions)).scalar_one()
    rows = db.execute(
        select(Reward)
        .where(*conditions)
        .order_by(Reward.issued_at.desc(), Reward.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    ).scalars().all()
    return {
        "rewards": list(rows),
        "pagination": {
            "page": page,
            "limit": limit,
            "total": int(total),
            "total_pages": math.ceil(total / limit),
        },
    }


def list_rewards(
    db: Session,
    user_id: uuid.UUID,
    *,
    page: int = 1,
    limit: int = 20,
    reward_type: str | None = None,
) -> dict[str, Any]:
    conditions = [Reward.user_id == user_id]
    if reward_type:
        conditions.append(Reward.type == reward_type)
    return _paginate(db, conditions, page, limit)


def reward_history(
    db: Session,
    user_id: uuid.UUID,
    *,
    page: int = 1,
    limit: int = 20,
    reward_type: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> dict[str, Any]:
    """Rewards filtered by type and an inclusive issued-at window."""
    conditions = [Reward.user_id == user_id]
    if reward_type:
        conditions.append(Reward.type == reward_type)
    if start_date:
        conditions.append(Reward.issued_at >= start_date)
    if end_date:
        conditions.append(Reward.issued_at <= end_date)
    return _paginate(db, conditions, page, limit)


def coin_balance(db: Session, user_id: uuid.UUID) -> int:
    total = db.execute(
        select(func.coalesce(func.sum(Reward.amount), 0)).where(Reward.user_id == user_id)
    ).scalar_one()
    return int(total)

