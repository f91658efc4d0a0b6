"""Badge evaluation against aggregate stats, plus listing and manual claims."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecoquest.core.errors import AlreadyEarnedBadge, BadgeNotFound
from ecoquest.models.badge import Badge, UserBadge
from ecoquest.models.mission_progress import MissionProgress
from ecoquest.models.user import User
from ecoquest.services.reward_ledger import issue_reward

logger = logging.getLogger(__name__)

BADGE_REWARD_TYPE = "badge_reward"


def count_completed_missions(db: Session, user_id: uuid.UUID) -> int:
    result = db.execute(
        select(func.count(MissionProgress.id)).where(
            MissionProgress.user_id == user_id,
            MissionProgress.status == "COMPLETED",
        )
    )
    return int(result.scalar_one() or 0)


def _stat_values(user: User, missions_completed: int) -> dict[str, int]:
    return {
        "xp_reached": user.xp,
        "level_reached": user.level,
        "mission_complete": missions_completed,
        "corruption_cleared": user.corruption_cleared,
        "eco_karma": user.total_eco_karma,
    }


def _qualifies(badge: Badge, stats: dict[str, int]) -> bool:
    value = stats.get(badge.requirement_type)
    if value is None:
        return False
    return value >= badge.requirement_value


def _pay_badge_reward(db: Session, user_id: uuid.UUID, badge: Badge) -> None:
    # The badge id doubles as the idempotency key, matching the one-badge-per-user rule.
    issue_reward(
        db,
        user_id,
        badge.id,
        badge.reward_amount,
        BADGE_REWARD_TYPE,
        {"badgeId": str(badge.id), "badgeCode": badge.code},
    )


def _insert_user_badge(db: Session, user_id: uuid.UUID, badge_id: uuid.UUID) -> bool:
    """Insert the earned-badge row. False when a concurrent grant won the race."""
    db.add(UserBadge(user_id=user_id, badge_id=badge_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True


def evaluate_and_award(db: Session, user_id: uuid.UUID) -> list[Badge]:
    """Grant every active badge the user newly qualifies for.

    Safe to call repeatedly. A failed badge reward payment is logged and does
    not undo the badge or stop the remaining badges from being evaluated.
    """
    user = db.get(User, user_id)
    if not user:
        return []

    stats = _stat_values(user, count_completed_missions(db, user_id))
    badges = db.execute(select(Badge).where(Badge.is_active.is_(True))).scalars().all()
    earned_ids = set(
        db.execute(select(UserBadge.badge_id).where(UserBadge.user_id == user_id)).scalars().all()
    )

    candidates = [b for b in badges if b.id not in earned_ids and _qualifies(b, stats)]
    granted: list[Badge] = []
    for badge in candidates:
        if not _insert_user_badge(db, user_id, badge.id):
            logger.info("badge_already_granted user_id=%s badge=%s", user_id, badge.code)
            continue
        granted.append(badge)
        logger.info("badge_earned user_id=%s badge=%s", user_id, badge.code)

        if badge.reward_amount > 0:
            try:
                _pay_badge_reward(db, user_id, badge)
            except Exception:  # noqa: BLE001
                db.rollback()
                logger.exception("badge_reward_failed user_id=%s badge_id=%s", user_id, badge.id)
    return granted


def list_badges(db: Session) -> list[Badge]:
    result = db.execute(
        select(Badge).where(Badge.is_active.is_(True)).order_by(Badge.created_at.desc(), Badge.code.asc())
    )
    return list(result.scalars().all())


def list_user_badges(db: Session, user_id: uuid.UUID) -> list[dict[str, Any]]:
    rows = db.execute(
        select(Badge, UserBadge.earned_at)
        .join(UserBadge, UserBadge.badge_id == Badge.id)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at.desc())
    ).all()
    return [{"badge": badge, "earned_at": earned_at} for badge, earned_at in rows]


def count_user_badges(db: Session, user_id: uuid.UUID) -> int:
    result = db.execute(select(func.count(UserBadge.id)).where(UserBadge.user_id == user_id))
    return int(result.scalar_one() or 0)


def claim_badge(db: Session, user_id: uuid.UUID, badge_id: uuid.UUID) -> Badge:
    """Grant a badge on request and pay its reward.

    Unlike evaluation, reward errors propagate to the caller here.
    """
    badge = db.execute(
        select(Badge).where(Badge.id == badge_id, Badge.is_active.is_(True))
    ).scalar_one_or_none()
    if not badge:
        raise BadgeNotFound()

    existing = db.execute(
        select(UserBadge.id).where(UserBadge.user_id == user_id, UserBadge.badge_id == badge_id)
    ).scalar_one_or_none()
    if existing or not _insert_user_badge(db, user_id, badge_id):
        raise AlreadyEarnedBadge()
    logger.info("badge_claimed user_id=%s badge=%s", user_id, badge.code)

    if badge.reward_amount > 0:
        _pay_badge_reward(db, user_id, badge)
    db.refresh(badge)
    return badge
