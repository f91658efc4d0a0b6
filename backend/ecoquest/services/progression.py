"""XP, level and aggregate-stat progression.

Level thresholds are triangular: reaching level L from L-1 costs 100 * L XP,
so the cumulative XP to enter level L is 50 * L * (L - 1).

The pure functions here never touch storage. The ``award_xp`` / ``add_*``
mutations operate on a loaded ``User`` and only ever increase its counters;
``grant_xp`` and friends are the database-backed wrappers used by services.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass

from sqlalchemy.orm import Session

from ecoquest.core.errors import InvalidAmount, UserNotFound
from ecoquest.core.game_rules import MISSION_BASE_XP, MISSION_REWARD_XP_DIVISOR, XP_PER_LEVEL_STEP
from ecoquest.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelProgress:
    current_level_xp: int
    next_level_xp: int
    percent: int


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def xp_threshold_for_level(level: int) -> int:
    """Cumulative XP required to enter ``level`` (0 for level <= 1)."""
    if level <= 1:
        return 0
    return XP_PER_LEVEL_STEP * level * (level - 1) // 2


def level_for_xp(xp: int) -> int:
    """Largest level whose threshold is <= ``xp``."""
    if xp < 0:
        return 1
    # Solve 50 * L * (L - 1) <= xp for L, then correct integer rounding.
    level = max(1, int((1 + math.sqrt(1 + 8 * xp / XP_PER_LEVEL_STEP)) / 2))
    while xp_threshold_for_level(level + 1) <= xp:
        level += 1
    while level > 1 and xp_threshold_for_level(level) > xp:
        level -= 1
    return level


def progress_within_level(xp: int, level: int) -> LevelProgress:
    current_level_xp = xp_threshold_for_level(level)
    next_level_xp = xp_threshold_for_level(level + 1)
    span = next_level_xp - current_level_xp
    if span <= 0:
        percent = 100
    else:
        percent = round_half_up(100 * (xp - current_level_xp) / span)
        percent = min(100, max(0, percent))
    return LevelProgress(current_level_xp=current_level_xp, next_level_xp=next_level_xp, percent=percent)


def xp_for_mission_reward(reward_amount: int) -> int:
    """XP granted for completing a mission paying ``reward_amount`` coins."""
    return round_half_up(MISSION_BASE_XP + reward_amount / MISSION_REWARD_XP_DIVISOR)


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmount()


def award_xp(user: User, amount: int) -> int:
    """Add ``amount`` XP and raise the level if the new total warrants it.

    The stored level is never lowered, even if the derived level for the same
    XP would be smaller. Returns the user's level afterwards.
    """
    _check_amount(amount)
    user.xp = (user.xp or 0) + amount
    derived = level_for_xp(user.xp)
    if derived > (user.level or 1):
        user.level = derived
    return user.level


def add_eco_karma(user: User, amount: int) -> int:
    """Increase total eco-karma. Monotonic."""
    _check_amount(amount)
    user.total_eco_karma = (user.total_eco_karma or 0) + amount
    return user.total_eco_karma


def add_corruption_cleared(user: User, amount: int) -> int:
    """Increase the global corruption-cleared counter. Monotonic."""
    _check_amount(amount)
    user.corruption_cleared = (user.corruption_cleared or 0) + amount
    return user.corruption_cleared


def _load_user(db: Session, user_id: uuid.UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise UserNotFound()
    return user


def grant_xp(db: Session, user_id: uuid.UUID, amount: int) -> User:
    user = _load_user(db, user_id)
    previous_level = user.level
    award_xp(user, amount)
    db.commit()
    db.refresh(user)
    if user.level > previous_level:
        logger.info("level_up user_id=%s level=%s xp=%s", user_id, user.level, user.xp)
    return user


def grant_corruption_clear(db: Session, user_id: uuid.UUID, amount: int) -> User:
    """Credit a corruption-clearing action to both eco-karma and the global counter."""
    user = _load_user(db, user_id)
    add_eco_karma(user, amount)
    add_corruption_cleared(user, amount)
    db.commit()
    db.refresh(user)
    return user
