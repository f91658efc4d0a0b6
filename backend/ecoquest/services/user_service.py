"""Player profile statistics."""

from __future__ import annotations

import uuid
from dataclasses import asdict
from typing import Any

from sqlalchemy.orm import Session

from ecoquest.core.errors import UserNotFound
from ecoquest.models.user import User
from ecoquest.services.badge_service import count_completed_missions, count_user_badges
from ecoquest.services.progression import progress_within_level
from ecoquest.services.reward_ledger import coin_balance


def get_stats(db: Session, user_id: uuid.UUID) -> dict[str, Any]:
    user = db.get(User, user_id)
    if not user:
        raise UserNotFound()
    return {
        "level": user.level,
        "xp": user.xp,
        "xp_progress": asdict(progress_within_level(user.xp, user.level)),
        "total_eco_karma": user.total_eco_karma,
        "corruption_cleared": user.corruption_cleared,
        "selected_god": user.selected_god,
        "missions_completed": count_completed_missions(db, user_id),
        "badges_earned": count_user_badges(db, user_id),
        "coins": coin_balance(db, user_id),
    }
