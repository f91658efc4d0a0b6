"""Patron god alignment."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy.orm import Session

from ecoquest.core.errors import GodAlreadySelected, GodChangeRequiresForce, InvalidGod, UserNotFound
from ecoquest.core.game_rules import GODS
from ecoquest.models.user import User

logger = logging.getLogger(__name__)


def _god_view(god_id: str) -> dict[str, Any]:
    return {"id": god_id, **GODS[god_id]}


def list_gods() -> list[dict[str, Any]]:
    return [_god_view(god_id) for god_id in GODS]


def get_selected_god(user: User) -> dict[str, Any] | None:
    if not user.selected_god or user.selected_god not in GODS:
        return None
    return _god_view(user.selected_god)


def select_god(db: Session, user_id: uuid.UUID, god: str, force: bool = False) -> dict[str, Any]:
    """Align the user with ``god``. Once chosen, changing requires ``force``."""
    if god not in GODS:
        raise InvalidGod()
    user = db.get(User, user_id)
    if not user:
        raise UserNotFound()
    if user.selected_god == god:
        raise GodAlreadySelected()
    if user.selected_god and not force:
        raise GodChangeRequiresForce()

    previous = user.selected_god
    user.selected_god = god
    db.commit()
    db.refresh(user)
    logger.info("god_selected user_id=%s god=%s previous=%s", user_id, god, previous)
    return _god_view(god)
