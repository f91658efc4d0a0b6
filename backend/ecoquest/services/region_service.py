"""Per-user map regions and their corruption levels."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecoquest.core.errors import InvalidAmount, InvalidRegion
from ecoquest.core.game_rules import REGION_IDS, REGION_MIN_CORRUPTION, REGION_START_CORRUPTION, REGIONS
from ecoquest.models.map_region import MapRegion

logger = logging.getLogger(__name__)


def _get_region(db: Session, user_id: uuid.UUID, region: str) -> MapRegion | None:
    return db.execute(
        select(MapRegion).where(MapRegion.user_id == user_id, MapRegion.region == region)
    ).scalar_one_or_none()


def _get_or_create_region(db: Session, user_id: uuid.UUID, region: str) -> tuple[MapRegion, bool]:
    """Return ``(row, created)``. The insert commits on its own so a lost race rolls back nothing else."""
    row = _get_region(db, user_id, region)
    if row:
        return row, False

    row = MapRegion(
        user_id=user_id,
        region=region,
        corruption_level=REGION_START_CORRUPTION,
        is_unlocked=False,
        missions_completed=0,
        total_missions=0,
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the row first.
        db.rollback()
        existing = _get_region(db, user_id, region)
        if existing:
            logger.info("region_create_lost_race user_id=%s region=%s", user_id, region)
            return existing, False
        raise
    db.refresh(row)
    return row, True


def _lower_corruption(row: MapRegion, amount: int) -> None:
    row.corruption_level = max(REGION_MIN_CORRUPTION, row.corruption_level - amount)
    row.last_cleared = datetime.now(timezone.utc)


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmount()


def clear_region_corruption(db: Session, user_id: uuid.UUID, region: str, amount: int) -> MapRegion:
    """Player-initiated clear. Unlocks the region only when this call created it."""
    if region not in REGION_IDS:
        raise InvalidRegion()
    _check_amount(amount)

    row, created = _get_or_create_region(db, user_id, region)
    if created:
        row.is_unlocked = True
    _lower_corruption(row, amount)
    db.commit()
    db.refresh(row)
    logger.info("region_cleared user_id=%s region=%s corruption_level=%s", user_id, region, row.corruption_level)
    return row


def apply_mission_corruption_clear(db: Session, user_id: uuid.UUID, region: str, amount: int) -> MapRegion:
    """Mission-driven clear. Trusts the mission's region and counts the mission."""
    _check_amount(amount)
    row, created = _get_or_create_region(db, user_id, region)
    if created:
        row.total_missions = 1
        row.missions_completed = 1
    else:
        row.missions_completed += 1
    row.is_unlocked = True
    _lower_corruption(row, amount)
    db.commit()
    db.refresh(row)
    logger.info(
        "region_mission_cleared user_id=%s region=%s corruption_level=%s missions_completed=%s",
        user_id,
        region,
        row.corruption_level,
        row.missions_completed,
    )
    return row


def _region_view(region: dict[str, str], row: MapRegion | None) -> dict[str, Any]:
    if row is None:
        return {
            **region,
            "corruption_level": REGION_START_CORRUPTION,
            "is_unlocked": False,
            "missions_completed": 0,
            "total_missions": 0,
            "last_cleared": None,
        }
    return {
        **region,
        "corruption_level": row.corruption_level,
        "is_unlocked": row.is_unlocked,
        "missions_completed": row.missions_completed,
        "total_missions": row.total_missions,
        "last_cleared": row.last_cleared,
    }


def list_regions(db: Session, user_id: uuid.UUID) -> list[dict[str, Any]]:
    rows = db.execute(select(MapRegion).where(MapRegion.user_id == user_id)).scalars().all()
    by_region = {row.region: row for row in rows}
    return [_region_view(region, by_region.get(region["id"])) for region in REGIONS]


def map_state(db: Session, user_id: uuid.UUID) -> dict[str, Any]:
    """Average corruption over the fixed region list; unseen regions count as fully corrupted."""
    regions = list_regions(db, user_id)
    total_regions = len(regions)
    average = round(sum(r["corruption_level"] for r in regions) / total_regions) if total_regions else REGION_START_CORRUPTION
    return {
        "average_corruption": average,
        "total_regions": total_regions,
        "regions": regions,
    }
