"""Mission lifecycle and completion cascade tests."""

import uuid

import pytest
from sqlalchemy import select

from ecoquest.core.errors import (
    AlreadyCompleted,
    InvalidProgress,
    MissionInactive,
    MissionLocked,
    MissionNotFound,
    NotStarted,
    ProgressNotFound,
)
from ecoquest.models.map_region import MapRegion
from ecoquest.models.mission_progress import MissionProgress
from ecoquest.models.reward import Reward
from ecoquest.services import mission_service
from ecoquest.services.effects import EffectList
from ecoquest.services.mission_service import (
    MissionState,
    complete_mission,
    list_missions,
    mission_state,
    start_mission,
    update_progress,
)


def _rewards(db, user_id):
    return db.execute(select(Reward).where(Reward.user_id == user_id)).scalars().all()


def test_mission_state_of_missing_row_is_absent():
    assert mission_state(None) is MissionState.ABSENT


def test_start_creates_in_progress_row(db, make_user, make_mission):
    user = make_user()
    mission = make_mission()

    progress, loaded = start_mission(db, user.id, mission.id)

    assert loaded.id == mission.id
    assert progress.status == "IN_PROGRESS"
    assert progress.progress == 0
    assert progress.started_at is not None


def test_restart_keeps_progress_value(db, make_user, make_mission):
    user = make_user()
    mission = make_mission()
    first, _ = start_mission(db, user.id, mission.id)
    update_progress(db, user.id, mission.id, 100)

    again, _ = start_mission(db, user.id, mission.id)

    assert again.id == first.id
    assert again.status == "IN_PROGRESS"
    assert again.progress == 100


def test_start_rejects_unknown_and_inactive(db, make_user, make_mission):
    user = make_user()
    inactive = make_mission(is_active=False)
    with pytest.raises(MissionNotFound):
        start_mission(db, user.id, uuid.uuid4())
    with pytest.raises(MissionInactive):
        start_mission(db, user.id, inactive.id)


def test_prerequisite_gates_start(db, make_user, make_mission):
    """A mission chained after another stays locked until that one is COMPLETED."""
    user = make_user()
    first = make_mission()
    second = make_mission(unlocks_after_mission_id=first.id)

    with pytest.raises(MissionLocked):
        start_mission(db, user.id, second.id)

    start_mission(db, user.id, first.id)
    with pytest.raises(MissionLocked):
        start_mission(db, user.id, second.id)

    complete_mission(db, user.id, first.id)
    progress, _ = start_mission(db, user.id, second.id)
    assert progress.status == "IN_PROGRESS"


def test_corruption_requirement_gates_start(db, make_user, make_mission):
    mission = make_mission(requires_corruption_cleared=True)
    almost = make_user(corruption_cleared=99)
    enough = make_user(corruption_cleared=100)

    with pytest.raises(MissionLocked) as exc:
        start_mission(db, almost.id, mission.id)
    assert "corruption" in exc.value.message

    progress, _ = start_mission(db, enough.id, mission.id)
    assert progress.status == "IN_PROGRESS"


def test_update_progress_transitions(db, make_user, make_mission):
    user = make_user()
    mission = make_mission()
    start_mission(db, user.id, mission.id)

    progress, _ = update_progress(db, user.id, mission.id, 60)
    assert (progress.status, progress.progress) == ("IN_PROGRESS", 60)

    progress, _ = update_progress(db, user.id, mission.id, 100)
    assert (progress.status, progress.progress) == ("PENDING_REVIEW", 100)

    progress, _ = update_progress(db, user.id, mission.id, 90)
    assert (progress.status, progress.progress) == ("IN_PROGRESS", 90)


@pytest.mark.parametrize("value", [-1, 101, 50.5, True])
def test_update_progress_rejects_out_of_range(db, make_user, make_mission, value):
    user = make_user()
    mission = make_mission()
    start_mission(db, user.id, mission.id)
    with pytest.raises(InvalidProgress):
        update_progress(db, user.id, mission.id, value)


def test_update_progress_requires_started_mission(db, make_user, make_mission):
    user = make_user()
    mission = make_mission()
    with pytest.raises(ProgressNotFound):
        update_progress(db, user.id, mission.id, 10)


def test_complete_requires_progress_row(db, make_user, make_mission):
    user = make_user()
    mission = make_mission()
    with pytest.raises(ProgressNotFound):
        complete_mission(db, user.id, mission.id)
    assert _rewards(db, user.id) == []


def test_complete_rejects_not_started_row(db, make_user, make_mission):
    user = make_user()
    mission = make_mission()
    db.add(MissionProgress(user_id=user.id, mission_id=mission.id, status="NOT_STARTED", progress=0))
    db.commit()
    with pytest.raises(NotStarted):
        complete_mission(db, user.id, mission.id)


def test_completed_is_final(db, make_user, make_mission):
    """No operation moves a COMPLETED attempt elsewhere or pays it twice."""
    user = make_user()
    mission = make_mission(reward_amount=100)
    start_mission(db, user.id, mission.id)
    complete_mission(db, user.id, mission.id)

    with pytest.raises(AlreadyCompleted):
        complete_mission(db, user.id, mission.id)
    with pytest.raises(AlreadyCompleted):
        update_progress(db, user.id, mission.id, 50)
    with pytest.raises(AlreadyCompleted):
        start_mission(db, user.id, mission.id)

    progress = mission_service.get_progress(db, user.id, mission.id)
    assert progress.status == "COMPLETED"
    assert progress.progress == 100
    assert len(_rewards(db, user.id)) == 1


def test_complete_from_pending_review(db, make_user, make_mission):
    user = make_user()
    mission = make_mission()
    start_mission(db, user.id, mission.id)
    update_progress(db, user.id, mission.id, 100)

    result = complete_mission(db, user.id, mission.id)
    assert result.progress.status == "COMPLETED"
    assert result.progress.completed_at is not None


def test_completion_cascade_for_corruption_mission(db, make_user, make_mission):
    """Coins, XP, eco-karma and the mission's region all follow a completion."""
    user = make_user()
    mission = make_mission(
        reward_amount=200,
        corruption_level=20,
        is_corruption_mission=True,
        region="river_cleanup",
    )
    start_mission(db, user.id, mission.id)

    result = complete_mission(db, user.id, mission.id)

    assert result.progress.status == "COMPLETED"
    assert all(outcome.ok for outcome in result.effects)
    assert [o.name for o in result.effects] == [
        "coins",
        "xp",
        "badges",
        "eco_karma",
        "region",
        "badges_after_corruption",
    ]

    rewards = _rewards(db, user.id)
    assert len(rewards) == 1
    assert rewards[0].amount == 200
    assert rewards[0].type == "coins"
    assert rewards[0].mission_progress_id == str(result.progress.id)

    db.refresh(user)
    assert user.xp == 70
    assert user.level == 1
    assert user.total_eco_karma == 20
    assert user.corruption_cleared == 20

    region = db.execute(
        select(MapRegion).where(MapRegion.user_id == user.id, MapRegion.region == "river_cleanup")
    ).scalar_one()
    assert region.corruption_level == 80
    assert region.missions_completed == 1
    assert region.total_missions == 1
    assert region.is_unlocked is True


def test_plain_mission_skips_corruption_effects(db, make_user, make_mission):
    user = make_user()
    mission = make_mission(reward_amount=100, region="forest_restoration")
    start_mission(db, user.id, mission.id)

    result = complete_mission(db, user.id, mission.id)

    assert [o.name for o in result.effects] == ["coins", "xp", "badges"]
    db.refresh(user)
    assert user.xp == 60
    assert user.total_eco_karma == 0
    assert db.execute(select(MapRegion).where(MapRegion.user_id == user.id)).first() is None


def test_completion_awards_badges_after_corruption(db, make_user, make_mission, make_badge):
    """Badges keyed on eco-karma are granted by the post-corruption evaluation."""
    user = make_user()
    badge = make_badge(requirement_type="eco_karma", requirement_value=20, reward_amount=15)
    mission = make_mission(reward_amount=0, corruption_level=20, is_corruption_mission=True)
    start_mission(db, user.id, mission.id)

    result = complete_mission(db, user.id, mission.id)

    assert "region" not in [o.name for o in result.effects]
    rewards = {r.type: r for r in _rewards(db, user.id)}
    assert rewards["badge_reward"].mission_progress_id == str(badge.id)
    assert rewards["badge_reward"].amount == 15


def test_failed_effect_does_not_undo_completion(db, make_user, make_mission, monkeypatch):
    """A failing coin payment leaves the mission COMPLETED and later effects still run."""
    user = make_user()
    mission = make_mission(reward_amount=100, corruption_level=10, is_corruption_mission=True, region="urban_pollution")
    start_mission(db, user.id, mission.id)

    def broken_ledger(*args, **kwargs):
        raise RuntimeError("ledger down")

    monkeypatch.setattr(mission_service, "issue_reward", broken_ledger)
    result = complete_mission(db, user.id, mission.id)

    outcomes = {o.name: o for o in result.effects}
    assert outcomes["coins"].ok is False
    assert outcomes["coins"].error == "ledger down"
    assert all(o.ok for name, o in outcomes.items() if name != "coins")

    assert mission_service.get_progress(db, user.id, mission.id).status == "COMPLETED"
    db.refresh(user)
    assert user.xp == 60
    assert user.total_eco_karma == 10
    assert _rewards(db, user.id) == []


def test_effect_list_rolls_back_failed_effect(db, make_user):
    user = make_user()
    ran = []

    def dirty_then_fail():
        user.xp = 999
        raise ValueError("boom")

    effects = EffectList(db, context={"user_id": user.id})
    effects.add("fails", dirty_then_fail)
    effects.add("runs", lambda: ran.append("after"))

    outcomes = effects.run_all()

    assert [(o.name, o.ok) for o in outcomes] == [("fails", False), ("runs", True)]
    assert ran == ["after"]
    db.refresh(user)
    assert user.xp == 0


def test_list_missions_reports_unlock_and_progress(db, make_user, make_mission):
    user = make_user()
    first = make_mission(category="water", region="river_cleanup")
    chained = make_mission(category="water", unlocks_after_mission_id=first.id)
    make_mission(category="air")
    make_mission(category="water", is_active=False)
    start_mission(db, user.id, first.id)

    listing = list_missions(db, user.id, category="water")

    assert listing["pagination"]["total"] == 2
    by_id = {item["mission"].id: item for item in listing["missions"]}
    assert by_id[first.id]["is_unlocked"] is True
    assert by_id[first.id]["progress"].status == "IN_PROGRESS"
    assert by_id[chained.id]["is_unlocked"] is False
    assert by_id[chained.id]["progress"] is None


def test_list_missions_paginates(db, make_user, make_mission):
    user = make_user()
    for _ in range(5):
        make_mission()
    listing = list_missions(db, user.id, page=2, limit=2)
    assert len(listing["missions"]) == 2
    assert listing["pagination"] == {"page": 2, "limit": 2, "total": 5, "total_pages": 3}
