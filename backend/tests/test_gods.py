"""Patron god selection tests."""

import pytest

from ecoquest.core.errors import GodAlreadySelected, GodChangeRequiresForce, InvalidGod
from ecoquest.services.god_service import get_selected_god, list_gods, select_god


def test_list_gods_has_the_pantheon():
    gods = {g["id"]: g for g in list_gods()}
    assert set(gods) == {"zeus", "athena", "artemis", "persephone"}
    assert gods["athena"]["name"]
    assert gods["athena"]["color"]


def test_select_and_read_back(db, make_user):
    user = make_user()
    assert get_selected_god(user) is None

    chosen = select_god(db, user.id, "artemis")

    assert chosen["id"] == "artemis"
    db.refresh(user)
    assert get_selected_god(user)["id"] == "artemis"


def test_changing_god_requires_force(db, make_user):
    user = make_user()
    select_god(db, user.id, "zeus")

    with pytest.raises(GodChangeRequiresForce):
        select_god(db, user.id, "athena")
    with pytest.raises(GodAlreadySelected):
        select_god(db, user.id, "zeus")

    assert select_god(db, user.id, "athena", force=True)["id"] == "athena"


def test_unknown_god(db, make_user):
    user = make_user()
    with pytest.raises(InvalidGod):
        select_god(db, user.id, "loki")
