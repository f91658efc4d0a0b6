"""Shared fixtures: one throwaway SQLite file behind the app's own engine."""

import os
import shutil
import tempfile
import uuid
from pathlib import Path

_DB_DIR = tempfile.mkdtemp(prefix="ecoquest-tests-")
_DB_PATH = Path(_DB_DIR) / "ecoquest.db"

# Settings are read at import time, so configure before ecoquest loads.
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ["REPLAY_PROTECTION"] = "false"
os.environ.setdefault("SEED_CATALOG", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from ecoquest.db.base import Base  # noqa: E402
from ecoquest.db.session import SessionLocal, engine  # noqa: E402
from ecoquest.main import app  # noqa: E402
from ecoquest.models import Badge, Mission, User  # noqa: E402


@pytest.fixture(scope="session")
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    shutil.rmtree(_DB_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def clean_tables(setup_db):
    """Empty every table after each test; the badge and lesson catalogs are shared."""
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db(setup_db):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(setup_db):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(**overrides) -> User:
        suffix = uuid.uuid4().hex[:8]
        data = {
            "email": f"player_{suffix}@test.com",
            "username": f"player_{suffix}",
            "hashed_password": "not-a-real-hash",
        }
        data.update(overrides)
        user = User(**data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_mission(db):
    def _make(**overrides) -> Mission:
        data = {
            "title": f"Mission {uuid.uuid4().hex[:8]}",
            "description": "Do something good for the planet",
            "reward_amount": 100,
        }
        data.update(overrides)
        mission = Mission(**data)
        db.add(mission)
        db.commit()
        db.refresh(mission)
        return mission

    return _make


@pytest.fixture
def make_badge(db):
    def _make(**overrides) -> Badge:
        data = {
            "code": f"badge_{uuid.uuid4().hex[:8]}",
            "name": "Test Badge",
            "requirement_type": "xp_reached",
            "requirement_value": 100,
            "reward_amount": 0,
        }
        data.update(overrides)
        badge = Badge(**data)
        db.add(badge)
        db.commit()
        db.refresh(badge)
        return badge

    return _make
