"""HTTP surface tests: auth, envelope, missions, rewards, badges, map, learning and proofs."""

import uuid

from ecoquest.main import app
from ecoquest.services.catalog_service import seed_catalog
from ecoquest.services.storage_service import get_proof_storage


def _unique():
    return uuid.uuid4().hex[:6]


def _register_and_login(client):
    uid = _unique()
    email = f"eco_{uid}@test.com"
    resp = client.post(
        "/auth/register",
        json={"email": email, "username": f"eco_{uid}", "password": "password123"},
    )
    assert resp.status_code == 201, resp.json()
    token = client.post("/auth/login", json={"email": email, "password": "password123"}).json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


def test_register_login_me(client):
    headers = _register_and_login(client)
    resp = client.get("/auth/me", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["email"].startswith("eco_")


def test_register_duplicate_email(client):
    uid = _unique()
    payload = {"email": f"dup_{uid}@test.com", "username": f"dup_{uid}", "password": "password123"}
    assert client.post("/auth/register", json=payload).status_code == 201
    resp = client.post("/auth/register", json=payload)
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_login_wrong_password(client):
    uid = _unique()
    client.post(
        "/auth/register",
        json={"email": f"w_{uid}@test.com", "username": f"w_{uid}", "password": "password123"},
    )
    resp = client.post("/auth/login", json={"email": f"w_{uid}@test.com", "password": "wrong-password"})
    assert resp.status_code == 401


def test_protected_route_requires_token(client):
    resp = client.get("/users/me/stats")
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Not authenticated"}
    assert resp.headers["www-authenticate"] == "Bearer"

    resp = client.get("/users/me/stats", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_validation_error_is_400(client):
    headers = _register_and_login(client)
    resp = client.post("/map/regions/river_cleanup/clear", headers=headers, json={"corruption_cleared": -3})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "corruption_cleared" in body["error"]


def test_mission_flow_over_http(client, make_mission):
    headers = _register_and_login(client)
    mission = make_mission(
        reward_amount=200,
        corruption_level=20,
        is_corruption_mission=True,
        region="river_cleanup",
    )

    listing = client.get("/missions", headers=headers).json()["data"]
    assert listing["pagination"]["total"] == 1
    assert listing["missions"][0]["is_unlocked"] is True
    assert listing["missions"][0]["progress"] is None

    resp = client.post(f"/missions/{mission.id}/complete", headers=headers)
    assert resp.status_code == 404

    resp = client.post(f"/missions/{mission.id}/start", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["progress"]["status"] == "IN_PROGRESS"

    resp = client.post(f"/missions/{mission.id}/progress", headers=headers, json={"progress": 100})
    assert resp.json()["data"]["progress"]["status"] == "PENDING_REVIEW"

    resp = client.post(f"/missions/{mission.id}/complete", headers=headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["progress"]["status"] == "COMPLETED"
    assert all(effect["ok"] for effect in data["effects"])

    again = client.post(f"/missions/{mission.id}/complete", headers=headers)
    assert again.status_code == 400
    assert again.json()["success"] is False

    stats = client.get("/users/me/stats", headers=headers).json()["data"]
    assert stats["xp"] == 70
    assert stats["level"] == 1
    assert stats["total_eco_karma"] == 20
    assert stats["corruption_cleared"] == 20
    assert stats["missions_completed"] == 1
    assert stats["coins"] == 200
    assert stats["xp_progress"] == {"current_level_xp": 0, "next_level_xp": 100, "percent": 70}

    rewards = client.get("/rewards", headers=headers).json()["data"]
    assert rewards["pagination"]["total"] == 1
    assert rewards["rewards"][0]["amount"] == 200
    assert client.get("/rewards/balance", headers=headers).json()["data"] == {"coins": 200}

    regions = {r["id"]: r for r in client.get("/map/regions", headers=headers).json()["data"]}
    assert regions["river_cleanup"]["corruption_level"] == 80
    assert regions["river_cleanup"]["missions_completed"] == 1


def test_locked_mission_is_403(client, make_mission):
    headers = _register_and_login(client)
    mission = make_mission(requires_corruption_cleared=True)
    resp = client.post(f"/missions/{mission.id}/start", headers=headers)
    assert resp.status_code == 403
    assert resp.json()["error"] == "This mission requires clearing corruption first."


def test_unknown_mission_is_404(client):
    headers = _register_and_login(client)
    resp = client.post(f"/missions/{uuid.uuid4()}/start", headers=headers)
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Mission not found"}


def test_map_clear_and_state(client):
    headers = _register_and_login(client)
    resp = client.post("/map/regions/forest_restoration/clear", headers=headers, json={"corruption_cleared": 150})
    assert resp.status_code == 200
    assert resp.json()["data"] == {"region": "forest_restoration", "corruption_level": 0, "cleared": 150}

    state = client.get("/map/state", headers=headers).json()["data"]
    assert state["total_regions"] == 3
    assert state["average_corruption"] == 67

    resp = client.post("/map/regions/atlantis/clear", headers=headers, json={"corruption_cleared": 5})
    assert resp.status_code == 400


def test_badges_evaluate_and_claim(client, make_badge):
    headers = _register_and_login(client)
    auto = make_badge(requirement_type="xp_reached", requirement_value=0, reward_amount=5)
    manual = make_badge(requirement_type="xp_reached", requirement_value=9999, reward_amount=50)

    assert len(client.get("/badges").json()["data"]) == 2

    granted = client.post("/badges/evaluate", headers=headers).json()["data"]
    assert [b["id"] for b in granted] == [str(auto.id)]
    assert client.post("/badges/evaluate", headers=headers).json()["data"] == []

    resp = client.post(f"/badges/{manual.id}/claim", headers=headers)
    assert resp.status_code == 200
    resp = client.post(f"/badges/{manual.id}/claim", headers=headers)
    assert resp.status_code == 400

    mine = client.get("/badges/me", headers=headers).json()["data"]
    assert {b["badge"]["id"] for b in mine} == {str(auto.id), str(manual.id)}
    assert client.get("/rewards/balance", headers=headers).json()["data"]["coins"] == 55


def test_gods_over_http(client):
    headers = _register_and_login(client)
    assert len(client.get("/gods").json()["data"]) == 4
    assert client.get("/gods/selected", headers=headers).json()["data"] == {"selected_god": None}

    resp = client.post("/gods/select", headers=headers, json={"god": "persephone"})
    assert resp.status_code == 200
    resp = client.post("/gods/select", headers=headers, json={"god": "zeus"})
    assert resp.status_code == 400
    resp = client.post("/gods/select", headers=headers, json={"god": "zeus", "force": True})
    assert resp.status_code == 200


def test_proof_flow_over_http(client, make_mission):
    headers = _register_and_login(client)
    mission = make_mission()
    progress = client.post(f"/missions/{mission.id}/start", headers=headers).json()["data"]["progress"]

    class _Storage:
        def upload_url(self, storage_key, content_type, expires_in):
            return f"https://storage.test/{storage_key}"

        def get_metadata(self, storage_key):
            return {"size": 40_000, "content_type": "image/png"}

    app.dependency_overrides[get_proof_storage] = lambda: _Storage()
    try:
        resp = client.post("/proofs", headers=headers, json={"mission_progress_id": progress["id"], "type": "photo"})
        assert resp.status_code == 201
        body = resp.json()["data"]
        proof = body["proof"]
        assert proof["status"] == "PENDING"
        assert body["upload_url"] == f"https://storage.test/{proof['storage_key']}"

        resp = client.post(f"/proofs/{proof['id']}/verify", headers=headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["proof"]["status"] == "APPROVED"
        assert {c["name"] for c in data["checks"]} == {"file_size", "content_type", "advanced_analysis"}

        assert client.get(f"/proofs/{proof['id']}", headers=headers).json()["data"]["status"] == "APPROVED"
    finally:
        app.dependency_overrides.pop(get_proof_storage, None)

    other = _register_and_login(client)
    assert client.get(f"/proofs/{proof['id']}", headers=other).status_code == 403


def test_learning_flow_over_http(client, db):
    seed_catalog(db)
    headers = _register_and_login(client)

    lessons = client.get("/learning/lessons", headers=headers).json()["data"]
    assert lessons and all(lesson["completed"] is False for lesson in lessons)
    lesson_id = lessons[0]["id"]

    quiz = client.get(f"/learning/quizzes/{lesson_id}", headers=headers).json()["data"]
    assert all("correct_answer" not in q for q in quiz["questions"])

    resp = client.post(f"/learning/quizzes/{lesson_id}/submit", headers=headers, json={"answers": [0]})
    assert len(quiz["questions"]) > 1
    assert resp.status_code == 400
    assert resp.json()["error"] == "Number of answers must match number of questions"

    answers = [0] * len(quiz["questions"])
    resp = client.post(f"/learning/quizzes/{lesson_id}/submit", headers=headers, json={"answers": answers})
    assert resp.status_code == 200
    result = resp.json()["data"]
    assert result["quiz_attempts"] == 1
    assert len(result["results"]) == len(answers)

    lesson = client.get(f"/learning/lessons/{lesson_id}", headers=headers).json()["data"]
    assert lesson["progress"]["quiz_score"] == result["score"]

    other_id = lessons[1]["id"]
    assert client.post(f"/learning/lessons/{other_id}/complete", headers=headers).status_code == 200
    resp = client.post(f"/learning/lessons/{other_id}/complete", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Lesson already completed"

    summary = client.get("/learning/progress", headers=headers).json()["data"]
    assert summary["total_lessons"] == len(lessons)
    assert summary["completed_lessons"] >= 1

    assert client.get(f"/learning/lessons/{uuid.uuid4()}", headers=headers).status_code == 404
    assert client.get("/learning/lessons").status_code == 401
