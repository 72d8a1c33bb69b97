import pytest
from fastapi.testclient import TestClient

from studydeck.consts import VERSION
from studydeck.server import app, sessions

client = TestClient(app)


@pytest.fixture
def configured(mock_home, decks_root, tmp_path, monkeypatch):
    """Point the server at the temp decks root and a temp stats file."""
    monkeypatch.setenv("STUDYDECK_DECKS_ROOT", str(decks_root))
    monkeypatch.setenv("STUDYDECK_STATS_FILE", str(tmp_path / "card-stats.json"))
    yield
    sessions.clear()


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_get_version():
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": VERSION}


def test_list_decks(configured):
    response = client.get("/decks")

    assert response.status_code == 200
    data = response.json()
    assert [d["deck_id"] for d in data["decks"]] == ["unit-1", "unit-2"]
    assert data["decks"][0]["total"] == 3


def test_list_decks_unknown_folder(configured):
    response = client.get("/decks", params={"folder": "nowhere"})
    assert response.status_code == 404
    assert "No flashcard decks found" in response.json()["detail"]


def test_unit_session_flow(configured):
    response = client.post("/sessions", json={"mode": "unit", "deck": "unit-2"})
    assert response.status_code == 201
    view = response.json()
    session_id = view["id"]

    assert session_id.startswith("session_")
    assert view["phase"] == "playing"
    assert view["deck_title"] == "Unit 2"
    assert view["card"]["previews"]["Easy"] == "4d"
    assert view["position"] == 1

    view = client.post(f"/sessions/{session_id}/rate", json={"rating": 3}).json()
    assert view["position"] == 2

    view = client.post(f"/sessions/{session_id}/rate", json={"rating": 1}).json()
    assert view["phase"] == "results"
    assert view["card"] is None
    assert view["summary"]["correct"] == 1
    assert view["summary"]["pct"] == 50

    view = client.post(f"/sessions/{session_id}/replay").json()
    assert view["phase"] == "playing"
    assert view["summary"] is None


def test_random_session_flow(configured):
    view = client.post("/sessions", json={"mode": "random", "seed": 5}).json()
    session_id = view["id"]

    assert view["phase"] == "blind-intro"
    assert view["tier"]["label"] == "Small Blind"
    assert view["total_cards"] == 5

    client.post(f"/sessions/{session_id}/start")
    for _ in range(5):
        view = client.post(f"/sessions/{session_id}/rate", json={"rating": 4}).json()

    assert view["phase"] == "blind-intro"
    assert view["tier"]["label"] == "Big Blind"
    assert view["score"] == 500
    assert view["last_earned"] == 500


def test_unknown_deck_session_is_error(configured):
    view = client.post("/sessions", json={"mode": "unit", "deck": "nope"}).json()
    assert view["phase"] == "error"
    assert "not found" in view["error"]

    view = client.post(f"/sessions/{view['id']}/retry").json()
    assert view["phase"] == "error"


def test_wrong_phase_is_conflict(configured):
    session_id = client.post("/sessions", json={"mode": "unit", "deck": "unit-1"}).json()["id"]

    response = client.post(f"/sessions/{session_id}/start")

    assert response.status_code == 409
    assert "StartTier" in response.json()["detail"]


def test_rating_out_of_range(configured):
    session_id = client.post("/sessions", json={"mode": "unit", "deck": "unit-1"}).json()["id"]
    response = client.post(f"/sessions/{session_id}/rate", json={"rating": 5})
    assert response.status_code == 422


def test_unknown_session_404():
    assert client.get("/sessions/session_missing").status_code == 404


def test_discard_session(configured):
    session_id = client.post("/sessions", json={"mode": "unit", "deck": "unit-1"}).json()["id"]

    assert client.delete(f"/sessions/{session_id}").json() == {"ok": True}
    assert client.get(f"/sessions/{session_id}").status_code == 404


def test_finished_sessions_evicted_first(configured, monkeypatch):
    monkeypatch.setattr("studydeck.server.MAX_SESSIONS", 2)
    finished = client.post("/sessions", json={"mode": "unit", "deck": "nope"}).json()["id"]
    playing = client.post("/sessions", json={"mode": "unit", "deck": "unit-1"}).json()["id"]

    newest = client.post("/sessions", json={"mode": "unit", "deck": "unit-2"}).json()["id"]

    assert set(sessions) == {playing, newest}
    assert client.get(f"/sessions/{finished}").status_code == 404


def test_oldest_session_evicted_when_none_finished(configured, monkeypatch):
    monkeypatch.setattr("studydeck.server.MAX_SESSIONS", 2)
    ids = [
        client.post("/sessions", json={"mode": "unit", "deck": "unit-1"}).json()["id"]
        for _ in range(3)
    ]
    assert list(sessions) == ids[1:]
