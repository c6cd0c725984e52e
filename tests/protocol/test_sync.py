from __future__ import annotations

from fastapi.testclient import TestClient

from mimic_chess.protocol.http.app import create_app


def _peer() -> tuple[TestClient, str]:
    client = TestClient(create_app())
    game_id = client.post("/api/games").json()["game_id"]
    return client, game_id


def test_snapshot_relayed_to_peer_replaces_state() -> None:
    a, a_id = _peer()
    b, b_id = _peer()

    moved = a.post(f"/api/games/{a_id}/move", json={"move": "e2e4"}).json()
    r = b.put(f"/api/games/{b_id}/snapshot", json=moved["snapshot"])
    assert r.status_code == 200
    state = r.json()
    assert state["fen"] == moved["fen"]
    assert state["logic"] == {"w": "pawn", "b": "standard"}
    # Received state carries no local undo history
    assert state["move_history"] == []

    # Black answers on peer B and relays back to A
    answered = b.post(f"/api/games/{b_id}/move", json={"move": "b8c6"}).json()
    back = a.put(f"/api/games/{a_id}/snapshot", json=answered["snapshot"]).json()
    assert back["side_to_move"] == "w"
    assert back["snapshot"]["history"] == {"w": ["p"], "b": ["n"]}


def test_finished_game_rejects_moves_with_conflict() -> None:
    client, game_id = _peer()
    snapshot = {
        "board": "4R3/8/8/8/8/8/8/4K3",
        "side_to_move": "w",
        "history": {"w": ["r"], "b": ["k"]},
        "unmoved": [],
        "winner": "w",
    }
    r = client.put(f"/api/games/{game_id}/snapshot", json=snapshot)
    assert r.status_code == 200
    assert r.json()["winner"] == "w"
    assert r.json()["legal_moves"] == []

    r_move = client.post(f"/api/games/{game_id}/move", json={"move": "e1e2"})
    assert r_move.status_code == 409
    assert r_move.json()["error"]["code"] == "conflict"
    assert r_move.json()["error"]["message"] == "game is over"


def test_invalid_snapshot_is_rejected() -> None:
    client, game_id = _peer()
    r = client.put(
        f"/api/games/{game_id}/snapshot",
        json={"board": "not-a-board", "side_to_move": "w"},
    )
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "unprocessable_entity"
    # Local game untouched
    assert client.get(f"/api/games/{game_id}/state").json()["move_history"] == []


def test_inconsistent_snapshot_is_bad_request() -> None:
    client, game_id = _peer()
    snapshot = {
        "board": "4k3/8/8/8/8/8/8/4K3",
        "side_to_move": "w",
        "winner": "w",
    }
    r = client.put(f"/api/games/{game_id}/snapshot", json=snapshot)
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "invalid snapshot"
    assert client.get(f"/api/games/{game_id}/state").json()["winner"] is None


def test_snapshot_for_unknown_game_404() -> None:
    client, game_id = _peer()
    snap = client.get(f"/api/games/{game_id}/state").json()["snapshot"]
    r = client.put("/api/games/missing/snapshot", json=snap)
    assert r.status_code == 404
