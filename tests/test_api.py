"""Tests for the FastAPI TravelXO interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from travelxo.ui import app


client = TestClient(app)


def new_game() -> str:
    response = client.post("/api/game")
    assert response.status_code == 200
    return response.json()["id"]


def move(game_id: str, cell: int):
    return client.post(f"/api/game/{game_id}/move", json={"cellIndex": cell})


def test_create_game_and_first_move():
    response = client.post("/api/game")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "Next player: X"
    assert payload["board"] == [""] * 9
    assert [m["label"] for m in payload["moves"]] == ["Go to game start"]

    game_id = payload["id"]
    state = move(game_id, 0).json()
    assert state["board"][0] == "X"
    assert state["status"] == "Next player: O"
    assert state["viewedStep"] == 1

    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    assert follow_up.json() == state


def test_invalid_move_rejected():
    game_id = new_game()
    assert move(game_id, 0).status_code == 200

    duplicate_move = move(game_id, 0)
    assert duplicate_move.status_code == 400
    assert duplicate_move.json()["detail"]
    assert client.get(f"/api/game/{game_id}").json()["historyLength"] == 2


def test_move_after_win_rejected():
    game_id = new_game()
    for cell in (0, 1, 3, 4, 6):
        state = move(game_id, cell).json()
    assert state["status"] == "Winner: X"
    assert state["winningLine"] == [0, 3, 6]
    assert move(game_id, 8).status_code == 400


def test_out_of_range_cell_fails_validation():
    game_id = new_game()
    assert move(game_id, 9).status_code == 422


def test_jump_then_move_truncates():
    game_id = new_game()
    for cell in (0, 4, 8):
        move(game_id, cell)

    jumped = client.post(f"/api/game/{game_id}/jump", json={"step": 1})
    assert jumped.status_code == 200
    assert jumped.json()["viewedStep"] == 1
    assert jumped.json()["historyLength"] == 4

    state = move(game_id, 5).json()
    assert state["historyLength"] == 3
    assert state["board"] == ["X", "", "", "", "", "O", "", "", ""]


def test_jump_out_of_bounds_rejected():
    game_id = new_game()
    response = client.post(f"/api/game/{game_id}/jump", json={"step": 4})
    assert response.status_code == 400


def test_toggle_order():
    game_id = new_game()
    move(game_id, 0)
    state = client.post(f"/api/game/{game_id}/order").json()
    assert state["ascending"] is False
    assert state["orderLabel"] == "Descending"
    assert [m["step"] for m in state["moves"]] == [1, 0]


def test_export_and_import():
    game_id = new_game()
    for cell in (0, 1, 3):
        move(game_id, cell)
    client.post(f"/api/game/{game_id}/jump", json={"step": 2})

    record = client.get(f"/api/game/{game_id}/export").json()
    assert record["viewedStep"] == 2
    assert len(record["entries"]) == 4

    restored = client.post("/api/game/import", json=record)
    assert restored.status_code == 200
    payload = restored.json()
    assert payload["id"] != game_id
    assert payload["viewedStep"] == 2
    assert payload["board"] == ["X", "O", "", "", "", "", "", "", ""]


def test_import_rejects_tampered_record():
    game_id = new_game()
    move(game_id, 0)
    record = client.get(f"/api/game/{game_id}/export").json()
    record["entries"][1]["board"][0] = "O"
    response = client.post("/api/game/import", json=record)
    assert response.status_code == 400


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    assert move("missing", 0).status_code == 404


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "TravelXO" in response.text
