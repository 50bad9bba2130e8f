"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)
ui.AI_THINK_DELAY = (0.0, 0.0)


def test_index_serves_html():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic-Tac-Toe" in response.text


def test_health():
    assert client.get("/api/health").json() == {"status": "ok"}


def test_create_game_and_first_move():
    response = client.post("/api/game", json={"mode": "ai"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["mode"] == "ai"
    assert payload["currentPlayer"] == "X"
    assert payload["board"] == [""] * 9
    assert payload["moveLog"] == []
    assert payload["status"] == "Your turn (X)"

    game_id = payload["id"]
    move_response = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 4})
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["moveLog"][0] == {"player": "X", "cellIndex": 4}
    assert state["board"][4] == "X"
    assert state["currentPlayer"] == "O"
    assert state["aiPending"] is True
    assert state["status"] == "AI thinking..."

    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    final_state = follow_up.json()
    assert final_state["currentPlayer"] == "X"
    assert final_state["aiPending"] is False
    # Corner 0 is the first reply that holds the draw against a center opening
    assert final_state["lastMove"] == {"player": "O", "cellIndex": 0}
    assert final_state["board"][0] == "O"


def test_default_mode_is_ai():
    response = client.post("/api/game", json={})
    assert response.status_code == 200
    assert response.json()["mode"] == "ai"


def test_invalid_move_rejected():
    game_id = client.post("/api/game", json={"mode": "pvp"}).json()["id"]

    first_move = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0})
    assert first_move.status_code == 200

    duplicate_move = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0})
    assert duplicate_move.status_code == 400
    assert duplicate_move.json()["detail"]


def test_out_of_range_cell_rejected():
    game_id = client.post("/api/game", json={"mode": "pvp"}).json()["id"]
    response = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 9})
    assert response.status_code == 422


def test_rejects_unsupported_mode():
    response = client.post("/api/game", json={"mode": "online"})
    assert response.status_code == 422


def test_pvp_game_alternates_and_reports_winner():
    game_id = client.post("/api/game", json={"mode": "pvp"}).json()["id"]

    state = None
    for cell in (0, 3, 1, 4):
        state = client.post(
            f"/api/game/{game_id}/move", json={"cellIndex": cell}
        ).json()
        assert state["aiPending"] is False
    assert state["status"] == "Player X's turn"

    state = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 2}).json()
    assert state["winner"] == "X"
    assert state["over"] is True
    assert state["status"] == "Player X wins!"
    assert state["availableMoves"] == []

    late = client.post(f"/api/game/{game_id}/move", json={"cellIndex": 8})
    assert late.status_code == 400


def test_restart_keeps_mode_and_clears_board():
    game_id = client.post("/api/game", json={"mode": "pvp"}).json()["id"]
    client.post(f"/api/game/{game_id}/move", json={"cellIndex": 0})

    response = client.post(f"/api/game/{game_id}/restart")
    assert response.status_code == 200
    state = response.json()
    assert state["mode"] == "pvp"
    assert state["board"] == [""] * 9
    assert state["moveLog"] == []
    assert state["currentPlayer"] == "X"


def test_missing_game_returns_404():
    assert client.get("/api/game/unknown").status_code == 404
    assert client.post("/api/game/unknown/restart").status_code == 404
