"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.game import InProgress, Snapshot
from tictactoe.ui import app


client = TestClient(app)


def _new_game() -> str:
    response = client.post("/api/game")
    assert response.status_code == 200
    return response.json()["id"]


def _move(game_id: str, position):
    return client.post(f"/api/game/{game_id}/move", json={"position": position})


def test_create_game_and_first_move():
    response = client.post("/api/game")
    assert response.status_code == 200
    payload = response.json()
    assert payload["currentPlayer"] == "X"
    assert payload["board"] == [""] * 9
    assert payload["status"] == "in_progress"
    assert payload["statusText"] == "Playing"

    move_response = _move(payload["id"], 4)
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["board"][4] == "X"
    assert state["currentPlayer"] == "O"

    follow_up = client.get(f"/api/game/{payload['id']}")
    assert follow_up.status_code == 200
    assert follow_up.json()["board"] == state["board"]


def test_win_reports_winner_and_line():
    game_id = _new_game()
    for position in (0, 3, 1, 4):
        assert _move(game_id, position).status_code == 200
    state = _move(game_id, 2).json()
    assert state["status"] == "won"
    assert state["winner"] == "X"
    assert state["winningLine"] == [0, 1, 2]
    assert state["gameOver"] is True
    assert state["statusText"] == "X wins"


def test_occupied_cell_rejected():
    game_id = _new_game()
    assert _move(game_id, 0).status_code == 200

    duplicate = _move(game_id, 0)
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"]["reason"] == "cell_occupied"

    state = client.get(f"/api/game/{game_id}").json()
    assert state["board"][0] == "X"
    assert state["currentPlayer"] == "O"


def test_move_after_game_over_rejected():
    game_id = _new_game()
    for position in (0, 1, 3, 4, 6):
        _move(game_id, position)
    response = _move(game_id, 8)
    assert response.status_code == 409
    assert response.json()["detail"]["reason"] == "game_over"


def test_invalid_position_rejected():
    game_id = _new_game()
    for position in (9, -1, "4", 2.5):
        response = _move(game_id, position)
        assert response.status_code == 422
    assert client.get(f"/api/game/{game_id}").json()["board"] == [""] * 9


def test_reset_starts_fresh_game():
    game_id = _new_game()
    _move(game_id, 0)
    _move(game_id, 1)
    response = client.post(f"/api/game/{game_id}/reset")
    assert response.status_code == 200
    state = response.json()
    assert state["id"] == game_id
    assert state["board"] == [""] * 9
    assert state["currentPlayer"] == "X"


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    assert _move("missing", 0).status_code == 404
    assert client.post("/api/game/missing/reset").status_code == 404


def test_index_serves_board():
    response = client.get("/")
    assert response.status_code == 200
    assert 'data-i="8"' in response.text
    assert "reset-btn" in response.text


def test_move_response_comes_from_the_applied_move(monkeypatch):
    game_id = _new_game()
    engine = ui.SESSIONS[game_id].engine
    applied = Snapshot(board=("X",) + ("",) * 8, current_player="O", status=InProgress())
    # Engine state stays empty; the response must echo what apply_move returned.
    monkeypatch.setattr(engine, "apply_move", lambda position: applied)

    state = _move(game_id, 0).json()
    assert state["board"][0] == "X"
    assert state["currentPlayer"] == "O"
    assert engine.snapshot().board[0] == ""


def test_reset_response_comes_from_new_game(monkeypatch):
    game_id = _new_game()
    _move(game_id, 0)
    engine = ui.SESSIONS[game_id].engine
    fresh = Snapshot(board=("",) * 9, current_player="X", status=InProgress())
    monkeypatch.setattr(engine, "new_game", lambda: fresh)

    state = client.post(f"/api/game/{game_id}/reset").json()
    assert state["board"] == [""] * 9
    assert engine.snapshot().board[0] == "X"


def test_rejected_move_detail_carries_message():
    game_id = _new_game()
    _move(game_id, 4)
    detail = _move(game_id, 4).json()["detail"]
    assert detail == {"reason": "cell_occupied", "message": "Cell 4 already occupied"}
