"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .game import GameEngine, InvalidPosition, MoveRejected, Snapshot

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for one board in play: its engine and the lock serializing moves on it."""

    engine: GameEngine = field(default_factory=GameEngine)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Two-player tic-tac-toe in the browser")


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    position: int = Field(ge=0, le=8, strict=True, description="Row-major cell index")


def _create_session() -> Tuple[str, GameSession]:
    """Start a blank board under a fresh hex id."""

    session = GameSession()
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game session %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    """Look up a board by id, answering 404 for unknown ids."""
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _serialize(game_id: str, snapshot: Snapshot) -> Dict[str, object]:
    return {"id": game_id, **snapshot.to_dict()}


def _apply_player_move(session: GameSession, position: int) -> Snapshot:
    with session.lock:
        try:
            result = session.engine.apply_move(position)
        except InvalidPosition as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
    if isinstance(result, MoveRejected):
        raise HTTPException(
            status_code=409,
            detail={"reason": result.reason.value, "message": result.message},
        )
    return result


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    with session.lock:
        snapshot = session.engine.snapshot()
    return _serialize(game_id, snapshot)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        snapshot = session.engine.snapshot()
    return _serialize(game_id, snapshot)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    snapshot = _apply_player_move(session, request.position)
    return _serialize(game_id, snapshot)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        snapshot = session.engine.new_game()
    return _serialize(game_id, snapshot)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, sans-serif;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: center;
        background: linear-gradient(160deg, #f7f4ec, #e4ecf7);
        color: #1d2433;
      }
      main {
        background: #ffffff;
        border-radius: 14px;
        box-shadow: 0 12px 28px rgba(29, 36, 51, 0.12);
        padding: 2rem;
        text-align: center;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 96px);
        grid-template-rows: repeat(3, 96px);
        gap: 6px;
        margin: 1.5rem auto;
      }
      .board > div {
        display: flex;
        align-items: center;
        justify-content: center;
        font-size: 3rem;
        font-weight: 600;
        background: #eef1ff;
        border-radius: 10px;
        cursor: pointer;
        user-select: none;
      }
      .board > div.winning-cell {
        background: #ffe38a;
      }
      .status {
        display: flex;
        gap: 1.5rem;
        justify-content: center;
      }
      .message {
        min-height: 1.2rem;
        color: #b3261e;
      }
      .reset-btn {
        padding: 0.6rem 1.4rem;
        border: none;
        border-radius: 999px;
        background: #3046c5;
        color: white;
        font-weight: 600;
        cursor: pointer;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <div class=\"status\">
        <span>Game: <strong id=\"game-state\">Playing</strong></span>
        <span>Current player: <strong id=\"current-player\">X</strong></span>
      </div>
      <div class=\"board\">
        <div data-i=\"0\"></div><div data-i=\"1\"></div><div data-i=\"2\"></div>
        <div data-i=\"3\"></div><div data-i=\"4\"></div><div data-i=\"5\"></div>
        <div data-i=\"6\"></div><div data-i=\"7\"></div><div data-i=\"8\"></div>
      </div>
      <p class=\"message\" id=\"message\"></p>
      <button class=\"reset-btn\" type=\"button\">New game</button>
    </main>
    <script>
      const squares = Array.from(document.querySelectorAll('.board > div'));
      const gameStateEl = document.querySelector('#game-state');
      const currentPlayerEl = document.querySelector('#current-player');
      const messageEl = document.querySelector('#message');
      let gameId = null;
      let isRequestPending = false;

      function render(state) {
        gameId = state.id;
        squares.forEach((square, index) => {
          square.textContent = state.board[index];
          square.classList.toggle('winning-cell', state.winningLine.includes(index));
        });
        gameStateEl.textContent = state.statusText;
        currentPlayerEl.textContent = state.currentPlayer;
      }

      async function request(url, body) {
        const response = await fetch(url, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        const payload = await response.json().catch(() => ({}));
        return { response, payload };
      }

      async function newGame() {
        if (isRequestPending) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          const url = gameId ? `/api/game/${gameId}/reset` : '/api/game';
          const { response, payload } = await request(url);
          if (!response.ok) {
            throw new Error('Unable to start game');
          }
          render(payload);
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      async function selectSquare(square) {
        const position = Number.parseInt(square.dataset.i, 10);
        if (!gameId || isRequestPending || Number.isNaN(position)) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          const { response, payload } = await request(`/api/game/${gameId}/move`, { position });
          if (response.status === 409) {
            return; // occupied cell or finished game: ignore the click
          }
          if (!response.ok) {
            console.error('Move failed', payload);
            return;
          }
          render(payload);
        } catch (error) {
          messageEl.textContent = 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      squares.forEach((square) => {
        square.addEventListener('click', (event) => selectSquare(event.currentTarget));
      });
      document.querySelector('.reset-btn').addEventListener('click', newGame);
      newGame();
    </script>
  </body>
</html>
"""
