"""FastAPI-powered web UI for playing TravelXO in the browser."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .game import GameError, GameHistory
from .views import render_state

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for one game's history; intents swap in a new value."""

    history: GameHistory = field(default_factory=GameHistory.new)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="TravelXO", description="Tic-tac-toe with time travel, played in the browser"
)


class MoveRequest(BaseModel):
    """Request payload for playing a cell on the viewed board."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


class JumpRequest(BaseModel):
    """Request payload for moving the time-travel cursor."""

    step: int = Field(ge=0, description="History index to display")


class EntryRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    board: List[str] = Field(min_length=9, max_length=9)
    move_position: Optional[List[int]] = Field(default=None, alias="movePosition")
    winning_line: Optional[List[int]] = Field(default=None, alias="winningLine")


class HistoryRecord(BaseModel):
    """Flat persistence record produced by ``GET /api/game/{id}/export``."""

    model_config = ConfigDict(populate_by_name=True)

    entries: List[EntryRecord] = Field(min_length=1, max_length=10)
    viewed_step: int = Field(alias="viewedStep", ge=0)
    ascending: bool = True


def _create_session(history: Optional[GameHistory] = None) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(history=history or GameHistory.new())
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        state = render_state(session.history)
    state["id"] = game_id
    return state


def _apply_intent(
    game_id: str, session: GameSession, intent: Callable[[GameHistory], GameHistory]
) -> Dict[str, object]:
    with session.lock:
        try:
            session.history = intent(session.history)
        except GameError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _serialize_session(game_id, session)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.post("/api/game/import")
def import_game(record: HistoryRecord) -> Dict[str, object]:
    try:
        history = GameHistory.from_dict(record.model_dump(by_alias=True))
    except GameError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    game_id, session = _create_session(history)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}/export")
def export_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        return session.history.to_dict()


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    return _apply_intent(
        game_id,
        session,
        lambda history: history.apply_move(request.cell_index, strict=True),
    )


@app.post("/api/game/{game_id}/jump")
def jump_to(game_id: str, request: JumpRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    return _apply_intent(
        game_id, session, lambda history: history.jump_to(request.step, strict=True)
    )


@app.post("/api/game/{game_id}/order")
def toggle_order(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _apply_intent(game_id, session, lambda history: history.toggle_order())


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>TravelXO</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: clamp(1.5rem, 4vw, 2.5rem);
        display: flex;
        gap: 2rem;
        flex-wrap: wrap;
      }
      h1 {
        margin: 0 0 1rem;
        width: 100%;
        text-align: center;
        letter-spacing: 0.06em;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 4rem);
        grid-template-rows: repeat(3, 4rem);
        gap: 0.25rem;
      }
      .cell {
        font-size: 2rem;
        font-weight: 700;
        border: 1px solid #9aa6c8;
        border-radius: 8px;
        background: #fff;
        cursor: pointer;
      }
      .cell.x {
        color: #2f5bd3;
      }
      .cell.o {
        color: #d3462f;
      }
      .cell.last-move {
        border-color: #13203a;
      }
      .cell.winner-piece {
        background: #ffe28a;
      }
      .status {
        font-weight: 600;
        margin-bottom: 0.75rem;
      }
      .moves button.history-selected {
        font-weight: 700;
      }
      .toolbar {
        display: flex;
        gap: 0.5rem;
        margin-bottom: 0.75rem;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>TravelXO</h1>
      <div class=\"board\" id=\"board\" role=\"grid\" aria-label=\"Game board\"></div>
      <div class=\"info\">
        <div class=\"status\" id=\"status\" aria-live=\"polite\"></div>
        <div class=\"toolbar\">
          <button type=\"button\" id=\"order-toggle\"></button>
          <button type=\"button\" id=\"new-game\">New game</button>
        </div>
        <ol class=\"moves\" id=\"moves\"></ol>
      </div>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const movesEl = document.getElementById('moves');
      const orderButton = document.getElementById('order-toggle');
      const newGameButton = document.getElementById('new-game');

      let gameId = null;
      let gameState = null;

      async function post(path, body) {
        const response = await fetch(path, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        if (response.status === 400) {
          // Rejected intents (occupied cell, finished game) are ignored.
          return;
        }
        if (!response.ok) {
          throw new Error(`Request failed: ${response.status}`);
        }
        setState(await response.json());
      }

      async function startGame() {
        await post('/api/game');
      }

      function sendMove(cellIndex) {
        return post(`/api/game/${gameId}/move`, { cellIndex });
      }

      function jumpTo(step) {
        return post(`/api/game/${gameId}/jump`, { step });
      }

      function toggleOrder() {
        return post(`/api/game/${gameId}/order`);
      }

      function setState(data) {
        gameId = data.id;
        gameState = data;
        renderBoard();
        renderMoves();
        statusEl.textContent = gameState.status;
        orderButton.textContent = gameState.orderLabel;
      }

      function renderBoard() {
        boardEl.innerHTML = '';
        const winningLine = new Set(gameState.winningLine || []);
        gameState.board.forEach((value, cellIndex) => {
          const cellButton = document.createElement('button');
          cellButton.type = 'button';
          cellButton.classList.add('cell');
          if (value) {
            cellButton.classList.add(value === 'X' ? 'x' : 'o');
            cellButton.textContent = value;
            cellButton.setAttribute('aria-label', `${value} placed`);
          } else {
            cellButton.setAttribute('aria-label', 'Empty cell');
          }
          if (winningLine.has(cellIndex)) {
            cellButton.classList.add('winner-piece');
          }
          if (gameState.lastMove === cellIndex) {
            cellButton.classList.add('last-move');
          }
          cellButton.addEventListener('click', () => sendMove(cellIndex));
          boardEl.appendChild(cellButton);
        });
      }

      function renderMoves() {
        movesEl.innerHTML = '';
        gameState.moves.forEach((move) => {
          const item = document.createElement('li');
          item.value = move.step + 1;
          const button = document.createElement('button');
          button.type = 'button';
          button.textContent = move.label;
          if (move.selected) {
            button.classList.add('history-selected');
          }
          button.addEventListener('click', () => jumpTo(move.step));
          item.appendChild(button);
          movesEl.appendChild(item);
        });
      }

      orderButton.addEventListener('click', toggleOrder);
      newGameButton.addEventListener('click', startGame);
      startGame();
    </script>
  </body>
</html>
"""
