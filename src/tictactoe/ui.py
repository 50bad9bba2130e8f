"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .ai import MinimaxAI
from .game import TicTacToeGame

logger = logging.getLogger(__name__)

GameMode = Literal["ai", "pvp"]

HUMAN_PLAYER = "X"
AI_PLAYER = "O"
ALLOWED_MODES: Tuple[str, ...] = ("ai", "pvp")
AI_THINK_DELAY: Tuple[float, float] = (0.4, 0.4)


@dataclass
class GameSession:
    """Container for an active game, its mode, and the AI opponent if any."""

    game: TicTacToeGame
    mode: GameMode
    ai: Optional[MinimaxAI]
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe played in the browser")


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    mode: GameMode = Field(
        default="ai",
        description="'ai' to play against the computer, 'pvp' for two players",
    )


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(mode: GameMode) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    ai = MinimaxAI(player=AI_PLAYER) if mode == "ai" else None
    session = GameSession(game=TicTacToeGame(), mode=mode, ai=ai)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created %s game %s", mode, session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            if not session.ai:
                return
            game = session.game
            if game.over or game.current_player != session.ai.player:
                return
            cell_index = session.ai.choose(game)
            game.play_move(cell_index)
            session.move_log.append(
                {"player": session.ai.player, "cellIndex": cell_index}
            )
            logger.debug("AI played cell %s in game %s", cell_index, game_id)
        finally:
            session.ai_pending = False


def _status_text(session: GameSession) -> str:
    game = session.game
    vs_ai = session.mode == "ai"
    if game.winner:
        if not vs_ai:
            return f"Player {game.winner} wins!"
        return "You win!" if game.winner == HUMAN_PLAYER else "AI wins!"
    if game.drawn:
        return "It's a draw!"
    if vs_ai:
        if session.ai_pending or game.current_player == AI_PLAYER:
            return "AI thinking..."
        return f"Your turn ({HUMAN_PLAYER})"
    return f"Player {game.current_player}'s turn"


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        state: Dict[str, object] = {
            "id": game_id,
            "mode": session.mode,
            "board": [c if c in ("X", "O") else "" for c in game.board.cells],
            "currentPlayer": game.current_player,
            "winner": game.winner,
            "drawn": game.drawn,
            "over": game.over,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
            "status": _status_text(session),
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if game.over:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if session.ai and game.current_player == session.ai.player:
            raise HTTPException(status_code=400, detail="It is the AI's turn")

        player = game.current_player
        try:
            game.play_move(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": player, "cellIndex": cell_index})

        should_schedule_ai = bool(
            session.ai
            and not game.over
            and game.current_player == session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


def _restart_session(session: GameSession) -> None:
    with session.lock:
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")
        session.game.reset()
        session.move_log.clear()


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    _restart_session(session)
    logger.info("Restarted game %s", game_id)
    return _serialize_session(game_id, session)


@app.get("/api/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <link rel=\"preconnect\" href=\"https://fonts.googleapis.com\" />
    <link rel=\"preconnect\" href=\"https://fonts.gstatic.com\" crossorigin />
    <link
      href=\"https://fonts.googleapis.com/css2?family=Poppins:wght@400;500;600;700&display=swap\"
      rel=\"stylesheet\"
    />
    <style>
      :root {
        color-scheme: light;
        font-family: 'Poppins', system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
        font-weight: 400;
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
        width: min(480px, 100%);
      }
      h1 {
        margin: 0 0 1.5rem;
        font-size: clamp(1.8rem, 2.4vw + 1.2rem, 2.4rem);
        text-align: center;
        letter-spacing: 0.06em;
        color: #0c1a33;
      }
      .controls {
        display: flex;
        flex-wrap: wrap;
        gap: 0.75rem;
        justify-content: center;
        margin-bottom: 1.5rem;
      }
      button {
        font-size: 1rem;
        padding: 0.55rem 0.95rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
        transition: transform 0.1s ease, box-shadow 0.1s ease;
        font-family: inherit;
      }
      button:hover:not(:disabled) {
        transform: translateY(-1px);
        box-shadow: 0 8px 18px rgba(0, 64, 128, 0.12);
      }
      button:disabled {
        cursor: default;
        opacity: 0.6;
      }
      button.active {
        border-color: #3a66ff;
        background: rgba(226, 232, 255, 0.9);
      }
      #status {
        text-align: center;
        font-size: 1.1rem;
        font-weight: 600;
        margin: 0 auto 1rem;
        min-height: 1.6rem;
      }
      #message {
        text-align: center;
        min-height: 1.25rem;
        color: #b00020;
        font-weight: 600;
        margin-bottom: 1rem;
      }
      .board-grid {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.5rem;
        max-width: 360px;
        margin: 0 auto;
      }
      .cell {
        aspect-ratio: 1 / 1;
        font-size: clamp(1.8rem, 6vw, 2.8rem);
        font-weight: 700;
        border-radius: 12px;
        border: 2px solid rgba(80, 100, 160, 0.25);
        background: rgba(255, 255, 255, 0.95);
      }
      .cell.x {
        color: #f04a6a;
      }
      .cell.o {
        color: #3a66ff;
      }
      .cell.last-move {
        box-shadow: 0 0 0 3px rgba(58, 102, 255, 0.55);
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <div class=\"controls\">
        <button id=\"vsAI\" type=\"button\">Play vs AI</button>
        <button id=\"vsPlayer\" type=\"button\">Two players</button>
        <button id=\"restart\" type=\"button\">Restart</button>
      </div>
      <div id=\"status\">Choose a mode to start playing.</div>
      <div id=\"message\"></div>
      <div id=\"board\" class=\"board-grid\"></div>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const messageEl = document.getElementById('message');
      const vsAIButton = document.getElementById('vsAI');
      const vsPlayerButton = document.getElementById('vsPlayer');
      const restartButton = document.getElementById('restart');

      let gameId = null;
      let gameState = null;
      let isRequestPending = false;
      let pollHandle = null;

      function stopPolling() {
        if (pollHandle !== null) {
          clearTimeout(pollHandle);
          pollHandle = null;
        }
      }

      function ensurePolling() {
        if (pollHandle === null) {
          pollHandle = setTimeout(pollState, 250);
        }
      }

      async function request(url, options = {}) {
        const response = await fetch(url, {
          headers: { 'Content-Type': 'application/json' },
          ...options,
        });
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          const detail = typeof payload?.detail === 'string' ? payload.detail : 'Request failed';
          throw new Error(detail);
        }
        return payload;
      }

      function setState(data) {
        gameState = data;
        gameId = data.id;
        vsAIButton.classList.toggle('active', data.mode === 'ai');
        vsPlayerButton.classList.toggle('active', data.mode === 'pvp');
        render();
        if (data.aiPending && !data.over) {
          ensurePolling();
        }
      }

      function render() {
        boardEl.innerHTML = '';
        if (!gameState) {
          return;
        }
        const last = gameState.lastMove ? gameState.lastMove.cellIndex : null;
        gameState.board.forEach((mark, index) => {
          const cell = document.createElement('button');
          cell.type = 'button';
          cell.className = 'cell';
          if (mark) {
            cell.classList.add(mark.toLowerCase());
          }
          if (index === last) {
            cell.classList.add('last-move');
          }
          cell.textContent = mark;
          cell.disabled = Boolean(mark) || gameState.over || gameState.aiPending;
          cell.addEventListener('click', () => sendMove(index));
          boardEl.appendChild(cell);
        });
        statusEl.textContent = gameState.status;
      }

      async function startGame(mode) {
        if (isRequestPending) return;
        isRequestPending = true;
        stopPolling();
        messageEl.textContent = '';
        try {
          setState(await request('/api/game', {
            method: 'POST',
            body: JSON.stringify({ mode }),
          }));
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      async function restartGame() {
        if (!gameId) {
          statusEl.textContent = 'Choose a mode first!';
          return;
        }
        if (isRequestPending) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          setState(await request(`/api/game/${gameId}/restart`, { method: 'POST' }));
        } catch (error) {
          messageEl.textContent = error.message;
        } finally {
          isRequestPending = false;
        }
      }

      async function pollState() {
        pollHandle = null;
        if (!gameId) return;
        try {
          setState(await request(`/api/game/${gameId}`));
        } catch (error) {
          console.error('Polling failed', error);
        }
      }

      async function sendMove(cellIndex) {
        if (!gameState || gameState.over || isRequestPending) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          setState(await request(`/api/game/${gameId}/move`, {
            method: 'POST',
            body: JSON.stringify({ cellIndex }),
          }));
        } catch (error) {
          messageEl.textContent = error.message || 'Invalid move';
        } finally {
          isRequestPending = false;
        }
      }

      vsAIButton.addEventListener('click', () => startGame('ai'));
      vsPlayerButton.addEventListener('click', () => startGame('pvp'));
      restartButton.addEventListener('click', restartGame);
    </script>
  </body>
</html>
"""
