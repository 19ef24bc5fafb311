"""FastAPI-powered web UI for playing ClassicXO in the browser."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .engine import GameEngine, Rejection
from .game import Mark


logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for one ClassicXO engine and its move history."""

    engine: GameEngine
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
SESSIONS_LOCK = threading.Lock()
MAX_SESSIONS = 1024
app = FastAPI(title="ClassicXO", description="Tic-tac-toe played in the browser")


REJECTION_DETAILS: Dict[Rejection, str] = {
    Rejection.INVALID_MOVE: "Move is not allowed right now",
    Rejection.INVALID_SYMBOL_CHOICE: "Symbol cannot be chosen right now",
}


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    computer_mode: bool = Field(
        default=False,
        alias="computerMode",
        description="Let the computer play the opposite symbol",
    )


class SymbolRequest(BaseModel):
    """Request payload for picking the human player's symbol."""

    symbol: Literal["X", "O"]


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


class ComputerModeRequest(BaseModel):
    enabled: bool


def _create_session(computer_mode: bool) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(engine=GameEngine(computer_mode=computer_mode))
    session_id = uuid.uuid4().hex
    with SESSIONS_LOCK:
        SESSIONS[session_id] = session
        _evict_sessions()
    logger.info("Created session %s (computer mode %s)", session_id, computer_mode)
    return session_id, session


def _evict_sessions() -> None:
    """Drop the oldest sessions once more than MAX_SESSIONS are registered."""

    while len(SESSIONS) > MAX_SESSIONS:
        oldest = next(iter(SESSIONS))
        SESSIONS.pop(oldest, None)
        logger.info("Evicted session %s", oldest)


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        return _state_payload(game_id, session)


def _state_payload(game_id: str, session: GameSession) -> Dict[str, object]:
    """Build the JSON state; the caller must hold ``session.lock``."""

    engine = session.engine
    outcome = engine.outcome
    scores = engine.scores

    state: Dict[str, object] = {
        "id": game_id,
        "state": engine.current_state().value,
        "board": [c.value if c is not Mark.EMPTY else "" for c in engine.board.cells],
        "currentPlayer": engine.current_player.value,
        "playerSymbol": engine.player_symbol.value if engine.player_symbol else None,
        "computerMode": engine.computer_mode,
        "gameStarted": engine.game_started,
        "outcome": None,
        "scores": {"x": scores.x, "o": scores.o},
        "status": engine.status_message(),
        "moveLog": list(session.move_log),
    }
    if outcome is not None:
        state["outcome"] = {
            "kind": outcome.kind.value,
            "winner": outcome.winner.value if outcome.winner else None,
            "line": list(outcome.line) if outcome.line else None,
        }
    if session.move_log:
        state["lastMove"] = session.move_log[-1]
    return state


def _apply_player_move(
    game_id: str, session: GameSession, cell_index: int
) -> Dict[str, object]:
    with session.lock:
        engine = session.engine
        player = engine.current_player
        result = engine.apply_move(cell_index)
        if not result.accepted:
            assert result.error is not None
            raise HTTPException(status_code=400, detail=REJECTION_DETAILS[result.error])

        session.move_log.append({"player": player.value, "cellIndex": cell_index})
        if result.computer_move is not None:
            session.move_log.append(
                {"player": player.opponent.value, "cellIndex": result.computer_move}
            )
        state = _state_payload(game_id, session)
        state["computerMove"] = result.computer_move
        return state


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.computer_mode)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/symbol")
def choose_symbol(game_id: str, request: SymbolRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        result = session.engine.choose_symbol(request.symbol)
        if not result.accepted:
            assert result.error is not None
            raise HTTPException(status_code=400, detail=REJECTION_DETAILS[result.error])
        session.move_log.clear()
        return _state_payload(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    return _apply_player_move(game_id, session, request.cell_index)


@app.post("/api/game/{game_id}/play-again")
def play_again(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.engine.play_again()
        session.move_log.clear()
        return _state_payload(game_id, session)


@app.post("/api/game/{game_id}/reset")
def full_reset(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.engine.full_reset()
        session.move_log.clear()
        return _state_payload(game_id, session)


@app.post("/api/game/{game_id}/computer-mode")
def set_computer_mode(game_id: str, request: ComputerModeRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.engine.set_computer_mode(request.enabled)
        return _state_payload(game_id, session)


@app.delete("/api/game/{game_id}", status_code=204)
def delete_game(game_id: str) -> None:
    with SESSIONS_LOCK:
        if SESSIONS.pop(game_id, None) is None:
            raise HTTPException(status_code=404, detail="Game not found")
    logger.info("Deleted session %s", game_id)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>ClassicXO</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: flex-start;
        padding: 2rem 1rem;
        background: radial-gradient(circle at top, #f2f5ff, #cfd8ff 70%);
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: 2rem;
        width: min(420px, 100%);
        text-align: center;
      }
      .controls {
        display: flex;
        flex-wrap: wrap;
        gap: 0.5rem;
        justify-content: center;
        margin-bottom: 1rem;
      }
      button {
        font-size: 1rem;
        padding: 0.5rem 0.9rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: #eef1ff;
        cursor: pointer;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 6px;
        margin: 1rem auto;
        width: 270px;
      }
      .cell {
        height: 86px;
        border-radius: 12px;
        font-size: 2.4rem;
        font-weight: 700;
        background: #f7f8ff;
      }
      .cell.win {
        background: #ffe97a;
      }
      #status {
        font-weight: 600;
        min-height: 1.5rem;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>ClassicXO</h1>
      <div class=\"controls\">
        <button id=\"choose-x\">Play X</button>
        <button id=\"choose-o\">Play O</button>
        <button id=\"toggle-ai\">vs Computer: off</button>
      </div>
      <p id=\"status\"></p>
      <div class=\"board\" id=\"board\"></div>
      <p id=\"scores\"></p>
      <div class=\"controls\">
        <button id=\"play-again\">Play again</button>
        <button id=\"reset\">Reset</button>
      </div>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const scoresEl = document.getElementById('scores');
      const aiButton = document.getElementById('toggle-ai');
      let gameState = null;

      async function call(path, body) {
        const response = await fetch(path, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body || {}),
        });
        const payload = await response.json();
        if (!response.ok) {
          statusEl.textContent = payload.detail || 'Request failed';
          return;
        }
        gameState = payload;
        render();
      }

      function render() {
        boardEl.innerHTML = '';
        const line = gameState.outcome && gameState.outcome.line ? gameState.outcome.line : [];
        gameState.board.forEach((value, index) => {
          const cell = document.createElement('button');
          cell.className = 'cell' + (line.includes(index) ? ' win' : '');
          cell.textContent = value;
          cell.addEventListener('click', () =>
            call(`/api/game/${gameState.id}/move`, { cellIndex: index })
          );
          boardEl.appendChild(cell);
        });
        statusEl.textContent = gameState.status;
        scoresEl.textContent = `X: ${gameState.scores.x}   O: ${gameState.scores.o}`;
        aiButton.textContent = `vs Computer: ${gameState.computerMode ? 'on' : 'off'}`;
      }

      document.getElementById('choose-x').addEventListener('click', () =>
        call(`/api/game/${gameState.id}/symbol`, { symbol: 'X' })
      );
      document.getElementById('choose-o').addEventListener('click', () =>
        call(`/api/game/${gameState.id}/symbol`, { symbol: 'O' })
      );
      aiButton.addEventListener('click', () =>
        call(`/api/game/${gameState.id}/computer-mode`, { enabled: !gameState.computerMode })
      );
      document.getElementById('play-again').addEventListener('click', () =>
        call(`/api/game/${gameState.id}/play-again`)
      );
      document.getElementById('reset').addEventListener('click', () =>
        call(`/api/game/${gameState.id}/reset`)
      );

      call('/api/game', { computerMode: false });
    </script>
  </body>
</html>
"""
