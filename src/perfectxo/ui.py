"""FastAPI-powered web UI for playing PerfectXO in the browser."""

from __future__ import annotations

import logging
import os
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import threading

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .ai import MinimaxAI
from .game import (
    OPPONENT,
    PLAYER,
    GameState,
    GameStatus,
    InvalidMove,
    winning_line,
)

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game and its AI opponent."""

    game: GameState
    ai: MinimaxAI
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    updated_at: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="PerfectXO", description="Tic-tac-toe against an unbeatable minimax AI"
)


AI_THINK_DELAY: float = float(os.environ.get("PERFECTXO_THINK_DELAY", "0.5"))
SESSION_TTL_SECONDS = 60 * 30  # 30 minutes


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    index: int = Field(ge=0, le=8, description="Board cell, 0-8 in row-major order")


def _cleanup_sessions() -> None:
    """Drop sessions that have been idle for longer than the TTL."""

    now = time.time()
    expired = [
        game_id
        for game_id, session in list(SESSIONS.items())
        if not session.ai_pending
        and now - session.updated_at >= SESSION_TTL_SECONDS
    ]
    for game_id in expired:
        SESSIONS.pop(game_id, None)
        logger.info("Expired game %s", game_id)


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    _cleanup_sessions()
    session = GameSession(game=GameState(), ai=MinimaxAI(player=OPPONENT))
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        session = SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc
    session.updated_at = time.time()
    return session


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with session.lock:
        try:
            game = session.game
            if game.is_over or game.current_player != session.ai.player:
                return
            index = session.ai.best_move(game.board)
            if index is None:
                return
            game.play_move(index)
            session.move_log.append({"player": session.ai.player, "index": index})
            logger.info("Game %s: AI played %d", game_id, index)
        except Exception:
            logger.exception("Game %s: AI turn failed", game_id)
            raise
        finally:
            session.ai_pending = False


def _status_text(session: GameSession) -> str:
    status = session.game.status
    if status is GameStatus.PLAYER_WINS:
        return f"{PLAYER} wins!"
    if status is GameStatus.OPPONENT_WINS:
        return f"{OPPONENT} (AI) wins!"
    if status is GameStatus.DRAW:
        return "It's a tie!"
    if session.ai_pending:
        return "AI is thinking..."
    if session.game.current_player != PLAYER:
        return "The AI could not move. Restart to play again."
    return f"Your turn! ({PLAYER})"


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        status = game.status
        line = winning_line(game.board)
        state: Dict[str, object] = {
            "id": game_id,
            "cells": list(game.board),
            "currentPlayer": game.current_player,
            "status": status.value,
            "winner": game.board[line[0]] if line else None,
            "winningLine": list(line) if line else None,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
            "statusText": _status_text(session),
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if game.is_over:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if game.current_player != PLAYER:
            raise HTTPException(status_code=400, detail="It is not your turn")

        player = game.current_player
        try:
            game.play_move(index)
        except InvalidMove as exc:
            logger.warning("Game %s: rejected move %d: %s", game_id, index, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": player, "index": index})
        logger.info("Game %s: %s played %d", game_id, player, index)

        should_schedule_ai = (
            not game.is_over and game.current_player == session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
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
    _apply_player_move(game_id, session, request.index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")
        session.game.reset()
        session.move_log.clear()
    logger.info("Game %s: reset", game_id)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>PerfectXO</title>
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
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: flex-start;
        padding: 2rem 1rem;
        background: #eef1fb;
        color: #13203a;
      }
      main {
        background: #fff;
        border-radius: 16px;
        box-shadow: 0 16px 32px rgba(34, 47, 79, 0.14);
        padding: 2rem;
        text-align: center;
      }
      h1 {
        margin: 0 0 1rem;
        letter-spacing: 0.06em;
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 90px);
        grid-template-rows: repeat(3, 90px);
        gap: 6px;
        margin: 1rem auto;
        width: max-content;
      }
      #board.thinking {
        opacity: 0.7;
        pointer-events: none;
      }
      .cell {
        display: flex;
        align-items: center;
        justify-content: center;
        font-size: 2.6rem;
        font-weight: 700;
        background: #f4f6ff;
        border-radius: 10px;
        cursor: pointer;
        user-select: none;
      }
      .cell.x {
        color: #2458d8;
      }
      .cell.o {
        color: #d8344c;
      }
      .cell.win {
        background: #ffe9a8;
      }
      #status {
        font-weight: 600;
        min-height: 1.5em;
      }
      #message {
        color: #b3261e;
        min-height: 1.2em;
      }
      button {
        margin-top: 0.5rem;
        padding: 0.5rem 1.4rem;
        border: none;
        border-radius: 8px;
        background: #2458d8;
        color: #fff;
        font-size: 1rem;
        cursor: pointer;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>PerfectXO</h1>
      <p id=\"status\">Setting up your game…</p>
      <div id=\"board\"></div>
      <p id=\"message\"></p>
      <button id=\"restart\" type=\"button\">Restart</button>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const messageEl = document.getElementById('message');
      const restartButton = document.getElementById('restart');

      let gameId = null;
      let gameState = null;
      let isRequestPending = false;
      let aiPollHandle = null;

      function renderBoard() {
        boardEl.innerHTML = '';
        const cells = gameState ? gameState.cells : Array(9).fill('');
        const line = (gameState && gameState.winningLine) || [];
        cells.forEach((mark, index) => {
          const cellEl = document.createElement('div');
          cellEl.classList.add('cell');
          if (mark) cellEl.classList.add(mark.toLowerCase());
          if (line.includes(index)) cellEl.classList.add('win');
          cellEl.textContent = mark;
          cellEl.addEventListener('click', () => sendMove(index));
          boardEl.appendChild(cellEl);
        });
        boardEl.classList.toggle('thinking', Boolean(gameState && gameState.aiPending));
      }

      function setState(data) {
        gameId = data.id;
        gameState = data;
        statusEl.textContent = data.statusText;
        renderBoard();
        if (data.aiPending && data.status === 'in_progress') {
          ensureAiPolling();
        }
      }

      function ensureAiPolling() {
        if (aiPollHandle === null) {
          aiPollHandle = setTimeout(pollAiState, 250);
        }
      }

      async function pollAiState() {
        aiPollHandle = null;
        if (!gameId) return;
        try {
          const response = await fetch(`/api/game/${gameId}`);
          if (!response.ok) return;
          setState(await response.json());
        } catch (error) {
          console.error('Polling failed', error);
          ensureAiPolling();
        }
      }

      async function startGame() {
        isRequestPending = true;
        try {
          const response = await fetch('/api/game', { method: 'POST' });
          if (!response.ok) throw new Error('Unable to start game');
          setState(await response.json());
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      async function sendMove(index) {
        if (!gameState || gameState.status !== 'in_progress' || gameState.aiPending) return;
        if (isRequestPending || gameState.cells[index]) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          const response = await fetch(`/api/game/${gameId}/move`, {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({ index }),
          });
          if (!response.ok) {
            const payload = await response.json().catch(() => ({}));
            messageEl.textContent = payload.detail || 'Invalid move';
            return;
          }
          setState(await response.json());
        } catch (error) {
          messageEl.textContent = 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      async function restartGame() {
        if (!gameId || isRequestPending) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          const response = await fetch(`/api/game/${gameId}/reset`, { method: 'POST' });
          if (!response.ok) {
            const payload = await response.json().catch(() => ({}));
            messageEl.textContent = payload.detail || 'Unable to restart';
            return;
          }
          setState(await response.json());
        } catch (error) {
          messageEl.textContent = 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      restartButton.addEventListener('click', restartGame);
      renderBoard();
      startGame();
    </script>
  </body>
</html>
"""
