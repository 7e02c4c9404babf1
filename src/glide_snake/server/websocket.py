"""WebSocket handlers for real-time play and spectating."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from glide_snake.server.game_manager import GameManager
from glide_snake.snake import Heading

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> GameManager:
    return ws.app.state.game_manager


def _parse_press(raw: str) -> Heading | None:
    """Extract a heading from a ``{"key": "up"}`` message, if valid."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(msg, dict):
        return None
    key = msg.get("key")
    if not isinstance(key, str):
        return None
    return Heading.parse(key)


@ws_router.websocket("/games/{game_id}/play")
async def play(websocket: WebSocket, game_id: str, token: str = "") -> None:
    """Player WebSocket: send key presses, receive game state each tick."""
    manager = _get_manager(websocket)
    game = manager.get_game(game_id)
    if game is None:
        await websocket.close(code=4004, reason="Game not found.")
        return
    if token != game.token:
        await websocket.close(code=4001, reason="Invalid token.")
        return

    await websocket.accept()

    # Enforce a single active player socket per game.
    previous_ws = game.websocket
    if previous_ws is not None and previous_ws is not websocket:
        try:
            await previous_ws.close(code=4008, reason="Replaced by new connection.")
        except Exception:
            logger.warning(
                "Failed closing previous player socket in game %s.", game_id,
            )

    game.websocket = websocket
    logger.info("Player connected to game %s.", game_id)

    # Send initial state snapshot so the client gets immediate feedback.
    if game.engine is not None:
        state = game.engine.get_state()
        await websocket.send_text(
            json.dumps(state, separators=(",", ":")),
        )

    try:
        while True:
            raw = await websocket.receive_text()
            heading = _parse_press(raw)
            if heading is None:
                continue
            await manager.press(game, heading)
    except WebSocketDisconnect:
        logger.info("Player disconnected from game %s.", game_id)
    finally:
        # A newer connection may have replaced this socket while this handler
        # was still shutting down.
        if game.websocket is websocket:
            game.websocket = None


@ws_router.websocket("/games/{game_id}/spectate")
async def spectate(websocket: WebSocket, game_id: str) -> None:
    """Spectator WebSocket: receive-only game state stream."""
    manager = _get_manager(websocket)
    game = manager.get_game(game_id)
    if game is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    game.spectators.append(websocket)
    logger.info("Spectator connected to game %s.", game_id)

    if game.engine is not None:
        state = game.engine.get_state()
        await websocket.send_text(
            json.dumps(state, separators=(",", ":")),
        )

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Spectator disconnected from game %s.", game_id)
    finally:
        if websocket in game.spectators:
            game.spectators.remove(websocket)
