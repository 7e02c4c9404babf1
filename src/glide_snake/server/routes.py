"""REST API route handlers for game lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from glide_snake.server.models import (
    CreateGameRequest,
    CreateGameResponse,
    GameSummary,
    TokenRequest,
)

router = APIRouter(prefix="/games", tags=["games"])


def _get_manager(request: Request):
    return request.app.state.game_manager


@router.post("", status_code=201)
async def create_game(
    body: CreateGameRequest, request: Request,
) -> CreateGameResponse:
    """Create a new game."""
    manager = _get_manager(request)
    client_ip = request.client.host if request.client else "unknown"
    try:
        game = manager.create_game(
            width=body.width,
            height=body.height,
            step=body.step,
            min_step=body.min_step,
            tick_rate_ms=body.tick_rate_ms,
            seed=body.seed,
            client_ip=client_ip,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return CreateGameResponse(
        **game.summary().model_dump(), token=game.token,
    )


@router.get("")
async def list_games(request: Request) -> list[GameSummary]:
    """List active and waiting games."""
    return _get_manager(request).list_games()


@router.get("/{game_id}")
async def get_game(game_id: str, request: Request) -> dict:
    """Get game metadata and, once started, its state."""
    manager = _get_manager(request)
    game = manager.get_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found.")
    result: dict = {
        "game_id": game.game_id,
        "status": game.status.value,
        "tick_rate_ms": game.tick_rate_ms,
        "connected": game.connected,
        "config": game.config.to_dict(),
    }
    if game.engine is not None:
        result["state"] = game.engine.get_state()
    return result


@router.post("/{game_id}/start", status_code=200)
async def start_game(
    game_id: str, body: TokenRequest, request: Request,
) -> dict:
    """Start the game tick loop."""
    manager = _get_manager(request)
    try:
        manager.start_game(game_id, body.token)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    return {"status": "started", "game_id": game_id}


@router.post("/{game_id}/stop", status_code=200)
async def stop_game(
    game_id: str, body: TokenRequest, request: Request,
) -> dict:
    """Finish the game and stop its tick loop."""
    manager = _get_manager(request)
    try:
        await manager.stop_game(game_id, body.token)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    return {"status": "stopped", "game_id": game_id}
