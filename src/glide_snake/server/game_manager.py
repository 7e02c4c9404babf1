"""In-memory game registry, lifecycle management, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from glide_snake.config import GameConfig
from glide_snake.engine import GameEngine
from glide_snake.server.models import GameStatus, GameSummary
from glide_snake.snake import Heading

logger = logging.getLogger(__name__)

# Simple rate limit: max games created per IP within the window.
_RATE_LIMIT_WINDOW = 60.0  # seconds
_RATE_LIMIT_MAX = 10
_RATE_COMPACT_INTERVAL = 60.0  # seconds between stale-key sweeps
_MAX_FINISHED_GAMES = 100


@dataclass
class GameInstance:
    """All state for a single hosted game."""

    game_id: str
    config: GameConfig
    token: str
    status: GameStatus = GameStatus.WAITING
    engine: GameEngine | None = None
    websocket: WebSocket | None = None
    spectators: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def tick_rate_ms(self) -> int:
        return self.config.tick_rate_ms

    @property
    def connected(self) -> bool:
        return self.websocket is not None

    def summary(self) -> GameSummary:
        return GameSummary(
            game_id=self.game_id,
            status=self.status,
            tick_rate_ms=self.tick_rate_ms,
            connected=self.connected,
        )


class GameManager:
    """Central registry managing all game instances."""

    def __init__(self, max_finished_games: int = _MAX_FINISHED_GAMES) -> None:
        if max_finished_games < 0:
            raise ValueError("max_finished_games must be >= 0.")
        self._games: dict[str, GameInstance] = {}
        self._rate_limits: dict[str, list[float]] = {}
        self._last_rate_compact: float = 0.0
        self._max_finished_games = max_finished_games

    def _check_rate_limit(self, client_ip: str) -> bool:
        """Return True if the client is within rate limits."""
        now = time.monotonic()
        timestamps = self._rate_limits.get(client_ip, [])
        timestamps = [t for t in timestamps if now - t < _RATE_LIMIT_WINDOW]
        if timestamps:
            self._rate_limits[client_ip] = timestamps
        else:
            self._rate_limits.pop(client_ip, None)
        self._compact_rate_limits(now)
        return len(timestamps) < _RATE_LIMIT_MAX

    def _compact_rate_limits(self, now: float) -> None:
        """Remove rate-limit entries whose timestamps have all expired."""
        if now - self._last_rate_compact < _RATE_COMPACT_INTERVAL:
            return
        self._last_rate_compact = now
        stale_ips = [
            ip for ip, ts in self._rate_limits.items()
            if all(now - t >= _RATE_LIMIT_WINDOW for t in ts)
        ]
        for ip in stale_ips:
            del self._rate_limits[ip]
        if stale_ips:
            logger.info(
                "Compacted %d stale rate-limit entries.", len(stale_ips),
            )

    def _record_creation(self, client_ip: str) -> None:
        self._rate_limits.setdefault(client_ip, []).append(time.monotonic())

    def create_game(
        self,
        width: float = 400.0,
        height: float = 400.0,
        step: float = 10.0,
        min_step: float | None = None,
        tick_rate_ms: int = 100,
        seed: int | None = None,
        client_ip: str = "unknown",
    ) -> GameInstance:
        """Create a new game in the waiting state and return the instance."""
        if not self._check_rate_limit(client_ip):
            raise ValueError("Rate limit exceeded. Try again later.")

        config = GameConfig(
            width=width,
            height=height,
            step=step,
            min_step=min_step,
            tick_rate_ms=tick_rate_ms,
            seed=seed,
        )

        game_id = uuid.uuid4().hex[:12]
        instance = GameInstance(
            game_id=game_id, config=config, token=uuid.uuid4().hex,
        )
        self._games[game_id] = instance
        self._record_creation(client_ip)
        logger.info(
            "Game %s created (%gx%g, step=%g).", game_id, width, height, step,
        )
        return instance

    def get_game(self, game_id: str) -> GameInstance | None:
        return self._games.get(game_id)

    def list_games(self) -> list[GameSummary]:
        """Return summaries of non-finished games."""
        return [
            g.summary() for g in self._games.values()
            if g.status != GameStatus.FINISHED
        ]

    def _require(self, game_id: str, token: str) -> GameInstance:
        game = self._games.get(game_id)
        if game is None:
            raise KeyError(f"Game {game_id} not found.")
        if token != game.token:
            raise PermissionError("Invalid token for this game.")
        return game

    def start_game(self, game_id: str, token: str) -> None:
        """Create the engine and start the game tick loop."""
        game = self._require(game_id, token)
        if game.status != GameStatus.WAITING:
            raise ValueError("Game is not in waiting state.")

        game.engine = GameEngine(game.config)
        game.status = GameStatus.ACTIVE
        game._task = asyncio.create_task(self._tick_loop(game))
        logger.info("Game %s started.", game_id)

    async def stop_game(self, game_id: str, token: str) -> None:
        """Finish an active or waiting game and close its sockets."""
        game = self._require(game_id, token)
        if game.status == GameStatus.FINISHED:
            raise ValueError("Game is already finished.")

        self._mark_game_finished(game)
        task = game._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        else:
            await self._close_connections(game)
            self._prune_finished_games()
        logger.info("Game %s stopped.", game_id)

    async def press(self, game: GameInstance, heading: Heading) -> None:
        """Forward a key press to an active game's engine."""
        async with game.lock:
            if game.engine is not None and game.status == GameStatus.ACTIVE:
                game.engine.press(heading)

    async def _tick_loop(self, game: GameInstance) -> None:
        """Run the game tick loop, broadcasting state each tick."""
        tick_interval = game.tick_rate_ms / 1000.0
        try:
            while game.status == GameStatus.ACTIVE:
                await asyncio.sleep(tick_interval)
                async with game.lock:
                    assert game.engine is not None  # noqa: S101
                    state = game.engine.step()
                await self._broadcast(game, state)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for game %s.", game.game_id)
        except Exception:
            logger.exception("Tick loop error in game %s.", game.game_id)
            self._mark_game_finished(game)
        finally:
            if game.status == GameStatus.FINISHED:
                await self._close_connections(game)
                self._prune_finished_games()

    def _mark_game_finished(self, game: GameInstance) -> None:
        """Transition a game to finished exactly once."""
        if game.status != GameStatus.FINISHED:
            game.status = GameStatus.FINISHED
            game.finished_at = time.monotonic()

    async def _close_connections(self, game: GameInstance) -> None:
        """Close the player and spectator sockets for a finished game."""
        sockets = list(game.spectators)
        if game.websocket is not None:
            sockets.insert(0, game.websocket)
        game.websocket = None
        game.spectators.clear()

        for ws in sockets:
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Game finished.")
            except Exception:
                logger.warning("Failed closing socket in game %s.", game.game_id)

    def _prune_finished_games(self) -> None:
        """Bound retained finished games to avoid unbounded registry growth."""
        finished_games = [
            g for g in self._games.values() if g.status == GameStatus.FINISHED
        ]
        overflow = len(finished_games) - self._max_finished_games
        if overflow <= 0:
            return

        finished_games.sort(
            key=lambda g: g.finished_at if g.finished_at is not None else g.created_at,
        )
        for stale in finished_games[:overflow]:
            self._games.pop(stale.game_id, None)
        logger.info(
            "Pruned %d finished games (retaining up to %d).",
            overflow,
            self._max_finished_games,
        )

    async def _broadcast(self, game: GameInstance, state: dict) -> None:
        """Send game state to the connected player and spectators."""
        payload = json.dumps(state, separators=(",", ":"))

        ws = game.websocket
        if ws is not None:
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                game.websocket = None

        # Iterate over a snapshot so concurrent disconnect handlers can mutate
        # the live spectator list without affecting this send loop.
        dead_spectators: list[WebSocket] = []
        for spectator in list(game.spectators):
            try:
                if spectator.client_state == WebSocketState.CONNECTED:
                    await spectator.send_text(payload)
            except Exception:
                dead_spectators.append(spectator)

        for spectator in dead_spectators:
            if spectator in game.spectators:
                game.spectators.remove(spectator)

    async def cleanup(self) -> None:
        """Cancel all running tick loops and release rate-limit state."""
        tasks = [
            g._task for g in self._games.values()
            if g._task and not g._task.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._rate_limits.clear()
        logger.info("GameManager cleanup complete.")
