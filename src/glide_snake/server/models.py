"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class GameStatus(str, enum.Enum):
    """Lifecycle states for a game instance."""

    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class CreateGameRequest(BaseModel):
    """Request body for POST /games."""

    width: float = Field(default=400.0, gt=0)
    height: float = Field(default=400.0, gt=0)
    step: float = Field(default=10.0, gt=0)
    min_step: float | None = Field(default=None, ge=0)
    tick_rate_ms: int = Field(default=100, ge=10, le=2000)
    seed: int | None = None


class TokenRequest(BaseModel):
    """Request body carrying the player token (start/stop)."""

    token: str


class GameSummary(BaseModel):
    """Compact game info for list endpoints."""

    game_id: str
    status: GameStatus
    tick_rate_ms: int
    connected: bool = False


class CreateGameResponse(GameSummary):
    """Response for a newly created game, including the player token."""

    token: str
