"""Play-area and pacing configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Static play-area geometry and per-tick pacing.

    The play area is centred on the origin, so it spans
    ``[-width / 2, width / 2]`` horizontally and likewise vertically.
    Supports JSON serialization for reproducible runs.
    """

    # Play area
    width: float = 400.0
    height: float = 400.0

    # Entities
    footprint: float = 20.0
    growth_offset: float = 20.0

    # Motion
    step: float = 10.0
    step_decay: float = 1.0
    min_step: float | None = None

    # Food
    spawn_inset_divisor: float = 2.1

    # Host loop
    tick_rate_ms: int = 100
    background_interval_ms: int = 2000
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.footprint <= 0:
            raise ValueError("footprint must be positive.")
        if self.width <= self.footprint or self.height <= self.footprint:
            raise ValueError("width and height must exceed the footprint.")
        if self.step <= 0:
            raise ValueError("step must be positive.")
        if self.step_decay < 0:
            raise ValueError("step_decay must be >= 0.")
        if self.min_step is not None and self.min_step < 0:
            raise ValueError("min_step must be >= 0 when set.")
        if self.spawn_inset_divisor < 2:
            raise ValueError("spawn_inset_divisor must be at least 2.")
        if self.tick_rate_ms < 1:
            raise ValueError("tick_rate_ms must be at least 1.")
        if self.background_interval_ms < 1:
            raise ValueError("background_interval_ms must be at least 1.")

    @property
    def half_footprint(self) -> float:
        return self.footprint / 2

    @property
    def background_every_ticks(self) -> int:
        """Number of ticks between board recolours."""
        return max(1, round(self.background_interval_ms / self.tick_rate_ms))

    def replace(self, **overrides) -> GameConfig:
        """Return a copy with *overrides* applied (and re-validated)."""
        return replace(self, **overrides)

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
