"""Headless simulation throughput measurement."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from glide_snake.config import GameConfig
from glide_snake.engine import GameEngine
from glide_snake.snake import Heading

logger = logging.getLogger(__name__)

_HEADINGS = list(Heading)


@dataclass
class BenchmarkResult:
    """Results from a throughput benchmark run."""

    total_games: int
    total_ticks: int
    total_eaten: int
    wall_time_seconds: float
    ticks_per_second: float

    def summary(self) -> str:
        return (
            f"Benchmark: {self.total_games} games, "
            f"{self.total_ticks} ticks, {self.total_eaten} foods in "
            f"{self.wall_time_seconds:.2f}s | "
            f"{self.ticks_per_second:.1f} ticks/s"
        )


def benchmark_throughput(
    *,
    num_games: int = 10,
    ticks: int = 1_000,
    press_every: int = 10,
    config: GameConfig | None = None,
) -> BenchmarkResult:
    """Measure raw tick throughput with random key presses.

    Each game runs *ticks* ticks and receives a random press every
    *press_every* ticks.
    """
    base = config if config is not None else GameConfig()
    rng = np.random.default_rng(42)

    total_ticks = 0
    total_eaten = 0
    start = time.perf_counter()

    for _ in range(num_games):
        engine = GameEngine(base.replace(seed=int(rng.integers(2**31))))
        for t in range(ticks):
            if press_every > 0 and t % press_every == 0:
                engine.press(_HEADINGS[int(rng.integers(len(_HEADINGS)))])
            engine.step()
        total_ticks += engine.tick
        total_eaten += engine.eaten

    elapsed = time.perf_counter() - start
    result = BenchmarkResult(
        total_games=num_games,
        total_ticks=total_ticks,
        total_eaten=total_eaten,
        wall_time_seconds=elapsed,
        ticks_per_second=total_ticks / max(elapsed, 1e-9),
    )
    logger.info(result.summary())
    return result
