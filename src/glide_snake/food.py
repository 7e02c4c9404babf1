"""Single-slot food spawning."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from glide_snake.geometry import Position

if TYPE_CHECKING:
    from glide_snake.geometry import PlayArea

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Holds at most one food item and refills the slot when it is empty.

    Positions are drawn uniformly from an inset rectangle of the play area
    using a seeded NumPy RNG, so placement is reproducible.
    """

    def __init__(
        self,
        area: PlayArea,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.area = area
        self.rng = rng if rng is not None else np.random.default_rng()
        self.position: Position | None = None

    @property
    def occupied(self) -> bool:
        return self.position is not None

    def spawn(self) -> Position | None:
        """Place a food item if the slot is empty.

        Returns the new position, or ``None`` if the slot was occupied.
        """
        if self.occupied:
            return None
        half_x, half_y = self.area.spawn_extent()
        x = float(self.rng.uniform(-half_x, half_x))
        y = float(self.rng.uniform(-half_y, half_y))
        self.position = Position(x, y)
        logger.debug("Food spawned at (%.1f, %.1f).", x, y)
        return self.position

    def consume(self) -> Position | None:
        """Empty the slot. Returns the removed position, if any."""
        pos, self.position = self.position, None
        return pos

    def to_dict(self) -> dict:
        """Serialize food slot state to a dictionary."""
        return {
            "position": self.position.to_list() if self.position else None,
            "occupied": self.occupied,
        }
