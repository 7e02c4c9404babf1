"""Continuous play-area geometry: positions, wraparound, and overlap."""

from __future__ import annotations

from typing import NamedTuple


class Position(NamedTuple):
    """A point in world units. The origin is the centre of the play area."""

    x: float
    y: float

    def offset(self, dx: float = 0.0, dy: float = 0.0) -> Position:
        return Position(self.x + dx, self.y + dy)

    def to_list(self) -> list[float]:
        return [float(self.x), float(self.y)]


class PlayArea:
    """Bounded, wraparound rectangle centred on the origin.

    Horizontal wrap happens exactly at the half-width. Vertical wrap is
    shifted by half the entity footprint: moving up wraps once ``y`` passes
    ``height / 2 - margin`` and lands at ``-height / 2 + margin``, while
    moving down wraps once ``y`` passes ``-height / 2 - margin`` and lands
    at ``height / 2 + margin``.
    """

    def __init__(
        self,
        width: float,
        height: float,
        vertical_margin: float = 10.0,
        spawn_inset_divisor: float = 2.1,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Play area dimensions must be positive.")
        self.width = width
        self.height = height
        self.vertical_margin = vertical_margin
        self.spawn_inset_divisor = spawn_inset_divisor

    @property
    def half_width(self) -> float:
        return self.width / 2

    @property
    def half_height(self) -> float:
        return self.height / 2

    def wrap(self, pos: Position, dx: int, dy: int) -> Position:
        """Wrap *pos* to the opposite edge after a move along ``(dx, dy)``.

        Only the edge in the direction of travel is checked.
        """
        x, y = pos
        if dx < 0 and x < -self.half_width:
            x = self.half_width
        elif dx > 0 and x > self.half_width:
            x = -self.half_width

        margin = self.vertical_margin
        if dy > 0 and y > self.half_height - margin:
            y = -self.half_height + margin
        elif dy < 0 and y < -self.half_height - margin:
            y = self.half_height + margin
        return Position(x, y)

    def spawn_extent(self) -> tuple[float, float]:
        """Return the ``(x, y)`` half-extents of the food spawn rectangle."""
        return (
            self.width / self.spawn_inset_divisor,
            self.height / self.spawn_inset_divisor,
        )

    def to_dict(self) -> dict:
        """Serialize area geometry to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "vertical_margin": self.vertical_margin,
        }


def overlaps(a: Position, a_size: float, b: Position, b_size: float) -> bool:
    """Axis-aligned overlap test for two squares centred on *a* and *b*.

    Edges that merely touch do not count as overlap.
    """
    reach = (a_size + b_size) / 2
    return abs(a.x - b.x) < reach and abs(a.y - b.y) < reach
