"""Snake head motion and body-chain growth/follow logic."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from glide_snake.geometry import Position

if TYPE_CHECKING:
    from glide_snake.geometry import PlayArea


class Heading(enum.Enum):
    """Travel directions with (dx, dy) values; +y points up."""

    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, 1)
    DOWN = (0, -1)

    @classmethod
    def parse(cls, name: str) -> Heading | None:
        """Map a key name such as ``"left"`` to a heading, or ``None``."""
        return _KEY_NAMES.get(name.strip().lower())


_KEY_NAMES: dict[str, Heading] = {
    "left": Heading.LEFT,
    "right": Heading.RIGHT,
    "up": Heading.UP,
    "down": Heading.DOWN,
}


class ChainIntegrityError(RuntimeError):
    """The tail reference no longer points at the end of the body chain."""


class Snake:
    """A head plus an ordered list of trailing body segments.

    ``segments[0]`` follows the head and ``segments[-1]`` is the tail.
    ``tail_index`` is the back-reference used to place new segments; ``-1``
    refers to the head while the body is empty.
    """

    def __init__(
        self,
        head: Position = Position(0.0, 0.0),
        heading: Heading = Heading.UP,
    ) -> None:
        self.head = Position(*head)
        self.heading = heading
        self.segments: list[Position] = []
        self.tail_index = -1

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def tail(self) -> Position:
        """Position of the current tail end (the head when body is empty)."""
        if self.tail_index != len(self.segments) - 1:
            raise ChainIntegrityError(
                f"Tail index {self.tail_index} does not match chain of "
                f"length {len(self.segments)}."
            )
        if self.tail_index < 0:
            return self.head
        return self.segments[self.tail_index]

    def move_head(self, step: float, area: PlayArea) -> Position:
        """Advance the head by *step* along the heading, wrapping at edges.

        Returns the position the head vacated.
        """
        vacated = self.head
        dx, dy = self.heading.value
        moved = vacated.offset(dx * step, dy * step)
        self.head = area.wrap(moved, dx, dy)
        return vacated

    def grow(self, offset: float) -> Position:
        """Append a segment *offset* units above the current tail."""
        segment = self.tail.offset(dy=offset)
        self.segments.append(segment)
        self.tail_index = len(self.segments) - 1
        return segment

    def follow(self, leader: Position, count: int | None = None) -> None:
        """Shift the first *count* segments one place down the chain.

        Segment 0 takes *leader*; every later segment takes the position its
        predecessor held before this pass. Segments past *count* are left
        where they are.
        """
        if count is None:
            count = len(self.segments)
        carried = leader
        for i in range(min(count, len(self.segments))):
            carried, self.segments[i] = self.segments[i], carried

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "head": self.head.to_list(),
            "heading": self.heading.name.lower(),
            "segments": [seg.to_list() for seg in self.segments],
            "tail_index": self.tail_index,
        }
