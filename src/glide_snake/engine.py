"""Tick-based game engine composing head motion, food, growth, and follow."""

from __future__ import annotations

import logging

import numpy as np

from glide_snake.config import GameConfig
from glide_snake.food import FoodSpawner
from glide_snake.geometry import PlayArea, Position, overlaps
from glide_snake.snake import Heading, Snake

logger = logging.getLogger(__name__)

# RGB colours handed to the renderer, as floats in [0, 1].
BOARD_COLOR = (0.1, 0.1, 0.1)
HEAD_COLOR = (0.0, 0.0, 0.0)
SEGMENT_COLOR = (1.0, 0.894, 0.769)
FOOD_COLOR = (1.0, 0.388, 0.278)


class GameEngine:
    """Single-snake, tick-based engine over a continuous play area.

    The engine owns all mutable simulation state: the snake (head, body,
    heading, tail index), the food slot, the current step size, and the
    board colour. Each call to :meth:`step` advances the game by one tick
    and returns the updated state dictionary. The engine does no timing of
    its own; the host decides how often to call :meth:`step`.
    """

    def __init__(self, config: GameConfig | None = None) -> None:
        self.config = config if config is not None else GameConfig()
        self.area = PlayArea(
            width=self.config.width,
            height=self.config.height,
            vertical_margin=self.config.half_footprint,
            spawn_inset_divisor=self.config.spawn_inset_divisor,
        )

        # Independent streams so board recolouring never shifts food placement.
        food_seq, color_seq = np.random.SeedSequence(self.config.seed).spawn(2)
        self.food = FoodSpawner(self.area, rng=np.random.default_rng(food_seq))
        self._color_rng = np.random.default_rng(color_seq)

        self.snake = Snake(Position(0.0, 0.0), Heading.UP)
        self.step_size = self.config.step
        self.board_color: tuple[float, float, float] = BOARD_COLOR
        self.tick = 0
        self.eaten = 0
        self._pending_heading: Heading | None = None

    @property
    def heading(self) -> Heading:
        return self.snake.heading

    def press(self, heading: Heading) -> None:
        """Record a directional key press for the next tick.

        Presses are not validated against reversing, and only the most
        recent press before a tick takes effect.
        """
        self._pending_heading = heading

    def step(self) -> dict:
        """Advance the game by one tick.

        Returns the full game state as a serializable dict.
        """
        self.food.spawn()
        self.apply_input()
        vacated = self.move_head()

        # Segments grown this tick start following on the next one.
        followers = len(self.snake)
        self.resolve_collision()
        self.snake.follow(vacated, followers)

        self.tick += 1
        if self.tick % self.config.background_every_ticks == 0:
            self.recolor_board()
        return self.get_state()

    def apply_input(self) -> None:
        """Overwrite the heading with the pending press, if any."""
        if self._pending_heading is not None:
            self.snake.heading = self._pending_heading
            self._pending_heading = None

    def move_head(self) -> Position:
        """Move the head one step; returns the position it vacated."""
        return self.snake.move_head(self.step_size, self.area)

    def resolve_collision(self) -> bool:
        """Consume the food if the head overlaps it and grow the body.

        Returns True when food was eaten this call.
        """
        food_pos = self.food.position
        if food_pos is None:
            return False
        size = self.config.footprint
        if not overlaps(self.snake.head, size, food_pos, size):
            return False

        segment = self.snake.grow(self.config.growth_offset)
        self.food.consume()
        self.eaten += 1
        self._decay_step()
        logger.debug(
            "Food eaten at tick %d; segment %d added at (%.1f, %.1f).",
            self.tick, self.snake.tail_index, segment.x, segment.y,
        )
        return True

    def recolor_board(self) -> None:
        """Pick a new random board colour."""
        r, g, b = self._color_rng.random(3).tolist()
        self.board_color = (r, g, b)

    def _decay_step(self) -> None:
        previous = self.step_size
        step = previous - self.config.step_decay
        if self.config.min_step is not None:
            step = max(step, self.config.min_step)
        self.step_size = step
        if previous > 0 >= step:
            logger.warning(
                "Step size reached %.2f after %d foods; the head no longer "
                "advances along its heading.", step, self.eaten,
            )

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick,
            "step": self.step_size,
            "eaten": self.eaten,
            "snake": self.snake.to_dict(),
            "food": self.food.to_dict(),
            "board": {
                **self.area.to_dict(),
                "color": list(self.board_color),
            },
            "frame": self.frame(),
        }

    def frame(self) -> list[dict]:
        """Drawable sprites for the renderer, back to front."""
        size = self.config.footprint
        sprites = [
            _sprite(
                "board", Position(0.0, 0.0),
                [self.area.width, self.area.height], self.board_color,
            ),
        ]
        sprites.extend(
            _sprite("segment", seg, size, SEGMENT_COLOR)
            for seg in self.snake.segments
        )
        sprites.append(_sprite("head", self.snake.head, size, HEAD_COLOR))
        if self.food.position is not None:
            sprites.append(_sprite("food", self.food.position, size, FOOD_COLOR))
        return sprites


def _sprite(
    kind: str,
    pos: Position,
    size: float | list[float],
    color: tuple[float, float, float],
) -> dict:
    return {
        "kind": kind,
        "x": float(pos.x),
        "y": float(pos.y),
        "size": size,
        "color": list(color),
    }
