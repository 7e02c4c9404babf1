"""Glide Snake — continuous-motion snake game engine."""

from glide_snake.config import GameConfig
from glide_snake.engine import GameEngine
from glide_snake.food import FoodSpawner
from glide_snake.geometry import PlayArea, Position, overlaps
from glide_snake.snake import ChainIntegrityError, Heading, Snake

__all__ = [
    "ChainIntegrityError",
    "FoodSpawner",
    "GameConfig",
    "GameEngine",
    "Heading",
    "PlayArea",
    "Position",
    "Snake",
    "overlaps",
]
