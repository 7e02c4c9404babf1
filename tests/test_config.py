"""Tests for the game configuration dataclass."""

import json

import pytest

from glide_snake.config import GameConfig


class TestGameConfigDefaults:
    def test_defaults(self):
        cfg = GameConfig()
        assert cfg.width == 400.0
        assert cfg.height == 400.0
        assert cfg.footprint == 20.0
        assert cfg.step == 10.0
        assert cfg.step_decay == 1.0
        assert cfg.min_step is None
        assert cfg.spawn_inset_divisor == 2.1

    def test_half_footprint(self):
        assert GameConfig(footprint=30).half_footprint == 15

    def test_background_every_ticks(self):
        assert GameConfig().background_every_ticks == 20
        assert GameConfig(tick_rate_ms=300, background_interval_ms=200).background_every_ticks == 1


class TestGameConfigValidation:
    def test_area_must_exceed_footprint(self):
        with pytest.raises(ValueError, match="exceed the footprint"):
            GameConfig(width=20)

    def test_step_positive(self):
        with pytest.raises(ValueError, match="step must be positive"):
            GameConfig(step=0)

    def test_min_step_non_negative(self):
        with pytest.raises(ValueError, match="min_step"):
            GameConfig(min_step=-1)

    def test_spawn_inset(self):
        with pytest.raises(ValueError, match="spawn_inset_divisor"):
            GameConfig(spawn_inset_divisor=1.5)

    def test_replace_revalidates(self):
        with pytest.raises(ValueError):
            GameConfig().replace(tick_rate_ms=0)


class TestGameConfigPersistence:
    def test_to_dict_serializable(self):
        serialized = json.dumps(GameConfig().to_dict())
        assert isinstance(serialized, str)

    def test_save_and_load(self, tmp_path):
        cfg = GameConfig(width=600, step=7.5, min_step=1.0, seed=9)
        path = tmp_path / "nested" / "game.json"
        cfg.save(path)
        assert path.exists()
        assert GameConfig.load(path) == cfg
