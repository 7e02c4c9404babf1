"""Tests for the command-line tools."""

import json

import pytest

from glide_snake.cli import _build_parser, _parse_presses, main
from glide_snake.config import GameConfig
from glide_snake.snake import Heading


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_simulate_defaults(self):
        args = _build_parser().parse_args(["simulate"])
        assert args.command == "simulate"
        assert args.ticks == 100
        assert args.press == []
        assert args.config is None
        assert args.seed is None

    def test_simulate_flags(self):
        args = _build_parser().parse_args([
            "simulate",
            "--ticks", "20",
            "--press", "3:left",
            "--press", "9:up",
            "--min-step", "2.5",
            "--seed", "4",
        ])
        assert args.ticks == 20
        assert args.press == ["3:left", "9:up"]
        assert args.min_step == 2.5
        assert args.seed == 4

    def test_benchmark_defaults(self):
        args = _build_parser().parse_args(["benchmark"])
        assert args.games == 10
        assert args.ticks == 1_000


class TestParsePresses:
    def test_valid(self):
        assert _parse_presses(["0:left", "5:Down"]) == {
            0: Heading.LEFT, 5: Heading.DOWN,
        }

    def test_later_spec_wins(self):
        assert _parse_presses(["2:left", "2:right"]) == {2: Heading.RIGHT}

    @pytest.mark.parametrize("spec", ["left", "x:left", "3:jump", "-1:up"])
    def test_invalid(self, spec):
        with pytest.raises(ValueError, match="TICK:KEY"):
            _parse_presses([spec])


class TestCLICommands:
    def test_simulate_prints_state(self, capsys):
        assert main(["simulate", "--ticks", "5", "--seed", "1"]) == 0
        state = json.loads(capsys.readouterr().out)
        assert state["tick"] == 5

    def test_simulate_summary(self, capsys):
        assert main([
            "simulate", "--ticks", "3", "--seed", "1",
            "--press", "0:right", "--summary",
        ]) == 0
        assert "tick=3" in capsys.readouterr().out

    def test_simulate_bad_press(self):
        assert main(["simulate", "--press", "nope"]) == 2

    def test_config_writes_file(self, tmp_path):
        path = tmp_path / "cfg.json"
        assert main(["config", str(path), "--width", "600", "--seed", "3"]) == 0
        loaded = GameConfig.load(path)
        assert loaded.width == 600
        assert loaded.seed == 3

    def test_simulate_from_config_file(self, tmp_path, capsys):
        path = tmp_path / "cfg.json"
        GameConfig(step=4, seed=2).save(path)
        assert main(["simulate", "--config", str(path), "--ticks", "1"]) == 0
        state = json.loads(capsys.readouterr().out)
        assert state["snake"]["head"] == [0.0, 4.0]

    def test_benchmark_runs(self, capsys):
        assert main(["benchmark", "--games", "2", "--ticks", "50"]) == 0
        assert "ticks/s" in capsys.readouterr().out
