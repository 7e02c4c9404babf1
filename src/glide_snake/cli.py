"""Command-line tools for running and measuring Glide Snake headlessly."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from glide_snake.config import GameConfig
from glide_snake.snake import Heading

logger = logging.getLogger(__name__)


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    parser.add_argument("--width", type=float, default=None)
    parser.add_argument("--height", type=float, default=None)
    parser.add_argument("--step", type=float, default=None)
    parser.add_argument("--min-step", type=float, default=None)
    parser.add_argument("--tick-rate-ms", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="glide-snake",
        description="Glide Snake headless simulation and config tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser("simulate", help="Run the game without a display.")
    _add_config_flags(sim_p)
    sim_p.add_argument("--ticks", type=int, default=100)
    sim_p.add_argument(
        "--press", action="append", default=[], metavar="TICK:KEY",
        help="Press KEY (left/right/up/down) before TICK; repeatable.",
    )
    sim_p.add_argument(
        "--summary", action="store_true",
        help="Print a one-line summary instead of the full state.",
    )

    # --- benchmark ---
    bench_p = sub.add_parser("benchmark", help="Measure tick throughput.")
    _add_config_flags(bench_p)
    bench_p.add_argument("--games", type=int, default=10)
    bench_p.add_argument("--ticks", type=int, default=1_000)
    bench_p.add_argument("--press-every", type=int, default=10)

    # --- config ---
    config_p = sub.add_parser("config", help="Write a config file.")
    _add_config_flags(config_p)
    config_p.add_argument("output", help="Path for the JSON config.")

    return parser


def _resolve_config(args: argparse.Namespace) -> GameConfig:
    config = GameConfig.load(args.config) if args.config else GameConfig()

    flag_map = {
        "width": "width",
        "height": "height",
        "step": "step",
        "min_step": "min_step",
        "tick_rate_ms": "tick_rate_ms",
        "seed": "seed",
    }
    overrides: dict = {}
    for cli_name, cfg_name in flag_map.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val
    return config.replace(**overrides) if overrides else config


def _parse_presses(specs: list[str]) -> dict[int, Heading]:
    """Parse ``TICK:KEY`` specs; later specs for the same tick win."""
    presses: dict[int, Heading] = {}
    for spec in specs:
        tick_str, sep, key = spec.partition(":")
        heading = Heading.parse(key) if sep else None
        if heading is None or not tick_str.strip().isdigit():
            raise ValueError(f"Invalid press {spec!r}; expected TICK:KEY.")
        presses[int(tick_str)] = heading
    return presses


def _run_simulate(args: argparse.Namespace) -> int:
    from glide_snake.engine import GameEngine

    presses = _parse_presses(args.press)
    engine = GameEngine(_resolve_config(args))
    state = engine.get_state()
    for t in range(args.ticks):
        if t in presses:
            engine.press(presses[t])
        state = engine.step()

    if args.summary:
        print(  # noqa: T201
            f"tick={state['tick']} eaten={state['eaten']} "
            f"segments={len(state['snake']['segments'])} "
            f"step={state['step']:g}"
        )
    else:
        print(json.dumps(state))  # noqa: T201
    return 0


def _run_benchmark(args: argparse.Namespace) -> int:
    from glide_snake.benchmark import benchmark_throughput

    result = benchmark_throughput(
        num_games=args.games,
        ticks=args.ticks,
        press_every=args.press_every,
        config=_resolve_config(args),
    )
    print(result.summary())  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    _resolve_config(args).save(args.output)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``glide-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "benchmark": _run_benchmark,
        "config": _run_config,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
