from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import sys

from sourdough.definition import EconomyDefinition
from sourdough.formatting import format_leaderboard, format_text_report
from sourdough.persistence import JsonFileBackend, PersistenceUnavailable
from sourdough.simulation import Simulation
from sourdough.strategy import FeedProfile, GreedyCheapest, PriorityList, Strategy

DEFAULT_ECONOMY = "sourdough.bakery"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sourdough",
        description="Sourdough economy engine: balance simulation and leaderboard CLI",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    sim = sub.add_parser("simulate", help="Run a headless simulation")
    sim.add_argument(
        "economy_module",
        nargs="?",
        default=DEFAULT_ECONOMY,
        help=f"Python module with define_economy() (default: {DEFAULT_ECONOMY})",
    )
    sim.add_argument(
        "--strategy",
        default="greedy_cheapest",
        choices=["greedy_cheapest", "priority_list"],
        help="Strategy to use (default: greedy_cheapest)",
    )
    sim.add_argument(
        "--priority",
        action="append",
        default=[],
        metavar="KIND=COUNT",
        help="Purchase target for priority_list, repeatable (e.g. chef=10)",
    )
    sim.add_argument("--fps", type=float, default=0.0, help="Feeds per second")
    sim.add_argument(
        "--tick-resolution", type=float, default=None, help="Seconds per tick"
    )
    sim.add_argument(
        "--duration", type=float, default=3600, help="Simulated time (s)"
    )
    sim.add_argument(
        "--stall-after",
        type=float,
        default=None,
        help="Stop when no purchase happens for this many seconds",
    )
    sim.add_argument("--export-csv", default=None, help="CSV export path prefix")
    sim.add_argument("--export-json", default=None, help="JSON export path")
    sim.add_argument("--plot", default=None, help="Plot output path (PNG)")

    board = sub.add_parser("leaderboard", help="Show ranked saves from a JSON store")
    board.add_argument("store", help="Path to the JSON save store")
    board.add_argument("--limit", type=int, default=10, help="Entries to show")

    return parser


def load_economy(module_path: str) -> EconomyDefinition:
    """Import module and call define_economy()."""
    mod = importlib.import_module(module_path)
    if not hasattr(mod, "define_economy"):
        print(f"Error: module {module_path!r} has no define_economy() function")
        sys.exit(1)
    return mod.define_economy()


def parse_priorities(items: list[str]) -> list[tuple[str, int]]:
    priorities: list[tuple[str, int]] = []
    for item in items:
        kind_id, sep, count = item.partition("=")
        if not sep or not count.isdigit():
            raise ValueError(f"Invalid priority {item!r}; expected KIND=COUNT")
        priorities.append((kind_id, int(count)))
    return priorities


def build_strategy(name: str, fps: float, priorities: list[tuple[str, int]]) -> Strategy:
    feed_profile = FeedProfile(feeds_per_second=fps) if fps > 0 else None
    if name == "priority_list":
        return PriorityList(
            priorities,
            fallback=GreedyCheapest(),
            feed_profile=feed_profile,
        )
    return GreedyCheapest(feed_profile=feed_profile)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "simulate":
        _run_simulate(args)
    elif args.command == "leaderboard":
        _run_leaderboard(args)


def _run_simulate(args: argparse.Namespace) -> None:
    definition = load_economy(args.economy_module)
    try:
        priorities = parse_priorities(args.priority)
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(2)

    strategy = build_strategy(args.strategy, args.fps, priorities)
    sim = Simulation(
        definition=definition,
        strategy=strategy,
        duration=args.duration,
        tick_resolution=args.tick_resolution,
        stall_after=args.stall_after,
    )
    report = sim.run()
    print(format_text_report(report))

    if args.export_csv:
        from sourdough.export import export_csv
        export_csv(report, args.export_csv)
        print(f"\nCSV exported to {args.export_csv}_*.csv")

    if args.export_json:
        from sourdough.export import export_json
        export_json(report, args.export_json)
        print(f"\nJSON exported to {args.export_json}")

    if args.plot:
        from sourdough.visualization import plot_simulation
        plot_simulation(report, args.plot)
        print(f"\nPlot saved to {args.plot}")


def _run_leaderboard(args: argparse.Namespace) -> None:
    backend = JsonFileBackend(args.store)
    try:
        entries = asyncio.run(backend.ranked_list(limit=args.limit))
    except PersistenceUnavailable as exc:
        print(f"Error: {exc}")
        sys.exit(1)
    print(format_leaderboard(entries))
