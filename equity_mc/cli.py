"""Command-line interface for the Equity Monte Carlo Harvester.

Runs a harvest against an in-memory workbook whose sampling slot holds a
fixed-fraction equity formula, then prints the results.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Any

from equity_mc.config import RunConfig, load_config
from equity_mc.errors import EquityMCError
from equity_mc.orchestrator import SimulationRun, run_simulation
from equity_mc.sampling import make_rng
from equity_mc.store import JsonFileValueStore
from equity_mc.workbook import build_equity_workbook

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(description="Equity Monte Carlo Harvester")

    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--sims", type=int, default=1000, help="Number of equity paths to sample"
    )
    parser.add_argument("--trades", type=int, default=400, help="Trades per path")
    parser.add_argument(
        "--win-rate", type=float, default=0.5, help="Probability a trade wins"
    )
    parser.add_argument(
        "--reward-risk", type=float, default=2.0, help="Reward-to-risk ratio"
    )
    parser.add_argument(
        "--risk-fraction",
        type=float,
        default=0.01,
        help="Fraction of equity risked per trade",
    )
    parser.add_argument(
        "--start-equity", type=float, default=10_000.0, help="Starting equity"
    )
    parser.add_argument(
        "--max-polls",
        type=int,
        default=None,
        help="Convergence gate poll limit (overrides config)",
    )
    parser.add_argument(
        "--poll-interval-ms",
        type=float,
        default=None,
        help="Pause between convergence polls (overrides config)",
    )
    parser.add_argument("--config", default=None, help="JSON run configuration")
    parser.add_argument(
        "--output", default=None, help="JSON file receiving the output slots"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging verbosity",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> RunConfig:
    """Load the config file, if any, and apply command-line overrides."""
    config = load_config(args.config) if args.config else RunConfig()

    overrides: dict[str, Any] = {}
    if args.max_polls is not None:
        overrides["max_polls"] = args.max_polls
    if args.poll_interval_ms is not None:
        overrides["poll_interval_ms"] = args.poll_interval_ms
    return replace(config, **overrides) if overrides else config


def results_payload(run: SimulationRun, args: argparse.Namespace) -> dict[str, Any]:
    """Build the JSON-serializable results document."""
    return {
        "sims": run.sample_count,
        "trades": args.trades,
        "win_rate": args.win_rate,
        "reward_risk": args.reward_risk,
        "risk_fraction": args.risk_fraction,
        "start_equity": args.start_equity,
        "polls": run.polls,
        "summary": run.statistics.as_dict(),
    }


def export_slots(run: SimulationRun, config: RunConfig, path: str) -> None:
    """Write the output slots and the sample count to a JSON file store."""
    bindings = config.bindings
    values: dict[str, Any] = {bindings.sample_count: run.sample_count}
    stats = run.statistics.as_dict()
    for field_name, slot in bindings.output_slots().items():
        values[slot] = stats[field_name]
    JsonFileValueStore(path).update(values)
    logger.info("Exported %d slots to %s", len(values), path)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = resolve_config(args)
        rng = make_rng(args.seed)
        workbook = build_equity_workbook(
            rng,
            args.sims,
            trades=args.trades,
            win_rate=args.win_rate,
            reward_risk=args.reward_risk,
            risk_fraction=args.risk_fraction,
            start_equity=args.start_equity,
            bindings=config.bindings,
        )
        run = run_simulation(workbook, config)
        if args.output:
            export_slots(run, config, args.output)
    except (EquityMCError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    results = results_payload(run, args)
    summary = results["summary"]

    print("Equity Monte Carlo Results")
    print("=" * 40)
    print(f"Sims: {results['sims']}")
    print(f"Trades per sim: {results['trades']}")
    print(f"Win rate: {results['win_rate']}")
    print(f"Reward/risk: {results['reward_risk']}")
    print(f"Risk fraction: {results['risk_fraction']}")
    print(f"Start equity: {results['start_equity']}")
    print()

    print("Terminal Equity Statistics:")
    print(f"Expected: {summary['expected_value']:.2f}")
    print(f"SD: {summary['standard_deviation']:.2f}")
    print(f"Min: {summary['min_value']:.2f}")
    print(f"Q1: {summary['q1']:.2f}")
    print(f"Median: {summary['median']:.2f}")
    print(f"Q3: {summary['q3']:.2f}")
    print(f"Max: {summary['max_value']:.2f}")

    print("\n" + "=" * 40)
    print("JSON Output:")
    print(json.dumps(results, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
