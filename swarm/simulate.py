"""Command-line runner for the chunk swarm simulation."""

import argparse
from typing import List, Optional
from distribution import Distribution
from run_observer import RunObserver, SilentObserver, SummaryObserver, VerboseObserver
from swarm_config import SwarmConfig, load_descriptors
from swarm_types import RunTotals, Strategy


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate distribution of a chunked file through a peer swarm"
    )
    parser.add_argument(
        "-c", "--chunks", type=int, required=True, help="Number of chunks in the file"
    )
    parser.add_argument(
        "-p",
        "--peers",
        type=int,
        required=True,
        help="Total number of peers, seeds included",
    )
    parser.add_argument("-s", "--seeds", type=int, default=1, help="Number of seeds")
    parser.add_argument(
        "--selfish",
        type=int,
        default=None,
        help="Number of peers that stop uploading once complete",
    )
    parser.add_argument(
        "--freerider", type=int, default=None, help="Number of peers that never upload"
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in Strategy],
        default=None,
        help="Chunk selection strategy shared by all downloaders",
    )
    parser.add_argument("--speed-fast", type=int, default=1, help="Fast speed tier")
    parser.add_argument("--speed-medium", type=int, default=1, help="Medium speed tier")
    parser.add_argument("--speed-slow", type=int, default=1, help="Slow speed tier")
    parser.add_argument(
        "--peer-config",
        metavar="FILE",
        help="File of per-peer descriptors such as 'sms' or 'f'",
    )
    parser.add_argument(
        "--random-seed", type=int, default=None, help="Seed for random number generation"
    )
    parser.add_argument(
        "-S", "--silent", action="store_true", help="Do not print progress reports"
    )
    parser.add_argument(
        "-V", "--verbose", action="store_true", help="Print every simulation event"
    )
    return parser


def _build_config(parser: argparse.ArgumentParser, args: argparse.Namespace) -> SwarmConfig:
    """Turn parsed arguments into a validated configuration."""
    speeds = (args.speed_fast, args.speed_medium, args.speed_slow)
    try:
        if args.peer_config is not None:
            if (
                args.selfish is not None
                or args.freerider is not None
                or args.strategy is not None
            ):
                parser.error(
                    "--peer-config cannot be combined with --selfish, --freerider or --strategy"
                )
            try:
                descriptors = load_descriptors(args.peer_config)
            except OSError as exc:
                parser.error(f"cannot read peer configuration '{args.peer_config}': {exc}")
            return SwarmConfig.from_descriptors(
                args.chunks, args.peers, args.seeds, *speeds, descriptors
            )
        return SwarmConfig.from_counts(
            args.chunks,
            args.peers,
            args.seeds,
            *speeds,
            number_selfish=args.selfish or 0,
            number_freeriders=args.freerider or 0,
            strategy=Strategy(args.strategy or Strategy.RAREST_FIRST.value),
        )
    except ValueError as exc:
        parser.error(str(exc))


def _observer(args: argparse.Namespace) -> RunObserver:
    if args.silent:
        return SilentObserver()
    if args.verbose:
        return VerboseObserver()
    return SummaryObserver()


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments, run one distribution and print its totals."""
    parser = _parser()
    args = parser.parse_args(argv)
    if args.silent and args.verbose:
        parser.error("--silent and --verbose are mutually exclusive")

    config = _build_config(parser, args)
    rounds = Distribution(config).run(args.random_seed, _observer(args))
    totals = RunTotals.from_rounds(rounds)

    print()
    print(f"Number of rounds: {totals.number_rounds}")
    print(f"Number of chunks exchanged: {totals.exchanged_chunks}")
    print(f"Execution time: {totals.execution_time:.6f}s")


if __name__ == "__main__":
    main()
