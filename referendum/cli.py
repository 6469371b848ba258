"""CLI entry point for differential testing across toolkits."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from referendum.errors import ReferendumError
from referendum.harnesses.cargo import CargoHarness
from referendum.harnesses.config import HarnessConfig
from referendum.models.record import VoteResult
from referendum.orchestrator import Referendum
from referendum.report import format_output, render_report
from referendum.voting import build_consensus_map

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

CARGO_SUBCOMMAND = "referendum"


def log_vote_summary(log: logging.Logger, vote_result: VoteResult) -> None:
    """Log how many records fell into each bucket."""
    log.info("=" * 80)
    log.info("Vote Summary:")
    log.info("=" * 80)
    log.info("  consensus:    %d", len(vote_result.matches))
    log.info("  dissent:      %d", len(vote_result.non_matches))
    log.info("  no consensus: %d", len(vote_result.no_consensus))

    for record in vote_result.non_matches:
        log.warning("Toolkit %s dissents on %s", record.toolkit, record.name)
    for record in vote_result.no_consensus:
        log.warning("No consensus on %s (toolkit %s)", record.name, record.toolkit)


def print_report(vote_result: VoteResult, output_format: str) -> None:
    """Print the vote as text sections or as a JSON document."""
    if output_format == "json":
        print(json.dumps(format_output(vote_result), indent=2))
        return

    consensus_map = build_consensus_map(vote_result.matches)
    for section in render_report(vote_result, consensus_map):
        print(section)


async def run(
    toolkits: Sequence[str],
    config: HarnessConfig,
    concurrency: int = 1,
    output_format: str = "text",
) -> int:
    """Compare test results across toolkits and return exit code."""
    log = logging.getLogger("referendum")

    harness = CargoHarness(config=config)
    referendum = Referendum(harness=harness, max_concurrency=concurrency)

    try:
        vote_result = await referendum.run(toolkits)
    except ReferendumError as e:
        log.error("%s", e)
        return EXIT_FAILURE

    log_vote_summary(log, vote_result)

    try:
        print_report(vote_result, output_format)
    except ReferendumError as e:
        log.error("%s", e)
        return EXIT_FAILURE

    return EXIT_SUCCESS


def positive_int(value: str) -> int:
    """Parse a strictly positive integer argument."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def strip_cargo_subcommand(argv: Sequence[str]) -> Sequence[str]:
    """Drop the subcommand name cargo passes when invoked as ``cargo referendum``."""
    if argv and argv[0] == CARGO_SUBCOMMAND:
        return argv[1:]
    return argv


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="cargo referendum",
        description="Differential testing tool for unit tests",
    )
    parser.add_argument(
        "toolkits",
        nargs="+",
        help="Toolchains to run the test suite under (e.g., stable nightly)",
    )
    parser.add_argument(
        "--manifest-path",
        type=Path,
        default=None,
        help="Path to Cargo.toml of the crate under test",
    )
    parser.add_argument(
        "--working-dir",
        type=Path,
        default=None,
        help="Directory to run the test suite in",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-toolkit timeout in seconds",
    )
    parser.add_argument(
        "--concurrency",
        type=positive_int,
        default=1,
        help="Number of toolkits to run at the same time",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=("text", "json"),
        default="text",
        help="Report format",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(
        list(strip_cargo_subcommand(sys.argv[1:] if argv is None else argv))
    )

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = HarnessConfig(
            working_dir=args.working_dir,
            manifest_path=args.manifest_path,
            timeout=args.timeout,
        )
    except ValidationError as e:
        logging.getLogger("referendum").error("Invalid configuration: %s", e)
        sys.exit(EXIT_USAGE)

    exit_code = asyncio.run(
        run(
            toolkits=args.toolkits,
            config=config,
            concurrency=args.concurrency,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
