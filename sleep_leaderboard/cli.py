#!/usr/bin/env python3
"""
Command-line interface for sleep-leaderboard.
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Optional

from .app import configure_logging, run_leaderboard
from .config import ConfigurationError, load_configuration
from .extractor import extract_daily_record
from .github_client import SourceFetchError
from .report import dump_snapshot


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="sleep-leaderboard",
        description="Daily sleep leaderboard built from sleep-log issues"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Build and publish the leaderboard")
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the summary block and snapshot instead of publishing"
    )
    run_parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    # Extract command
    extract_parser = subparsers.add_parser("extract", help="Extract one record from a saved issue body")
    extract_parser.add_argument("file", help="File containing the issue body ('-' for stdin)")
    extract_parser.add_argument("--date", required=True, help="Target date (YYYY-MM-DD)")

    return parser


def _run(args: argparse.Namespace) -> int:
    configure_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_configuration()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    try:
        result = run_leaderboard(config, dry_run=args.dry_run)
    except SourceFetchError as e:
        logger.error(f"Fetching issues failed: {e}")
        return 1
    except OSError as e:
        logger.error(f"Publishing failed: {e}")
        return 1

    if args.dry_run:
        print(result.block)
        print()
        print(dump_snapshot(result.snapshot), end="")
    return 0


def _extract(args: argparse.Namespace) -> int:
    if args.file == "-":
        body = sys.stdin.read()
    else:
        with open(args.file, "r", encoding="utf-8") as f:
            body = f.read()

    record = extract_daily_record(body, args.date)
    if record is None:
        print(f"No complete record for {args.date}", file=sys.stderr)
        return 1

    print(json.dumps(asdict(record), indent=2, ensure_ascii=False))
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "run":
            return _run(args)
        elif args.command == "extract":
            return _extract(args)
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
