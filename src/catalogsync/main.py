#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from catalogsync.app import load_drafts, sync_resources
from catalogsync.common.logging import configure_logging
from catalogsync.config import ConfigurationError, get_sync_config
from catalogsync.domain.resources import STRATEGIES
from catalogsync.domain.sync import SyncOptions

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise resource drafts into the store")
    parser.add_argument(
        "drafts",
        type=Path,
        help="JSON-lines file with one resource draft per line",
    )
    parser.add_argument(
        "--resource",
        required=True,
        choices=sorted(STRATEGIES),
        help="Resource type of the drafts",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        help="Drafts per batch (default: SYNC_BATCH_SIZE or 50)",
    )
    parser.add_argument(
        "--parallelism",
        type=int,
        help="Create/update calls in flight per batch (default: SYNC_PARALLELISM or 5)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    return parser.parse_args(list(argv))


def _build_options(args: argparse.Namespace) -> SyncOptions:
    options = SyncOptions.from_config(get_sync_config())
    overrides: dict[str, int] = {}
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size
    if args.parallelism is not None:
        overrides["parallelism"] = args.parallelism
    return replace(options, **overrides)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        parsed_args = _parse_args(argv if argv is not None else sys.argv[1:])
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        options = _build_options(parsed_args)
        drafts = load_drafts(parsed_args.drafts)
    except (ValueError, ConfigurationError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        statistics = sync_resources(parsed_args.resource, drafts, options=options)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(statistics.report_message())
    if statistics.failed or statistics.missing_dependency:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
