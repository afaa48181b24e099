#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from changestage.adapters.sqlalchemy.unit_of_work import startup
from changestage.app import submit_change_set_file
from changestage.config import (
    ConfigurationError,
    configure_logging,
    get_submit_config,
    load_schema,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply a change-set document to a database")
    parser.add_argument(
        "document",
        type=Path,
        help="Path to the JSON change-set document",
    )
    parser.add_argument(
        "--schema",
        type=str,
        help="Entity schema as 'module:attribute' (defaults to $CHANGESTAGE_SCHEMA)",
    )
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to $DATABASE_URI or the local data dir)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Prepare the change set and roll it back instead of committing",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        config = get_submit_config(schema_ref=parsed_args.schema)
        schema = load_schema(config.schema_ref)
        startup(database_uri=parsed_args.database_uri, force=True)
        result = submit_change_set_file(
            parsed_args.document,
            schema=schema,
            dry_run=parsed_args.dry_run,
        )
    except (ConfigurationError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    if not result.ok:
        print(
            f"Error: entry {result.failed_index} failed ({result.error_kind}): {result.error}",
            file=sys.stderr,
        )
        sys.exit(1)

    action = "Prepared" if parsed_args.dry_run else "Applied"
    print(f"{action} {result.prepared} of {result.total} entries")


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
