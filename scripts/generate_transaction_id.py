#!/usr/bin/env python3
"""
Print an X-Client-Transaction-Id for a method and path.

Derives the session from the live home page, or offline from a saved home
page and on-demand script.
"""

import sys
import asyncio
import argparse
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

# Add repository root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from transaction import TransactionConfig, TransactionError, parse, parse_indices, generate_transaction_id
from session_manager import SessionManager, create_session
from api.fetch_client import FetchError
from observability import setup_logging, get_logger

logger = get_logger("generate_transaction_id")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate an X-Client-Transaction-Id header value"
    )
    parser.add_argument(
        "--method",
        default="GET",
        help="HTTP method of the request to sign"
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--path",
        help="URL path of the request to sign"
    )
    target.add_argument(
        "--url",
        help="Full URL; only its path is signed"
    )
    parser.add_argument(
        "--config",
        help="YAML configuration file (or set XCT_CONFIG env var)"
    )
    parser.add_argument(
        "--home-file",
        help="Saved home page HTML; derive offline instead of fetching"
    )
    parser.add_argument(
        "--ondemand-file",
        help="Saved on-demand script, required with --home-file"
    )
    parser.add_argument(
        "--time-now",
        type=int,
        help="Fixed time value instead of the current clock"
    )
    parser.add_argument(
        "--random-byte",
        type=int,
        choices=range(256),
        metavar="0-255",
        help="Fixed random byte"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (defaults to the configured log_level)"
    )
    return parser


def _offline_transaction_id(args, path: str) -> str:
    html = Path(args.home_file).read_text(encoding="utf-8")
    script_text = Path(args.ondemand_file).read_text(encoding="utf-8")

    session = create_session(parse(html), parse_indices(script_text))
    return generate_transaction_id(
        args.method,
        path,
        session,
        time_now=args.time_now,
        random_byte=args.random_byte,
    )


async def _online_transaction_id(args, config: TransactionConfig, path: str) -> str:
    manager = SessionManager(config)
    try:
        return await manager.generate_transaction_id(
            args.method,
            path,
            time_now=args.time_now,
            random_byte=args.random_byte,
        )
    finally:
        await manager.close()


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if bool(args.home_file) != bool(args.ondemand_file):
        parser.error("--home-file and --ondemand-file must be given together")

    try:
        config = TransactionConfig.load(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    # Logs go to stderr, stdout carries only the token
    setup_logging(args.log_level or config.log_level, stream=sys.stderr)
    path = args.path if args.path else urlparse(args.url).path

    try:
        if args.home_file:
            transaction_id = _offline_transaction_id(args, path)
        else:
            transaction_id = asyncio.run(_online_transaction_id(args, config, path))
    except (TransactionError, FetchError, OSError, ValueError) as e:
        logger.error(f"Could not generate transaction id: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(transaction_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
