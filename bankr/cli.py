"""
Command-line interface for Bankr.

Usage:
    bankr serve --host 0.0.0.0 --port 3000
    bankr index --reindex --batch-size 500
"""

from __future__ import annotations

import argparse
import logging
import sys

from bankr.config import get_settings
from bankr.core.exceptions import EngineError, StartupError
from bankr.core.logging import setup_logging

logger = logging.getLogger("bankr")


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    try:
        uvicorn.run(
            "bankr.main:app",
            host=args.host or settings.host,
            port=args.port or settings.port,
            reload=args.reload,
        )
    except SystemExit as e:
        # uvicorn exits with its own code when the lifespan fails
        if e.code:
            logger.error("Server failed to start (uvicorn exit code %s)", e.code)
            return 1
    return 0


def cmd_index(args: argparse.Namespace) -> int:
    """Build the search index from the branch CSV, then exit."""
    from bankr.services.context import create_client
    from bankr.services.indexing import ensure_index, load_records

    settings = get_settings()
    if args.batch_size is not None:
        settings = settings.model_copy(update={"batch_size": args.batch_size})

    client = create_client(settings)
    try:
        built = ensure_index(
            client,
            settings,
            lambda: load_records(settings.data_path),
            re_index=args.reindex,
        )
    except (StartupError, EngineError) as e:
        logger.error("Indexing failed: %s", e)
        return 1
    finally:
        client.close()

    if built:
        logger.info("Index %s is ready", settings.index_name)
    else:
        logger.info("Index %s already exists; pass --reindex to rebuild it", settings.index_name)
    return 0


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="bankr",
        description="Search Indian bank branches by name, abbreviation, place or code",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- serve ---
    p_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", help="Bind address (default: settings.host)")
    p_serve.add_argument("--port", type=int, help="Bind port (default: settings.port)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # --- index ---
    p_index = subparsers.add_parser("index", help="Build the search index and exit")
    p_index.add_argument(
        "--reindex",
        action="store_true",
        default=None,
        help="Drop and rebuild an existing index (default: settings.re_index)",
    )
    p_index.add_argument("--batch-size", type=_positive_int, help="Documents per bulk request")
    p_index.set_defaults(func=cmd_index)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(debug=True if args.verbose else None)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
