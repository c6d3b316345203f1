"""CLI entry point for tagnav."""

import argparse
import sys
from typing import NoReturn

from loguru import logger

from .. import __version__
from ..core.config import Config
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="tagnav",
        description="Inline tag navigator - line-level tag index and queries",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", help="Path to a TOML configuration file")

    subparsers = parser.add_subparsers(dest="command", required=False)

    tags_parser = subparsers.add_parser("tags", help="List tags with occurrence counts")
    commands.add_tags_arguments(tags_parser)

    query_parser = subparsers.add_parser("query", help="Run a boolean tag query")
    commands.add_query_arguments(query_parser)

    lines_parser = subparsers.add_parser("lines", help="Show tags applying to a line")
    lines_parser.add_argument("path", help="Directory of markdown documents")
    lines_parser.add_argument("document", help="Document id (path relative to the directory)")
    lines_parser.add_argument("line", type=int, help="Line number (0-based)")

    return parser


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = Config.from_env_or_file(args.config)

        if args.command == "tags":
            commands.handle_tags(args, config)
        elif args.command == "query":
            commands.handle_query(args, config)
        elif args.command == "lines":
            commands.handle_lines(args, config)
        else:
            parser.print_help()

        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
