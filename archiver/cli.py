"""CLI interface for Archiver - compress, index and search directory trees."""

import argparse
import logging
import sys
from pathlib import Path

from archiver.commands import build_index, compress, search
from archiver.config import Settings, get_settings
from archiver.log import Colors, setup_logging
from archiver.storage import SearchResult

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="archiver",
        description="Split directories into small zip archives and search them through an index.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every skipped and dropped file",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Index a directory")
    index_parser.add_argument(
        "-s",
        "--source-directory",
        type=Path,
        required=True,
        help="Directory to read data from.",
    )
    index_parser.add_argument(
        "-i",
        "--index-directory",
        type=Path,
        required=True,
        help="Directory to create the index in.",
    )
    index_parser.add_argument("--rules", type=Path, help="YAML file overriding classification rules")

    compress_parser = subparsers.add_parser(
        "compress",
        help="Compress a directory into small zip files and index it for a faster lookup later",
    )
    compress_parser.add_argument(
        "-s",
        "--input-directory",
        type=Path,
        required=True,
        help="Directory to compress and index.",
    )
    compress_parser.add_argument(
        "-t",
        "--output-directory",
        type=Path,
        required=True,
        help="Output root directory.",
    )
    compress_parser.add_argument(
        "-p",
        "--promoted",
        action="append",
        metavar="NAME",
        help="Folder name archived as its own root wherever it is nested (repeatable)",
    )
    compress_parser.add_argument("--rules", type=Path, help="YAML file overriding classification rules")

    search_parser = subparsers.add_parser("search", help="Search files using the index")
    search_parser.add_argument(
        "-i",
        "--index",
        type=Path,
        required=True,
        help="Directory (or zip created by the compress command) to read the index from.",
    )
    search_parser.add_argument("query", nargs="+", help="Terms to search for, all must match.")

    return parser


def print_results(result: SearchResult) -> None:
    """Print search hits, best first."""
    print(f"Matched {result.total_hits}/{result.total_documents} documents:")
    for hit in result.hits:
        print(f"Path: '{hit.archive or ''}' > '{hit.path}' (score={hit.score:.4f})")


def run(args: argparse.Namespace, settings: Settings) -> None:
    if args.command == "index":
        count = build_index(args.source_directory, args.index_directory, settings)
        print(f"{Colors.GREEN}Indexed {count} files ✓{Colors.RESET}")
    elif args.command == "compress":
        promoted = frozenset(args.promoted) if args.promoted else None
        result = compress(args.input_directory, args.output_directory, settings, promoted)
        print(
            f"{Colors.GREEN}Created {len(result.archives)} archives, "
            f"indexed {result.records} files ✓{Colors.RESET}"
        )
    elif args.command == "search":
        print_results(search(args.index, args.query))


def cli(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    # Load settings
    try:
        settings = get_settings(rules_file=getattr(args, "rules", None))
    except Exception as e:
        logger.error(f"{Colors.RED}Failed to load settings: {e}{Colors.RESET}")
        sys.exit(1)

    try:
        run(args, settings)
    except Exception as e:
        logger.error(f"{Colors.RED}Error: {e}{Colors.RESET}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
