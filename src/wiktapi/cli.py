"""
Command-line interface for importing and querying the dictionary.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from .config import Settings, load_settings
from .dictionary import Dictionary
from .exceptions import ConfigError, DictionaryError
from .importer import index_database, run_import


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the wiktapi CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"[CONFIG ERROR] {e}", file=sys.stderr)
        if e.line:
            print(f"               Line: {e.line}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    try:
        return args.func(args, settings)
    except DictionaryError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="wiktapi",
        description="Import Wiktionary extracts and query the dictionary database",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s (wiktapi)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML settings file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(title="commands", dest="command")

    # import command
    import_parser = subparsers.add_parser(
        "import",
        help="Import JSONL files into the database",
    )
    import_parser.add_argument(
        "--edition",
        type=str,
        help="Import only <data-dir>/<edition>.jsonl",
    )
    import_parser.add_argument(
        "--fresh",
        action="store_true",
        help="Drop the words table before importing",
    )
    import_parser.add_argument(
        "--output",
        type=Path,
        help="Database path (overrides db_path)",
    )
    import_parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding <edition>.jsonl files (overrides data_dir)",
    )
    import_parser.add_argument(
        "--skip-indexes",
        action="store_true",
        help="Defer index build and consolidation to the index command",
    )
    import_parser.set_defaults(func=cmd_import)

    # index command
    index_parser = subparsers.add_parser(
        "index",
        help="Build indexes on a database imported with --skip-indexes",
    )
    index_parser.add_argument(
        "--output",
        type=Path,
        help="Database path (overrides db_path)",
    )
    index_parser.set_defaults(func=cmd_index)

    # lookup command
    lookup_parser = subparsers.add_parser(
        "lookup",
        help="Show the full entry for a word",
    )
    lookup_parser.add_argument("word", type=str, help="Word to look up")
    lookup_parser.add_argument("--category", type=str, help="Restrict to a category")
    lookup_parser.add_argument("--edition", type=str, help="Restrict to an edition")
    lookup_parser.set_defaults(func=cmd_lookup)

    # search command
    search_parser = subparsers.add_parser(
        "search",
        help="Prefix search over headwords",
    )
    search_parser.add_argument("q", type=str, help="Prefix to search for")
    search_parser.add_argument("--category", type=str, help="Restrict to a category")
    search_parser.set_defaults(func=cmd_search)

    # words command
    words_parser = subparsers.add_parser(
        "words",
        help="List words page by page",
    )
    words_parser.add_argument("--page", type=str, help="Page number (default: 1)")
    words_parser.add_argument(
        "--limit",
        type=str,
        help="Page size, at most 200 (default: 50)",
    )
    words_parser.add_argument("--category", type=str, help="Restrict to a category")
    words_parser.add_argument("--edition", type=str, help="Restrict to an edition")
    words_parser.set_defaults(func=cmd_words)

    # categories / languages commands
    categories_parser = subparsers.add_parser(
        "categories",
        help="List categories present in the database",
    )
    categories_parser.set_defaults(func=cmd_categories)

    languages_parser = subparsers.add_parser(
        "languages",
        help="List editions present in the database",
    )
    languages_parser.set_defaults(func=cmd_languages)

    return parser


def cmd_import(args: argparse.Namespace, settings: Settings) -> int:
    """Handle import command."""
    db_path = args.output or settings.db_path
    print(f"\nImporting into {db_path}...")

    stats = run_import(
        settings,
        edition=args.edition,
        fresh=args.fresh,
        skip_indexes=args.skip_indexes,
        db_path=db_path,
        data_dir=args.data_dir,
    )

    print("\nResults:")
    print(f"  Inserted: {stats.inserted:,}")
    print(f"  Skipped:  {stats.skipped:,}")
    if args.skip_indexes:
        print(f"\nTo finish: wiktapi index --output {db_path}")
    return 0


def cmd_index(args: argparse.Namespace, settings: Settings) -> int:
    """Handle index command."""
    db_path = args.output or settings.db_path
    print(f"\nIndexing {db_path}...")
    count = index_database(db_path)
    print(f"  Rows: {count:,}")
    return 0


def cmd_lookup(args: argparse.Namespace, settings: Settings) -> int:
    with Dictionary(settings.db_path) as d:
        _print_json(d.word(args.word, category=args.category, edition=args.edition))
    return 0


def cmd_search(args: argparse.Namespace, settings: Settings) -> int:
    with Dictionary(settings.db_path) as d:
        _print_json(d.search(args.q, category=args.category))
    return 0


def cmd_words(args: argparse.Namespace, settings: Settings) -> int:
    with Dictionary(settings.db_path) as d:
        _print_json(d.words(
            page=args.page, limit=args.limit,
            category=args.category, edition=args.edition,
        ))
    return 0


def cmd_categories(args: argparse.Namespace, settings: Settings) -> int:
    with Dictionary(settings.db_path) as d:
        _print_json(d.categories())
    return 0


def cmd_languages(args: argparse.Namespace, settings: Settings) -> int:
    with Dictionary(settings.db_path) as d:
        _print_json(d.languages())
    return 0


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    sys.exit(main())
