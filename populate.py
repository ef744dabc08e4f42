#!/usr/bin/env python3
"""Portfolio Sheets CLI - fill the portfolio page from published sheets."""
import argparse
import asyncio
import sys
import json
from datetime import timedelta
from tabulate import tabulate
from portfolio.cache import SheetCache
from portfolio.client import SheetClient
from portfolio.config import Config
from portfolio.database import Database
from portfolio.orchestrator import LANGUAGE_SETTING, initialize_dynamic_content
from portfolio.page import Page
from portfolio.renderers import show_all
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

LANGUAGES = ("en", "es")
TABLE_COLUMNS = 6


def setup_database(config: Config) -> Database:
    """Initialize database."""
    db = Database(config.DATABASE_URL)
    db.init_schema()
    return db


def cache_window(config: Config) -> timedelta:
    return timedelta(seconds=config.CACHE_DURATION)


async def build_page(args, config: Config):
    """Populate an HTML page with books, talks and news."""
    db = setup_database(config)

    try:
        if args.lang:
            db.set_setting(LANGUAGE_SETTING, args.lang)

        page = Page.from_file(args.input)
        session = await initialize_dynamic_content(page, db, config)

        for section in args.show_all or []:
            shown = show_all(page, session, section)
            logger.info(f"Expanded {section}: {shown} items")

        output = args.output or args.input
        page.write(output)
        logger.info(f"✅ Page built ({session.language}): {output}")

    finally:
        db.close()


def fetch_sheet(args, config: Config):
    """Fetch one sheet and display its records."""
    url = config.sheet_urls()[args.category]

    with SheetClient(timeout=config.DEFAULT_TIMEOUT) as client:
        if args.no_cache:
            records = client.fetch(url)
        else:
            db = setup_database(config)
            try:
                cache = SheetCache(db, client=client, window=cache_window(config))
                records = cache.get_or_fetch(config.CACHE_KEYS[args.category], url)
            finally:
                db.close()

    logger.info(f"Found {len(records)} {args.category} records")
    display_records(records, args.format)


def _truncate(value: str, width: int = 30) -> str:
    return value[:width] + "..." if len(value) > width else value


def display_records(records, format_type: str):
    """Display sheet records in specified format."""
    if not records:
        print("No records.")
        return

    if format_type == "table":
        headers = list(records[0].keys())[:TABLE_COLUMNS]
        rows = [
            [_truncate(record.get(header, "")) for header in headers]
            for record in records
        ]
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))

    elif format_type == "json":
        print(json.dumps(records, indent=2, ensure_ascii=False))

    elif format_type == "compact":
        for i, record in enumerate(records, 1):
            title = record.get("title_en") or record.get("title_es") or "Untitled"
            print(f"{i}. {title}")


def language(args, config: Config):
    """Show or store the display language."""
    db = setup_database(config)

    try:
        if args.code:
            db.set_setting(LANGUAGE_SETTING, args.code)
            logger.info(f"✅ Language set to {args.code}")
        else:
            print(db.get_setting(LANGUAGE_SETTING, config.DEFAULT_LANGUAGE))
    finally:
        db.close()


def show_cache(args, config: Config):
    """Show stored sheet snapshots."""
    db = setup_database(config)

    try:
        stats = db.get_stats(cache_window(config))

        if not stats:
            print("Cache is empty.")
            return

        rows = [
            [
                entry["key"],
                entry["rows"],
                entry["fetched_at"].strftime("%Y-%m-%d %H:%M:%S %Z"),
                str(entry["age"]).split(".")[0],
                "yes" if entry["fresh"] else "no",
            ]
            for entry in stats
        ]
        print("\n" + tabulate(rows, headers=["Key", "Rows", "Fetched", "Age", "Fresh"], tablefmt="grid"))

    finally:
        db.close()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Portfolio Sheets - populate the portfolio page from Google Sheets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fill index.html in place with the stored language
  %(prog)s build index.html

  # Spanish page with every talk listed
  %(prog)s build index.html --output es/index.html --lang es --show-all talks

  # Inspect a sheet without touching the cache
  %(prog)s fetch talks --format compact --no-cache

  # Show cache state
  %(prog)s cache
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Build command
    build_parser = subparsers.add_parser("build", help="Populate an HTML page")
    build_parser.add_argument("input", help="HTML page to populate")
    build_parser.add_argument("--output", help="Output file (default: overwrite input)")
    build_parser.add_argument("--lang", choices=LANGUAGES, help="Store and use this language")
    build_parser.add_argument("--show-all", nargs="+", choices=["talks", "news"], help="Render every item of these sections")

    # Fetch command
    fetch_parser = subparsers.add_parser("fetch", help="Fetch and display one sheet")
    fetch_parser.add_argument("category", choices=["books", "talks", "news"], help="Sheet to fetch")
    fetch_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")
    fetch_parser.add_argument("--no-cache", action="store_true", help="Bypass the cache")

    # Language command
    language_parser = subparsers.add_parser("language", help="Show or set the display language")
    language_parser.add_argument("code", nargs="?", choices=LANGUAGES, help="Language to store")

    # Cache command
    subparsers.add_parser("cache", help="Show cached sheet snapshots")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = Config()

    try:
        if args.command == "build":
            asyncio.run(build_page(args, config))

        elif args.command == "fetch":
            fetch_sheet(args, config)

        elif args.command == "language":
            language(args, config)

        elif args.command == "cache":
            show_cache(args, config)

    except KeyboardInterrupt:
        logger.info("\n⚠️  Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"❌ Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
