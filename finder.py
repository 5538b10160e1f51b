#!/usr/bin/env python3
"""Book Finder CLI - discover categories and page through book searches."""
import argparse
import asyncio
import sys
import json
from tabulate import tabulate
from bookfinder.async_client import AsyncGoogleBooksClient
from bookfinder.config import Config, SUPPORTED_LANGUAGES
from bookfinder.discovery import CategoryDiscoverer
from bookfinder.exceptions import ConfigurationError
from bookfinder.links import amazon_search_url
from bookfinder.session import SearchSession
import logging

logger = logging.getLogger(__name__)


async def prepare_session(client, args, config: Config) -> SearchSession:
    """Create a session, running category discovery unless disabled."""
    session = SearchSession(client, language=config.DEFAULT_LANGUAGE)

    if not args.no_discover:
        result = await session.discover_categories(CategoryDiscoverer(client))
        if not result.ok:
            logger.warning("⚠️  Using default categories")

    return session


async def list_categories(args, config: Config):
    """Show the selectable categories."""
    async with AsyncGoogleBooksClient(
        api_key=config.GOOGLE_BOOKS_API_KEY,
        timeout=config.DEFAULT_TIMEOUT
    ) as client:
        session = await prepare_session(client, args, config)

        options = [{"id": option.id, "label": option.label} for option in session.catalog.options]
        if args.format == "json":
            print(json.dumps(options, indent=2, ensure_ascii=False))
        else:
            print("\n" + tabulate(
                [[o["id"], o["label"]] for o in options],
                headers=["ID", "Category"],
                tablefmt="grid"
            ))


async def search_books(args, config: Config):
    """Search books for the chosen categories, loading extra pages on demand."""
    async with AsyncGoogleBooksClient(
        api_key=config.GOOGLE_BOOKS_API_KEY,
        timeout=config.DEFAULT_TIMEOUT
    ) as client:
        session = await prepare_session(client, args, config)
        session.set_language(args.language or config.DEFAULT_LANGUAGE)

        for name in args.category or []:
            try:
                session.toggle_category(session.catalog.find(name).id)
            except KeyError:
                logger.warning(f"Unknown category: {name}")

        logger.info(f"Searching: {session.current_query()}")
        await session.search()

        # Each extra page stands in for one near-bottom scroll signal
        for _ in range(args.pages - 1):
            if not await session.on_scroll(True):
                break

        if session.state.last_error:
            logger.error(session.state.last_error)

        logger.info(f"Found {len(session.books)} books (exhausted={session.state.exhausted})")
        display_books(session.books, args.format, config.AMAZON_TAG)


def display_books(books, format_type: str, tag=None):
    """Display books in specified format."""
    if format_type == "table":
        headers = ["Title", "Authors", "Language", "Link"]
        rows = [
            [
                book.title[:50] + "..." if len(book.title) > 50 else book.title,
                book.authors_str[:30] + "..." if len(book.authors_str) > 30 else book.authors_str,
                book.language,
                amazon_search_url(book.title, book.primary_author, tag)
            ]
            for book in books
        ]
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))

    elif format_type == "json":
        books_dict = [
            {
                "id": book.id,
                "title": book.title,
                "authors": book.authors,
                "description": book.description,
                "categories": book.categories,
                "thumbnail": book.thumbnail,
                "language": book.language,
                "link": amazon_search_url(book.title, book.primary_author, tag)
            }
            for book in books
        ]
        print(json.dumps(books_dict, indent=2, ensure_ascii=False))

    elif format_type == "compact":
        for i, book in enumerate(books, 1):
            print(f"{i}. {book.title} - {book.authors_str}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Book Finder - category search with infinite paging",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List discovered categories
  %(prog)s categories

  # Search two categories in English, three pages deep
  %(prog)s search -c Fiction -c History --language en --pages 3
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Categories command
    categories_parser = subparsers.add_parser("categories", help="List selectable categories")
    categories_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")
    categories_parser.add_argument("--no-discover", action="store_true", help="Use the default categories")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search for books")
    search_parser.add_argument("-c", "--category", action="append", help="Category ID or label (repeatable)")
    search_parser.add_argument("--language", choices=sorted(SUPPORTED_LANGUAGES), help="Result language")
    search_parser.add_argument("--pages", type=int, default=1, help="Pages to load (default: 1)")
    search_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")
    search_parser.add_argument("--no-discover", action="store_true", help="Use the default categories")

    return parser


def main():
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = Config()

    # Configure logging
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        config.validate()

        if args.command == "categories":
            asyncio.run(list_categories(args, config))

        elif args.command == "search":
            asyncio.run(search_books(args, config))

    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("\n⚠️  Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"❌ Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
