"""Parse and normalize Google Books API responses."""
import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from bookfinder.models import Book

logger = logging.getLogger(__name__)


def _strings(value: Any) -> List[str]:
    """Keep only the string entries of a list field."""
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, str)]


def parse_book(item: Dict[str, Any]) -> Optional[Book]:
    """
    Parse a single book item from Google Books API.

    Args:
        item: Single item from Google Books API response

    Returns:
        Book object or None if parsing fails
    """
    try:
        volume_info = item.get("volumeInfo") or {}

        book_id = item.get("id", "")
        if not book_id:
            return None

        # Extract thumbnail (prefer higher quality)
        image_links = volume_info.get("imageLinks") or {}
        thumbnail = image_links.get("thumbnail") or image_links.get("smallThumbnail")

        return Book(
            id=book_id,
            title=volume_info.get("title", "Unknown Title"),
            authors=_strings(volume_info.get("authors")),
            description=volume_info.get("description"),
            categories=_strings(volume_info.get("categories")),
            thumbnail=thumbnail,
            language=volume_info.get("language", ""),
        )
    except (AttributeError, TypeError) as e:
        # APIs can be unpredictable
        logger.warning(f"Failed to parse book: {e}")
        return None


def parse_books_response(response_json: Dict[str, Any]) -> List[Book]:
    """
    Parse full Google Books API response.

    Args:
        response_json: Complete API response JSON

    Returns:
        List of Book objects (empty if no items found)
    """
    books = []

    for item in response_json.get("items") or []:
        book = parse_book(item)
        if book:
            books.append(book)

    return books


def deduplicate_books(books: List[Book]) -> List[Book]:
    """
    Remove duplicate books by ID.

    Args:
        books: List of Book objects

    Returns:
        Deduplicated list of books
    """
    return accept_new_books(books, language=None, seen_ids=set())


def accept_new_books(
    books: Iterable[Book],
    language: Optional[str],
    seen_ids: Set[str]
) -> List[Book]:
    """
    Keep books in the requested language whose ID has not been seen yet.

    ``seen_ids`` is updated with every accepted ID. A ``language`` of None
    accepts every language.

    Args:
        books: Books in arrival order
        language: Required language code, or None
        seen_ids: IDs already accepted

    Returns:
        Accepted books, arrival order preserved
    """
    accepted = []

    for book in books:
        if book.id in seen_ids:
            continue
        if language is not None and book.language != language:
            continue
        seen_ids.add(book.id)
        accepted.append(book)

    return accepted
