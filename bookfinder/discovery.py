"""Category discovery from a sample of search results."""
import logging
from typing import Iterable, List, Sequence, Tuple

from bookfinder.async_client import AsyncGoogleBooksClient
from bookfinder.exceptions import TransportError
from bookfinder.models import Book, CategoryCount, CategoryOption, DiscoveryResult
from bookfinder.parse import parse_books_response

logger = logging.getLogger(__name__)

DISCOVERY_TERM = "libros"
DISCOVERY_PAGE_SIZE = 40

DEFAULT_CATEGORIES = (
    CategoryOption("fiction", "Ficción"),
    CategoryOption("science", "Ciencia"),
    CategoryOption("history", "Historia"),
    CategoryOption("technology", "Tecnología"),
)


def rank_categories(books: Iterable[Book]) -> List[CategoryCount]:
    """
    Count category labels across books, most frequent first.

    Ties keep the order in which each label was first seen.
    """
    counts = {}
    for book in books:
        for label in book.categories:
            if not isinstance(label, str):
                continue
            counts[label] = counts.get(label, 0) + 1

    # sorted() is stable, so equal counts stay in first-seen order
    ranked = sorted(counts.items(), key=lambda entry: -entry[1])
    return [CategoryCount(label, count) for label, count in ranked]


def options_from_counts(ranked: Sequence[CategoryCount]) -> Tuple[CategoryOption, ...]:
    """Turn ranked labels into selectable options with fresh IDs."""
    return tuple(CategoryOption(f"cat{index}", entry.label) for index, entry in enumerate(ranked))


class CategoryCatalog:
    """The selectable category set, replaced wholesale."""

    def __init__(self, options: Sequence[CategoryOption] = DEFAULT_CATEGORIES):
        self._options = tuple(options)

    @property
    def options(self) -> Tuple[CategoryOption, ...]:
        return self._options

    def replace(self, options: Sequence[CategoryOption]):
        # Single assignment so readers never see a partial list
        self._options = tuple(options)

    def __contains__(self, category_id: str) -> bool:
        return any(option.id == category_id for option in self._options)

    def __len__(self) -> int:
        return len(self._options)

    def find(self, id_or_label: str) -> CategoryOption:
        """Look up an option by ID, then by case-insensitive label."""
        for option in self._options:
            if option.id == id_or_label:
                return option
        for option in self._options:
            if option.label.lower() == id_or_label.lower():
                return option
        raise KeyError(id_or_label)


class CategoryDiscoverer:
    """Builds a ranked category list from one broad sample query."""

    def __init__(
        self,
        client: AsyncGoogleBooksClient,
        term: str = DISCOVERY_TERM,
        page_size: int = DISCOVERY_PAGE_SIZE
    ):
        self.client = client
        self.term = term
        self.page_size = page_size

    async def discover(self) -> DiscoveryResult:
        """
        Sample the catalogue and rank the category labels found.

        Never raises; failures are logged and returned as a failed result.
        """
        try:
            response = await self.client.search(
                self.term,
                max_results=self.page_size,
                order_by="relevance"
            )
        except TransportError as e:
            logger.error(f"Category discovery failed: {e}")
            return DiscoveryResult.failure(str(e))

        ranked = rank_categories(parse_books_response(response))
        logger.info(f"Discovered {len(ranked)} categories")
        return DiscoveryResult.success(ranked)
