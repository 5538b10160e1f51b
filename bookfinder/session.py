"""Search session: user selections wired to the result accumulator."""
import logging
from typing import List, Optional, Set

from bookfinder.accumulator import PAGE_SIZE, ResultAccumulator
from bookfinder.async_client import AsyncGoogleBooksClient
from bookfinder.config import SUPPORTED_LANGUAGES
from bookfinder.discovery import CategoryCatalog, CategoryDiscoverer, options_from_counts
from bookfinder.models import AccumulatorState, Book, DiscoveryResult, Query

logger = logging.getLogger(__name__)


class SearchSession:
    """
    Holds everything one user's search screen needs.

    Category toggles and language changes only edit the selection; nothing
    is fetched until ``search`` is called. ``on_scroll`` is the hook the host
    environment calls with its near-bottom signal.
    """

    def __init__(
        self,
        client: AsyncGoogleBooksClient,
        catalog: Optional[CategoryCatalog] = None,
        language: str = "es",
        page_size: int = PAGE_SIZE
    ):
        self.catalog = catalog or CategoryCatalog()
        self.selected: Set[str] = set()
        self.language = language
        self.accumulator = ResultAccumulator(client, self.catalog, page_size=page_size)
        self._query: Optional[Query] = None

    @property
    def state(self) -> AccumulatorState:
        return self.accumulator.state

    @property
    def books(self) -> List[Book]:
        return self.accumulator.state.items

    def toggle_category(self, category_id: str):
        """Add or remove a category from the selection."""
        if category_id not in self.catalog:
            raise KeyError(category_id)
        if category_id in self.selected:
            self.selected.discard(category_id)
        else:
            self.selected.add(category_id)

    def set_language(self, language: str):
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self.language = language

    def current_query(self) -> Query:
        return Query(frozenset(self.selected), self.language)

    async def search(self) -> bool:
        """Start a fresh search and load its first page."""
        self._query = self.current_query()
        self.accumulator.reset(self._query)
        return await self.accumulator.fetch_next_page(self._query)

    async def on_scroll(self, near_bottom: bool) -> bool:
        """
        Load another page when the view is near the bottom.

        Safe to call on every scroll event; returns True only if a request
        was dispatched.
        """
        if not near_bottom or self._query is None:
            return False
        if not self.accumulator.can_fetch:
            return False
        return await self.accumulator.fetch_next_page(self._query)

    async def discover_categories(self, discoverer: CategoryDiscoverer) -> DiscoveryResult:
        """
        Replace the catalog with discovered categories.

        The current catalog is kept when discovery fails or finds nothing.
        """
        result = await discoverer.discover()
        if not result.ok:
            logger.warning("Keeping current categories after failed discovery")
            return result
        if not result.categories:
            logger.warning("Discovery found no categories; keeping current ones")
            return result

        self.catalog.replace(options_from_counts(result.categories))
        self.selected = {cid for cid in self.selected if cid in self.catalog}
        logger.info(f"Category list replaced with {len(self.catalog)} discovered categories")
        return result
