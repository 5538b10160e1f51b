"""Incremental pagination over book search results."""
import logging
from typing import Optional, Sequence, Set

from bookfinder.async_client import AsyncGoogleBooksClient
from bookfinder.discovery import CategoryCatalog
from bookfinder.exceptions import TransportError
from bookfinder.models import AccumulatorState, CategoryOption, Query
from bookfinder.parse import accept_new_books, parse_books_response

logger = logging.getLogger(__name__)

PAGE_SIZE = 40
FALLBACK_TERM = "books"
FETCH_ERROR_MESSAGE = "Could not load more books. Please try again."


def build_search_term(query: Query, options: Sequence[CategoryOption]) -> str:
    """
    OR-join the labels of the selected categories.

    Labels follow catalog order. Selected IDs missing from the catalog are
    ignored; with nothing left the broad fallback term is used.
    """
    labels = [option.label for option in options if option.id in query.selected_categories]
    return " OR ".join(labels) if labels else FALLBACK_TERM


class ResultAccumulator:
    """
    Owns the deduplicated, paginated result set for one query at a time.

    Fetches for the same query run strictly one after another; the
    ``loading`` flag turns redundant calls into no-ops. Each ``reset`` starts a
    new generation, and responses that belong to an older generation are
    dropped when they arrive.
    """

    def __init__(
        self,
        client: AsyncGoogleBooksClient,
        catalog: CategoryCatalog,
        page_size: int = PAGE_SIZE
    ):
        self.client = client
        self.catalog = catalog
        self.page_size = page_size
        self.state = AccumulatorState()
        self.query: Optional[Query] = None
        self.term = FALLBACK_TERM
        self._seen_ids: Set[str] = set()
        self._generation = 0

    @property
    def can_fetch(self) -> bool:
        return not (self.state.loading or self.state.exhausted)

    def reset(self, query: Query):
        """Forget all results and start over at offset zero. Does not fetch."""
        self._generation += 1
        self.query = query
        # Labels are fixed for the whole session, even if the catalog changes
        self.term = build_search_term(query, self.catalog.options)
        self.state = AccumulatorState()
        self._seen_ids = set()
        logger.info(f"Reset results (generation={self._generation})")

    async def fetch_next_page(self, query: Query) -> bool:
        """
        Fetch the next page for ``query`` and merge it into the results.

        Args:
            query: Query the accumulator was last reset with

        Returns:
            True if a request was dispatched, False if skipped
        """
        if not self.can_fetch:
            return False

        generation = self._generation
        state = self.state
        state.loading = True

        term = self.term if query == self.query else build_search_term(query, self.catalog.options)
        try:
            response = await self.client.search(
                term,
                max_results=self.page_size,
                start_index=state.next_offset,
                order_by="newest",
                lang_restrict=query.language
            )
        except TransportError as e:
            if generation == self._generation:
                logger.error(f"Page fetch failed at offset {state.next_offset}: {e}")
                state.last_error = FETCH_ERROR_MESSAGE
            return True
        finally:
            if generation == self._generation:
                state.loading = False

        if generation != self._generation:
            logger.info(f"Discarding stale page for generation {generation}")
            return True

        accepted = accept_new_books(
            parse_books_response(response),
            language=query.language,
            seen_ids=self._seen_ids
        )
        state.items.extend(accepted)
        state.next_offset += self.page_size
        state.last_error = None

        # An under-filled page ends pagination, even when the shortfall comes
        # from duplicates or wrong-language items.
        if len(accepted) < self.page_size:
            state.exhausted = True

        logger.info(
            f"Accepted {len(accepted)} books at offset {state.next_offset - self.page_size} "
            f"(total={len(state.items)}, exhausted={state.exhausted})"
        )
        return True
