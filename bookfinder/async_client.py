"""Async HTTP client for the Google Books volumes search."""
import httpx
from typing import Optional, Dict, Any
import logging

from bookfinder.exceptions import TransportError

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 40


class AsyncGoogleBooksClient:
    """Async client for book searches."""

    BASE_URL = "https://www.googleapis.com/books/v1/volumes"

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: int = 10,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize async client.

        Args:
            api_key: API access key
            timeout: Request timeout
            http_client: Pre-built HTTP client to use instead of a new one
        """
        self.api_key = api_key
        self.timeout = timeout
        self.client = http_client or httpx.AsyncClient(timeout=timeout)

    async def search(
        self,
        query: str,
        max_results: int = 10,
        start_index: int = 0,
        order_by: str = "relevance",
        lang_restrict: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Search for books asynchronously.

        Args:
            query: Search query
            max_results: Max results (1-40)
            start_index: Pagination offset
            order_by: "relevance" or "newest"
            lang_restrict: Optional language code filter

        Returns:
            API response JSON

        Raises:
            TransportError: On network failure or non-200 response
        """
        params = {
            "q": query,
            "printType": "books",
            "orderBy": order_by,
            "maxResults": min(max_results, MAX_PAGE_SIZE),
            "startIndex": start_index
        }

        if self.api_key:
            params["key"] = self.api_key
        if lang_restrict:
            params["langRestrict"] = lang_restrict

        try:
            logger.info(f"Async request: {query} (index={start_index})")
            response = await self.client.get(self.BASE_URL, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Async request failed: {e}")
            raise TransportError(f"Request failed: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Status {response.status_code} for query: {query}")
            raise TransportError(
                f"Unexpected status {response.status_code}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON in response: {e}")
            raise TransportError("Invalid response body", status_code=200) from e

        if not isinstance(data, dict):
            logger.error(f"Expected a JSON object, got {type(data).__name__}")
            raise TransportError("Invalid response body", status_code=200)

        return data

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
