"""Error kinds raised by the book finder."""
from typing import Iterable, Optional


class BookFinderError(Exception):
    """Base class for book finder errors."""


class TransportError(BookFinderError):
    """Network failure or non-success response from the search API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(BookFinderError):
    """Required credentials are missing from the configuration."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")
