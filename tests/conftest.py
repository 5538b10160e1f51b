"""Shared fixtures for book finder tests."""
from unittest.mock import AsyncMock, MagicMock

import pytest


def item(book_id, language="es", title=None, categories=None, authors=None):
    """Build one raw Google Books volume item."""
    volume_info = {
        "title": title or f"Book {book_id}",
        "authors": authors if authors is not None else ["Author"],
        "language": language,
    }
    if categories is not None:
        volume_info["categories"] = categories
    return {"id": book_id, "volumeInfo": volume_info}


def page(ids, language="es"):
    """Build a raw API response holding one item per ID."""
    return {"items": [item(book_id, language) for book_id in ids]}


@pytest.fixture
def make_page():
    """Factory fixture for raw API responses."""
    return page


@pytest.fixture
def make_item():
    """Factory fixture for raw volume items."""
    return item


@pytest.fixture
def fake_client():
    """Search client whose ``search`` is an AsyncMock."""
    client = MagicMock()
    client.search = AsyncMock(return_value={"items": []})
    return client
