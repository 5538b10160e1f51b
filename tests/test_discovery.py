"""Tests for category discovery."""
import pytest

from bookfinder.discovery import (
    DEFAULT_CATEGORIES,
    DISCOVERY_TERM,
    CategoryCatalog,
    CategoryDiscoverer,
    options_from_counts,
    rank_categories,
)
from bookfinder.exceptions import TransportError
from bookfinder.models import Book, CategoryCount, CategoryOption
from bookfinder.parse import parse_books_response


def book_with(categories):
    return Book("id", "Title", [], None, categories, None, "es")


def test_rank_categories_orders_by_count_then_first_seen():
    books = [book_with(["A", "B"]), book_with(["A"]), book_with(["C", "B"])]

    ranked = rank_categories(books)

    assert ranked == [CategoryCount("A", 2), CategoryCount("B", 2), CategoryCount("C", 1)]


def test_rank_categories_tie_follows_first_seen_order():
    books = [book_with(["Poetry"]), book_with(["Drama"]), book_with(["Drama", "Poetry"])]

    assert [entry.label for entry in rank_categories(books)] == ["Poetry", "Drama"]


def test_rank_categories_without_labels():
    assert rank_categories([book_with([]), book_with([])]) == []


def test_options_from_counts_assigns_sequential_ids():
    options = options_from_counts([CategoryCount("Fiction", 5), CategoryCount("History", 2)])

    assert options == (CategoryOption("cat0", "Fiction"), CategoryOption("cat1", "History"))


def test_catalog_defaults_and_replace():
    catalog = CategoryCatalog()
    assert catalog.options == DEFAULT_CATEGORIES
    assert "fiction" in catalog

    catalog.replace([CategoryOption("cat0", "Poetry")])

    assert catalog.options == (CategoryOption("cat0", "Poetry"),)
    assert "fiction" not in catalog
    assert len(catalog) == 1


def test_catalog_find_by_id_or_label():
    catalog = CategoryCatalog()

    assert catalog.find("science").label == "Ciencia"
    assert catalog.find("historia").id == "history"
    with pytest.raises(KeyError):
        catalog.find("cooking")


@pytest.mark.asyncio
async def test_discover_ranks_sample(fake_client, make_item):
    fake_client.search.return_value = {
        "items": [
            make_item("1", categories=["Fiction", "History"]),
            make_item("2", categories=["Fiction"]),
            make_item("3"),
            make_item("4", categories=["Science", "History"]),
        ]
    }

    result = await CategoryDiscoverer(fake_client).discover()

    assert result.ok is True
    assert result.error is None
    assert result.categories == [
        CategoryCount("Fiction", 2),
        CategoryCount("History", 2),
        CategoryCount("Science", 1),
    ]
    fake_client.search.assert_awaited_once_with(DISCOVERY_TERM, max_results=40, order_by="relevance")


@pytest.mark.asyncio
async def test_discover_reports_failure_without_raising(fake_client, caplog):
    fake_client.search.side_effect = TransportError("Unexpected status 403", status_code=403)

    result = await CategoryDiscoverer(fake_client).discover()

    assert result.ok is False
    assert result.categories == []
    assert "403" in result.error
    assert "Category discovery failed" in caplog.text


def test_parsed_sample_feeds_ranking(make_item):
    books = parse_books_response({"items": [make_item("1", categories=["Art"])]})

    assert rank_categories(books) == [CategoryCount("Art", 1)]


@pytest.mark.asyncio
async def test_discover_ignores_non_string_labels(fake_client, make_item):
    fake_client.search.return_value = {
        "items": [make_item("1", categories=[["A"], "Fiction"]), make_item("2", categories=[{"x": 1}])]
    }

    result = await CategoryDiscoverer(fake_client).discover()

    assert result.ok is True
    assert result.categories == [CategoryCount("Fiction", 1)]


def test_rank_categories_skips_non_string_labels():
    assert rank_categories([book_with([["A"], "B"])]) == [CategoryCount("B", 1)]
