"""Retail search links for books."""
from typing import Optional
from urllib.parse import quote

AMAZON_SEARCH_URL = "https://www.amazon.com/s"


def amazon_search_url(title: str, author: str = "", tag: Optional[str] = None) -> str:
    """Build an Amazon search URL for a title and its primary author."""
    url = f"{AMAZON_SEARCH_URL}?k={quote(title, safe='')}+{quote(author, safe='')}"
    if tag:
        url += f"&tag={quote(tag, safe='')}"
    return url
