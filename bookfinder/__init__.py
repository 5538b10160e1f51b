"""Book discovery over the Google Books API."""
