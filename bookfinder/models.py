"""Data models for books, queries and search state."""
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional


@dataclass(frozen=True)
class Book:
    """Normalized book representation."""
    id: str
    title: str
    authors: List[str]
    description: Optional[str]
    categories: List[str]
    thumbnail: Optional[str]
    language: str

    @property
    def authors_str(self) -> str:
        """Format authors as comma-separated string."""
        return ", ".join(self.authors) if self.authors else "Unknown author"

    @property
    def primary_author(self) -> str:
        """First listed author, or an empty string."""
        return self.authors[0] if self.authors else ""


@dataclass(frozen=True)
class Query:
    """Category selection and language for one search session."""
    selected_categories: FrozenSet[str]
    language: str


@dataclass(frozen=True)
class CategoryOption:
    """A selectable category."""
    id: str
    label: str


@dataclass(frozen=True)
class CategoryCount:
    """A discovered category label and how many sample books carried it."""
    label: str
    count: int


@dataclass
class AccumulatorState:
    """Paginated result set for the current query."""
    items: List[Book] = field(default_factory=list)
    next_offset: int = 0
    exhausted: bool = False
    loading: bool = False
    last_error: Optional[str] = None


@dataclass(frozen=True)
class DiscoveryResult:
    """Outcome of a category discovery run."""
    ok: bool
    categories: List[CategoryCount] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def success(cls, categories: List[CategoryCount]) -> "DiscoveryResult":
        return cls(ok=True, categories=categories)

    @classmethod
    def failure(cls, error: str) -> "DiscoveryResult":
        return cls(ok=False, error=error)
