"""
Query and aggregation over the flat bookmark collection.

This module provides the composable filters used to derive the visible
subset of bookmarks from a free-text query and a selected category, and
the category frequency table used to order category pills by popularity.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Sequence

from .data_models import ALL_CATEGORIES, FALLBACK_CATEGORY, Bookmark, CategoryCount


class BookmarkFilter(ABC):
    """
    Abstract base class for bookmark filters.

    Filters can be combined using ``&`` to require both predicates.
    """

    @abstractmethod
    def matches(self, bookmark: Bookmark) -> bool:
        """
        Check if a bookmark matches this filter.

        Args:
            bookmark: The bookmark to check

        Returns:
            True if the bookmark matches the filter criteria
        """
        pass

    def __and__(self, other: "BookmarkFilter") -> "CompositeFilter":
        if isinstance(other, CompositeFilter):
            return CompositeFilter([self] + other.filters)
        return CompositeFilter([self, other])

    def filter(self, bookmarks: Sequence[Bookmark]) -> List[Bookmark]:
        """Return the matching bookmarks, preserving input order."""
        return [b for b in bookmarks if self.matches(b)]


class CompositeFilter(BookmarkFilter):
    """Filter that requires every child filter to match."""

    def __init__(self, filters: List[BookmarkFilter]):
        self.filters = filters

    def matches(self, bookmark: Bookmark) -> bool:
        return all(f.matches(bookmark) for f in self.filters)


class TextQueryFilter(BookmarkFilter):
    """
    Case-insensitive substring match on title, URL and category.

    A bookmark matches when any of the three fields contains the query.
    An empty query matches everything.
    """

    def __init__(self, query: str):
        self.query = (query or "").lower()

    def matches(self, bookmark: Bookmark) -> bool:
        if not self.query:
            return True
        return (
            self.query in (bookmark.title or "").lower()
            or self.query in (bookmark.url or "").lower()
            or self.query in (bookmark.category or "").lower()
        )


class CategoryFilter(BookmarkFilter):
    """Exact category match; the ``All`` sentinel matches everything."""

    def __init__(self, category: str, all_sentinel: str = ALL_CATEGORIES):
        self.category = category
        self.all_sentinel = all_sentinel

    def matches(self, bookmark: Bookmark) -> bool:
        if self.category == self.all_sentinel:
            return True
        return bookmark.category == self.category


class QueryEngine:
    """Derives filtered views and category counts from a bookmark collection."""

    def __init__(self, fallback_category: str = FALLBACK_CATEGORY):
        self.fallback_category = fallback_category

    def filter(
        self,
        collection: Sequence[Bookmark],
        query: str = "",
        selected_category: str = ALL_CATEGORIES,
    ) -> List[Bookmark]:
        """
        Produce the visible subset of the collection.

        Args:
            collection: Flat bookmark collection
            query: Free-text query; empty means no text filtering
            selected_category: Category to keep, or ``"All"``

        Returns:
            Matching bookmarks in their original relative order
        """
        combined = TextQueryFilter(query) & CategoryFilter(selected_category)
        return combined.filter(collection)

    def aggregate(self, collection: Sequence[Bookmark]) -> List[CategoryCount]:
        """
        Count bookmarks per category, most popular first.

        Ties keep the order in which each category was first seen.

        Args:
            collection: Flat bookmark collection

        Returns:
            One CategoryCount per distinct category
        """
        counts: Dict[str, int] = {}
        for bookmark in collection:
            name = bookmark.category or self.fallback_category
            counts[name] = counts.get(name, 0) + 1

        # sorted() is stable, so equal counts keep first-seen order
        ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [CategoryCount(name=name, count=count) for name, count in ordered]


def search_bookmarks(query: str, bookmarks: Sequence[Bookmark]) -> List[Bookmark]:
    """Text-only search, without category narrowing."""
    return TextQueryFilter(query).filter(bookmarks)
