"""
Merges externally produced category assignments into the collection.
"""

import logging
from dataclasses import replace
from typing import List, Mapping, Sequence

from .data_models import Bookmark

logger = logging.getLogger(__name__)


class CategorizationMerger:
    """
    Applies a partial ``id -> category`` mapping onto a bookmark collection.

    Ids missing from the mapping mean "no opinion" and leave the bookmark
    untouched; ids in the mapping that are not in the collection are ignored.
    Bookmarks are never removed or reordered.
    """

    def merge(
        self, collection: Sequence[Bookmark], classification: Mapping[str, str]
    ) -> List[Bookmark]:
        """
        Return a new collection with mapped categories applied.

        Args:
            collection: Current bookmark collection
            classification: Partial mapping of bookmark id to category

        Returns:
            New list; changed bookmarks are copies, unchanged ones are the
            same objects as in the input
        """
        if not classification:
            return list(collection)

        merged = []
        applied = 0
        for bookmark in collection:
            category = classification.get(bookmark.id)
            if category and category.strip() and category != bookmark.category:
                merged.append(replace(bookmark, category=category.strip()))
                applied += 1
            else:
                merged.append(bookmark)

        logger.info(
            f"Merged {applied} category assignments "
            f"({len(classification)} suggested, {len(collection)} bookmarks)"
        )
        return merged


def merge_categories(
    collection: Sequence[Bookmark], classification: Mapping[str, str]
) -> List[Bookmark]:
    """Functional shortcut for ``CategorizationMerger().merge``."""
    return CategorizationMerger().merge(collection, classification)
