"""
Core bookmark modules.

This package contains tree flattening, querying, AI categorization merging
and optimistic collection mutation.
"""

from .bookmark_session import BookmarkSession
from .categorization_merger import CategorizationMerger, merge_categories
from .collection_mutator import CollectionMutator
from .data_models import Bookmark, CategoryCount, Folder
from .query_engine import QueryEngine
from .tree_flattener import FlattenResult, TreeFlattener

__all__ = [
    'Bookmark',
    'BookmarkSession',
    'CategorizationMerger',
    'CategoryCount',
    'CollectionMutator',
    'FlattenResult',
    'Folder',
    'QueryEngine',
    'TreeFlattener',
    'merge_categories',
]
