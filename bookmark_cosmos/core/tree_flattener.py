"""
Bookmark tree flattening module.

This module converts the nested folder/bookmark tree supplied by the host
into a flat bookmark list and a flat folder list, assigning each bookmark a
category inferred from its nearest enclosing folder.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .data_models import (
    DEFAULT_CATEGORY,
    FALLBACK_CATEGORY,
    Bookmark,
    ContainerNode,
    Folder,
    LeafNode,
    TreeNode,
)

# Browser root, "Bookmarks bar", "Other bookmarks", "Mobile bookmarks"
DEFAULT_ROOT_IDS = ("0", "1", "2", "3")


@dataclass
class FlattenResult:
    """Flat collections produced from a bookmark tree."""

    bookmarks: List[Bookmark] = field(default_factory=list)
    folders: List[Folder] = field(default_factory=list)


class TreeFlattener:
    """
    Flattens a bookmark tree into bookmarks and folders.

    Traversal is depth-first and pre-order, visiting children in the order
    the host presents them, so the resulting bookmark order is a stable
    default sort. Synthetic root containers are relabelled to the default
    category and are not emitted as folders.
    """

    def __init__(
        self,
        root_ids: Iterable[str] = DEFAULT_ROOT_IDS,
        default_category: str = DEFAULT_CATEGORY,
        fallback_category: str = FALLBACK_CATEGORY,
    ):
        """
        Initialize the flattener.

        Args:
            root_ids: Ids of the host's well-known top-level containers
            default_category: Label given to bookmarks directly inside a root container
            fallback_category: Label given to bookmarks with no enclosing container
                or whose folder has an empty title
        """
        self.root_ids = frozenset(str(root_id) for root_id in root_ids)
        self.default_category = default_category
        self.fallback_category = fallback_category
        self.logger = logging.getLogger(__name__)

    def flatten(self, root_nodes: Sequence[TreeNode]) -> FlattenResult:
        """
        Flatten a host tree.

        Args:
            root_nodes: Top-level tree nodes, in host order

        Returns:
            FlattenResult with bookmarks and de-duplicated folders
        """
        bookmarks: List[Bookmark] = []
        # Insert-if-absent: the first container seen with a given id wins
        folders: Dict[str, Folder] = {}

        self._visit(root_nodes, None, None, bookmarks, folders)

        self.logger.debug(
            f"Flattened tree into {len(bookmarks)} bookmarks and {len(folders)} folders"
        )
        return FlattenResult(bookmarks=bookmarks, folders=list(folders.values()))

    def category_for(self, container: ContainerNode) -> str:
        """Return the category label a container gives to its direct bookmarks."""
        if container.id in self.root_ids:
            return self.default_category
        return container.title or self.fallback_category

    def is_root(self, folder_id: Optional[str]) -> bool:
        """Check whether an id belongs to a synthetic root container."""
        return folder_id in self.root_ids

    def _visit(
        self,
        nodes: Sequence[TreeNode],
        category: Optional[str],
        container_id: Optional[str],
        bookmarks: List[Bookmark],
        folders: Dict[str, Folder],
    ) -> None:
        for node in nodes:
            if isinstance(node, LeafNode):
                bookmarks.append(self._to_bookmark(node, category, container_id))
                continue

            if node.id not in self.root_ids:
                if node.id in folders:
                    self.logger.warning(
                        f"Duplicate folder id {node.id!r} ignored, keeping first occurrence"
                    )
                else:
                    folders[node.id] = Folder(id=node.id, title=node.title)

            self._visit(
                node.children, self.category_for(node), node.id, bookmarks, folders
            )

    def _to_bookmark(
        self, leaf: LeafNode, category: Optional[str], container_id: Optional[str]
    ) -> Bookmark:
        return Bookmark(
            id=leaf.id,
            url=leaf.url,
            title=leaf.title,
            category=category or self.fallback_category,
            parent_id=container_id if container_id is not None else leaf.parent_id,
            date_added=leaf.date_added,
        )


def flatten_tree(
    root_nodes: Sequence[TreeNode], root_ids: Iterable[str] = DEFAULT_ROOT_IDS
) -> FlattenResult:
    """Convenience wrapper around ``TreeFlattener.flatten`` with default labels."""
    return TreeFlattener(root_ids=root_ids).flatten(root_nodes)
