"""
Data models for Bookmark Cosmos.

This module defines the internal data structures used to represent the
flattened bookmark collection, its folders, derived category statistics,
and the host-supplied bookmark tree before flattening.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

DEFAULT_CATEGORY = "General"
FALLBACK_CATEGORY = "Uncategorized"
ALL_CATEGORIES = "All"


@dataclass
class Bookmark:
    """
    A single bookmark in the flat, queryable collection.

    The ``id`` is assigned by the host and is the only identity used by the
    core; ``title`` may be empty and is never used to identify a bookmark.
    """

    id: str
    url: str
    title: str = ""
    category: str = FALLBACK_CATEGORY
    parent_id: Optional[str] = None
    date_added: Optional[int] = None

    def get_effective_title(self) -> str:
        """
        Get the most appropriate display title for this bookmark.

        Returns:
            The title, or the URL when the title is blank
        """
        if self.title and self.title.strip():
            return self.title.strip()
        return self.url

    def to_sample(self) -> Dict[str, str]:
        """Convert to the ``{id, title, url}`` shape sent to the classifier."""
        return {"id": self.id, "title": self.title, "url": self.url}


@dataclass
class Folder:
    """A user-meaningful bookmark folder."""

    id: str
    title: str


@dataclass(frozen=True)
class CategoryCount:
    """Number of bookmarks currently carrying a category label."""

    name: str
    count: int


@dataclass(frozen=True)
class LeafNode:
    """A tree node that points at a URL."""

    id: str
    url: str
    title: str = ""
    parent_id: Optional[str] = None
    date_added: Optional[int] = None


@dataclass(frozen=True)
class ContainerNode:
    """A tree node that holds other nodes."""

    id: str
    title: str = ""
    children: List["TreeNode"] = field(default_factory=list)
    parent_id: Optional[str] = None


TreeNode = Union[LeafNode, ContainerNode]


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_tree_node(raw: Dict[str, Any]) -> TreeNode:
    """
    Convert a host tree dictionary into a ``LeafNode`` or ``ContainerNode``.

    The leaf/container decision is made here once: a node carrying a ``url``
    is a leaf, anything else is a container. A node with neither ``url`` nor
    ``children`` becomes an empty container.

    Args:
        raw: Node dictionary in the browser bookmarks tree shape
            (``id``, ``title``, ``url`` or ``children``, ``parentId``,
            ``dateAdded``)

    Returns:
        The typed tree node
    """
    node_id = str(raw.get("id", ""))
    title = raw.get("title") or ""
    parent_id = _optional_str(raw.get("parentId"))

    url = raw.get("url")
    if url:
        return LeafNode(
            id=node_id,
            url=str(url),
            title=title,
            parent_id=parent_id,
            date_added=_optional_int(raw.get("dateAdded")),
        )

    children = raw.get("children") or []
    return ContainerNode(
        id=node_id,
        title=title,
        children=[parse_tree_node(child) for child in children if isinstance(child, dict)],
        parent_id=parent_id,
    )


def parse_tree(raw_nodes: List[Dict[str, Any]]) -> List[TreeNode]:
    """Parse a list of host root dictionaries into typed tree nodes."""
    return [parse_tree_node(raw) for raw in raw_nodes if isinstance(raw, dict)]
