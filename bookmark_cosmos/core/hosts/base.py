"""
Shared implementation for hosts that keep the bookmark tree as nested dicts.

Both the mock host and the Chrome profile-file host hold a tree of plain
dictionaries with ``id`` and ``children`` keys; this base class implements
lookup and the three mutations on top of that shape.
"""

import asyncio
import logging
import webbrowser
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..data_models import Folder
from .protocol import HostNotFoundError, HostWriteError

Node = Dict[str, Any]


class TreeBackedHost(ABC):
    """
    Base class for hosts backed by a nested-dict bookmark tree.

    Subclasses provide the root nodes, a factory for new folder nodes and
    a commit hook called after every successful mutation.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def _roots(self) -> List[Node]:
        """Return the top-level nodes of the backing tree."""
        pass

    @abstractmethod
    def _new_folder_node(self, folder_id: str, title: str, parent_id: str) -> Node:
        """Build a backing-tree node for a newly created folder."""
        pass

    def _commit(self) -> None:
        """Persist the backing tree after a mutation; no-op by default."""
        return None

    @property
    @abstractmethod
    def source_name(self) -> str:
        pass

    def _walk(
        self, nodes: List[Node], parent: Optional[Node] = None
    ) -> Iterator[Tuple[Node, Optional[Node]]]:
        for node in nodes:
            yield node, parent
            children = node.get("children")
            if isinstance(children, list):
                yield from self._walk(children, node)

    def _find(self, node_id: str) -> Tuple[Node, Optional[Node]]:
        for node, parent in self._walk(self._roots()):
            if str(node.get("id")) == node_id:
                return node, parent
        raise HostNotFoundError(f"No node with id {node_id!r}", self.source_name)

    def _find_container(self, node_id: str) -> Node:
        node, _ = self._find(node_id)
        if "url" in node or not isinstance(node.get("children"), list):
            raise HostWriteError(f"Node {node_id!r} is not a folder", self.source_name)
        return node

    def _next_id(self) -> str:
        highest = 0
        for node, _ in self._walk(self._roots()):
            try:
                highest = max(highest, int(node.get("id")))
            except (TypeError, ValueError):
                continue
        return str(highest + 1)

    async def remove(self, bookmark_id: str) -> None:
        node, parent = self._find(bookmark_id)
        if parent is None:
            raise HostWriteError(
                f"Cannot remove top-level node {bookmark_id!r}", self.source_name
            )
        parent["children"].remove(node)
        self._commit()
        self.logger.info(f"Removed node {bookmark_id}")

    async def move(self, bookmark_id: str, new_parent_id: str) -> None:
        node, parent = self._find(bookmark_id)
        target = self._find_container(new_parent_id)
        if parent is not None:
            parent["children"].remove(node)
        target["children"].append(node)
        if "parentId" in node:
            node["parentId"] = new_parent_id
        self._commit()
        self.logger.info(f"Moved node {bookmark_id} to folder {new_parent_id}")

    async def open_url(self, url: str) -> bool:
        """Open a URL in a new tab of the system's default browser."""
        opened = await asyncio.to_thread(webbrowser.open_new_tab, url)
        if not opened:
            self.logger.warning(f"Browser did not acknowledge opening {url}")
        return opened

    async def create(self, parent_id: str, title: str) -> Folder:
        parent = self._find_container(parent_id)
        folder_id = self._next_id()
        parent["children"].append(self._new_folder_node(folder_id, title, parent_id))
        self._commit()
        self.logger.info(f"Created folder {title!r} with id {folder_id}")
        return Folder(id=folder_id, title=title)
