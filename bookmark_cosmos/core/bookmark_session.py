"""
Bookmark session.

Wires the host, tree flattener, query engine, categorization merger and
collection mutator together around one in-memory bookmark collection. This
is the surface a rendering layer (the CLI, or any UI) talks to.
"""

import logging
from typing import Dict, List, Optional

from .categorization_merger import CategorizationMerger
from .classifier import BookmarkClassifier
from .collection_mutator import CollectionMutator, HostFailure
from .data_models import ALL_CATEGORIES, Bookmark, CategoryCount, Folder, parse_tree
from .gemini_api_client import GeminiAPIClient
from .hosts import BookmarkHost, create_host
from .query_engine import QueryEngine
from .tree_flattener import TreeFlattener


class BookmarkSession:
    """
    One browsing session over a host's bookmarks.

    The bookmark and folder lists are created by ``load()`` and afterwards
    only changed in place, so views derived from them always reflect the
    latest mutation.
    """

    def __init__(
        self,
        host: BookmarkHost,
        flattener: Optional[TreeFlattener] = None,
        classifier: Optional[BookmarkClassifier] = None,
        new_folder_parent_id: str = "2",
    ):
        """
        Initialize the session.

        Args:
            host: Host strategy chosen at startup
            flattener: Tree flattener; defaults to browser root ids and labels
            classifier: AI classifier; None disables ``organize()``
            new_folder_parent_id: Host folder under which new folders are created
        """
        self.host = host
        self.flattener = flattener or TreeFlattener()
        self.classifier = classifier
        self.query_engine = QueryEngine(fallback_category=self.flattener.fallback_category)
        self.merger = CategorizationMerger()

        self.bookmarks: List[Bookmark] = []
        self.folders: List[Folder] = []
        self.mutator = CollectionMutator(
            self.bookmarks, self.folders, host, new_folder_parent_id
        )
        self.loaded = False
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config) -> "BookmarkSession":
        """
        Build a session, its host and its classifier from configuration.

        Args:
            config: ``CosmosConfig`` instance
        """
        host_config = config.host
        classifier_config = config.classifier
        network = config.network

        api_key = (
            classifier_config.gemini_api_key.get_secret_value()
            if classifier_config.gemini_api_key
            else None
        )
        classifier = BookmarkClassifier(
            api_key,
            batch_size=classifier_config.batch_size,
            max_batches=classifier_config.max_batches,
            client_factory=lambda key: GeminiAPIClient(
                key,
                model=classifier_config.model,
                timeout=network.timeout,
                max_retries=network.max_retries,
            ),
        )
        flattener = TreeFlattener(
            root_ids=host_config.root_ids,
            default_category=host_config.default_category,
            fallback_category=host_config.fallback_category,
        )
        return cls(
            create_host(config),
            flattener=flattener,
            classifier=classifier,
            new_folder_parent_id=host_config.new_folder_parent_id,
        )

    async def load(self) -> None:
        """
        Fetch the host tree and rebuild the in-memory collections.

        Raises:
            HostError: If the host tree cannot be fetched
        """
        raw_tree = await self.host.fetch_tree()
        result = self.flattener.flatten(parse_tree(raw_tree))

        self.bookmarks[:] = result.bookmarks
        self.folders[:] = result.folders
        self.loaded = True
        self.logger.info(
            f"Loaded {len(self.bookmarks)} bookmarks and {len(self.folders)} "
            f"folders from {self.host.source_name}"
        )

    def filter(self, query: str = "", category: str = ALL_CATEGORIES) -> List[Bookmark]:
        """Return the bookmarks visible for a query and selected category."""
        return self.query_engine.filter(self.bookmarks, query, category)

    def categories(self) -> List[CategoryCount]:
        """Return category counts, most popular first."""
        return self.query_engine.aggregate(self.bookmarks)

    def merge(self, classification: Dict[str, str]) -> None:
        """Apply a partial ``id -> category`` mapping to the collection."""
        self.bookmarks[:] = self.merger.merge(self.bookmarks, classification)

    async def organize(self) -> Dict[str, str]:
        """
        Classify the collection with AI and merge the result.

        Returns:
            The mapping that was applied; empty when classification is
            unavailable or failed
        """
        if self.classifier is None:
            self.logger.warning("Organize skipped: no classifier configured")
            return {}

        classification = await self.classifier.classify(self.bookmarks)
        self.merge(classification)
        return classification

    def delete(self, bookmark_id: str) -> bool:
        return self.mutator.delete(bookmark_id)

    def move(self, bookmark_id: str, new_folder_id: str) -> bool:
        return self.mutator.move(bookmark_id, new_folder_id)

    def create_folder(self, title: str) -> Optional[Folder]:
        return self.mutator.create_folder(title)

    async def drain(self) -> List[HostFailure]:
        """
        Wait for outstanding host requests.

        Returns:
            Every host failure recorded so far in this session
        """
        await self.mutator.drain()
        return list(self.mutator.failures)

    async def open(self, bookmark_id: str) -> Optional[Bookmark]:
        """
        Open a bookmark's URL through the host.

        Returns:
            The opened bookmark, or None if the id is unknown
        """
        bookmark = self.find_bookmark(bookmark_id)
        if bookmark is None:
            return None
        await self.host.open_url(bookmark.url)
        return bookmark

    @property
    def status_line(self) -> str:
        """Where the bookmarks come from, and whether that is live data."""
        mode = "Live data" if self.host.is_live else "Preview data"
        return f"{self.host.source_name} - {mode}"

    def find_bookmark(self, bookmark_id: str) -> Optional[Bookmark]:
        for bookmark in self.bookmarks:
            if bookmark.id == bookmark_id:
                return bookmark
        return None

    def folder_title(self, folder_id: Optional[str]) -> str:
        """Display name of a folder id, including synthetic roots."""
        for folder in self.folders:
            if folder.id == folder_id:
                return folder.title
        if self.flattener.is_root(folder_id):
            return self.flattener.default_category
        return folder_id or ""
