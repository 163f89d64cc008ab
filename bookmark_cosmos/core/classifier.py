"""
Best-effort AI classification of bookmarks.

The classifier samples a bounded prefix of the collection, sends it to the
AI provider in batches and returns whatever partial ``id -> category``
mapping comes back. It never raises: a missing API key, a network error or
a malformed response all degrade to an empty mapping.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from .base_api_client import BaseAPIClient
from .data_models import Bookmark
from .gemini_api_client import GeminiAPIClient

DEFAULT_BATCH_SIZE = 50
DEFAULT_MAX_BATCHES = 1

ClientFactory = Callable[[str], BaseAPIClient]


class BookmarkClassifier:
    """
    Classifies bookmarks through an AI API client.

    At most ``batch_size * max_batches`` bookmarks from the start of the
    collection are sent, ``batch_size`` per request.
    """

    def __init__(
        self,
        api_key: Optional[str],
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_batches: int = DEFAULT_MAX_BATCHES,
        client_factory: Optional[ClientFactory] = None,
    ):
        """
        Initialize the classifier.

        Args:
            api_key: Provider API key; None disables classification
            batch_size: Maximum bookmarks per request
            max_batches: Maximum number of requests per classification
            client_factory: Builds an API client from the key; defaults to
                a ``GeminiAPIClient``
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if max_batches < 1:
            raise ValueError("max_batches must be at least 1")

        self.api_key = api_key
        self.batch_size = batch_size
        self.max_batches = max_batches
        self.client_factory = client_factory or (lambda key: GeminiAPIClient(key))
        self.logger = logging.getLogger(__name__)
        # Usage statistics of the most recent classify() call
        self.last_usage: Dict[str, Any] = {}

    @property
    def is_available(self) -> bool:
        """Whether an API key is configured."""
        return bool(self.api_key)

    def build_batches(self, bookmarks: Sequence[Bookmark]) -> List[List[Dict[str, str]]]:
        """
        Split the classifiable prefix of the collection into request samples.

        Returns:
            Up to ``max_batches`` lists of ``{id, title, url}`` dictionaries
        """
        limit = self.batch_size * self.max_batches
        prefix = [bookmark.to_sample() for bookmark in bookmarks[:limit]]
        return [
            prefix[start : start + self.batch_size]
            for start in range(0, len(prefix), self.batch_size)
        ]

    async def classify(self, bookmarks: Sequence[Bookmark]) -> Dict[str, str]:
        """
        Classify the bounded prefix of a bookmark collection.

        Args:
            bookmarks: Current bookmark collection

        Returns:
            Partial mapping of bookmark id to category; empty on any failure
        """
        if not self.api_key:
            self.logger.warning("Classification skipped: API key missing")
            return {}

        batches = self.build_batches(bookmarks)
        if not batches:
            return {}

        category_map: Dict[str, str] = {}
        try:
            async with self.client_factory(self.api_key) as client:
                for index, sample in enumerate(batches, start=1):
                    try:
                        category_map.update(await client.classify_batch(sample))
                    except Exception as e:
                        self.logger.error(
                            f"Classification batch {index}/{len(batches)} failed: {e}"
                        )
                self.last_usage = client.get_usage_statistics()
        except Exception as e:
            self.logger.error(f"Classification failed: {e}")
            return {}

        self.logger.info(
            f"Classified {len(category_map)} of {sum(len(b) for b in batches)} "
            f"sampled bookmarks"
        )
        return category_map
