"""
Bookmark Host Protocol.

This module defines the interface to the platform that owns the bookmark
store. The core only reads the tree from it and sends it mutation requests;
durable storage is entirely the host's responsibility.
"""

from abc import abstractmethod
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from ..data_models import Folder


@runtime_checkable
class BookmarkHost(Protocol):
    """
    Protocol for bookmark hosts.

    A host is chosen once at startup and passed explicitly to the pieces
    that need it, so no call site has to ask whether it is running against
    a live bookmark store or local data.

    Example Usage:
        >>> host = create_host(config)
        >>> tree = await host.fetch_tree()
        >>> await host.move("42", "7")
    """

    @abstractmethod
    async def fetch_tree(self) -> List[Dict[str, Any]]:
        """
        Fetch a snapshot of the full bookmark tree.

        Returns:
            Root node dictionaries (``id``, ``title``, ``url`` or
            ``children``, ``parentId``, ``dateAdded``)

        Raises:
            HostConnectionError: If the store cannot be read
        """
        ...

    @abstractmethod
    async def remove(self, bookmark_id: str) -> None:
        """
        Remove a bookmark.

        Raises:
            HostNotFoundError: If the id is unknown to the host
            HostWriteError: If the store cannot be written
        """
        ...

    @abstractmethod
    async def move(self, bookmark_id: str, new_parent_id: str) -> None:
        """
        Move a bookmark under another folder.

        Raises:
            HostNotFoundError: If either id is unknown to the host
            HostWriteError: If the store cannot be written
        """
        ...

    @abstractmethod
    async def create(self, parent_id: str, title: str) -> Folder:
        """
        Create a folder.

        Returns:
            The created folder with its host-assigned id

        Raises:
            HostNotFoundError: If the parent id is unknown to the host
            HostWriteError: If the store cannot be written
        """
        ...

    @abstractmethod
    async def open_url(self, url: str) -> bool:
        """
        Open a bookmark URL for the user.

        Returns:
            True if the platform acknowledged opening it
        """
        ...

    @property
    @abstractmethod
    def is_live(self) -> bool:
        """Whether this host is backed by a real bookmark store."""
        ...

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Human-readable name for display purposes."""
        ...


class HostError(Exception):
    """
    Exception raised for bookmark host errors.

    Attributes:
        message: Error description
        source_name: Name of the host that raised the error
        original_error: The underlying exception if any
    """

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.source_name = source_name
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []
        if self.source_name:
            parts.append(f"[{self.source_name}]")
        parts.append(self.message)
        if self.original_error:
            parts.append(
                f"(Caused by: {type(self.original_error).__name__}: {self.original_error})"
            )
        return " ".join(parts)


class HostConnectionError(HostError):
    """Raised when the bookmark store cannot be reached or read."""

    pass


class HostNotFoundError(HostError):
    """Raised when a requested node does not exist in the store."""

    pass


class HostWriteError(HostError):
    """Raised when a mutation cannot be written to the store."""

    pass
