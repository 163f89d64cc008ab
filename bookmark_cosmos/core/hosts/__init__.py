"""
Bookmark hosts.

The host is the platform that owns the bookmark store. One host strategy is
chosen at startup by ``create_host`` and passed explicitly to the session,
the mutator and anything else that talks to the store.

Main Components:
    - BookmarkHost: Protocol defining the host interface
    - MockBookmarkHost: In-memory preview data
    - ChromeFileHost: Chromium profile ``Bookmarks`` JSON file

Usage:
    >>> from bookmark_cosmos.core.hosts import create_host
    >>> host = create_host(config)
    >>> tree = await host.fetch_tree()
"""

from .chrome_file_host import ChromeFileHost
from .mock_host import MockBookmarkHost, build_mock_tree
from .protocol import (
    BookmarkHost,
    HostConnectionError,
    HostError,
    HostNotFoundError,
    HostWriteError,
)


def create_host(config) -> BookmarkHost:
    """
    Create the host strategy selected by configuration.

    Args:
        config: ``CosmosConfig`` instance

    Returns:
        A ``ChromeFileHost`` for ``mode = "chrome"``, otherwise a
        ``MockBookmarkHost``
    """
    host_config = config.host
    if host_config.mode == "chrome":
        return ChromeFileHost(host_config.bookmarks_file)
    return MockBookmarkHost(latency=host_config.mock_latency)


__all__ = [
    "BookmarkHost",
    "HostError",
    "HostConnectionError",
    "HostNotFoundError",
    "HostWriteError",
    "ChromeFileHost",
    "MockBookmarkHost",
    "build_mock_tree",
    "create_host",
]
