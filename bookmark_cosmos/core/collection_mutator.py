"""
Optimistic mutation of the in-memory bookmark collection.

Each mutation is reflected in the in-memory collections immediately and the
matching request is sent to the host in the background. Host failures are
logged and recorded but the local change is not reverted, so the in-memory
view can drift from the host store until the next full reload.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Coroutine, Dict, List, Optional, Set

from .data_models import Bookmark, Folder
from .hosts.protocol import BookmarkHost, HostWriteError

logger = logging.getLogger(__name__)

LOCAL_ID_PREFIX = "local-"


def delete_bookmark(collection: List[Bookmark], bookmark_id: str) -> bool:
    """
    Remove the bookmark with the given id, in place.

    Returns:
        True if a bookmark was removed, False if the id was absent
    """
    for index, bookmark in enumerate(collection):
        if bookmark.id == bookmark_id:
            del collection[index]
            return True
    return False


def move_bookmark(
    collection: List[Bookmark], bookmark_id: str, new_folder_id: str
) -> bool:
    """
    Point a bookmark at a new parent folder, in place.

    The category is left unchanged and the folder id is not validated.

    Returns:
        True if the bookmark was found, False otherwise
    """
    for bookmark in collection:
        if bookmark.id == bookmark_id:
            bookmark.parent_id = new_folder_id
            return True
    return False


def create_local_folder(folders: List[Folder], title: str) -> Optional[Folder]:
    """
    Append a folder with a locally generated placeholder id, in place.

    Args:
        folders: Folder collection
        title: Requested title; surrounding whitespace is trimmed

    Returns:
        The new folder, or None when the title is blank
    """
    title = (title or "").strip()
    if not title:
        return None
    folder = Folder(id=f"{LOCAL_ID_PREFIX}{uuid.uuid4().hex[:12]}", title=title)
    folders.append(folder)
    return folder


@dataclass
class HostFailure:
    """A host request that failed after its local change was applied."""

    operation: str
    target_id: str
    error: str


class CollectionMutator:
    """
    Applies delete, move and create-folder to the in-memory collections.

    Without a host, only the local change is made. With a host, the host
    call is scheduled on the running event loop and not awaited; use
    ``drain()`` to wait for outstanding calls.
    """

    def __init__(
        self,
        bookmarks: List[Bookmark],
        folders: List[Folder],
        host: Optional[BookmarkHost] = None,
        new_folder_parent_id: str = "2",
    ):
        """
        Initialize the mutator.

        Args:
            bookmarks: Bookmark collection mutated in place
            folders: Folder collection mutated in place
            host: Host receiving mutation requests, or None for local-only
            new_folder_parent_id: Host folder under which new folders are created
        """
        self.bookmarks = bookmarks
        self.folders = folders
        self.host = host
        self.new_folder_parent_id = new_folder_parent_id
        self.failures: List[HostFailure] = []
        self._pending: Set[asyncio.Task] = set()
        # Placeholder folder id -> host create request resolving to the host id
        self._creates: Dict[str, asyncio.Task] = {}

    def delete(self, bookmark_id: str) -> bool:
        """Delete a bookmark; unknown ids are a no-op."""
        loop = self._host_loop()
        removed = delete_bookmark(self.bookmarks, bookmark_id)
        if not removed:
            logger.debug(f"Delete ignored, no bookmark with id {bookmark_id}")
            return False
        if loop is not None:
            self._dispatch(loop, "delete", bookmark_id, self.host.remove(bookmark_id))
        return True

    def move(self, bookmark_id: str, new_folder_id: str) -> bool:
        """
        Move a bookmark to another folder; unknown ids are a no-op.

        A folder created in this session may be addressed by its placeholder
        id. The host request then waits for the folder to exist on the host
        and uses the host-assigned id.
        """
        loop = self._host_loop()
        new_folder_id = self._resolve_folder_id(new_folder_id)
        moved = move_bookmark(self.bookmarks, bookmark_id, new_folder_id)
        if not moved:
            logger.debug(f"Move ignored, no bookmark with id {bookmark_id}")
            return False
        if loop is not None:
            self._dispatch(
                loop, "move", bookmark_id, self._move_on_host(bookmark_id, new_folder_id)
            )
        return True

    def create_folder(self, title: str) -> Optional[Folder]:
        """
        Create a folder; blank titles are rejected.

        The folder is appended at once with a placeholder id. When a host is
        present and its create call succeeds, the placeholder id is replaced
        by the host-assigned one.

        Returns:
            The new folder, or None if the title was blank
        """
        loop = self._host_loop()
        folder = create_local_folder(self.folders, title)
        if folder is None:
            logger.debug("Create folder ignored, blank title")
            return None
        if loop is not None:
            self._creates[folder.id] = self._dispatch(
                loop, "create", folder.id, self._create_on_host(folder)
            )
        return folder

    def _resolve_folder_id(self, folder_id: str) -> str:
        """Map a placeholder id to its host id once the host has created it."""
        task = self._creates.get(folder_id)
        if task is None or not task.done() or task.cancelled():
            return folder_id
        if task.exception() is not None:
            return folder_id
        return task.result()

    async def _create_on_host(self, folder: Folder) -> str:
        created = await self.host.create(self.new_folder_parent_id, folder.title)
        placeholder_id = folder.id
        folder.id = created.id
        # Anything moved into the placeholder meanwhile follows it
        for bookmark in self.bookmarks:
            if bookmark.parent_id == placeholder_id:
                bookmark.parent_id = created.id
        logger.debug(f"Folder {placeholder_id} adopted host id {created.id}")
        return created.id

    async def _move_on_host(self, bookmark_id: str, new_folder_id: str) -> None:
        create = self._creates.get(new_folder_id)
        if create is not None:
            try:
                new_folder_id = await asyncio.shield(create)
            except Exception as e:
                raise HostWriteError(
                    f"Target folder {new_folder_id!r} was not created: {e}"
                ) from e
        await self.host.move(bookmark_id, new_folder_id)

    def _host_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self.host is None:
            return None
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError(
                "CollectionMutator with a host must be used inside a running event loop"
            ) from None

    def _dispatch(
        self,
        loop: asyncio.AbstractEventLoop,
        operation: str,
        target_id: str,
        request: Coroutine,
    ) -> asyncio.Task:
        task = loop.create_task(request)
        self._pending.add(task)
        task.add_done_callback(
            lambda done: self._on_done(done, operation, target_id)
        )
        return task

    def _on_done(self, task: asyncio.Task, operation: str, target_id: str) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        # Local change stays applied; the view may now disagree with the host
        logger.warning(f"Host {operation} failed for {target_id}: {error}")
        self.failures.append(
            HostFailure(operation=operation, target_id=target_id, error=str(error))
        )

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every outstanding host request to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
