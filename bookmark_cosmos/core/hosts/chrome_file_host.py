"""
Live bookmark host backed by a Chromium profile ``Bookmarks`` file.

Chromium-based browsers keep bookmarks in a JSON document with a ``roots``
object holding the bookmarks bar, other bookmarks and mobile bookmarks.
This host reads that document, presents it in the browser extension tree
shape, and writes mutations back to it. The browser should be closed while
the file is being modified, otherwise it will overwrite the changes.
"""

import contextlib
import json
import os
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .base import Node, TreeBackedHost
from .protocol import HostConnectionError, HostWriteError

ROOT_KEYS = ("bookmark_bar", "other", "synced")

# Chromium timestamps are microseconds since 1601-01-01
WINDOWS_EPOCH_OFFSET_MS = 11644473600000


def chrome_time_to_epoch_ms(value: Any) -> Optional[int]:
    """Convert a Chromium timestamp string to milliseconds since the Unix epoch."""
    try:
        micros = int(value)
    except (TypeError, ValueError):
        return None
    if micros <= 0:
        return None
    return micros // 1000 - WINDOWS_EPOCH_OFFSET_MS


def epoch_ms_to_chrome_time(value: int) -> str:
    return str((value + WINDOWS_EPOCH_OFFSET_MS) * 1000)


def default_bookmarks_path() -> Path:
    """Locate the default Chrome profile ``Bookmarks`` file for this platform."""
    home = Path.home()
    if os.name == "nt":
        base = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
        return base / "Google" / "Chrome" / "User Data" / "Default" / "Bookmarks"
    mac_path = home / "Library" / "Application Support" / "Google" / "Chrome" / "Default"
    if mac_path.exists():
        return mac_path / "Bookmarks"
    return home / ".config" / "google-chrome" / "Default" / "Bookmarks"


class ChromeFileHost(TreeBackedHost):
    """Host that reads and writes a Chromium ``Bookmarks`` JSON file."""

    def __init__(self, bookmarks_file: Optional[Union[str, Path]] = None):
        """
        Initialize the host.

        Args:
            bookmarks_file: Path to the profile ``Bookmarks`` file; defaults
                to the platform's default Chrome profile
        """
        super().__init__()
        self.bookmarks_file = (
            Path(bookmarks_file) if bookmarks_file else default_bookmarks_path()
        )
        self._document: Optional[Dict[str, Any]] = None

    @property
    def is_live(self) -> bool:
        return True

    @property
    def source_name(self) -> str:
        return f"Chrome profile ({self.bookmarks_file})"

    def _load(self) -> Dict[str, Any]:
        if self._document is not None:
            return self._document

        if not self.bookmarks_file.exists():
            raise HostConnectionError(
                f"Bookmarks file not found: {self.bookmarks_file}", self.source_name
            )

        try:
            with open(self.bookmarks_file, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            raise HostConnectionError(
                "Unable to read bookmarks file", self.source_name, e
            ) from e

        if not isinstance(document, dict) or not isinstance(document.get("roots"), dict):
            raise HostConnectionError(
                "Bookmarks file has no 'roots' object", self.source_name
            )

        self._document = document
        self.logger.info(f"Loaded bookmarks from {self.bookmarks_file}")
        return document

    def _roots(self) -> List[Node]:
        roots = self._load()["roots"]
        return [roots[key] for key in ROOT_KEYS if isinstance(roots.get(key), dict)]

    def _new_folder_node(self, folder_id: str, title: str, parent_id: str) -> Node:
        now_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
        return {
            "children": [],
            "date_added": epoch_ms_to_chrome_time(now_ms),
            "date_modified": "0",
            "guid": str(uuid.uuid4()),
            "id": folder_id,
            "name": title,
            "type": "folder",
        }

    def _commit(self) -> None:
        document = self._load()
        # The browser recomputes the checksum; a stale one marks the file corrupt
        document.pop("checksum", None)

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=".bookmarks-", dir=self.bookmarks_file.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=3, ensure_ascii=False)
            os.replace(tmp_name, self.bookmarks_file)
        except OSError as e:
            # The cached document holds a change that never reached disk
            self._document = None
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise HostWriteError(
                "Unable to write bookmarks file", self.source_name, e
            ) from e

    def _to_tree_node(self, raw: Node, parent_id: str) -> Dict[str, Any]:
        node = {
            "id": str(raw.get("id", "")),
            "parentId": parent_id,
            "title": raw.get("name", ""),
        }
        date_added = chrome_time_to_epoch_ms(raw.get("date_added"))
        if date_added is not None:
            node["dateAdded"] = date_added

        if raw.get("type") == "url" or "url" in raw:
            node["url"] = raw.get("url", "")
        else:
            node["children"] = [
                self._to_tree_node(child, node["id"])
                for child in raw.get("children", [])
                if isinstance(child, dict)
            ]
        return node

    async def fetch_tree(self) -> List[Dict[str, Any]]:
        # Re-read so the snapshot reflects edits made outside this process
        self._document = None
        roots = self._roots()
        return [
            {
                "id": "0",
                "title": "",
                "children": [self._to_tree_node(root, "0") for root in roots],
            }
        ]
