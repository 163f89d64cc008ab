"""
Mock bookmark host for running without a browser bookmark store.

Serves a small fixed bookmark tree from memory so the application can be
previewed and tested outside a live browser profile.
"""

import asyncio
import copy
from typing import Any, Dict, List, Optional

from .base import Node, TreeBackedHost

# (id, title, url, folder, dateAdded)
MOCK_BOOKMARKS = [
    ("101", "React Documentation", "https://reactjs.org", "Development", 1678880000000),
    ("102", "Tailwind CSS", "https://tailwindcss.com", "Design", 1678890000000),
    ("103", "Google Gemini", "https://deepmind.google/technologies/gemini/", "AI", 1678900000000),
    ("104", "GitHub", "https://github.com", "Development", 1678910000000),
    ("105", "Dribbble", "https://dribbble.com", "Design", 1678920000000),
    ("106", "YouTube", "https://youtube.com", "Entertainment", 1678930000000),
    ("107", "Netflix", "https://netflix.com", "Entertainment", 1678940000000),
    ("108", "MDN Web Docs", "https://developer.mozilla.org", "Development", 1678950000000),
    ("109", "Figma", "https://figma.com", "Design", 1678960000000),
    ("110", "Vercel", "https://vercel.com", "Hosting", 1678970000000),
]

MOCK_FOLDER_IDS = {
    "Development": "11",
    "Design": "12",
    "AI": "13",
    "Entertainment": "14",
    "Hosting": "15",
}


def build_mock_tree() -> List[Node]:
    """
    Build the preview bookmark tree.

    Returns:
        A single browser-style root (id ``"0"``) holding the bookmarks bar
        (``"1"``) and other bookmarks (``"2"``); the sample folders live in
        the bookmarks bar.
    """
    folders: Dict[str, Node] = {}
    for name, folder_id in MOCK_FOLDER_IDS.items():
        folders[name] = {"id": folder_id, "parentId": "1", "title": name, "children": []}

    for bookmark_id, title, url, folder, date_added in MOCK_BOOKMARKS:
        parent = folders[folder]
        parent["children"].append(
            {
                "id": bookmark_id,
                "parentId": parent["id"],
                "title": title,
                "url": url,
                "dateAdded": date_added,
            }
        )

    return [
        {
            "id": "0",
            "title": "",
            "children": [
                {
                    "id": "1",
                    "parentId": "0",
                    "title": "Bookmarks bar",
                    "children": list(folders.values()),
                },
                {"id": "2", "parentId": "0", "title": "Other bookmarks", "children": []},
            ],
        }
    ]


class MockBookmarkHost(TreeBackedHost):
    """
    In-memory host seeded with preview data.

    Mutations change only this object's tree and are lost when the process
    exits.
    """

    def __init__(self, tree: Optional[List[Node]] = None, latency: float = 0.0):
        """
        Initialize the mock host.

        Args:
            tree: Initial tree; defaults to the preview data set
            latency: Simulated delay in seconds before each call completes
        """
        super().__init__()
        self._tree = tree if tree is not None else build_mock_tree()
        self.latency = latency

    def _roots(self) -> List[Node]:
        return self._tree

    def _new_folder_node(self, folder_id: str, title: str, parent_id: str) -> Node:
        return {"id": folder_id, "parentId": parent_id, "title": title, "children": []}

    async def _simulate_latency(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    async def fetch_tree(self) -> List[Dict[str, Any]]:
        await self._simulate_latency()
        return copy.deepcopy(self._tree)

    async def remove(self, bookmark_id: str) -> None:
        await self._simulate_latency()
        await super().remove(bookmark_id)

    async def move(self, bookmark_id: str, new_parent_id: str) -> None:
        await self._simulate_latency()
        await super().move(bookmark_id, new_parent_id)

    async def create(self, parent_id: str, title: str):
        await self._simulate_latency()
        return await super().create(parent_id, title)

    @property
    def is_live(self) -> bool:
        return False

    @property
    def source_name(self) -> str:
        return "Preview (mock data)"
