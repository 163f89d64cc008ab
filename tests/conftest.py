"""
Pytest configuration and shared fixtures for Bookmark Cosmos tests.

This module provides the sample bookmark trees and collections shared
across test modules.
"""

import copy
import os
from typing import Any, Dict, List

import pytest

from bookmark_cosmos.core.data_models import Bookmark, Folder

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Prevent real API calls during testing
    os.environ["BOOKMARK_COSMOS_TEST_MODE"] = "true"
    for env_var in ("GEMINI_API_KEY", "API_KEY"):
        os.environ.pop(env_var, None)


def pytest_unconfigure(config):
    """Clean up after all tests."""
    os.environ.pop("BOOKMARK_COSMOS_TEST_MODE", None)


# ============================================================================
# Tree Fixtures
# ============================================================================

SAMPLE_TREE: List[Dict[str, Any]] = [
    {
        "id": "0",
        "title": "",
        "children": [
            {
                "id": "1",
                "parentId": "0",
                "title": "Bookmarks bar",
                "children": [
                    {
                        "id": "10",
                        "parentId": "1",
                        "title": "Development",
                        "children": [
                            {
                                "id": "100",
                                "parentId": "10",
                                "title": "GitHub",
                                "url": "https://github.com",
                                "dateAdded": 1678910000000,
                            },
                            {
                                "id": "11",
                                "parentId": "10",
                                "title": "Python",
                                "children": [
                                    {
                                        "id": "101",
                                        "parentId": "11",
                                        "title": "Python Docs",
                                        "url": "https://docs.python.org",
                                    }
                                ],
                            },
                        ],
                    },
                    {
                        "id": "102",
                        "parentId": "1",
                        "title": "Netflix",
                        "url": "https://netflix.com",
                    },
                ],
            },
            {
                "id": "2",
                "parentId": "0",
                "title": "Other bookmarks",
                "children": [
                    {
                        "id": "20",
                        "parentId": "2",
                        "title": "News",
                        "children": [
                            {
                                "id": "103",
                                "parentId": "20",
                                "title": "",
                                "url": "https://news.ycombinator.com",
                            }
                        ],
                    }
                ],
            },
        ],
    }
]


@pytest.fixture
def sample_tree() -> List[Dict[str, Any]]:
    """A browser-style bookmark tree with nested folders."""
    return copy.deepcopy(SAMPLE_TREE)


@pytest.fixture
def sample_bookmarks() -> List[Bookmark]:
    """A flat collection resembling the preview data set."""
    return [
        Bookmark(id="1", title="React Documentation", url="https://reactjs.org", category="Development"),
        Bookmark(id="2", title="Tailwind CSS", url="https://tailwindcss.com", category="Design"),
        Bookmark(id="3", title="Google Gemini", url="https://deepmind.google/technologies/gemini/", category="AI"),
        Bookmark(id="4", title="GitHub", url="https://github.com", category="Development"),
        Bookmark(id="5", title="Dribbble", url="https://dribbble.com", category="Design"),
        Bookmark(id="6", title="YouTube", url="https://youtube.com", category="Entertainment"),
        Bookmark(id="7", title="Netflix", url="https://netflix.com", category="Entertainment"),
        Bookmark(id="8", title="MDN Web Docs", url="https://developer.mozilla.org", category="Development"),
        Bookmark(id="9", title="Figma", url="https://figma.com", category="Design"),
        Bookmark(id="10", title="Vercel", url="https://vercel.com", category="Hosting"),
    ]


@pytest.fixture
def sample_folders() -> List[Folder]:
    """A small folder collection."""
    return [Folder(id="10", title="Development"), Folder(id="20", title="News")]
