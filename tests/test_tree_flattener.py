"""
Unit tests for the tree flattener.
"""

from bookmark_cosmos.core.data_models import ContainerNode, LeafNode, parse_tree
from bookmark_cosmos.core.query_engine import QueryEngine
from bookmark_cosmos.core.tree_flattener import TreeFlattener, flatten_tree


def leaf(node_id, url="https://example.com", title="", parent_id=None):
    return LeafNode(id=node_id, url=url, title=title, parent_id=parent_id)


def folder(node_id, title, children=None):
    return ContainerNode(id=node_id, title=title, children=children or [])


class TestTreeFlattener:
    """Test TreeFlattener class."""

    def test_browser_tree(self, sample_tree):
        """Nested folders become categories, roots become the default label."""
        result = TreeFlattener().flatten(parse_tree(sample_tree))

        assert [b.id for b in result.bookmarks] == ["100", "101", "102", "103"]
        categories = {b.id: b.category for b in result.bookmarks}
        assert categories == {
            "100": "Development",
            "101": "Python",
            "102": "General",
            "103": "News",
        }
        assert [(f.id, f.title) for f in result.folders] == [
            ("10", "Development"),
            ("11", "Python"),
            ("20", "News"),
        ]

    def test_parent_ids_follow_enclosing_container(self, sample_tree):
        result = TreeFlattener().flatten(parse_tree(sample_tree))
        parents = {b.id: b.parent_id for b in result.bookmarks}

        assert parents == {"100": "10", "101": "11", "102": "1", "103": "20"}

    def test_root_containers_are_not_folders(self, sample_tree):
        result = TreeFlattener().flatten(parse_tree(sample_tree))
        folder_ids = {f.id for f in result.folders}

        assert folder_ids.isdisjoint({"0", "1", "2", "3"})

    def test_direct_child_of_root_is_general(self):
        """A single bookmark directly in "Bookmarks bar" gets the default label."""
        tree = [folder("1", "Bookmarks bar", [leaf("5", "https://a.com", "A")])]

        result = TreeFlattener().flatten(tree)

        assert len(result.bookmarks) == 1
        assert result.bookmarks[0].category == "General"
        assert result.folders == []

    def test_top_level_leaf_gets_fallback(self):
        result = TreeFlattener().flatten([leaf("5", parent_id="9")])

        assert result.bookmarks[0].category == "Uncategorized"
        assert result.bookmarks[0].parent_id == "9"

    def test_empty_folder_title_uses_fallback(self):
        tree = [folder("1", "Bar", [folder("40", "", [leaf("5")])])]

        result = TreeFlattener().flatten(tree)

        assert result.bookmarks[0].category == "Uncategorized"
        assert result.folders[0].id == "40"
        assert result.folders[0].title == ""

    def test_empty_folders_are_still_listed(self):
        tree = [folder("1", "Bar", [folder("40", "Empty")])]

        result = TreeFlattener().flatten(tree)

        assert result.bookmarks == []
        assert [f.title for f in result.folders] == ["Empty"]

    def test_duplicate_folder_id_keeps_first(self):
        tree = [
            folder("1", "Bar", [folder("40", "First", [leaf("5")])]),
            folder("2", "Other", [folder("40", "Second", [leaf("6")])]),
        ]

        result = TreeFlattener().flatten(tree)

        assert len(result.folders) == 1
        assert result.folders[0].title == "First"
        # Bookmarks under both containers are still flattened
        assert [b.category for b in result.bookmarks] == ["First", "Second"]

    def test_empty_tree(self):
        result = TreeFlattener().flatten([])

        assert result.bookmarks == []
        assert result.folders == []

    def test_custom_labels_and_roots(self):
        flattener = TreeFlattener(
            root_ids=["root"], default_category="Inbox", fallback_category="Misc"
        )
        tree = [folder("root", "Root", [leaf("5"), folder("1", "Bar", [leaf("6")])])]

        result = flattener.flatten(tree)

        assert [b.category for b in result.bookmarks] == ["Inbox", "Bar"]
        assert [f.id for f in result.folders] == ["1"]

    def test_every_bookmark_is_counted_and_categorized(self, sample_tree):
        result = TreeFlattener().flatten(parse_tree(sample_tree))
        counts = QueryEngine().aggregate(result.bookmarks)

        assert sum(c.count for c in counts) == len(result.bookmarks)
        assert all(b.category for b in result.bookmarks)

    def test_is_root(self):
        flattener = TreeFlattener()

        assert flattener.is_root("2")
        assert not flattener.is_root("10")
        assert not flattener.is_root(None)

    def test_flatten_tree_helper(self, sample_tree):
        result = flatten_tree(parse_tree(sample_tree))
        assert len(result.bookmarks) == 4
