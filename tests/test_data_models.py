"""
Unit tests for data models module.

Tests the Bookmark class and the conversion of host dictionaries into
typed tree nodes.
"""

from bookmark_cosmos.core.data_models import (
    FALLBACK_CATEGORY,
    Bookmark,
    ContainerNode,
    LeafNode,
    parse_tree,
    parse_tree_node,
)


class TestBookmark:
    """Test Bookmark class."""

    def test_defaults(self):
        """Test creating a bookmark with only required fields."""
        bookmark = Bookmark(id="1", url="https://example.com")

        assert bookmark.title == ""
        assert bookmark.category == FALLBACK_CATEGORY
        assert bookmark.parent_id is None
        assert bookmark.date_added is None

    def test_effective_title_falls_back_to_url(self):
        """Blank titles display as the URL."""
        bookmark = Bookmark(id="1", url="https://example.com", title="   ")
        assert bookmark.get_effective_title() == "https://example.com"

    def test_effective_title_is_stripped(self):
        bookmark = Bookmark(id="1", url="https://example.com", title="  Example ")
        assert bookmark.get_effective_title() == "Example"

    def test_to_sample(self):
        """Only id, title and url are sent to the classifier."""
        bookmark = Bookmark(
            id="7", url="https://example.com", title="Example", category="News"
        )
        assert bookmark.to_sample() == {
            "id": "7",
            "title": "Example",
            "url": "https://example.com",
        }


class TestParseTreeNode:
    """Test conversion of host dictionaries to tree nodes."""

    def test_leaf(self):
        node = parse_tree_node(
            {
                "id": "5",
                "parentId": "1",
                "title": "GitHub",
                "url": "https://github.com",
                "dateAdded": 1678910000000,
            }
        )

        assert isinstance(node, LeafNode)
        assert node.id == "5"
        assert node.url == "https://github.com"
        assert node.parent_id == "1"
        assert node.date_added == 1678910000000

    def test_container_with_children(self):
        node = parse_tree_node(
            {
                "id": "10",
                "title": "Dev",
                "children": [{"id": "11", "title": "a", "url": "https://a.test"}],
            }
        )

        assert isinstance(node, ContainerNode)
        assert node.title == "Dev"
        assert len(node.children) == 1
        assert isinstance(node.children[0], LeafNode)

    def test_node_without_url_or_children_is_empty_container(self):
        """Malformed nodes are tolerated as empty containers."""
        node = parse_tree_node({"id": "9", "title": "Broken"})

        assert isinstance(node, ContainerNode)
        assert node.children == []

    def test_missing_title_is_empty_string(self):
        node = parse_tree_node({"id": "9", "url": "https://a.test"})
        assert node.title == ""

    def test_numeric_ids_are_strings(self):
        node = parse_tree_node({"id": 9, "parentId": 3, "url": "https://a.test"})
        assert node.id == "9"
        assert node.parent_id == "3"

    def test_invalid_date_added_is_ignored(self):
        node = parse_tree_node(
            {"id": "9", "url": "https://a.test", "dateAdded": "yesterday"}
        )
        assert node.date_added is None

    def test_non_dict_children_are_skipped(self):
        node = parse_tree_node({"id": "1", "children": ["junk", None]})
        assert node.children == []

    def test_parse_tree(self, sample_tree):
        roots = parse_tree(sample_tree)

        assert len(roots) == 1
        assert isinstance(roots[0], ContainerNode)
        assert [child.id for child in roots[0].children] == ["1", "2"]
