"""Unit tests for the select and tag indexer."""

from icucheck.indexer import index_message, unique_key
from icucheck.parser import parse_message

NESTED = "{a, plural, one {x} other {{b, plural, one {y} other {z}}}}"


def nodes_of(text):
    outcome = parse_message(text)
    assert outcome.ok
    return outcome.nodes


class TestIndexMessage:
    """Test cases for index_message."""

    def test_level_only_by_default(self):
        """Test that nested selects are left out of a level index."""
        index = index_message(nodes_of(NESTED))
        assert list(index.selects) == ["a"]
        assert index.selects["a"].categories == ["one", "other"]

    def test_deep_index(self):
        """Test that a deep index reaches nested selects in pre-order."""
        index = index_message(nodes_of(NESTED), deep=True)
        assert index.pivots() == ["a", "b"]

    def test_duplicate_pivots_get_suffix(self):
        """Test that a repeated pivot keeps both entries."""
        text = "{a, select, x {1} other {2}} {a, select, x {3} other {4}}"
        index = index_message(nodes_of(text))
        assert list(index.selects) == ["a", "a#1"]
        assert index.selects["a#1"].name == "a"
        assert index.pivots() == ["a", "a"]

    def test_tags(self):
        """Test that tag children belong to the level of the tag."""
        nodes = nodes_of("<b>{n, plural, one {a} other {<i>{m, select, x {y} other {z}}</i>}}</b>")
        level = index_message(nodes)
        assert list(level.tags) == ["b"]
        assert list(level.selects) == ["n"]
        deep = index_message(nodes, deep=True)
        assert list(deep.tags) == ["b", "i"]
        assert deep.pivots() == ["n", "m"]

    def test_empty(self):
        """Test that plain text produces empty maps."""
        index = index_message(nodes_of("Hello {name}"))
        assert index.selects == {}
        assert index.tags == {}


class TestUniqueKey:
    """Test cases for unique_key."""

    def test_free_name(self):
        """Test that an unused name is returned as is."""
        assert unique_key({}, "a") == "a"

    def test_next_suffix(self):
        """Test that the first unused suffix is picked."""
        assert unique_key({"a": 1, "a#1": 2}, "a") == "a#2"
