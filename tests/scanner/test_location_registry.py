"""
Tests for ShortcodeLocation state handling and LocationRegistry.
"""

import pytest

from shortcodes.errors import ShortcodeStateError
from shortcodes.scanner.location import LocationRegistry, ShortcodeLocation
from shortcodes.scanner.tracker import build_locations


def _closed(start, name, end, content="", content_start=None, children=()):
    loc = ShortcodeLocation(start, name, content_start=content_start)
    for child in children:
        loc.add_child(child)
    loc.finish(end, content)
    return loc


class TestShortcodeLocation:
    def test_open_state(self):
        loc = ShortcodeLocation(3, "a", [("k", "v")], content_start=8)

        assert not loc.is_closed
        assert loc.start_offset == 3
        assert loc.arguments == (("k", "v"),)
        assert loc.content_start == 8

    def test_reading_end_while_open_fails(self):
        loc = ShortcodeLocation(0, "a")

        with pytest.raises(ShortcodeStateError):
            _ = loc.end_offset
        with pytest.raises(ShortcodeStateError):
            _ = loc.inner_content

    def test_finish_once(self):
        loc = ShortcodeLocation(0, "a", content_start=5)
        loc.finish(15, "body")

        assert loc.is_closed
        assert loc.end_offset == 15
        assert loc.inner_content == "body"
        assert loc.content_end == 9

        with pytest.raises(ShortcodeStateError):
            loc.finish(20, "")

    def test_finish_requires_end_after_start(self):
        loc = ShortcodeLocation(10, "a")

        with pytest.raises(ShortcodeStateError):
            loc.finish(10)

    def test_no_children_after_close(self):
        loc = _closed(0, "a", 5)

        with pytest.raises(ShortcodeStateError):
            loc.add_child(_closed(1, "b", 2))

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            ShortcodeLocation(0, "")

    def test_argument_helpers(self):
        loc = ShortcodeLocation(0, "a", [("x", "1"), ("", "pos"), ("x", "2"), ("", "more")])

        assert loc.get("x") == "1"
        assert loc.get("missing", "d") == "d"
        assert loc.get_all("x") == ["1", "2"]
        assert loc.positional == ["pos", "more"]

    def test_to_dict(self):
        registry = build_locations('<<a k="v">>x<<b/>>y<</a>>')

        data = registry[0].to_dict()

        assert data["name"] == "a"
        assert data["arguments"] == [["k", "v"]]
        assert data["content"] == "x<<b/>>y"
        assert data["children"][0]["name"] == "b"
        assert data["children"][0]["self_closing"] is True


class TestLocationRegistry:
    def test_sequence_protocol(self):
        registry = build_locations("<<a/>><<b/>>")

        assert len(registry) == 2
        assert [loc.name for loc in registry] == ["a", "b"]
        assert registry[-1].name == "b"
        assert [loc.name for loc in registry[0:1]] == ["a"]

    def test_walk_is_depth_first(self):
        registry = build_locations("<<a>><<b>><<c/>><</b>><<d/>><</a>><<e/>>")

        assert [loc.name for loc in registry.walk()] == ["a", "b", "c", "d", "e"]

    def test_innermost_first(self):
        registry = build_locations("<<a>><<b>><<c/>><</b>><<d/>><</a>><<e/>>")

        assert [loc.name for loc in registry.innermost_first()] == ["c", "b", "d", "a", "e"]

    def test_names(self):
        registry = build_locations("<<a>><<b/>><<a/>><</a>>")

        assert registry.names() == ["a", "b"]

    def test_rejects_open_location(self):
        with pytest.raises(ShortcodeStateError):
            LocationRegistry([ShortcodeLocation(0, "a")])

    def test_rejects_overlapping_siblings(self):
        with pytest.raises(ShortcodeStateError):
            LocationRegistry([_closed(0, "a", 10), _closed(5, "b", 12)])

    def test_rejects_unordered_siblings(self):
        with pytest.raises(ShortcodeStateError):
            LocationRegistry([_closed(10, "a", 12), _closed(0, "b", 5)])

    def test_rejects_child_outside_parent_content(self):
        child = _closed(0, "b", 4)
        parent = ShortcodeLocation(0, "a", content_start=5)
        parent.add_child(child)
        parent.finish(20, "0123456")

        with pytest.raises(ShortcodeStateError):
            LocationRegistry([parent])

    def test_rejects_span_beyond_text(self):
        with pytest.raises(ShortcodeStateError):
            LocationRegistry([_closed(0, "a", 10)], text_length=5)

    def test_to_dict(self):
        registry = build_locations("<<a/>>")

        assert registry.to_dict() == [registry[0].to_dict()]


class TestDeepNesting:
    """Nesting depth is bounded by memory, not by the interpreter stack."""

    DEPTH = 1500

    def _text(self):
        return "<<a>>" * self.DEPTH + "x" + "<</a>>" * self.DEPTH

    def test_deeply_nested_document_is_published(self):
        registry = build_locations(self._text())

        assert len(registry) == 1
        locations = list(registry.walk())
        assert len(locations) == self.DEPTH
        assert all(loc.is_closed for loc in locations)
        assert locations[-1].inner_content == "x"
        assert locations[-1].start_offset == 5 * (self.DEPTH - 1)

    def test_innermost_first_on_deep_nesting(self):
        registry = build_locations(self._text())

        order = list(registry.innermost_first())

        assert order[0].inner_content == "x"
        assert order[-1] is registry[0]
        assert [loc.start_offset for loc in order] == [5 * i for i in reversed(range(self.DEPTH))]

    def test_to_dict_on_deep_nesting(self):
        data = build_locations(self._text()).to_dict()[0]

        depth = 1
        while data["children"]:
            data = data["children"][0]
            depth += 1
        assert depth == self.DEPTH
        assert data["content"] == "x"
