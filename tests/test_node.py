"""
Test suite for QuadTreeNode.

Tests cover:
- Leaf/internal state
- Subdivision geometry and entry redistribution
- Quadrant routing and the midpoint fallback
- Point lookup
- Range and circle collection
- Merge eligibility and merging
"""
from __future__ import annotations

import gc

import pytest

from quadindex import Circle, Entry, Point, QuadTreeError, QuadTreeNode, Rectangle


def make_node() -> QuadTreeNode[str]:
    return QuadTreeNode(Rectangle(0.0, 0.0, 100.0, 100.0))


def add(node: QuadTreeNode[str], x: float, y: float, value: str) -> Entry[str]:
    entry = Entry(Point(x, y), value)
    node.add_entry(entry)
    return entry


class TestNodeState:
    """Leaf state and direct entry bookkeeping."""

    def test_new_node_is_leaf(self):
        node = make_node()
        assert node.is_leaf
        assert node.children == ()
        assert node.entries == ()
        assert node.parent is None
        assert node.depth == 0

    def test_add_and_remove_entry(self):
        node = make_node()
        a = add(node, 1.0, 1.0, "a")
        b = add(node, 2.0, 2.0, "b")
        node.remove_entry(a)
        assert node.entries == (b,)
        assert node.entry_count == 1

    def test_remove_missing_entry_raises(self):
        node = make_node()
        with pytest.raises(ValueError):
            node.remove_entry(Entry(Point(1.0, 1.0), "nope"))

    def test_entries_is_a_copy(self):
        node = make_node()
        add(node, 1.0, 1.0, "a")
        entries = node.entries
        add(node, 2.0, 2.0, "b")
        assert len(entries) == 1


class TestSubdivide:
    """Splitting a leaf into four quadrant children."""

    def test_child_boundaries(self):
        node = make_node()
        node.subdivide()
        assert not node.is_leaf
        assert node.top_left.boundary == Rectangle(0.0, 0.0, 50.0, 50.0)
        assert node.top_right.boundary == Rectangle(50.0, 0.0, 50.0, 50.0)
        assert node.bottom_left.boundary == Rectangle(0.0, 50.0, 50.0, 50.0)
        assert node.bottom_right.boundary == Rectangle(50.0, 50.0, 50.0, 50.0)

    def test_children_are_leaves_linked_to_parent(self):
        node = make_node()
        node.subdivide()
        for child in node.children:
            assert child.is_leaf
            assert child.parent is node
            assert child.depth == 1

    def test_entries_moved_to_owning_children(self):
        node = make_node()
        tl = add(node, 10.0, 10.0, "tl")
        tr = add(node, 60.0, 10.0, "tr")
        bl = add(node, 10.0, 60.0, "bl")
        br = add(node, 50.0, 50.0, "br")
        node.subdivide()
        assert node.entries == ()
        assert node.top_left.entries == (tl,)
        assert node.top_right.entries == (tr,)
        assert node.bottom_left.entries == (bl,)
        assert node.bottom_right.entries == (br,)
        assert node.total_entry_count() == 4

    def test_children_reach_far_edges(self):
        # x + width/2 + width/2 rounds below x + width for this boundary.
        node = QuadTreeNode(Rectangle(7.976765759359871, 0.0, 6.8429994798352585, 1.0))
        node.subdivide()
        b = node.boundary
        for child in (node.top_right, node.bottom_right):
            assert child.boundary.x + child.boundary.width >= b.x + b.width
        for child in (node.bottom_left, node.bottom_right):
            assert child.boundary.y + child.boundary.height >= b.y + b.height
        assert node.top_right.boundary.x == node.top_left.boundary.x + node.top_left.boundary.width

    def test_subdivide_internal_raises(self):
        node = make_node()
        node.subdivide()
        with pytest.raises(QuadTreeError):
            node.subdivide()

    def test_parent_link_does_not_keep_parent_alive(self):
        node = make_node()
        node.subdivide()
        child = node.top_left
        del node
        gc.collect()
        assert child.parent is None


class TestQuadrantFor:
    """Routing a point to the child that owns it."""

    def test_routes_interior_points(self):
        node = make_node()
        node.subdivide()
        assert node.quadrant_for(Point(49.9, 10.0)) is node.top_left
        assert node.quadrant_for(Point(50.0, 10.0)) is node.top_right
        assert node.quadrant_for(Point(10.0, 50.0)) is node.bottom_left
        assert node.quadrant_for(Point(50.0, 50.0)) is node.bottom_right

    def test_far_edges_use_midpoint_fallback(self):
        node = make_node()
        node.subdivide()
        assert node.quadrant_for(Point(100.0, 100.0)) is node.bottom_right
        assert node.quadrant_for(Point(100.0, 10.0)) is node.top_right
        assert node.quadrant_for(Point(10.0, 100.0)) is node.bottom_left

    def test_leaf_raises(self):
        with pytest.raises(QuadTreeError):
            make_node().quadrant_for(Point(1.0, 1.0))

    def test_leaf_for_descends(self):
        node = make_node()
        node.subdivide()
        node.bottom_right.subdivide()
        leaf = node.leaf_for(Point(90.0, 90.0))
        assert leaf is node.bottom_right.bottom_right
        assert leaf.depth == 2


class TestFindPoint:
    """Exact-point lookup through the subtree."""

    def test_finds_in_leaf(self):
        node = make_node()
        entry = add(node, 3.0, 4.0, "x")
        assert node.find_point(Point(3.0, 4.0)) is entry

    def test_missing_returns_none(self):
        node = make_node()
        add(node, 3.0, 4.0, "x")
        assert node.find_point(Point(4.0, 3.0)) is None

    def test_outside_boundary_returns_none(self):
        node = make_node()
        assert node.find_point(Point(-1.0, 4.0)) is None

    def test_delegates_to_child(self):
        node = make_node()
        entry = add(node, 75.0, 25.0, "x")
        node.subdivide()
        assert node.find_point(Point(75.0, 25.0)) is entry

    def test_far_edge_point_found_after_split(self):
        node = make_node()
        entry = add(node, 100.0, 100.0, "corner")
        node.subdivide()
        assert node.bottom_right.entries == (entry,)
        assert node.find_point(Point(100.0, 100.0)) is entry


class TestQueries:
    """Rectangle and circle collection into an output list."""

    def _populated(self) -> QuadTreeNode[str]:
        node = make_node()
        add(node, 10.0, 10.0, "a")
        add(node, 60.0, 10.0, "b")
        add(node, 10.0, 60.0, "c")
        add(node, 60.0, 60.0, "d")
        node.subdivide()
        return node

    def test_range_collects_matches_in_quadrant_order(self):
        node = self._populated()
        out: list[Entry[str]] = []
        node.query_range(Rectangle(0.0, 0.0, 100.0, 100.0), out)
        assert [e.value for e in out] == ["a", "b", "c", "d"]

    def test_range_far_edge_inclusive(self):
        node = self._populated()
        out: list[Entry[str]] = []
        node.query_range(Rectangle(0.0, 0.0, 10.0, 10.0), out)
        assert [e.value for e in out] == ["a"]

    def test_range_appends_to_existing_output(self):
        node = self._populated()
        sentinel = Entry(Point(0.0, 0.0), "sentinel")
        out = [sentinel]
        node.query_range(Rectangle(55.0, 55.0, 10.0, 10.0), out)
        assert [e.value for e in out] == ["sentinel", "d"]

    def test_range_disjoint_is_empty(self):
        node = self._populated()
        out: list[Entry[str]] = []
        node.query_range(Rectangle(200.0, 200.0, 10.0, 10.0), out)
        assert out == []

    def test_circle_collects_matches(self):
        node = self._populated()
        out: list[Entry[str]] = []
        node.query_circle(Circle(Point(35.0, 35.0), 36.0), out)
        assert [e.value for e in out] == ["a", "b", "c", "d"]

    def test_circle_excludes_outside(self):
        node = self._populated()
        out: list[Entry[str]] = []
        node.query_circle(Circle(Point(10.0, 10.0), 1.0), out)
        assert [e.value for e in out] == ["a"]


class TestMerge:
    """Merge eligibility and pulling entries back up."""

    def test_leaf_cannot_merge(self):
        assert not make_node().can_merge(100)

    def test_can_merge_under_threshold(self):
        node = make_node()
        add(node, 10.0, 10.0, "a")
        add(node, 60.0, 60.0, "b")
        node.subdivide()
        assert node.can_merge(2)
        assert not node.can_merge(1)

    def test_cannot_merge_with_grandchildren(self):
        node = make_node()
        node.subdivide()
        node.top_left.subdivide()
        assert not node.can_merge(100)
        assert node.top_left.can_merge(100)

    def test_merge_pulls_entries_up(self):
        node = make_node()
        a = add(node, 10.0, 10.0, "a")
        b = add(node, 60.0, 10.0, "b")
        c = add(node, 60.0, 60.0, "c")
        node.subdivide()
        node.merge()
        assert node.is_leaf
        assert node.children == ()
        assert node.entries == (a, b, c)

    def test_merge_collects_whole_subtree(self):
        node = make_node()
        a = add(node, 10.0, 10.0, "a")
        b = add(node, 30.0, 30.0, "b")
        node.subdivide()
        node.top_left.subdivide()
        node.merge()
        assert node.is_leaf
        assert node.entries == (a, b)

    def test_merge_on_leaf_is_noop(self):
        node = make_node()
        a = add(node, 10.0, 10.0, "a")
        node.merge()
        assert node.entries == (a,)


class TestWalk:
    def test_preorder(self):
        node = make_node()
        node.subdivide()
        node.top_right.subdivide()
        walked = list(node.walk())
        assert len(walked) == 9
        assert walked[0] is node
        assert walked[1] is node.top_left
        assert walked[2] is node.top_right
        assert walked[3] is node.top_right.top_left
        assert walked[-1] is node.bottom_right
