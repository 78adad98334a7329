"""QuadTreeNode - one quadrant of space, either a leaf or a four-way split."""
from __future__ import annotations

import logging
import math
import weakref
from typing import Generic, Iterator, TypeVar

from quadindex.geometry import Circle, Point, Rectangle
from quadindex.types import Entry, QuadTreeError

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _span(start: float, end: float) -> float:
    """Smallest extent from `start` whose float sum reaches `end`."""
    size = end - start
    while start + size < end:
        size = math.nextafter(size, math.inf)
    return size


class QuadTreeNode(Generic[T]):
    """A node of the quadtree.

    A node is a leaf iff it has no children. Leaves hold entries directly;
    internal nodes own exactly four children (top-left, top-right,
    bottom-left, bottom-right) and hold no entries. Only subdivide() and
    merge() move a node between the two states.

    The parent link is a weak reference: children never keep their parent
    alive.
    """

    def __init__(
        self, boundary: Rectangle, parent: QuadTreeNode[T] | None = None
    ) -> None:
        self._boundary = boundary
        self._entries: list[Entry[T]] = []
        self._children: tuple[QuadTreeNode[T], ...] = ()
        self._parent = weakref.ref(parent) if parent is not None else None

    def __repr__(self) -> str:
        b = self._boundary
        kind = "leaf" if self.is_leaf else "internal"
        return (
            f"QuadTreeNode({kind}, ({b.x}, {b.y}, {b.width}x{b.height}), "
            f"entries={len(self._entries)})"
        )

    # --- Properties ---

    @property
    def boundary(self) -> Rectangle:
        return self._boundary

    @property
    def entries(self) -> tuple[Entry[T], ...]:
        return tuple(self._entries)

    @property
    def entry_count(self) -> int:
        return len(self._entries)

    @property
    def parent(self) -> QuadTreeNode[T] | None:
        return self._parent() if self._parent is not None else None

    @property
    def children(self) -> tuple[QuadTreeNode[T], ...]:
        """The four children in TL, TR, BL, BR order, or () for a leaf."""
        return self._children

    @property
    def top_left(self) -> QuadTreeNode[T] | None:
        return self._children[0] if self._children else None

    @property
    def top_right(self) -> QuadTreeNode[T] | None:
        return self._children[1] if self._children else None

    @property
    def bottom_left(self) -> QuadTreeNode[T] | None:
        return self._children[2] if self._children else None

    @property
    def bottom_right(self) -> QuadTreeNode[T] | None:
        return self._children[3] if self._children else None

    @property
    def is_leaf(self) -> bool:
        return not self._children

    @property
    def depth(self) -> int:
        """Number of ancestors between this node and the root."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    # --- Lookup ---

    def find_point(self, point: Point) -> Entry[T] | None:
        """Return the entry stored at exactly `point`, or None.

        Pruning uses the inclusive boundary so points on the root's far
        edges stay reachable; below this node the search follows
        quadrant_for(), the same routing insertion uses.
        """
        if not self._boundary.contains_inclusive(point):
            return None
        return self.leaf_for(point).entry_at(point)

    def entry_at(self, point: Point) -> Entry[T] | None:
        """Scan this node's own entries for an exact match."""
        for entry in self._entries:
            if entry.point == point:
                return entry
        return None

    def quadrant_for(self, point: Point) -> QuadTreeNode[T]:
        """Select the single child that owns `point`.

        Falls back to comparing against this node's midpoint when no child's
        half-open boundary matches (points on the far edges of the root, or
        rounding at the split line).
        """
        if self.is_leaf:
            raise QuadTreeError(f"quadrant_for() called on leaf {self!r}")
        for child in self._children:
            if child._boundary.contains(point):
                return child

        mid = self._boundary.center
        logger.debug(
            "midpoint fallback for (%s, %s) in %r", point.x, point.y, self
        )
        top_left, top_right, bottom_left, bottom_right = self._children
        if point.x < mid.x:
            return top_left if point.y < mid.y else bottom_left
        return top_right if point.y < mid.y else bottom_right

    def leaf_for(self, point: Point) -> QuadTreeNode[T]:
        """Descend by quadrant routing to the leaf that owns `point`."""
        node = self
        while not node.is_leaf:
            node = node.quadrant_for(point)
        return node

    # --- Structure ---

    def subdivide(self) -> None:
        """Split into four fresh leaves and move every entry into its owner."""
        if not self.is_leaf:
            raise QuadTreeError(f"Cannot subdivide internal node {self!r}")

        b = self._boundary
        w = b.width / 2
        h = b.height / 2
        mid_x = b.x + w
        mid_y = b.y + h
        # Right and bottom children must end on this node's far edges.
        far_w = _span(mid_x, b.x + b.width)
        far_h = _span(mid_y, b.y + b.height)
        self._children = (
            QuadTreeNode(Rectangle(b.x, b.y, w, h), self),
            QuadTreeNode(Rectangle(mid_x, b.y, far_w, h), self),
            QuadTreeNode(Rectangle(b.x, mid_y, w, far_h), self),
            QuadTreeNode(Rectangle(mid_x, mid_y, far_w, far_h), self),
        )
        for entry in self._entries:
            self.quadrant_for(entry.point).add_entry(entry)
        logger.debug(
            "subdivided %r at depth %d, moved %d entries",
            self, self.depth, len(self._entries),
        )
        self._entries.clear()

    def add_entry(self, entry: Entry[T]) -> None:
        self._entries.append(entry)

    def remove_entry(self, entry: Entry[T]) -> None:
        for i, existing in enumerate(self._entries):
            if existing is entry:
                del self._entries[i]
                return
        raise ValueError(f"Entry at ({entry.point.x}, {entry.point.y}) not in node")

    def total_entry_count(self) -> int:
        if self.is_leaf:
            return len(self._entries)
        return sum(child.total_entry_count() for child in self._children)

    def can_merge(self, threshold: int) -> bool:
        """True for an internal node whose children are all leaves holding
        at most `threshold` entries between them."""
        if self.is_leaf:
            return False
        if not all(child.is_leaf for child in self._children):
            return False
        return self.total_entry_count() <= threshold

    def merge(self) -> None:
        """Pull every descendant entry up and drop the children."""
        if self.is_leaf:
            return
        collected: list[Entry[T]] = []
        self._collect_entries(collected)
        self._children = ()
        self._entries = collected
        logger.debug("merged %r", self)

    def _collect_entries(self, out: list[Entry[T]]) -> None:
        if self.is_leaf:
            out.extend(self._entries)
            return
        for child in self._children:
            child._collect_entries(out)

    # --- Range queries ---

    def query_range(self, rect: Rectangle, out: list[Entry[T]]) -> None:
        """Append entries inside `rect` (inclusive edges) to `out`."""
        if not self._boundary.intersects(rect):
            return
        if self.is_leaf:
            for entry in self._entries:
                if rect.contains_inclusive(entry.point):
                    out.append(entry)
            return
        for child in self._children:
            child.query_range(rect, out)

    def query_circle(self, circle: Circle, out: list[Entry[T]]) -> None:
        """Append entries inside `circle` to `out`."""
        if not circle.intersects_rectangle(self._boundary):
            return
        if self.is_leaf:
            for entry in self._entries:
                if circle.contains(entry.point):
                    out.append(entry)
            return
        for child in self._children:
            child.query_circle(circle, out)

    # --- Traversal ---

    def walk(self) -> Iterator[QuadTreeNode[T]]:
        """Yield this node and its descendants, pre-order, TL/TR/BL/BR."""
        yield self
        for child in self._children:
            yield from child.walk()
