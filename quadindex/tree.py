"""QuadTree - the public point index built on QuadTreeNode."""
from __future__ import annotations

import logging
from typing import Generic, Iterator, TypeVar

from quadindex.config import QuadTreeConfig
from quadindex.geometry import Circle, Point, Rectangle
from quadindex.node import QuadTreeNode
from quadindex.types import Entry, PointOutOfBoundsError

T = TypeVar("T")

logger = logging.getLogger(__name__)

# Longitude -180..180, latitude -90..90.
WORLD_BOUNDARY = Rectangle(-180.0, -90.0, 360.0, 180.0)


def _as_point(point: Point | tuple[float, float]) -> Point:
    if isinstance(point, Point):
        return point
    x, y = point
    return Point(x, y)


class QuadTree(Generic[T]):
    """Point index over a bounded plane.

    Stores at most one entry per distinct point. Leaves split into four
    quadrants once they hold `split_threshold` entries and a further insert
    lands in them; after a removal, sibling leaves holding no more than
    `split_threshold // 4` entries in total collapse back into their parent.

    Not thread-safe. Callers sharing a tree across threads must serialize
    access themselves.
    """

    def __init__(
        self,
        split_threshold: int,
        boundary: Rectangle,
        *,
        max_depth: int | None = None,
    ) -> None:
        self._config = QuadTreeConfig(
            split_threshold=split_threshold,
            boundary=boundary,
            max_depth=max_depth,
        )
        self._root: QuadTreeNode[T] = QuadTreeNode(boundary)

    @staticmethod
    def from_config(config: QuadTreeConfig) -> QuadTree[T]:
        return QuadTree(
            config.split_threshold, config.boundary, max_depth=config.max_depth
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(split_threshold={self.split_threshold}, "
            f"boundary={self.boundary!r}, entries={len(self)})"
        )

    # --- Properties ---

    @property
    def config(self) -> QuadTreeConfig:
        return self._config

    @property
    def boundary(self) -> Rectangle:
        return self._config.boundary

    @property
    def split_threshold(self) -> int:
        return self._config.split_threshold

    @property
    def merge_threshold(self) -> int:
        return self._config.merge_threshold

    @property
    def max_depth(self) -> int | None:
        return self._config.max_depth

    @property
    def root(self) -> QuadTreeNode[T]:
        return self._root

    def _check_bounds(self, point: Point) -> None:
        if not self.boundary.contains_inclusive(point):
            raise PointOutOfBoundsError(point, self.boundary)

    # --- Mutation ---

    def insert(self, point: Point | tuple[float, float], value: T) -> Entry[T]:
        """Store `value` at `point`, replacing any entry already there.

        Raises PointOutOfBoundsError if `point` is outside the boundary.
        """
        point = _as_point(point)
        self._check_bounds(point)
        if self._root.find_point(point) is not None:
            self._remove(self._root, point)
        return self._insert(self._root, point, value)

    def update(self, point: Point | tuple[float, float], value: T) -> Entry[T]:
        """Replace the value stored at `point`.

        Raises KeyError if nothing is stored there.
        """
        point = _as_point(point)
        self._check_bounds(point)
        if not self._remove(self._root, point):
            raise KeyError(f"No entry at ({point.x}, {point.y})")
        return self._insert(self._root, point, value)

    def remove(self, point: Point | tuple[float, float]) -> bool:
        """Remove the entry at `point`. Returns whether one was removed."""
        point = _as_point(point)
        self._check_bounds(point)
        removed = self._remove(self._root, point)
        if removed:
            self._try_merge(self._root)
        return removed

    def _insert(self, node: QuadTreeNode[T], point: Point, value: T) -> Entry[T]:
        if node.is_leaf:
            if node.entry_count < self.split_threshold or self._at_max_depth(node):
                entry = Entry(point, value)
                node.add_entry(entry)
                return entry
            node.subdivide()
        return self._insert(node.quadrant_for(point), point, value)

    def _at_max_depth(self, node: QuadTreeNode[T]) -> bool:
        if self.max_depth is None or node.depth < self.max_depth:
            return False
        logger.debug("depth cap %d reached at %r", self.max_depth, node)
        return True

    def _remove(self, node: QuadTreeNode[T], point: Point) -> bool:
        if not node.is_leaf:
            return self._remove(node.quadrant_for(point), point)
        entry = node.entry_at(point)
        if entry is None:
            return False
        node.remove_entry(entry)
        return True

    def _try_merge(self, node: QuadTreeNode[T]) -> None:
        if node.is_leaf:
            return
        for child in node.children:
            self._try_merge(child)
        if node.can_merge(self.merge_threshold):
            node.merge()

    # --- Lookup ---

    def exists(self, point: Point | tuple[float, float]) -> bool:
        return self.get(point) is not None

    def get(self, point: Point | tuple[float, float]) -> Entry[T] | None:
        point = _as_point(point)
        self._check_bounds(point)
        return self._root.find_point(point)

    def query(
        self, point: Point | tuple[float, float], *extent: float
    ) -> list[Entry[T]]:
        """Range query anchored at `point`.

        query(point, radius) matches entries within `radius` of `point`;
        query(point, width, height) matches entries in the rectangle whose
        top-left corner is `point`, far edges included.
        """
        if len(extent) == 1:
            return self.query_circle(point, extent[0])
        if len(extent) == 2:
            return self.query_rect(point, extent[0], extent[1])
        raise TypeError(
            f"query() takes a radius or a width and height, got {len(extent)} extents"
        )

    def query_rect(
        self, point: Point | tuple[float, float], width: float, height: float
    ) -> list[Entry[T]]:
        if not (width > 0 and height > 0):
            raise ValueError(
                f"Width and height must be positive, got {width}x{height}"
            )
        point = _as_point(point)
        results: list[Entry[T]] = []
        self._root.query_range(Rectangle(point.x, point.y, width, height), results)
        return results

    def query_circle(
        self, point: Point | tuple[float, float], radius: float
    ) -> list[Entry[T]]:
        if not radius > 0:
            raise ValueError(f"Radius must be positive, got {radius}")
        results: list[Entry[T]] = []
        self._root.query_circle(Circle(_as_point(point), radius), results)
        return results

    # --- Container protocol ---

    def __len__(self) -> int:
        return self._root.total_entry_count()

    def __contains__(self, point: object) -> bool:
        if isinstance(point, tuple) and len(point) != 2:
            return False
        if not isinstance(point, (Point, tuple)):
            return False
        point = _as_point(point)
        if not all(isinstance(c, (int, float)) for c in (point.x, point.y)):
            return False
        if not self.boundary.contains_inclusive(point):
            return False
        return self._root.find_point(point) is not None

    def __iter__(self) -> Iterator[Entry[T]]:
        for node in self._root.walk():
            yield from node.entries

    # --- Introspection ---

    def leaves(self) -> list[QuadTreeNode[T]]:
        return [node for node in self._root.walk() if node.is_leaf]

    def depth(self) -> int:
        """Depth of the deepest leaf (0 for an unsplit tree)."""
        return max(node.depth for node in self.leaves())


class GlobalQuadTree(QuadTree[T]):
    """QuadTree over longitude/latitude: x in [-180, 180], y in [-90, 90]."""

    def __init__(self, split_threshold: int, *, max_depth: int | None = None) -> None:
        super().__init__(split_threshold, WORLD_BOUNDARY, max_depth=max_depth)
