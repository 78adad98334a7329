"""quadindex - A point quadtree with adaptive split and merge."""
from __future__ import annotations

from quadindex.config import QuadTreeConfig
from quadindex.geometry import Circle, Point, Rectangle
from quadindex.node import QuadTreeNode
from quadindex.tree import WORLD_BOUNDARY, GlobalQuadTree, QuadTree
from quadindex.types import Entry, PointIndex, PointOutOfBoundsError, QuadTreeError

__all__ = [
    "Point",
    "Rectangle",
    "Circle",
    "Entry",
    "PointIndex",
    "QuadTreeError",
    "PointOutOfBoundsError",
    "QuadTreeConfig",
    "QuadTreeNode",
    "QuadTree",
    "GlobalQuadTree",
    "WORLD_BOUNDARY",
]
