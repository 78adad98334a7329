"""Quadtree configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass

from quadindex.geometry import Rectangle


@dataclass(frozen=True)
class QuadTreeConfig:
    """Immutable configuration for a QuadTree.

    Attributes:
        split_threshold: Entries a leaf holds before it subdivides on the
            next insert (must be >= 1).
        boundary: Region covered by the root node.
        max_depth: Deepest level a node may be subdivided to. None leaves
            subdivision unbounded; a leaf at the cap keeps accepting entries
            past split_threshold.
    """

    split_threshold: int = 4
    boundary: Rectangle = Rectangle(0.0, 0.0, 1.0, 1.0)
    max_depth: int | None = None

    def __post_init__(self) -> None:
        if self.split_threshold < 1:
            raise ValueError(
                f"split_threshold must be >= 1, got {self.split_threshold}"
            )
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")

    @property
    def merge_threshold(self) -> int:
        """Entry count at or below which four sibling leaves collapse.

        Floors to 0 for split thresholds below 4, which disables merging.
        """
        return self.split_threshold // 4
