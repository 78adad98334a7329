"""Shared types, errors and protocols for quadindex."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar, runtime_checkable

from quadindex.geometry import Point, Rectangle

T = TypeVar("T")

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True, slots=True)
class Entry(Generic[T]):
    """A stored (point, value) pair. The value is an opaque caller payload."""

    point: Point
    value: T


class QuadTreeError(Exception):
    """Base exception for quadindex."""


class PointOutOfBoundsError(QuadTreeError, ValueError):
    """Raised when a point lies outside the tree's (inclusive) boundary."""

    def __init__(self, point: Point, boundary: Rectangle) -> None:
        self.point = point
        self.boundary = boundary
        super().__init__(
            f"Point ({point.x}, {point.y}) does not lie within the quadtree "
            f"boundary ({boundary.x}, {boundary.y}, "
            f"{boundary.width}x{boundary.height})"
        )


@runtime_checkable
class PointIndex(Protocol[T]):
    """Public interface shared by QuadTree and GlobalQuadTree."""

    def insert(self, point: Point, value: T) -> Entry[T]: ...
    def exists(self, point: Point) -> bool: ...
    def remove(self, point: Point) -> bool: ...
    def update(self, point: Point, value: T) -> Entry[T]: ...
    def query(self, point: Point, *extent: float) -> Sequence[Entry[T]]: ...
