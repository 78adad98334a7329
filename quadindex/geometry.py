"""Immutable geometry primitives: points, rectangles and circles."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Rectangle:
    """Axis-aligned rectangle anchored at its top-left corner.

    Attributes:
        x: Left edge.
        y: Top edge (y grows downward, as in screen coordinates).
        width: Horizontal extent (must be > 0).
        height: Vertical extent (must be > 0).
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise ValueError(
                f"Rectangle width and height must be positive, "
                f"got {self.width}x{self.height}"
            )

    @property
    def top_left(self) -> Point:
        return Point(self.x, self.y)

    @property
    def top_right(self) -> Point:
        return Point(self.x + self.width, self.y)

    @property
    def bottom_left(self) -> Point:
        return Point(self.x, self.y + self.height)

    @property
    def bottom_right(self) -> Point:
        return Point(self.x + self.width, self.y + self.height)

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, point: Point) -> bool:
        """Half-open test: [x, x+width) x [y, y+height).

        A point on a shared edge belongs to exactly one of two adjacent
        rectangles.
        """
        return (
            self.x <= point.x < self.x + self.width
            and self.y <= point.y < self.y + self.height
        )

    def contains_inclusive(self, point: Point) -> bool:
        """Closed test: [x, x+width] x [y, y+height]."""
        return (
            self.x <= point.x <= self.x + self.width
            and self.y <= point.y <= self.y + self.height
        )

    def intersects(self, other: Rectangle) -> bool:
        """Separating-axis test. Rectangles that only touch do intersect."""
        return not (
            other.x > self.x + self.width
            or other.x + other.width < self.x
            or other.y > self.y + self.height
            or other.y + other.height < self.y
        )


@dataclass(frozen=True, slots=True)
class Circle:
    center: Point
    radius: float

    def __post_init__(self) -> None:
        if not self.radius > 0:
            raise ValueError(f"Circle radius must be positive, got {self.radius}")

    def contains(self, point: Point) -> bool:
        dx = point.x - self.center.x
        dy = point.y - self.center.y
        return dx * dx + dy * dy <= self.radius * self.radius

    def intersects_rectangle(self, rect: Rectangle) -> bool:
        """Clamp the center to the rectangle and compare the squared distance."""
        closest_x = max(rect.x, min(self.center.x, rect.x + rect.width))
        closest_y = max(rect.y, min(self.center.y, rect.y + rect.height))
        dx = self.center.x - closest_x
        dy = self.center.y - closest_y
        return dx * dx + dy * dy <= self.radius * self.radius
