"""Geometric operations for mask collision and clipping.

This module provides the mathematical utilities the planner needs:
- Line segment vs circle intersection (quadratic roots)
- Line segment vs axis-aligned rectangle intersection (edge tests)
- Parametric clipping of a segment against a rectangle (Liang-Barsky)
- Parametric clipping of a segment against a circle

All functions are pure and stateless. A zero-length segment never
intersects anything.
"""

import math
from dataclasses import dataclass

from pcbcoat.domain import Point, Shape


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle with its origin at the minimum corner.

    Attributes:
        x: Minimum X
        y: Minimum Y
        width: Extent along X
        height: Extent along Y
    """

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def of_shape(cls, shape: Shape) -> "Rect":
        """Build from a rectangle or image shape's position and size."""
        return cls(shape.x, shape.y, shape.width, shape.height)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def expanded(self, margin: float) -> "Rect":
        """Return the rectangle grown by ``margin`` on every side."""
        return Rect(
            self.x - margin,
            self.y - margin,
            self.width + margin * 2,
            self.height + margin * 2,
        )

    def corners(self) -> list[Point]:
        """Corners in walk order: top-left, top-right, bottom-right, bottom-left."""
        return [
            Point(self.x, self.y),
            Point(self.right, self.y),
            Point(self.right, self.bottom),
            Point(self.x, self.bottom),
        ]

    def contains(self, point: Point) -> bool:
        """Closed containment test."""
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def _circle_roots(
    p1: Point, p2: Point, center: Point, radius: float
) -> tuple[float, float] | None:
    """Solve |p1 + t(p2 - p1) - center| = radius for t.

    Returns:
        The two roots in ascending order, or None when the supporting line
        misses the circle or the segment has zero length
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    fx = p1.x - center.x
    fy = p1.y - center.y

    a = dx * dx + dy * dy
    if a == 0:
        return None
    b = 2 * (fx * dx + fy * dy)
    c = (fx * fx + fy * fy) - radius * radius

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return None

    root = math.sqrt(discriminant)
    return ((-b - root) / (2 * a), (-b + root) / (2 * a))


def line_intersects_circle(p1: Point, p2: Point, center: Point, radius: float) -> bool:
    """Test whether a segment crosses a circle's boundary.

    True iff at least one root of the segment/circle equation lies in
    [0, 1]. A segment wholly inside the circle has both roots outside
    that range and is reported as non-intersecting.

    Args:
        p1: Segment start
        p2: Segment end
        center: Circle centre
        radius: Circle radius

    Returns:
        True if the segment touches or crosses the circle

    Examples:
        >>> line_intersects_circle(Point(0, 0), Point(10, 0), Point(5, 0), 1)
        True
        >>> line_intersects_circle(Point(0, 5), Point(10, 5), Point(5, 0), 1)
        False
    """
    roots = _circle_roots(p1, p2, center, radius)
    if roots is None:
        return False
    t1, t2 = roots
    return (0 <= t1 <= 1) or (0 <= t2 <= 1)


def line_intersects_rect(p1: Point, p2: Point, rect: Rect) -> bool:
    """Test whether a segment crosses any edge of a rectangle.

    Uses a bounding-box rejection followed by four segment/edge tests.
    Edges parallel to the segment are skipped.

    Args:
        p1: Segment start
        p2: Segment end
        rect: Rectangle to test

    Returns:
        True if the segment intersects at least one rectangle edge

    Examples:
        >>> line_intersects_rect(Point(-5, 5), Point(15, 5), Rect(0, 0, 10, 10))
        True
    """
    if p1.x == p2.x and p1.y == p2.y:
        return False

    if (
        max(p1.x, p2.x) < rect.x
        or min(p1.x, p2.x) > rect.right
        or max(p1.y, p2.y) < rect.y
        or min(p1.y, p2.y) > rect.bottom
    ):
        return False

    edges = (
        (rect.x, rect.bottom, rect.right, rect.bottom),
        (rect.x, rect.y, rect.right, rect.y),
        (rect.x, rect.y, rect.x, rect.bottom),
        (rect.right, rect.y, rect.right, rect.bottom),
    )

    for x1, y1, x2, y2 in edges:
        den = (y2 - y1) * (p2.x - p1.x) - (x2 - x1) * (p2.y - p1.y)
        if den == 0:
            continue
        t = ((x2 - x1) * (p1.y - y1) - (y2 - y1) * (p1.x - x1)) / den
        u = -((y1 - p1.y) * (p2.x - p1.x) - (x1 - p1.x) * (p2.y - p1.y)) / den
        if 0 <= t <= 1 and 0 <= u <= 1:
            return True

    return False


def line_rect_intersection_params(
    p1: Point, p2: Point, rect: Rect
) -> tuple[float, float] | None:
    """Clip a segment to a rectangle with the Liang-Barsky slab method.

    Args:
        p1: Segment start
        p2: Segment end
        rect: Clip rectangle

    Returns:
        ``(t_start, t_end)`` with ``0 <= t_start < t_end <= 1`` describing
        the part of the segment inside the rectangle, or None when that
        part is empty or a single point

    Examples:
        >>> line_rect_intersection_params(Point(0, 5), Point(20, 5), Rect(5, 0, 10, 10))
        (0.25, 0.75)
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    if dx == 0 and dy == 0:
        return None

    t0 = 0.0
    t1 = 1.0
    for p, q in (
        (-dx, p1.x - rect.x),
        (dx, rect.right - p1.x),
        (-dy, p1.y - rect.y),
        (dy, rect.bottom - p1.y),
    ):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)

    return (t0, t1) if t0 < t1 else None


def line_circle_intersection_params(
    p1: Point, p2: Point, center: Point, radius: float
) -> tuple[float, float] | None:
    """Clip a segment to a disc.

    Args:
        p1: Segment start
        p2: Segment end
        center: Disc centre
        radius: Disc radius

    Returns:
        ``(t_start, t_end)`` clamped to [0, 1] for the part of the segment
        inside the disc, or None when that part is empty or a single point
    """
    roots = _circle_roots(p1, p2, center, radius)
    if roots is None:
        return None
    t_start = max(0.0, roots[0])
    t_end = min(1.0, roots[1])
    return (t_start, t_end) if t_start < t_end else None


def point_along(p1: Point, p2: Point, t: float) -> Point:
    """Point at parameter ``t`` on the segment from p1 to p2."""
    return Point(p1.x + (p2.x - p1.x) * t, p1.y + (p2.y - p1.y) * t)
