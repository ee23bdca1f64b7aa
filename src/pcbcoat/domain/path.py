"""Tool-path primitives.

This module defines the small value types the planner passes around:
- Point: A 2D position in work-area units
- PathSegment: A straight coating stroke between two points
- LineSpan: A 1-D piece of a scan line, safe or masked
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pcbcoat.domain.shape import Shape


@dataclass(frozen=True, slots=True)
class Point:
    """A point in work-area coordinates.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A straight stroke the nozzle dispenses along.

    Direction matters: the tool feeds from ``start`` to ``end``. The
    path orderer may flip a segment with ``reversed()`` when approaching
    from its far end is cheaper.

    Attributes:
        start: Point where dispensing begins
        end: Point where dispensing ends
    """

    start: Point
    end: Point

    def reversed(self) -> "PathSegment":
        """Return the same stroke traversed end to start."""
        return PathSegment(start=self.end, end=self.start)

    def midpoint(self) -> Point:
        """Return the point halfway along the segment."""
        return Point(
            (self.start.x + self.end.x) / 2,
            (self.start.y + self.end.y) / 2,
        )

    def length(self) -> float:
        """Return the Euclidean length of the segment."""
        return self.start.distance_to(self.end)

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PathSegment":
        return cls(
            start=Point.from_dict(data["start"]),
            end=Point.from_dict(data["end"]),
        )


@dataclass(frozen=True, slots=True)
class LineSpan:
    """One piece of a scan line along its cross axis.

    A scan line is partitioned into ordered spans; safe spans become
    coating segments, unsafe ones are skipped.

    Attributes:
        start: Cross-axis coordinate where the span begins
        end: Cross-axis coordinate where the span ends
        safe: True when no mask covers the span
        cause: Mask that made the span unsafe (first one, when merged)
    """

    start: float
    end: float
    safe: bool
    cause: "Shape | None" = None

    @property
    def length(self) -> float:
        return self.end - self.start
