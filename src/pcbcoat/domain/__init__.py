"""Domain models for pcbcoat.

This module contains the core domain models representing layout shapes,
tool-path primitives and user snippets. All models are designed to be:

- Immutable (frozen dataclasses)
- Serializable to the layout editor's JSON records
- Independent of the planning algorithms that consume them

Key classes:
- Shape: A coating target or mask source
- Point: A 2D position in work-area units
- PathSegment: A straight dispensing stroke
- LineSpan: A safe or masked piece of a scan line
- GCodeSnippet: A user template bound to a lifecycle hook
"""

from pcbcoat.domain.path import LineSpan, PathSegment, Point
from pcbcoat.domain.shape import CoatingType, OutlineStartPoint, Shape, ShapeKind
from pcbcoat.domain.snippet import GCodeHook, GCodeSnippet

__all__: list[str] = [
    # Enums
    "ShapeKind",
    "CoatingType",
    "OutlineStartPoint",
    "GCodeHook",
    # Core types
    "Point",
    "PathSegment",
    "LineSpan",
    "Shape",
    "GCodeSnippet",
]
