"""Mask filtering for coating paths.

Masking shapes mark areas the nozzle must never dispense over. Each mask
is padded by a clearance (the masking margin plus half a coated line) so
that the edge of a coated line stays outside the masked area.

Two application points exist:
- Fill scan lines are split into safe and unsafe spans before any
  segment is created (``MaskSet.scan_line_spans``)
- Outline segments are generated first and then clipped parametrically
  (``MaskSet.clip_segment``)

Rectangles, images and circles act as masks. A circle counts as long as
its clearance-padded radius is positive, so a zero-radius dot still keeps
the nozzle away. Lines never mask.
"""

import math
from collections.abc import Iterable, Sequence

from pcbcoat.config.settings import GcodeSettings
from pcbcoat.core.geometry import (
    Rect,
    distance,
    line_circle_intersection_params,
    line_intersects_circle,
    line_intersects_rect,
    line_rect_intersection_params,
    point_along,
)
from pcbcoat.domain import LineSpan, PathSegment, Point, Shape, ShapeKind


def merge_intervals(spans: Iterable[LineSpan]) -> list[LineSpan]:
    """Merge overlapping or touching intervals.

    Args:
        spans: Intervals in any order

    Returns:
        Disjoint intervals sorted by start whose union equals the input's.
        A merged interval keeps the cause of its earliest member.

    Examples:
        >>> merged = merge_intervals([LineSpan(5, 8, False), LineSpan(0, 6, False)])
        >>> [(s.start, s.end) for s in merged]
        [(0, 8)]
    """
    ordered = sorted(spans, key=lambda span: span.start)
    if not ordered:
        return []

    merged: list[LineSpan] = []
    current = ordered[0]
    for span in ordered[1:]:
        if span.start <= current.end:
            if span.end > current.end:
                current = LineSpan(current.start, span.end, current.safe, current.cause)
        else:
            merged.append(current)
            current = span
    merged.append(current)
    return merged


def split_line(line_start: float, line_end: float, unsafe: Sequence[LineSpan]) -> list[LineSpan]:
    """Partition a line extent into safe and unsafe spans.

    Args:
        line_start: Start of the line along its cross axis
        line_end: End of the line along its cross axis
        unsafe: Merged unsafe intervals (see ``merge_intervals``)

    Returns:
        Ordered spans that exactly cover ``[line_start, line_end]``;
        unsafe intervals are clipped to the extent and empty spans dropped
    """
    spans: list[LineSpan] = []
    cursor = line_start
    for interval in unsafe:
        if cursor < interval.start:
            spans.append(LineSpan(cursor, interval.start, True))
        spans.append(LineSpan(interval.start, interval.end, False, interval.cause))
        cursor = max(cursor, interval.end)
    if cursor < line_end:
        spans.append(LineSpan(cursor, line_end, True))

    clipped = (
        LineSpan(max(line_start, span.start), min(line_end, span.end), span.safe, span.cause)
        for span in spans
    )
    return [span for span in clipped if span.end > span.start]


class MaskSet:
    """The active masks of one generation call.

    Example:
        >>> masks = MaskSet.from_shapes(shapes, settings)
        >>> spans = masks.scan_line_spans(25.0, True, 0.0, 100.0)
        >>> safe = [s for s in spans if s.safe]
    """

    def __init__(
        self,
        masks: Sequence[Shape],
        settings: GcodeSettings,
        min_clip_length: float = 0.01,
    ) -> None:
        """Initialize the mask set.

        Args:
            masks: Masking shapes; lines and circles without a padded radius are ignored
            settings: Coating settings (clearance, enable flag)
            min_clip_length: Clipped pieces at or below this length are dropped
        """
        self._settings = settings
        self._min_clip_length = min_clip_length
        if settings.enable_masking:
            self._masks = [mask for mask in masks if self._has_keepout(mask)]
        else:
            self._masks = []

    @classmethod
    def from_shapes(
        cls,
        shapes: Iterable[Shape],
        settings: GcodeSettings,
        min_clip_length: float = 0.01,
    ) -> "MaskSet":
        """Collect the active masking shapes from a full shape list."""
        return cls([shape for shape in shapes if shape.is_mask], settings, min_clip_length)

    @property
    def masks(self) -> list[Shape]:
        return list(self._masks)

    def has_masks(self) -> bool:
        return bool(self._masks)

    def clearance_for(self, mask: Shape) -> float:
        return mask.clearance(self._settings)

    def _has_keepout(self, mask: Shape) -> bool:
        if mask.kind in (ShapeKind.RECTANGLE, ShapeKind.IMAGE):
            return True
        return mask.kind is ShapeKind.CIRCLE and mask.radius + self.clearance_for(mask) > 0

    def _zone_rect(self, mask: Shape) -> Rect:
        return Rect.of_shape(mask).expanded(self.clearance_for(mask))

    def _zone_circle(self, mask: Shape) -> tuple[Point, float]:
        return Point(mask.x, mask.y), mask.radius + self.clearance_for(mask)

    def unsafe_interval(
        self, mask: Shape, main_axis: float, horizontal: bool
    ) -> LineSpan | None:
        """Cross-axis interval a mask blocks on one scan line.

        Args:
            mask: Masking shape
            main_axis: Scan line position (Y for horizontal lines, X for vertical)
            horizontal: True for horizontal scan lines

        Returns:
            The blocked interval, or None when the line misses the mask
        """
        if mask.kind is ShapeKind.CIRCLE:
            center, radius = self._zone_circle(mask)
            center_cross = center.x if horizontal else center.y
            center_main = center.y if horizontal else center.x
            delta = abs(main_axis - center_main)
            if delta > radius:
                return None
            half_chord = math.sqrt(radius * radius - delta * delta)
            return LineSpan(center_cross - half_chord, center_cross + half_chord, False, mask)

        zone = self._zone_rect(mask)
        min_main, max_main = (zone.y, zone.bottom) if horizontal else (zone.x, zone.right)
        if not min_main <= main_axis <= max_main:
            return None
        min_cross, max_cross = (zone.x, zone.right) if horizontal else (zone.y, zone.bottom)
        return LineSpan(min_cross, max_cross, False, mask)

    def scan_line_spans(
        self,
        main_axis: float,
        horizontal: bool,
        line_start: float,
        line_end: float,
    ) -> list[LineSpan]:
        """Split one scan line into ordered safe and unsafe spans.

        Args:
            main_axis: Scan line position
            horizontal: True for horizontal scan lines
            line_start: Start of the line extent along the cross axis
            line_end: End of the line extent along the cross axis

        Returns:
            Spans partitioning ``[line_start, line_end]``; a single safe
            span when no mask touches the line
        """
        if line_start >= line_end:
            return []
        if not self._masks:
            return [LineSpan(line_start, line_end, True)]

        unsafe = [
            interval
            for mask in self._masks
            if (interval := self.unsafe_interval(mask, main_axis, horizontal)) is not None
        ]
        if not unsafe:
            return [LineSpan(line_start, line_end, True)]

        return split_line(line_start, line_end, merge_intervals(unsafe))

    def clip_segment(self, segment: PathSegment) -> list[PathSegment]:
        """Remove the parts of a segment that lie inside any mask.

        Args:
            segment: Segment to clip

        Returns:
            Safe sub-segments in the original direction; pieces no longer
            than the minimum clip length are dropped
        """
        if not self._masks:
            return [segment]

        unsafe: list[LineSpan] = []
        for mask in self._masks:
            if mask.kind is ShapeKind.CIRCLE:
                center, radius = self._zone_circle(mask)
                params = line_circle_intersection_params(segment.start, segment.end, center, radius)
            else:
                params = line_rect_intersection_params(
                    segment.start, segment.end, self._zone_rect(mask)
                )
            if params is not None:
                unsafe.append(LineSpan(params[0], params[1], False, mask))

        if not unsafe:
            return [segment]

        pieces: list[PathSegment] = []
        for span in split_line(0.0, 1.0, merge_intervals(unsafe)):
            if not span.safe:
                continue
            start = point_along(segment.start, segment.end, span.start)
            end = segment.end if span.end >= 1.0 else point_along(segment.start, segment.end, span.end)
            if distance(start, end) > self._min_clip_length:
                pieces.append(PathSegment(start, end))
        return pieces

    def clip_segments(self, segments: Iterable[PathSegment]) -> list[PathSegment]:
        clipped: list[PathSegment] = []
        for segment in segments:
            clipped.extend(self.clip_segment(segment))
        return clipped

    def contains_point(self, point: Point) -> bool:
        """True if the point lies inside any clearance-padded mask."""
        for mask in self._masks:
            if mask.kind is ShapeKind.CIRCLE:
                center, radius = self._zone_circle(mask)
                if distance(point, center) <= radius:
                    return True
            elif self._zone_rect(mask).contains(point):
                return True
        return False

    def find_intersecting_masks(self, start: Point, end: Point) -> list[Shape]:
        """Masks whose clearance-padded boundary the travel line crosses.

        Args:
            start: Travel start
            end: Travel end

        Returns:
            Intersected masks in mask order
        """
        hits: list[Shape] = []
        for mask in self._masks:
            if mask.kind is ShapeKind.CIRCLE:
                center, radius = self._zone_circle(mask)
                hit = line_intersects_circle(start, end, center, radius)
            else:
                hit = line_intersects_rect(start, end, self._zone_rect(mask))
            if hit:
                hits.append(mask)
        return hits

    def covers_shape(self, shape: Shape) -> Shape | None:
        """Find a mask whose clearance zone fully contains a shape.

        Args:
            shape: Coating shape to test

        Returns:
            The first covering mask, or None
        """
        for mask in self._masks:
            if self._mask_covers(mask, shape):
                return mask
        return None

    def _mask_covers(self, mask: Shape, shape: Shape) -> bool:
        bbox = shape.bounding_box()
        if bbox is None:
            return False
        box = Rect(*bbox)

        if mask.kind is ShapeKind.CIRCLE:
            center, radius = self._zone_circle(mask)
            if shape.kind is ShapeKind.CIRCLE:
                return distance(Point(shape.x, shape.y), center) + shape.radius <= radius
            return all(distance(corner, center) <= radius for corner in box.corners())

        zone = self._zone_rect(mask)
        return (
            box.x >= zone.x
            and box.y >= zone.y
            and box.right <= zone.right
            and box.bottom <= zone.bottom
        )
