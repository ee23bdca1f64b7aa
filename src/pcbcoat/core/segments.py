"""Raw coating segment generation.

For each coating shape this module produces the straight strokes the
nozzle should dispense along:

- Fill: parallel scan lines across the shape's area, split around masks,
  or concentric rings clipped against masks
- Outline: the shape's perimeter, offset outward once per pass, then
  clipped against masks
"""

import math

from pcbcoat.config.settings import FillPattern, GcodeSettings, PlannerConfig
from pcbcoat.core.masking import MaskSet
from pcbcoat.core.scheduling import CooperativeScheduler
from pcbcoat.domain import CoatingType, PathSegment, Point, Shape, ShapeKind
from pcbcoat.utils.progress import ProgressReporter


def fill_directions(pattern: FillPattern) -> list[bool]:
    """Sweep directions for a fixed fill pattern, True meaning horizontal.

    ``AUTO`` is resolved per shape by ``SegmentGenerator.auto_direction``
    and ``CONCENTRIC`` has no sweep, so both are rejected here.

    Examples:
        >>> fill_directions(FillPattern.BOTH)
        [True, False]

    Raises:
        ValueError: For patterns without a fixed sweep direction
    """
    if pattern is FillPattern.HORIZONTAL:
        return [True]
    if pattern is FillPattern.VERTICAL:
        return [False]
    if pattern is FillPattern.BOTH:
        return [True, False]
    raise ValueError(f"fill pattern {pattern.value!r} has no fixed sweep direction")


def scan_positions(start: float, end: float, spacing: float) -> list[float]:
    """Main-axis positions of the scan lines between start and end.

    Positions are computed as ``start + i * spacing`` so rounding does not
    accumulate; ``end`` itself is included when reached within 1e-9.

    Args:
        start: First position
        end: Last allowed position
        spacing: Distance between lines

    Returns:
        Positions in ascending order; empty for a non-positive spacing or
        an empty range
    """
    if spacing <= 0 or start >= end:
        return []
    count = int(math.floor((end - start) / spacing + 1e-9)) + 1
    return [start + i * spacing for i in range(count)]


def line_extent(shape: Shape, main_axis: float, horizontal: bool) -> tuple[float, float] | None:
    """Cross-axis extent of a scan line inside a shape.

    Args:
        shape: Rectangle, image or circle
        main_axis: Scan line position
        horizontal: True for horizontal scan lines

    Returns:
        ``(start, end)`` along the cross axis, or None when the line misses
    """
    if shape.kind is ShapeKind.CIRCLE:
        center_cross = shape.x if horizontal else shape.y
        center_main = shape.y if horizontal else shape.x
        delta = abs(main_axis - center_main)
        if shape.radius <= 0 or delta > shape.radius:
            return None
        half_chord = math.sqrt(shape.radius * shape.radius - delta * delta)
        return (center_cross - half_chord, center_cross + half_chord)

    if shape.kind in (ShapeKind.RECTANGLE, ShapeKind.IMAGE):
        if horizontal:
            return (shape.x, shape.x + shape.width)
        return (shape.y, shape.y + shape.height)

    return None


def shape_contains(shape: Shape, point: Point) -> bool:
    """True if the point lies inside a rectangle, image or circle shape."""
    if shape.kind is ShapeKind.CIRCLE:
        return math.hypot(point.x - shape.x, point.y - shape.y) <= shape.radius
    if shape.kind in (ShapeKind.RECTANGLE, ShapeKind.IMAGE):
        return (
            shape.x <= point.x <= shape.x + shape.width
            and shape.y <= point.y <= shape.y + shape.height
        )
    return False


def rectangle_outline(x: float, y: float, width: float, height: float, offset: float) -> list[PathSegment]:
    """Four edges of a box grown by ``offset``, walked clockwise from top-left."""
    left, top = x - offset, y - offset
    right, bottom = x + width + offset, y + height + offset
    if right <= left or bottom <= top:
        return []
    corners = [
        Point(left, top),
        Point(right, top),
        Point(right, bottom),
        Point(left, bottom),
    ]
    return [PathSegment(corners[i], corners[(i + 1) % 4]) for i in range(4)]


def circle_outline(cx: float, cy: float, radius: float, segments: int) -> list[PathSegment]:
    """Closed polyline approximating a circle with ``segments`` chords."""
    if radius <= 0 or segments <= 0:
        return []
    points = [
        Point(
            cx + radius * math.cos(2 * math.pi * i / segments),
            cy + radius * math.sin(2 * math.pi * i / segments),
        )
        for i in range(segments)
    ]
    return [PathSegment(points[i], points[(i + 1) % segments]) for i in range(segments)]


def concentric_rectangle(
    x: float,
    y: float,
    width: float,
    height: float,
    coating_width: float,
    spacing: float,
) -> list[PathSegment]:
    """Nested rectangular rings, outermost first.

    The outer ring is inset by half a coated line on every side; each
    further ring sits ``spacing`` closer to the centre.
    """
    if spacing <= 0 or width <= coating_width or height <= coating_width:
        return []
    center_x, center_y = x + width / 2, y + height / 2
    ring_width, ring_height = width - coating_width, height - coating_width
    segments: list[PathSegment] = []
    while ring_width > 0 and ring_height > 0:
        segments.extend(
            rectangle_outline(
                center_x - ring_width / 2, center_y - ring_height / 2, ring_width, ring_height, 0.0
            )
        )
        ring_width -= spacing * 2
        ring_height -= spacing * 2
    return segments


def concentric_circle(
    cx: float,
    cy: float,
    radius: float,
    coating_width: float,
    spacing: float,
    min_segments: int = 32,
) -> list[PathSegment]:
    """Nested circular rings, outermost first.

    Every ring uses the chord count of the outer radius.
    """
    if spacing <= 0:
        return []
    chords = max(min_segments, int(math.floor(radius * 2)))
    ring = radius - coating_width / 2
    segments: list[PathSegment] = []
    while ring > 0:
        segments.extend(circle_outline(cx, cy, ring, chords))
        ring -= spacing
    return segments


def polyline_segments(points: list[tuple[float, float]]) -> list[PathSegment]:
    return [
        PathSegment(Point(*points[i]), Point(*points[i + 1]))
        for i in range(len(points) - 1)
    ]


class SegmentGenerator:
    """Generates masked coating segments for one shape at a time.

    Example:
        >>> generator = SegmentGenerator(settings, masks, planner, scheduler)
        >>> segments = await generator.generate(shape)
    """

    def __init__(
        self,
        settings: GcodeSettings,
        masks: MaskSet,
        planner: PlannerConfig | None = None,
        scheduler: CooperativeScheduler | None = None,
        reporter: ProgressReporter | None = None,
    ) -> None:
        self.settings = settings
        self.masks = masks
        self.planner = planner or PlannerConfig()
        self.scheduler = scheduler or CooperativeScheduler()
        self.reporter = reporter or ProgressReporter()

    async def generate(
        self,
        shape: Shape,
        progress_base: float = 0.0,
        progress_span: float = 0.0,
    ) -> list[PathSegment]:
        """Produce the masked segments of one coating shape.

        Args:
            shape: Fill or outline shape
            progress_base: Progress value at the start of this shape
            progress_span: Progress range allotted to scan-line generation

        Returns:
            Segments in work-area coordinates; empty when the shape lies
            entirely inside a mask
        """
        if self.masks.covers_shape(shape) is not None:
            return []

        if shape.coating_type is CoatingType.FILL:
            return await self.fill_segments(shape, progress_base, progress_span)
        elif shape.coating_type is CoatingType.OUTLINE:
            return self.masks.clip_segments(self.outline_segments(shape))
        return []

    async def fill_segments(
        self,
        shape: Shape,
        progress_base: float = 0.0,
        progress_span: float = 0.0,
    ) -> list[PathSegment]:
        """Fill of a shape's area with masked parts removed.

        Scan-line patterns split each line around the masks. Concentric
        rings are generated whole and then clipped like outlines.
        """
        bbox = shape.bounding_box()
        spacing = shape.effective_line_spacing(self.settings)
        if bbox is None or spacing <= 0:
            return []

        pattern = shape.effective_fill_pattern(self.settings)
        if pattern is FillPattern.CONCENTRIC:
            return self.masks.clip_segments(self.concentric_segments(shape, spacing))
        if pattern is FillPattern.AUTO:
            directions = [self.auto_direction(shape, bbox)]
        else:
            directions = fill_directions(pattern)

        bx, by, bw, bh = bbox
        work_area = self.settings.work_area
        segments: list[PathSegment] = []

        for direction_index, horizontal in enumerate(directions):
            if horizontal:
                positions = scan_positions(by, by + bh, spacing)
                limit = work_area.width
            else:
                positions = scan_positions(bx, bx + bw, spacing)
                limit = work_area.height

            for processed, main_axis in enumerate(positions, start=1):
                extent = line_extent(shape, main_axis, horizontal)
                if extent is not None:
                    line_start = max(extent[0], 0.0)
                    line_end = min(extent[1], limit)
                    for span in self.masks.scan_line_spans(main_axis, horizontal, line_start, line_end):
                        if not span.safe:
                            continue
                        if horizontal:
                            segments.append(PathSegment(Point(span.start, main_axis), Point(span.end, main_axis)))
                        else:
                            segments.append(PathSegment(Point(main_axis, span.start), Point(main_axis, span.end)))

                if processed % self.planner.scanline_progress_interval == 0:
                    ratio = (direction_index + processed / len(positions)) / len(directions)
                    self.reporter.report(
                        progress_base + progress_span * ratio,
                        f"Calculating scan lines... ({round(ratio * 100)}%)",
                    )
                await self.scheduler.checkpoint(processed, self.planner.scanline_yield_interval)

        return segments

    def auto_direction(self, shape: Shape, bbox: tuple[float, float, float, float]) -> bool:
        """Pick the single sweep direction of an ``AUTO`` fill.

        Lines run along the longer side of the bounding box, or along the
        shorter side once the sampled mask density exceeds the threshold.

        Returns:
            True for horizontal scan lines
        """
        _, _, width, height = bbox
        along_long_side = width > height
        if not self.masks.has_masks():
            return along_long_side
        if self.mask_density(shape, bbox) > self.planner.auto_density_threshold:
            return not along_long_side
        return along_long_side

    def mask_density(self, shape: Shape, bbox: tuple[float, float, float, float]) -> float:
        """Share of grid samples inside the shape that fall in a mask."""
        grid = self.planner.auto_density_grid
        bx, by, bw, bh = bbox
        step_x, step_y = bw / grid, bh / grid
        masked = 0
        for i in range(grid):
            for j in range(grid):
                point = Point(bx + (i + 0.5) * step_x, by + (j + 0.5) * step_y)
                if shape_contains(shape, point) and self.masks.contains_point(point):
                    masked += 1
        return masked / (grid * grid)

    def concentric_segments(self, shape: Shape, spacing: float) -> list[PathSegment]:
        """Unmasked concentric rings for a rectangle, image or circle."""
        coating_width = shape.effective_coating_width(self.settings)
        if shape.kind is ShapeKind.CIRCLE:
            return concentric_circle(
                shape.x,
                shape.y,
                shape.radius,
                coating_width,
                spacing,
                self.planner.concentric_min_segments,
            )
        if shape.kind in (ShapeKind.RECTANGLE, ShapeKind.IMAGE):
            return concentric_rectangle(
                shape.x, shape.y, shape.width, shape.height, coating_width, spacing
            )
        return []

    def outline_segments(self, shape: Shape) -> list[PathSegment]:
        """Unmasked outline strokes for every pass of a shape."""
        passes = shape.outline_passes
        if passes <= 0:
            return []

        if shape.kind is ShapeKind.LINE:
            return polyline_segments(shape.absolute_points())

        interval = shape.effective_outline_interval(self.settings)
        first_offset = shape.first_outline_offset(self.settings)
        segments: list[PathSegment] = []
        for i in range(passes):
            offset = first_offset + interval * i
            if shape.kind in (ShapeKind.RECTANGLE, ShapeKind.IMAGE):
                segments.extend(rectangle_outline(shape.x, shape.y, shape.width, shape.height, offset))
            elif shape.kind is ShapeKind.CIRCLE:
                segments.extend(
                    circle_outline(shape.x, shape.y, shape.radius + offset, self.planner.circle_segments)
                )
        return segments
