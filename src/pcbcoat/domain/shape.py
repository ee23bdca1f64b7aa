"""Shape model for coating targets and masks.

A shape is one object from the layout editor: a rectangle, circle,
polyline or placed board image, tagged with what the coating head should
do with it. Shapes are read-only inputs to generation.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pcbcoat.config.settings import FillPattern, GcodeSettings, TravelAvoidanceStrategy


class ShapeKind(Enum):
    """Geometric kind of a shape."""

    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    LINE = "line"
    IMAGE = "image"


class OutlineStartPoint(Enum):
    """Where the first outline pass sits relative to the shape edge."""

    OUTSIDE = "outside"
    CENTER = "center"
    INSIDE = "inside"


class CoatingType(Enum):
    """What the coating head does with a shape.

    - FILL: Cover the shape's area with parallel scan lines
    - OUTLINE: Trace the shape's perimeter, optionally several times
    - MASKING: Keep the nozzle away from the shape's area
    """

    FILL = "fill"
    OUTLINE = "outline"
    MASKING = "masking"


@dataclass(frozen=True, slots=True)
class Shape:
    """A coating target or mask source.

    For rectangles and images ``x, y`` is the top-left corner; for circles
    it is the centre. Line shapes carry a flat ``points`` list
    ``[x0, y0, x1, y1, ...]`` relative to ``x, y``.

    Attributes:
        id: Unique shape identifier
        kind: Geometric kind
        x: X position
        y: Y position
        width: Width (rectangle/image)
        height: Height (rectangle/image)
        radius: Radius (circle)
        points: Relative polyline coordinates (line)
        rotation: Rotation in degrees; not applied to path generation
        name: Display name
        coating_type: Coating intent, None for decoration only
        use_custom_coating: Gate for the per-shape height/speed overrides
        coating_height: Per-shape Z height override
        coating_speed: Per-shape feed rate override
        coating_width: Per-shape coated line width override
        fill_pattern: Per-shape fill direction override
        line_spacing: Per-shape scan-line spacing override
        outline_passes: Number of outline passes
        outline_interval: Extra offset added per outline pass
        outline_start_point: Placement of the first outline pass; None
            starts one mask clearance outside the edge
        masking_clearance: Per-mask replacement for the global clearance
        avoidance_strategy: Per-mask travel avoidance override
        skip_coating: Exclude the shape from coating and masking
        coating_order: Processing rank; lower runs first
    """

    id: str
    kind: ShapeKind
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    radius: float = 0.0
    points: tuple[float, ...] = field(default_factory=tuple)
    rotation: float = 0.0
    name: str | None = None
    coating_type: CoatingType | None = None
    use_custom_coating: bool = False
    coating_height: float | None = None
    coating_speed: float | None = None
    coating_width: float | None = None
    fill_pattern: FillPattern | None = None
    line_spacing: float | None = None
    outline_passes: int = 1
    outline_interval: float | None = None
    outline_start_point: OutlineStartPoint | None = None
    masking_clearance: float | None = None
    avoidance_strategy: TravelAvoidanceStrategy | None = None
    skip_coating: bool = False
    coating_order: int | None = None

    @property
    def display_name(self) -> str:
        """Name used in G-code comments; falls back to the kind."""
        return self.name or self.kind.value

    @property
    def label(self) -> str:
        """Upper-case tag used in shape start/end comments."""
        if self.kind is ShapeKind.IMAGE:
            return "PCB"
        return self.kind.value.upper()

    @property
    def is_coating(self) -> bool:
        """True for active fill or outline shapes."""
        return not self.skip_coating and self.coating_type in (
            CoatingType.FILL,
            CoatingType.OUTLINE,
        )

    @property
    def is_mask(self) -> bool:
        """True for active masking shapes."""
        return not self.skip_coating and self.coating_type is CoatingType.MASKING

    def bounding_box(self) -> tuple[float, float, float, float] | None:
        """Axis-aligned bounds as (x, y, width, height).

        Returns:
            Bounds of the covered area, or None for shapes without area
            (lines, zero-radius circles)
        """
        if self.kind in (ShapeKind.RECTANGLE, ShapeKind.IMAGE):
            return (self.x, self.y, self.width, self.height)
        if self.kind is ShapeKind.CIRCLE and self.radius > 0:
            return (
                self.x - self.radius,
                self.y - self.radius,
                self.radius * 2,
                self.radius * 2,
            )
        return None

    def absolute_points(self) -> list[tuple[float, float]]:
        """Polyline vertices in work-area coordinates (line shapes)."""
        coords = self.points
        return [
            (self.x + coords[i], self.y + coords[i + 1])
            for i in range(0, len(coords) - 1, 2)
        ]

    def effective_line_spacing(self, settings: GcodeSettings) -> float:
        if self.line_spacing is not None:
            return self.line_spacing
        return settings.line_spacing

    def effective_fill_pattern(self, settings: GcodeSettings) -> FillPattern:
        return self.fill_pattern or settings.fill_pattern

    def effective_coating_height(self, settings: GcodeSettings) -> float:
        """Z height while dispensing this shape."""
        if self.use_custom_coating and _is_number(self.coating_height):
            return float(self.coating_height)  # type: ignore[arg-type]
        return settings.coating_height

    def effective_coating_speed(self, settings: GcodeSettings) -> float:
        """Feed rate while dispensing this shape."""
        if self.use_custom_coating and _is_number(self.coating_speed):
            return float(self.coating_speed)  # type: ignore[arg-type]
        return settings.coating_speed

    def effective_outline_interval(self, settings: GcodeSettings) -> float:
        if self.outline_interval is not None:
            return self.outline_interval
        return self.effective_line_spacing(settings)

    def effective_coating_width(self, settings: GcodeSettings) -> float:
        if self.coating_width is not None:
            return self.coating_width
        return settings.coating_width

    def first_outline_offset(self, settings: GcodeSettings) -> float:
        """Offset of the first outline pass from the shape edge.

        Without a start point the first pass clears the edge by the
        masking margin plus half of this shape's coated line. An explicit
        start point puts it one outline interval outside, on the edge, or
        one interval inside.
        """
        start = self.outline_start_point
        if start is None:
            return settings.masking_clearance + self.effective_coating_width(settings) / 2
        if start is OutlineStartPoint.OUTSIDE:
            return self.effective_outline_interval(settings)
        if start is OutlineStartPoint.INSIDE:
            return -self.effective_outline_interval(settings)
        return 0.0

    def clearance(self, settings: GcodeSettings) -> float:
        """Clearance around this shape when used as a mask."""
        if self.masking_clearance is not None:
            return self.masking_clearance + settings.coating_width / 2
        return settings.mask_clearance

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the editor's camelCase shape record."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.kind.value,
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
            "useCustomCoating": self.use_custom_coating,
            "skipCoating": self.skip_coating,
            "outlinePasses": self.outline_passes,
        }
        if self.kind in (ShapeKind.RECTANGLE, ShapeKind.IMAGE):
            data["width"] = self.width
            data["height"] = self.height
        elif self.kind is ShapeKind.CIRCLE:
            data["radius"] = self.radius
        elif self.kind is ShapeKind.LINE:
            data["points"] = list(self.points)

        optional = {
            "name": self.name,
            "coatingType": self.coating_type.value if self.coating_type else None,
            "coatingHeight": self.coating_height,
            "coatingSpeed": self.coating_speed,
            "coatingWidth": self.coating_width,
            "fillPattern": self.fill_pattern.value if self.fill_pattern else None,
            "lineSpacing": self.line_spacing,
            "outlineInterval": self.outline_interval,
            "outlineStartPoint": (
                self.outline_start_point.value if self.outline_start_point else None
            ),
            "maskingClearance": self.masking_clearance,
            "avoidanceStrategy": (
                self.avoidance_strategy.value if self.avoidance_strategy else None
            ),
            "coatingOrder": self.coating_order,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data


def _is_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )
