"""Conversion between editor JSON records and domain models.

The layout editor stores shapes, coating settings and snippets as
camelCase JSON objects. This module turns those records into domain
models and validates them on the way in.
"""

import math
from collections.abc import Iterable
from typing import Any

import structlog
from pydantic import ValidationError

from pcbcoat.config.settings import FillPattern, GcodeSettings, TravelAvoidanceStrategy
from pcbcoat.domain import CoatingType, GCodeSnippet, OutlineStartPoint, Shape, ShapeKind
from pcbcoat.exceptions import InvalidShapeError, SettingsError

logger = structlog.get_logger(__name__)

# Editor node types that are containers, not shapes
NON_SHAPE_TYPES = frozenset({"group"})


def _number(data: dict[str, Any], key: str, shape_id: str, default: float = 0.0) -> float:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidShapeError(shape_id, f"'{key}' must be a finite number, got {value!r}")
    return float(value)


def _optional_number(data: dict[str, Any], key: str) -> float | None:
    # Overrides are only honoured when numeric; anything else means "unset"
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return float(value)


def _enum(enum_type: type, value: Any, shape_id: str, key: str) -> Any:
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidShapeError(shape_id, f"unknown {key} {value!r}") from None


def shape_from_dict(data: dict[str, Any]) -> Shape:
    """Convert one editor shape record to a Shape.

    Args:
        data: Shape record with camelCase keys

    Returns:
        Shape instance

    Raises:
        InvalidShapeError: If the kind, coating type or a geometry field is invalid
    """
    shape_id = str(data.get("id", "<unknown>"))
    kind = _enum(ShapeKind, data.get("type"), shape_id, "shape type")
    if kind is None:
        raise InvalidShapeError(shape_id, "missing shape type")

    fill_pattern = data.get("fillPattern")
    if fill_pattern is not None:
        try:
            fill_pattern = FillPattern(fill_pattern)
        except ValueError:
            logger.warning(
                "Unsupported fill pattern, using the global setting",
                shape=shape_id,
                fill_pattern=fill_pattern,
            )
            fill_pattern = None

    strategy = data.get("avoidanceStrategy")
    if isinstance(strategy, str) and strategy.lower() == "zlift":
        strategy = TravelAvoidanceStrategy.LIFT

    points = data.get("points") or []
    if not isinstance(points, list) or not all(
        isinstance(p, (int, float)) and not isinstance(p, bool) for p in points
    ):
        raise InvalidShapeError(shape_id, "'points' must be a flat list of numbers")

    passes = data.get("outlinePasses")
    outline_passes = int(passes) if isinstance(passes, (int, float)) and not isinstance(passes, bool) else 1

    order = data.get("coatingOrder")
    coating_order = int(order) if isinstance(order, (int, float)) and not isinstance(order, bool) else None

    return Shape(
        id=shape_id,
        kind=kind,
        x=_number(data, "x", shape_id),
        y=_number(data, "y", shape_id),
        width=_number(data, "width", shape_id),
        height=_number(data, "height", shape_id),
        radius=_number(data, "radius", shape_id),
        points=tuple(float(p) for p in points),
        rotation=_number(data, "rotation", shape_id),
        name=data.get("name") or None,
        coating_type=_enum(CoatingType, data.get("coatingType"), shape_id, "coating type"),
        use_custom_coating=bool(data.get("useCustomCoating", False)),
        coating_height=_optional_number(data, "coatingHeight"),
        coating_speed=_optional_number(data, "coatingSpeed"),
        coating_width=_optional_number(data, "coatingWidth"),
        fill_pattern=fill_pattern,
        line_spacing=_optional_number(data, "lineSpacing"),
        outline_passes=outline_passes,
        outline_interval=_optional_number(data, "outlineInterval"),
        outline_start_point=_enum(
            OutlineStartPoint, data.get("outlineStartPoint"), shape_id, "outline start point"
        ),
        masking_clearance=_optional_number(data, "maskingClearance"),
        avoidance_strategy=_enum(TravelAvoidanceStrategy, strategy, shape_id, "avoidance strategy"),
        skip_coating=bool(data.get("skipCoating", False)),
        coating_order=coating_order,
    )


def shapes_from_list(items: Iterable[dict[str, Any]]) -> list[Shape]:
    """Convert editor nodes to shapes, dropping group containers."""
    return [shape_from_dict(item) for item in items if item.get("type") not in NON_SHAPE_TYPES]


def settings_from_dict(
    data: dict[str, Any],
    work_area: dict[str, Any] | None = None,
) -> GcodeSettings:
    """Build GcodeSettings from the editor's coating settings object.

    Args:
        data: ``coatingSettings`` record (camelCase or snake_case keys)
        work_area: Optional top-level ``workArea`` record; a work area
            inside ``data`` takes precedence

    Returns:
        Validated settings

    Raises:
        SettingsError: If validation fails
    """
    values = dict(data)
    if work_area is not None and "workArea" not in values and "work_area" not in values:
        values["workArea"] = work_area
    try:
        return GcodeSettings.model_validate(values)
    except ValidationError as e:
        raise SettingsError(str(e)) from e


def snippets_from_list(items: Iterable[dict[str, Any]]) -> list[GCodeSnippet]:
    """Convert snippet records.

    Raises:
        ValueError: If a record lacks an id or names an unknown hook
    """
    snippets: list[GCodeSnippet] = []
    for item in items:
        try:
            snippets.append(GCodeSnippet.from_dict(item))
        except KeyError as e:
            raise ValueError(f"snippet record is missing {e}") from e
    return snippets
