"""Core path-planning algorithms for pcbcoat.

This module contains the algorithms that turn shapes into G-code:

- Geometry operations (segment/circle and segment/rectangle tests, clipping)
- Mask filtering (scan-line spans, outline clipping, travel collisions)
- Segment generation (scan-line fill, offset outlines)
- Zone clustering (k-means over segment midpoints)
- Path ordering and zone sequencing (nearest neighbour, detours, Z-lift)
- G-code emission and snippet composition

Key functions:
- generate_coating_gcode: Generate the raw G-code body
- generate_coating_gcode_with_snippets: Generate G-code wrapped with snippets
- cluster_segments: Group segments into spatial zones
- iter_nearest_neighbor: Greedy segment ordering
- plan_detour_path: Corner walk around a rectangular obstacle

Key classes:
- CoatingGCodeGenerator: Orchestrates one generation call
- MaskSet: Active masks and their clearance zones
- SegmentGenerator: Per-shape coating segments
- ZoneSequencer: Visits zones and emits their G-code
- GCodeEmitter: Stateful G-code writer
"""

from pcbcoat.core.clustering import cluster_segments
from pcbcoat.core.emitter import EmitterState, GCodeEmitter, plan_move
from pcbcoat.core.generator import (
    CoatingGCodeGenerator,
    generate_coating_gcode,
    generate_coating_gcode_with_snippets,
)
from pcbcoat.core.geometry import (
    Rect,
    line_circle_intersection_params,
    line_intersects_circle,
    line_intersects_rect,
    line_rect_intersection_params,
)
from pcbcoat.core.masking import MaskSet, merge_intervals, split_line
from pcbcoat.core.ordering import iter_nearest_neighbor, order_zone
from pcbcoat.core.scheduling import CooperativeScheduler
from pcbcoat.core.segments import SegmentGenerator
from pcbcoat.core.sequencer import ZoneSequencer, plan_detour_path
from pcbcoat.core.snippets import compose, render_template

__all__ = [
    # Generator
    "CoatingGCodeGenerator",
    "generate_coating_gcode",
    "generate_coating_gcode_with_snippets",
    # Planning classes
    "CooperativeScheduler",
    "MaskSet",
    "SegmentGenerator",
    "ZoneSequencer",
    # Emitter
    "EmitterState",
    "GCodeEmitter",
    "plan_move",
    # Geometry
    "Rect",
    "line_circle_intersection_params",
    "line_intersects_circle",
    "line_intersects_rect",
    "line_rect_intersection_params",
    # Algorithms
    "cluster_segments",
    "iter_nearest_neighbor",
    "merge_intervals",
    "order_zone",
    "plan_detour_path",
    "split_line",
    # Snippets
    "compose",
    "render_template",
]
