"""Zone sequencing and collision-aware travel.

The sequencer drives the emitter through one coating shape: it repeatedly
picks the unvisited zone with the endpoint nearest the tool, travels
there without crossing a mask, and coats the zone in nearest-neighbour
order.

Travel moves that would cross a mask are handled in one of two ways:
- Contour: walk around a single rectangular obstacle via its corners
- Lift: raise to the safe height and travel straight over
"""

import math

from pcbcoat.config.settings import GcodeSettings, PlannerConfig, TravelAvoidanceStrategy
from pcbcoat.core.emitter import GCodeEmitter
from pcbcoat.core.geometry import Rect, distance
from pcbcoat.core.masking import MaskSet
from pcbcoat.core.ordering import order_zone
from pcbcoat.core.scheduling import CooperativeScheduler
from pcbcoat.domain import PathSegment, Point, Shape, ShapeKind
from pcbcoat.utils.logging import GenerationLogger
from pcbcoat.utils.progress import ProgressReporter


def _path_length(start: Point, waypoints: list[Point], end: Point) -> float:
    if not waypoints:
        return math.inf
    length = distance(start, waypoints[0])
    for a, b in zip(waypoints, waypoints[1:]):
        length += distance(a, b)
    return length + distance(waypoints[-1], end)


def _closest_corner(point: Point, corners: list[Point]) -> int:
    best = -1
    best_distance = math.inf
    for index, corner in enumerate(corners):
        d = distance(point, corner)
        if d < best_distance:
            best_distance = d
            best = index
    return best


def plan_detour_path(start: Point, end: Point, obstacle: Rect) -> list[Point]:
    """Plan a corner walk around a rectangular obstacle.

    Both walks from the corner nearest ``start`` to the corner nearest
    ``end`` are built, one in each direction round the rectangle, and the
    one with the shorter total travel (approach and departure legs
    included) wins. Equal lengths prefer the counter-clockwise walk.

    Args:
        start: Travel start
        end: Travel destination
        obstacle: Clearance-padded obstacle rectangle

    Returns:
        Waypoints to visit before ``end``, at least one corner

    Examples:
        >>> plan_detour_path(Point(-5, 5), Point(15, 5), Rect(0, 0, 10, 10))
        [Point(x=0, y=0), Point(x=10, y=0)]
    """
    corners = obstacle.corners()
    first = _closest_corner(start, corners)
    last = _closest_corner(end, corners)

    clockwise: list[Point] = []
    i = first
    while i != last:
        clockwise.append(corners[i])
        i = (i + 1) % 4
    clockwise.append(corners[last])

    counter_clockwise: list[Point] = []
    i = first
    while i != last:
        counter_clockwise.append(corners[i])
        i = (i + 3) % 4
    counter_clockwise.append(corners[last])

    if _path_length(start, clockwise, end) < _path_length(start, counter_clockwise, end):
        return clockwise
    return counter_clockwise


class ZoneSequencer:
    """Visits the zones of coating shapes and emits their G-code."""

    def __init__(
        self,
        emitter: GCodeEmitter,
        masks: MaskSet,
        settings: GcodeSettings,
        planner: PlannerConfig | None = None,
        scheduler: CooperativeScheduler | None = None,
        reporter: ProgressReporter | None = None,
        generation_logger: GenerationLogger | None = None,
    ) -> None:
        self.emitter = emitter
        self.masks = masks
        self.settings = settings
        self.planner = planner or PlannerConfig()
        self.scheduler = scheduler or CooperativeScheduler()
        self.reporter = reporter or ProgressReporter()
        self.generation_logger = generation_logger

    def avoidance_strategy(self, obstacles: list[Shape]) -> TravelAvoidanceStrategy:
        """Strategy for a blocked travel move.

        A single obstacle's own strategy overrides the global setting.
        """
        if len(obstacles) == 1 and obstacles[0].avoidance_strategy is not None:
            return obstacles[0].avoidance_strategy
        return self.settings.travel_avoidance_strategy

    def travel_to_entry(self, entry: Point) -> None:
        """Travel to a zone entry point without crossing a mask.

        Args:
            entry: Destination of the travel move
        """
        current = self.emitter.current_position().to_point()
        obstacles = self.masks.find_intersecting_masks(current, entry)
        if not obstacles:
            self.emitter.travel_to(entry.x, entry.y)
            return

        strategy = self.avoidance_strategy(obstacles)
        self.emitter.comment(f"[INFO] Mask collision detected. Strategy: {strategy.value}")

        obstacle = obstacles[0]
        if (
            strategy is TravelAvoidanceStrategy.CONTOUR
            and len(obstacles) == 1
            and obstacle.kind in (ShapeKind.RECTANGLE, ShapeKind.IMAGE)
        ):
            zone = Rect.of_shape(obstacle).expanded(self.masks.clearance_for(obstacle))
            waypoints = plan_detour_path(current, entry, zone)
            self.emitter.comment(
                f"[INFO] Detouring around {obstacle.display_name} via {len(waypoints)} waypoints."
            )
            for waypoint in waypoints:
                self.emitter.travel_to(waypoint.x, waypoint.y)
            self.emitter.travel_to(entry.x, entry.y)
            self._log_avoidance(strategy, obstacles, len(waypoints))
        else:
            self.emitter.comment("[INFO] Falling back to Z-Lift maneuver.")
            self.emitter.set_z(self.settings.safe_height)
            self.emitter.travel_to(entry.x, entry.y)
            self._log_avoidance(TravelAvoidanceStrategy.LIFT, obstacles, 0)

    def _log_avoidance(
        self,
        strategy: TravelAvoidanceStrategy,
        obstacles: list[Shape],
        waypoints: int,
    ) -> None:
        if self.generation_logger is not None:
            self.generation_logger.log_travel_avoidance(
                strategy.value,
                [obstacle.display_name for obstacle in obstacles],
                waypoints,
            )

    @staticmethod
    def nearest_entry(
        zones: list[list[PathSegment]], location: Point
    ) -> tuple[int, Point] | None:
        """Find the zone endpoint closest to a location.

        Args:
            zones: Non-empty unvisited zones
            location: Current tool location

        Returns:
            Tuple of (zone index, entry point), or None if no zone has a segment
        """
        best: tuple[int, Point] | None = None
        best_distance = math.inf
        for zone_index, zone in enumerate(zones):
            for segment in zone:
                to_start = distance(location, segment.start)
                if to_start < best_distance:
                    best_distance = to_start
                    best = (zone_index, segment.start)
                to_end = distance(location, segment.end)
                if to_end < best_distance:
                    best_distance = to_end
                    best = (zone_index, segment.end)
        return best

    async def sequence_shape(
        self,
        shape: Shape,
        zones: list[list[PathSegment]],
        progress_base: float = 0.0,
        progress_span: float = 0.0,
    ) -> int:
        """Coat every zone of one shape.

        Args:
            shape: Shape being coated (height and speed overrides)
            zones: Zones from clustering; empty zones are ignored
            progress_base: Progress value when the first zone starts
            progress_span: Progress range covering all zones

        Returns:
            Number of zones coated
        """
        coating_z = shape.effective_coating_height(self.settings)
        coating_speed = shape.effective_coating_speed(self.settings)
        tolerance = self.planner.position_tolerance

        self.emitter.comment(f"---- {shape.label} {shape.display_name} start ----")

        unvisited = [zone for zone in zones if zone]
        total = len(unvisited)
        processed = 0

        while unvisited:
            found = self.nearest_entry(unvisited, self.emitter.current_position().to_point())
            if found is None:
                break
            zone_index, entry = found
            zone = unvisited.pop(zone_index)

            self.travel_to_entry(entry)
            self.emitter.set_coating_z(coating_z)

            ordered = await order_zone(
                zone,
                entry,
                self.scheduler,
                self.planner.zone_yield_threshold,
                self.planner.zone_yield_interval,
            )
            for segment in ordered:
                position = self.emitter.current_position()
                if (
                    abs(position.x - segment.start.x) > tolerance
                    or abs(position.y - segment.start.y) > tolerance
                ):
                    self.emitter.travel_to(segment.start.x, segment.start.y)
                self.emitter.nozzle_on()
                self.emitter.coat_to_with_speed(segment.end.x, segment.end.y, coating_speed)
                self.emitter.nozzle_off()

            processed += 1
            self.reporter.report(
                progress_base + progress_span * processed / total,
                f"{shape.display_name} - zone {processed}/{total} done",
            )
            await self.scheduler.pause()

        self.emitter.set_z(self.settings.safe_height)
        self.emitter.comment(f"---- {shape.label} {shape.display_name} end ----")
        return processed
