"""Greedy ordering of segments inside a zone."""

import math
from collections.abc import Iterator

from pcbcoat.core.scheduling import CooperativeScheduler
from pcbcoat.domain import PathSegment, Point


def iter_nearest_neighbor(segments: list[PathSegment], start: Point) -> Iterator[PathSegment]:
    """Yield segments by repeatedly picking the nearest endpoint.

    From the current location, the remaining segment with the closest
    start or end wins; it is reversed when its end was the closer one.
    Ties go to the earlier segment and, within a segment, to its start.

    Args:
        segments: Segments of one zone
        start: Tool location before the first segment

    Yields:
        Each input segment exactly once, possibly reversed
    """
    remaining = list(segments)
    location = start

    while remaining:
        best_index = 0
        best_distance = math.inf
        reverse = False
        for index, segment in enumerate(remaining):
            to_start = math.hypot(location.x - segment.start.x, location.y - segment.start.y)
            to_end = math.hypot(location.x - segment.end.x, location.y - segment.end.y)
            if to_start < best_distance:
                best_distance = to_start
                best_index = index
                reverse = False
            if to_end < best_distance:
                best_distance = to_end
                best_index = index
                reverse = True

        chosen = remaining.pop(best_index)
        if reverse:
            chosen = chosen.reversed()
        location = chosen.end
        yield chosen


async def order_zone(
    segments: list[PathSegment],
    start: Point,
    scheduler: CooperativeScheduler | None = None,
    yield_threshold: int = 1000,
    yield_interval: int = 100,
) -> list[PathSegment]:
    """Order a zone for coating, yielding periodically on large zones.

    Args:
        segments: Segments of one zone
        start: Entry point of the zone
        scheduler: Yield primitive; no yielding when None
        yield_threshold: Zones larger than this yield while ordering
        yield_interval: Segments ordered between yields

    Returns:
        The zone's segments in coating order
    """
    ordered: list[PathSegment] = []
    cooperative = scheduler is not None and len(segments) > yield_threshold
    for segment in iter_nearest_neighbor(segments, start):
        ordered.append(segment)
        if cooperative:
            await scheduler.checkpoint(len(ordered), yield_interval)
    return ordered
