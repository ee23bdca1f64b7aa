"""Spatial zoning of coating segments.

Segments are grouped into zones with k-means over their midpoints so the
sequencer can finish one neighbourhood before moving to the next. The
clustering is deterministic: the first k midpoints seed the centroids.
"""

import math

from pcbcoat.domain import PathSegment, Point


def _nearest(point: Point, centroids: list[Point]) -> int:
    best = 0
    best_distance = math.inf
    for index, centroid in enumerate(centroids):
        d = math.hypot(point.x - centroid.x, point.y - centroid.y)
        if d < best_distance:
            best_distance = d
            best = index
    return best


def cluster_segments(
    segments: list[PathSegment],
    k: int = 5,
    max_iterations: int = 50,
    tolerance: float = 0.01,
) -> list[list[PathSegment]]:
    """Group segments into at most k spatial zones.

    Lloyd iteration: assign each midpoint to its nearest centroid (ties go
    to the lower index), move each centroid to the mean of its members
    (empty clusters keep their centroid), and stop once the summed
    centroid shift drops below ``tolerance``.

    Args:
        segments: Segments to group, in generation order
        k: Number of zones
        max_iterations: Upper bound on Lloyd iterations
        tolerance: Convergence threshold on the summed centroid shift

    Returns:
        One list per centroid, preserving input order inside each list.
        Lists may be empty; with fewer than k segments there are fewer
        than k lists. Empty input or k <= 0 gives ``[]``.

    Examples:
        >>> segs = [PathSegment(Point(0, 0), Point(1, 0)), PathSegment(Point(50, 0), Point(51, 0))]
        >>> [len(z) for z in cluster_segments(segs, k=2)]
        [1, 1]
    """
    if not segments or k <= 0:
        return []

    midpoints = [segment.midpoint() for segment in segments]
    centroids = midpoints[:k]
    assignments: list[int] = []

    for _ in range(max_iterations):
        assignments = [_nearest(midpoint, centroids) for midpoint in midpoints]

        sums = [[0.0, 0.0] for _ in centroids]
        counts = [0] * len(centroids)
        for midpoint, cluster in zip(midpoints, assignments):
            sums[cluster][0] += midpoint.x
            sums[cluster][1] += midpoint.y
            counts[cluster] += 1

        updated = [
            Point(sums[i][0] / counts[i], sums[i][1] / counts[i]) if counts[i] else centroids[i]
            for i in range(len(centroids))
        ]

        shift = sum(
            math.hypot(old.x - new.x, old.y - new.y)
            for old, new in zip(centroids, updated)
        )
        if shift < tolerance:
            break
        centroids = updated

    zones: list[list[PathSegment]] = [[] for _ in centroids]
    for segment, cluster in zip(segments, assignments):
        zones[cluster].append(segment)
    return zones
