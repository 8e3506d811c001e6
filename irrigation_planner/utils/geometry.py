"""
Geometry primitives for irrigation layouts.

Provides:
- Point-in-polygon containment (ray casting)
- Planar and geodesic polygon area
- Haversine distance and pipe length
- Segment projection and nearest-point (snap) search

Every function degrades instead of raising: malformed geometry yields 0,
False or None.
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from pyproj.exceptions import ProjError
from scipy.spatial import KDTree
from shapely.geometry import Polygon

from irrigation_planner.domain.models import Coordinate, ExclusionArea, Zone
from irrigation_planner.utils.geo_projection import project_to_meters

logger = logging.getLogger(__name__)

EARTH_RADIUS_METERS = 6_371_000
SQUARE_METERS_PER_RAI = 1600.0

PointLike = Union[Coordinate, Tuple[float, float]]


@dataclass
class SnapResult:
    """Nearest candidate found by find_nearest_point."""
    index: int
    """Index of the candidate in the input sequence"""

    point: Coordinate
    """The candidate coordinate"""

    distance: float
    """Distance from the target in meters"""


def _as_xy(point: PointLike) -> Tuple[float, float]:
    # Coordinates use lat as x and lng as y
    if isinstance(point, Coordinate):
        return point.lat, point.lng
    return float(point[0]), float(point[1])


def _is_finite_xy(xy: Tuple[float, float]) -> bool:
    return math.isfinite(xy[0]) and math.isfinite(xy[1])


def is_point_in_polygon(point: PointLike, polygon: Sequence[PointLike]) -> bool:
    """
    Check whether a point lies inside a polygon using ray casting.

    The polygon does not need to be closed. Points exactly on an edge have
    undefined membership.

    Args:
        point: Coordinate or (x, y) tuple
        polygon: Polygon vertices, same kind as point

    Returns:
        True if the point is inside, False otherwise (including for polygons
        with fewer than 3 vertices or a non-finite point)
    """
    if len(polygon) < 3:
        return False

    x, y = _as_xy(point)
    if not _is_finite_xy((x, y)):
        return False

    vertices = [_as_xy(v) for v in polygon]
    inside = False
    j = len(vertices) - 1
    for i in range(len(vertices)):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i

    return inside


def calculate_polygon_area(points: Sequence[PointLike], scale: float = 1.0) -> float:
    """
    Calculate planar polygon area with the shoelace formula.

    No unit conversion is applied: raw lat/lng input yields square degrees.
    Use calculate_geodesic_area for square meters.

    Args:
        points: Polygon vertices
        scale: Linear scale factor applied to both axes

    Returns:
        Area in input units squared times scale squared, 0 for fewer than 3
        points or non-finite values
    """
    if len(points) < 3:
        return 0.0

    vertices = [_as_xy(p) for p in points]
    if not all(_is_finite_xy(v) for v in vertices):
        return 0.0

    xs = np.array([v[0] for v in vertices])
    ys = np.array([v[1] for v in vertices])
    cross = xs * np.roll(ys, -1) - np.roll(xs, -1) * ys
    area = 0.5 * abs(float(np.sum(cross)))

    return area * scale * scale


def calculate_geodesic_area(coordinates: Sequence[Coordinate]) -> float:
    """
    Calculate the area of a lat/lng polygon in square meters.

    The polygon is projected to its local UTM zone and measured with shapely.

    Args:
        coordinates: Polygon vertices in degrees

    Returns:
        Area in m², 0 for invalid input
    """
    valid = [c for c in coordinates if c.is_valid]
    if len(valid) < 3:
        return 0.0

    try:
        projected, _ = project_to_meters(valid)
    except (ProjError, ValueError) as e:
        logger.warning(f"Could not project polygon for area calculation: {e}")
        return 0.0

    area = float(Polygon(projected).area)
    if not math.isfinite(area):
        return 0.0
    return area


def haversine_distance(p1: Coordinate, p2: Coordinate) -> float:
    """
    Great-circle distance between two coordinates.

    Args:
        p1: First coordinate
        p2: Second coordinate

    Returns:
        Distance in meters, 0 for non-finite input
    """
    if not (p1.is_valid and p2.is_valid):
        return 0.0

    lat1 = math.radians(p1.lat)
    lat2 = math.radians(p2.lat)
    d_lat = math.radians(p2.lat - p1.lat)
    d_lng = math.radians(p2.lng - p1.lng)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    a = min(1.0, max(0.0, a))

    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(a))


def calculate_pipe_length(coordinates: Sequence[Coordinate]) -> float:
    """Sum of haversine segment lengths; segments with invalid ends count as 0."""
    total = 0.0
    for start, end in zip(coordinates, coordinates[1:]):
        if not (start.is_valid and end.is_valid):
            continue
        total += haversine_distance(start, end)
    return total


def polygon_center(coordinates: Sequence[Coordinate]) -> Coordinate:
    """Average of the valid vertices, (0, 0) when there are none."""
    valid = [c for c in coordinates if c.is_valid]
    if not valid:
        return Coordinate(lat=0.0, lng=0.0)
    return Coordinate(
        lat=sum(c.lat for c in valid) / len(valid),
        lng=sum(c.lng for c in valid) / len(valid),
    )


def closest_point_on_segment(point: Coordinate, start: Coordinate, end: Coordinate) -> Coordinate:
    """
    Project a point onto a segment.

    Longitude is scaled by the cosine of the segment's mean latitude so the
    projection is close to metric for the short segments of a farm layout.

    Args:
        point: Coordinate to project
        start: Segment start
        end: Segment end

    Returns:
        Closest coordinate on the segment (start for degenerate segments)
    """
    lng_scale = math.cos(math.radians((start.lat + end.lat) / 2))
    dx = (end.lng - start.lng) * lng_scale
    dy = end.lat - start.lat
    length_sq = dx * dx + dy * dy
    if length_sq == 0 or not math.isfinite(length_sq):
        return start

    px = (point.lng - start.lng) * lng_scale
    py = point.lat - start.lat
    t = max(0.0, min(1.0, (px * dx + py * dy) / length_sq))

    return Coordinate(
        lat=start.lat + t * (end.lat - start.lat),
        lng=start.lng + t * (end.lng - start.lng),
    )


def distance_to_segment(point: Coordinate, start: Coordinate, end: Coordinate) -> float:
    """Distance in meters from a point to the closest point of a segment."""
    if not (point.is_valid and start.is_valid and end.is_valid):
        return 0.0
    return haversine_distance(point, closest_point_on_segment(point, start, end))


def find_nearest_point(
    target: Coordinate,
    candidates: Sequence[Coordinate],
    max_distance: Optional[float] = None
) -> Optional[SnapResult]:
    """
    Find the candidate closest to a target, for snapping pipe ends.

    Candidates are projected to meters and indexed with a KD-Tree.

    Args:
        target: Coordinate to snap
        candidates: Coordinates that can be snapped to
        max_distance: Optional snap radius in meters

    Returns:
        SnapResult, or None when there are no valid candidates or the nearest
        one is farther than max_distance
    """
    if not target.is_valid:
        return None

    indexed = [(i, c) for i, c in enumerate(candidates) if c.is_valid]
    if not indexed:
        return None

    try:
        projected, _ = project_to_meters([target] + [c for _, c in indexed])
    except (ProjError, ValueError) as e:
        logger.warning(f"Could not project candidates for snapping: {e}")
        return None

    # Out-of-range coordinates project to inf
    if not _is_finite_xy(projected[0]):
        return None
    usable = [(entry, xy) for entry, xy in zip(indexed, projected[1:]) if _is_finite_xy(xy)]
    if not usable:
        return None

    kdtree = KDTree(np.array([xy for _, xy in usable]))
    _, nearest = kdtree.query(projected[0])
    index, point = usable[int(nearest)][0]
    distance = haversine_distance(target, point)

    if max_distance is not None and distance > max_distance:
        logger.debug(f"Nearest candidate {distance:.2f}m exceeds snap radius {max_distance:.2f}m")
        return None

    return SnapResult(index=index, point=point, distance=distance)


def exclusion_touches_zone(exclusion: ExclusionArea, zone: Zone) -> bool:
    """
    Check whether an exclusion area is attributed to a zone.

    Approximation: true when any exclusion vertex lies inside the zone, so an
    exclusion crossing the zone with all vertices outside is missed.
    """
    return any(is_point_in_polygon(vertex, zone.coordinates) for vertex in exclusion.coordinates)
