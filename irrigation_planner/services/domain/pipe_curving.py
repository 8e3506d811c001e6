"""
Domain service: Pipe path curving.

Turns the anchor points a user clicks while drawing a pipe into a smoothed
path: each interior corner with a radius control is replaced by a circular
arc tangent to both adjacent segments. Corner geometry is computed in a local
metric plane (UTM) and projected back to lat/lng.

The engine never raises. Invalid anchors, projection failures and degenerate
corners fall back to straight vertices, and the result reports which corners
were rounded and which were not.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from pyproj.exceptions import ProjError

from irrigation_planner.config import settings
from irrigation_planner.domain.models import Coordinate, CurvedPath, GuideData
from irrigation_planner.utils.geo_projection import project_to_latlon, project_to_meters
from irrigation_planner.utils.geometry import calculate_pipe_length

logger = logging.getLogger(__name__)

PlanarPoint = Tuple[float, float]


@dataclass
class CurveConfig:
    """Configuration for the pipe curving engine."""

    collinear_tolerance: float = 0.05
    """Corners within this many radians of 0 or pi are left straight"""

    straight_segments: int = 50
    """Number of segments a two-anchor pipe is sampled into"""

    min_arc_segments: int = 8
    """Minimum number of segments used to sample a corner arc"""

    arc_segments_per_radian: float = 20.0
    """Arc segments per radian of corner angle"""

    @classmethod
    def from_settings(cls) -> "CurveConfig":
        return cls(
            collinear_tolerance=settings.curve_collinear_tolerance,
            straight_segments=settings.curve_straight_segments,
            min_arc_segments=settings.curve_min_arc_segments,
            arc_segments_per_radian=settings.curve_arc_segments_per_radian,
        )


@dataclass
class CornerRounding:
    """Arc replacing one corner, in planar meters."""
    center: PlanarPoint
    radius: float
    tangent1: PlanarPoint
    tangent2: PlanarPoint
    tangent_distance: float
    """Distance from the corner to each tangent point (m)"""

    angle: float
    """Angle between the two legs at the corner (radians)"""

    arc: List[PlanarPoint]
    """Samples from tangent1 to tangent2, both included"""


def _normalize_angle(delta: float) -> float:
    while delta > math.pi:
        delta -= 2 * math.pi
    while delta < -math.pi:
        delta += 2 * math.pi
    return delta


def round_corner(
    prev: PlanarPoint,
    corner: PlanarPoint,
    next_point: PlanarPoint,
    radius: float,
    config: Optional[CurveConfig] = None,
    reserved_on_prev: float = 0.0,
) -> Optional[CornerRounding]:
    """
    Replace a corner with a circular arc tangent to both legs.

    Args:
        prev: Previous point (x, y) in meters
        corner: Corner point (x, y) in meters
        next_point: Next point (x, y) in meters
        radius: Arc radius in meters
        config: Curving configuration
        reserved_on_prev: Length of the previous leg already taken by the
            arc of the preceding corner

    Returns:
        CornerRounding, or None when the corner cannot be rounded (nearly
        collinear or folded back legs, non-positive radius, zero-length leg,
        or a tangent point that would fall beyond a leg or past the tangent
        point of the preceding arc)
    """
    config = config or CurveConfig.from_settings()

    if not math.isfinite(radius) or radius <= 0:
        return None

    v1 = (prev[0] - corner[0], prev[1] - corner[1])
    v2 = (next_point[0] - corner[0], next_point[1] - corner[1])
    len1 = math.hypot(*v1)
    len2 = math.hypot(*v2)
    if not (math.isfinite(len1) and math.isfinite(len2)) or len1 == 0 or len2 == 0:
        return None

    u1 = (v1[0] / len1, v1[1] / len1)
    u2 = (v2[0] / len2, v2[1] / len2)

    dot = max(-1.0, min(1.0, u1[0] * u2[0] + u1[1] * u2[1]))
    angle = math.acos(dot)
    if angle < config.collinear_tolerance or angle > math.pi - config.collinear_tolerance:
        return None

    tangent_distance = radius / math.tan(angle / 2)
    if tangent_distance > len1 - reserved_on_prev or tangent_distance > len2:
        return None

    tangent1 = (corner[0] + u1[0] * tangent_distance, corner[1] + u1[1] * tangent_distance)
    tangent2 = (corner[0] + u2[0] * tangent_distance, corner[1] + u2[1] * tangent_distance)

    bisector = (u1[0] + u2[0], u1[1] + u2[1])
    bisector_length = math.hypot(*bisector)
    center_distance = radius / math.sin(angle / 2)
    center = (
        corner[0] + bisector[0] / bisector_length * center_distance,
        corner[1] + bisector[1] / bisector_length * center_distance,
    )

    start_angle = math.atan2(tangent1[1] - center[1], tangent1[0] - center[0])
    end_angle = math.atan2(tangent2[1] - center[1], tangent2[0] - center[0])
    sweep = _normalize_angle(end_angle - start_angle)

    segments = max(config.min_arc_segments, int(math.floor(angle * config.arc_segments_per_radian)))
    arc = []
    for k in range(segments + 1):
        theta = start_angle + sweep * k / segments
        arc.append((center[0] + radius * math.cos(theta), center[1] + radius * math.sin(theta)))

    return CornerRounding(
        center=center,
        radius=radius,
        tangent1=tangent1,
        tangent2=tangent2,
        tangent_distance=tangent_distance,
        angle=angle,
        arc=arc,
    )


def _straight_path(anchors: Sequence[Coordinate]) -> CurvedPath:
    return CurvedPath(
        path=list(anchors),
        straight_corners=list(range(1, len(anchors) - 1)),
    )


def _interpolate(start: Coordinate, end: Coordinate, segments: int) -> List[Coordinate]:
    interior = [
        Coordinate(
            lat=start.lat + (end.lat - start.lat) * k / segments,
            lng=start.lng + (end.lng - start.lng) * k / segments,
        )
        for k in range(1, segments)
    ]
    return [start] + interior + [end]


def _all_finite(points: Sequence[PlanarPoint]) -> bool:
    return all(math.isfinite(x) and math.isfinite(y) for x, y in points)


def _build_two_anchor_path(
    start: Coordinate,
    end: Coordinate,
    radius: float,
    config: CurveConfig,
) -> CurvedPath:
    segments = max(1, config.straight_segments)

    if not math.isfinite(radius) or radius <= 0:
        return CurvedPath(path=_interpolate(start, end, segments))

    try:
        (p0, p1), reverse = project_to_meters([start, end])
    except (ProjError, ValueError) as e:
        logger.warning(f"Projection failed, keeping straight pipe: {e}")
        return CurvedPath(path=_interpolate(start, end, segments))

    dx, dy = p1[0] - p0[0], p1[1] - p0[1]
    chord = math.hypot(dx, dy)
    if not math.isfinite(chord) or chord == 0:
        return CurvedPath(path=_interpolate(start, end, segments))

    # Sagitta of a circle of this radius over the chord, at most half the chord
    half_chord = chord / 2
    if radius >= half_chord:
        peak = radius - math.sqrt(radius * radius - half_chord * half_chord)
    else:
        peak = half_chord

    # Offset to the left of the travel direction
    nx, ny = -dy / chord, dx / chord
    planar = []
    for k in range(1, segments):
        t = k / segments
        offset = peak * (1 - abs(2 * t - 1))
        planar.append((p0[0] + dx * t + nx * offset, p0[1] + dy * t + ny * offset))

    try:
        interior = project_to_latlon(planar, reverse)
    except ProjError as e:
        logger.warning(f"Reverse projection failed, keeping straight pipe: {e}")
        return CurvedPath(path=_interpolate(start, end, segments))

    return CurvedPath(path=[start] + interior + [end])


def build_curved_path(
    anchors: Sequence[Coordinate],
    radius_controls: Optional[Dict[int, float]] = None,
    config: Optional[CurveConfig] = None,
) -> CurvedPath:
    """
    Build a smoothed pipe path from anchor points.

    Args:
        anchors: Points clicked by the user, in order
        radius_controls: Curve radius in meters keyed by segment index
            (segment i joins anchor i and anchor i + 1)
        config: Curving configuration

    Returns:
        CurvedPath whose first and last points are exactly the first and last
        anchors. With two anchors the pipe is sampled into a straight line,
        or a single symmetric bend when segment 0 has a radius; this bend is
        an approximation, not a true arc.
    """
    config = config or CurveConfig.from_settings()
    radius_controls = radius_controls or {}
    anchors = list(anchors)

    if len(anchors) <= 1:
        return CurvedPath(path=anchors)

    if not all(a.is_valid for a in anchors):
        logger.warning("Pipe has invalid anchor coordinates, keeping straight path")
        return _straight_path(anchors)

    if len(anchors) == 2:
        return _build_two_anchor_path(anchors[0], anchors[1], radius_controls.get(0, 0.0), config)

    try:
        planar, reverse = project_to_meters(anchors)
    except (ProjError, ValueError) as e:
        logger.warning(f"Projection failed, keeping straight path: {e}")
        return _straight_path(anchors)

    if not _all_finite(planar):
        logger.warning("Projected anchors are not finite, keeping straight path")
        return _straight_path(anchors)

    # Entries are either an anchor index (exact vertex) or a planar point
    entries: List[object] = [0]
    roundings: List[CornerRounding] = []
    rounded_corners: List[int] = []
    straight_corners: List[int] = []
    # Arcs on both ends of a segment must not overlap
    reserved = 0.0

    for i in range(1, len(anchors) - 1):
        radius = max(radius_controls.get(i - 1, 0.0), radius_controls.get(i, 0.0))
        rounding = None
        if radius > 0:
            rounding = round_corner(planar[i - 1], planar[i], planar[i + 1], radius, config, reserved)
            if rounding is None:
                logger.debug(f"Corner {i} cannot take radius {radius:.2f}m, keeping it straight")

        if rounding is None:
            entries.append(i)
            straight_corners.append(i)
            reserved = 0.0
        else:
            # Tangent points are implied by the adjacent straight segments
            entries.extend(rounding.arc[1:-1])
            roundings.append(rounding)
            rounded_corners.append(i)
            reserved = rounding.tangent_distance

    entries.append(len(anchors) - 1)

    planar_points = [e for e in entries if isinstance(e, tuple)]
    guide_points = []
    for r in roundings:
        guide_points.extend([r.center, r.tangent1, r.tangent2])

    try:
        unprojected = project_to_latlon(planar_points + guide_points, reverse)
    except ProjError as e:
        logger.warning(f"Reverse projection failed, keeping straight path: {e}")
        return _straight_path(anchors)

    if not all(c.is_valid for c in unprojected):
        logger.warning("Curved path left the valid coordinate range, keeping straight path")
        return _straight_path(anchors)

    path_iter = iter(unprojected[:len(planar_points)])
    path = [anchors[e] if isinstance(e, int) else next(path_iter) for e in entries]

    guides = []
    guide_iter = iter(unprojected[len(planar_points):])
    for r in roundings:
        center, tangent1, tangent2 = next(guide_iter), next(guide_iter), next(guide_iter)
        guides.append(GuideData(
            center=center,
            radius=r.radius,
            tangent1=tangent1,
            tangent2=tangent2,
            radius_line1=[center, tangent1],
            radius_line2=[center, tangent2],
        ))

    logger.debug(
        f"Curved path: {len(anchors)} anchors -> {len(path)} points, "
        f"{len(rounded_corners)} rounded, {len(straight_corners)} straight"
    )

    return CurvedPath(
        path=path,
        guides=guides,
        rounded_corners=rounded_corners,
        straight_corners=straight_corners,
    )


class CurvedPipeSession:
    """
    Editing session for one curved pipe being drawn.

    Owned by a single editor. Anchors are immutable once placed; radius
    controls are attached to segments and dropped when their segment is
    removed by an undo.
    """

    def __init__(self, config: Optional[CurveConfig] = None):
        self.config = config or CurveConfig.from_settings()
        self._anchors: List[Coordinate] = []
        self._radius_controls: Dict[int, float] = {}

    @property
    def anchors(self) -> Tuple[Coordinate, ...]:
        return tuple(self._anchors)

    @property
    def radius_controls(self) -> Dict[int, float]:
        return dict(self._radius_controls)

    @property
    def segment_count(self) -> int:
        return max(0, len(self._anchors) - 1)

    def add_anchor(self, point: Coordinate) -> int:
        """Append an anchor and return its index."""
        self._anchors.append(point)
        return len(self._anchors) - 1

    def undo_last_anchor(self) -> Optional[Coordinate]:
        """Remove the last anchor and the radius controls of removed segments."""
        if not self._anchors:
            return None

        removed = self._anchors.pop()
        self._radius_controls = {
            index: radius
            for index, radius in self._radius_controls.items()
            if index < self.segment_count
        }
        return removed

    def set_segment_radius(self, segment_index: int, radius: float) -> bool:
        """
        Attach a curve radius to a segment.

        Args:
            segment_index: Segment joining anchor segment_index and the next one
            radius: Radius in meters; zero or less clears the control

        Returns:
            True if the control was stored, False if the segment does not exist
            or the radius was not positive
        """
        if not 0 <= segment_index < self.segment_count:
            logger.warning(f"Ignoring radius for missing segment {segment_index}")
            return False

        if not math.isfinite(radius) or radius <= 0:
            self.clear_segment_radius(segment_index)
            return False

        self._radius_controls[segment_index] = radius
        return True

    def clear_segment_radius(self, segment_index: int) -> None:
        self._radius_controls.pop(segment_index, None)

    def radius_for_segment(self, segment_index: int) -> float:
        return self._radius_controls.get(segment_index, 0.0)

    def build(self) -> CurvedPath:
        """Preview path for the current anchors."""
        return build_curved_path(self._anchors, self._radius_controls, self.config)

    def finish(self) -> Tuple[CurvedPath, float]:
        """
        Complete the pipe and reset the session.

        Returns:
            Tuple of the final path and its haversine length in meters
        """
        curved = self.build()
        length = calculate_pipe_length(curved.path)

        logger.info(f"Finished curved pipe: {len(self._anchors)} anchors, {length:.2f}m")

        self._anchors = []
        self._radius_controls = {}
        return curved, length
