"""
Geospatial projection utilities for coordinate transformations.

Projects WGS84 coordinates into the local UTM zone so that areas, distances
and corner geometry can be computed in meters.
"""
from typing import List, Sequence, Tuple

from pyproj import Transformer

from irrigation_planner.domain.models import Coordinate


def get_utm_zone(longitude: float) -> int:
    """
    Calculate the UTM zone number from longitude.

    Args:
        longitude: Longitude in degrees

    Returns:
        UTM zone number (1-60)
    """
    return min(int((longitude + 180) / 6) + 1, 60)


def get_utm_crs(longitude: float, latitude: float) -> str:
    """
    Get the appropriate UTM CRS (Coordinate Reference System) for a location.

    Args:
        longitude: Longitude in degrees
        latitude: Latitude in degrees

    Returns:
        EPSG code for the UTM zone
    """
    zone = get_utm_zone(longitude)
    # Northern hemisphere: EPSG:326XX, Southern hemisphere: EPSG:327XX
    hemisphere = "6" if latitude >= 0 else "7"
    return f"EPSG:32{hemisphere}{zone:02d}"


def project_to_meters(
    coordinates: Sequence[Coordinate]
) -> Tuple[List[Tuple[float, float]], Transformer]:
    """
    Project lat/lng coordinates to a planar coordinate system (UTM) in meters.

    Args:
        coordinates: Coordinates in degrees; the first one selects the UTM zone

    Returns:
        Tuple of:
            - List of (x, y) coordinates in meters
            - Transformer object for reverse transformation

    Raises:
        ValueError: If the list is empty
    """
    if not coordinates:
        raise ValueError("Coordinates list cannot be empty")

    origin = coordinates[0]
    utm_crs = get_utm_crs(origin.lng, origin.lat)

    # WGS84 (EPSG:4326) to UTM, (lng, lat) -> (x, y) order
    transformer = Transformer.from_crs("EPSG:4326", utm_crs, always_xy=True)

    projected = []
    for coord in coordinates:
        x, y = transformer.transform(coord.lng, coord.lat)
        projected.append((float(x), float(y)))

    reverse_transformer = Transformer.from_crs(utm_crs, "EPSG:4326", always_xy=True)

    return projected, reverse_transformer


def project_to_latlon(
    points: Sequence[Tuple[float, float]],
    transformer: Transformer
) -> List[Coordinate]:
    """
    Project planar coordinates (meters) back to lat/lng.

    Args:
        points: List of (x, y) coordinates in meters
        transformer: Reverse transformer returned by project_to_meters

    Returns:
        List of Coordinates in degrees
    """
    latlon = []
    for x, y in points:
        lng, lat = transformer.transform(x, y)
        latlon.append(Coordinate(lat=float(lat), lng=float(lng)))

    return latlon
