"""Haversine distance and imperial distance formatting."""

import math

EARTH_RADIUS_METERS = 6_371_000.0
_FEET_PER_METER = 3.28084
_METERS_PER_MILE = 1609.34


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return the great-circle distance between two WGS84 points in meters.

    Args:
        lat1: Latitude of the first point.
        lng1: Longitude of the first point.
        lat2: Latitude of the second point.
        lng2: Longitude of the second point.

    Returns:
        Distance in meters.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Clamp for floating-point drift on antipodal points
    c = 2 * math.asin(min(1.0, math.sqrt(a)))
    return EARTH_RADIUS_METERS * c


def format_distance(meters: float) -> str:
    """Format a distance for display: feet under a tenth of a mile, miles otherwise.

    Args:
        meters: Distance in meters.

    Returns:
        A string such as ``"250 ft"`` or ``"1.3 mi"``.
    """
    miles = meters / _METERS_PER_MILE
    if miles < 0.1:
        return f"{meters * _FEET_PER_METER:.0f} ft"
    return f"{miles:.1f} mi"
