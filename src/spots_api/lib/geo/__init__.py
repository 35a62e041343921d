"""Great-circle distance and distance display helpers."""

from spots_api.lib.geo.distance import EARTH_RADIUS_METERS, format_distance, haversine_meters

__all__ = ["EARTH_RADIUS_METERS", "format_distance", "haversine_meters"]
