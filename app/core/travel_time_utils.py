"""
Utilities for estimating member travel time to a venue.
"""

from app.core.geo_utils import distance_meters
from app.core.schemas import GeoPoint, MemberLocation

DEFAULT_SPEED_KMH = 50.0


def estimate_travel_minutes(distance_m: float, speed_kmh: float = DEFAULT_SPEED_KMH) -> float:
    """
    Estimate travel time in minutes from a straight-line distance.

    Args:
        distance_m: Distance in meters
        speed_kmh: Assumed average speed (default 50 km/h)

    Returns:
        Travel time in minutes
    """
    return (distance_m / 1000) / speed_kmh * 60


def compute_travel_times(
    members: list[MemberLocation],
    venue: GeoPoint,
    speed_kmh: float = DEFAULT_SPEED_KMH,
) -> tuple[dict[str, float], float]:
    """
    Estimate every member's travel time to a venue.

    Returns:
        (minutes keyed by member id, the longest of those times)
    """
    travel_times: dict[str, float] = {}
    max_travel_time = 0.0

    for member in members:
        origin = GeoPoint(lat=member.lat, lon=member.lon)
        minutes = estimate_travel_minutes(distance_meters(origin, venue), speed_kmh)
        travel_times[member.id] = minutes
        max_travel_time = max(max_travel_time, minutes)

    return travel_times, max_travel_time
