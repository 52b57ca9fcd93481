"""
Geographic utilities for meeting-point and distance calculations.
"""

import math
from typing import List

from app.core.schemas import GeoPoint, MemberLocation

EARTH_RADIUS_KM = 6371
INITIATOR_WEIGHT = 1.5


class InvalidGroupError(ValueError):
    """Raised when a member set cannot produce a meeting point."""


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1, lon1: Coordinates of point 1
        lat2, lon2: Coordinates of point 2

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points, in meters."""
    return haversine_distance(a.lat, a.lon, b.lat, b.lon) * 1000


def weighted_centroid(members: List[MemberLocation]) -> GeoPoint:
    """
    Weighted spherical mean of the member locations.

    Each location is turned into a 3D unit vector, scaled by its weight and
    summed; the averaged vector is converted back to latitude/longitude. Unlike
    averaging raw degrees, this behaves across the antimeridian and near poles.

    Args:
        members: Non-empty list of members with positive weights

    Returns:
        The group's weighted meeting point

    Raises:
        InvalidGroupError: If there are no members or the total weight is not positive
    """
    if not members:
        raise InvalidGroupError("At least one member location is required")

    total_weight = 0.0
    x = y = z = 0.0

    for member in members:
        lat_rad = math.radians(member.lat)
        lon_rad = math.radians(member.lon)

        x += math.cos(lat_rad) * math.cos(lon_rad) * member.weight
        y += math.cos(lat_rad) * math.sin(lon_rad) * member.weight
        z += math.sin(lat_rad) * member.weight
        total_weight += member.weight

    if total_weight <= 0:
        raise InvalidGroupError("Total member weight must be positive")

    x /= total_weight
    y /= total_weight
    z /= total_weight

    lon = math.atan2(y, x)
    hyp = math.sqrt(x * x + y * y)
    lat = math.atan2(z, hyp)

    return GeoPoint(lat=math.degrees(lat), lon=math.degrees(lon))


def apply_initiator_weight(
    members: List[MemberLocation], initiator_id: str | None
) -> List[MemberLocation]:
    """Return copies of the members with the event initiator weighted 1.5x."""
    if not initiator_id:
        return list(members)

    return [
        member.model_copy(update={"weight": INITIATOR_WEIGHT})
        if member.id == initiator_id
        else member
        for member in members
    ]
