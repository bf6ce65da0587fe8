"""
proximity.py
------------
Geofence gate for staff check-in.

Pure functions: the caller supplies both coordinates and the configured
radius (see configmgr.services); nothing here touches the database.
"""

import math
from dataclasses import dataclass

EARTH_RADIUS_METERS = 6371000


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ProximityCheckResult:
    distance_meters: float
    max_distance: float
    passed: bool
    message: str = ""


def distance_meters(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points in meters (haversine)."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def is_within_range(distance: float, max_distance: float) -> bool:
    # max_distance == 0 turns the check off.
    if max_distance == 0:
        return True
    return distance <= max_distance


def evaluate(reported: Coordinates, kiosk: Coordinates, max_distance: float) -> ProximityCheckResult:
    distance = distance_meters(reported, kiosk)
    passed = is_within_range(distance, max_distance)
    if max_distance == 0:
        message = "Proximity check is disabled."
    elif passed:
        message = f"Within {max_distance:.0f} m of the kiosk ({distance:.0f} m)."
    else:
        message = f"You are {distance:.0f} m from the kiosk; check-in is allowed within {max_distance:.0f} m."
    return ProximityCheckResult(
        distance_meters=distance,
        max_distance=max_distance,
        passed=passed,
        message=message,
    )
