"""
Walk metrics for the walk toward a shop.

Distance, step and calorie estimates shown on shop cards and during a walk.
Live values are used when the user's position is known; otherwise the shop's
static fallbacks are shown.
"""

import math
from typing import Optional

from ..domain import GeoPoint

EARTH_RADIUS_M = 6371000.0
STEPS_PER_METRE = 1.3
STEPS_PER_KCAL = 20
SESSION_KCAL_PER_STEP = 0.045
ARRIVAL_THRESHOLD_M = 50.0


def distance_between(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in metres (haversine)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


def distance_from(shop, user_location: Optional[GeoPoint]) -> Optional[float]:
    """
    Live distance from the user to a shop in metres.

    Returns None without a user location, or when the shop has a zero
    latitude or longitude (coordinates missing from the feed).
    """
    if user_location is None:
        return None
    if shop.latitude == 0 or shop.longitude == 0:
        return None
    return distance_between(
        user_location.latitude, user_location.longitude,
        shop.latitude, shop.longitude,
    )


def estimate_steps(distance_m: float) -> int:
    return int(distance_m * STEPS_PER_METRE)


def estimate_calories(steps: int) -> int:
    return steps // STEPS_PER_KCAL


def session_calories(steps: int) -> float:
    """Calories burned during a walk session, from pedometer steps."""
    return steps * SESSION_KCAL_PER_STEP


def format_distance(distance_m: float) -> str:
    if distance_m < 1000:
        return f"{distance_m:.0f} m"
    return f"{distance_m / 1000:.1f} km"


def display_distance(shop, user_location: Optional[GeoPoint] = None) -> str:
    distance = distance_from(shop, user_location)
    if distance is None:
        if shop.static_distance < 1000:
            return f"{shop.static_distance} m"
        return format_distance(shop.static_distance)
    return format_distance(distance)


def display_steps(shop, user_location: Optional[GeoPoint] = None) -> str:
    distance = distance_from(shop, user_location)
    if distance is None:
        return f"{shop.static_steps} steps"
    return f"{estimate_steps(distance)} steps"


def display_calories(shop, user_location: Optional[GeoPoint] = None) -> str:
    distance = distance_from(shop, user_location)
    if distance is None:
        return f"{shop.static_calories} kcal"
    return f"{estimate_calories(estimate_steps(distance))} kcal"


def walk_summary(shop, user_location: Optional[GeoPoint] = None) -> dict:
    """Display strings for a shop card, plus the raw live distance."""
    distance = distance_from(shop, user_location)
    return {
        'distance': display_distance(shop, user_location),
        'steps': display_steps(shop, user_location),
        'calories': display_calories(shop, user_location),
        'distance_m': distance,
        'is_live': distance is not None,
    }


def has_arrived(distance_m: Optional[float], threshold: float = ARRIVAL_THRESHOLD_M) -> bool:
    if distance_m is None:
        return False
    return distance_m <= threshold


def format_eta(seconds: Optional[float]) -> str:
    """
    Format a travel time like ``1h 10m``, ``5m 3s`` or ``45s``.

    At most two units are shown, starting from the largest non-zero one.
    """
    if seconds is None or math.isnan(seconds) or seconds < 0:
        return 'N/A'

    remaining = int(seconds)
    hours, remaining = divmod(remaining, 3600)
    minutes, secs = divmod(remaining, 60)

    parts = [
        f"{value}{unit}"
        for value, unit in ((hours, 'h'), (minutes, 'm'), (secs, 's'))
        if value
    ]
    if not parts:
        return '0s'
    return ' '.join(parts[:2])
