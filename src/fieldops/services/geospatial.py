"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Sequence

from ..config import settings
from ..models.domain import Coordinate, Priority, WorkOrder

EARTH_RADIUS_KM = 6371.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(origin: Coordinate, destination: Coordinate) -> float:
    """Great-circle distance in kilometers between two coordinates."""

    return haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)


def format_distance(kilometers: float) -> str:
    if kilometers < 0.1:
        return "<100m"
    if kilometers < 1:
        return f"{_round_half_up(kilometers * 1000)}m"
    if kilometers < 10:
        return f"{kilometers:.1f}km"
    return f"{_round_half_up(kilometers)}km"


def estimate_travel_time(distance: float, average_speed_kmh: float | None = None) -> int:
    """Estimate travel time in whole minutes at a fixed average speed."""

    speed = average_speed_kmh or settings.average_speed_kmh
    return _round_half_up(distance / speed * 60)


def format_travel_time(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes}min"
    hours, remaining = divmod(minutes, 60)
    if remaining == 0:
        return f"{hours}h"
    return f"{hours}h {remaining}min"


def distance_multiplier(distance: float, tiers: Sequence[float] | None = None) -> int:
    """Return the tier multiplier for a distance: 1 for the nearest tier, len(tiers) + 1 beyond the last."""

    tiers = tuple(tiers or settings.proximity_distance_tiers_km)
    for index, upper_bound in enumerate(tiers):
        if distance <= upper_bound:
            return index + 1
    return len(tiers) + 1


def proximity_score(
    distance: float,
    priority: Priority | str,
    *,
    weights: Mapping[str, int] | None = None,
    tiers: Sequence[float] | None = None,
) -> float:
    """Rank a work order by priority tier and distance tier (lower is better).

    High priority within 5km comes first, then medium within 10km, and so on.
    The ``distance / 100`` term only breaks ties inside the same bucket.
    """

    weights = weights or settings.proximity_priority_weights
    weight = weights[Priority.parse(priority).value]
    return weight * distance_multiplier(distance, tiers) + distance / 100


def filter_by_radius(
    work_orders: Iterable[WorkOrder],
    origin: Coordinate,
    radius_km: float,
) -> list[WorkOrder]:
    """Keep work orders within ``radius_km`` of ``origin``; orders without a location are dropped."""

    return [
        order
        for order in work_orders
        if order.coordinate is not None and distance_km(origin, order.coordinate) <= radius_km
    ]


def nearby_work_orders(work_orders: Iterable[WorkOrder], origin: Coordinate) -> list[WorkOrder]:
    return filter_by_radius(work_orders, origin, settings.nearby_radius_km)


def calculate_route_distance(work_orders: Sequence[WorkOrder], start: Coordinate) -> float:
    """Total distance travelled visiting work orders in the given order."""

    total = 0.0
    current = start
    for order in work_orders:
        if order.coordinate is None:
            continue
        total += distance_km(current, order.coordinate)
        current = order.coordinate
    return total
