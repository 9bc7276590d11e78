"""Priority-weighted nearest-neighbour route ordering.

This is a greedy heuristic, not a TSP solver: starting at the technician's
location it repeatedly visits the unvisited work order with the cheapest
weighted edge. The weighting lets urgent work pull ahead of slightly closer
routine work. Cost is O(n^2), fine for the few dozen orders a selection holds.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ...config import settings
from ...models.domain import Coordinate, Priority, WorkOrder
from ..geospatial import distance_km, estimate_travel_time, format_distance, format_travel_time
from .models import RouteResult, RouteSegment, RouteStats, RoutingValidation

logger = logging.getLogger(__name__)

MAX_RECOMMENDED_STOPS = 25


def priority_multiplier(priority: Priority | str, multipliers: Mapping[str, float] | None = None) -> float:
    multipliers = multipliers or settings.route_priority_multipliers
    return multipliers.get(Priority.parse(priority).value, 1.0)


def validate_for_routing(work_orders: Sequence[WorkOrder]) -> RoutingValidation:
    valid = [order for order in work_orders if order.coordinate is not None]
    invalid = [order for order in work_orders if order.coordinate is None]
    return RoutingValidation(valid=valid, invalid=invalid)


def routing_warnings(work_orders: Sequence[WorkOrder]) -> list[str]:
    validation = validate_for_routing(work_orders)
    warnings: list[str] = []
    if validation.invalid:
        warnings.append(
            f"{len(validation.invalid)} work orders will be excluded due to missing location data"
        )
    if len(validation.valid) > MAX_RECOMMENDED_STOPS:
        warnings.append("Large number of work orders may result in suboptimal routing")
    return warnings


def optimize_route(
    work_orders: Sequence[WorkOrder],
    start: Coordinate,
    *,
    priority_multipliers: Mapping[str, float] | None = None,
    average_speed_kmh: float | None = None,
) -> RouteResult:
    if not work_orders:
        return RouteResult()

    valid = validate_for_routing(work_orders).valid
    if not valid:
        return RouteResult(ordered=list(work_orders))

    speed = average_speed_kmh or settings.average_speed_kmh
    segments: list[RouteSegment] = []
    unvisited = list(valid)
    current = start
    total_distance = 0.0

    while unvisited:
        best_index = 0
        best_cost = float("inf")
        for index, order in enumerate(unvisited):
            cost = distance_km(current, order.coordinate) * priority_multiplier(order.priority, priority_multipliers)
            if cost < best_cost:
                best_cost = cost
                best_index = index

        selected = unvisited.pop(best_index)
        segment_distance = distance_km(current, selected.coordinate)
        segments.append(
            RouteSegment(
                from_coordinate=current,
                to_coordinate=selected.coordinate,
                distance_km=segment_distance,
                estimated_minutes=estimate_travel_time(segment_distance, speed),
                work_order=selected,
            )
        )
        total_distance += segment_distance
        current = selected.coordinate

    logger.debug(f"Ordered {len(segments)} stops, {total_distance:.2f}km total")
    return RouteResult(
        ordered=[segment.work_order for segment in segments],
        segments=segments,
        total_distance_km=total_distance,
        estimated_minutes=estimate_travel_time(total_distance, speed),
    )


def calculate_route_stats(result: RouteResult) -> RouteStats:
    stops = len(result.ordered)
    average = result.total_distance_km / stops if stops else 0.0
    return RouteStats(
        total_distance_km=result.total_distance_km,
        estimated_travel_minutes=result.estimated_minutes,
        total_stops=stops,
        average_distance_between_stops_km=average,
        formatted_distance=format_distance(result.total_distance_km),
        formatted_time=format_travel_time(result.estimated_minutes),
    )


def route_summary(stats: RouteStats) -> str:
    if stats.total_stops == 0:
        return "No work orders selected for routing"
    noun = "work order" if stats.total_stops == 1 else "work orders"
    return f"{stats.total_stops} {noun} • {stats.formatted_distance} • {stats.formatted_time}"
