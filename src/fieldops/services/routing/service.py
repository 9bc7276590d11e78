"""Route planning orchestration service."""

from __future__ import annotations

import logging
from typing import Sequence

from ...core.exceptions import RouteOptimizationError, RouteValidationError
from ...models.domain import Coordinate, WorkOrder
from ...persistence.filesystem import FileStorage
from ...schemas.routing import (
    MapUrlRequest,
    MapUrlResponse,
    RoutePlanRequest,
    RoutePlanResponse,
    RouteStatsModel,
    RouteStopModel,
)
from ..outputs.routing_formatter import route_result_to_csv, route_result_to_json
from .maps import check_map_availability, generate_map_url
from .models import RouteResult, RouteStats
from .optimizer import (
    calculate_route_stats,
    optimize_route,
    route_summary,
    routing_warnings,
    validate_for_routing,
)

logger = logging.getLogger(__name__)


def compute_route(work_orders: Sequence[WorkOrder], start: Coordinate) -> RouteResult:
    """Validate the input and order it, classifying failures for the caller."""
    if not work_orders:
        raise RouteValidationError("No work orders provided for route optimization")

    validation = validate_for_routing(work_orders)
    if not validation.has_valid_orders:
        raise RouteValidationError(
            "No work orders have valid location data for route planning",
            details={"excluded_ids": [order.id for order in validation.invalid]},
        )
    if validation.invalid:
        logger.warning(
            f"{len(validation.invalid)} work orders excluded from route due to missing location data"
        )

    try:
        return optimize_route(work_orders, start)
    except Exception as exc:
        logger.exception(f"Route optimization failed: {exc}")
        raise RouteOptimizationError(f"Failed to optimize route: {exc}") from exc


def _persist(result: RouteResult, stats: RouteStats, summary: str, label: str | None) -> str:
    storage = FileStorage()
    run_dir = storage.make_run_directory(prefix=f"route_{label}" if label else "route")
    storage.write_json(run_dir / "summary.json", route_result_to_json(result, stats, summary))
    storage.write_csv(run_dir / "route.csv", route_result_to_csv(result))
    logger.info(f"Route outputs written to {run_dir}")
    return str(run_dir)


def plan_route(payload: RoutePlanRequest) -> RoutePlanResponse:
    work_orders = [item.to_domain() for item in payload.work_orders]
    result = compute_route(work_orders, payload.start.to_domain())
    stats = calculate_route_stats(result)
    summary = route_summary(stats)

    output_dir = None
    if payload.persist:
        output_dir = _persist(result, stats, summary, payload.run_label)

    return RoutePlanResponse(
        stops=[
            RouteStopModel(
                work_order_id=segment.work_order.id,
                sequence=sequence,
                priority=segment.work_order.priority.value,
                distance_from_prev_km=segment.distance_km,
                estimated_minutes=segment.estimated_minutes,
            )
            for sequence, segment in enumerate(result.segments, start=1)
        ],
        distances=result.distances,
        total_distance_km=result.total_distance_km,
        estimated_minutes=result.estimated_minutes,
        stats=RouteStatsModel(
            total_distance_km=stats.total_distance_km,
            estimated_travel_minutes=stats.estimated_travel_minutes,
            total_stops=stats.total_stops,
            average_distance_between_stops_km=stats.average_distance_between_stops_km,
            formatted_distance=stats.formatted_distance,
            formatted_time=stats.formatted_time,
        ),
        summary=summary,
        excluded_ids=[order.id for order in work_orders if order.coordinate is None],
        warnings=routing_warnings(work_orders),
        output_dir=output_dir,
    )


def build_map_url(payload: MapUrlRequest) -> MapUrlResponse:
    start = payload.start.to_domain()
    result = compute_route([item.to_domain() for item in payload.work_orders], start)
    availability = check_map_availability(payload.user_agent)
    provider = payload.provider or availability.default_provider
    if provider == "apple" and not availability.apple_maps:
        provider = "google"
    return MapUrlResponse(provider=provider, url=generate_map_url(result, start, provider))
