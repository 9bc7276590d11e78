"""Proximity sorting endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request, status

from ...schemas.proximity import ProximitySortRequest, ProximitySortResponse, ScoredWorkOrderModel
from ...services.geospatial import filter_by_radius, format_distance
from ...services.proximity import ProximitySorter

router = APIRouter(prefix="/work-orders", tags=["proximity"])


@router.post("/proximity", response_model=ProximitySortResponse, status_code=status.HTTP_200_OK)
async def sort_by_proximity(payload: ProximitySortRequest, request: Request) -> ProximitySortResponse:
    sorter: ProximitySorter = request.app.state.proximity_sorter
    origin = payload.origin.to_domain()
    work_orders = [item.to_domain() for item in payload.work_orders]
    if payload.radius_km is not None:
        work_orders = filter_by_radius(work_orders, origin, payload.radius_km)

    # radius-filtered lists can collide with unfiltered ones on (origin, count)
    scored = sorter.sort(work_orders, origin, max_results=payload.max_results, use_cache=payload.radius_km is None)
    return ProximitySortResponse(
        origin=payload.origin,
        results=[
            ScoredWorkOrderModel(
                work_order_id=item.work_order.id,
                priority=item.work_order.priority.value,
                distance_km=item.distance_km,
                formatted_distance=format_distance(item.distance_km) if item.distance_km is not None else None,
                proximity_score=item.proximity_score,
            )
            for item in scored
        ],
    )
