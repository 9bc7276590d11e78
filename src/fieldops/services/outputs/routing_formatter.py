"""Serializers for routing outputs."""

from __future__ import annotations

import csv
import io

from ..routing.models import RouteResult, RouteStats


def route_result_to_json(result: RouteResult, stats: RouteStats, summary: str) -> dict:
    return {
        "summary": summary,
        "total_distance_km": result.total_distance_km,
        "estimated_minutes": result.estimated_minutes,
        "total_stops": stats.total_stops,
        "average_distance_between_stops_km": stats.average_distance_between_stops_km,
        "stops": [
            {
                "sequence": sequence,
                "work_order_id": segment.work_order.id,
                "priority": segment.work_order.priority.value,
                "lat": segment.to_coordinate.lat,
                "lng": segment.to_coordinate.lng,
                "distance_from_prev_km": segment.distance_km,
                "estimated_minutes": segment.estimated_minutes,
            }
            for sequence, segment in enumerate(result.segments, start=1)
        ],
    }


def route_result_to_csv(result: RouteResult) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "work_order_id",
        "work_order_number",
        "priority",
        "lat",
        "lng",
        "distance_from_prev_km",
        "estimated_minutes",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames, lineterminator="\n")
    writer.writeheader()
    for sequence, segment in enumerate(result.segments, start=1):
        order = segment.work_order
        writer.writerow(
            {
                "sequence": sequence,
                "work_order_id": order.id,
                "work_order_number": order.work_order_number or "",
                "priority": order.priority.value,
                "lat": segment.to_coordinate.lat,
                "lng": segment.to_coordinate.lng,
                "distance_from_prev_km": segment.distance_km,
                "estimated_minutes": segment.estimated_minutes,
            }
        )
    return buffer.getvalue()
