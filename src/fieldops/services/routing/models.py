"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ...models.domain import Coordinate, WorkOrder


@dataclass(slots=True)
class RouteSegment:
    from_coordinate: Coordinate
    to_coordinate: Coordinate
    distance_km: float
    estimated_minutes: int
    work_order: WorkOrder


@dataclass(slots=True)
class RouteResult:
    ordered: List[WorkOrder] = field(default_factory=list)
    segments: List[RouteSegment] = field(default_factory=list)
    total_distance_km: float = 0.0
    estimated_minutes: int = 0

    @property
    def distances(self) -> List[float]:
        return [segment.distance_km for segment in self.segments]


@dataclass(slots=True)
class RouteStats:
    total_distance_km: float
    estimated_travel_minutes: int
    total_stops: int
    average_distance_between_stops_km: float
    formatted_distance: str
    formatted_time: str


@dataclass(slots=True)
class RoutingValidation:
    valid: List[WorkOrder]
    invalid: List[WorkOrder]

    @property
    def has_valid_orders(self) -> bool:
        return bool(self.valid)
