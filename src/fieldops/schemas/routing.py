"""Route planning request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import Coordinate, Priority, WorkOrder


class CoordinateModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_domain(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)


class WorkOrderModel(BaseModel):
    id: str
    priority: str = "medium"
    work_order_number: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    def to_domain(self) -> WorkOrder:
        coordinate = None
        if self.latitude is not None and self.longitude is not None:
            coordinate = Coordinate(lat=self.latitude, lng=self.longitude)
        return WorkOrder(
            id=self.id,
            priority=Priority.parse(self.priority),
            coordinate=coordinate,
            work_order_number=self.work_order_number,
            address=self.address,
            raw=self.model_dump(),
        )


class RoutePlanRequest(BaseModel):
    start: CoordinateModel
    work_orders: List[WorkOrderModel]
    persist: bool = False
    run_label: Optional[str] = Field(default=None, description="Friendly name for persisted outputs.")


class RouteStopModel(BaseModel):
    work_order_id: str
    sequence: int
    priority: str
    distance_from_prev_km: float
    estimated_minutes: int


class RouteStatsModel(BaseModel):
    total_distance_km: float
    estimated_travel_minutes: int
    total_stops: int
    average_distance_between_stops_km: float
    formatted_distance: str
    formatted_time: str


class RoutePlanResponse(BaseModel):
    stops: List[RouteStopModel]
    distances: List[float]
    total_distance_km: float
    estimated_minutes: int
    stats: RouteStatsModel
    summary: str
    excluded_ids: List[str]
    warnings: List[str]
    output_dir: Optional[str] = None


class MapUrlRequest(RoutePlanRequest):
    provider: Optional[Literal["google", "apple"]] = None
    user_agent: Optional[str] = None


class MapUrlResponse(BaseModel):
    provider: Literal["google", "apple"]
    url: str
