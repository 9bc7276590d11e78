"""Proximity sort schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .routing import CoordinateModel, WorkOrderModel


class ProximitySortRequest(BaseModel):
    origin: CoordinateModel
    work_orders: List[WorkOrderModel]
    max_results: int = Field(default=1000, ge=1)
    radius_km: Optional[float] = Field(default=None, gt=0, description="Only keep work orders within this radius.")


class ScoredWorkOrderModel(BaseModel):
    work_order_id: str
    priority: str
    distance_km: Optional[float] = None
    formatted_distance: Optional[str] = None
    proximity_score: Optional[float] = None


class ProximitySortResponse(BaseModel):
    origin: CoordinateModel
    results: List[ScoredWorkOrderModel]
