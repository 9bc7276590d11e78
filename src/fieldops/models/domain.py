"""Domain models for work orders, coordinates and batch results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Hashable, Mapping, Optional

logger = logging.getLogger(__name__)


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: Any) -> "Priority":
        """Parse a priority label case-insensitively, defaulting to medium."""
        if isinstance(value, Priority):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.debug(f"Unknown priority {value!r}, treating as medium")
            return cls.MEDIUM


@dataclass(slots=True, frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(slots=True)
class WorkOrder:
    """A work order that can be scored by proximity or placed on a route."""

    id: str
    priority: Priority = Priority.MEDIUM
    coordinate: Optional[Coordinate] = None
    work_order_number: Optional[str] = None
    address: Optional[str] = None
    raw: dict = field(default_factory=dict)

    @property
    def has_location(self) -> bool:
        return self.coordinate is not None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "WorkOrder":
        """Build a work order from a record-store row.

        Coordinates are read from ``customerLat``/``customerLng`` and fall back to
        ``latitude``/``longitude``. A row missing either value has no coordinate.
        """
        lat = record.get("customerLat")
        if lat is None:
            lat = record.get("latitude")
        lng = record.get("customerLng")
        if lng is None:
            lng = record.get("longitude")
        coordinate = None
        if lat is not None and lng is not None:
            coordinate = Coordinate(lat=float(lat), lng=float(lng))
        return cls(
            id=str(record["id"]),
            priority=Priority.parse(record.get("priority")),
            coordinate=coordinate,
            work_order_number=record.get("workOrderNumber"),
            address=record.get("customerAddress"),
            raw=dict(record),
        )


@dataclass(slots=True)
class UpdateOutcome:
    """Result of a single record-store update."""

    success: bool
    error: Optional[str] = None


@dataclass(slots=True)
class FailedItem:
    id: Hashable
    error: str


@dataclass(slots=True)
class BatchOperationResult:
    successful: list = field(default_factory=list)
    failed: list[FailedItem] = field(default_factory=list)
    total_processed: int = 0

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    @property
    def none_succeeded(self) -> bool:
        return not self.successful and bool(self.failed)
