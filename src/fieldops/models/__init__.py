"""Domain models."""

from .domain import (
    BatchOperationResult,
    Coordinate,
    FailedItem,
    Priority,
    UpdateOutcome,
    WorkOrder,
)

__all__ = [
    "BatchOperationResult",
    "Coordinate",
    "FailedItem",
    "Priority",
    "UpdateOutcome",
    "WorkOrder",
]
