"""Core primitives shared across services."""

from .exceptions import (
    BatchExecutionError,
    ExportError,
    FieldOpsError,
    ItemError,
    NoWorkOrdersFoundError,
    PreconditionError,
    RouteOptimizationError,
    RouteValidationError,
)

__all__ = [
    "FieldOpsError",
    "PreconditionError",
    "ItemError",
    "BatchExecutionError",
    "ExportError",
    "NoWorkOrdersFoundError",
    "RouteValidationError",
    "RouteOptimizationError",
]
