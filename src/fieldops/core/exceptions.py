"""Exception hierarchy for batch operations and route planning."""

from __future__ import annotations


class FieldOpsError(Exception):
    """Base class for errors raised by the field operations core."""

    def __init__(self, message: str, *, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

    def as_dict(self) -> dict:
        """Return a serializable representation."""
        payload = {"message": str(self)}
        if self.details:
            payload["details"] = self.details
        return payload


class PreconditionError(FieldOpsError, ValueError):
    """A required batch parameter is missing; raised before any item is touched."""


class ItemError(FieldOpsError):
    """A single work order could not be updated.

    Processors may raise this to report a failure with a readable message. The
    executor always records it against the item and carries on with the rest.
    """


class BatchExecutionError(FieldOpsError, RuntimeError):
    """An unexpected error escaped per-item isolation inside the executor."""


class ExportError(FieldOpsError, RuntimeError):
    """Work orders could not be fetched or none matched the export request."""


class RouteValidationError(FieldOpsError, ValueError):
    """Nothing in the request can be placed on a route."""


class RouteOptimizationError(FieldOpsError, RuntimeError):
    """Route computation failed for a reason other than missing location data."""


class NoWorkOrdersFoundError(ExportError):
    """None of the requested work orders exist in the record store."""
