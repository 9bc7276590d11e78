"""Batch operation request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import BatchOperationResult


class BatchTargets(BaseModel):
    work_order_ids: List[str] = Field(default_factory=list)


class StatusUpdateRequest(BatchTargets):
    status: str = ""


class TechnicianAssignmentRequest(BatchTargets):
    technician_id: str = ""


class PriorityUpdateRequest(BatchTargets):
    priority: str = ""


class BatchValidationRequest(BatchTargets):
    operation_type: Literal["status", "assignment", "priority", "export"]


class BatchValidationResponse(BaseModel):
    is_valid: bool
    selected_count: int
    errors: List[str]
    warnings: List[str]


class FailedItemModel(BaseModel):
    id: str
    error: str


class BatchOperationResponse(BaseModel):
    operation: str
    successful: List[str]
    failed: List[FailedItemModel]
    total_processed: int
    outcome: Literal["success", "partial", "error"]

    @classmethod
    def from_result(cls, operation: str, result: BatchOperationResult) -> "BatchOperationResponse":
        if not result.failed:
            outcome = "success"
        elif result.successful:
            outcome = "partial"
        else:
            outcome = "error"
        return cls(
            operation=operation,
            successful=[str(item) for item in result.successful],
            failed=[FailedItemModel(id=str(item.id), error=item.error) for item in result.failed],
            total_processed=result.total_processed,
            outcome=outcome,
        )


class ExportResponse(BaseModel):
    filename: str
    row_count: int
    path: Optional[str] = None
