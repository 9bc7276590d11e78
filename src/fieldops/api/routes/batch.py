"""Bulk work order endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...core.exceptions import NoWorkOrdersFoundError, PreconditionError
from ...persistence.filesystem import FileStorage
from ...persistence.work_orders import get_work_order_store
from ...schemas.batch import (
    BatchOperationResponse,
    BatchTargets,
    BatchValidationRequest,
    BatchValidationResponse,
    ExportResponse,
    PriorityUpdateRequest,
    StatusUpdateRequest,
    TechnicianAssignmentRequest,
)
from ...services.batch.operations import WorkOrderBatchService, validate_batch_operation

router = APIRouter(prefix="/work-orders/batch", tags=["batch"])

logger = logging.getLogger(__name__)


async def _service() -> WorkOrderBatchService:
    try:
        store = await get_work_order_store()
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return WorkOrderBatchService(store, export_sink=FileStorage())


def _failure(action: str, exc: Exception) -> HTTPException:
    logger.exception(f"Error {action}: {exc}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed {action}: {str(exc)}",
    )


@router.post("/validate", response_model=BatchValidationResponse, status_code=status.HTTP_200_OK)
def validate(payload: BatchValidationRequest) -> BatchValidationResponse:
    validation = validate_batch_operation(payload.work_order_ids, payload.operation_type)
    return BatchValidationResponse(
        is_valid=validation.is_valid,
        selected_count=validation.selected_count,
        errors=validation.errors,
        warnings=validation.warnings,
    )


@router.post("/status", response_model=BatchOperationResponse, status_code=status.HTTP_200_OK)
async def update_status(payload: StatusUpdateRequest) -> BatchOperationResponse:
    service = await _service()
    try:
        result = await service.update_status(payload.work_order_ids, payload.status)
    except PreconditionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        raise _failure("updating work order status", exc) from exc
    return BatchOperationResponse.from_result("status", result)


@router.post("/assign", response_model=BatchOperationResponse, status_code=status.HTTP_200_OK)
async def assign_technician(payload: TechnicianAssignmentRequest) -> BatchOperationResponse:
    service = await _service()
    try:
        result = await service.assign_technician(payload.work_order_ids, payload.technician_id)
    except PreconditionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        raise _failure("assigning technician", exc) from exc
    return BatchOperationResponse.from_result("assignment", result)


@router.post("/priority", response_model=BatchOperationResponse, status_code=status.HTTP_200_OK)
async def update_priority(payload: PriorityUpdateRequest) -> BatchOperationResponse:
    service = await _service()
    try:
        result = await service.update_priority(payload.work_order_ids, payload.priority)
    except PreconditionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        raise _failure("updating work order priority", exc) from exc
    return BatchOperationResponse.from_result("priority", result)


@router.post("/export", response_model=ExportResponse, status_code=status.HTTP_200_OK)
async def export(payload: BatchTargets) -> ExportResponse:
    service = await _service()
    try:
        exported = await service.export_work_orders(payload.work_order_ids)
    except NoWorkOrdersFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except Exception as exc:
        raise _failure("exporting work orders", exc) from exc
    return ExportResponse(
        filename=exported.filename,
        row_count=exported.row_count,
        path=str(exported.location) if exported.location else None,
    )
