"""Batch operations over selected work orders."""

from .executor import BatchOperationExecutor, chunk_ids
from .operations import (
    BatchValidation,
    ExportResult,
    WorkOrderBatchService,
    export_filename,
    validate_batch_operation,
)

__all__ = [
    "BatchOperationExecutor",
    "BatchValidation",
    "ExportResult",
    "WorkOrderBatchService",
    "chunk_ids",
    "export_filename",
    "validate_batch_operation",
]
