"""Bulk work order operations built on the batch executor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Hashable, Literal, Sequence

from ...core.exceptions import ExportError, NoWorkOrdersFoundError, PreconditionError
from ...models.domain import BatchOperationResult, UpdateOutcome
from ...persistence.filesystem import ExportSink
from ...persistence.work_orders import WorkOrderStore
from ..notifications import FeedbackEvent
from ..outputs.work_order_formatter import EXPORT_SELECT, work_orders_to_csv
from .executor import BatchOperationExecutor

logger = logging.getLogger(__name__)

OperationType = Literal["status", "assignment", "priority", "export"]


@dataclass(slots=True)
class ExportResult:
    filename: str
    row_count: int
    content: str
    location: Path | None = None


@dataclass(slots=True)
class BatchValidation:
    is_valid: bool
    selected_count: int
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def validate_batch_operation(work_order_ids: Sequence[Hashable], operation_type: OperationType) -> BatchValidation:
    """Pre-flight checks shown to the operator before a batch starts."""
    count = len(work_order_ids)
    errors: list[str] = []
    warnings: list[str] = []

    if count == 0:
        errors.append("No work orders selected for batch operation")
    if count > 50:
        warnings.append("Large batch operations may take longer to complete")

    if operation_type == "status" and count > 20:
        warnings.append("Status updates for many work orders may affect system performance")
    elif operation_type == "assignment" and count > 10:
        warnings.append("Assigning many work orders to one technician may create workload imbalance")
    elif operation_type == "export" and count > 100:
        warnings.append("Large exports may take several minutes to complete")

    return BatchValidation(is_valid=not errors, selected_count=count, errors=errors, warnings=warnings)


def export_filename(today: datetime | None = None) -> str:
    moment = today or datetime.now(timezone.utc)
    return f"work-orders-{moment.date().isoformat()}.csv"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class WorkOrderBatchService:
    """Status, assignment, priority and export operations over selected work orders."""

    def __init__(
        self,
        store: WorkOrderStore,
        executor: BatchOperationExecutor | None = None,
        export_sink: ExportSink | None = None,
    ) -> None:
        self.store = store
        self.executor = executor or BatchOperationExecutor()
        self.export_sink = export_sink

    def _updater(self, fields: dict):
        async def process(work_order_id: Hashable) -> UpdateOutcome:
            return await self.store.update_by_id(work_order_id, {**fields, "updated_at": _timestamp()})

        return process

    async def update_status(self, work_order_ids: Sequence[Hashable], status: str) -> BatchOperationResult:
        if not status:
            raise PreconditionError("Status is required for batch update")
        return await self.executor.run(
            work_order_ids,
            self._updater({"status": status}),
            f"Updating status to {status}",
        )

    async def assign_technician(self, work_order_ids: Sequence[Hashable], technician_id: str) -> BatchOperationResult:
        if not technician_id:
            raise PreconditionError("Technician ID is required for batch assignment")
        return await self.executor.run(
            work_order_ids,
            self._updater({"assignedTechnicianId": technician_id}),
            "Assigning technician",
        )

    async def update_priority(self, work_order_ids: Sequence[Hashable], priority: str) -> BatchOperationResult:
        if not priority:
            raise PreconditionError("Priority is required for batch update")
        return await self.executor.run(
            work_order_ids,
            self._updater({"priority": priority}),
            f"Updating priority to {priority}",
        )

    async def export_work_orders(self, work_order_ids: Sequence[Hashable]) -> ExportResult:
        executor = self.executor
        executor.begin("Exporting work orders")
        try:
            try:
                records = await self.store.fetch_by_ids(list(work_order_ids), EXPORT_SELECT)
            except Exception as exc:
                raise ExportError(f"Failed to fetch work orders: {exc}") from exc

            if not records:
                raise NoWorkOrdersFoundError(
                    "No work orders found for export", details={"requested": len(work_order_ids)}
                )

            content = work_orders_to_csv(records)
            filename = export_filename()
            location = self.export_sink.save(content, filename) if self.export_sink is not None else None
            executor.notifier.notify(FeedbackEvent.SUCCESS)
            logger.info(f"Exported {len(records)} work order(s) to {filename}")
            return ExportResult(filename=filename, row_count=len(records), content=content, location=location)
        except Exception as exc:
            executor.error = str(exc) or "Export failed"
            executor.notifier.notify(FeedbackEvent.ERROR)
            raise
        finally:
            executor.finish()
