"""Chunked, failure-isolated execution of per-item async updates."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Hashable, Optional, Sequence, TypeVar

from ...config import settings
from ...core.exceptions import BatchExecutionError
from ...models.domain import BatchOperationResult, FailedItem, UpdateOutcome
from ..notifications import FeedbackEvent, Notifier, default_notifier

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)

Processor = Callable[[T], Awaitable[UpdateOutcome]]
ProgressListener = Callable[[float, Optional[str]], None]


def chunk_ids(ids: Sequence[T], size: int) -> list[list[T]]:
    """Split ids into consecutive chunks of at most ``size`` items."""
    if size < 1:
        raise ValueError("Chunk size must be at least 1.")
    return [list(ids[start : start + size]) for start in range(0, len(ids), size)]


class BatchOperationExecutor:
    """Apply an update to many records, a bounded chunk at a time.

    Items inside a chunk run concurrently; chunks run strictly in order with a
    short pause between them. A failure on one item is recorded in the result
    and never stops its siblings. Progress (0-100) and the current operation
    label are observable while a batch runs and reset once it ends.
    """

    def __init__(
        self,
        *,
        max_concurrent: int | None = None,
        inter_batch_delay_ms: int | None = None,
        notifier: Notifier | None = None,
        on_progress: ProgressListener | None = None,
    ) -> None:
        self.max_concurrent = max_concurrent or settings.max_concurrent_batch
        delay_ms = inter_batch_delay_ms if inter_batch_delay_ms is not None else settings.inter_batch_delay_ms
        self.inter_batch_delay = delay_ms / 1000.0
        self.notifier = notifier or default_notifier(settings.feedback_enabled)
        self.on_progress = on_progress

        self.is_processing = False
        self.progress = 0.0
        self.current_operation: str | None = None
        self.last_result: BatchOperationResult | None = None
        self.error: str | None = None

    def clear_result(self) -> None:
        self.last_result = None
        self.error = None

    def begin(self, operation_name: str) -> None:
        self.is_processing = True
        self.progress = 0.0
        self.current_operation = operation_name
        self.error = None
        self._report_progress()

    def finish(self) -> None:
        self.is_processing = False
        self.current_operation = None
        self.progress = 0.0
        self._report_progress()

    def _report_progress(self) -> None:
        if self.on_progress is not None:
            self.on_progress(self.progress, self.current_operation)

    async def run(
        self,
        target_ids: Sequence[T],
        processor: Processor,
        operation_name: str,
    ) -> BatchOperationResult:
        target_ids = list(target_ids)
        total = len(target_ids)
        outcomes: dict[int, FailedItem | None] = {}
        processed = 0

        async def settle(index: int, item_id: T) -> None:
            nonlocal processed
            try:
                outcome = await processor(item_id)
                if outcome.success:
                    outcomes[index] = None
                else:
                    outcomes[index] = FailedItem(id=item_id, error=outcome.error or "Unknown error")
            except Exception as exc:
                logger.debug(f"{operation_name}: item {item_id!r} failed: {exc}")
                outcomes[index] = FailedItem(id=item_id, error=str(exc) or "Processing failed")
            processed += 1
            self.progress = processed / total * 100
            self._report_progress()

        self.begin(operation_name)
        try:
            chunks = chunk_ids(list(enumerate(target_ids)), self.max_concurrent)
            logger.info(f"{operation_name}: {total} item(s) in {len(chunks)} chunk(s) of up to {self.max_concurrent}")
            for chunk_index, chunk in enumerate(chunks):
                await asyncio.gather(*(settle(index, item_id) for index, item_id in chunk))
                if chunk_index < len(chunks) - 1 and self.inter_batch_delay > 0:
                    await asyncio.sleep(self.inter_batch_delay)

            result = BatchOperationResult(total_processed=processed)
            for index, item_id in enumerate(target_ids):
                failure = outcomes[index]
                if failure is None:
                    result.successful.append(item_id)
                else:
                    result.failed.append(failure)

            self.last_result = result
            self._notify_outcome(result)
            logger.info(
                f"{operation_name}: {len(result.successful)} succeeded, {len(result.failed)} failed"
            )
            return result
        except Exception as exc:
            message = str(exc) or "Batch operation failed"
            logger.exception(f"{operation_name} aborted: {message}")
            self.error = message
            self.notifier.notify(FeedbackEvent.ERROR)
            raise BatchExecutionError(message, details={"operation": operation_name}) from exc
        finally:
            self.finish()

    def _notify_outcome(self, result: BatchOperationResult) -> None:
        if not result.failed:
            self.notifier.notify(FeedbackEvent.SUCCESS)
        elif result.successful:
            self.notifier.notify(FeedbackEvent.PARTIAL)
        else:
            self.notifier.notify(FeedbackEvent.ERROR)
