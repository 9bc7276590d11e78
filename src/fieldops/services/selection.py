"""Bounded multi-selection state for work order lists.

The manager is a plain state container: callers mutate it through the named
methods and read ``selected_ids``/``mode`` back. The only deferred behaviour is
the auto-exit grace timer, which is scheduled on the caller's event loop (or any
object exposing ``call_later(delay, callback)``).
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Generic, Hashable, Iterable, Optional, Protocol, TypeVar

from ..config import settings
from .notifications import FeedbackEvent, Notifier, default_notifier

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class SelectionMode(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"


class SelectionManager(Generic[T]):
    def __init__(
        self,
        *,
        max_selections: int | None = None,
        grace_ms: int | None = None,
        notifier: Notifier | None = None,
        scheduler: Scheduler | None = None,
        on_change: Optional[Callable[[tuple[T, ...]], None]] = None,
    ) -> None:
        self.max_selections = max_selections or settings.max_selections
        self.grace_seconds = (grace_ms if grace_ms is not None else settings.selection_grace_ms) / 1000.0
        self.notifier = notifier or default_notifier(settings.feedback_enabled)
        self.scheduler = scheduler
        self.on_change = on_change
        self._mode = SelectionMode.INACTIVE
        # dict keeps insertion order and gives O(1) membership
        self._selected: dict[T, None] = {}
        self._grace_timer: TimerHandle | None = None

    @property
    def mode(self) -> SelectionMode:
        return self._mode

    @property
    def is_active(self) -> bool:
        return self._mode is SelectionMode.ACTIVE

    @property
    def selected_ids(self) -> tuple[T, ...]:
        return tuple(self._selected)

    @property
    def selection_count(self) -> int:
        return len(self._selected)

    def is_selected(self, item: T) -> bool:
        return item in self._selected

    def enter_mode(self) -> None:
        if self.is_active:
            return
        self._mode = SelectionMode.ACTIVE
        self._selected.clear()
        self._changed()

    def exit_mode(self) -> None:
        self._cancel_grace_timer()
        was_active = self.is_active
        self._mode = SelectionMode.INACTIVE
        if self._selected or was_active:
            self._selected.clear()
            self._publish()

    def toggle(self, item: T) -> bool:
        """Add or remove ``item``; returns False when the selection is full."""
        if item in self._selected:
            del self._selected[item]
        elif len(self._selected) >= self.max_selections:
            logger.debug(f"Selection limit of {self.max_selections} reached, rejecting {item!r}")
            self.notifier.notify(FeedbackEvent.ERROR)
            return False
        else:
            self._selected[item] = None
        self.notifier.notify(FeedbackEvent.SELECTION_CHANGED)
        self._changed()
        return True

    def select_all(self, items: Iterable[T]) -> None:
        selected: dict[T, None] = {}
        for item in items:
            if len(selected) >= self.max_selections:
                break
            selected[item] = None
        self._selected = selected
        self.notifier.notify(FeedbackEvent.SELECTION_CHANGED)
        self._changed()

    def clear(self) -> None:
        self._selected.clear()
        self._changed()

    def _changed(self) -> None:
        if self._selected:
            self._cancel_grace_timer()
        elif self.is_active:
            self._arm_grace_timer()
        self._publish()

    def _publish(self) -> None:
        if self.on_change is not None:
            self.on_change(self.selected_ids)

    def _arm_grace_timer(self) -> None:
        self._cancel_grace_timer()
        scheduler = self.scheduler
        if scheduler is None:
            try:
                scheduler = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running event loop; selection auto-exit is not scheduled")
                return
        self._grace_timer = scheduler.call_later(self.grace_seconds, self._on_grace_expired)

    def _cancel_grace_timer(self) -> None:
        if self._grace_timer is not None:
            self._grace_timer.cancel()
            self._grace_timer = None

    def _on_grace_expired(self) -> None:
        self._grace_timer = None
        if self.is_active and not self._selected:
            logger.debug("Selection stayed empty through the grace period, leaving selection mode")
            self.exit_mode()
