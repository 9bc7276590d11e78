"""Feedback events emitted to the operator."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class FeedbackEvent(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    ERROR = "error"
    SELECTION_CHANGED = "selection_changed"


class Notifier(Protocol):
    def notify(self, event: FeedbackEvent) -> None:
        ...


class LoggingNotifier:
    """Deliver feedback events to the application log."""

    def notify(self, event: FeedbackEvent) -> None:
        if event is FeedbackEvent.ERROR:
            logger.warning(f"Feedback: {event.value}")
        else:
            logger.info(f"Feedback: {event.value}")


class NullNotifier:
    def notify(self, event: FeedbackEvent) -> None:
        return None


def default_notifier(enabled: bool = True) -> Notifier:
    return LoggingNotifier() if enabled else NullNotifier()
