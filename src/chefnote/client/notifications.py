"""Ephemeral status messages."""

import asyncio
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol


class Severity(Enum):
    """Notification severity."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A visible status message."""

    id: int
    message: str
    severity: Severity


class TimerHandle(Protocol):
    """Handle returned by a scheduler."""

    def cancel(self) -> None:
        """Cancel the pending callback."""


class Scheduler(Protocol):
    """Anything that can run a callback later (e.g. an asyncio loop)."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule a callback after ``delay`` seconds."""


def _running_loop() -> Scheduler:
    return asyncio.get_running_loop()


@dataclass
class NotificationChannel:
    """Shows at most one notification and auto-dismisses it.

    Posting replaces the current notification immediately; there is no queue.
    Dismissal is idempotent, and a timer belonging to a replaced notification
    does nothing when it fires.
    """

    duration: float = 3.0
    scheduler_factory: Callable[[], Scheduler] = field(default=_running_loop)
    current: Notification | None = None
    _timer: TimerHandle | None = None
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def post(self, message: str, severity: Severity = Severity.SUCCESS) -> Notification:
        """Show a notification, replacing any visible one."""
        self._cancel_timer()
        notification = Notification(next(self._ids), message, severity)
        self.current = notification
        self._timer = self.scheduler_factory().call_later(
            self.duration, lambda: self.dismiss(notification.id)
        )
        return notification

    def success(self, message: str) -> Notification:
        return self.post(message, Severity.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.post(message, Severity.ERROR)

    def dismiss(self, notification_id: int | None = None) -> None:
        """Hide the current notification.

        With an id, only that notification is dismissed; anything else no-ops.
        """
        if self.current is None:
            return
        if notification_id is not None and self.current.id != notification_id:
            return
        self.current = None
        self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
