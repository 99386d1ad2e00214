"""Periodic force sign-out of expired admin sessions."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from pid_registration.domain.auth import AuthEvent, AuthEventType
from pid_registration.services.auth import AdminAuthService
from pid_registration.services.events import Subscription

_logger = logging.getLogger(__name__)


class ScheduledTask(Protocol):
    """Handle for a recurring callback."""

    def cancel(self) -> None:
        """Stop the recurring callback."""

    @property
    def cancelled(self) -> bool:
        """Return true once the task was cancelled."""


class Scheduler(Protocol):
    """Factory for recurring callbacks."""

    def schedule(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> ScheduledTask:
        """Run ``callback`` every ``interval_seconds`` until cancelled."""


@dataclass
class AsyncioScheduledTask(ScheduledTask):
    """Recurring callback backed by an asyncio task."""

    task: asyncio.Task

    def cancel(self) -> None:
        self.task.cancel()

    @property
    def cancelled(self) -> bool:
        return self.task.cancelled() or self.task.cancelling() > 0


class AsyncioScheduler(Scheduler):
    """Schedules callbacks on the running event loop."""

    def schedule(
        self, interval_seconds: float, callback: Callable[[], None]
    ) -> ScheduledTask:
        loop = asyncio.get_running_loop()
        task = loop.create_task(_run_periodically(interval_seconds, callback))
        return AsyncioScheduledTask(task)


async def _run_periodically(
    interval_seconds: float, callback: Callable[[], None]
) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            callback()
        except Exception:
            _logger.exception("Scheduled callback failed")


@dataclass
class SessionExpiryWatcher:
    """Checks admin sessions on an interval while any admin is signed in."""

    auth_service: AdminAuthService
    scheduler: Scheduler
    interval_seconds: float = 60
    _task: ScheduledTask | None = field(default=None, repr=False)
    _subscription: Subscription | None = field(default=None, repr=False)

    @property
    def running(self) -> bool:
        return self._task is not None

    def attach(self) -> None:
        """Follow auth events; start checking if sessions already exist."""
        if self._subscription is None:
            self._subscription = self.auth_service.events.subscribe(self._on_event)
        if len(self.auth_service.sessions):
            self._start()

    def close(self) -> None:
        """Unsubscribe and cancel the recurring check."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._stop()

    def check(self) -> list[str]:
        """Force sign-out of every session past its lifetime."""
        return self.auth_service.expire_due_sessions()

    def _on_event(self, event: AuthEvent) -> None:
        if event.type is AuthEventType.SIGNED_IN:
            self._start()
        elif not len(self.auth_service.sessions):
            self._stop()

    def _start(self) -> None:
        if self._task is None:
            self._task = self.scheduler.schedule(self.interval_seconds, self.check)

    def _stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
