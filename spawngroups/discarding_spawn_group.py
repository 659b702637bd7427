"""A spawn group whose child tasks produce nothing of interest."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any

from .priority import Priority
from .runtime import RuntimeEngine


class DiscardingSpawnGroup:
    """Runs child tasks concurrently and discards whatever they return.

    Closing the group (or leaving its ``async with`` block) waits for the
    remaining tasks unless ``dont_wait_at_drop`` was called, in which case
    they are cancelled.
    """

    def __init__(self, num_threads: int | None = None, wait_at_drop: bool = True) -> None:
        self.is_cancelled = False
        self._wait_at_drop = wait_at_drop
        self._runtime: RuntimeEngine[Any] = RuntimeEngine(num_threads)
        self._closed = False

    def dont_wait_at_drop(self) -> None:
        """Cancel rather than wait for running tasks when the group closes."""
        self._wait_at_drop = False

    def spawn_task(self, priority: Priority, coro: Awaitable[Any]) -> None:
        """Start ``coro`` as a child task of the group."""
        self._runtime.write_task(priority, coro)

    def spawn_task_unless_cancelled(self, priority: Priority, coro: Awaitable[Any]) -> None:
        """Start ``coro`` only if the group has not been cancelled."""
        if not self.is_cancelled:
            self.spawn_task(priority, coro)
        else:
            close = getattr(coro, "close", None)
            if callable(close):
                close()

    def cancel_all(self) -> None:
        """Cancel every running child task."""
        self._runtime.cancel()
        self.is_cancelled = True

    def is_empty(self) -> bool:
        """Whether no child task is still running."""
        return self._runtime.stream().task_count() == 0

    def close(self) -> None:
        """Wait for or cancel the remaining tasks, then release the threads."""
        if self._closed:
            return
        self._closed = True
        if self._wait_at_drop:
            self._runtime.wait_for_all_tasks()
        self._runtime.end()

    async def __aenter__(self) -> DiscardingSpawnGroup:
        return self

    async def __aexit__(self, *args: object) -> None:
        self.close()