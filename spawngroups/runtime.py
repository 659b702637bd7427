"""Engine shared by the spawn groups: runs tasks and streams their results."""

from __future__ import annotations

import threading
import traceback
from collections.abc import Awaitable
from typing import Any, Generic, TypeVar

from .async_stream import AsyncStream
from .executor import Executor, _require_awaitable
from .priority import Priority

T = TypeVar("T")


class RuntimeEngine(Generic[T]):
    """Spawns awaitables on an executor and feeds their results into a stream."""

    def __init__(self, num_threads: int | None = None) -> None:
        self._executor = Executor(num_threads)
        self._stream: AsyncStream[T] = AsyncStream()
        self._tasks: list[tuple[Priority, Any]] = []
        self._lock = threading.Lock()

    def stream(self) -> AsyncStream[T]:
        """The stream that receives the results of finished tasks."""
        return self._stream

    def _abandon(self) -> None:
        """Account for a task that will never deliver a result."""
        self._stream.decrement_count()
        self._stream.decrement_task_count()

    def _forget_tasks(self) -> None:
        with self._lock:
            self._tasks.clear()

    async def _run(self, coro: Awaitable[T]) -> None:
        try:
            value = await coro
        except Exception:
            traceback.print_exc()
            self._abandon()
            return
        self._stream.insert_item(value)
        self._stream.decrement_task_count()

    def write_task(self, priority: Priority, coro: Awaitable[T]) -> None:
        """Start running ``coro``; its result is appended to the stream."""
        _require_awaitable(coro)
        priority = Priority(priority)
        self._stream.increment()
        try:
            handle = self._executor.spawn(self._run(coro))
        except BaseException:
            self._abandon()
            raise
        with self._lock:
            self._tasks.append((priority, handle))

    def cancel(self) -> None:
        """Cancel every running task and mark the stream cancelled."""
        self._executor.cancel()
        self._forget_tasks()
        self._stream.cancel_tasks()

    def end(self) -> None:
        """Cancel every running task and release the worker threads."""
        self._executor.close()
        self._forget_tasks()

    def wait_for_all_tasks(self) -> None:
        """Block until every spawned task has finished, highest priority first."""
        with self._lock:
            tasks = sorted(self._tasks, key=lambda entry: entry[0], reverse=True)
            self._tasks.clear()
        for _, handle in tasks:
            handle.wait()
        self._executor.wait_for_all()