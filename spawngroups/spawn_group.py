"""A spawn group whose child tasks each produce a value."""

from __future__ import annotations

import warnings
from collections.abc import Awaitable
from typing import Any, Generic, TypeVar

from .async_stream import AsyncStream
from .priority import Priority
from .runtime import RuntimeEngine

T = TypeVar("T")


def _discard(coro: Any) -> None:
    """Close a coroutine that will never be run."""
    close = getattr(coro, "close", None)
    if callable(close):
        close()


class SpawnGroup(Generic[T]):
    """Runs any number of child tasks concurrently and streams their values.

    Iterating the group asynchronously yields each finished task's value in
    the order the values arrived. Closing the group (or leaving its
    ``async with`` block) waits for the remaining tasks unless
    ``dont_wait_at_drop`` was called, in which case they are cancelled.
    """

    def __init__(self, num_threads: int | None = None, wait_at_drop: bool = True) -> None:
        self.is_cancelled = False
        self._wait_at_drop = wait_at_drop
        self._count = 0
        self._runtime: RuntimeEngine[T] = RuntimeEngine(num_threads)
        self._closed = False

    def dont_wait_at_drop(self) -> None:
        """Cancel rather than wait for running tasks when the group closes."""
        self._wait_at_drop = False

    def spawn_task(self, priority: Priority, coro: Awaitable[Any]) -> None:
        """Start ``coro`` as a child task of the group."""
        self._runtime.write_task(priority, coro)
        self._count += 1

    def spawn_task_unless_cancelled(self, priority: Priority, coro: Awaitable[Any]) -> None:
        """Start ``coro`` only if the group has not been cancelled."""
        if self.is_cancelled:
            _discard(coro)
        else:
            self.spawn_task(priority, coro)

    def cancel_all(self) -> None:
        """Cancel every running child task."""
        self._runtime.cancel()
        self.is_cancelled = True
        self._count = 0

    async def first(self) -> T | None:
        """Take the next result, or return None when there are no more."""
        return await self._runtime.stream().first()

    async def wait_for_all(self) -> None:
        """Wait until every remaining child task has finished."""
        self._runtime.wait_for_all_tasks()
        self._count = 0

    def is_empty(self) -> bool:
        """Whether no child task is still running."""
        return self._count == 0 or self._runtime.stream().task_count() == 0

    def stream(self) -> AsyncStream[T]:
        """The stream of finished tasks' results."""
        return self._runtime.stream()

    async def get_chunks(self, of_count: int) -> list[T]:
        """Take ``of_count`` results, waiting for them as needed.

        Raises ValueError when more results are asked for than tasks were
        spawned. Deprecated: its accounting is unreliable.
        """
        warnings.warn(
            "get_chunks is deprecated and unreliable", DeprecationWarning, stacklevel=2
        )
        if of_count <= 0:
            return []
        stream = self._runtime.stream()
        if stream.buffer_count() != of_count and of_count > self._count:
            raise ValueError(
                "the argument supplied cannot be greater than the number of spawned child tasks"
            )
        results: list[T] = []
        for _ in range(of_count):
            try:
                results.append(await stream.__anext__())
            except StopAsyncIteration:
                break
        return results

    def close(self) -> None:
        """Wait for or cancel the remaining tasks, then release the threads."""
        if self._closed:
            return
        self._closed = True
        if self._wait_at_drop:
            self._runtime.wait_for_all_tasks()
        self._runtime.end()

    def __aiter__(self) -> SpawnGroup[T]:
        return self

    async def __anext__(self) -> T:
        return await self._runtime.stream().__anext__()

    async def __aenter__(self) -> SpawnGroup[T]:
        return self

    async def __aexit__(self, *args: object) -> None:
        self.close()