"""A thread-safe FIFO of finished task results, consumed asynchronously."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Generic, TypeVar

from .executor import yield_now

T = TypeVar("T")

_PENDING = object()
_END = object()


class AsyncStream(Generic[T]):
    """Results of finished tasks, popped in first-in first-out order.

    The stream tracks how many items are still expected (``item_count``) and
    how many producing tasks are still running (``task_count``). Iteration
    ends once no more items are expected, or once the stream was cancelled
    and its buffer is empty.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._buffer: deque[T] = deque()
        self._item_count = 0
        self._task_count = 0
        self._cancelled = False

    def insert_item(self, value: T) -> None:
        """Append a finished result."""
        with self._lock:
            self._buffer.append(value)

    def increment(self) -> None:
        """Announce one more producing task and one more expected item."""
        with self._lock:
            self._item_count += 1
            self._task_count += 1

    def buffer_count(self) -> int:
        """Number of results waiting to be taken."""
        with self._lock:
            return len(self._buffer)

    def task_count(self) -> int:
        """Number of producing tasks still running."""
        with self._lock:
            return self._task_count

    def item_count(self) -> int:
        """Number of items still expected to be taken."""
        with self._lock:
            return self._item_count

    def decrement_task_count(self) -> None:
        """Record that a producing task has finished."""
        with self._lock:
            if self._task_count > 0:
                self._task_count -= 1

    def decrement_count(self) -> None:
        """Record that one expected item will not be taken."""
        with self._lock:
            if self._item_count > 0:
                self._item_count -= 1

    def cancel_tasks(self) -> None:
        """Mark the stream cancelled; it ends once its buffer runs dry."""
        with self._lock:
            self._cancelled = True
            self._task_count = 0

    @property
    def cancelled(self) -> bool:
        """Whether the stream has been cancelled."""
        with self._lock:
            return self._cancelled

    def _poll(self) -> Any:
        with self._lock:
            if (self._cancelled and not self._buffer) or self._item_count == 0:
                return _END
            if not self._buffer:
                return _PENDING
            value = self._buffer.popleft()
            self._item_count -= 1
            return value

    async def first(self) -> T | None:
        """Take the next result, or return None when the stream has ended."""
        try:
            return await self.__anext__()
        except StopAsyncIteration:
            return None

    def __aiter__(self) -> AsyncStream[T]:
        return self

    async def __anext__(self) -> T:
        while True:
            outcome = self._poll()
            if outcome is _END:
                raise StopAsyncIteration
            if outcome is not _PENDING:
                return outcome
            await yield_now()