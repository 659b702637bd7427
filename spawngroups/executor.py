"""A small coroutine executor that polls tasks on a thread pool.

Awaitables driven here may only suspend with bare yields, which is what
``sleep`` and ``yield_now`` do; they behave the same under asyncio.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Awaitable, Generator
from concurrent.futures import CancelledError
from datetime import timedelta
from functools import partial
from typing import Any

from .threadpool import ThreadPool


def _require_awaitable(obj: Any) -> None:
    """Raise TypeError unless ``obj`` can be awaited."""
    if not isinstance(obj, Awaitable):
        raise TypeError(f"{type(obj).__name__!r} object is not awaitable")


def _steps_of(awaitable: Any) -> Generator[Any, None, Any]:
    _require_awaitable(awaitable)
    return awaitable.__await__()


def _advance(steps: Generator[Any, None, Any]) -> tuple[bool, Any]:
    """Run one step; return (finished, value)."""
    try:
        yielded = steps.send(None)
    except StopIteration as stop:
        return True, stop.value
    if yielded is not None:
        steps.close()
        raise RuntimeError(
            f"awaitable yielded {yielded!r}; only sleep, yield_now and bare yields "
            "can suspend a task here"
        )
    return False, None


class _Task:
    """A spawned awaitable, polled one step at a time."""

    def __init__(self, awaitable: Any) -> None:
        self._steps = _steps_of(awaitable)
        self._lock = threading.Lock()
        self._finished = threading.Event()
        self._cancelled = False
        self._result: Any = None
        self._exception: BaseException | None = None

    def poll(self) -> bool:
        """Advance the task once; return True when it needs no more polling."""
        with self._lock:
            if self._finished.is_set() and not self._cancelled:
                return True
            if self._cancelled:
                self._steps.close()
                return True
            try:
                done, value = _advance(self._steps)
            except Exception as exc:
                self._exception = exc
                done = True
            else:
                if done:
                    self._result = value
            if self._cancelled:
                self._steps.close()
                return True
            if done:
                self._finished.set()
            return done

    def cancel(self) -> None:
        """Stop polling the task."""
        if not self._finished.is_set():
            self._cancelled = True
            self._finished.set()

    def cancelled(self) -> bool:
        return self._cancelled

    def done(self) -> bool:
        return self._finished.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the task finishes or is cancelled."""
        return self._finished.wait(timeout)

    def result(self, timeout: float | None = None) -> Any:
        """Return the task's value, raising what it raised."""
        if not self._finished.wait(timeout):
            raise TimeoutError("task did not finish in time")
        if self._cancelled:
            raise CancelledError()
        if self._exception is not None:
            raise self._exception
        return self._result


class Executor:
    """Polls spawned awaitables on a pool of worker threads."""

    def __init__(self, num_threads: int | None = None) -> None:
        self._pool = ThreadPool(num_threads)
        self._active: set[_Task] = set()
        self._changed = threading.Condition()
        self._closed = False

    def spawn(self, coro: Any) -> _Task:
        """Start polling ``coro`` and return its task handle."""
        task = _Task(coro)
        with self._changed:
            if self._closed:
                task.cancel()
                task.poll()
                raise RuntimeError("executor is closed")
            self._active.add(task)
        self._pool.submit(partial(self._drive, task))
        return task

    def _drive(self, task: _Task) -> None:
        if task.poll():
            with self._changed:
                self._active.discard(task)
                self._changed.notify_all()
            return
        try:
            self._pool.submit(partial(self._drive, task))
        except RuntimeError:
            task.cancel()
            task.poll()

    def cancel(self) -> None:
        """Cancel every running task; new tasks may still be spawned."""
        with self._changed:
            tasks = list(self._active)
            self._active.clear()
            self._changed.notify_all()
        for task in tasks:
            task.cancel()

    def wait_for_all(self) -> None:
        """Block until every spawned task has finished or been cancelled."""
        with self._changed:
            self._changed.wait_for(lambda: not self._active)

    def close(self) -> None:
        """Cancel all tasks and stop the worker threads."""
        with self._changed:
            if self._closed:
                return
            self._closed = True
        self.cancel()
        self._pool.close()


def block_on(awaitable: Any) -> Any:
    """Drive ``awaitable`` to completion on the calling thread and return its value."""
    steps = _steps_of(awaitable)
    while True:
        done, value = _advance(steps)
        if done:
            return value
        time.sleep(0)


class _Pause:
    """Suspends at least ``yields`` times and until ``seconds`` have passed."""

    def __init__(self, seconds: float = 0.0, yields: int = 0) -> None:
        self._deadline = time.monotonic() + seconds
        self._yields = yields

    def __await__(self) -> Generator[None, None, None]:
        remaining = self._yields
        while remaining > 0 or time.monotonic() < self._deadline:
            remaining -= 1
            yield


def sleep(duration: float | timedelta) -> _Pause:
    """Return an awaitable that finishes no sooner than ``duration`` from now.

    ``duration`` is in seconds or a ``timedelta``.
    """
    seconds = duration.total_seconds() if isinstance(duration, timedelta) else float(duration)
    if seconds < 0:
        raise ValueError("sleep duration must not be negative")
    return _Pause(seconds=seconds)


def yield_now() -> _Pause:
    """Return an awaitable that suspends the current task exactly once."""
    return _Pause(yields=1)