"""A fixed-size pool of worker threads fed from a shared FIFO queue."""

from __future__ import annotations

import os
import queue
import sys
import threading
import traceback
from typing import Callable

_WAIT = object()
_STOP = object()


class ThreadPool:
    """Runs submitted callables on a fixed number of worker threads.

    Work is taken in submission order. ``wait_for_all`` blocks until every
    callable submitted before it has finished.
    """

    def __init__(self, num_threads: int | None = None) -> None:
        if num_threads is None:
            num_threads = os.cpu_count() or 1
        if num_threads < 1:
            raise ValueError("a thread pool needs at least one thread")
        self._count = num_threads
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._barrier = threading.Barrier(num_threads + 1)
        self._stopped = threading.Event()
        self._wait_lock = threading.Lock()
        self._threads = [
            threading.Thread(target=self._work, name=f"ThreadPool #{index}", daemon=True)
            for index in range(num_threads)
        ]
        for thread in self._threads:
            thread.start()

    @property
    def num_threads(self) -> int:
        """Number of worker threads."""
        return self._count

    def _work(self) -> None:
        while True:
            operation = self._queue.get()
            if operation is _STOP or self._stopped.is_set():
                return
            if operation is _WAIT:
                try:
                    self._barrier.wait()
                except threading.BrokenBarrierError:
                    return
                continue
            try:
                operation()
            except Exception:
                sys.stderr.write(f"{threading.current_thread().name} raised:\n")
                traceback.print_exc()

    def submit(self, task: Callable[[], object]) -> None:
        """Queue ``task`` to run on a worker thread."""
        if not callable(task):
            raise TypeError("task must be callable")
        if self._stopped.is_set():
            raise RuntimeError("thread pool is closed")
        self._queue.put(task)

    def wait_for_all(self) -> None:
        """Block until all work submitted so far has run."""
        if self._stopped.is_set():
            raise RuntimeError("thread pool is closed")
        if threading.current_thread() in self._threads:
            raise RuntimeError("cannot wait for the pool from one of its own threads")
        with self._wait_lock:
            for _ in range(self._count):
                self._queue.put(_WAIT)
            try:
                self._barrier.wait()
            except threading.BrokenBarrierError:
                raise RuntimeError("thread pool was closed while waiting") from None

    def close(self) -> None:
        """Stop the workers; work not yet started is discarded."""
        if self._stopped.is_set():
            return
        self._stopped.set()
        self._barrier.abort()
        for _ in range(self._count):
            self._queue.put(_STOP)
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()