"""Structured concurrency: spawn, await and cancel groups of child tasks."""

__version__ = "2.0.0"
__all__ = [
    "async_stream",
    "discarding_spawn_group",
    "executor",
    "priority",
    "runtime",
    "spawn_group",
    "threadpool",
]