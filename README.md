# spawngroups

A structured-concurrency library. It lets you spawn any number of child tasks
into a group, collect their results as they finish, wait for all of them, or
cancel them all at once.

Child tasks are coroutines. A pool of worker threads polls them, so they run
concurrently and may finish in any order.

## Installation

```sh
pip install .
```

## Kinds of group

Both group classes take `num_threads` (default: the number of CPUs) and
`wait_at_drop` (default `True`). Both can be used with `async with`.

* `spawngroups.spawn_group.SpawnGroup`: child tasks return a value. The group
  is an async iterator over the results in the order they arrived.
* `spawngroups.discarding_spawn_group.DiscardingSpawnGroup`: child tasks
  return nothing of interest, and their return values are discarded.

Both groups have these members:

* `spawn_task(priority, coro)` starts a task unconditionally.
* `spawn_task_unless_cancelled(priority, coro)` starts it only if the group
  has not been cancelled. Otherwise the coroutine is closed unrun.
* `cancel_all()` cancels every running task and sets `is_cancelled`.
* `is_empty()` tells whether no task is still running.
* `dont_wait_at_drop()` makes `close()` cancel the remaining tasks instead of
  waiting for them.
* `close()` waits for the remaining tasks, or cancels them if
  `dont_wait_at_drop()` was called, and then stops the worker threads.
  Leaving the `async with` block calls it.

`SpawnGroup` also has these members:

* `await wait_for_all()` waits until every remaining task has finished. It
  blocks the calling thread while it waits.
* `await first()` takes the next result, or returns `None` when there are no
  more.
* `stream()` returns the underlying `spawngroups.async_stream.AsyncStream`.
* `await get_chunks(n)` takes `n` results. It is deprecated and emits a
  `DeprecationWarning`. It raises `ValueError` when more results are asked
  for than tasks were spawned.

A child task that raises has its traceback printed to standard error. It then
produces no result.

## Example

```python
import asyncio

from spawngroups.priority import Priority
from spawngroups.spawn_group import SpawnGroup


async def child(i):
    return i


async def main():
    async with SpawnGroup() as group:
        for i in range(11):
            group.spawn_task(Priority.default(), child(i))
        total = 0
        async for value in group:
            total += value
    print(total)  # 55


asyncio.run(main())
```

## Suspending inside child tasks

Child tasks are polled by the package's own executor, not by an asyncio event
loop. A child task may suspend only with the awaitables from
`spawngroups.executor`:

* `sleep(duration)` finishes no sooner than `duration` from now. The duration
  is in seconds or a `timedelta`. A negative duration raises `ValueError`.
* `yield_now()` suspends exactly once.

If a child task awaits anything else that suspends, such as `asyncio.sleep`,
it fails with `RuntimeError`.

`spawngroups.executor.block_on(awaitable)` runs an awaitable to completion on
the current thread, with the same restriction.

## Lower-level pieces

* `spawngroups.executor.Executor` polls spawned awaitables on a thread pool.
  Its methods are `spawn`, `cancel`, `wait_for_all` and `close`.
* `spawngroups.threadpool.ThreadPool` is a fixed-size pool of worker threads
  fed from a FIFO queue. Its methods are `submit`, `wait_for_all` and
  `close`, and it can be used with `with`.
* `spawngroups.runtime.RuntimeEngine` runs tasks and feeds their results into
  an `AsyncStream`.
* `spawngroups.priority.Priority` ranks tasks when they are waited for.
  `wait_for_all` waits for the higher priorities first. From lowest to
  highest the priorities are `BACKGROUND`, `LOW`, `UTILITY`, `MEDIUM`, `HIGH`
  and `USERINITIATED`. `Priority.default()` is `MEDIUM`.

## Not included

The package has no group whose tasks report success or failure as separate
values. A failing task in a `SpawnGroup` just produces no result.

It also has no helper functions that create a group and pass it to a body.
Create a group directly and use it with `async with`.