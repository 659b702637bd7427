import threading
import time
from concurrent.futures import CancelledError
from datetime import timedelta

import pytest

from spawngroups.executor import Executor, block_on, sleep, yield_now


@pytest.fixture
def executor():
    ex = Executor(2)
    yield ex
    ex.close()


def test_block_on_returns_value():
    async def one():
        return 1

    assert block_on(one()) == 1


def test_block_on_with_yield_now():
    async def body():
        await yield_now()
        await yield_now()
        return "finished"

    assert block_on(body()) == "finished"


def test_sleep_waits_at_least_duration():
    async def body():
        await sleep(0.05)
        return "slept"

    start = time.monotonic()
    result = block_on(body())
    assert result == "slept"
    assert time.monotonic() - start >= 0.05


def test_sleep_accepts_timedelta():
    async def body():
        await sleep(timedelta(milliseconds=30))
        return "slept"

    start = time.monotonic()
    result = block_on(body())
    assert result == "slept"
    assert time.monotonic() - start >= 0.03


def test_negative_sleep_rejected():
    with pytest.raises(ValueError):
        sleep(-1)


def test_block_on_propagates_exception():
    async def body():
        await yield_now()
        raise KeyError("missing")

    with pytest.raises(KeyError):
        block_on(body())


def test_block_on_rejects_non_awaitable():
    with pytest.raises(TypeError):
        block_on(5)


def test_block_on_rejects_foreign_suspension():
    class Foreign:
        def __await__(self):
            yield "not-none"

    async def body():
        await Foreign()

    with pytest.raises(RuntimeError):
        block_on(body())


@pytest.mark.asyncio
async def test_sleep_and_yield_work_under_asyncio():
    yielded = await yield_now()
    assert yielded is None

    start = time.monotonic()
    slept = await sleep(0.02)
    elapsed = time.monotonic() - start
    assert slept is None
    assert elapsed >= 0.02


def test_spawned_task_result(executor):
    async def double(x):
        await yield_now()
        return x * 2

    task = executor.spawn(double(21))
    assert task.result(timeout=5) == 42


def test_wait_for_all_finishes_every_task(executor):
    async def work(i):
        await sleep(0.01)
        return i

    tasks = [executor.spawn(work(i)) for i in range(10)]
    executor.wait_for_all()
    assert all(t.done() for t in tasks)
    assert sorted(t.result() for t in tasks) == list(range(10))


def test_tasks_interleave_on_single_thread():
    ex = Executor(1)
    events = []

    async def worker(name):
        events.append(f"{name}0")
        await yield_now()
        events.append(f"{name}1")
        return name

    try:
        tasks = [ex.spawn(worker("a")), ex.spawn(worker("b"))]
        ex.wait_for_all()
        results = [t.result(timeout=5) for t in tasks]
    finally:
        ex.close()
    assert results == ["a", "b"]
    assert events == ["a0", "b0", "a1", "b1"]


def test_tasks_run_off_the_calling_thread(executor):
    async def whoami():
        return threading.current_thread().name

    name = executor.spawn(whoami()).result(timeout=5)
    assert name != threading.current_thread().name
    assert name.startswith("ThreadPool #")


def test_cancel_stops_running_tasks(executor):
    async def forever():
        while True:
            await yield_now()

    task = executor.spawn(forever())
    executor.cancel()
    executor.wait_for_all()
    assert task.cancelled()
    with pytest.raises(CancelledError):
        task.result(timeout=5)


def test_spawn_after_cancel_still_runs(executor):
    async def forever():
        while True:
            await yield_now()

    async def answer():
        return "ok"

    executor.spawn(forever())
    executor.cancel()
    assert executor.spawn(answer()).result(timeout=5) == "ok"


def test_task_exception_is_reraised(executor):
    async def fail():
        await yield_now()
        raise ValueError("bad")

    task = executor.spawn(fail())
    with pytest.raises(ValueError):
        task.result(timeout=5)


def test_spawn_after_close_raises():
    ex = Executor(1)
    ex.close()

    async def nothing():
        return None

    with pytest.raises(RuntimeError):
        ex.spawn(nothing())


def test_spawn_rejects_non_awaitable(executor):
    with pytest.raises(TypeError):
        executor.spawn(object())


def test_result_timeout(executor):
    async def slow():
        await sleep(1)

    task = executor.spawn(slow())
    with pytest.raises(TimeoutError):
        task.result(timeout=0.01)
    executor.cancel()
    assert task.wait(timeout=5)