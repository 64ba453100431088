from __future__ import annotations

import asyncio

import pytest

from uitempo.concurrency import AsyncSemaphore, with_semaphore


def run_async(coro):
    return asyncio.run(coro)


def test_negative_initial_value_is_rejected():
    with pytest.raises(ValueError, match=">= 0"):
        AsyncSemaphore(-1)


def test_try_wait_and_signal_conserve_permits():
    sem = AsyncSemaphore(2)
    outstanding = 0

    for _ in range(3):
        if sem.try_wait():
            outstanding += 1
        assert sem.available_permits + outstanding == 2

    assert outstanding == 2
    assert sem.try_wait() is False

    sem.signal()
    outstanding -= 1
    assert sem.available_permits + outstanding == 2
    assert sem.available_permits == 1


def test_waiters_resume_in_fifo_order():
    async def scenario() -> None:
        sem = AsyncSemaphore(0)
        order: list[int] = []

        async def worker(index: int) -> None:
            await sem.wait()
            order.append(index)

        tasks = [asyncio.create_task(worker(i)) for i in range(4)]
        await asyncio.sleep(0)
        assert sem.waiting_count == 4

        for expected in range(4):
            sem.signal()
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            assert order == list(range(expected + 1))

        await asyncio.gather(*tasks)
        assert sem.available_permits == 0
        assert sem.waiting_count == 0

    run_async(scenario())


def test_signal_hands_permit_to_waiter_instead_of_counter():
    async def scenario() -> None:
        sem = AsyncSemaphore(0)
        waiter = asyncio.create_task(sem.wait())
        await asyncio.sleep(0)

        sem.signal()
        # The permit belongs to the queued waiter, not to a late try_wait().
        assert sem.try_wait() is False
        await waiter
        assert sem.available_permits == 0

    run_async(scenario())


def test_wait_for_returns_false_on_timeout_without_leaking_a_waiter():
    async def scenario() -> None:
        sem = AsyncSemaphore(0)
        acquired = await sem.wait_for(0.05)
        assert acquired is False
        assert sem.waiting_count == 0

        sem.signal()
        assert sem.available_permits == 1

    run_async(scenario())


def test_wait_for_acquires_when_signalled_in_time():
    async def scenario() -> None:
        sem = AsyncSemaphore(0)
        asyncio.get_running_loop().call_later(0.01, sem.signal)
        assert await sem.wait_for(1.0) is True
        assert sem.available_permits == 0

    run_async(scenario())


def test_cancelled_waiter_returns_a_permit_it_was_already_handed():
    async def scenario() -> None:
        sem = AsyncSemaphore(0)
        waiter = asyncio.create_task(sem.wait())
        await asyncio.sleep(0)

        sem.signal()
        waiter.cancel()
        await asyncio.gather(waiter, return_exceptions=True)

        assert waiter.cancelled()
        assert sem.available_permits == 1

    run_async(scenario())


def test_cancelled_waiter_is_skipped_by_signal():
    async def scenario() -> None:
        sem = AsyncSemaphore(0)
        first = asyncio.create_task(sem.wait())
        second = asyncio.create_task(sem.wait())
        await asyncio.sleep(0)

        first.cancel()
        await asyncio.gather(first, return_exceptions=True)
        sem.signal()
        await second

        assert sem.available_permits == 0
        assert sem.waiting_count == 0

    run_async(scenario())


def test_with_semaphore_bounds_concurrency():
    async def scenario() -> None:
        sem = AsyncSemaphore(2)
        running = 0
        peak = 0

        async def job() -> int:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return 1

        results = await asyncio.gather(*(with_semaphore(sem, job) for _ in range(6)))

        assert sum(results) == 6
        assert peak == 2
        assert sem.available_permits == 2

    run_async(scenario())


@pytest.mark.asyncio
async def test_async_context_manager_releases_on_error():
    sem = AsyncSemaphore(1)
    with pytest.raises(RuntimeError):
        async with sem:
            assert sem.available_permits == 0
            raise RuntimeError("boom")
    assert sem.available_permits == 1
