from __future__ import annotations

import asyncio

import pytest

from uitempo.throttle import BatchThrottlePolicy, SampleBatchThrottle


def run_async(coro):
    return asyncio.run(coro)


def test_policy_rejects_empty_batches():
    with pytest.raises(ValueError, match="batch_size"):
        BatchThrottlePolicy(batch_size=0)
    with pytest.raises(ValueError, match="max_samples"):
        BatchThrottlePolicy(max_samples=0)


def test_full_batch_flushes_and_ring_keeps_newest_samples():
    async def scenario() -> None:
        waveform = SampleBatchThrottle(
            policy=BatchThrottlePolicy(interval_ms=1000, batch_size=3, max_samples=5)
        )
        batches: list[list[float]] = []
        waveform.subscribe(batches.append)

        waveform.append(1.0)
        assert waveform.samples == [1.0]

        waveform.append(2.0)
        waveform.append(3.0)
        assert waveform.samples == [1.0]
        assert waveform.buffered_count == 2
        assert waveform.has_scheduled_flush

        waveform.append(4.0)
        assert waveform.samples == [1.0, 2.0, 3.0, 4.0]
        assert waveform.buffered_count == 0
        assert not waveform.has_scheduled_flush

        waveform.extend([5.0, 6.0, 7.0])
        assert waveform.samples == [3.0, 4.0, 5.0, 6.0, 7.0]
        assert len(batches) == 3

    run_async(scenario())


def test_partial_batch_flushes_after_interval():
    async def scenario() -> None:
        waveform = SampleBatchThrottle(
            policy=BatchThrottlePolicy(interval_ms=40, batch_size=10, max_samples=50)
        )
        waveform.append(0.1)
        waveform.append(0.2)
        waveform.append(0.3)
        assert waveform.samples == [0.1]

        await asyncio.sleep(0.08)
        assert waveform.samples == [0.1, 0.2, 0.3]
        assert waveform.buffered_count == 0

    run_async(scenario())


def test_extend_with_nothing_does_not_schedule():
    async def scenario() -> None:
        waveform = SampleBatchThrottle(policy=BatchThrottlePolicy(interval_ms=40))
        waveform.extend([])
        assert not waveform.has_scheduled_flush
        assert waveform.delivery_count == 0

    run_async(scenario())


def test_reset_is_idempotent():
    async def scenario() -> None:
        waveform = SampleBatchThrottle(
            policy=BatchThrottlePolicy(interval_ms=1000, batch_size=2, max_samples=10)
        )
        batches: list[list[float]] = []
        waveform.subscribe(batches.append)
        waveform.extend([0.5, 0.6])
        waveform.append(0.7)

        waveform.reset()
        waveform.reset()

        assert waveform.samples == []
        assert waveform.buffered_count == 0
        assert not waveform.has_scheduled_flush
        assert batches == [[0.5, 0.6], []]

    run_async(scenario())
