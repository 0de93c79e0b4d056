"""Tests for coalescing concurrent requests per key."""
import asyncio

import pytest

from app.core.agents.quiz.deduplicator import InFlightRequestDeduplicator


@pytest.mark.asyncio
async def test_concurrent_calls_share_one_computation() -> None:
    dedup = InFlightRequestDeduplicator()
    gate = asyncio.Event()
    calls = 0

    async def work():
        nonlocal calls
        calls += 1
        await gate.wait()
        return calls

    first = asyncio.ensure_future(dedup.run("book-1", work))
    second = asyncio.ensure_future(dedup.run("book-1", work))
    await asyncio.sleep(0)

    assert dedup.is_pending("book-1")
    gate.set()

    assert await first == 1
    assert await second == 1
    assert calls == 1
    assert not dedup.is_pending("book-1")
    assert len(dedup) == 0

    assert await dedup.run("book-1", work) == 2
    assert calls == 2


@pytest.mark.asyncio
async def test_failure_is_shared_and_released() -> None:
    dedup = InFlightRequestDeduplicator()
    gate = asyncio.Event()
    calls = 0

    async def failing():
        nonlocal calls
        calls += 1
        await gate.wait()
        raise ValueError("provider down")

    first = asyncio.ensure_future(dedup.run(7, failing))
    second = asyncio.ensure_future(dedup.run(7, failing))
    await asyncio.sleep(0)
    gate.set()

    results = await asyncio.gather(first, second, return_exceptions=True)

    assert calls == 1
    assert all(isinstance(r, ValueError) for r in results)
    assert not dedup.is_pending(7)


@pytest.mark.asyncio
async def test_different_keys_run_independently() -> None:
    dedup = InFlightRequestDeduplicator()
    started = []

    async def work(key):
        started.append(key)
        await asyncio.sleep(0)
        return key

    results = await asyncio.gather(
        dedup.run(1, lambda: work(1)),
        dedup.run(2, lambda: work(2)),
    )

    assert results == [1, 2]
    assert sorted(started) == [1, 2]


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_shared_work() -> None:
    dedup = InFlightRequestDeduplicator()
    gate = asyncio.Event()

    async def work():
        await gate.wait()
        return "done"

    first = asyncio.ensure_future(dedup.run("k", work))
    second = asyncio.ensure_future(dedup.run("k", work))
    await asyncio.sleep(0)

    first.cancel()
    gate.set()

    assert await second == "done"
    assert first.cancelled()
