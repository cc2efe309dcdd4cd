"""Tests for the read-through cache and its refresh hook."""

from unittest.mock import AsyncMock, MagicMock

from oncall_override.rootly.cache import ReadThroughCache


class FakeTimer:
    """Controllable monotonic clock for TTL tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


async def test_fetch_loads_once_within_ttl():
    """Two fetches inside the TTL share one load."""
    timer = FakeTimer()
    loader = AsyncMock(return_value=["a"])
    cache = ReadThroughCache(loader, ttl=300, timer=timer)

    first = await cache.fetch("k")
    timer.now += 299
    second = await cache.fetch("k")

    assert first == second == ["a"]
    loader.assert_awaited_once_with("k")


async def test_fetch_reloads_after_ttl():
    """After the TTL the next fetch goes back to the loader."""
    timer = FakeTimer()
    loader = AsyncMock(side_effect=[["old"], ["new"]])
    cache = ReadThroughCache(loader, ttl=300, timer=timer)

    await cache.fetch("k")
    timer.now += 301
    result = await cache.fetch("k")

    assert result == ["new"]
    assert loader.await_count == 2


async def test_get_reports_freshness():
    """get distinguishes a fresh hit, a stale hit and a miss."""
    timer = FakeTimer()
    cache = ReadThroughCache(AsyncMock(return_value=1), ttl=60, timer=timer)

    assert cache.get("k") == (None, False)

    await cache.fetch("k")
    assert cache.get("k") == (1, True)

    timer.now += 61
    assert cache.get("k") == (1, False)


async def test_invalidate_forgets_everything():
    timer = FakeTimer()
    loader = AsyncMock(return_value=1)
    cache = ReadThroughCache(loader, ttl=60, timer=timer)

    await cache.fetch("k")
    cache.invalidate()

    assert cache.get("k") == (None, False)
    await cache.fetch("k")
    assert loader.await_count == 2


async def test_no_refresh_scheduled_when_not_warm():
    scheduler = MagicMock()
    cache = ReadThroughCache(AsyncMock(return_value=1), ttl=60, scheduler=scheduler)

    await cache.fetch("k")

    scheduler.assert_not_called()


async def test_warm_cache_schedules_refresh_after_ttl():
    """A load schedules a refresh shortly after the TTL; running it reloads and reschedules."""
    timer = FakeTimer()
    scheduler = MagicMock()
    loader = AsyncMock(side_effect=[["first"], ["second"]])
    cache = ReadThroughCache(
        loader, ttl=300, warm=True, refresh_delay=1.0, scheduler=scheduler, timer=timer
    )

    await cache.fetch("k")

    scheduler.assert_called_once()
    delay, job = scheduler.call_args.args
    assert delay == 301.0

    timer.now += 301
    await job()

    assert cache.get("k") == (["second"], True)
    assert scheduler.call_count == 2


async def test_warm_cache_does_not_double_schedule():
    """A miss while a refresh is pending does not queue a second one."""
    timer = FakeTimer()
    scheduler = MagicMock()
    cache = ReadThroughCache(
        AsyncMock(return_value=1), ttl=10, warm=True, scheduler=scheduler, timer=timer
    )

    await cache.fetch("k")
    timer.now += 10.5
    await cache.fetch("k")

    scheduler.assert_called_once()


async def test_refresh_failure_keeps_last_value():
    """A failed background refresh leaves the stale value available."""
    timer = FakeTimer()
    loader = AsyncMock(side_effect=[["kept"], RuntimeError("rootly down")])
    cache = ReadThroughCache(loader, ttl=60, timer=timer)

    await cache.fetch("k")
    timer.now += 61
    await cache.refresh("k")

    assert cache.get("k") == (["kept"], False)
