import asyncio
from datetime import datetime, timedelta

from netkan.download.text_cache import ExpiringTextCache
from netkan.download.tracker import RequestTracker


class Clock:
    def __init__(self):
        self.now = datetime(2024, 6, 1, 8, 30)

    def __call__(self):
        return self.now


def test_entries_expire_lazily():
    clock = Clock()
    cache = ExpiringTextCache(clock=clock)
    cache.put("https://a", "value")

    clock.now += timedelta(minutes=1, seconds=59)
    assert cache.get("https://a") == "value"

    clock.now += timedelta(seconds=1)
    assert "https://a" in cache
    assert cache.get("https://a") is None
    assert "https://a" not in cache


def test_get_or_fetch_collapses_repeated_requests():
    clock = Clock()
    cache = ExpiringTextCache(clock=clock)
    calls = []

    async def producer():
        calls.append(clock.now)
        return "body"

    async def run():
        return await asyncio.gather(
            *(cache.get_or_fetch("https://a", producer) for _ in range(5))
        )

    assert asyncio.run(run()) == ["body"] * 5
    assert len(calls) == 1


def test_get_or_fetch_refetches_after_lifetime():
    clock = Clock()
    cache = ExpiringTextCache(lifetime=timedelta(seconds=10), clock=clock)
    values = iter(["first", "second"])

    async def producer():
        return next(values)

    assert asyncio.run(cache.get_or_fetch("https://a", producer)) == "first"
    clock.now += timedelta(seconds=10)
    assert asyncio.run(cache.get_or_fetch("https://a", producer)) == "second"
    assert len(cache) == 1


def test_empty_string_is_cached():
    cache = ExpiringTextCache()
    calls = []

    async def producer():
        calls.append(1)
        return ""

    asyncio.run(cache.get_or_fetch("https://a", producer))
    asyncio.run(cache.get_or_fetch("https://a", producer))
    assert calls == [1]


def test_clear():
    cache = ExpiringTextCache()
    cache.put("https://a", "a")
    cache.clear()
    assert len(cache) == 0


def test_tracker_add():
    tracker = RequestTracker()
    tracker.add("https://a")
    tracker.add("https://b")
    tracker.add("https://a")
    assert tracker.urls == ("https://a", "https://b")
    assert "https://a" in tracker
    assert len(tracker) == 2


def test_tracker_clear():
    tracker = RequestTracker()
    tracker.clear()
    tracker.add("https://a")
    tracker.clear()
    assert tracker.urls == ()
    assert "https://a" not in tracker


def test_different_urls_fetch_concurrently():
    cache = ExpiringTextCache()

    async def run():
        b_started = asyncio.Event()

        async def slow_a():
            await asyncio.wait_for(b_started.wait(), timeout=1)
            return "a"

        async def fast_b():
            b_started.set()
            return "b"

        return await asyncio.gather(
            cache.get_or_fetch("https://a", slow_a),
            cache.get_or_fetch("https://b", fast_b),
        )

    assert asyncio.run(run()) == ["a", "b"]


def test_locks_do_not_outlive_requests():
    cache = ExpiringTextCache()

    async def producer():
        return "body"

    asyncio.run(cache.get_or_fetch("https://a", producer))
    asyncio.run(cache.get_or_fetch("https://b", producer))
    assert cache._locks == {}
