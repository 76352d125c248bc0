import threading
import time

from caras.services.query_cache import EVENTS_KEY, HERO_KEY, QueryCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_fresh_values_are_reused_until_ttl():
    clock = FakeClock()
    cache = QueryCache(ttl_seconds=30, clock=clock)
    calls = []

    def fetch():
        calls.append(1)
        return len(calls)

    assert cache.get_or_fetch(HERO_KEY, fetch) == 1
    clock.now = 29
    assert cache.get_or_fetch(HERO_KEY, fetch) == 1
    clock.now = 31
    assert cache.get_or_fetch(HERO_KEY, fetch) == 2
    assert cache.fetch_count == 2


def test_invalidate_drops_every_key_under_a_prefix():
    cache = QueryCache()
    cache.get_or_fetch(EVENTS_KEY + ("public",), lambda: "public")
    cache.get_or_fetch(EVENTS_KEY + ("narrative", 1), lambda: "one")
    cache.get_or_fetch(HERO_KEY, lambda: "hero")

    assert cache.invalidate(EVENTS_KEY) == 2
    assert cache.peek(EVENTS_KEY + ("public",)) is None
    assert cache.peek(HERO_KEY) == "hero"


def test_concurrent_callers_share_one_fetch():
    cache = QueryCache()
    started = threading.Event()
    release = threading.Event()

    def slow_fetch():
        started.set()
        release.wait(5)
        return "events"

    results = []

    def worker():
        results.append(cache.get_or_fetch(EVENTS_KEY, slow_fetch))

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()
    started.wait(5)
    time.sleep(0.05)
    release.set()
    for t in threads:
        t.join(5)

    assert results == ["events"] * 5
    assert cache.fetch_count == 1


def test_fetch_that_straddles_an_invalidation_is_not_stored():
    cache = QueryCache()

    def fetch_then_mutation_lands():
        # a write commits and invalidates while this read is in flight
        cache.invalidate(HERO_KEY)
        return "stale"

    assert cache.get_or_fetch(HERO_KEY, fetch_then_mutation_lands) == "stale"
    assert cache.peek(HERO_KEY) is None
    assert cache.get_or_fetch(HERO_KEY, lambda: "fresh") == "fresh"
    assert cache.peek(HERO_KEY) == "fresh"


def test_failed_fetch_caches_nothing():
    cache = QueryCache()

    def boom():
        raise RuntimeError("db down")

    try:
        cache.get_or_fetch(HERO_KEY, boom)
    except RuntimeError:
        pass
    assert cache.peek(HERO_KEY) is None
    assert cache.get_or_fetch(HERO_KEY, lambda: "ok") == "ok"


def test_missing_rows_are_not_cached():
    cache = QueryCache()
    assert cache.get_or_fetch(EVENTS_KEY + ("narrative", 404), lambda: None) is None
    assert cache.get_or_fetch(EVENTS_KEY + ("narrative", 404), lambda: None) is None
    assert cache.fetch_count == 2
    assert len(cache) == 0


def test_expired_entries_are_swept_when_storing():
    clock = FakeClock()
    cache = QueryCache(ttl_seconds=30, clock=clock)
    for i in range(10):
        cache.get_or_fetch(EVENTS_KEY + ("narrative", i), lambda: "event")
    assert len(cache) == 10

    clock.now = 31
    cache.get_or_fetch(HERO_KEY, lambda: "hero")
    assert len(cache) == 1


def test_key_locks_are_released_after_each_fetch():
    cache = QueryCache()
    for i in range(20):
        cache.get_or_fetch(EVENTS_KEY + ("narrative", i), lambda: None)
    try:
        cache.get_or_fetch(HERO_KEY, lambda: 1 / 0)
    except ZeroDivisionError:
        pass
    assert cache._key_locks == {}
