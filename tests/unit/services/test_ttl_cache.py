from src.app.services.cache import TTLCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_value_expires_after_ttl():
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=30, clock=clock)

    cache.set("slug:acme", "tenant")
    clock.now += 29.9
    assert cache.get("slug:acme") == "tenant"

    clock.now += 0.1
    assert cache.get("slug:acme") is None
    # Expired entries are evicted on read
    assert len(cache) == 0


def test_per_entry_ttl_overrides_default():
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=30, clock=clock)

    cache.set("short", 1, ttl=1)
    cache.set("long", 2)
    clock.now += 5

    assert cache.get("short") is None
    assert cache.get("long") == 2


def test_zero_ttl_disables_cache():
    cache = TTLCache(ttl_seconds=0)

    cache.set("key", "value")

    assert not cache.enabled
    assert cache.get("key") is None


def test_delete_and_clear():
    cache = TTLCache()
    cache.set("a", 1)
    cache.set("b", 2)

    cache.delete("a")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.clear()
    assert len(cache) == 0


def test_full_cache_sweeps_expired_entries_first():
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=30, clock=clock, max_entries=3)
    cache.set("old", 1, ttl=1)
    cache.set("a", 2)
    cache.set("b", 3)
    clock.now += 5

    cache.set("c", 4)

    assert len(cache) == 3
    assert cache.get("a") == 2
    assert cache.get("c") == 4


def test_full_cache_drops_oldest_writes():
    cache = TTLCache(ttl_seconds=30, max_entries=100)

    for i in range(1000):
        cache.set(f"host:{i}", i)

    assert len(cache) == 100
    assert cache.get("host:0") is None
    assert cache.get("host:999") == 999
